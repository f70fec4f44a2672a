"""Plain-text ASCII table rendering for command output."""

from lipstick.table.table import ASCII_FORMAT, Column, Data, Table, new, render

__all__ = [
    "ASCII_FORMAT",
    "Column",
    "Data",
    "Table",
    "new",
    "render",
]
