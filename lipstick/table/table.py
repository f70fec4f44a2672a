# lipstick/table/table.py
"""Plain-text ASCII tables for command output.

Rendering is delegated to tabulate with a border-only format: rules above
and below the header and below the last row, no padding inside cells and
every value treated as left-aligned text.

Example:
    >>> print(render(["name", "score"], [["alice", "10"], ["bob", "7"]]))
    +-----+-----+
    |name |score|
    +-----+-----+
    |alice|10   |
    |bob  |7    |
    +-----+-----+
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from tabulate import DataRow, Line, TableFormat, tabulate

_RULE = Line("+", "-", "+", "+")
_ROW = DataRow("|", "|", "|")

# The header goes through tabulate as an ordinary row: tabulate widens real
# header columns by two spaces, so the rule below it is inserted by render().
ASCII_FORMAT = TableFormat(
    lineabove=_RULE,
    linebelowheader=None,
    linebetweenrows=None,
    linebelow=_RULE,
    headerrow=_ROW,
    datarow=_ROW,
    padding=0,
    with_header_hide=None,
)

T = TypeVar("T")


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def render(headers: Sequence[Any], data: Iterable[Sequence[Any]]) -> str:
    """Render headers and rows as an ASCII table.

    Short rows are padded with empty cells. When a row is wider than the
    headers, empty headers are added on the right. A table with headers but
    no rows is closed directly below the header.

    Args:
        headers: Column headings.
        data: Rows of cell values; values are converted with str().

    Returns:
        The table without a trailing newline, or "" when there is nothing
        to render.
    """
    header_cells = [_cell(h) for h in headers]
    rows = [[_cell(v) for v in row] for row in data]

    width = max([len(header_cells), *(len(row) for row in rows)])
    if width == 0:
        return ""

    header_cells += [""] * (width - len(header_cells))
    rows = [row + [""] * (width - len(row)) for row in rows]

    lines = tabulate(
        [header_cells, *rows],
        tablefmt=ASCII_FORMAT,
        disable_numparse=True,
        stralign="left",
    ).split("\n")
    if rows:
        # lines[0] is the top rule, lines[1] the header
        lines.insert(2, lines[0])
    return "\n".join(lines)


@dataclass(frozen=True)
class Table:
    """Immutable table builder.

    Every with_* method returns a new Table, so a partially built table can
    be shared and extended safely.
    """

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    def with_headers(self, *headers: Any) -> "Table":
        return replace(self, headers=tuple(_cell(h) for h in headers))

    def with_rows(self, *rows: Sequence[Any]) -> "Table":
        return replace(self, rows=tuple(tuple(_cell(v) for v in row) for row in rows))

    def add_row(self, *values: Any) -> "Table":
        return replace(self, rows=(*self.rows, tuple(_cell(v) for v in values)))

    def render(self) -> str:
        return render(self.headers, self.rows)

    def __str__(self) -> str:
        return self.render()


def new() -> Table:
    """Create an empty Table."""
    return Table()


@dataclass
class Column(Generic[T]):
    """A table column: its heading and how to read its value from a record."""

    header: str
    value: Callable[[T], Any]


class Data(Generic[T]):
    """Typed records rendered through per-column accessors.

    Example:
        >>> data = Data(
        ...     columns=[Column("name", lambda u: u.name), Column("id", lambda u: u.id)],
        ...     records=users,
        ... )
        >>> data.at(0, 1)
        '1234'
    """

    def __init__(
        self, columns: Sequence[Column[T]] = (), records: Iterable[T] = ()
    ) -> None:
        self._columns = list(columns)
        self.records = list(records)

    def headers(self) -> list[str]:
        return [column.header for column in self._columns]

    def rows(self) -> int:
        return len(self.records)

    def columns(self) -> int:
        return len(self._columns)

    def at(self, row: int, col: int) -> str:
        """Return the cell at (row, col) as text.

        Raises:
            IndexError: If row or col is out of range.
        """
        return _cell(self._columns[col].value(self.records[row]))

    def append(self, record: T) -> None:
        self.records.append(record)

    def render(self) -> str:
        cells = [
            [self.at(row, col) for col in range(self.columns())]
            for row in range(self.rows())
        ]
        return render(self.headers(), cells)
