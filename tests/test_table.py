# tests/test_table.py
"""Tests for ASCII table rendering."""

from dataclasses import dataclass

import pytest

from lipstick.table import Column, Data, Table, new, render


@dataclass
class Player:
    name: str
    score: int | None


class TestRender:
    """Tests for the render function."""

    def test_table(self):
        tbl = render(
            ["heading 1", "heading 2", "heading 3"],
            [
                ["a", "b", "c"],
                ["d", "e", "f"],
            ],
        )
        expected = (
            "+---------+---------+---------+\n"
            "|heading 1|heading 2|heading 3|\n"
            "+---------+---------+---------+\n"
            "|a        |b        |c        |\n"
            "|d        |e        |f        |\n"
            "+---------+---------+---------+"
        )
        assert tbl == expected

    def test_wide_cell_sets_column_width(self):
        tbl = render(["id"], [["a long value"]])
        assert tbl.splitlines() == [
            "+------------+",
            "|id          |",
            "+------------+",
            "|a long value|",
            "+------------+",
        ]

    def test_numbers_are_left_aligned_text(self):
        tbl = render(["n"], [[1], [22], ["1.50"]])
        assert tbl.splitlines()[3:6] == ["|1   |", "|22  |", "|1.50|"]

    def test_short_rows_are_padded(self):
        tbl = render(["id", "name"], [["1"]])
        assert tbl.splitlines() == [
            "+--+----+",
            "|id|name|",
            "+--+----+",
            "|1 |    |",
            "+--+----+",
        ]

    def test_wide_rows_get_empty_headers(self):
        tbl = render(["a"], [["1", "2"]])
        assert tbl.splitlines() == [
            "+-+-+",
            "|a| |",
            "+-+-+",
            "|1|2|",
            "+-+-+",
        ]

    def test_none_renders_as_empty_cell(self):
        tbl = render(["name", "score"], [["alice", None]])
        assert tbl.splitlines()[3] == "|alice|     |"

    def test_headers_without_rows(self):
        assert render(["a", "b"], []) == "+-+-+\n|a|b|\n+-+-+"

    def test_empty_table(self):
        assert render([], []) == ""

    def test_all_lines_have_equal_width(self):
        tbl = render(["x", "y"], [["short", "a much longer cell"], ["", "z"]])
        widths = {len(line) for line in tbl.splitlines()}
        assert len(widths) == 1


class TestTableBuilder:
    """Tests for the immutable Table builder."""

    def test_builder_matches_render(self):
        tbl = new().with_headers("heading 1", "heading 2").with_rows(["a", "b"], ["c", "d"])
        assert str(tbl) == render(["heading 1", "heading 2"], [["a", "b"], ["c", "d"]])

    def test_builder_is_immutable(self):
        base = Table().with_headers("name")
        extended = base.add_row("alice")

        assert base.rows == ()
        assert extended.rows == (("alice",),)
        assert extended.headers == ("name",)

    def test_values_converted_to_text(self):
        tbl = Table().with_headers("n", 2).add_row(1, None)
        assert tbl.headers == ("n", "2")
        assert tbl.rows == (("1", ""),)


class TestData:
    """Tests for typed record tables."""

    @pytest.fixture
    def data(self) -> Data[Player]:
        return Data(
            columns=[
                Column("name", lambda p: p.name),
                Column("score", lambda p: p.score),
            ],
            records=[Player("alice", 10), Player("bob", None)],
        )

    def test_dimensions(self, data):
        assert data.headers() == ["name", "score"]
        assert data.rows() == 2
        assert data.columns() == 2

    def test_at(self, data):
        assert data.at(0, 0) == "alice"
        assert data.at(0, 1) == "10"
        assert data.at(1, 1) == ""

    def test_at_out_of_range(self, data):
        with pytest.raises(IndexError):
            data.at(5, 0)

    def test_append(self, data):
        data.append(Player("carol", 3))
        assert data.rows() == 3
        assert data.at(2, 0) == "carol"

    def test_render(self, data):
        assert data.render() == render(
            ["name", "score"], [["alice", "10"], ["bob", ""]]
        )
