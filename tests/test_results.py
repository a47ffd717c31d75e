from __future__ import annotations

import pytest

from dbprobe.results import (
    ResultCursor,
    format_column_metadata,
    print_row,
    scan_all,
    truncate_value,
)
from dbprobe.types import ColumnInfo


class ListStatement:
    def __init__(self, description, rows):
        self.description = description
        self._rows = list(rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None


def _describe(type_code):
    return (None, None) if type_code is None else ("TEXT", "builtins.str")


def test_truncate_long_value():
    assert truncate_value("abcdefghij", 4) == "abcd"


def test_short_value_untouched():
    assert truncate_value(12, 50) == "12"


def test_none_renders_as_null_literal():
    assert truncate_value(None, 50) == "null"
    assert truncate_value(None, 2) == "nu"


def test_negative_width_rejected():
    with pytest.raises(ValueError):
        truncate_value("abc", -1)


def test_columns_built_from_description():
    description = [
        ("id", "INTEGER", 11, None, None, 0, False),
        ("name", None, None, None, None, None, True),
    ]
    cursor = ResultCursor(ListStatement(description, []), _describe)

    columns = cursor.columns()

    assert [c.number for c in columns] == [1, 2]
    assert columns[0] == ColumnInfo(
        number=1,
        name="id",
        label="id",
        type_code="INTEGER",
        type_name="TEXT",
        class_name="builtins.str",
        display_size=11,
        scale=0,
    )
    assert columns[1].type_name is None
    assert cursor.columns() is columns


def test_closed_cursor_refuses_reads():
    cursor = ResultCursor(ListStatement([("a",)], [(1,)]), _describe)
    cursor.close()
    with pytest.raises(RuntimeError):
        cursor.next()


def test_scan_all_counts_rows(capsys):
    cursor = ResultCursor(ListStatement([("a",), ("b",)], [(1, 2), (3, 4), (5, 6)]), _describe)

    result = scan_all(cursor, 2)

    assert result.row_count == 3
    assert result.has_rows is True
    assert capsys.readouterr().out == ""


def test_scan_all_reports_empty(capsys):
    cursor = ResultCursor(ListStatement([("a",)], []), _describe)

    result = scan_all(cursor, 1)

    assert result.has_rows is False
    assert capsys.readouterr().out == "No rows!\n"


def test_print_row(capsys):
    columns = [ColumnInfo(number=1, name="a", label="a"), ColumnInfo(number=2, name="b", label="b")]

    print_row(("hello world", None), columns, 5)

    assert capsys.readouterr().out == "Column Name: a / Value: hello\nColumn Name: b / Value: null\n"


def test_column_metadata_block():
    column = ColumnInfo(
        number=2,
        name="total",
        label="total",
        type_code=3,
        type_name="NUMERIC",
        class_name=None,
        display_size=12,
        scale=2,
    )

    block = format_column_metadata(column)

    assert block.splitlines() == [
        "    Column Number: 2",
        "    Name: total",
        "    Label: total",
        "    Type Number: 3",
        "    Type Class: null",
        "    Type Name: NUMERIC",
        "    Display Size: 12",
        "    Scale: 2",
        "    --------",
    ]
