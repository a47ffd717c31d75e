from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

from dbprobe.types import ColumnInfo, ScanResult

TypeDescriber = Callable[[Any], Tuple[Optional[str], Optional[str]]]


def _text(value: Any) -> str:
    return "null" if value is None else str(value)


class ResultCursor:
    """Forward-only, single-pass view over an executed statement."""

    def __init__(self, statement: Any, describe_type: TypeDescriber):
        self._statement = statement
        self._describe_type = describe_type
        self._columns: Optional[List[ColumnInfo]] = None
        self._closed = False

    def next(self) -> Optional[Sequence[Any]]:
        if self._closed:
            raise RuntimeError("result cursor is closed")
        return self._statement.fetchone()

    def columns(self) -> List[ColumnInfo]:
        if self._columns is None:
            self._columns = []
            for idx, entry in enumerate(self._statement.description or [], start=1):
                name = entry[0]
                type_code = entry[1] if len(entry) > 1 else None
                type_name, class_name = self._describe_type(type_code)
                self._columns.append(
                    ColumnInfo(
                        number=idx,
                        name=name,
                        label=name,
                        type_code=type_code,
                        type_name=type_name,
                        class_name=class_name,
                        display_size=entry[2] if len(entry) > 2 else None,
                        scale=entry[5] if len(entry) > 5 else None,
                    )
                )
        return self._columns

    def close(self) -> None:
        self._closed = True
        self._statement = None


def format_column_metadata(column: ColumnInfo) -> str:
    separator = "\n    "
    fields = [
        f"    Column Number: {column.number}",
        f"Name: {_text(column.name)}",
        f"Label: {_text(column.label)}",
        f"Type Number: {_text(column.type_code)}",
        f"Type Class: {_text(column.class_name)}",
        f"Type Name: {_text(column.type_name)}",
        f"Display Size: {_text(column.display_size)}",
        f"Scale: {_text(column.scale)}",
        "--------\n",
    ]
    return separator.join(fields)


def print_column_metadata(columns: List[ColumnInfo]) -> None:
    print(" *** Display ResultSet Metadata ***")
    for column in columns:
        print(format_column_metadata(column))


def scan_all(cursor: ResultCursor, column_count: int) -> ScanResult:
    """Read every column of every row once, discarding the values."""
    result = ScanResult(column_count=column_count)
    while True:
        row = cursor.next()
        if row is None:
            break
        result.has_rows = True
        result.row_count += 1
        for idx in range(column_count):
            row[idx]
    if not result.has_rows:
        print("No rows!")
    return result


def truncate_value(value: Any, max_width: int) -> str:
    text = _text(value)
    if len(text) > max_width:
        if max_width < 0:
            raise ValueError(f"invalid display width: {max_width}")
        text = text[:max_width]
    return text


def print_row(row: Sequence[Any], columns: List[ColumnInfo], max_width: int) -> None:
    for column in columns:
        value = truncate_value(row[column.number - 1], max_width)
        print(f"Column Name: {column.name} / Value: {value}")
