from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ColumnInfo:
    number: int
    name: str
    label: str
    type_code: Any = None
    type_name: Optional[str] = None
    class_name: Optional[str] = None
    display_size: Optional[int] = None
    scale: Optional[int] = None


@dataclass
class DatabaseInfo:
    driver_name: str
    driver_version: str
    api_major: int
    api_minor: int
    product_name: str
    product_version: str


@dataclass
class PhaseMarkers:
    start: float = 0.0
    post_connect: float = 0.0
    post_enhance: float = 0.0
    post_connection_metadata: float = 0.0
    post_metadata_output: float = 0.0
    post_statement_create: float = 0.0
    post_statement_enhance: float = 0.0
    post_execute: float = 0.0
    post_rsmd: float = 0.0
    post_iterate: float = 0.0
    post_unenhance: float = 0.0
    complete: float = 0.0


@dataclass
class ScanResult:
    column_count: int = 0
    row_count: int = 0
    has_rows: bool = False
    rss_mb: Optional[float] = None
