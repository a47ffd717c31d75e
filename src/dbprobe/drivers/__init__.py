from __future__ import annotations

from typing import Dict, List, Type

from dbprobe.drivers.base import BaseDriver
from dbprobe.drivers.duckdb import DuckDBDriver
from dbprobe.drivers.odbc import OdbcDriver
from dbprobe.drivers.postgres import PostgresDriver
from dbprobe.drivers.sqlite import SqliteDriver

_DRIVERS: Dict[str, Type[BaseDriver]] = {}


def register_driver(driver_cls: Type[BaseDriver], *aliases: str) -> None:
    for name in (driver_cls.kind, *aliases):
        _DRIVERS[name.lower()] = driver_cls


def get_driver(kind: str) -> BaseDriver:
    driver_cls = _DRIVERS.get(kind.strip().lower())
    if driver_cls is None:
        raise ValueError(f"Unsupported driver: {kind}")
    return driver_cls()


def available_drivers() -> List[str]:
    return sorted({driver_cls.kind for driver_cls in _DRIVERS.values()})


register_driver(SqliteDriver, "sqlite3")
register_driver(DuckDBDriver)
register_driver(PostgresDriver, "postgres", "psycopg")
register_driver(OdbcDriver, "pyodbc")
