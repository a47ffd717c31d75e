from __future__ import annotations

import platform
from typing import Any, Optional

from dbprobe.drivers.base import BaseDriver


def _database_path(url: str) -> str:
    for prefix in ("sqlite:///", "sqlite://", "sqlite:"):
        if url.startswith(prefix):
            return url[len(prefix):] or ":memory:"
    return url


class SqliteDriver(BaseDriver):
    kind = "sqlite"
    product_name = "SQLite"

    def _import_module(self) -> Any:
        import sqlite3

        return sqlite3

    def connect_address(self, url: str) -> Any:
        return self.module.connect(_database_path(url))

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        # sqlite has no authentication; credentials are accepted and unused
        return self.module.connect(_database_path(url))

    def driver_version(self, connection: Any) -> str:
        return platform.python_version()

    def product_version(self, connection: Any) -> str:
        return self.module.sqlite_version
