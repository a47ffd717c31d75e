from __future__ import annotations

from typing import Any, Optional

from dbprobe.drivers.base import BaseDriver


def _database_path(url: str) -> str:
    for prefix in ("duckdb:///", "duckdb://", "duckdb:"):
        if url.startswith(prefix):
            return url[len(prefix):] or ":memory:"
    return url


class DuckDBDriver(BaseDriver):
    kind = "duckdb"
    product_name = "DuckDB"
    install_hint = "pip install duckdb"

    def _import_module(self) -> Any:
        import duckdb

        return duckdb

    def connect_address(self, url: str) -> Any:
        return self.module.connect(database=_database_path(url))

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        # embedded database, nothing to authenticate against
        return self.module.connect(database=_database_path(url))

    def product_version(self, connection: Any) -> str:
        row = connection.execute("SELECT version()").fetchone()
        return str(row[0]) if row else "unknown"
