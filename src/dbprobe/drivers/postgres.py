from __future__ import annotations

from typing import Any, Optional, Tuple

from dbprobe.drivers.base import BaseDriver


def _conninfo(url: str) -> str:
    # accept SQLAlchemy-style URLs
    for prefix in ("postgresql+psycopg://", "postgresql+psycopg2://"):
        if url.startswith(prefix):
            return url.replace(prefix, "postgresql://", 1)
    return url


class PostgresDriver(BaseDriver):
    kind = "postgresql"
    product_name = "PostgreSQL"
    install_hint = "pip install 'psycopg[binary]'"

    def _import_module(self) -> Any:
        import psycopg

        return psycopg

    def connect_address(self, url: str) -> Any:
        return self.module.connect(_conninfo(url))

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        return self.module.connect(_conninfo(url), user=user, password=password)

    def product_version(self, connection: Any) -> str:
        row = connection.execute("SHOW server_version").fetchone()
        return str(row[0]) if row else "unknown"

    def describe_type(self, type_code: Any) -> Tuple[Optional[str], Optional[str]]:
        info = self.module.adapters.types.get(type_code) if type_code is not None else None
        if info is None:
            return super().describe_type(type_code)
        return info.name, None
