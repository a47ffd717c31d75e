from __future__ import annotations

from typing import Any, Optional, Tuple

from dbprobe.results import ResultCursor
from dbprobe.types import DatabaseInfo


class BaseDriver:
    """Connectivity contract for one DB-API 2.0 driver.

    Subclasses import their module in ``_import_module`` and implement the
    two connect variants. ``connect`` picks between them from which
    credentials were supplied.
    """

    kind = "base"
    product_name = "unknown"
    install_hint = ""

    def __init__(self) -> None:
        self.module: Any = None

    def _import_module(self) -> Any:
        raise NotImplementedError

    def load(self) -> None:
        try:
            self.module = self._import_module()
        except ImportError as exc:
            hint = f" Run: {self.install_hint}" if self.install_hint else ""
            raise RuntimeError(f"{self.kind} driver not installed.{hint}") from exc

    def connect(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        if user is None and password is None:
            return self.connect_address(url)
        return self.connect_with_credentials(url, user, password)

    def connect_address(self, url: str) -> Any:
        raise NotImplementedError

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        raise NotImplementedError

    def driver_name(self, connection: Any) -> str:
        return getattr(self.module, "__name__", self.kind)

    def driver_version(self, connection: Any) -> str:
        return str(getattr(self.module, "__version__", "unknown"))

    def product_version(self, connection: Any) -> str:
        raise NotImplementedError

    def api_version(self) -> Tuple[int, int]:
        level = str(getattr(self.module, "apilevel", "2.0"))
        major, _, minor = level.partition(".")
        return int(major), int(minor or 0)

    def database_info(self, connection: Any) -> DatabaseInfo:
        major, minor = self.api_version()
        return DatabaseInfo(
            driver_name=self.driver_name(connection),
            driver_version=self.driver_version(connection),
            api_major=major,
            api_minor=minor,
            product_name=self.product_name,
            product_version=self.product_version(connection),
        )

    def create_statement(self, connection: Any) -> Any:
        return connection.cursor()

    def execute(self, statement: Any, sql: str) -> ResultCursor:
        statement.execute(sql)
        return ResultCursor(statement, self.describe_type)

    def describe_type(self, type_code: Any) -> Tuple[Optional[str], Optional[str]]:
        """Return ``(type name, class name)`` for a ``cursor.description`` type code."""
        if type_code is None:
            return None, None
        if isinstance(type_code, type):
            return type_code.__name__, f"{type_code.__module__}.{type_code.__qualname__}"
        return str(type_code), None
