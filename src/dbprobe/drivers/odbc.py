from __future__ import annotations

from typing import Any, Optional

from dbprobe.drivers.base import BaseDriver
from dbprobe.types import DatabaseInfo


def _braced(value: str) -> str:
    return "{" + value.replace("}", "}}") + "}"


class OdbcDriver(BaseDriver):
    kind = "odbc"
    install_hint = "pip install pyodbc"

    def _import_module(self) -> Any:
        import pyodbc

        return pyodbc

    def connect_address(self, url: str) -> Any:
        return self.module.connect(url)

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> Any:
        conn_str = url.rstrip(";") + ";"
        if user is not None:
            conn_str += f"UID={_braced(user)};"
        if password is not None:
            conn_str += f"PWD={_braced(password)};"
        return self.module.connect(conn_str)

    def driver_name(self, connection: Any) -> str:
        return str(connection.getinfo(self.module.SQL_DRIVER_NAME))

    def driver_version(self, connection: Any) -> str:
        return str(connection.getinfo(self.module.SQL_DRIVER_VER))

    def product_version(self, connection: Any) -> str:
        return str(connection.getinfo(self.module.SQL_DBMS_VER))

    def database_info(self, connection: Any) -> DatabaseInfo:
        info = super().database_info(connection)
        info.product_name = str(connection.getinfo(self.module.SQL_DBMS_NAME))
        return info
