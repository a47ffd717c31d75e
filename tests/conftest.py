from __future__ import annotations

from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

from dbprobe import drivers
from dbprobe.config import ProbeSettings
from dbprobe.drivers.base import BaseDriver


class CountingRow(tuple):
    """Row that records every column read."""

    reads: List[int]

    def __getitem__(self, index):
        self.reads.append(index)
        return super().__getitem__(index)


class FakeDatabase:
    """Shared state behind the fake driver: canned rows, failure switches and a call log."""

    def __init__(self) -> None:
        self.columns = ["id"]
        self.rows: List[tuple] = [(1,)]
        self.events: List[Any] = []
        self.reads: List[int] = []
        self.fail_connect = False
        self.fail_metadata = False
        self.fail_execute = False
        self.fail_close: set = set()

    def make_rows(self) -> List[CountingRow]:
        made = []
        for values in self.rows:
            row = CountingRow(values)
            row.reads = self.reads
            made.append(row)
        return made

    def close(self, what: str) -> None:
        self.events.append(("close", what))
        if what in self.fail_close:
            raise RuntimeError(f"{what} close failed")


class FakeCursor:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.description: Optional[list] = None
        self._rows: List[CountingRow] = []

    def execute(self, sql: str) -> None:
        self.db.events.append(("execute", sql))
        if self.db.fail_execute:
            raise RuntimeError("syntax error")
        self.description = [(name, str, 10, None, None, 0, True) for name in self.db.columns]
        self._rows = self.db.make_rows()

    def fetchone(self):
        if not self._rows:
            return None
        return self._rows.pop(0)

    def close(self) -> None:
        self.db.close("statement")


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self.db = db

    def cursor(self) -> FakeCursor:
        return FakeCursor(self.db)

    def close(self) -> None:
        self.db.close("connection")


class FakeDriver(BaseDriver):
    kind = "fake"
    product_name = "FakeDB"
    db: FakeDatabase = FakeDatabase()

    def _import_module(self) -> Any:
        return SimpleNamespace(__name__="fakedb", __version__="1.2.3", apilevel="2.0")

    def _open(self) -> FakeConnection:
        if self.db.fail_connect:
            raise ConnectionRefusedError("connection refused")
        return FakeConnection(self.db)

    def connect_address(self, url: str) -> FakeConnection:
        self.db.events.append(("connect_address", url))
        return self._open()

    def connect_with_credentials(self, url: str, user: Optional[str], password: Optional[str]) -> FakeConnection:
        self.db.events.append(("connect_with_credentials", url, user, password))
        return self._open()

    def product_version(self, connection: Any) -> str:
        if self.db.fail_metadata:
            raise RuntimeError("metadata unavailable")
        return "9.9"

    def execute(self, statement: Any, sql: str):
        cursor = super().execute(statement, sql)
        close = cursor.close
        db = self.db

        def _close() -> None:
            close()
            db.close("result")

        cursor.close = _close
        return cursor


@pytest.fixture
def fake_db(monkeypatch) -> FakeDatabase:
    db = FakeDatabase()
    monkeypatch.setattr(FakeDriver, "db", db)
    monkeypatch.setitem(drivers._DRIVERS, "fake", FakeDriver)
    return db


@pytest.fixture
def settings() -> ProbeSettings:
    return ProbeSettings(sql="SELECT 1", url="fake://db", driver="fake")


class StepClock:
    """Deterministic clock advancing a fixed number of milliseconds per call."""

    def __init__(self, step_ms: float = 1000.0):
        self.now = 0.0
        self.step_ms = step_ms

    def __call__(self) -> float:
        self.now += self.step_ms
        return self.now


@pytest.fixture
def clock() -> StepClock:
    return StepClock()
