from __future__ import annotations

import os
import platform
import sys
import traceback
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import psutil

from dbprobe.config import ProbeSettings
from dbprobe.drivers import get_driver
from dbprobe.drivers.base import BaseDriver
from dbprobe.errors import (
    EXIT_MISSING_DRIVER,
    EXIT_MISSING_SQL,
    EXIT_MISSING_URL,
    EXIT_OK,
    ConnectError,
    DriverLoadError,
    ExecutionError,
    MetadataError,
    ProbeError,
    ValidationError,
)
from dbprobe.results import ResultCursor, print_column_metadata, print_row, scan_all
from dbprobe.timing import now_ms, timing_lines
from dbprobe.types import DatabaseInfo, PhaseMarkers, ScanResult


@dataclass
class ProbeReport:
    settings: ProbeSettings
    exit_code: int = EXIT_OK
    error: Optional[str] = None
    markers: PhaseMarkers = field(default_factory=PhaseMarkers)
    database: Optional[DatabaseInfo] = None
    scan: Optional[ScanResult] = None
    system: Dict[str, object] = field(default_factory=dict)


def _rss_mb() -> float:
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / (1024 * 1024)


def _collect_system_info() -> Dict[str, object]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "cpu_count": os.cpu_count(),
        "memory_total_mb": psutil.virtual_memory().total / (1024 * 1024),
    }


def _release(close: Callable[[], Any]) -> None:
    try:
        close()
    except Exception:  # pylint: disable=broad-except
        pass


def _print_failure(exc: ProbeError) -> None:
    print(exc.message, file=sys.stderr)
    cause = exc.__cause__
    if cause is not None:
        print("".join(traceback.format_exception(type(cause), cause, cause.__traceback__)), end="", file=sys.stderr)


def validate(settings: ProbeSettings) -> None:
    """Fail on the first missing required key; warn about missing credentials."""
    if settings.sql is None:
        raise ValidationError(
            "SQL not specified - you must supply sql=<some select> to specify your SQL.",
            EXIT_MISSING_SQL,
        )
    if settings.driver is None:
        raise ValidationError(
            "Driver not specified. You must supply driver=<some driver> to specify your database driver.",
            EXIT_MISSING_DRIVER,
        )
    if settings.url is None:
        raise ValidationError(
            "URL not specified. You must supply url=<address> to specify your connection target.",
            EXIT_MISSING_URL,
        )
    if settings.user is None:
        print("Warning - user not supplied. Will be trying the driver's default user.", file=sys.stderr)
    if settings.password is None:
        print("Warning - password not supplied. Will pass None to the driver.", file=sys.stderr)


def resolve_driver(kind: str) -> BaseDriver:
    try:
        driver = get_driver(kind)
        driver.load()
    except (ValueError, RuntimeError) as exc:
        raise DriverLoadError(f"Failed to load driver {kind}") from exc
    return driver


def print_database_info(info: DatabaseInfo) -> None:
    print("Driver And Database Information")
    print(f"Driver Name: {info.driver_name}")
    print(f"Driver Version: {info.driver_version}")
    print(f"DB-API Version: {info.api_major}.{info.api_minor}")
    print(f"Database Product Name: {info.product_name}")
    print(f"Database Product Version: {info.product_version}")


class ProbeRunner:
    """Runs one query against one connection and reports what happened.

    Resources are registered on an ``ExitStack`` as they are acquired, so
    the result cursor, statement and connection are released in that order
    on every path out of :meth:`run`, and a failing release never blocks the
    next one.
    """

    def __init__(self, settings: ProbeSettings, clock: Callable[[], float] = now_ms) -> None:
        self.settings = settings
        self.clock = clock

    def run(self) -> ProbeReport:
        report = ProbeReport(settings=self.settings, system=_collect_system_info())
        try:
            with ExitStack() as stack:
                self._run(stack, report)
        except ProbeError as exc:
            _print_failure(exc)
            report.exit_code = exc.exit_code
            report.error = exc.message
            return report

        report.markers.complete = self.clock()
        for line in timing_lines(report.markers, self.settings.long_timing_test):
            print(line)
        return report

    def _run(self, stack: ExitStack, report: ProbeReport) -> None:
        settings = self.settings
        markers = report.markers
        validate(settings)
        driver = resolve_driver(settings.driver)

        markers.start = self.clock()
        try:
            connection = driver.connect(settings.url, settings.user, settings.password)
        except Exception as exc:  # pylint: disable=broad-except
            raise ConnectError("Failed to connect") from exc
        stack.callback(_release, connection.close)
        print("Connected")
        markers.post_connect = self.clock()
        markers.post_enhance = self.clock()

        try:
            report.database = driver.database_info(connection)
        except Exception as exc:  # pylint: disable=broad-except
            raise MetadataError("Failed to obtain database metadata") from exc
        markers.post_connection_metadata = self.clock()

        try:
            print_database_info(report.database)
        except Exception as exc:  # pylint: disable=broad-except
            raise MetadataError("Failed to get driver information") from exc
        markers.post_metadata_output = self.clock()

        try:
            statement = driver.create_statement(connection)
            stack.callback(_release, statement.close)
            markers.post_statement_create = self.clock()
            markers.post_statement_enhance = markers.post_statement_create

            print(f"Executing query: {settings.sql}")
            cursor = driver.execute(statement, settings.sql)
            stack.callback(_release, cursor.close)
            markers.post_execute = self.clock()

            if settings.long_timing_test:
                report.scan = self._scan_everything(cursor, markers)
            else:
                report.scan = self._show_first_row(cursor, markers)
            markers.post_unenhance = markers.post_iterate
        except Exception as exc:  # pylint: disable=broad-except
            raise ExecutionError("Failed to execute") from exc

    def _scan_everything(self, cursor: ResultCursor, markers: PhaseMarkers) -> ScanResult:
        columns = cursor.columns()
        if self.settings.show_resultset_metadata:
            print_column_metadata(columns)
        # memory samples sit outside the timed iteration window
        rss_before = _rss_mb()
        markers.post_rsmd = self.clock()
        print(f"Column Count: {len(columns)}")

        scan = scan_all(cursor, len(columns))
        markers.post_iterate = self.clock()
        scan.rss_mb = _rss_mb() - rss_before
        return scan

    def _show_first_row(self, cursor: ResultCursor, markers: PhaseMarkers) -> ScanResult:
        row = cursor.next()
        if row is None:
            print("No rows")
            return ScanResult()

        max_width = self.settings.max_display_width
        print(f"First row of data (max width={max_width})")
        columns = cursor.columns()
        print(f"Column Count: {len(columns)}")
        markers.post_rsmd = self.clock()
        print_row(row, columns, max_width)
        markers.post_iterate = self.clock()
        return ScanResult(column_count=len(columns), row_count=1, has_rows=True)
