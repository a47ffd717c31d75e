from __future__ import annotations

from typing import Optional

EXIT_OK = 0
EXIT_MISSING_SQL = 1
EXIT_MISSING_DRIVER = 2
EXIT_MISSING_URL = 3
EXIT_DRIVER_LOAD = 4
EXIT_METADATA = 5
EXIT_CONNECT = 6
EXIT_EXECUTE = 9
EXIT_CONFIG_LOAD = -9


class ProbeError(Exception):
    """A fatal failure of one probe phase, mapped to a process exit code."""

    exit_code = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigLoadError(ProbeError):
    exit_code = EXIT_CONFIG_LOAD


class ValidationError(ProbeError):
    pass


class DriverLoadError(ProbeError):
    exit_code = EXIT_DRIVER_LOAD


class ConnectError(ProbeError):
    exit_code = EXIT_CONNECT


class MetadataError(ProbeError):
    exit_code = EXIT_METADATA


class ExecutionError(ProbeError):
    exit_code = EXIT_EXECUTE
