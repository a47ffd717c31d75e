from __future__ import annotations

import json
import os
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict

from dbprobe.runner import ProbeReport
from dbprobe.timing import phase_durations


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _settings_payload(report: ProbeReport) -> Dict[str, Any]:
    settings = asdict(report.settings)
    if settings.get("password") is not None:
        settings["password"] = "***"
    return settings


def build_payload(report: ProbeReport) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "generated_at": _timestamp(),
        "settings": _settings_payload(report),
        "exit_code": report.exit_code,
        "error": report.error,
        "database": asdict(report.database) if report.database is not None else None,
        "scan": asdict(report.scan) if report.scan is not None else None,
        "system": report.system,
    }
    if report.exit_code == 0:
        payload["phases_ms"] = phase_durations(report.markers, report.settings.long_timing_test)
    return payload


def write_report(report: ProbeReport, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(build_payload(report), handle, indent=2, default=str)
    return path
