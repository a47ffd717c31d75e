from __future__ import annotations

import time
from typing import Dict, List, Tuple

from dbprobe.types import PhaseMarkers

# (start marker, stop marker, label) in reporting order
PHASES: List[Tuple[str, str, str]] = [
    ("start", "post_connect", "Time to Connect"),
    ("post_enhance", "post_connection_metadata", "Time to get Connection Metadata"),
    ("post_connection_metadata", "post_metadata_output", "Time to display Connection Metadata"),
    ("post_metadata_output", "post_statement_create", "Time to create statement"),
    ("post_statement_enhance", "post_execute", "Time to execute Query"),
    ("post_execute", "post_rsmd", "Time to get Resultset Metadata"),
    ("post_rsmd", "post_iterate", "Time to iterate over entire Resultset"),
    ("post_iterate", "post_unenhance", "Time to unenhance connection"),
]
TOTAL = ("start", "complete", "Total Time")


def now_ms() -> float:
    return time.perf_counter() * 1000


def split_elapsed(start_ms: float, stop_ms: float) -> Tuple[int, int, int]:
    """Return ``(hours, minutes, seconds)`` for the distance between two markers.

    Seconds are re-derived with ``% 60`` after minutes are subtracted, and
    callers only render minutes and seconds, so an hour or more is reported
    modulo 60 minutes.
    """
    time_in_seconds = int(abs(stop_ms - start_ms) // 1000)
    hours = time_in_seconds // 3600
    time_in_seconds -= hours * 3600
    minutes = time_in_seconds // 60
    time_in_seconds -= minutes * 60
    seconds = time_in_seconds % 60
    return hours, minutes, seconds


def format_elapsed(start_ms: float, stop_ms: float, desc: str) -> str:
    _, minutes, seconds = split_elapsed(start_ms, stop_ms)
    return f"{desc} - {minutes} minute(s), {seconds} second(s)"


def timing_lines(markers: PhaseMarkers, long_timing_test: bool) -> List[str]:
    phases = PHASES + [TOTAL] if long_timing_test else [TOTAL]
    return [
        format_elapsed(getattr(markers, start), getattr(markers, stop), label)
        for start, stop, label in phases
    ]


def phase_durations(markers: PhaseMarkers, long_timing_test: bool) -> Dict[str, float]:
    phases = PHASES + [TOTAL] if long_timing_test else [TOTAL]
    return {
        label: abs(getattr(markers, stop) - getattr(markers, start))
        for start, stop, label in phases
    }
