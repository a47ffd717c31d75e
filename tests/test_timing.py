from __future__ import annotations

import pytest

from dbprobe.timing import PHASES, format_elapsed, phase_durations, split_elapsed, timing_lines
from dbprobe.types import PhaseMarkers


def test_hours_are_dropped_from_output():
    assert split_elapsed(0, 3_661_000) == (1, 1, 1)
    assert format_elapsed(0, 3_661_000, "Total Time") == "Total Time - 1 minute(s), 1 second(s)"


def test_elapsed_is_absolute():
    assert format_elapsed(125_000, 0, "Backwards") == "Backwards - 2 minute(s), 5 second(s)"


@pytest.mark.parametrize(
    "delta_ms, expected",
    [
        (0, "0 minute(s), 0 second(s)"),
        (999, "0 minute(s), 0 second(s)"),
        (59_999, "0 minute(s), 59 second(s)"),
        (60_000, "1 minute(s), 0 second(s)"),
        (7_322_500, "2 minute(s), 2 second(s)"),
    ],
)
def test_whole_seconds(delta_ms, expected):
    assert format_elapsed(1_000, 1_000 + delta_ms, "x") == f"x - {expected}"


def test_default_mode_prints_only_total():
    markers = PhaseMarkers(start=1_000, complete=66_000)
    assert timing_lines(markers, long_timing_test=False) == ["Total Time - 1 minute(s), 5 second(s)"]


def test_timing_mode_prints_eight_phases_and_total():
    markers = PhaseMarkers(
        start=0,
        post_connect=2_000,
        post_enhance=2_000,
        post_connection_metadata=3_000,
        post_metadata_output=3_000,
        post_statement_create=4_000,
        post_statement_enhance=4_000,
        post_execute=10_000,
        post_rsmd=10_000,
        post_iterate=130_000,
        post_unenhance=130_000,
        complete=131_000,
    )

    lines = timing_lines(markers, long_timing_test=True)

    assert len(PHASES) == 8
    assert len(lines) == 9
    assert lines[0] == "Time to Connect - 0 minute(s), 2 second(s)"
    assert lines[4] == "Time to execute Query - 0 minute(s), 6 second(s)"
    assert lines[6] == "Time to iterate over entire Resultset - 2 minute(s), 0 second(s)"
    assert lines[-1] == "Total Time - 2 minute(s), 11 second(s)"


def test_phase_durations_keep_milliseconds():
    markers = PhaseMarkers(start=10.0, complete=1_510.5)
    assert phase_durations(markers, long_timing_test=False) == {"Total Time": 1_500.5}
