"""Phase boundary resolution from the recordings log.

Each session records four phases in fixed hardware order (calibration,
validation, task, revalidation). The recordings log holds one timestamp per
phase; those four timestamps are the only phase information available.
"""

from dataclasses import asdict, dataclass

import pandas as pd

from .constants import (
    N_PHASE_MARKERS,
    PHASE_BOUNDARY_COLUMNS,
    RECORDING_TIME_COL,
    TimeUnit,
)

_UNIT_DIVISORS = {"ms": 1, "s": 1000, "min": 60 * 1000}


class MalformedRecordingError(ValueError):
    """Recordings log does not describe the four expected phases."""


@dataclass(frozen=True)
class PhaseBoundaries:
    """Phase boundary timestamps (ms) for one participant."""

    participant_id: str | int | None
    calibration_time: int
    validation_time: int
    task_start: int
    task_end: int


def resolve_phase_boundaries(
    recordings: pd.DataFrame,
    participant_id: str | int | None = None,
    time_col: str = RECORDING_TIME_COL,
) -> PhaseBoundaries:
    """Derive the phase boundaries from a participant's recordings log.

    The first four markers are used, in log order. Timestamps are kept in
    the log's own unit.

    Args:
        recordings: Recordings log with one row per phase marker
        participant_id: Participant the log belongs to
        time_col: Name of the timestamp column

    Returns:
        PhaseBoundaries for the participant

    Raises:
        MalformedRecordingError: If fewer than four markers are present or
            the markers go backwards in time.
    """
    if time_col not in recordings.columns:
        raise MalformedRecordingError(f"DataFrame must contain '{time_col}' column")

    times = recordings[time_col].dropna().tolist()

    if len(times) < N_PHASE_MARKERS:
        raise MalformedRecordingError(
            f"Expected {N_PHASE_MARKERS} phase markers for participant {participant_id}, "
            f"found {len(times)}"
        )

    times = [int(t) for t in times[:N_PHASE_MARKERS]]

    if any(later < earlier for earlier, later in zip(times, times[1:])):
        raise MalformedRecordingError(
            f"Phase markers for participant {participant_id} are not in time order: {times}"
        )

    calibration_time, validation_time, task_start, task_end = times
    return PhaseBoundaries(
        participant_id=participant_id,
        calibration_time=calibration_time,
        validation_time=validation_time,
        task_start=task_start,
        task_end=task_end,
    )


def convert_time(value_ms: float, unit: TimeUnit = "ms") -> float:
    """Convert a millisecond value to the requested unit."""
    if unit not in _UNIT_DIVISORS:
        raise ValueError(f"Unknown unit: {unit}. Use 'ms', 's', or 'min'.")
    return value_ms / _UNIT_DIVISORS[unit]


def compute_phase_durations(
    boundaries: PhaseBoundaries,
    unit: TimeUnit = "ms",
    expected_task_duration: float | None = None,
) -> dict[str, float]:
    """Compute how long each phase lasted.

    Args:
        boundaries: Phase boundaries for one participant
        unit: Output unit ('ms', 's', or 'min')
        expected_task_duration: Planned task length in ``unit``. If given,
            the result includes the task overtime.

    Returns:
        Dict with calibration, validation and task durations (and
        task_overtime if an expected duration is supplied).
    """
    durations = {
        "calibration_duration": convert_time(
            boundaries.validation_time - boundaries.calibration_time, unit
        ),
        "validation_duration": convert_time(
            boundaries.task_start - boundaries.validation_time, unit
        ),
        "task_duration": convert_time(boundaries.task_end - boundaries.task_start, unit),
    }

    if expected_task_duration is not None:
        durations["task_overtime"] = durations["task_duration"] - expected_task_duration

    return durations


def boundaries_to_df(boundaries: list[PhaseBoundaries]) -> pd.DataFrame:
    """Convert PhaseBoundaries to a DataFrame (one row per participant)."""
    return pd.DataFrame([asdict(b) for b in boundaries], columns=PHASE_BOUNDARY_COLUMNS)
