"""Pytest fixtures for test suite."""

import pandas as pd
import pytest

from eyelink_pipeline.parser import QualityRecord
from eyelink_pipeline.phases import PhaseBoundaries


@pytest.fixture
def make_message():
    """Factory fixture to build an EyeLink result message."""

    def _create(
        category="VALIDATION",
        quality="GOOD",
        avg_error=0.35,
        max_error=0.75,
        deg_offset=0.12,
        pix_x=3.1,
        pix_y=-5.2,
    ):
        return (
            f"!CAL {category} HV9 R RIGHT {quality} ERROR {avg_error} avg. "
            f"{max_error} max OFFSET {deg_offset} deg. {pix_x},{pix_y} pix."
        )

    return _create


@pytest.fixture
def make_record():
    """Factory fixture to build a QualityRecord directly."""

    def _create(
        start_time,
        avg_error=0.5,
        category="Validation",
        participant_id="001",
        max_error=1.0,
        pix_x=1.0,
        pix_y=1.0,
    ):
        return QualityRecord(
            participant_id=participant_id,
            start_time=start_time,
            category=category,
            quality="Good",
            avg_error=avg_error,
            max_error=max_error,
            deg_offset=0.1,
            pix_offset_x=pix_x,
            pix_offset_y=pix_y,
        )

    return _create


@pytest.fixture
def boundaries():
    """Phase boundaries of a session with a one-hour task."""
    return PhaseBoundaries(
        participant_id="001",
        calibration_time=1000,
        validation_time=5000,
        task_start=10000,
        task_end=3_610_000,
    )


@pytest.fixture
def make_events(make_message):
    """Factory fixture to build an event log from (start_time, avg_error) pairs."""

    def _create(validations):
        rows = [
            {"message": "!MODE RECORD CR 1000 2 1 R", "start_time": 500},
            {"message": make_message(category="CALIBRATION", quality="GOOD"), "start_time": 900},
        ]
        for start_time, avg_error in validations:
            rows.append(
                {"message": make_message(avg_error=avg_error), "start_time": start_time}
            )
            rows.append({"message": "TRIALID 1", "start_time": start_time + 1})
        return pd.DataFrame(rows, columns=["message", "start_time"])

    return _create


@pytest.fixture
def make_recordings():
    """Factory fixture to build a recordings log."""

    def _create(times=(1000, 5000, 10000, 3_610_000)):
        return pd.DataFrame({"time": list(times)})

    return _create
