"""Drift between the pre-task validation and the post-task revalidation."""

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from .constants import DRIFT_COLUMNS
from .matcher import ValidationPair
from .parser import QualityRecord

REQUIRED_FIELDS = ["avg_error", "max_error", "pix_offset_x", "pix_offset_y"]


class IncompleteQualityRecordError(ValueError):
    """A quality record lacks a field needed for the drift computation."""


@dataclass(frozen=True)
class DriftReport:
    """Per-participant change (post - pre) in validation accuracy."""

    participant_id: str | int | None
    avg_error_change: float
    max_error_change: float
    pix_x_offset_change: float
    pix_y_offset_change: float
    pre_avg_error: float
    post_avg_error: float
    pre_offset_distance: float
    post_offset_distance: float
    offset_distance_change: float


def offset_distance(record: QualityRecord) -> float:
    """Euclidean magnitude of a record's pixel offset."""
    return float(np.sqrt(record.pix_offset_x**2 + record.pix_offset_y**2))


def _check_complete(record: QualityRecord, side: str) -> None:
    missing = [f for f in REQUIRED_FIELDS if np.isnan(getattr(record, f))]
    if missing:
        raise IncompleteQualityRecordError(
            f"{side} validation at {record.start_time} ms is missing: {', '.join(missing)}"
        )


def compute_drift(pair: ValidationPair) -> DriftReport | None:
    """Compute the field-wise change between pre and post validation.

    No rounding is applied.

    Args:
        pair: ValidationPair for one participant

    Returns:
        DriftReport, or None if either side of the pair is absent.

    Raises:
        IncompleteQualityRecordError: If a record lacks one of the error or
            pixel offset values.
    """
    if not pair.is_complete:
        return None

    pre, post = pair.pre, pair.post
    _check_complete(pre, "Pre-task")
    _check_complete(post, "Post-task")

    pre_distance = offset_distance(pre)
    post_distance = offset_distance(post)

    return DriftReport(
        participant_id=pair.participant_id,
        avg_error_change=post.avg_error - pre.avg_error,
        max_error_change=post.max_error - pre.max_error,
        pix_x_offset_change=post.pix_offset_x - pre.pix_offset_x,
        pix_y_offset_change=post.pix_offset_y - pre.pix_offset_y,
        pre_avg_error=pre.avg_error,
        post_avg_error=post.avg_error,
        pre_offset_distance=pre_distance,
        post_offset_distance=post_distance,
        offset_distance_change=post_distance - pre_distance,
    )


def drift_to_df(reports: list[DriftReport]) -> pd.DataFrame:
    """Convert DriftReports to a DataFrame sorted by participant."""
    df = pd.DataFrame([asdict(r) for r in reports], columns=DRIFT_COLUMNS)
    return df.sort_values("participant_id", kind="stable").reset_index(drop=True)
