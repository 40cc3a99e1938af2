"""Participant inclusion/exclusion based on validation accuracy."""

import math
from dataclasses import asdict, dataclass

import pandas as pd

from .constants import (
    ERROR_THRESHOLD_DEG,
    EXCLUSION_COLUMNS,
    EXCLUSION_REASONS,
    REASON_MISSING_VALIDATION,
    REASON_OK,
    REASON_QUALITY_BELOW_THRESHOLD,
    ExclusionReason,
)
from .matcher import ValidationPair


@dataclass(frozen=True)
class ExclusionDecision:
    """Final inclusion decision for one participant."""

    participant_id: str | int | None
    included: bool
    reason: ExclusionReason


def decide_exclusion(
    pair: ValidationPair | None,
    participant_id: str | int | None = None,
    threshold: float = ERROR_THRESHOLD_DEG,
) -> ExclusionDecision:
    """Apply the exclusion policy to one participant.

    Rules, first match wins:
        1. No pre or post validation -> excluded (MissingValidation)
        2. Pre or post average error >= threshold -> excluded
           (QualityBelowThreshold)
        3. Otherwise -> included (OK)

    A validation whose average error could not be read counts as missing.

    Args:
        pair: ValidationPair, or None if matching never ran (e.g. the
            participant's recordings log was malformed)
        participant_id: Participant id, used when pair is None
        threshold: Maximum acceptable average error in degrees (exclusive)

    Returns:
        ExclusionDecision
    """
    if pair is not None:
        participant_id = pair.participant_id

    if (
        pair is None
        or not pair.is_complete
        or math.isnan(pair.pre.avg_error)
        or math.isnan(pair.post.avg_error)
    ):
        return ExclusionDecision(participant_id, False, REASON_MISSING_VALIDATION)

    if pair.pre.avg_error >= threshold or pair.post.avg_error >= threshold:
        return ExclusionDecision(participant_id, False, REASON_QUALITY_BELOW_THRESHOLD)

    return ExclusionDecision(participant_id, True, REASON_OK)


def decisions_to_df(
    decisions: list[ExclusionDecision],
    pairs: list[ValidationPair] | None = None,
) -> pd.DataFrame:
    """Build the exclusion report table.

    Args:
        decisions: One ExclusionDecision per participant
        pairs: Optional ValidationPairs; adds pre/post timestamps and average
            errors to the report for auditing

    Returns:
        DataFrame sorted by participant_id
    """
    df = pd.DataFrame([asdict(d) for d in decisions], columns=EXCLUSION_COLUMNS)

    if pairs is not None:
        audit = pd.DataFrame(
            [
                {
                    "participant_id": p.participant_id,
                    "pre_time": p.pre.start_time if p.pre else None,
                    "pre_avg_error": p.pre.avg_error if p.pre else math.nan,
                    "post_time": p.post.start_time if p.post else None,
                    "post_avg_error": p.post.avg_error if p.post else math.nan,
                }
                for p in pairs
            ],
            columns=["participant_id", "pre_time", "pre_avg_error", "post_time", "post_avg_error"],
        )
        df = df.merge(audit, on="participant_id", how="left")

    return df.sort_values("participant_id", kind="stable").reset_index(drop=True)


def summarize_exclusions(decisions: list[ExclusionDecision]) -> dict:
    """Count included/excluded participants and exclusions per reason.

    Args:
        decisions: One ExclusionDecision per participant

    Returns:
        Dict with n_participants, n_included, n_excluded and reasons
    """
    reasons = {reason: 0 for reason in EXCLUSION_REASONS}
    for d in decisions:
        reasons[d.reason] += 1

    n_included = sum(1 for d in decisions if d.included)

    return {
        "n_participants": len(decisions),
        "n_included": n_included,
        "n_excluded": len(decisions) - n_included,
        "reasons": reasons,
    }
