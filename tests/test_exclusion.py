"""Tests for the exclusion module."""

import math

import pandas as pd

from eyelink_pipeline.exclusion import (
    ExclusionDecision,
    decide_exclusion,
    decisions_to_df,
    summarize_exclusions,
)
from eyelink_pipeline.matcher import ValidationPair


def _pair(make_record, pre_error, post_error, participant_id="001"):
    pre = make_record(1, avg_error=pre_error) if pre_error is not None else None
    post = make_record(2, avg_error=post_error) if post_error is not None else None
    return ValidationPair(participant_id, pre, post)


class TestDecideExclusion:
    """Tests for decide_exclusion function."""

    def test_included(self, make_record):
        """Both validations under threshold -> included."""
        decision = decide_exclusion(_pair(make_record, 0.5, 1.0))

        assert decision == ExclusionDecision("001", True, "OK")

    def test_no_pair(self):
        """No pair at all -> MissingValidation."""
        decision = decide_exclusion(None, participant_id="004")

        assert decision == ExclusionDecision("004", False, "MissingValidation")

    def test_missing_side(self, make_record):
        """Absent pre or post -> MissingValidation, checked before quality."""
        assert decide_exclusion(_pair(make_record, None, 0.5)).reason == "MissingValidation"
        assert decide_exclusion(_pair(make_record, 3.0, None)).reason == "MissingValidation"

    def test_threshold_inclusive(self, make_record):
        """An average error equal to the threshold is excluded."""
        decision = decide_exclusion(_pair(make_record, 2.5, 0.5))

        assert not decision.included
        assert decision.reason == "QualityBelowThreshold"

    def test_just_under_threshold(self, make_record):
        """Just under the threshold on both sides is included."""
        decision = decide_exclusion(_pair(make_record, 2.499999, 2.499999))

        assert decision.included
        assert decision.reason == "OK"

    def test_post_above_threshold(self, make_record):
        """Drift after the task alone excludes the participant."""
        decision = decide_exclusion(_pair(make_record, 0.5, 3.0))

        assert decision.reason == "QualityBelowThreshold"

    def test_custom_threshold(self, make_record):
        """The threshold can be overridden."""
        pair = _pair(make_record, 1.5, 1.5)

        assert decide_exclusion(pair).included
        assert not decide_exclusion(pair, threshold=1.0).included

    def test_unreadable_error_counts_as_missing(self, make_record):
        """A validation without an average error cannot pass."""
        decision = decide_exclusion(_pair(make_record, math.nan, 0.5))

        assert decision.reason == "MissingValidation"


class TestReports:
    """Tests for exclusion report helpers."""

    def test_decisions_to_df(self):
        """Report table is sorted by participant."""
        decisions = [
            ExclusionDecision("002", False, "MissingValidation"),
            ExclusionDecision("001", True, "OK"),
        ]

        df = decisions_to_df(decisions)

        expected = pd.DataFrame(
            {
                "participant_id": ["001", "002"],
                "included": [True, False],
                "reason": ["OK", "MissingValidation"],
            }
        )
        pd.testing.assert_frame_equal(df, expected)

    def test_decisions_to_df_with_pairs(self, make_record):
        """Audit columns come from the validation pairs."""
        pairs = [_pair(make_record, 0.5, 1.0, "001"), _pair(make_record, 0.7, None, "002")]
        decisions = [decide_exclusion(p) for p in pairs]
        decisions.append(decide_exclusion(None, participant_id="003"))

        df = decisions_to_df(decisions, pairs=pairs)

        assert df["participant_id"].tolist() == ["001", "002", "003"]
        assert df["pre_avg_error"].iloc[0] == 0.5
        assert df["post_avg_error"].iloc[0] == 1.0
        assert pd.isna(df["post_avg_error"].iloc[1])
        assert pd.isna(df["pre_avg_error"].iloc[2])

    def test_summarize_exclusions(self):
        """Counts per outcome and reason."""
        decisions = [
            ExclusionDecision("001", True, "OK"),
            ExclusionDecision("002", False, "MissingValidation"),
            ExclusionDecision("003", False, "QualityBelowThreshold"),
            ExclusionDecision("004", False, "QualityBelowThreshold"),
        ]

        summary = summarize_exclusions(decisions)

        assert summary["n_participants"] == 4
        assert summary["n_included"] == 1
        assert summary["n_excluded"] == 3
        assert summary["reasons"] == {
            "OK": 1,
            "MissingValidation": 1,
            "QualityBelowThreshold": 2,
        }

    def test_summarize_empty(self):
        """No decisions -> zero counts."""
        summary = summarize_exclusions([])

        assert summary["n_participants"] == 0
        assert summary["n_included"] == 0
