"""Tests for the matcher module."""

from eyelink_pipeline.matcher import (
    filter_validations,
    find_duplicate_times,
    match_validations,
    select_post_revalidation,
    select_pre_validation,
)


class TestSelectPreValidation:
    """Tests for select_pre_validation function."""

    def test_last_before_task(self, make_record):
        """Pick the closest validation before the task starts."""
        records = [make_record(9500), make_record(4000), make_record(20000)]

        result = select_pre_validation(records, task_start=10000)

        assert result.start_time == 9500

    def test_task_start_is_exclusive(self, make_record):
        """A validation exactly at task start is not a pre-validation."""
        records = [make_record(4000), make_record(10000)]

        result = select_pre_validation(records, task_start=10000)

        assert result.start_time == 4000

    def test_calibration_ignored(self, make_record):
        """Calibration records never qualify."""
        records = [make_record(4000), make_record(9000, category="Calibration")]

        result = select_pre_validation(records, task_start=10000)

        assert result.start_time == 4000

    def test_none_when_empty(self, make_record):
        """No candidate -> None."""
        assert select_pre_validation([make_record(20000)], task_start=10000) is None
        assert select_pre_validation([], task_start=10000) is None

    def test_tie_keeps_input_order(self, make_record):
        """Equal timestamps resolve to the later record in input order."""
        first = make_record(9000, avg_error=1.0)
        second = make_record(9000, avg_error=2.0)

        assert select_pre_validation([first, second], task_start=10000) is second
        assert select_pre_validation([second, first], task_start=10000) is first


class TestSelectPostRevalidation:
    """Tests for select_post_revalidation function."""

    def test_last_after_cutoff(self, make_record):
        """Pick the latest validation after task end plus one hour."""
        records = [make_record(7_300_000), make_record(7_500_000), make_record(7_400_000)]

        result = select_post_revalidation(records, task_end=3_610_000)

        assert result.start_time == 7_500_000

    def test_cutoff_is_exclusive(self, make_record):
        """A validation exactly at task_end + 1h is not a revalidation."""
        records = [make_record(7_210_000)]

        assert select_post_revalidation(records, task_end=3_610_000) is None
        assert select_post_revalidation([make_record(7_210_001)], task_end=3_610_000) is not None

    def test_custom_gap(self, make_record):
        """The revalidation gap can be overridden."""
        records = [make_record(3_620_000)]

        assert select_post_revalidation(records, task_end=3_610_000) is None
        result = select_post_revalidation(records, task_end=3_610_000, gap_ms=0)
        assert result.start_time == 3_620_000


class TestMatchValidations:
    """Tests for match_validations function."""

    def test_cutoff_arithmetic(self, make_record, boundaries):
        """Records shortly after task end do not count as revalidations."""
        records = [
            make_record(4000, avg_error=1.2),
            make_record(9500, avg_error=1.8),
            make_record(3_620_000, avg_error=1.9),
            make_record(3_700_000, avg_error=3.0),
        ]

        pair = match_validations(records, boundaries)

        assert pair.participant_id == "001"
        assert pair.pre.start_time == 9500
        assert pair.pre.avg_error == 1.8
        assert pair.post is None
        assert not pair.is_complete

    def test_complete_pair(self, make_record, boundaries):
        """Both sides found."""
        records = [make_record(8_000_000), make_record(9500), make_record(4000)]

        pair = match_validations(records, boundaries)

        assert pair.pre.start_time == 9500
        assert pair.post.start_time == 8_000_000
        assert pair.is_complete

    def test_no_validations(self, make_record, boundaries):
        """No validation records -> both sides absent."""
        pair = match_validations([make_record(2000, category="Calibration")], boundaries)

        assert pair.pre is None
        assert pair.post is None

    def test_deterministic(self, make_record, boundaries):
        """Repeated runs give the same pair."""
        records = [make_record(t) for t in (9500, 9500, 4000, 8_000_000, 8_000_000)]

        assert match_validations(records, boundaries) == match_validations(records, boundaries)


class TestHelpers:
    """Tests for matcher helpers."""

    def test_filter_validations(self, make_record):
        """Only validation records are kept."""
        records = [make_record(1), make_record(2, category="Calibration")]

        assert [r.start_time for r in filter_validations(records)] == [1]

    def test_find_duplicate_times(self, make_record):
        """Report validation timestamps used more than once."""
        records = [
            make_record(1),
            make_record(1),
            make_record(2),
            make_record(3, category="Calibration"),
            make_record(3),
        ]

        assert find_duplicate_times(records) == [1]
