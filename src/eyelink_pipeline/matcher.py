"""Selection of the validation checks that bracket the task.

The pre-task check is the last validation before the task starts. The
post-task check is the last validation recorded more than the revalidation
gap after the task ends; the final check of the session is authoritative.
"""

from collections import Counter
from dataclasses import dataclass

from .constants import REVALIDATION_GAP_MS
from .parser import QualityRecord
from .phases import PhaseBoundaries


@dataclass(frozen=True)
class ValidationPair:
    """Pre-task and post-task validation records for one participant."""

    participant_id: str | int | None
    pre: QualityRecord | None
    post: QualityRecord | None

    @property
    def is_complete(self) -> bool:
        return self.pre is not None and self.post is not None


def filter_validations(records: list[QualityRecord]) -> list[QualityRecord]:
    """Keep only validation records."""
    return [r for r in records if r.category == "Validation"]


def _last_by_time(records: list[QualityRecord]) -> QualityRecord | None:
    if not records:
        return None
    # sorted() is stable: equal timestamps keep their input order
    return sorted(records, key=lambda r: r.start_time)[-1]


def select_pre_validation(
    records: list[QualityRecord],
    task_start: int,
) -> QualityRecord | None:
    """Select the last validation strictly before the task starts.

    Args:
        records: Quality records for one participant (any order)
        task_start: Task start timestamp (ms)

    Returns:
        The closest preceding validation record, or None if there is none.
    """
    candidates = [r for r in filter_validations(records) if r.start_time < task_start]
    return _last_by_time(candidates)


def select_post_revalidation(
    records: list[QualityRecord],
    task_end: int,
    gap_ms: int = REVALIDATION_GAP_MS,
) -> QualityRecord | None:
    """Select the last validation strictly after ``task_end + gap_ms``.

    Args:
        records: Quality records for one participant (any order)
        task_end: Task end timestamp (ms)
        gap_ms: Minimum delay after task end for a revalidation to count

    Returns:
        The latest qualifying validation record, or None if there is none.
    """
    cutoff = task_end + gap_ms
    candidates = [r for r in filter_validations(records) if r.start_time > cutoff]
    return _last_by_time(candidates)


def match_validations(
    records: list[QualityRecord],
    boundaries: PhaseBoundaries,
    gap_ms: int = REVALIDATION_GAP_MS,
) -> ValidationPair:
    """Pair the pre-task validation with the post-task revalidation.

    Args:
        records: Quality records for one participant (any order)
        boundaries: Phase boundaries for the same participant
        gap_ms: Minimum delay after task end for a revalidation to count

    Returns:
        ValidationPair; a side with no qualifying record is None.
    """
    return ValidationPair(
        participant_id=boundaries.participant_id,
        pre=select_pre_validation(records, boundaries.task_start),
        post=select_post_revalidation(records, boundaries.task_end, gap_ms=gap_ms),
    )


def find_duplicate_times(records: list[QualityRecord]) -> list[int]:
    """Return validation timestamps shared by more than one record."""
    counts = Counter(r.start_time for r in filter_validations(records))
    return sorted(t for t, n in counts.items() if n > 1)
