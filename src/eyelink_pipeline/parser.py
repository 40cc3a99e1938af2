"""Parsing of EyeLink calibration/validation result messages.

Result lines have a fixed grammar; after collapsing whitespace every numeric
field sits at a known token position (see ``TOKEN_POSITIONS``):

    !CAL VALIDATION HV9 R RIGHT GOOD ERROR 0.35 avg. 0.75 max OFFSET 0.12 deg. 3.1,-5.2 pix.
      1      2       3  4   5    6     7     8    9   10   11    12    13   14     15     16
"""

import math
import re
from dataclasses import asdict, dataclass
from pathlib import Path

import pandas as pd

from .constants import (
    CATEGORIES,
    EVENT_MESSAGE_COL,
    EVENT_TIME_COL,
    QUALITIES,
    QUALITY_RECORD_COLUMNS,
    RESULT_MARKERS,
    TOKEN_POSITIONS,
    Category,
    Quality,
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class QualityRecord:
    """One calibration or validation result reported by the tracker."""

    participant_id: str | int | None
    start_time: int
    category: Category
    quality: Quality | None
    avg_error: float
    max_error: float
    deg_offset: float
    pix_offset_x: float
    pix_offset_y: float


def collapse_whitespace(message: str) -> str:
    """Trim a message and collapse runs of whitespace to a single space."""
    return _WHITESPACE.sub(" ", message).strip()


def tokenize_message(message: str) -> list[str]:
    """Split a message into whitespace-delimited tokens."""
    return collapse_whitespace(message).split(" ")


def is_result_message(message) -> bool:
    """Check whether a message is a calibration or validation result line."""
    if not isinstance(message, str):
        return False
    collapsed = collapse_whitespace(message)
    return any(marker in collapsed for marker in RESULT_MARKERS)


def _token_at(tokens: list[str], position: int) -> str | None:
    if position < 1 or position > len(tokens):
        return None
    return tokens[position - 1]


def _to_float(token: str | None) -> float:
    if token is None:
        return math.nan
    try:
        return float(token)
    except ValueError:
        return math.nan


def _parse_pixel_offset(token: str | None) -> tuple[float, float]:
    if token is None:
        return math.nan, math.nan
    parts = token.split(",")
    if len(parts) != 2:
        return math.nan, math.nan
    return _to_float(parts[0]), _to_float(parts[1])


def _find_vocabulary_token(tokens: list[str], vocabulary: dict[str, str]) -> str | None:
    for token in tokens:
        if token in vocabulary:
            return vocabulary[token]
    return None


def parse_message(
    message,
    start_time,
    participant_id: str | int | None = None,
) -> QualityRecord | None:
    """Parse one raw event line into a QualityRecord.

    Args:
        message: Raw event message text
        start_time: Event timestamp in milliseconds
        participant_id: Participant the line belongs to

    Returns:
        QualityRecord, or None if the line is not a calibration/validation
        result (or has no usable category or timestamp). Positional fields
        that are missing or unreadable are set to NaN.
    """
    if not is_result_message(message):
        return None

    if start_time is None or pd.isna(start_time):
        return None

    tokens = tokenize_message(message)

    category = _find_vocabulary_token(tokens, CATEGORIES)
    if category is None:
        return None

    pix_x, pix_y = _parse_pixel_offset(_token_at(tokens, TOKEN_POSITIONS["pix_offset"]))

    return QualityRecord(
        participant_id=participant_id,
        start_time=int(start_time),
        category=category,
        quality=_find_vocabulary_token(tokens, QUALITIES),
        avg_error=_to_float(_token_at(tokens, TOKEN_POSITIONS["avg_error"])),
        max_error=_to_float(_token_at(tokens, TOKEN_POSITIONS["max_error"])),
        deg_offset=_to_float(_token_at(tokens, TOKEN_POSITIONS["deg_offset"])),
        pix_offset_x=pix_x,
        pix_offset_y=pix_y,
    )


def parse_event_log(
    df: pd.DataFrame,
    participant_id: str | int | None = None,
    message_col: str = EVENT_MESSAGE_COL,
    time_col: str = EVENT_TIME_COL,
) -> list[QualityRecord]:
    """Parse every calibration/validation result line of an event log.

    Args:
        df: Event log with message and timestamp columns
        participant_id: Participant the log belongs to
        message_col: Name of the message column
        time_col: Name of the timestamp column (milliseconds)

    Returns:
        List of QualityRecords in log order; non-result lines are skipped.
    """
    for col in (message_col, time_col):
        if col not in df.columns:
            raise ValueError(f"DataFrame must contain '{col}' column")

    records = []
    for message, start_time in zip(df[message_col], df[time_col]):
        record = parse_message(message, start_time, participant_id)
        if record is not None:
            records.append(record)

    return records


def records_to_df(records: list[QualityRecord]) -> pd.DataFrame:
    """Convert QualityRecords to a DataFrame (one row per record)."""
    return pd.DataFrame([asdict(r) for r in records], columns=QUALITY_RECORD_COLUMNS)


def parse_filename(filename: str) -> dict:
    """Parse a participant file name to extract the participant id.

    File names carry a study prefix and a zero-padded 3-digit number,
    e.g. ``csntask_subjCSN007.csv`` or ``CSN007.csv``.

    Args:
        filename: The filename (with or without path and extension)

    Returns:
        dict with keys: participant_id, study, code, raw_filename.
        Returns None values for fields that couldn't be parsed.
    """
    name = Path(filename).stem

    match = re.search(r"(CSN)(\d{3})", name)
    if match:
        study, number = match.groups()
        return {
            "participant_id": number,
            "study": study,
            "code": f"{study}{number}",
            "raw_filename": name,
        }

    return {
        "participant_id": None,
        "study": None,
        "code": None,
        "raw_filename": name,
    }
