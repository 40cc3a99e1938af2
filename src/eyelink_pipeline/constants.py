"""Constants and column definitions for EyeLink calibration/validation logs."""

from typing import Literal

# Event log columns
EVENT_MESSAGE_COL = "message"
EVENT_TIME_COL = "start_time"

# Recordings log column (one row per recording phase marker)
RECORDING_TIME_COL = "time"

# Calibration and validation result lines emitted by the tracker, e.g.
# "!CAL VALIDATION HV9 R RIGHT GOOD ERROR 0.35 avg. 0.75 max OFFSET 0.12 deg. 3.1,-5.2 pix."
CALIBRATION_MARKER = "!CAL CALIBRATION"
VALIDATION_MARKER = "!CAL VALIDATION"
RESULT_MARKERS = (CALIBRATION_MARKER, VALIDATION_MARKER)

# Category / quality vocabularies (tracker token -> record value)
CATEGORIES = {
    "CALIBRATION": "Calibration",
    "VALIDATION": "Validation",
}
QUALITIES = {
    "GOOD": "Good",
    "FAIR": "Fair",
    "POOR": "Poor",
}

# 1-based token positions, counted after whitespace collapse
TOKEN_POSITIONS = {
    "avg_error": 8,
    "max_error": 10,
    "deg_offset": 13,
    "pix_offset": 15,
}

# Recording phases, in hardware order
PHASES = ["calibration", "validation", "task", "revalidation"]
N_PHASE_MARKERS = len(PHASES)

# Exclusion policy
ERROR_THRESHOLD_DEG = 2.5
REVALIDATION_GAP_MS = 60 * 60 * 1000

REASON_OK = "OK"
REASON_MISSING_VALIDATION = "MissingValidation"
REASON_QUALITY_BELOW_THRESHOLD = "QualityBelowThreshold"
EXCLUSION_REASONS = [REASON_OK, REASON_MISSING_VALIDATION, REASON_QUALITY_BELOW_THRESHOLD]

# Sessions known to be incomplete can be listed here to skip them up front
DEFAULT_SKIP_PARTICIPANTS: tuple[str, ...] = ()

# Type aliases
Category = Literal["Calibration", "Validation"]
Quality = Literal["Good", "Fair", "Poor"]
ExclusionReason = Literal["OK", "MissingValidation", "QualityBelowThreshold"]
TimeUnit = Literal["ms", "s", "min"]

# Output table columns
QUALITY_RECORD_COLUMNS = [
    "participant_id",
    "start_time",
    "category",
    "quality",
    "avg_error",
    "max_error",
    "deg_offset",
    "pix_offset_x",
    "pix_offset_y",
]

PHASE_BOUNDARY_COLUMNS = [
    "participant_id",
    "calibration_time",
    "validation_time",
    "task_start",
    "task_end",
]

DRIFT_COLUMNS = [
    "participant_id",
    "avg_error_change",
    "max_error_change",
    "pix_x_offset_change",
    "pix_y_offset_change",
    "pre_avg_error",
    "post_avg_error",
    "pre_offset_distance",
    "post_offset_distance",
    "offset_distance_change",
]

EXCLUSION_COLUMNS = [
    "participant_id",
    "included",
    "reason",
]
