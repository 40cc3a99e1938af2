"""EyeLink validation quality pipeline.

A toolkit for extracting calibration/validation quality records from EyeLink
event logs, measuring drift between the pre-task validation and the
post-task revalidation, and deciding which participants to keep.

Example usage:
    from eyelink_pipeline import (
        compute_drift,
        decide_exclusion,
        match_validations,
        parse_event_log,
        resolve_phase_boundaries,
    )

    records = parse_event_log(events_df, participant_id="007")
    boundaries = resolve_phase_boundaries(recordings_df, participant_id="007")
    pair = match_validations(records, boundaries)
    drift = compute_drift(pair)
    decision = decide_exclusion(pair)

    # Whole dataset (data_dir/events/*.csv, data_dir/recordings/*.csv)
    from eyelink_pipeline import run_quality_check
    output = run_quality_check("data", output_dir="data/quality")
    print(output["summary"])
"""

from .batch import collect_tables, process_batch, process_participant, run_quality_check
from .constants import (
    CALIBRATION_MARKER,
    ERROR_THRESHOLD_DEG,
    REVALIDATION_GAP_MS,
    TOKEN_POSITIONS,
    VALIDATION_MARKER,
)
from .drift import DriftReport, IncompleteQualityRecordError, compute_drift, drift_to_df
from .exclusion import (
    ExclusionDecision,
    decide_exclusion,
    decisions_to_df,
    summarize_exclusions,
)
from .loader import (
    get_participant_files,
    load_event_log,
    load_participants,
    load_recordings,
    read_skip_file,
)
from .matcher import (
    ValidationPair,
    match_validations,
    select_post_revalidation,
    select_pre_validation,
)
from .parser import (
    QualityRecord,
    parse_event_log,
    parse_filename,
    parse_message,
    records_to_df,
)
from .phases import (
    MalformedRecordingError,
    PhaseBoundaries,
    compute_phase_durations,
    resolve_phase_boundaries,
)
from .utils import save_table

__version__ = "0.1.0"

__all__ = [
    # Constants
    "CALIBRATION_MARKER",
    "VALIDATION_MARKER",
    "TOKEN_POSITIONS",
    "ERROR_THRESHOLD_DEG",
    "REVALIDATION_GAP_MS",
    # Parser
    "QualityRecord",
    "parse_message",
    "parse_event_log",
    "parse_filename",
    "records_to_df",
    # Phases
    "PhaseBoundaries",
    "MalformedRecordingError",
    "resolve_phase_boundaries",
    "compute_phase_durations",
    # Matcher
    "ValidationPair",
    "select_pre_validation",
    "select_post_revalidation",
    "match_validations",
    # Drift
    "DriftReport",
    "IncompleteQualityRecordError",
    "compute_drift",
    "drift_to_df",
    # Exclusion
    "ExclusionDecision",
    "decide_exclusion",
    "decisions_to_df",
    "summarize_exclusions",
    # Loader
    "load_event_log",
    "load_recordings",
    "get_participant_files",
    "load_participants",
    "read_skip_file",
    # Batch
    "process_participant",
    "process_batch",
    "collect_tables",
    "run_quality_check",
    # Utils
    "save_table",
]
