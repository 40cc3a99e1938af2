"""Batch driver for the validation quality pipeline.

Runs, for every participant independently:
    event log -> QualityRecords -> PhaseBoundaries -> ValidationPair
              -> DriftReport -> ExclusionDecision

Participants share no state, so they can be processed in parallel (one
participant per worker). A failure for one participant is reported in its
result dict and turned into an exclusion; it never stops the batch.
"""

from __future__ import annotations

import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import pandas as pd
from tqdm import tqdm

from .constants import (
    DEFAULT_SKIP_PARTICIPANTS,
    ERROR_THRESHOLD_DEG,
    N_PHASE_MARKERS,
    RECORDING_TIME_COL,
    REVALIDATION_GAP_MS,
)
from .drift import IncompleteQualityRecordError, compute_drift, drift_to_df
from .exclusion import decide_exclusion, decisions_to_df, summarize_exclusions
from .loader import load_participants, read_skip_file
from .matcher import find_duplicate_times, match_validations
from .parser import parse_event_log
from .phases import MalformedRecordingError, boundaries_to_df, resolve_phase_boundaries
from .utils import save_table


def process_participant(
    participant_id: str | int,
    events: pd.DataFrame | None,
    recordings: pd.DataFrame | None,
    threshold: float = ERROR_THRESHOLD_DEG,
    gap_ms: int = REVALIDATION_GAP_MS,
) -> dict:
    """Run the full pipeline for one participant.

    Args:
        participant_id: Participant id
        events: Event log (message, start_time), or None if missing
        recordings: Recordings log (time), or None if missing
        threshold: Maximum acceptable average error in degrees
        gap_ms: Minimum delay after task end for a revalidation to count

    Returns:
        Dict with status ('success' or 'error'), participant_id, n_records,
        boundaries, pair, drift, decision, warnings and error.
    """
    result = {
        "status": "success",
        "participant_id": participant_id,
        "n_records": 0,
        "boundaries": None,
        "pair": None,
        "drift": None,
        "decision": None,
        "warnings": [],
        "error": None,
    }

    try:
        if events is None:
            result["warnings"].append("No event log")
            records = []
        else:
            records = parse_event_log(events, participant_id)
        result["n_records"] = len(records)

        if recordings is None:
            raise MalformedRecordingError(f"No recordings log for participant {participant_id}")

        boundaries = resolve_phase_boundaries(recordings, participant_id)
        result["boundaries"] = boundaries

        n_markers = int(recordings[RECORDING_TIME_COL].notna().sum())
        if n_markers > N_PHASE_MARKERS:
            result["warnings"].append(
                f"{n_markers} phase markers found, using the first {N_PHASE_MARKERS}"
            )

        duplicates = find_duplicate_times(records)
        if duplicates:
            result["warnings"].append(f"Duplicate validation timestamps: {duplicates}")

        pair = match_validations(records, boundaries, gap_ms=gap_ms)
        result["pair"] = pair

        try:
            result["drift"] = compute_drift(pair)
        except IncompleteQualityRecordError as e:
            result["warnings"].append(f"Drift skipped: {e}")

        result["decision"] = decide_exclusion(pair, threshold=threshold)

    except Exception as e:  # pylint: disable=broad-exception-caught
        result["status"] = "error"
        result["error"] = str(e)
        result["decision"] = decide_exclusion(None, participant_id=participant_id)

    return result


def process_batch(  # pylint: disable=too-many-arguments
    participants: dict,
    threshold: float = ERROR_THRESHOLD_DEG,
    gap_ms: int = REVALIDATION_GAP_MS,
    parallel: bool = True,
    n_jobs: int | None = None,
    progress: bool = True,
) -> list[dict]:
    """Run the pipeline for many participants.

    Args:
        participants: Dict mapping participant_id to (events, recordings)
        threshold: Maximum acceptable average error in degrees
        gap_ms: Minimum delay after task end for a revalidation to count
        parallel: If True, process participants in separate processes
        n_jobs: Number of worker processes (default: all CPUs)
        progress: If True, show progress bar

    Returns:
        List of participant result dicts, sorted by participant_id
    """
    tasks = list(participants.items())
    results = []

    if parallel and len(tasks) > 1:
        n_jobs = n_jobs or mp.cpu_count()

        with ProcessPoolExecutor(max_workers=n_jobs) as executor:
            future_to_task = {
                executor.submit(
                    process_participant,
                    participant_id,
                    events,
                    recordings,
                    threshold,
                    gap_ms,
                ): participant_id
                for participant_id, (events, recordings) in tasks
            }

            iterator = (
                tqdm(as_completed(future_to_task), total=len(tasks), desc="Checking participants")
                if progress
                else as_completed(future_to_task)
            )

            for future in iterator:
                result = future.result()
                results.append(result)

                if result["status"] == "error" and progress:
                    tqdm.write(f"Error processing {result['participant_id']}: {result['error']}")

    else:
        iterator = tqdm(tasks, desc="Checking participants") if progress else tasks

        for participant_id, (events, recordings) in iterator:
            result = process_participant(participant_id, events, recordings, threshold, gap_ms)
            results.append(result)

            if result["status"] == "error" and progress:
                tqdm.write(f"Error processing {participant_id}: {result['error']}")

    return sorted(results, key=lambda r: r["participant_id"])


def collect_tables(results: list[dict]) -> dict[str, pd.DataFrame]:
    """Gather participant results into the output tables.

    Returns:
        Dict with 'drift', 'exclusions' and 'boundaries' DataFrames
    """
    drift = [r["drift"] for r in results if r["drift"] is not None]
    decisions = [r["decision"] for r in results]
    pairs = [r["pair"] for r in results if r["pair"] is not None]
    boundaries = [r["boundaries"] for r in results if r["boundaries"] is not None]

    return {
        "drift": drift_to_df(drift),
        "exclusions": decisions_to_df(decisions, pairs=pairs),
        "boundaries": boundaries_to_df(boundaries),
    }


def run_quality_check(  # pylint: disable=too-many-arguments
    data_dir: str | Path,
    output_dir: str | Path | None = None,
    threshold: float = ERROR_THRESHOLD_DEG,
    gap_ms: int = REVALIDATION_GAP_MS,
    skip: tuple[str, ...] | list[str] = DEFAULT_SKIP_PARTICIPANTS,
    skip_file: str | Path | None = None,
    output_format: str = "parquet",
    parallel: bool = True,
    n_jobs: int | None = None,
    progress: bool = True,
) -> dict:
    """Load every participant in a directory, run the pipeline, save the tables.

    Args:
        data_dir: Root data directory with events/ and recordings/
        output_dir: Where to write drift/exclusions/boundaries tables.
            If None, nothing is written.
        threshold: Maximum acceptable average error in degrees
        gap_ms: Minimum delay after task end for a revalidation to count
        skip: Participant ids to leave out
        skip_file: Text file with more participant ids to leave out, one per
            line (see read_skip_file)
        output_format: 'parquet' or 'csv'
        parallel: If True, process participants in separate processes
        n_jobs: Number of worker processes
        progress: If True, show progress bars

    Returns:
        Dict with results, tables, summary and output_paths
    """
    if skip_file is not None:
        skip = [*skip, *read_skip_file(skip_file)]

    participants = load_participants(data_dir, skip=skip, progress=progress)

    results = process_batch(
        participants,
        threshold=threshold,
        gap_ms=gap_ms,
        parallel=parallel,
        n_jobs=n_jobs,
        progress=progress,
    )
    tables = collect_tables(results)

    output_paths = {}
    if output_dir is not None:
        for name, df in tables.items():
            output_paths[name] = save_table(df, output_dir, name, output_format=output_format)

    return {
        "results": results,
        "tables": tables,
        "summary": summarize_exclusions([r["decision"] for r in results]),
        "output_paths": output_paths,
    }
