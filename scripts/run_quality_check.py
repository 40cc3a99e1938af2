#!/usr/bin/env python3
"""Validation quality check for the eye-tracking sessions.

Reads data/events/*.csv and data/recordings/*.csv, computes validation drift
per participant and writes the drift, exclusion and phase boundary tables.

Usage:
    python scripts/run_quality_check.py                        # data/ -> data/quality/
    python scripts/run_quality_check.py --data-dir raw --output-dir out
    python scripts/run_quality_check.py --threshold 2.0 --format csv
    python scripts/run_quality_check.py --skip 003 013 --sequential
    python scripts/run_quality_check.py --skip-file data/raw/incomplete/participants.txt
"""

import argparse
from pathlib import Path

from eyelink_pipeline import ERROR_THRESHOLD_DEG, REVALIDATION_GAP_MS, run_quality_check
from eyelink_pipeline.phases import compute_phase_durations


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Eye-tracker validation quality check")
    parser.add_argument("--data-dir", type=Path, default=Path("data"))
    parser.add_argument("--output-dir", type=Path, default=Path("data") / "quality")
    parser.add_argument(
        "--threshold",
        type=float,
        default=ERROR_THRESHOLD_DEG,
        help=f"Maximum average validation error in degrees (default: {ERROR_THRESHOLD_DEG})",
    )
    parser.add_argument(
        "--gap-ms",
        type=int,
        default=REVALIDATION_GAP_MS,
        help="Minimum delay after task end for a revalidation to count (ms)",
    )
    parser.add_argument("--skip", nargs="*", default=[], help="Participant ids to leave out")
    parser.add_argument(
        "--skip-file",
        type=Path,
        default=None,
        help="Text file of incomplete participants to leave out, one per line",
    )
    parser.add_argument("--format", choices=["parquet", "csv"], default="parquet")
    parser.add_argument("--sequential", action="store_true", help="Disable parallel processing")
    parser.add_argument("--n-jobs", type=int, default=None)
    return parser.parse_args()


def main():
    args = parse_args()

    output = run_quality_check(
        args.data_dir,
        output_dir=args.output_dir,
        threshold=args.threshold,
        gap_ms=args.gap_ms,
        skip=args.skip,
        skip_file=args.skip_file,
        output_format=args.format,
        parallel=not args.sequential,
        n_jobs=args.n_jobs,
    )

    summary = output["summary"]
    print(f"\n{summary['n_participants']} participants")
    print(f"{summary['n_included']} included, {summary['n_excluded']} excluded")
    for reason, count in summary["reasons"].items():
        print(f"  {reason}: {count}")

    print("\nTask durations (min):")
    for result in output["results"]:
        if result["boundaries"] is None:
            continue
        durations = compute_phase_durations(result["boundaries"], unit="min")
        print(f"  {result['participant_id']}: {durations['task_duration']:.1f}")

    for result in output["results"]:
        for warning in result["warnings"]:
            print(f"Warning ({result['participant_id']}): {warning}")
        if result["status"] == "error":
            print(f"Error ({result['participant_id']}): {result['error']}")

    for name, path in output["output_paths"].items():
        print(f"Saved {name}: {path}")


if __name__ == "__main__":
    main()
