"""Loading of per-participant event and recordings logs."""

from pathlib import Path

import pandas as pd
from tqdm import tqdm

from .constants import EVENT_MESSAGE_COL, EVENT_TIME_COL, RECORDING_TIME_COL
from .parser import parse_filename

EVENTS_DIR = "events"
RECORDINGS_DIR = "recordings"


def load_event_log(filepath: str | Path) -> pd.DataFrame:
    """Load a participant's event log CSV.

    Args:
        filepath: Path to the CSV file

    Returns:
        DataFrame with at least the message and start_time columns
    """
    df = pd.read_csv(filepath)

    for col in (EVENT_MESSAGE_COL, EVENT_TIME_COL):
        if col not in df.columns:
            raise ValueError(f"Event log {Path(filepath).name} must contain '{col}' column")

    return df


def load_recordings(filepath: str | Path) -> pd.DataFrame:
    """Load a participant's recordings log CSV.

    Args:
        filepath: Path to the CSV file

    Returns:
        DataFrame with the time column
    """
    df = pd.read_csv(filepath)

    if RECORDING_TIME_COL not in df.columns:
        raise ValueError(
            f"Recordings log {Path(filepath).name} must contain '{RECORDING_TIME_COL}' column"
        )

    return df


def get_participant_files(
    data_dir: str | Path,
    pattern: str = "*.csv",
) -> dict[str, dict[str, Path | None]]:
    """Pair each participant's event log with their recordings log.

    Expects ``data_dir/events/`` and ``data_dir/recordings/``; files are
    matched on the participant id parsed from their names. Files whose
    names carry no participant id are ignored.

    Args:
        data_dir: Root data directory
        pattern: Glob pattern to match files in both subdirectories

    Returns:
        Dict mapping participant_id to {"events": Path | None,
        "recordings": Path | None}, sorted by participant_id
    """
    data_dir = Path(data_dir)
    events_dir = data_dir / EVENTS_DIR

    if not events_dir.is_dir():
        raise FileNotFoundError(f"Directory not found: {events_dir}")

    participants: dict[str, dict[str, Path | None]] = {}
    for kind, subdir in (("events", EVENTS_DIR), ("recordings", RECORDINGS_DIR)):
        for filepath in sorted((data_dir / subdir).glob(pattern)):
            participant_id = parse_filename(filepath.name)["participant_id"]
            if participant_id is None:
                continue
            entry = participants.setdefault(participant_id, {"events": None, "recordings": None})
            entry[kind] = filepath

    if not participants:
        raise ValueError(f"No participant files matching '{pattern}' found in {data_dir}")

    return dict(sorted(participants.items()))


def load_participants(
    data_dir: str | Path,
    pattern: str = "*.csv",
    skip: tuple[str, ...] | list[str] = (),
    progress: bool = True,
) -> dict[str, tuple[pd.DataFrame | None, pd.DataFrame | None]]:
    """Load the event and recordings logs of every participant in a directory.

    Args:
        data_dir: Root data directory (see get_participant_files)
        pattern: Glob pattern to match files
        skip: Participant ids to leave out (e.g. incomplete sessions)
        progress: If True, show progress bar

    Returns:
        Dict mapping participant_id to (events, recordings); a missing log
        is None.
    """
    files = get_participant_files(data_dir, pattern=pattern)
    items = [(pid, paths) for pid, paths in files.items() if pid not in skip]

    iterator = tqdm(items, desc="Loading participants") if progress else items

    loaded = {}
    for participant_id, paths in iterator:
        events = load_event_log(paths["events"]) if paths["events"] else None
        recordings = load_recordings(paths["recordings"]) if paths["recordings"] else None
        loaded[participant_id] = (events, recordings)

    return loaded


def read_skip_file(filepath: str | Path) -> list[str]:
    """Read participants to leave out, one per line.

    Lines may hold a full code (``CSN003``) or the bare id (``003``); blank
    lines and lines starting with ``#`` are ignored.

    Args:
        filepath: Path to the text file (e.g. raw/incomplete/participants.txt)

    Returns:
        Participant ids in file order, without duplicates
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"Skip file not found: {filepath}")

    skip = []
    for line in filepath.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        participant_id = parse_filename(line)["participant_id"] or line
        if participant_id not in skip:
            skip.append(participant_id)

    return skip
