"""Writing of the pipeline's output tables."""

from pathlib import Path

import pandas as pd

OUTPUT_FORMATS = ["parquet", "csv"]


def save_table(
    df: pd.DataFrame,
    output_dir: str | Path,
    name: str,
    output_format: str = "parquet",
    compression: str | None = "snappy",
) -> Path:
    """Write an output table to ``output_dir/name.{parquet,csv}``.

    Args:
        df: Table to write (index is dropped)
        output_dir: Directory to write into, created if missing
        name: File stem, e.g. 'drift' or 'exclusions'
        output_format: 'parquet' or 'csv'
        compression: Parquet codec ('snappy', 'gzip', 'brotli', or None);
            ignored for CSV

    Returns:
        Path of the written file
    """
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{name}.{output_format}"

    if output_format == "parquet":
        df.to_parquet(output_path, compression=compression, index=False)
    else:
        df.to_csv(output_path, index=False)

    return output_path
