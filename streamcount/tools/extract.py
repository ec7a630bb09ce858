"""Extract one CSV column into a token file.

Turns a tabular dataset (for example a traffic log whose first column is the
client IP address) into the whitespace-separated token file the experiment
runner reads: one value per line, in row order.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_CHUNKSIZE = 100_000


class ColumnNotFoundError(KeyError):
    """Raised when the requested column is not in the CSV header."""


def _resolve_column(header: list[str], column: int | str) -> str:
    if isinstance(column, int):
        if not 0 <= column < len(header):
            raise ColumnNotFoundError(
                f"column index {column} out of range for {len(header)} columns"
            )
        return header[column]
    if column not in header:
        raise ColumnNotFoundError(f"column {column!r} not in header {header}")
    return column


def extract_column(
    input_path: str | Path,
    output_path: str | Path,
    column: int | str = 0,
    chunksize: int = DEFAULT_CHUNKSIZE,
) -> int:
    """Copy one column of a CSV file to a text file, one value per line.

    The CSV must have a header row. The file is read in chunks, so inputs
    larger than memory are fine. Empty cells are skipped.

    Args:
        input_path: CSV file to read.
        output_path: Text file to write. Parent directories are created.
        column: Column name, or zero-based position in the header.
        chunksize: Rows per chunk.

    Returns:
        Number of values written.

    Raises:
        FileNotFoundError: If input_path does not exist.
        ColumnNotFoundError: If the column is not in the header.
    """
    if chunksize < 1:
        raise ValueError(f"chunksize must be positive, got {chunksize}")

    header = list(pd.read_csv(input_path, nrows=0, dtype=str).columns)
    name = _resolve_column(header, column)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with open(output_path, "w", encoding="utf-8") as out:
        reader = pd.read_csv(
            input_path,
            usecols=[name],
            dtype=str,
            keep_default_na=False,
            chunksize=chunksize,
        )
        for chunk in reader:
            values = chunk[name].str.strip()
            values = values[values != ""]
            for value in values:
                out.write(value)
                out.write("\n")
            written += len(values)

    logger.info("Extracted %d values of column %r to %s", written, name, output_path)
    return written
