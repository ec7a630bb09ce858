"""Token input for experiments.

A token file is plain UTF-8 text; tokens are separated by any whitespace.
The field extractor in ``streamcount.tools.extract`` writes files in this
shape (one value per line).
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path


def read_tokens(path: str | Path) -> list[str]:
    """Read every whitespace-separated token of a text file into memory.

    Experiments replay the same stream for many trials, so the tokens are
    decoded once and reused.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    return Path(path).read_text(encoding="utf-8").split()


def iter_tokens(path: str | Path) -> Iterator[str]:
    """Stream whitespace-separated tokens from a text file, line by line."""
    with open(path, encoding="utf-8") as f:
        for line in f:
            yield from line.split()
