"""Data preparation utilities for experiments."""

from streamcount.tools.extract import ColumnNotFoundError, extract_column

__all__ = ["ColumnNotFoundError", "extract_column"]
