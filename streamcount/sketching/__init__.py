"""Streaming/sketching algorithms for approximate statistics.

This module provides space-efficient algorithms for computing approximate
statistics over data streams. All of them share common properties:
- Bounded memory usage (configurable)
- Single-pass processing (add items one at a time)
- Reproducible (optional seed or injected random source)

Quick Reference:
    CVMEstimator: Cardinality (distinct count) estimation by sample-and-halve

Example:
    from streamcount.sketching import CVMEstimator

    # Count unique visitors
    cvm = CVMEstimator[str](capacity=1000, seed=42)
    for visitor_id in visitors:
        cvm.ingest(visitor_id)
    print(f"~{cvm.estimate()} unique visitors")
"""

# Base protocols
from streamcount.sketching.base import (
    CardinalitySketch,
    InvalidConfiguration,
    Sketch,
)

# Cardinality estimation
from streamcount.sketching.cvm import CVMEstimator

# Randomness
from streamcount.sketching.random_source import RandomSource, default_source

__all__ = [
    # Cardinality estimation
    "CVMEstimator",
    "CardinalitySketch",
    "InvalidConfiguration",
    # Randomness
    "RandomSource",
    # Protocols
    "Sketch",
    "default_source",
]
