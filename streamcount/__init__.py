"""streamcount: streaming distinct-count estimation with the CVM algorithm.

The library is silent by default (a NullHandler is attached to the
``streamcount`` logger). Use the helpers re-exported from
``streamcount.logging_config`` to turn logging on.

Example:
    from streamcount import CVMEstimator

    estimator = CVMEstimator[str](capacity=1000, seed=42)
    for word in words:
        estimator.ingest(word)
    print(f"~{estimator.estimate()} distinct words")
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from streamcount.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from streamcount.sketching import (
    CardinalitySketch,
    CVMEstimator,
    InvalidConfiguration,
    RandomSource,
    Sketch,
)

__version__ = "0.1.0"

__all__ = [
    "CVMEstimator",
    "CardinalitySketch",
    "InvalidConfiguration",
    "RandomSource",
    "Sketch",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]
