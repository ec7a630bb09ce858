"""Random source protocol for randomized sketches.

Randomized sketches never reach for the module-level ``random`` functions.
Each instance owns a generator (``random.Random(seed)``) or is handed one,
so tests can substitute a seeded or scripted source and replay a run
step by step.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Uniform integer draws over a bounded range.

    ``random.Random`` and its subclasses (including ``random.SystemRandom``)
    satisfy this protocol as-is.
    """

    def randrange(self, stop: int) -> int:
        """Return a uniformly distributed integer in ``[0, stop)``.

        Args:
            stop: Exclusive upper bound. Always >= 1.
        """
        ...


def default_source(seed: int | None = None) -> RandomSource:
    """Create the generator a sketch owns when none is injected.

    Args:
        seed: Seed for reproducibility. None seeds from system entropy.
    """
    return random.Random(seed)
