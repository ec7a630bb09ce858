"""Base protocols for streaming/sketching algorithms.

Sketching algorithms provide approximate statistics over data streams using
bounded memory. They trade exact accuracy for space efficiency, making them
ideal for streams too large to hold in memory.

This module defines the protocols that sketch implementations follow:
- Sketch: Base protocol with common operations (add, memory, item count)
- CardinalitySketch: For cardinality estimation (CVM)

Merging and clearing are deliberately absent: sketches here are
single-writer, grow-only structures.
"""

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")


class Sketch(ABC):
    """Base protocol for all streaming/sketching algorithms.

    Sketches process a stream of items and provide approximate answers to
    queries about the stream. They support:
    - Adding items (with optional counts)
    - Estimating memory usage
    - Reporting how many items were seen

    Sketches that use randomization accept a `seed` parameter (or an injected
    random source) for reproducibility.
    """

    @abstractmethod
    def add(self, item: T, count: int = 1) -> None:
        """Add an item to the sketch.

        Args:
            item: The item to add.
            count: Number of occurrences to add (default 1).
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes.

        Returns:
            Approximate memory footprint of the sketch data structures.
        """

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Total count of items added to the sketch.

        Returns:
            Sum of all counts added via add().
        """


class CardinalitySketch(Sketch):
    """Protocol for sketches that estimate cardinality (distinct count).

    Used for estimating the number of unique items in a stream without
    storing all items.

    Implementations: CVMEstimator
    """

    @abstractmethod
    def cardinality(self) -> int:
        """Estimate the number of distinct items.

        Returns:
            Estimated count of unique items added.
        """


class InvalidConfiguration(ValueError):
    """Raised when a sketch is constructed with unusable parameters.

    A ValueError subclass, like the other parameter errors the sketches raise.
    """
