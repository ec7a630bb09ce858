"""CVM estimator for cardinality (distinct count) estimation.

The CVM algorithm (Chakraborty, Vinodchandran, Meel) estimates the number of
distinct elements in a stream by keeping a uniformly thinned sample of them.
Every retained item survives with the same probability p = 2^-level; when
the sample fills up, p is halved and each retained item is kept with a fair
coin flip. The estimate is then |sample| / p.

Key properties:
- Space: O(capacity) items
- Update: O(1) amortized; O(capacity) on an adaptation
- Query: O(1)
- Error: shrinks like 1/sqrt(capacity); no hashing of items required

This is ideal for:
- Counting distinct tokens, addresses, or identifiers in a single pass
- Any stream where items are hashable but a good hash family is unavailable

Reference:
    Chakraborty, Vinodchandran, Meel. "Distinct Elements in Streams: An
    Algorithm for the (Text) Book" (ESA 2022)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Hashable
from typing import Generic, TypeVar

from streamcount.sketching.base import CardinalitySketch, InvalidConfiguration
from streamcount.sketching.random_source import RandomSource, default_source

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class CVMEstimator(CardinalitySketch, Generic[T]):
    """CVM sample-and-halve estimator for streaming cardinality.

    Keeps at most ``capacity - 1`` items between calls. An item that is
    already retained is re-sampled on every occurrence, so the sample stays
    a uniform 2^-level sample of the distinct items seen so far.

    Args:
        capacity: Sample size that triggers an adaptation (halving of the
            retention probability). Must be >= 1.
        seed: Seed for the generator the estimator owns.
        rng: Injected random source. Mutually exclusive with ``seed``.

    Example:
        estimator = CVMEstimator[str](capacity=1000, seed=7)

        for address in addresses:
            estimator.ingest(address)

        print(f"~{estimator.estimate()} distinct addresses")
    """

    def __init__(
        self,
        capacity: int,
        seed: int | None = None,
        rng: RandomSource | None = None,
    ):
        """Initialize the estimator.

        Raises:
            InvalidConfiguration: If capacity is not an integer >= 1, if rng
                does not provide ``randrange``, or if both seed and rng are
                given.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidConfiguration(
                f"capacity must be an integer, got {type(capacity).__name__}"
            )
        if capacity < 1:
            raise InvalidConfiguration(f"capacity must be >= 1, got {capacity}")
        if rng is not None and seed is not None:
            raise InvalidConfiguration("pass either seed or rng, not both")
        if rng is not None and not isinstance(rng, RandomSource):
            raise InvalidConfiguration(
                f"rng must provide randrange(stop), got {type(rng).__name__}"
            )

        self._capacity = capacity
        # dict keys keep insertion order, so coin flips are consumed in an
        # order that depends only on the ingest history
        self._retained: dict[T, None] = {}
        self._level = 0
        self._rng = rng if rng is not None else default_source(seed)
        self._total_count = 0

    @property
    def capacity(self) -> int:
        """Sample size that triggers an adaptation."""
        return self._capacity

    @property
    def level(self) -> int:
        """Number of halvings applied so far. Never decreases."""
        return self._level

    @property
    def adaptations(self) -> int:
        """Number of adaptation events. Each one raises the level by exactly 1."""
        return self._level

    @property
    def retention_probability(self) -> float:
        """Current per-item retention probability, 2^-level.

        Underflows to 0.0 past level ~1074; use ``level`` for exact math.
        """
        return 2.0 ** -self._level

    def _sampled(self) -> bool:
        """Draw once and report whether the 2^-level event happened."""
        return self._rng.randrange(1 << self._level) == 0

    def ingest(self, item: T) -> None:
        """Process one stream element.

        Args:
            item: The item to process. Must be hashable.
        """
        self._total_count += 1

        if item in self._retained:
            if self._level > 0 and not self._sampled():
                del self._retained[item]
        elif self._level == 0 or self._sampled():
            self._retained[item] = None

        while len(self._retained) >= self._capacity:
            self._adapt()

    def _adapt(self) -> None:
        """Halve the retention probability and thin the sample to match.

        Every retained item gets its own fair coin. All coins are flipped
        against the current membership before anything is evicted.
        """
        self._level += 1
        before = len(self._retained)

        evicted = [item for item in self._retained if self._rng.randrange(2) != 0]
        for item in evicted:
            del self._retained[item]

        logger.debug(
            "Adapted to level %d: retained %d -> %d (capacity %d)",
            self._level,
            before,
            len(self._retained),
            self._capacity,
        )

    def add(self, item: T, count: int = 1) -> None:
        """Ingest an item ``count`` times.

        Args:
            item: The item to add. Must be hashable.
            count: Number of occurrences. Each one is ingested separately.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        for _ in range(count):
            self.ingest(item)

    def estimate(self) -> int:
        """Estimate the number of distinct items: |retained| * 2^level."""
        return len(self._retained) << self._level

    def cardinality(self) -> int:
        """Estimate the number of distinct items (alias of estimate)."""
        return self.estimate()

    def size(self) -> int:
        """Number of items physically retained."""
        return len(self._retained)

    def retained(self) -> frozenset[T]:
        """Snapshot of the retained items."""
        return frozenset(self._retained)

    @property
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes (container plus item references)."""
        return sys.getsizeof(self._retained) + sys.getsizeof(self)

    @property
    def item_count(self) -> int:
        """Total count of items ingested (not distinct count)."""
        return self._total_count

    def __len__(self) -> int:
        return len(self._retained)

    def __contains__(self, item: object) -> bool:
        return item in self._retained

    def __repr__(self) -> str:
        return (
            f"CVMEstimator(capacity={self._capacity}, "
            f"level={self._level}, "
            f"retained={len(self._retained)}, "
            f"estimate={self.estimate()})"
        )
