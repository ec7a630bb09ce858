"""Tests for the CVM cardinality estimator."""

import logging
import random

import pytest

from streamcount.sketching import CardinalitySketch, CVMEstimator, InvalidConfiguration


class TestCVMEstimatorCreation:
    """Tests for CVMEstimator creation and configuration."""

    def test_creates_with_capacity(self):
        """CVMEstimator starts empty at level 0."""
        cvm = CVMEstimator[int](capacity=100)

        assert cvm.capacity == 100
        assert cvm.level == 0
        assert cvm.size() == 0
        assert cvm.estimate() == 0
        assert cvm.item_count == 0

    def test_is_cardinality_sketch(self):
        """CVMEstimator implements the cardinality protocol."""
        assert isinstance(CVMEstimator[int](capacity=10), CardinalitySketch)

    def test_accepts_capacity_one(self):
        """Capacity 1 is the smallest valid capacity."""
        cvm = CVMEstimator[int](capacity=1, seed=1)

        assert cvm.capacity == 1

    @pytest.mark.parametrize("capacity", [0, -1, -100])
    def test_rejects_capacity_below_one(self, capacity):
        """Rejects capacity < 1."""
        with pytest.raises(InvalidConfiguration, match="must be >= 1"):
            CVMEstimator[int](capacity=capacity)

    @pytest.mark.parametrize("capacity", [2.5, "4", None, True])
    def test_rejects_non_integer_capacity(self, capacity):
        """Rejects capacities that are not plain integers."""
        with pytest.raises(InvalidConfiguration, match="must be an integer"):
            CVMEstimator[int](capacity=capacity)

    def test_invalid_configuration_is_value_error(self):
        """InvalidConfiguration can be caught as ValueError."""
        with pytest.raises(ValueError):
            CVMEstimator[int](capacity=0)

    def test_rejects_seed_and_rng_together(self):
        """seed and rng are mutually exclusive."""
        with pytest.raises(InvalidConfiguration, match="not both"):
            CVMEstimator[int](capacity=10, seed=1, rng=random.Random(1))

    def test_rejects_rng_without_randrange(self):
        """An injected source must provide randrange."""
        with pytest.raises(InvalidConfiguration, match="randrange"):
            CVMEstimator[int](capacity=10, rng=object())

    def test_accepts_random_instance(self):
        """random.Random is a valid random source."""
        cvm = CVMEstimator[int](capacity=10, rng=random.Random(7))
        cvm.ingest(1)

        assert cvm.size() == 1

    def test_works_with_tuples(self):
        """Works with tuple items."""
        cvm = CVMEstimator[tuple](capacity=10)
        cvm.ingest((1, "a"))
        cvm.ingest((2, "b"))
        cvm.ingest((1, "a"))

        assert cvm.estimate() == 2


class TestWorkedTransition:
    """The capacity-4 transition, driven step by step by scripted draws."""

    def test_fill_adapt_and_skip(self, scripted_random):
        """A, B, C, D fill the sample; coins keep B and D; E is skipped."""
        rng = scripted_random([1, 0, 1, 0, 1])
        cvm = CVMEstimator[str](capacity=4, rng=rng)

        for item in "ABC":
            cvm.ingest(item)
        assert cvm.retained() == {"A", "B", "C"}
        assert cvm.level == 0
        assert rng.requests == []

        cvm.ingest("D")
        assert cvm.retained() == {"B", "D"}
        assert cvm.level == 1
        # one fair coin per item of the pre-eviction snapshot
        assert rng.requests == [2, 2, 2, 2]

        cvm.ingest("E")
        assert cvm.retained() == {"B", "D"}
        assert cvm.level == 1
        assert rng.requests == [2, 2, 2, 2, 2]

        assert cvm.estimate() == 4
        assert rng.remaining == 0

    def test_new_item_inserted_on_zero_draw(self, scripted_random):
        """At level 1 a new item is inserted when the draw is 0."""
        rng = scripted_random([1, 0, 1, 0, 0])
        cvm = CVMEstimator[str](capacity=4, rng=rng)
        for item in "ABCDE":
            cvm.ingest(item)

        assert cvm.retained() == {"B", "D", "E"}
        assert cvm.estimate() == 6

    def test_retained_item_removed_on_nonzero_draw(self, scripted_random):
        """At level 1 a retained item survives only a zero draw."""
        rng = scripted_random([1, 0, 1, 0, 1, 0])
        cvm = CVMEstimator[str](capacity=4, rng=rng)
        for item in "ABCD":
            cvm.ingest(item)

        cvm.ingest("B")
        assert "B" not in cvm

        cvm.ingest("D")
        assert "D" in cvm
        assert cvm.retained() == {"D"}

    def test_draw_range_doubles_with_level(self, scripted_random):
        """Draws at level L are taken from [0, 2^L)."""
        # capacity 2: A, B fill; coins evict A -> level 1, {B}
        # C (draw 0) inserted -> {B, C} full; coins evict B -> level 2, {C}
        # D drawn from [0, 4)
        rng = scripted_random([1, 0, 0, 1, 0, 3])
        cvm = CVMEstimator[str](capacity=2, rng=rng)
        for item in "ABCD":
            cvm.ingest(item)

        assert cvm.level == 2
        assert cvm.retained() == {"C"}
        assert rng.requests == [2, 2, 2, 2, 2, 4]


class TestAdaptation:
    """Tests for the halving step."""

    def test_repeats_until_below_capacity(self, scripted_random):
        """If the coins evict nothing, another adaptation follows."""
        rng = scripted_random([0, 0, 1, 0])
        cvm = CVMEstimator[str](capacity=2, rng=rng)
        cvm.ingest("A")
        cvm.ingest("B")

        assert cvm.level == 2
        assert cvm.adaptations == 2
        assert cvm.retained() == {"B"}
        assert cvm.estimate() == 4

    def test_capacity_one_never_retains(self, scripted_random):
        """With capacity 1 every insertion immediately triggers an adaptation."""
        rng = scripted_random([1, 0, 1])
        cvm = CVMEstimator[str](capacity=1, rng=rng)

        cvm.ingest("A")
        assert cvm.size() == 0
        assert cvm.level == 1

        cvm.ingest("A")
        assert cvm.size() == 0
        assert cvm.level == 2

    def test_retention_probability_halves(self, scripted_random):
        """retention_probability is 2^-level."""
        cvm = CVMEstimator[str](capacity=2, rng=scripted_random([1, 0]))
        assert cvm.retention_probability == 1.0

        cvm.ingest("A")
        cvm.ingest("B")
        assert cvm.retention_probability == 0.5

    def test_logs_adaptation_at_debug(self, scripted_random, caplog):
        """Each adaptation is logged with the new level."""
        caplog.set_level(logging.DEBUG, logger="streamcount.sketching.cvm")
        cvm = CVMEstimator[str](capacity=2, rng=scripted_random([1, 0]))
        cvm.ingest("A")
        cvm.ingest("B")

        assert "Adapted to level 1: retained 2 -> 1" in caplog.text


class TestCVMEstimatorProperties:
    """Invariants that must hold for any stream."""

    def test_no_thinning_below_capacity(self):
        """With capacity > n distinct items the estimate is exact."""
        cvm = CVMEstimator[int](capacity=101, seed=3)
        for _ in range(3):
            for i in range(100):
                cvm.ingest(i)

        assert cvm.level == 0
        assert cvm.retained() == set(range(100))
        assert cvm.estimate() == 100

    def test_level_zero_draws_nothing(self, scripted_random):
        """Below capacity at level 0, no random draws are consumed."""
        rng = scripted_random([])
        cvm = CVMEstimator[int](capacity=10, rng=rng)
        for i in [1, 2, 1, 3, 2, 1]:
            cvm.ingest(i)

        assert rng.requests == []
        assert cvm.estimate() == 3

    def test_level_zero_retention(self):
        """At level 0 a retained item is never removed by re-ingesting it."""
        cvm = CVMEstimator[int](capacity=50, seed=11)
        for i in range(40):
            cvm.ingest(i)
            for j in range(i + 1):
                cvm.ingest(j)
                assert j in cvm

    def test_level_monotonic_and_size_bounded(self):
        """Level never decreases and size stays below capacity after each ingest."""
        source = random.Random(5)
        cvm = CVMEstimator[int](capacity=8, seed=6)

        previous_level = cvm.level
        for _ in range(5000):
            cvm.ingest(source.randrange(500))
            assert cvm.level >= previous_level
            assert cvm.size() < cvm.capacity
            previous_level = cvm.level

        assert cvm.level > 0

    def test_estimate_is_size_times_power_of_two(self):
        """estimate() == size() * 2^level at every step."""
        cvm = CVMEstimator[int](capacity=16, seed=9)
        for i in range(2000):
            cvm.ingest(i % 700)
            assert cvm.estimate() == cvm.size() * 2**cvm.level

    def test_deterministic_replay(self):
        """Same seed and stream give identical state after every step."""
        words = random.Random(1)
        stream = [f"w{words.randrange(400)}" for _ in range(3000)]
        a = CVMEstimator[str](capacity=32, seed=42)
        b = CVMEstimator[str](capacity=32, rng=random.Random(42))

        for item in stream:
            a.ingest(item)
            b.ingest(item)
            assert a.level == b.level
            assert a.retained() == b.retained()

    def test_different_seeds_may_differ(self):
        """Different seeds generally thin differently."""
        a = CVMEstimator[int](capacity=32, seed=1)
        b = CVMEstimator[int](capacity=32, seed=2)
        for i in range(5000):
            a.ingest(i)
            b.ingest(i)

        assert a.retained() != b.retained()


class TestCVMEstimatorAdd:
    """Tests for the Sketch protocol entry point."""

    def test_add_counts_every_occurrence(self):
        """add(item, count) ingests the item count times."""
        cvm = CVMEstimator[str](capacity=10)
        cvm.add("x", count=3)

        assert cvm.item_count == 3
        assert cvm.estimate() == 1

    def test_add_zero_count_no_effect(self):
        """Adding with count=0 has no effect."""
        cvm = CVMEstimator[str](capacity=10)
        cvm.add("x", count=0)

        assert cvm.item_count == 0
        assert cvm.size() == 0

    def test_rejects_negative_count(self):
        """Rejects negative count."""
        cvm = CVMEstimator[str](capacity=10)
        with pytest.raises(ValueError, match="non-negative"):
            cvm.add("x", count=-1)

    def test_cardinality_matches_estimate(self):
        """cardinality() is the protocol name for estimate()."""
        cvm = CVMEstimator[int](capacity=20, seed=4)
        for i in range(500):
            cvm.add(i)

        assert cvm.cardinality() == cvm.estimate()


class TestCVMEstimatorAccessors:
    """Tests for diagnostic accessors."""

    def test_len_and_contains(self):
        cvm = CVMEstimator[str](capacity=10)
        cvm.ingest("a")
        cvm.ingest("b")

        assert len(cvm) == 2
        assert "a" in cvm
        assert "z" not in cvm

    def test_retained_is_snapshot(self):
        """retained() does not change when the estimator does."""
        cvm = CVMEstimator[str](capacity=10)
        cvm.ingest("a")
        snapshot = cvm.retained()
        cvm.ingest("b")

        assert snapshot == frozenset({"a"})

    def test_memory_bytes_positive(self):
        cvm = CVMEstimator[int](capacity=10)

        assert cvm.memory_bytes > 0

    def test_repr(self):
        cvm = CVMEstimator[int](capacity=10)
        cvm.ingest(1)

        assert repr(cvm) == "CVMEstimator(capacity=10, level=0, retained=1, estimate=1)"
