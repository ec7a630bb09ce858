"""Runs capacity sweeps of the CVM estimator against a known distinct count."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass, field

from streamcount.experiment.config import ConfigurationError, ExperimentConfig
from streamcount.experiment.tokens import read_tokens
from streamcount.sketching import CVMEstimator, RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialResult:
    """Outcome of feeding the whole stream through one estimator."""

    capacity: int
    estimate: int
    absolute_error: int
    relative_error: float
    elapsed_s: float


@dataclass
class CapacityResult:
    """All trials run at one capacity."""

    capacity: int
    error_threshold: float
    trials: list[TrialResult] = field(default_factory=list)

    @property
    def accurate_trials(self) -> int:
        """Trials whose relative error is below the threshold."""
        return sum(1 for t in self.trials if t.relative_error < self.error_threshold)

    @property
    def confidence(self) -> float:
        """Fraction of trials whose relative error is below the threshold."""
        if not self.trials:
            return 0.0
        return self.accurate_trials / len(self.trials)

    @property
    def mean_relative_error(self) -> float:
        if not self.trials:
            return 0.0
        return sum(t.relative_error for t in self.trials) / len(self.trials)

    @property
    def mean_elapsed_s(self) -> float:
        if not self.trials:
            return 0.0
        return sum(t.elapsed_s for t in self.trials) / len(self.trials)


@dataclass
class ExperimentResult:
    """A full sweep: one CapacityResult per tested capacity."""

    true_distinct: int
    error_threshold: float
    stream_length: int
    capacities: list[CapacityResult] = field(default_factory=list)

    @property
    def trials(self) -> list[TrialResult]:
        return [t for c in self.capacities for t in c.trials]


def run_trial(
    tokens: Sequence[Hashable],
    capacity: int,
    true_distinct: int,
    seed: int | None = None,
    rng: RandomSource | None = None,
) -> TrialResult:
    """Feed every token through a fresh estimator and score the estimate.

    Args:
        tokens: The stream, replayed in order.
        capacity: Estimator capacity.
        true_distinct: Ground truth the estimate is compared to.
        seed: Seed for the estimator's own generator.
        rng: Injected random source (instead of seed).

    Returns:
        TrialResult with absolute error, relative error (a fraction, not a
        percentage) and the wall-clock time spent ingesting.
    """
    estimator: CVMEstimator[Hashable] = CVMEstimator(capacity, seed=seed, rng=rng)

    start = time.perf_counter()
    for token in tokens:
        estimator.ingest(token)
    elapsed = time.perf_counter() - start

    estimate = estimator.estimate()
    absolute_error = abs(estimate - true_distinct)
    return TrialResult(
        capacity=capacity,
        estimate=estimate,
        absolute_error=absolute_error,
        relative_error=absolute_error / true_distinct,
        elapsed_s=elapsed,
    )


def run_experiment(
    config: ExperimentConfig,
    tokens: Sequence[Hashable] | None = None,
    progress: Callable[[CapacityResult], None] | None = None,
) -> ExperimentResult:
    """Run the capacity sweep described by ``config``.

    Args:
        config: Sweep parameters.
        tokens: Pre-loaded stream. Read from ``config.input_path`` when None.
        progress: Called with each CapacityResult once its trials finish.

    Returns:
        ExperimentResult with one entry per capacity.

    Raises:
        ConfigurationError: If the stream is empty and no true distinct count
            was configured.
    """
    if tokens is None:
        tokens = read_tokens(config.input_path)
        logger.info("Loaded %d tokens from %s", len(tokens), config.input_path)

    true_distinct = config.true_distinct
    if true_distinct is None:
        true_distinct = len(set(tokens))
        if true_distinct == 0:
            raise ConfigurationError(f"No tokens in {config.input_path}")
        logger.info("Computed true distinct count: %d", true_distinct)

    result = ExperimentResult(
        true_distinct=true_distinct,
        error_threshold=config.error_threshold,
        stream_length=len(tokens),
    )

    for i, capacity in enumerate(config.capacities()):
        capacity_result = CapacityResult(capacity=capacity, error_threshold=config.error_threshold)
        for j in range(config.trials):
            trial = run_trial(tokens, capacity, true_distinct, seed=config.trial_seed(i, j))
            capacity_result.trials.append(trial)
            logger.debug(
                "capacity=%d trial=%d estimate=%d rel_error=%.4f",
                capacity,
                j,
                trial.estimate,
                trial.relative_error,
            )

        logger.info(
            "capacity=%d: %.2f%% of %d trials within %.0f%%, mean rel error %.4f",
            capacity,
            capacity_result.confidence * 100,
            config.trials,
            config.error_threshold * 100,
            capacity_result.mean_relative_error,
        )
        result.capacities.append(capacity_result)
        if progress is not None:
            progress(capacity_result)

    return result
