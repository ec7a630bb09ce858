"""Experiment configuration.

One ExperimentConfig describes a whole capacity sweep: which token file to
read, which capacities to try, how many trials per capacity, and what the
true distinct count is. Trials are seeded from ``seed`` so a sweep can be
replayed exactly.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, fields
from pathlib import Path

ENV_PREFIX = "STREAMCOUNT_"


class ConfigurationError(ValueError):
    """Raised for experiment settings that cannot describe a sweep."""


@dataclass(frozen=True)
class ExperimentConfig:
    """Parameters of a capacity sweep.

    Args:
        input_path: Whitespace-separated token file.
        initial_capacity: First estimator capacity tested.
        increment: Capacity added between consecutive sweep steps.
        sweep_count: Number of capacities tested.
        trials: Independent trials per capacity.
        true_distinct: Known distinct count. None computes it from the tokens.
        error_threshold: Relative error below which a trial counts as accurate.
        seed: Base seed. None draws fresh entropy for every trial.

    Raises:
        ConfigurationError: If any numeric setting is out of range.
    """
    input_path: Path
    initial_capacity: int = 100
    increment: int = 100
    sweep_count: int = 20
    trials: int = 100
    true_distinct: int | None = None
    error_threshold: float = 0.05
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_path", Path(self.input_path))

        if self.initial_capacity < 1:
            raise ConfigurationError(
                f"initial_capacity must be >= 1, got {self.initial_capacity}"
            )
        if self.increment < 0:
            raise ConfigurationError(f"increment must be non-negative, got {self.increment}")
        if self.sweep_count < 1:
            raise ConfigurationError(f"sweep_count must be >= 1, got {self.sweep_count}")
        if self.trials < 1:
            raise ConfigurationError(f"trials must be >= 1, got {self.trials}")
        if self.true_distinct is not None and self.true_distinct < 1:
            raise ConfigurationError(
                f"true_distinct must be positive, got {self.true_distinct}"
            )
        if not 0 < self.error_threshold <= 1:
            raise ConfigurationError(
                f"error_threshold must be in (0, 1], got {self.error_threshold}"
            )

    def capacities(self) -> Iterator[int]:
        """Capacities of the sweep, in order."""
        for i in range(self.sweep_count):
            yield self.initial_capacity + i * self.increment

    def trial_seed(self, sweep_index: int, trial_index: int) -> int | None:
        """Seed for one trial, derived from the base seed."""
        if self.seed is None:
            return None
        return (self.seed * 1_000_003 + sweep_index) * 1_000_003 + trial_index

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides,
    ) -> ExperimentConfig:
        """Build a config from ``STREAMCOUNT_*`` environment variables.

        Each field maps to ``STREAMCOUNT_<FIELD>`` (e.g.
        ``STREAMCOUNT_INITIAL_CAPACITY``). Keyword overrides win over the
        environment; unset fields keep their defaults.

        Raises:
            ConfigurationError: If a variable cannot be parsed or input_path
                is missing.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}

        for f in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None or raw == "":
                continue
            values[f.name] = _parse(f.name, raw)

        values.update({k: v for k, v in overrides.items() if v is not None})

        if "input_path" not in values:
            raise ConfigurationError(
                f"input_path is required (set {ENV_PREFIX}INPUT_PATH)"
            )
        return cls(**values)


_INT_FIELDS = {"initial_capacity", "increment", "sweep_count", "trials", "true_distinct", "seed"}


def _parse(name: str, raw: str) -> object:
    if name == "input_path":
        return Path(raw)
    try:
        if name in _INT_FIELDS:
            return int(raw)
        if name == "error_threshold":
            return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name.upper()}={raw!r}: {e}") from e
    raise ConfigurationError(f"Unknown setting {name!r}")
