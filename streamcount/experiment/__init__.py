"""Capacity-sweep experiments for the CVM estimator.

Example:
    from streamcount.experiment import ExperimentConfig, run_experiment, write_text_report

    config = ExperimentConfig(
        input_path="data/ip_addresses.txt",
        initial_capacity=100,
        increment=100,
        sweep_count=20,
        trials=100,
        true_distinct=1_522_917,
        seed=1,
    )
    result = run_experiment(config)
    write_text_report(result, "out/report.txt")
"""

from streamcount.experiment.config import ConfigurationError, ExperimentConfig
from streamcount.experiment.report import (
    plot_confidence,
    render_text_report,
    summary_frame,
    to_dataframe,
    write_csv,
    write_text_report,
)
from streamcount.experiment.runner import (
    CapacityResult,
    ExperimentResult,
    TrialResult,
    run_experiment,
    run_trial,
)
from streamcount.experiment.tokens import iter_tokens, read_tokens

__all__ = [
    "CapacityResult",
    "ConfigurationError",
    "ExperimentConfig",
    "ExperimentResult",
    "TrialResult",
    "iter_tokens",
    "plot_confidence",
    "read_tokens",
    "render_text_report",
    "run_experiment",
    "run_trial",
    "summary_frame",
    "to_dataframe",
    "write_csv",
    "write_text_report",
]
