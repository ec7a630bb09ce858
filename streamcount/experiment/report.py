"""Report writers for capacity sweeps.

The plain-text report keeps the layout of the original benchmark output so
old and new runs can be diffed side by side. The pandas frames and the
matplotlib chart are the same numbers in analysis-friendly form.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from streamcount.experiment.runner import ExperimentResult

logger = logging.getLogger(__name__)

TRIAL_COLUMNS = [
    "capacity",
    "trial",
    "estimate",
    "absolute_error",
    "relative_error",
    "elapsed_s",
]


def format_duration(seconds: float) -> str:
    """Render a duration with the largest unit that keeps it >= 1 (e.g. ``12.5ms``)."""
    if seconds >= 1.0:
        return f"{seconds:.6g}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.6g}ms"
    if seconds >= 1e-6:
        return f"{seconds * 1e6:.6g}µs"
    return f"{seconds * 1e9:.0f}ns"


def render_text_report(result: ExperimentResult) -> str:
    """Render the sweep as the plain-text benchmark report."""
    threshold_pct = f"{result.error_threshold * 100:g}%"
    lines = [
        f"Actual Distinct : {result.true_distinct}",
        "abs error, rel error, time",
    ]
    for capacity in result.capacities:
        lines.append(f"Buffer size:             {capacity.capacity}")
        lines.append("")
        for trial in capacity.trials:
            lines.append(
                f"{trial.absolute_error} "
                f"{trial.relative_error * 100:.2f}% "
                f"{format_duration(trial.elapsed_s)}"
            )
        lines.append(
            f"Percent of trials with error of less than {threshold_pct} :: "
            f"{capacity.confidence * 100:.2f}% "
        )
        lines.append("")
        lines.append("")
    return "\n".join(lines) + "\n"


def write_text_report(result: ExperimentResult, path: str | Path) -> Path:
    """Write the plain-text report, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_text_report(result), encoding="utf-8")
    logger.info("Wrote text report to %s", path)
    return path


def to_dataframe(result: ExperimentResult) -> pd.DataFrame:
    """One row per trial."""
    rows = [
        {
            "capacity": trial.capacity,
            "trial": j,
            "estimate": trial.estimate,
            "absolute_error": trial.absolute_error,
            "relative_error": trial.relative_error,
            "elapsed_s": trial.elapsed_s,
        }
        for capacity in result.capacities
        for j, trial in enumerate(capacity.trials)
    ]
    return pd.DataFrame(rows, columns=TRIAL_COLUMNS)


def summary_frame(result: ExperimentResult) -> pd.DataFrame:
    """One row per capacity: confidence, error and timing aggregates."""
    return pd.DataFrame(
        [
            {
                "capacity": c.capacity,
                "trials": len(c.trials),
                "confidence": c.confidence,
                "mean_relative_error": c.mean_relative_error,
                "max_relative_error": max((t.relative_error for t in c.trials), default=0.0),
                "mean_elapsed_s": c.mean_elapsed_s,
            }
            for c in result.capacities
        ],
        columns=[
            "capacity",
            "trials",
            "confidence",
            "mean_relative_error",
            "max_relative_error",
            "mean_elapsed_s",
        ],
    )


def write_csv(result: ExperimentResult, path: str | Path) -> Path:
    """Write the per-trial frame as CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    to_dataframe(result).to_csv(path, index=False)
    logger.info("Wrote trial CSV to %s", path)
    return path


def plot_confidence(result: ExperimentResult, path: str | Path) -> Path:
    """Chart confidence and mean relative error against capacity."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    summary = summary_frame(result)

    fig, (ax_conf, ax_err) = plt.subplots(1, 2, figsize=(12, 5))

    ax_conf.plot(summary["capacity"], summary["confidence"] * 100, "o-", color="steelblue")
    ax_conf.set_xlabel("Capacity")
    ax_conf.set_ylabel(f"Trials within {result.error_threshold * 100:g}% (%)")
    ax_conf.set_ylim(0, 105)
    ax_conf.set_title("Confidence vs capacity")
    ax_conf.grid(True, alpha=0.2)

    ax_err.plot(summary["capacity"], summary["mean_relative_error"] * 100, "o-", color="indianred")
    ax_err.axhline(result.error_threshold * 100, linestyle="--", color="gray", alpha=0.7)
    ax_err.set_xlabel("Capacity")
    ax_err.set_ylabel("Mean relative error (%)")
    ax_err.set_title("Error vs capacity")
    ax_err.grid(True, alpha=0.2)

    fig.suptitle(f"CVM estimator, true distinct = {result.true_distinct:,}")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Wrote confidence chart to %s", path)
    return path
