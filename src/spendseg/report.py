from __future__ import annotations
import os
import math
import pandas as pd
import matplotlib.pyplot as plt
from typing import Dict, List

from .metrics import METRIC_NAMES
from .utils import ensure_dir


def to_long(row: Dict[str, object]) -> pd.DataFrame:
    """One metrics row -> (metric, value) pairs, in METRIC_NAMES order."""
    return pd.DataFrame(
        {"metric": METRIC_NAMES, "value": [float(row[m]) for m in METRIC_NAMES]}
    )


def table_to_long(table: pd.DataFrame) -> pd.DataFrame:
    return table.melt(id_vars="Model", value_vars=METRIC_NAMES, var_name="metric", value_name="value")


def plot_model_metrics(row: Dict[str, object], ax=None):
    long = to_long(row)
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))
    colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
    ax.bar(long["metric"], long["value"], color=colors[: len(long)])
    ax.set_ylim(0, 1)
    ax.set_ylabel("Score")
    ax.set_title(f"{row['Model']} metrics")
    return ax


def plot_comparison(table: pd.DataFrame, ncols: int = 3):
    nrows = math.ceil(len(METRIC_NAMES) / ncols)
    fig, axes = plt.subplots(nrows, ncols, figsize=(4 * ncols, 3.5 * nrows), sharey=True)
    axes = axes.ravel()
    long = table_to_long(table)
    for ax, metric in zip(axes, METRIC_NAMES):
        panel = long[long["metric"] == metric].set_index("Model")["value"]
        panel.plot(kind="bar", ax=ax, rot=30)
        ax.set_title(metric)
        ax.set_xlabel("")
        ax.set_ylim(0, 1)
    for ax in axes[len(METRIC_NAMES):]:
        ax.set_visible(False)
    fig.suptitle("Model comparison")
    fig.tight_layout()
    return fig


def render_all(table: pd.DataFrame, outdir: str | None = None) -> List[str]:
    saved = []
    if outdir:
        ensure_dir(outdir)

    for row in table.to_dict("records"):
        ax = plot_model_metrics(row)
        ax.figure.tight_layout()
        if outdir:
            fname = row["Model"].lower().replace(" ", "_").replace("-", "") + "_metrics.png"
            path = os.path.join(outdir, fname)
            ax.figure.savefig(path, dpi=200)
            plt.close(ax.figure)
            saved.append(path)

    fig = plot_comparison(table)
    if outdir:
        path = os.path.join(outdir, "model_comparison.png")
        fig.savefig(path, dpi=200)
        plt.close(fig)
        saved.append(path)
        print(f"[SAVE] {len(saved)} charts written to {outdir}")
    else:
        plt.show()
    return saved
