# scripts/run_models.py

from __future__ import annotations

import argparse
import os

import pandas as pd

from spendseg.data import add_spending_level, load_customers, stratified_split
from spendseg.errors import SegmentationError
from spendseg.models import train_and_eval
from spendseg.report import render_all
from spendseg.utils import DEFAULT_SEED, cfg_get, load_config, make_rng


# ============================================================
# Input selection
# ============================================================

def choose_data_path(cli_path: str | None, cfg: dict) -> str:
    path = cli_path or cfg_get(cfg, "dataset.path")
    if path:
        return path
    return input("Path to customer CSV: ").strip()


# ============================================================
# Run
# ============================================================

def run(cfg: dict, data_path: str, seed: int, outdir: str | None = None) -> pd.DataFrame:
    rng = make_rng(seed)

    df = add_spending_level(load_customers(data_path))
    print(f"[LOAD] spending levels: {df['SpendingScore'].value_counts().to_dict()}")

    train, test = stratified_split(
        df, rng, train_fraction=float(cfg_get(cfg, "train_fraction", 0.7))
    )

    table, reports = train_and_eval(train, test, rng, cfg)
    for name, r in reports.items():
        print(f"\n=== {name} ===")
        print(r["confusion"])
        print(pd.Series(r["metrics"]).drop("Model").to_string())

    print("\n=== Comparison ===")
    print(table.to_string(index=False, float_format="{:.4f}".format))

    # render_all creates outdir
    render_all(table, outdir)
    if outdir:
        table.to_csv(os.path.join(outdir, "metrics.csv"), index=False)
        print(f"[SAVE] Results written to {outdir}")
    return table


# ============================================================
# Main
# ============================================================

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None)
    ap.add_argument("--data", default=None, help="customer CSV; prompted for when omitted")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--outdir", default=None, help="save metrics.csv and PNG charts here")
    args = ap.parse_args()

    cfg = load_config(args.config)
    seed = args.seed if args.seed is not None else int(cfg_get(cfg, "seed", DEFAULT_SEED))
    outdir = args.outdir or cfg_get(cfg, "outputs_dir")

    try:
        run(cfg, choose_data_path(args.data, cfg), seed, outdir)
    except (SegmentationError, FileNotFoundError) as e:
        raise SystemExit(f"[ERROR] {e}")


if __name__ == "__main__":
    main()
