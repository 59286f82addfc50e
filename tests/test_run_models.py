import importlib.util
import sys
from pathlib import Path

import pandas as pd
import pytest

from spendseg.metrics import TABLE_COLUMNS

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_models.py"


@pytest.fixture(scope="module")
def run_models():
    spec = importlib.util.spec_from_file_location("run_models", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def mall_csv(customers, tmp_path):
    path = tmp_path / "mall.csv"
    customers.rename(columns={
        "Genre": "Gender",
        "AnnualIncome": "Annual Income (k$)",
        "SpendingScore": "Spending Score (1-100)",
    }).to_csv(path, index=False)
    return str(path)


def test_cli_path_wins_over_config(run_models):
    cfg = {"dataset": {"path": "cfg.csv"}}
    assert run_models.choose_data_path("cli.csv", cfg) == "cli.csv"
    assert run_models.choose_data_path(None, cfg) == "cfg.csv"


def test_prompts_when_no_path_is_configured(run_models, monkeypatch):
    prompts = []

    def fake_input(prompt):
        prompts.append(prompt)
        return "  typed.csv \n"

    monkeypatch.setattr("builtins.input", fake_input)
    assert run_models.choose_data_path(None, {"dataset": {"path": None}}) == "typed.csv"
    assert len(prompts) == 1


def test_run_writes_metrics_and_charts(run_models, mall_csv, tmp_path):
    outdir = tmp_path / "out"
    table = run_models.run({}, mall_csv, 123, str(outdir))
    assert len(table) == 5

    saved = pd.read_csv(outdir / "metrics.csv")
    assert list(saved.columns) == TABLE_COLUMNS
    assert saved["Model"].tolist() == table["Model"].tolist()
    assert (outdir / "model_comparison.png").exists()
    assert (outdir / "logistic_regression_metrics.png").exists()


def test_main_end_to_end(run_models, mall_csv, tmp_path, monkeypatch):
    outdir = tmp_path / "cli_out"
    monkeypatch.setattr(sys, "argv", ["run_models.py", "--data", mall_csv, "--outdir", str(outdir)])
    run_models.main()
    assert len(pd.read_csv(outdir / "metrics.csv")) == 5


def test_main_missing_file_is_a_hard_stop(run_models, tmp_path, monkeypatch):
    missing = tmp_path / "nope.csv"
    monkeypatch.setattr(sys, "argv", ["run_models.py", "--data", str(missing)])
    with pytest.raises(SystemExit) as exc:
        run_models.main()
    assert str(exc.value.code).startswith("[ERROR]")


def test_main_missing_column_is_a_hard_stop(run_models, tmp_path, monkeypatch):
    bad = tmp_path / "bad.csv"
    bad.write_text("Age,AnnualIncome\n19,15\n")
    monkeypatch.setattr(sys, "argv", ["run_models.py", "--data", str(bad)])
    with pytest.raises(SystemExit) as exc:
        run_models.main()
    assert "SpendingScore" in str(exc.value.code)
    assert str(exc.value.code).startswith("[ERROR]")
