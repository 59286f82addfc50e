from __future__ import annotations
import numbers
import numpy as np
import pandas as pd
from typing import Tuple
from sklearn.model_selection import train_test_split

from .errors import DataError, MissingColumnsError
from .utils import draw_seed

# =========================================================
# GLOBAL CONSTANTS
# =========================================================
SPENDING_LEVELS = ("Low", "Medium", "High")
SPENDING_DTYPE = pd.CategoricalDtype(categories=list(SPENDING_LEVELS), ordered=True)

BINARY_LEVELS = (0, 1)
BINARY_DTYPE = pd.CategoricalDtype(categories=list(BINARY_LEVELS), ordered=True)

LOW_UPPER = 33    # score < 33 -> Low
HIGH_LOWER = 67   # score >= 67 -> High

FEATURES = ["Age", "AnnualIncome"]
LABEL = "SpendingScore"
REQUIRED_COLUMNS = ("Age", "AnnualIncome", "SpendingScore")

# Mall Customers headers -> names used throughout the package
COLUMN_ALIASES = {
    "Annual Income (k$)": "AnnualIncome",
    "Annual Income": "AnnualIncome",
    "Spending Score (1-100)": "SpendingScore",
    "Spending Score": "SpendingScore",
    "Gender": "Genre",
}


############################################
# Loading
############################################

def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed = {c: COLUMN_ALIASES[c.strip()] for c in df.columns if c.strip() in COLUMN_ALIASES}
    return df.rename(columns=renamed)


def load_customers(path: str) -> pd.DataFrame:
    df = normalize_columns(pd.read_csv(path))

    missing = set(REQUIRED_COLUMNS) - set(df.columns)
    if missing:
        raise MissingColumnsError(missing, path)

    for col in REQUIRED_COLUMNS:
        try:
            df[col] = pd.to_numeric(df[col])
        except (TypeError, ValueError) as e:
            raise DataError(f"column {col!r} in {path} is not numeric: {e}") from e
    if "Genre" in df.columns:
        df["Genre"] = df["Genre"].astype("category")

    print(f"[LOAD] {path}: {df.shape[0]} rows, columns={list(df.columns)}")
    return df


############################################
# Label discretization
############################################

def discretize(score):
    """Bin spending scores into Low / Medium / High.

    A scalar returns the level name; an array-like returns a categorical of
    SPENDING_DTYPE aligned with the input (a Series keeps its index).
    """
    if isinstance(score, numbers.Number) and not isinstance(score, bool):
        if np.isnan(score):
            raise DataError("cannot discretize a missing spending score")
        if score < LOW_UPPER:
            return "Low"
        if score < HIGH_LOWER:
            return "Medium"
        return "High"

    values = pd.to_numeric(pd.Series(score) if not isinstance(score, pd.Series) else score)
    if values.isna().any():
        raise DataError(f"cannot discretize {int(values.isna().sum())} missing spending score(s)")
    binned = pd.cut(
        values,
        bins=[-np.inf, LOW_UPPER, HIGH_LOWER, np.inf],
        right=False,
        labels=list(SPENDING_LEVELS),
    )
    return binned.astype(SPENDING_DTYPE)


def add_spending_level(df: pd.DataFrame, column: str = LABEL) -> pd.DataFrame:
    out = df.copy()
    out[column] = discretize(out[column])
    return out


def binarize_high(labels) -> pd.Series:
    """High -> 1, anything else -> 0, as a BINARY_DTYPE categorical."""
    labels = pd.Series(labels)
    if not isinstance(labels.dtype, pd.CategoricalDtype):
        labels = labels.astype(SPENDING_DTYPE)
    return (labels == "High").astype(int).astype(BINARY_DTYPE)


############################################
# Splitting
############################################

def stratified_split(
    df: pd.DataFrame,
    rng: np.random.Generator,
    train_fraction: float = 0.7,
    label: str = LABEL,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    n_train = int(round(train_fraction * len(df)))
    train, test = train_test_split(
        df,
        train_size=n_train,
        stratify=df[label],
        random_state=draw_seed(rng),
    )
    print(f"[SPLIT] train={len(train)}, test={len(test)} (p={train_fraction})")
    return train, test
