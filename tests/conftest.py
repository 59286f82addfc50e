import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def tiny_customers():
    """10 rows: 3 Low, 4 Medium, 3 High spenders."""
    return pd.DataFrame({
        "CustomerID": range(1, 11),
        "Genre": ["Male", "Female"] * 5,
        "Age": [19, 25, 45, 30, 50, 60, 35, 22, 28, 40],
        "AnnualIncome": [15, 40, 90, 20, 60, 120, 75, 100, 130, 150],
        "SpendingScore": [10, 20, 30, 40, 50, 55, 60, 80, 90, 70],
    })


@pytest.fixture
def customers():
    """60 rows, 20 per spending level, with level-dependent income."""
    rng = np.random.default_rng(7)
    frames = []
    for lo, hi, income in [(1, 32, 30), (34, 66, 70), (68, 100, 110)]:
        frames.append(pd.DataFrame({
            "Age": rng.integers(18, 70, 20),
            "AnnualIncome": rng.normal(income, 8, 20).round(1),
            "SpendingScore": rng.integers(lo, hi + 1, 20),
        }))
    df = pd.concat(frames, ignore_index=True)
    df["Genre"] = np.where(np.arange(len(df)) % 2, "Male", "Female")
    return df
