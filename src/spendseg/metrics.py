from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Dict, Iterable, Tuple
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    precision_score,
    recall_score,
)

from .errors import CategoryMismatchError

METRIC_NAMES = ["accuracy", "precision", "recall", "f1", "error_rate"]
TABLE_COLUMNS = ["Model"] + METRIC_NAMES


def _is_categorical(x) -> bool:
    return isinstance(getattr(x, "dtype", None), pd.CategoricalDtype)


def _coerce(values, dtype: pd.CategoricalDtype, which: str) -> pd.Categorical:
    values = pd.Series(np.asarray(values, dtype=object))
    if values.isna().any():
        raise CategoryMismatchError(f"{which} labels contain {int(values.isna().sum())} missing value(s)")
    outside = sorted(set(values) - set(dtype.categories), key=str)
    if outside:
        raise CategoryMismatchError(
            f"{which} labels {outside} are not in the category universe {list(dtype.categories)}"
        )
    return pd.Categorical(values, dtype=dtype)


def align_categories(predicted, actual) -> Tuple[pd.Categorical, pd.Categorical]:
    """Put predicted and actual labels on one category universe, or fail."""
    if len(predicted) != len(actual):
        raise ValueError(f"predicted has {len(predicted)} labels, actual has {len(actual)}")

    if _is_categorical(predicted) and _is_categorical(actual):
        p_cats, a_cats = list(predicted.dtype.categories), list(actual.dtype.categories)
        if p_cats != a_cats:
            raise CategoryMismatchError(
                f"predicted categories {p_cats} differ from actual categories {a_cats}"
            )
        dtype = pd.CategoricalDtype(p_cats, ordered=predicted.dtype.ordered)
    elif _is_categorical(actual):
        dtype = actual.dtype
    elif _is_categorical(predicted):
        dtype = predicted.dtype
    else:
        universe = set(pd.Series(np.asarray(predicted, dtype=object)).dropna())
        universe |= set(pd.Series(np.asarray(actual, dtype=object)).dropna())
        dtype = pd.CategoricalDtype(sorted(universe, key=str))

    return _coerce(predicted, dtype, "predicted"), _coerce(actual, dtype, "actual")


def calculate_metrics(predicted, actual, positive_class) -> Dict[str, float]:
    pred, true = align_categories(predicted, actual)
    if positive_class not in pred.categories:
        raise CategoryMismatchError(
            f"positive class {positive_class!r} is not in {list(pred.categories)}"
        )

    # scored on category codes so int and str universes behave the same
    pos = pred.categories.get_loc(positive_class)
    y_pred = pred.codes == pos
    y_true = true.codes == pos

    # undefined ratios come back as NaN
    accuracy = float(accuracy_score(true.codes, pred.codes))
    precision = float(precision_score(y_true, y_pred, zero_division=np.nan))
    recall = float(recall_score(y_true, y_pred, zero_division=np.nan))
    f1 = float(f1_score(y_true, y_pred, zero_division=np.nan))
    if np.isnan(precision) or np.isnan(recall):
        f1 = float("nan")

    return {
        "accuracy": accuracy,
        "precision": precision,
        "recall": recall,
        "f1": f1,
        "error_rate": 1.0 - accuracy,
    }


def metrics_row(model: str, predicted, actual, positive_class) -> Dict[str, object]:
    row = {"Model": model}
    row.update(calculate_metrics(predicted, actual, positive_class))
    return row


def comparison_table(rows: Iterable[Dict[str, object]]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=TABLE_COLUMNS)


def confusion_table(predicted, actual) -> pd.DataFrame:
    pred, true = align_categories(predicted, actual)
    cats = list(pred.categories)
    cm = confusion_matrix(true.codes, pred.codes, labels=list(range(len(cats))))
    return pd.DataFrame(
        cm,
        index=pd.Index(cats, name="actual"),
        columns=pd.Index(cats, name="predicted"),
    )
