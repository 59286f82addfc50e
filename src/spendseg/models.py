from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Dict, List, Tuple
from sklearn.cluster import KMeans
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier

from .data import BINARY_DTYPE, FEATURES, LABEL, SPENDING_DTYPE, SPENDING_LEVELS, binarize_high
from .metrics import comparison_table, confusion_table, metrics_row
from .utils import cfg_get, draw_seed

RELABEL_POLICIES = ("fixed", "majority")
EVAL_TARGETS = ("train", "test")


class ModelAdapter:
    """fit(train) / predict(test) over the Age and AnnualIncome features."""

    name = "model"
    positive_class = "High"

    def __init__(self, estimator):
        self.estimator = estimator

    def targets(self, df: pd.DataFrame) -> pd.Series:
        return df[LABEL]

    def fit(self, train: pd.DataFrame) -> "ModelAdapter":
        self.estimator.fit(train[FEATURES], np.asarray(self.targets(train), dtype=object))
        return self

    def predict(self, test: pd.DataFrame) -> pd.Categorical:
        pred = self.estimator.predict(test[FEATURES])
        return pd.Categorical(pred, dtype=SPENDING_DTYPE)

    def evaluate(self, train: pd.DataFrame, test: pd.DataFrame) -> Tuple[pd.Categorical, pd.Series]:
        self.fit(train)
        return self.predict(test), self.targets(test)


class KNNAdapter(ModelAdapter):
    name = "KNN"

    def __init__(self, k: int = 5):
        super().__init__(None)
        self.k = k
        self.reference = None

    def fit(self, train):
        # no model is built, the training rows are the reference set
        self.reference = train
        return self

    def predict(self, test):
        knn = KNeighborsClassifier(n_neighbors=self.k)
        knn.fit(self.reference[FEATURES], np.asarray(self.targets(self.reference), dtype=object))
        return pd.Categorical(knn.predict(test[FEATURES]), dtype=SPENDING_DTYPE)


class NaiveBayesAdapter(ModelAdapter):
    name = "Naive Bayes"

    def __init__(self):
        super().__init__(GaussianNB())


class DecisionTreeAdapter(ModelAdapter):
    name = "Decision Tree"

    def __init__(self, random_state: int | None = None):
        super().__init__(DecisionTreeClassifier(random_state=random_state))


class LogisticAdapter(ModelAdapter):
    """High vs. everything else; P(High) above the threshold predicts 1."""

    name = "Logistic Regression"
    positive_class = 1

    def __init__(self, threshold: float = 0.5, random_state: int | None = None):
        super().__init__(LogisticRegression(max_iter=1000, random_state=random_state))
        self.threshold = threshold

    def targets(self, df):
        return binarize_high(df[LABEL])

    def fit(self, train):
        self.estimator.fit(train[FEATURES], np.asarray(self.targets(train), dtype=int))
        return self

    def predict(self, test):
        col = list(self.estimator.classes_).index(1)
        prob = self.estimator.predict_proba(test[FEATURES])[:, col]
        return pd.Categorical((prob > self.threshold).astype(int), dtype=BINARY_DTYPE)


class KMeansAdapter(ModelAdapter):
    """Unsupervised: clusters the training rows, then names each cluster a spending level.

    relabel="fixed" maps cluster 0/1/2 to Low/Medium/High regardless of what
    the clusters contain. relabel="majority" gives each cluster the most common
    true level among its members. With eval_on="train" the training rows are
    scored against their own labels.
    """

    name = "K-Means"

    def __init__(
        self,
        n_clusters: int = 3,
        relabel: str = "fixed",
        eval_on: str = "train",
        random_state: int | None = None,
    ):
        if relabel not in RELABEL_POLICIES:
            raise ValueError(f"relabel must be one of {RELABEL_POLICIES}, got {relabel!r}")
        if eval_on not in EVAL_TARGETS:
            raise ValueError(f"eval_on must be one of {EVAL_TARGETS}, got {eval_on!r}")
        if relabel == "fixed" and n_clusters != len(SPENDING_LEVELS):
            raise ValueError(f"fixed relabelling needs {len(SPENDING_LEVELS)} clusters, got {n_clusters}")
        super().__init__(KMeans(n_clusters=n_clusters, n_init=10, random_state=random_state))
        self.relabel = relabel
        self.eval_on = eval_on
        self.mapping: Dict[int, str] = {}

    def fit(self, train):
        clusters = self.estimator.fit_predict(train[FEATURES])
        if self.relabel == "fixed":
            self.mapping = dict(enumerate(SPENDING_LEVELS))
        else:
            self.mapping = majority_mapping(clusters, self.targets(train))
        return self

    def name_clusters(self, clusters) -> pd.Categorical:
        return pd.Categorical([self.mapping[int(c)] for c in clusters], dtype=SPENDING_DTYPE)

    def predict(self, test):
        return self.name_clusters(self.estimator.predict(test[FEATURES]))

    def evaluate(self, train, test):
        self.fit(train)
        if self.eval_on == "train":
            print("[RUN] K-Means scored on the training rows (not held out)")
            return self.name_clusters(self.estimator.labels_), self.targets(train)
        return self.predict(test), self.targets(test)


def majority_mapping(clusters, labels) -> Dict[int, str]:
    """Most common true level per cluster; ties go to the lower level."""
    counts = pd.crosstab(
        pd.Series(np.asarray(clusters), name="cluster"),
        pd.Series(pd.Categorical(np.asarray(labels, dtype=object), dtype=SPENDING_DTYPE), name="level"),
        dropna=False,
    )
    counts = counts.reindex(columns=list(SPENDING_LEVELS), fill_value=0)
    return {int(c): counts.loc[c].idxmax() for c in counts.index}


def build_adapters(cfg: dict, rng: np.random.Generator) -> List[ModelAdapter]:
    return [
        KNNAdapter(k=int(cfg_get(cfg, "knn.k", 5))),
        NaiveBayesAdapter(),
        DecisionTreeAdapter(random_state=draw_seed(rng)),
        LogisticAdapter(
            threshold=float(cfg_get(cfg, "logistic.threshold", 0.5)),
            random_state=draw_seed(rng),
        ),
        KMeansAdapter(
            n_clusters=int(cfg_get(cfg, "kmeans.n_clusters", 3)),
            relabel=cfg_get(cfg, "kmeans.relabel", "fixed"),
            eval_on=cfg_get(cfg, "kmeans.eval_on", "train"),
            random_state=draw_seed(rng),
        ),
    ]


def train_and_eval(train, test, rng: np.random.Generator, cfg: dict | None = None):
    cfg = cfg or {}
    rows = []
    reports = {}
    for adapter in build_adapters(cfg, rng):
        print(f"\n[RUN] {adapter.name}")
        predicted, actual = adapter.evaluate(train, test)
        row = metrics_row(adapter.name, predicted, actual, adapter.positive_class)
        rows.append(row)
        reports[adapter.name] = {
            "metrics": row,
            "confusion": confusion_table(predicted, actual),
            "predicted": predicted,
            "actual": actual,
        }
    return comparison_table(rows), reports
