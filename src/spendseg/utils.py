from __future__ import annotations
import os, yaml
import numpy as np

DEFAULT_SEED = 123

def load_config(path: str | None) -> dict:
    if path is None:
        return {}
    with open(path, "r") as f:
        cfg = yaml.safe_load(f)
    return cfg or {}

def ensure_dir(d: str):
    os.makedirs(d, exist_ok=True)

def make_rng(seed: int = DEFAULT_SEED) -> np.random.Generator:
    return np.random.default_rng(seed)

def draw_seed(rng: np.random.Generator) -> int:
    """Integer random_state for sklearn estimators, taken from the run's generator."""
    return int(rng.integers(0, 2**31 - 1))

def cfg_get(cfg: dict, dotted: str, default=None):
    """Nested lookup, e.g. cfg_get(cfg, "kmeans.relabel", "fixed")."""
    node = cfg
    for key in dotted.split("."):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node
