from __future__ import annotations

from pathlib import Path

import numpy as np

from rebalance.algorithms import get_method, list_methods
from rebalance.common.config import get_settings
from rebalance.datasets import DatasetBundle
from rebalance.tracking.run_log import default_log_path


def make_demo_dataset(
    n_minority: int = 10, n_majority: int = 40, seed: int = 42
) -> DatasetBundle:
    """2차원 가우시안 두 덩어리로 만든 불균형 데이터셋."""
    rng = np.random.default_rng(seed)
    x_min = rng.normal(loc=(2.0, 2.0), scale=0.6, size=(n_minority, 2))
    x_maj = rng.normal(loc=(0.0, 0.0), scale=1.0, size=(n_majority, 2))
    X = np.round(np.vstack([x_maj, x_min]), 2)
    y = np.array(["major"] * n_majority + ["minor"] * n_minority)
    return DatasetBundle.from_arrays(X, y, feature_names=["x1", "x2"])


def main() -> None:
    s = get_settings()
    bundle = make_demo_dataset()

    for method in list_methods():
        log_path = default_log_path(Path(s.runs_dir), method=method, seed=42)
        result = get_method(method)(bundle, seed=42, log_path=log_path)
        print(
            f"[OK] {method}: {bundle.n_samples()} -> {result.dataset.n_samples()} rows, "
            f"IR {result.imbalance_ratio_before:.2f} -> {result.imbalance_ratio_after:.2f}"
        )
        print(f"[OK] run log: {result.log_path}")


if __name__ == "__main__":
    main()
