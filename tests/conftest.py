from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

# repo root / src 를 pytest import 경로에 강제로 추가
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

root_str = str(ROOT)
src_str = str(SRC)

if root_str not in sys.path:
    sys.path.insert(0, root_str)

if src_str not in sys.path:
    sys.path.insert(0, src_str)


@pytest.fixture
def separated_bundle():
    """minority 10개 (5, 5) 근처 + majority 40개 (0, 0) 근처, 2 features."""
    from rebalance.datasets import DatasetBundle

    rng = np.random.default_rng(7)
    x_maj = rng.normal(loc=(0.0, 0.0), scale=0.5, size=(40, 2))
    x_min = rng.normal(loc=(5.0, 5.0), scale=0.5, size=(10, 2))
    X = np.round(np.vstack([x_maj, x_min]), 2)
    y = np.array([0] * 40 + [1] * 10)
    return DatasetBundle.from_arrays(X, y, feature_names=["f1", "f2"])


@pytest.fixture
def interleaved_bundle():
    """majority 40개 격자 사이사이에 minority 10개가 섞인 데이터셋."""
    from rebalance.datasets import DatasetBundle

    x_maj = [(float(i), float(j)) for i in range(8) for j in range(5)]
    x_min = [(i + 0.5, 2.5) for i in range(7)] + [(0.5, 0.5), (3.5, 0.5), (6.5, 0.5)]
    X = np.array(x_maj + x_min, dtype=float)
    y = np.array(["maj"] * len(x_maj) + ["min"] * len(x_min))
    return DatasetBundle.from_arrays(X, y, feature_names=["x", "y"])
