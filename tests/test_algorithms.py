import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_classification

from rebalance.algorithms import (
    adasyn_run,
    adoms_run,
    enn_run,
    list_methods,
    resample,
    smote_tomek_run,
)
from rebalance.common.errors import ConfigError, DimensionMismatch, InsufficientNeighbors
from rebalance.core.classes import class_counts
from rebalance.datasets import DatasetBundle


def _three_cluster_bundle() -> DatasetBundle:
    """a 격자 + b 격자 + minority m. b 격자 한가운데에 a 하나(index 20)가 섞여 있다."""
    a = [(float(i), float(j)) for i in range(5) for j in range(4)]
    stray = [(12.5, 11.5)]
    b = [(10.0 + i, 10.0 + j) for i in range(5) for j in range(4)]
    m = [(20.0 + i, 0.0) for i in range(5)]
    X = np.array(a + stray + b + m)
    y = np.array(["a"] * 21 + ["b"] * 20 + ["m"] * 5)
    return DatasetBundle.from_arrays(X, y)


def _nominal_bundle() -> DatasetBundle:
    rng = np.random.default_rng(3)
    n_maj, n_min = 30, 8
    df = pd.DataFrame(
        {
            "size": np.round(
                np.concatenate([rng.normal(0.0, 1.0, n_maj), rng.normal(2.0, 0.5, n_min)]), 2
            ),
            "color": ["red"] * 25 + ["blue"] * 5 + ["blue"] * 6 + ["red"] * 2,
            "label": ["neg"] * n_maj + ["pos"] * n_min,
        }
    )
    return DatasetBundle.from_frame(df, target_col="label")


def test_smote_tomek_generates_percent_rows_and_cleans_links(separated_bundle):
    X_before = separated_bundle.X.copy()

    result = smote_tomek_run(separated_bundle, percent=200, k=3, seed=42)

    out = result.dataset
    assert result.extra["synthetic_generated"] == 20
    # 두 클래스 사이의 가장 가까운 교차 쌍은 항상 Tomek link
    assert result.extra["tomek_links"] >= 1
    assert np.array_equal(separated_bundle.X, X_before)

    n_orig_kept = 50 - result.removed_indices.size
    kept = np.setdiff1d(np.arange(50), result.removed_indices)
    assert np.array_equal(out.X[:n_orig_kept], separated_bundle.X[kept])
    assert result.created_indices.tolist() == list(range(n_orig_kept, out.n_samples()))

    created = out.X[result.created_indices]
    assert (out.y[result.created_indices] == 1).all()
    assert np.allclose(created, np.round(created, 2))
    minority = separated_bundle.X[separated_bundle.y == 1]
    assert np.all(created >= minority.min(axis=0) - 0.005 - 1e-9)
    assert np.all(created <= minority.max(axis=0) + 0.005 + 1e-9)


@pytest.mark.parametrize("method", ["smote_tomek", "adasyn", "adoms", "enn"])
def test_same_seed_reproduces_identical_output(interleaved_bundle, method):
    first = resample(interleaved_bundle, method, seed=42)
    second = resample(interleaved_bundle, method, seed=42)

    assert first.seed == second.seed == 42
    assert np.array_equal(first.dataset.X, second.dataset.X)
    assert np.array_equal(first.dataset.y, second.dataset.y)


def test_seed_defaults_to_clock_and_is_recorded(interleaved_bundle):
    result = adasyn_run(interleaved_bundle)

    assert isinstance(result.seed, int)
    assert result.seed > 0
    again = adasyn_run(interleaved_bundle, seed=result.seed)
    assert np.array_equal(result.dataset.X, again.dataset.X)


def test_invalid_percent():
    bundle = DatasetBundle.from_arrays(np.zeros((4, 1)), np.array([0, 0, 1, 1]))

    with pytest.raises(ConfigError):
        smote_tomek_run(bundle, percent=250)
    with pytest.raises(ConfigError):
        adoms_run(bundle, percent=0)
    with pytest.raises(ConfigError):
        smote_tomek_run(bundle, percent=200.0, k=3, seed=1)
    with pytest.raises(ConfigError):
        adoms_run(bundle, percent=True)


def test_adasyn_adds_density_weighted_rows(interleaved_bundle):
    result = adasyn_run(interleaved_bundle, k=5, balance_level=1.0, seed=42)

    out = result.dataset
    assert result.extra["budget"] == 30
    n_created = result.created_indices.size
    assert n_created == sum(result.extra["per_seed_counts"])
    assert 30 - 10 <= n_created <= 30
    assert np.array_equal(out.X[:50], interleaved_bundle.X)
    assert (out.y[50:] == "min").all()
    assert result.counts_after["min"] == 10 + n_created
    assert result.imbalance_ratio_after < result.imbalance_ratio_before


def test_adasyn_threshold_already_met_returns_input(interleaved_bundle):
    result = adasyn_run(interleaved_bundle, threshold=0.2, seed=1)

    assert result.created_indices.size == 0
    assert np.array_equal(result.dataset.X, interleaved_bundle.X)


@pytest.mark.parametrize("params", [{"balance_level": 1.1}, {"threshold": 0.0}, {"k": 0}])
def test_adasyn_rejects_bad_parameters(interleaved_bundle, params):
    with pytest.raises(ConfigError):
        adasyn_run(interleaved_bundle, **params)


def test_adoms_generates_rows_per_round(separated_bundle):
    result = adoms_run(separated_bundle, percent=300, k=5, seed=42)

    out = result.dataset
    assert result.created_indices.tolist() == list(range(50, 80))
    assert (out.y[50:] == 1).all()
    assert np.array_equal(out.X[:50], separated_bundle.X)
    assert result.counts_after == {0: 40, 1: 40}


def test_adoms_needs_two_neighbours(separated_bundle):
    with pytest.raises(InsufficientNeighbors):
        adoms_run(separated_bundle, k=1, seed=0)

    tiny = DatasetBundle.from_arrays(
        np.array([[0.0, 0.0], [1.0, 1.0], [5.0, 5.0], [6.0, 5.0], [5.0, 6.0]]),
        np.array([1, 1, 0, 0, 0]),
    )
    with pytest.raises(InsufficientNeighbors):
        adoms_run(tiny, k=5, seed=0)


def test_enn_removes_noisy_sample_only():
    bundle = _three_cluster_bundle()

    result = enn_run(bundle, k=3)

    assert result.removed_indices.tolist() == [20]
    assert result.counts_after == {"a": 20, "b": 20, "m": 5}
    assert result.created_indices.size == 0


def test_enn_keeps_minority_and_never_grows_majority():
    X_maj = [(float(i), float(j)) for i in range(10) for j in range(5)]
    X_min = [(i + 0.5, 1.5) for i in range(0, 10, 2)]
    bundle = DatasetBundle.from_arrays(np.array(X_maj + X_min), np.array([0] * 50 + [1] * 5))

    result = enn_run(bundle, k=3)

    assert result.counts_after[1] == 5
    assert result.counts_after[0] <= 50
    assert (bundle.y[result.removed_indices] == 0).all()


def test_enn_uses_precomputed_distances():
    X = np.array([[0.0], [1.0], [2.0], [3.0], [100.0]])
    y = np.array(["M", "M", "M", "M", "m"])
    bundle = DatasetBundle.from_arrays(X, y)
    d = np.abs(np.subtract.outer(X[:, 0], X[:, 0]))
    # 샘플 0 을 minority 바로 옆, 다른 M 들과는 멀리 둔다
    d[0, 1:4] = d[1:4, 0] = 5.0
    d[0, 4] = d[4, 0] = 0.1
    d[1:4, 4] = d[4, 1:4] = 50.0

    assert enn_run(bundle, k=2).removed_indices.size == 0
    result = enn_run(bundle, k=2, distances=d)

    assert result.removed_indices.tolist() == [0]
    assert result.extra["precomputed_distances"] is True
    with pytest.raises(DimensionMismatch):
        enn_run(bundle, k=2, distances=d[:4, :4])


def test_minority_label_can_be_pinned():
    bundle = _three_cluster_bundle()

    result = enn_run(bundle, k=3, minority_label="a")

    assert result.minority_label == "a"
    assert result.counts_after["a"] == 21


def test_hvdm_with_nominal_attributes():
    bundle = _nominal_bundle()
    assert bundle.nominal == (1,)

    over = smote_tomek_run(bundle, percent=100, k=3, metric="hvdm", seed=42)
    under = enn_run(bundle, k=3, metric="hvdm")

    created = over.dataset.X[over.created_indices]
    assert set(created[:, 1].tolist()) <= {0.0, 1.0}
    frame = over.dataset.to_frame(label_col="label")
    assert set(frame["color"]) <= {"blue", "red"}
    assert under.counts_after["pos"] == 8


def test_log_path_writes_run_log(interleaved_bundle, tmp_path: Path):
    log_path = tmp_path / "runs" / "adasyn.json"

    result = adasyn_run(interleaved_bundle, seed=42, log_path=log_path)

    assert result.log_path == log_path
    doc = json.loads(log_path.read_text(encoding="utf-8"))
    assert doc["method"] == "adasyn"
    assert doc["seed"] == 42
    assert doc["original_size"] == 50
    assert doc["new_size"] == result.dataset.n_samples()
    assert doc["counts_before"] == {"maj": 40, "min": 10}
    assert doc["created_indices"] == result.created_indices.tolist()
    assert doc["imbalance_ratio_before"] == pytest.approx(4.0)
    assert "elapsed" in doc and "build" in doc


def test_method_registry():
    assert list_methods() == ["adasyn", "adoms", "enn", "smote_tomek"]

    with pytest.raises(ValueError):
        resample(DatasetBundle.from_arrays(np.zeros((2, 1)), np.array([0, 1])), "smote")


def test_make_classification_end_to_end():
    X, y = make_classification(
        n_samples=200,
        n_features=4,
        n_informative=2,
        n_redundant=0,
        weights=[0.9],
        random_state=0,
    )
    bundle = DatasetBundle.from_arrays(X, y)
    before = class_counts(y)
    n_min = min(before.values())

    smote = smote_tomek_run(bundle, percent=100, seed=0)
    adoms = adoms_run(bundle, percent=200, seed=0)
    adasyn = adasyn_run(bundle, seed=0)
    enn = enn_run(bundle)

    assert smote.extra["synthetic_generated"] == n_min
    assert adoms.created_indices.size == 2 * n_min
    assert adasyn.dataset.n_samples() >= bundle.n_samples()
    assert enn.dataset.n_samples() <= bundle.n_samples()
    assert enn.counts_after[smote.minority_label] == n_min
