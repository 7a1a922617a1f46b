from __future__ import annotations

from typing import Any

import numpy as np

from rebalance.core.normalization import (
    AttributeRanges,
    round_to_decimals,
    snap_nominal,
    zero_one_denormalize,
)
from rebalance.datasets.bundle import DatasetBundle


def finalize_synthetic(
    dataset: DatasetBundle,
    synthetic: np.ndarray,
    ranges: AttributeRanges | None,
    decimals: int,
) -> np.ndarray:
    """synthetic 행을 원래 스케일로 되돌림.

    ranges가 있으면(Euclidean) 역정규화, nominal은 유효 코드로, 수치형은 decimals 자리 반올림.
    """
    rows = np.asarray(synthetic, dtype=float).reshape(-1, dataset.n_features())
    if ranges is not None:
        rows = zero_one_denormalize(rows, ranges.max, ranges.min, dataset.nominal)
    if dataset.nominal:
        rows = snap_nominal(rows, dataset.nominal, dataset.nominal_codes)
    return round_to_decimals(rows, decimals, dataset.nominal)


def merge_synthetic(
    dataset: DatasetBundle,
    synthetic: np.ndarray,
    minority_label: Any,
    ranges: AttributeRanges | None,
    decimals: int,
) -> tuple[DatasetBundle, np.ndarray]:
    """원본 행(순서/값 그대로) 뒤에 synthetic 행을 붙인 새 bundle과 새 행의 위치."""
    rows = finalize_synthetic(dataset, synthetic, ranges, decimals)
    X = np.vstack([dataset.X, rows])
    y = np.concatenate([dataset.y, np.full(rows.shape[0], minority_label, dtype=dataset.y.dtype)])
    created = np.arange(dataset.n_samples(), X.shape[0])
    return dataset.with_rows(X, y), created


def filter_rows(dataset: DatasetBundle, keep: np.ndarray) -> tuple[DatasetBundle, np.ndarray]:
    """keep mask로 걸러낸 새 bundle과 제거된 원본 인덱스."""
    keep = np.asarray(keep, dtype=bool)
    if keep.shape != (dataset.n_samples(),):
        raise ValueError(f"keep mask must have shape ({dataset.n_samples()},), got {keep.shape}")
    index = np.flatnonzero(keep)
    return dataset.with_rows(dataset.X[index], dataset.y[index]), np.flatnonzero(~keep)
