"""[0, 1] min-max normalization and the inverse mappings used on output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np


@dataclass(frozen=True)
class AttributeRanges:
    min: np.ndarray
    max: np.ndarray

    @classmethod
    def from_matrix(cls, X: np.ndarray) -> "AttributeRanges":
        X = np.asarray(X, dtype=float)
        if X.ndim != 2 or X.shape[0] == 0:
            raise ValueError(f"attribute ranges need a non-empty 2D matrix, got shape={X.shape}")
        return cls(min=X.min(axis=0), max=X.max(axis=0))


def _numeric_mask(n_features: int, nominal: Sequence[int]) -> np.ndarray:
    mask = np.ones(n_features, dtype=bool)
    mask[list(nominal)] = False
    return mask


def zero_one_normalize(
    X: np.ndarray,
    ranges: AttributeRanges | None = None,
    nominal: Sequence[int] = (),
) -> np.ndarray:
    """수치형 컬럼을 [0, 1]로 선형 변환. nominal 컬럼은 그대로 통과.

    max == min 인 컬럼은 0으로 둔다.
    """
    X = np.asarray(X, dtype=float)
    if ranges is None:
        ranges = AttributeRanges.from_matrix(X)

    span = ranges.max - ranges.min
    scaled = np.divide(
        X - ranges.min,
        span,
        out=np.zeros_like(X),
        where=span > 0,
    )
    numeric = _numeric_mask(X.shape[1], nominal)
    return np.where(numeric, scaled, X)


def zero_one_denormalize(
    X: np.ndarray,
    max_attribs: np.ndarray,
    min_attribs: np.ndarray,
    nominal: Sequence[int] = (),
) -> np.ndarray:
    """zero_one_normalize의 역변환."""
    X = np.asarray(X, dtype=float)
    max_attribs = np.asarray(max_attribs, dtype=float)
    min_attribs = np.asarray(min_attribs, dtype=float)
    restored = X * (max_attribs - min_attribs) + min_attribs
    numeric = _numeric_mask(X.shape[1], nominal)
    return np.where(numeric, restored, X)


def round_to_decimals(X: np.ndarray, decimals: int = 2, nominal: Sequence[int] = ()) -> np.ndarray:
    X = np.asarray(X, dtype=float)
    numeric = _numeric_mask(X.shape[1], nominal)
    return np.where(numeric, np.round(X, decimals), X)


def snap_nominal(
    X: np.ndarray,
    nominal: Sequence[int],
    nominal_codes: Mapping[int, Sequence[Any]],
) -> np.ndarray:
    """nominal 컬럼을 가장 가까운 유효 코드(0 .. n_values-1)로 반올림."""
    out = np.array(X, dtype=float, copy=True)
    for j in nominal:
        top = max(len(nominal_codes[j]) - 1, 0)
        out[:, j] = np.clip(np.rint(out[:, j]), 0, top)
    return out


def to_nominal(
    X: np.ndarray,
    nominal: Sequence[int],
    nominal_codes: Mapping[int, Sequence[Any]],
) -> np.ndarray:
    """코드 행렬을 object 행렬로 디코딩 (nominal 컬럼만 원래 값으로)."""
    snapped = snap_nominal(X, nominal, nominal_codes)
    out = snapped.astype(object)
    for j in nominal:
        values = list(nominal_codes[j])
        out[:, j] = [values[int(c)] for c in snapped[:, j]]
    return out
