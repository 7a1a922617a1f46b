"""Distance engine: Euclidean and HVDM (Heterogeneous Value Difference Metric).

HVDM per attribute:

- numeric: ``(|a - b| / (4 * sd)) ** 2``; sd == 0 contributes 0
- nominal: ``vdm(a, b) ** 2`` with ``vdm = 0.5 * sum_c |P(c|a) - P(c|b)|``

and the total distance is the square root of the sum.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

import numpy as np

from rebalance.common.errors import ConfigError, DimensionMismatch, InvalidMetric


class Distance(str, Enum):
    EUCLIDEAN = "euclidean"
    HVDM = "hvdm"


def parse_metric(metric: Distance | str) -> Distance:
    if isinstance(metric, Distance):
        return metric
    if isinstance(metric, str):
        try:
            return Distance(metric.strip().lower())
        except ValueError:
            pass
    known = ", ".join(m.value for m in Distance)
    raise InvalidMetric(f"unsupported distance metric: {metric!r} (known: {known})")


@dataclass(frozen=True)
class HVDMContext:
    """HVDM 계산에 필요한 참조 데이터 통계 (호출 1회당 한 번만 계산)."""

    stds: np.ndarray
    nominal: tuple[int, ...] = ()
    classes: tuple[Any, ...] = ()
    # nominal 컬럼 -> (값 -> 클래스별 조건부 확률 벡터)
    prob_tables: dict[int, dict[float, np.ndarray]] = field(default_factory=dict)

    @classmethod
    def from_reference(
        cls,
        X: np.ndarray,
        y: np.ndarray,
        nominal: Sequence[int] = (),
    ) -> "HVDMContext":
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)
        if X.ndim != 2 or X.shape[0] == 0:
            raise ValueError(f"HVDM reference must be a non-empty 2D matrix, got shape={X.shape}")
        if X.shape[0] != y.shape[0]:
            raise DimensionMismatch(f"X/y size mismatch: {X.shape[0]} vs {y.shape[0]}")

        classes = tuple(dict.fromkeys(y.tolist()))
        tables: dict[int, dict[float, np.ndarray]] = {}
        for j in nominal:
            column = X[:, j]
            table: dict[float, np.ndarray] = {}
            for v in np.unique(column):
                rows = column == v
                n_v = int(rows.sum())
                table[float(v)] = np.array(
                    [np.count_nonzero(y[rows] == c) / n_v for c in classes], dtype=float
                )
            tables[int(j)] = table

        return cls(
            stds=X.std(axis=0),
            nominal=tuple(int(j) for j in nominal),
            classes=classes,
            prob_tables=tables,
        )

    def vdm(self, attribute: int, a: float, b: float) -> float:
        if a == b:
            return 0.0
        table = self.prob_tables[attribute]
        pa = table.get(float(a))
        pb = table.get(float(b))
        # 참조 데이터에 없는 값은 최대 거리
        if pa is None or pb is None:
            return 1.0
        return float(0.5 * np.abs(pa - pb).sum())


def _euclidean_rows(X: np.ndarray, x: np.ndarray) -> np.ndarray:
    return np.sqrt(((X - x) ** 2).sum(axis=1))


def _hvdm_rows(
    X: np.ndarray,
    x: np.ndarray,
    is_purely_numeric: bool,
    context: HVDMContext,
) -> np.ndarray:
    if context.stds.shape[0] != x.shape[0]:
        raise DimensionMismatch(
            f"HVDM context has {context.stds.shape[0]} attributes, vectors have {x.shape[0]}"
        )

    nominal = () if is_purely_numeric else context.nominal
    numeric = np.ones(x.shape[0], dtype=bool)
    numeric[list(nominal)] = False

    sds = context.stds[numeric]
    scaled = np.divide(
        np.abs(X[:, numeric] - x[numeric]),
        4.0 * sds,
        out=np.zeros((X.shape[0], int(numeric.sum()))),
        where=sds > 0,
    )
    total = (scaled**2).sum(axis=1)

    for j in nominal:
        column = X[:, j]
        lookup = {v: context.vdm(j, v, x[j]) ** 2 for v in np.unique(column).tolist()}
        total = total + np.array([lookup[v] for v in column.tolist()], dtype=float)

    return np.sqrt(total)


def distances_to(
    X: np.ndarray,
    x: np.ndarray,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> np.ndarray:
    """x에서 X의 모든 행까지의 거리 벡터."""
    metric = parse_metric(metric)
    X = np.asarray(X, dtype=float)
    x = np.asarray(x, dtype=float)
    if X.ndim != 2 or x.ndim != 1:
        raise DimensionMismatch(f"expected 2D rows and 1D vector, got {X.shape} and {x.shape}")
    if X.shape[1] != x.shape[0]:
        raise DimensionMismatch(f"feature length mismatch: {X.shape[1]} vs {x.shape[0]}")

    if metric is Distance.EUCLIDEAN:
        return _euclidean_rows(X, x)

    if context is None:
        raise ConfigError("HVDM distance requires a reference context")
    return _hvdm_rows(X, x, is_purely_numeric, context)


def distance(
    a: np.ndarray,
    b: np.ndarray,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> float:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise DimensionMismatch(f"feature length mismatch: {a.shape} vs {b.shape}")
    return float(distances_to(a.reshape(1, -1), b, metric, is_purely_numeric, context)[0])


def distance_matrix(
    X: np.ndarray,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> np.ndarray:
    """(n, n) 대칭 거리 행렬. 전체 쌍 O(n^2)."""
    X = np.asarray(X, dtype=float)
    n = X.shape[0]
    out = np.zeros((n, n), dtype=float)
    for i in range(n):
        out[i] = distances_to(X, X[i], metric, is_purely_numeric, context)
    # 부동소수점 오차로 인한 비대칭 제거
    return np.minimum(out, out.T)
