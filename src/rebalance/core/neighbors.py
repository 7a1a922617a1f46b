from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from rebalance.common.errors import ConfigError
from rebalance.core.distance import Distance, HVDMContext, distances_to

logger = logging.getLogger(__name__)


def nearest_from_row(row: np.ndarray, candidates: Sequence[int], k: int) -> np.ndarray:
    """거리 벡터 row 기준으로 candidates 중 가까운 k개 (동률이면 인덱스 순).

    후보가 k개보다 적으면 있는 만큼만 반환한다.
    """
    if k < 1:
        raise ConfigError(f"k must be a positive integer, got {k}")
    candidates = np.asarray(candidates, dtype=int)
    row = np.asarray(row, dtype=float)
    # lexsort: 마지막 key가 1차 정렬 기준
    order = np.lexsort((candidates, row[candidates]))
    return candidates[order[:k]]


def k_neighbors(
    pool: np.ndarray,
    query_index: int,
    k: int,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> np.ndarray:
    """pool[query_index]의 k-최근접 이웃 인덱스 (자기 자신 제외, 거리 오름차순).

    k가 len(pool) - 1 보다 크면 가능한 만큼으로 cap 한다.
    """
    if k < 1:
        raise ConfigError(f"k must be a positive integer, got {k}")
    pool = np.asarray(pool, dtype=float)
    n = pool.shape[0]
    if not 0 <= query_index < n:
        raise IndexError(f"query_index out of range: {query_index} (pool size {n})")

    if k > n - 1:
        logger.debug("k=%d capped to %d available neighbours", k, n - 1)

    row = distances_to(pool, pool[query_index], metric, is_purely_numeric, context)
    candidates = np.delete(np.arange(n), query_index)
    if candidates.size == 0:
        return candidates
    return nearest_from_row(row, candidates, k)


def neighborhoods(
    pool: np.ndarray,
    queries: Sequence[int],
    k: int,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> list[np.ndarray]:
    return [k_neighbors(pool, int(q), k, metric, is_purely_numeric, context) for q in queries]
