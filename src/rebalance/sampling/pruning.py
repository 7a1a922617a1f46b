from __future__ import annotations

import logging
from typing import Any

import numpy as np

from rebalance.core.neighbors import nearest_from_row

logger = logging.getLogger(__name__)


def neighbor_vote(
    distances: np.ndarray,
    labels: np.ndarray,
    k: int,
    untouchable: Any,
) -> np.ndarray:
    """Edited Nearest Neighbour rule. 남길 샘플이면 True인 mask를 반환.

    샘플의 라벨이 k-최근접 이웃 투표에서 다른 어떤 라벨보다 "엄격하게" 많아야 남는다.
    동률이면 제거 쪽으로 판단한다. untouchable 라벨 샘플은 투표와 무관하게 항상 남긴다.
    """
    distances = np.asarray(distances, dtype=float)
    label_list = np.asarray(labels).tolist()
    n = len(label_list)
    if distances.shape != (n, n):
        raise ValueError(f"distance matrix must be ({n}, {n}), got {distances.shape}")

    keep = np.ones(n, dtype=bool)
    everyone = np.arange(n)
    for i, own in enumerate(label_list):
        if own == untouchable:
            continue
        nbrs = nearest_from_row(distances[i], everyone[everyone != i], k)
        votes: dict[Any, int] = {}
        for j in nbrs.tolist():
            votes[label_list[j]] = votes.get(label_list[j], 0) + 1
        own_votes = votes.pop(own, 0)
        best_other = max(votes.values(), default=0)
        keep[i] = own_votes > best_other

    logger.debug("neighbour vote marks %d of %d samples for removal", int((~keep).sum()), n)
    return keep


def nearest_other_class(distances: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """각 샘플의 다른 클래스 중 최근접 인덱스 (없으면 -1)."""
    distances = np.asarray(distances, dtype=float)
    labels = np.asarray(labels)
    n = labels.shape[0]
    nearest = np.full(n, -1, dtype=int)
    for i in range(n):
        candidates = np.flatnonzero(labels != labels[i])
        if candidates.size:
            nearest[i] = int(nearest_from_row(distances[i], candidates, 1)[0])
    return nearest


def tomek_links(distances: np.ndarray, labels: np.ndarray) -> list[tuple[int, int]]:
    """서로가 서로의 다른 클래스 최근접 이웃인 쌍 (i < j)."""
    nearest = nearest_other_class(distances, labels)
    return [(i, int(j)) for i, j in enumerate(nearest) if j > i and nearest[j] == i]


def tomek_removal_mask(n_samples: int, links: list[tuple[int, int]]) -> np.ndarray:
    """link에 속한 샘플은 양쪽 모두 제거 대상."""
    removed = np.zeros(n_samples, dtype=bool)
    for i, j in links:
        removed[i] = True
        removed[j] = True
    return removed
