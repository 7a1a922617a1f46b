from __future__ import annotations

from typing import Any, Iterable

import numpy as np


def class_counts(y: Iterable[Any]) -> dict[Any, int]:
    """라벨 -> 개수 (처음 등장한 순서 유지)."""
    counts: dict[Any, int] = {}
    for label in np.asarray(y).tolist():
        counts[label] = counts.get(label, 0) + 1
    return counts


def detect_minority(counts: dict[Any, int], pinned: Any = None) -> Any:
    """minority(=untouchable) 라벨.

    pinned가 주어지면 그대로 쓰고, 아니면 개수가 가장 적은 라벨
    (동률이면 먼저 등장한 라벨).
    """
    if not counts:
        raise ValueError("cannot detect minority class of an empty dataset")
    if pinned is not None:
        if pinned not in counts:
            raise ValueError(f"minority label not present in dataset: {pinned!r}")
        return pinned
    return min(counts, key=lambda label: counts[label])


def imbalance_ratio(counts: dict[Any, int], minority: Any) -> float:
    """가장 큰 다른 클래스 개수 / minority 개수."""
    others = [n for label, n in counts.items() if label != minority]
    n_min = counts.get(minority, 0)
    if not others:
        return 1.0
    if n_min == 0:
        return float("inf")
    return max(others) / n_min


def label_mask(y: Iterable[Any], label: Any) -> np.ndarray:
    """y == label 을 원소 단위로 (라벨 타입이 섞여 있어도 안전하게)."""
    return np.array([v == label for v in np.asarray(y).tolist()], dtype=bool)
