"""Edited Nearest Neighbour rule (Wilson)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np

from rebalance.algorithms.options import RunOptions, prepare
from rebalance.algorithms.registry import register_method
from rebalance.algorithms.result import ResampleResult, finish
from rebalance.common.errors import DimensionMismatch
from rebalance.core.distance import Distance, distance_matrix
from rebalance.datasets.bundle import DatasetBundle
from rebalance.sampling.assembly import filter_rows
from rebalance.sampling.pruning import neighbor_vote


def enn_run(
    dataset: DatasetBundle,
    *,
    k: int = 3,
    metric: Distance | str = Distance.EUCLIDEAN,
    seed: int | None = None,
    minority_label: Any = None,
    log_path: str | Path | None = None,
    distances: np.ndarray | None = None,
) -> ResampleResult:
    """k-NN 다수결이 자기 라벨과 맞지 않는 샘플을 제거 (minority 클래스는 제외).

    seed는 결과에 영향을 주지 않지만 run log 기록용으로 받는다.
    distances가 주어지면 (n, n) 거리 행렬로 그대로 쓰고 다시 계산하지 않는다.
    """
    opts = RunOptions(
        metric=metric,
        k=k,
        seed=seed,
        minority_label=minority_label,
        log_path=log_path,
    )
    ctx = prepare(dataset, opts)

    n = dataset.n_samples()
    if distances is None:
        dists = distance_matrix(ctx.samples, opts.metric, ctx.is_purely_numeric, ctx.hvdm)
    else:
        dists = np.asarray(distances, dtype=float)
        if dists.shape != (n, n):
            raise DimensionMismatch(f"distances must have shape ({n}, {n}), got {dists.shape}")
    keep = neighbor_vote(dists, dataset.y, opts.k, ctx.minority_label)
    kept, removed = filter_rows(dataset, keep)

    return finish(
        ctx,
        "enn",
        kept,
        removed=removed,
        extra={
            "k": opts.k,
            "metric": opts.metric.value,
            "precomputed_distances": distances is not None,
        },
    )


# built-in
register_method("enn", enn_run, overwrite=True)
