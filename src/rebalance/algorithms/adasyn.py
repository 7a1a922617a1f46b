"""ADASYN: Adaptive Synthetic Sampling (He, Bai, Garcia, Li)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np

from rebalance.algorithms.options import RunOptions, prepare
from rebalance.algorithms.registry import register_method
from rebalance.algorithms.result import ResampleResult, finish
from rebalance.core.distance import Distance
from rebalance.core.neighbors import neighborhoods
from rebalance.datasets.bundle import DatasetBundle
from rebalance.sampling.assembly import merge_synthetic
from rebalance.sampling.generators import (
    check_density_params,
    density_weighted_interpolation,
    synthesis_budget,
)


def adasyn_run(
    dataset: DatasetBundle,
    *,
    balance_level: float = 1.0,
    threshold: float = 1.0,
    k: int = 5,
    metric: Distance | str = Distance.EUCLIDEAN,
    seed: int | None = None,
    minority_label: Any = None,
    decimals: int = 2,
    log_path: str | Path | None = None,
) -> ResampleResult:
    """
    - balance_level: 생성 후 목표 균형 정도 B (0~1, 양끝 포함)
    - threshold: 허용하는 최대 불균형 정도 d_th (0 초과 ~ 1). ms/ml 가 이 값 이상이면 생성하지 않음
    - 이웃은 전체 데이터셋에서 찾는다 (다른 클래스 비율이 곧 생성 가중치)
    """
    check_density_params(balance_level, threshold)
    opts = RunOptions(
        metric=metric,
        k=k,
        seed=seed,
        minority_label=minority_label,
        decimals=decimals,
        log_path=log_path,
    )
    ctx = prepare(dataset, opts)

    minority = ctx.minority_indices
    nbrs = neighborhoods(
        ctx.samples, minority, opts.k, opts.metric, ctx.is_purely_numeric, ctx.hvdm
    )
    synthetic, per_seed = density_weighted_interpolation(
        ctx.samples,
        dataset.y,
        ctx.minority_label,
        minority,
        nbrs,
        ctx.rng,
        balance_level=balance_level,
        threshold=threshold,
    )
    merged, created = merge_synthetic(
        dataset, synthetic, ctx.minority_label, ctx.ranges, opts.decimals
    )

    n_min = int(minority.size)
    n_maj = dataset.n_samples() - n_min
    return finish(
        ctx,
        "adasyn",
        merged,
        created=created,
        extra={
            "balance_level": balance_level,
            "threshold": threshold,
            "k": opts.k,
            "metric": opts.metric.value,
            "budget": synthesis_budget(n_maj, n_min, balance_level),
            "per_seed_counts": np.asarray(per_seed).tolist(),
        },
    )


# built-in
register_method("adasyn", adasyn_run, overwrite=True)
