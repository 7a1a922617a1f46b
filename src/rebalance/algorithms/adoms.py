"""ADOMS: synthetic minority samples along the local first principal axis (Tang, Chen)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rebalance.algorithms.options import RunOptions, check_percent, prepare
from rebalance.algorithms.registry import register_method
from rebalance.algorithms.result import ResampleResult, finish
from rebalance.core.distance import Distance, HVDMContext
from rebalance.core.neighbors import neighborhoods
from rebalance.datasets.bundle import DatasetBundle
from rebalance.sampling.assembly import merge_synthetic
from rebalance.sampling.generators import principal_axis_interpolation


def adoms_run(
    dataset: DatasetBundle,
    *,
    percent: int = 300,
    k: int = 5,
    metric: Distance | str = Distance.EUCLIDEAN,
    seed: int | None = None,
    minority_label: Any = None,
    decimals: int = 2,
    log_path: str | Path | None = None,
) -> ResampleResult:
    check_percent(percent)
    opts = RunOptions(
        metric=metric,
        k=k,
        seed=seed,
        minority_label=minority_label,
        decimals=decimals,
        log_path=log_path,
    )
    ctx = prepare(dataset, opts)

    # 이웃 탐색과 HVDM 통계 모두 minority 샘플만 기준
    minority = ctx.minority_indices
    pool = ctx.samples[minority]
    context = None
    if ctx.hvdm is not None:
        context = HVDMContext.from_reference(pool, dataset.y[minority], dataset.nominal)

    local = neighborhoods(
        pool, range(minority.size), opts.k, opts.metric, ctx.is_purely_numeric, context
    )
    synthetic = principal_axis_interpolation(
        pool,
        range(minority.size),
        local,
        ctx.rng,
        n_rounds=percent // 100,
        metric=opts.metric,
        is_purely_numeric=ctx.is_purely_numeric,
        context=context,
    )
    merged, created = merge_synthetic(
        dataset, synthetic, ctx.minority_label, ctx.ranges, opts.decimals
    )

    return finish(
        ctx,
        "adoms",
        merged,
        created=created,
        extra={"percent": percent, "k": opts.k, "metric": opts.metric.value},
    )


# built-in
register_method("adoms", adoms_run, overwrite=True)
