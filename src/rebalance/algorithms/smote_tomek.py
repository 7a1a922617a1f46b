"""SMOTE oversampling followed by Tomek-link cleaning."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from rebalance.algorithms.options import RunOptions, check_percent, prepare
from rebalance.algorithms.registry import register_method
from rebalance.algorithms.result import ResampleResult, finish
from rebalance.core.distance import Distance, HVDMContext, distance_matrix
from rebalance.core.neighbors import neighborhoods
from rebalance.core.normalization import zero_one_normalize
from rebalance.datasets.bundle import DatasetBundle
from rebalance.sampling.assembly import filter_rows, merge_synthetic
from rebalance.sampling.generators import uniform_interpolation
from rebalance.sampling.pruning import tomek_links, tomek_removal_mask

logger = logging.getLogger(__name__)


def smote_tomek_run(
    dataset: DatasetBundle,
    *,
    percent: int = 500,
    k: int = 5,
    metric: Distance | str = Distance.EUCLIDEAN,
    seed: int | None = None,
    minority_label: Any = None,
    decimals: int = 2,
    log_path: str | Path | None = None,
) -> ResampleResult:
    """minority 샘플마다 percent/100 개의 SMOTE 샘플을 만든 뒤 Tomek link 양쪽을 제거.

    SMOTE 이웃은 minority 안에서만 찾고, Tomek link는 합쳐진 전체 데이터에서 찾는다.
    """
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

    # 1) SMOTE
    minority = ctx.minority_indices
    local = neighborhoods(
        ctx.samples[minority],
        range(minority.size),
        opts.k,
        opts.metric,
        ctx.is_purely_numeric,
        ctx.hvdm,
    )
    synthetic = uniform_interpolation(
        ctx.samples,
        minority,
        [minority[nbrs] for nbrs in local],
        percent // 100,
        ctx.rng,
    )
    merged, created = merge_synthetic(
        dataset, synthetic, ctx.minority_label, ctx.ranges, opts.decimals
    )
    logger.debug("smote generated %d rows", created.size)

    # 2) Tomek links (합쳐진 데이터 기준)
    if ctx.ranges is not None:
        work = zero_one_normalize(merged.X, ctx.ranges, merged.nominal)
        context = None
    else:
        work = merged.X
        context = HVDMContext.from_reference(work, merged.y, merged.nominal)
    dists = distance_matrix(work, opts.metric, ctx.is_purely_numeric, context)
    links = tomek_links(dists, merged.y)
    removed_mask = tomek_removal_mask(merged.n_samples(), links)
    cleaned, removed = filter_rows(merged, ~removed_mask)

    # 출력 기준 위치로 변환
    position = np.cumsum(~removed_mask) - 1
    created_kept = position[created[~removed_mask[created]]]
    removed_original = removed[removed < dataset.n_samples()]

    return finish(
        ctx,
        "smote_tomek",
        cleaned,
        created=created_kept,
        removed=removed_original,
        extra={
            "percent": percent,
            "k": opts.k,
            "metric": opts.metric.value,
            "synthetic_generated": int(created.size),
            "tomek_links": len(links),
        },
    )


# built-in
register_method("smote_tomek", smote_tomek_run, overwrite=True)
