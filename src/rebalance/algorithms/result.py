from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import numpy as np

from rebalance.algorithms.options import RunContext
from rebalance.core.classes import class_counts, imbalance_ratio
from rebalance.datasets.bundle import DatasetBundle
from rebalance.tracking.run_log import write_run_log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResampleResult:
    method: str
    dataset: DatasetBundle
    seed: int
    minority_label: Any
    counts_before: dict[Any, int]
    counts_after: dict[Any, int]
    # 출력 데이터셋에서 새로 만들어진 행의 위치
    created_indices: np.ndarray
    # 입력 데이터셋에서 제거된 행의 위치
    removed_indices: np.ndarray
    elapsed_seconds: float
    extra: dict[str, Any] = field(default_factory=dict)
    log_path: Path | None = None

    @property
    def imbalance_ratio_before(self) -> float:
        return imbalance_ratio(self.counts_before, self.minority_label)

    @property
    def imbalance_ratio_after(self) -> float:
        return imbalance_ratio(self.counts_after, self.minority_label)

    def summary(self) -> dict[str, Any]:
        n_before = sum(self.counts_before.values())
        n_after = self.dataset.n_samples()
        return {
            "method": self.method,
            "seed": self.seed,
            "minority_label": self.minority_label,
            "original_size": n_before,
            "new_size": n_after,
            "reduction_percentage": 100.0 - (n_after / n_before) * 100.0 if n_before else 0.0,
            "counts_before": self.counts_before,
            "counts_after": self.counts_after,
            "imbalance_ratio_before": self.imbalance_ratio_before,
            "imbalance_ratio_after": self.imbalance_ratio_after,
            "created_indices": self.created_indices.tolist(),
            "removed_indices": self.removed_indices.tolist(),
            "elapsed_seconds": self.elapsed_seconds,
            **self.extra,
        }


def finish(
    ctx: RunContext,
    method: str,
    dataset: DatasetBundle,
    *,
    created: np.ndarray | None = None,
    removed: np.ndarray | None = None,
    extra: dict[str, Any] | None = None,
) -> ResampleResult:
    """결과 bundle을 ResampleResult로 묶고, log_path가 있으면 run log를 남긴다."""
    elapsed = time.perf_counter() - ctx.started
    out = dataset.with_rows(dataset.X, dataset.y, resampled_by=method, seed=ctx.seed)
    result = ResampleResult(
        method=method,
        dataset=out,
        seed=ctx.seed,
        minority_label=ctx.minority_label,
        counts_before=dict(ctx.counts),
        counts_after=class_counts(out.y),
        created_indices=np.asarray(created if created is not None else [], dtype=int),
        removed_indices=np.asarray(removed if removed is not None else [], dtype=int),
        elapsed_seconds=elapsed,
        extra=dict(extra or {}),
    )
    logger.info(
        "%s: %d -> %d rows (created %d, removed %d) in %.3fs",
        method,
        sum(result.counts_before.values()),
        out.n_samples(),
        result.created_indices.size,
        result.removed_indices.size,
        elapsed,
    )

    if ctx.options.log_path is None:
        return result
    path = write_run_log(Path(ctx.options.log_path), result.summary())
    return replace(result, log_path=path)
