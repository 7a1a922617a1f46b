from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from rebalance.common.errors import ConfigError
from rebalance.core.classes import class_counts, detect_minority, label_mask
from rebalance.core.distance import Distance, HVDMContext, parse_metric
from rebalance.core.normalization import AttributeRanges, zero_one_normalize
from rebalance.datasets.bundle import DatasetBundle


def resolve_seed(seed: int | None) -> int:
    """seed가 없으면 현재 시각(ms)을 사용. 재현이 필요하면 명시적으로 넘길 것."""
    if seed is None:
        return time.time_ns() // 1_000_000
    return int(seed)


def check_percent(percent: int) -> None:
    # 200.0 같은 float도 통과시키면 percent // 100 이 float 라운드 수가 된다
    if isinstance(percent, bool) or not isinstance(percent, (int, np.integer)):
        raise ConfigError(f"percent must be an integer, got {percent!r}")
    if percent <= 0 or percent % 100 != 0:
        raise ConfigError(f"percent must be a positive multiple of 100, got {percent}")


@dataclass(frozen=True)
class RunOptions:
    """알고리즘 공통 파라미터 (호출 1회 동안 불변)."""

    metric: Distance = Distance.EUCLIDEAN
    k: int = 5
    seed: int | None = None
    minority_label: Any = None
    decimals: int = 2
    log_path: str | Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metric", parse_metric(self.metric))
        if isinstance(self.k, bool) or not isinstance(self.k, (int, np.integer)) or self.k < 1:
            raise ConfigError(f"k must be a positive integer, got {self.k!r}")
        if self.decimals < 0:
            raise ConfigError(f"decimals must be >= 0, got {self.decimals}")


@dataclass(frozen=True)
class RunContext:
    """호출 1회 동안만 쓰이는 파생 데이터 (정규화 행렬, minority 정보, RNG 등)."""

    options: RunOptions
    seed: int
    rng: np.random.Generator
    samples: np.ndarray
    ranges: AttributeRanges | None
    counts: dict[Any, int]
    minority_label: Any
    minority_indices: np.ndarray
    hvdm: HVDMContext | None
    is_purely_numeric: bool
    started: float


def prepare(dataset: DatasetBundle, options: RunOptions) -> RunContext:
    if dataset.n_samples() == 0:
        raise ValueError("cannot resample an empty dataset")

    started = time.perf_counter()
    seed = resolve_seed(options.seed)
    counts = class_counts(dataset.y)
    minority = detect_minority(counts, options.minority_label)

    if options.metric is Distance.EUCLIDEAN:
        ranges: AttributeRanges | None = AttributeRanges.from_matrix(dataset.X)
        samples = zero_one_normalize(dataset.X, ranges, dataset.nominal)
        hvdm = None
    else:
        ranges = None
        samples = np.array(dataset.X, dtype=float, copy=True)
        hvdm = HVDMContext.from_reference(samples, dataset.y, dataset.nominal)

    return RunContext(
        options=options,
        seed=seed,
        rng=np.random.default_rng(seed),
        samples=samples,
        ranges=ranges,
        counts=counts,
        minority_label=minority,
        minority_indices=np.flatnonzero(label_mask(dataset.y, minority)),
        hvdm=hvdm,
        is_purely_numeric=dataset.is_purely_numeric(),
        started=started,
    )
