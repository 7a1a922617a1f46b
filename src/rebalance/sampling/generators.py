"""Synthetic minority sample generators.

- uniform interpolation (SMOTE): ``x + gap * (z - x)``, gap ~ U[0, 1) per feature
- density-weighted interpolation (ADASYN): uniform interpolation with per-seed
  counts proportional to how many of the seed's neighbours are not minority
- principal-axis interpolation (ADOMS): step from ``x`` along the first
  principal component of the neighbourhood

Every generator consumes neighbourhoods expressed as row indices into
``samples`` and draws all randomness from the ``numpy.random.Generator`` it is
given, so a fixed seed reproduces the same rows.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import numpy as np

from rebalance.common.errors import ConfigError, InsufficientNeighbors
from rebalance.core.distance import Distance, HVDMContext, distance

logger = logging.getLogger(__name__)


def _interpolate(
    samples: np.ndarray,
    seed_indices: Sequence[int],
    neighborhoods: Sequence[np.ndarray],
    counts: Sequence[int],
    rng: np.random.Generator,
) -> np.ndarray:
    n_features = samples.shape[1]
    out = np.empty((int(sum(counts)), n_features), dtype=float)
    row = 0
    for x_idx, nbrs, n_new in zip(seed_indices, neighborhoods, counts):
        if n_new == 0:
            continue
        if len(nbrs) == 0:
            raise InsufficientNeighbors(f"sample {x_idx} has no neighbours to interpolate with")
        x = samples[x_idx]
        for _ in range(n_new):
            z = samples[nbrs[rng.integers(len(nbrs))]]
            gap = rng.random(n_features)
            out[row] = x + gap * (z - x)
            row += 1
    return out


def uniform_interpolation(
    samples: np.ndarray,
    seed_indices: Sequence[int],
    neighborhoods: Sequence[np.ndarray],
    n_per_seed: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """seed마다 n_per_seed개의 SMOTE 샘플 생성. 결과는 seed 순서대로."""
    if len(seed_indices) != len(neighborhoods):
        raise ValueError("seed_indices and neighborhoods must have the same length")
    if n_per_seed < 0:
        raise ConfigError(f"n_per_seed must be >= 0, got {n_per_seed}")
    samples = np.asarray(samples, dtype=float)
    return _interpolate(samples, seed_indices, neighborhoods, [n_per_seed] * len(seed_indices), rng)


def check_density_params(balance_level: float, threshold: float) -> None:
    if not 0.0 <= balance_level <= 1.0:
        raise ConfigError(f"balance_level must be between 0 and 1, both included (got {balance_level})")
    if not 0.0 < threshold <= 1.0:
        raise ConfigError(f"threshold must be between 0 and 1, zero not included (got {threshold})")


def synthesis_budget(n_majority: int, n_minority: int, balance_level: float) -> int:
    """G = round((ml - ms) * B), round half up."""
    return max(int(math.floor((n_majority - n_minority) * balance_level + 0.5)), 0)


def difficulty_ratios(
    labels: np.ndarray,
    minority_label: Any,
    neighborhoods: Sequence[np.ndarray],
) -> np.ndarray:
    """이웃 중 minority가 아닌 샘플의 비율."""
    labels = np.asarray(labels)
    ratios = np.zeros(len(neighborhoods), dtype=float)
    for i, nbrs in enumerate(neighborhoods):
        if len(nbrs) == 0:
            raise InsufficientNeighbors("density-weighted interpolation needs at least 1 neighbour")
        ratios[i] = np.count_nonzero(labels[nbrs] != minority_label) / len(nbrs)
    return ratios


def synthesis_counts(ratios: np.ndarray, budget: int) -> np.ndarray:
    """정규화된 ratio * G 를 floor 해서 seed별 생성 개수로."""
    ratios = np.asarray(ratios, dtype=float)
    total = ratios.sum()
    if total <= 0:
        return np.zeros(ratios.shape[0], dtype=int)
    return np.floor(ratios / total * budget).astype(int)


def density_weighted_interpolation(
    samples: np.ndarray,
    labels: np.ndarray,
    minority_label: Any,
    seed_indices: Sequence[int],
    neighborhoods: Sequence[np.ndarray],
    rng: np.random.Generator,
    balance_level: float = 1.0,
    threshold: float = 1.0,
) -> tuple[np.ndarray, np.ndarray]:
    """ADASYN 생성. (synthetic rows, seed별 생성 개수)를 반환.

    seed_indices는 minority 샘플, neighborhoods는 전체 데이터셋 기준 이웃이다.
    minority / majority 비율이 이미 threshold 이상이면 아무것도 만들지 않는다.
    """
    check_density_params(balance_level, threshold)
    if len(seed_indices) != len(neighborhoods):
        raise ValueError("seed_indices and neighborhoods must have the same length")

    samples = np.asarray(samples, dtype=float)
    labels = np.asarray(labels)
    empty = (np.empty((0, samples.shape[1]), dtype=float), np.zeros(len(seed_indices), dtype=int))

    n_min = int(np.count_nonzero(labels == minority_label))
    n_maj = int(labels.shape[0]) - n_min
    if n_min == 0 or n_maj == 0:
        logger.warning("density-weighted interpolation needs both minority and majority samples")
        return empty

    degree = n_min / n_maj
    if degree >= threshold:
        logger.warning(
            "degree of imbalance %.4f already >= threshold %.4f, nothing generated", degree, threshold
        )
        return empty

    budget = synthesis_budget(n_maj, n_min, balance_level)
    ratios = difficulty_ratios(labels, minority_label, neighborhoods)
    if ratios.sum() <= 0:
        logger.warning("all minority neighbourhoods are pure minority, nothing generated")
        return empty

    counts = synthesis_counts(ratios, budget)
    logger.debug("density-weighted budget G=%d, generating %d rows", budget, int(counts.sum()))
    return _interpolate(samples, seed_indices, neighborhoods, counts.tolist(), rng), counts


def principal_axis(vectors: np.ndarray) -> np.ndarray:
    """공분산 행렬의 최대 eigenvalue에 해당하는 단위 eigenvector (부호는 임의)."""
    vectors = np.asarray(vectors, dtype=float)
    if vectors.ndim != 2 or vectors.shape[0] < 2:
        raise InsufficientNeighbors(
            f"principal axis needs at least 2 vectors, got {vectors.shape[0] if vectors.ndim == 2 else 0}"
        )
    centered = vectors - vectors.mean(axis=0)
    cov = centered.T @ centered / vectors.shape[0]
    # eigh: eigenvalue 오름차순 -> 마지막 column이 dominant
    _, eigvecs = np.linalg.eigh(cov)
    return eigvecs[:, -1]


def principal_axis_interpolation(
    samples: np.ndarray,
    seed_indices: Sequence[int],
    neighborhoods: Sequence[np.ndarray],
    rng: np.random.Generator,
    n_rounds: int = 1,
    metric: Distance | str = Distance.EUCLIDEAN,
    is_purely_numeric: bool = True,
    context: HVDMContext | None = None,
) -> np.ndarray:
    """ADOMS 생성. n_rounds번 모든 seed를 돌며 seed마다 1개씩 만든다.

    synthetic = x + proj * axis * D * u
      proj = dot(z - x, axis) / dot(axis, axis), D = distance(x, z), u ~ U[0, 1)
    """
    if len(seed_indices) != len(neighborhoods):
        raise ValueError("seed_indices and neighborhoods must have the same length")
    if n_rounds < 0:
        raise ConfigError(f"n_rounds must be >= 0, got {n_rounds}")

    samples = np.asarray(samples, dtype=float)
    for x_idx, nbrs in zip(seed_indices, neighborhoods):
        if len(nbrs) < 2:
            raise InsufficientNeighbors(
                f"principal-axis interpolation needs at least 2 neighbours, sample {x_idx} has {len(nbrs)}"
            )
    axes = [principal_axis(samples[nbrs]) for nbrs in neighborhoods]

    out = np.empty((n_rounds * len(seed_indices), samples.shape[1]), dtype=float)
    row = 0
    for _ in range(n_rounds):
        for x_idx, nbrs, axis in zip(seed_indices, neighborhoods, axes):
            x = samples[x_idx]
            z = samples[nbrs[rng.integers(len(nbrs))]]
            d = distance(x, z, metric, is_purely_numeric, context)
            norm2 = float(axis @ axis)
            proj = float((z - x) @ axis) / norm2 if norm2 > 0 else 0.0
            out[row] = x + proj * axis * d * rng.random()
            row += 1
    return out
