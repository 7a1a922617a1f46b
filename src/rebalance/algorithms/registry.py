from __future__ import annotations

from typing import Any, Callable

from rebalance.algorithms.result import ResampleResult
from rebalance.datasets.bundle import DatasetBundle

ResampleMethod = Callable[..., ResampleResult]


_METHODS: dict[str, ResampleMethod] = {}


def register_method(name: str, method: ResampleMethod, *, overwrite: bool = False) -> None:
    k = name.strip().lower()
    if not k:
        raise ValueError("method name is required")
    if (k in _METHODS) and (not overwrite):
        raise ValueError(f"method already registered: {k}")
    _METHODS[k] = method


def list_methods() -> list[str]:
    return sorted(_METHODS.keys())


def get_method(name: str) -> ResampleMethod:
    k = name.strip().lower()
    if k not in _METHODS:
        known = ", ".join(list_methods()) or "(none)"
        raise ValueError(f"unknown resampling method: {k} (known: {known})")
    return _METHODS[k]


def resample(dataset: DatasetBundle, method: str, **params: Any) -> ResampleResult:
    """이름으로 알고리즘을 골라 실행. params는 해당 알고리즘의 keyword 인자."""
    return get_method(method)(dataset, **params)
