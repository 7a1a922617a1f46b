from __future__ import annotations

# built-in methods registration
from rebalance.algorithms import adasyn as _adasyn  # noqa: F401
from rebalance.algorithms import adoms as _adoms  # noqa: F401
from rebalance.algorithms import enn as _enn  # noqa: F401
from rebalance.algorithms import smote_tomek as _smote_tomek  # noqa: F401
from rebalance.algorithms.adasyn import adasyn_run
from rebalance.algorithms.adoms import adoms_run
from rebalance.algorithms.enn import enn_run
from rebalance.algorithms.options import RunOptions
from rebalance.algorithms.registry import (
    ResampleMethod,
    get_method,
    list_methods,
    register_method,
    resample,
)
from rebalance.algorithms.result import ResampleResult
from rebalance.algorithms.smote_tomek import smote_tomek_run

__all__ = [
    "ResampleMethod",
    "ResampleResult",
    "RunOptions",
    "adasyn_run",
    "adoms_run",
    "enn_run",
    "get_method",
    "list_methods",
    "register_method",
    "resample",
    "smote_tomek_run",
]
