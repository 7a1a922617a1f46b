from __future__ import annotations

# built-in loaders registration
from rebalance.datasets import csv_loader as _csv_loader  # noqa: F401
from rebalance.datasets.bundle import DatasetBundle
from rebalance.datasets.registry import (
    DatasetLoader,
    DatasetSpec,
    list_loaders,
    load_dataset,
    register_loader,
)

__all__ = [
    "DatasetBundle",
    "DatasetLoader",
    "DatasetSpec",
    "list_loaders",
    "load_dataset",
    "register_loader",
]
