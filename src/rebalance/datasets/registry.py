from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable

from rebalance.datasets.bundle import DatasetBundle


def _kind_key(kind: str) -> str:
    k = str(kind or "").strip().lower()
    if not k:
        raise ValueError("dataset kind is required")
    return k


@dataclass(frozen=True)
class DatasetSpec:
    """어떤 loader로 무엇을 읽을지.

    - kind: loader 이름 (예: csv)
    - name: run log에 남길 표시용 이름(선택, 없으면 kind)
    - params: loader별 파라미터 (csv: path, target_col, nominal_cols, ...)
    """

    kind: str
    name: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def display_name(self) -> str:
        return self.name or _kind_key(self.kind)

    @classmethod
    def from_json(cls, path: str | Path) -> "DatasetSpec":
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(obj, dict):
            raise ValueError("dataset spec JSON must be an object")
        return cls(
            kind=str(obj.get("kind") or ""),
            name=obj.get("name"),
            params=dict(obj.get("params") or {}),
        )


DatasetLoader = Callable[[DatasetSpec], DatasetBundle]

_LOADERS: dict[str, DatasetLoader] = {}


def register_loader(kind: str, loader: DatasetLoader, *, overwrite: bool = False) -> None:
    k = _kind_key(kind)
    if k in _LOADERS and not overwrite:
        raise ValueError(f"loader already registered: {k}")
    _LOADERS[k] = loader


def list_loaders() -> list[str]:
    return sorted(_LOADERS)


def _source_meta(spec: DatasetSpec, bundle: DatasetBundle) -> dict[str, Any]:
    # loader가 이미 채운 값은 덮어쓰지 않는다
    defaults = {
        "dataset_kind": _kind_key(spec.kind),
        "dataset_name": spec.display_name(),
        "dataset_spec": asdict(spec),
    }
    return {key: bundle.meta.get(key, value) for key, value in defaults.items()}


def load_dataset(spec: DatasetSpec) -> DatasetBundle:
    """spec.kind에 등록된 loader로 읽고, 출처 메타(kind/name/spec)를 붙여서 반환."""
    k = _kind_key(spec.kind)
    loader = _LOADERS.get(k)
    if loader is None:
        raise ValueError(f"unknown dataset kind: {k} (known: {', '.join(list_loaders()) or '-'})")

    bundle = loader(spec)
    if not isinstance(bundle, DatasetBundle):
        raise TypeError(f"loader '{k}' must return DatasetBundle, got {type(bundle).__name__}")
    return bundle.with_rows(bundle.X, bundle.y, **_source_meta(spec, bundle))
