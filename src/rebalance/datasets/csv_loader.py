from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from rebalance.datasets.bundle import DatasetBundle
from rebalance.datasets.fingerprint import sha256_file
from rebalance.datasets.registry import DatasetSpec, register_loader


def _bool(v: Any, default: bool) -> bool:
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    s = str(v).strip().lower()
    if s in {"1", "true", "t", "yes", "y"}:
        return True
    if s in {"0", "false", "f", "no", "n"}:
        return False
    return default


def load_csv_dataset(spec: DatasetSpec) -> DatasetBundle:
    """CSV 파일을 DatasetBundle로 로드.

    spec.params 지원 키:
      - path (required)
      - target_col (required)
      - feature_cols (optional)
      - nominal_cols (optional, 기본: 수치형이 아닌 컬럼)
      - dropna (default: True)
      - sep (default: ',')
      - encoding (optional)

    결측치 처리와 nominal -> 코드 변환은 여기(loader)의 책임이다.
    """
    params = spec.params
    path = params.get("path")
    target_col = params.get("target_col")
    if not path:
        raise ValueError("csv loader requires params.path")
    if not target_col:
        raise ValueError("csv loader requires params.target_col")

    p = Path(str(path))
    if not p.exists():
        raise FileNotFoundError(str(p))

    sep = str(params.get("sep") or ",")
    encoding = params.get("encoding")
    dropna = _bool(params.get("dropna"), True)

    df = pd.read_csv(p, sep=sep, encoding=encoding)
    if target_col not in df.columns:
        raise ValueError(f"target_col not found: {target_col}")

    feature_cols = params.get("feature_cols")
    if feature_cols is None:
        cols = [c for c in df.columns if c != target_col]
    else:
        cols = list(feature_cols)
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ValueError(f"feature_cols not found: {missing}")

    n_raw = int(len(df))
    if dropna:
        df = df.dropna(subset=[*cols, target_col]).reset_index(drop=True)
    if df.empty:
        raise ValueError(f"no rows left after loading: {p}")

    nominal_cols = params.get("nominal_cols")
    bundle = DatasetBundle.from_frame(
        df,
        target_col=str(target_col),
        feature_cols=cols,
        nominal_cols=list(nominal_cols) if nominal_cols is not None else None,
    )

    meta: dict[str, Any] = {
        "source": {"type": "csv", "path": str(p)},
        "fingerprint": {"sha256": sha256_file(p)},
        "target_col": str(target_col),
        "feature_cols": [str(c) for c in cols],
        "nominal_cols": [bundle.feature_names[j] for j in bundle.nominal]
        if bundle.feature_names
        else [],
        "n_rows_raw": n_raw,
        "n_rows": bundle.n_samples(),
        "n_features": bundle.n_features(),
    }

    return bundle.with_rows(bundle.X, bundle.y, **meta)


# built-in
register_loader("csv", load_csv_dataset, overwrite=True)
