from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd

from rebalance.core.normalization import to_nominal


@dataclass(frozen=True)
class DatasetBundle:
    """리샘플링 코어가 다루는 데이터셋 컨테이너.

    - X: (n_samples, n_features) float 행렬. nominal 컬럼은 이미 정수 코드로 변환된 상태
    - y: (n_samples,) 라벨. 비교 가능한 임의의 값(숫자일 필요 없음)
    - nominal: nominal 컬럼 인덱스
    - nominal_codes: nominal 컬럼 인덱스 -> 원래 값 목록 (코드 i <-> values[i])
    - meta: 재현성을 위한 메타데이터(데이터셋 스펙/해시 등)
    """

    X: np.ndarray
    y: np.ndarray
    feature_names: list[str] | None = None
    nominal: tuple[int, ...] = ()
    nominal_codes: dict[int, list[Any]] = field(default_factory=dict)
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.X.ndim != 2:
            raise ValueError(f"X must be 2D array, got shape={self.X.shape}")
        if self.y.ndim != 1:
            raise ValueError(f"y must be 1D array, got shape={self.y.shape}")
        if self.X.shape[0] != self.y.shape[0]:
            raise ValueError(f"X/y size mismatch: {self.X.shape[0]} vs {self.y.shape[0]}")
        if self.feature_names is not None and len(self.feature_names) != self.X.shape[1]:
            raise ValueError("feature_names must match the number of columns in X")
        bad = [c for c in self.nominal if c < 0 or c >= self.X.shape[1]]
        if bad:
            raise ValueError(f"nominal column index out of range: {bad}")
        missing = [c for c in self.nominal if c not in self.nominal_codes]
        if missing:
            raise ValueError(f"nominal_codes missing for columns: {missing}")

    @classmethod
    def from_arrays(
        cls,
        X: Any,
        y: Any,
        feature_names: Sequence[str] | None = None,
    ) -> "DatasetBundle":
        """수치형 배열만으로 bundle 생성 (nominal 없음)."""
        names = list(feature_names) if feature_names is not None else None
        return cls(X=np.asarray(X, dtype=float), y=np.asarray(y), feature_names=names)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        target_col: str,
        feature_cols: Sequence[str] | None = None,
        nominal_cols: Sequence[str] | None = None,
    ) -> "DatasetBundle":
        """DataFrame을 bundle로 변환.

        nominal_cols가 None이면 수치형이 아닌 컬럼을 nominal로 본다.
        nominal 값은 문자열 기준 정렬 순서대로 0, 1, 2, ... 코드로 매핑한다.
        """
        if target_col not in df.columns:
            raise KeyError(f"target_col not found: {target_col}")

        if feature_cols is None:
            cols = [c for c in df.columns if c != target_col]
        else:
            cols = list(feature_cols)
            missing = [c for c in cols if c not in df.columns]
            if missing:
                raise KeyError(f"feature_cols not found: {missing}")

        if nominal_cols is None:
            nominal_set = {c for c in cols if not pd.api.types.is_numeric_dtype(df[c].dtype)}
        else:
            nominal_set = set(nominal_cols)
            unknown = sorted(str(c) for c in nominal_set - set(cols))
            if unknown:
                raise KeyError(f"nominal_cols not among feature columns: {unknown}")

        X = np.empty((len(df), len(cols)), dtype=float)
        nominal: list[int] = []
        nominal_codes: dict[int, list[Any]] = {}
        for j, c in enumerate(cols):
            s = df[c]
            if c in nominal_set:
                values = sorted(pd.unique(s), key=str)
                mapping = {v: i for i, v in enumerate(values)}
                X[:, j] = s.map(mapping).to_numpy(dtype=float)
                nominal.append(j)
                nominal_codes[j] = list(values)
            else:
                X[:, j] = s.to_numpy(dtype=float)

        return cls(
            X=X,
            y=df[target_col].to_numpy(),
            feature_names=[str(c) for c in cols],
            nominal=tuple(nominal),
            nominal_codes=nominal_codes,
        )

    def to_frame(self, label_col: str = "label") -> pd.DataFrame:
        """writer용 DataFrame. nominal 코드는 원래 값으로 되돌린다."""
        names = self.feature_names or [f"f{j}" for j in range(self.n_features())]
        if self.nominal:
            values = to_nominal(self.X, self.nominal, self.nominal_codes)
        else:
            values = self.X
        df = pd.DataFrame(values, columns=names)
        df[label_col] = self.y
        return df

    def with_rows(self, X: np.ndarray, y: np.ndarray, **meta: Any) -> "DatasetBundle":
        """같은 스키마(feature/nominal 정보)로 행만 바꾼 새 bundle."""
        new_meta = dict(self.meta)
        new_meta.update(meta)
        return DatasetBundle(
            X=X,
            y=y,
            feature_names=list(self.feature_names) if self.feature_names is not None else None,
            nominal=self.nominal,
            nominal_codes={k: list(v) for k, v in self.nominal_codes.items()},
            meta=new_meta,
        )

    def is_purely_numeric(self) -> bool:
        return len(self.nominal) == 0

    def n_samples(self) -> int:
        return int(self.X.shape[0])

    def n_features(self) -> int:
        return int(self.X.shape[1])
