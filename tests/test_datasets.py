from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from rebalance.datasets import DatasetBundle, DatasetSpec, load_dataset, register_loader


def test_dataset_registry_register_and_load(tmp_path: Path):
    def _loader(spec: DatasetSpec) -> DatasetBundle:
        X = np.ones((3, 2), dtype=float)
        y = np.array([0, 1, 0])
        return DatasetBundle(X=X, y=y, feature_names=["a", "b"], meta={"ok": True})

    register_loader("toy", _loader, overwrite=True)

    spec = DatasetSpec(kind="toy", name="my-toy", params={"x": 1})
    b = load_dataset(spec)

    assert b.X.shape == (3, 2)
    assert b.meta["ok"] is True
    assert b.meta["dataset_kind"] == "toy"
    assert b.meta["dataset_name"] == "my-toy"
    assert isinstance(b.meta.get("dataset_spec"), dict)


def test_unknown_kind_and_duplicate_registration():
    with pytest.raises(ValueError):
        load_dataset(DatasetSpec(kind="parquet-nope"))
    with pytest.raises(ValueError):
        register_loader("csv", lambda spec: None)  # type: ignore[arg-type,return-value]


def test_csv_loader_numeric(tmp_path: Path):
    df = pd.DataFrame(
        {
            "f1": [1.0, 2.0, 3.0, None],
            "f2": [10.0, 20.0, 30.0, 40.0],
            "y": [0, 1, 0, 1],
        }
    )
    p = tmp_path / "toy.csv"
    df.to_csv(p, index=False)

    b = load_dataset(DatasetSpec(kind="csv", params={"path": str(p), "target_col": "y"}))

    assert b.X.shape == (3, 2)
    assert b.y.tolist() == [0, 1, 0]
    assert b.is_purely_numeric()
    assert b.meta["dataset_kind"] == "csv"
    assert b.meta["n_rows_raw"] == 4
    assert b.meta["fingerprint"]["sha256"]


def test_csv_loader_codes_nominal_columns(tmp_path: Path):
    df = pd.DataFrame(
        {
            "color": ["red", "blue", "red", "green"],
            "value": [1, 2, 3, 4],
            "label": ["no", "yes", "no", "no"],
        }
    )
    p = tmp_path / "toy2.csv"
    df.to_csv(p, index=False)

    b = load_dataset(DatasetSpec(kind="csv", params={"path": str(p), "target_col": "label"}))

    assert b.nominal == (0,)
    assert b.nominal_codes[0] == ["blue", "green", "red"]
    assert b.X[:, 0].tolist() == [2.0, 0.0, 2.0, 1.0]
    assert b.meta["nominal_cols"] == ["color"]

    frame = b.to_frame(label_col="label")
    assert frame["color"].tolist() == df["color"].tolist()
    assert frame["label"].tolist() == df["label"].tolist()


def test_csv_loader_requires_params(tmp_path: Path):
    with pytest.raises(ValueError):
        load_dataset(DatasetSpec(kind="csv", params={"target_col": "y"}))
    with pytest.raises(FileNotFoundError):
        load_dataset(
            DatasetSpec(kind="csv", params={"path": str(tmp_path / "nope.csv"), "target_col": "y"})
        )


def test_dataset_spec_from_json(tmp_path: Path):
    p = tmp_path / "spec.json"
    p.write_text('{"kind": "csv", "name": "demo", "params": {"path": "x.csv"}}', encoding="utf-8")

    spec = DatasetSpec.from_json(p)

    assert spec.kind == "csv"
    assert spec.params == {"path": "x.csv"}


def test_bundle_validates_shapes():
    with pytest.raises(ValueError):
        DatasetBundle(X=np.zeros(3), y=np.zeros(3))
    with pytest.raises(ValueError):
        DatasetBundle(X=np.zeros((3, 2)), y=np.zeros(2))
    with pytest.raises(ValueError):
        DatasetBundle(X=np.zeros((3, 2)), y=np.zeros(3), nominal=(5,), nominal_codes={5: ["a"]})
    with pytest.raises(ValueError):
        DatasetBundle(X=np.zeros((3, 2)), y=np.zeros(3), nominal=(1,))


def test_load_dataset_keeps_loader_meta_and_checks_type():
    def _named(spec: DatasetSpec) -> DatasetBundle:
        return DatasetBundle.from_arrays(np.zeros((2, 1)), np.array([0, 1])).with_rows(
            np.zeros((2, 1)), np.array([0, 1]), dataset_name="from-loader"
        )

    register_loader("named", _named, overwrite=True)
    register_loader("broken", lambda spec: "not a bundle", overwrite=True)  # type: ignore[arg-type,return-value]

    b = load_dataset(DatasetSpec(kind=" Named ", name="ignored"))

    assert b.meta["dataset_name"] == "from-loader"
    assert b.meta["dataset_kind"] == "named"
    assert b.meta["dataset_spec"]["name"] == "ignored"
    with pytest.raises(TypeError):
        load_dataset(DatasetSpec(kind="broken"))
    with pytest.raises(ValueError):
        load_dataset(DatasetSpec(kind="  "))
