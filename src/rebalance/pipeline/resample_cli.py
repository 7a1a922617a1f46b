from __future__ import annotations

import argparse
import inspect
import logging
from pathlib import Path
from typing import Any

from rebalance.algorithms import get_method, list_methods
from rebalance.algorithms.options import resolve_seed
from rebalance.common.config import get_settings
from rebalance.core.classes import class_counts
from rebalance.datasets import DatasetBundle, DatasetSpec, load_dataset
from rebalance.tracking.run_log import default_log_path, write_latest_pointer


def _spec_from_args(args: argparse.Namespace) -> DatasetSpec:
    if args.dataset_spec:
        return DatasetSpec.from_json(args.dataset_spec)

    if not args.csv_path or not args.target_col:
        raise ValueError("either --dataset-spec OR (--csv-path and --target-col) is required")

    params: dict[str, Any] = {
        "path": args.csv_path,
        "target_col": args.target_col,
        "dropna": (not args.no_dropna),
        "sep": args.sep,
    }
    if args.nominal_cols:
        params["nominal_cols"] = [c.strip() for c in args.nominal_cols.split(",") if c.strip()]

    return DatasetSpec(kind="csv", name=args.dataset_name, params=params)


def _coerce_label(raw: str | None, bundle: DatasetBundle) -> Any:
    """CLI 문자열을 실제 라벨 값으로 (라벨이 숫자여도 문자열 비교로 매칭)."""
    if raw is None:
        return None
    for label in class_counts(bundle.y):
        if str(label) == raw:
            return label
    raise ValueError(f"minority label not present in dataset: {raw!r}")


def _method_params(method: str, candidates: dict[str, Any]) -> dict[str, Any]:
    """해당 알고리즘이 받는 keyword 인자 중 값이 지정된 것만."""
    accepted = inspect.signature(get_method(method)).parameters
    return {k: v for k, v in candidates.items() if k in accepted and v is not None}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="rebalance", description="class-imbalance resampling")
    ap.add_argument("--dataset-spec", type=str, default=None, help="dataset spec JSON path")
    ap.add_argument("--dataset-name", type=str, default=None)

    ap.add_argument("--csv-path", type=str, default=None)
    ap.add_argument("--target-col", type=str, default=None)
    ap.add_argument("--sep", type=str, default=",")
    ap.add_argument("--nominal-cols", type=str, default=None, help="comma separated")
    ap.add_argument("--no-dropna", action="store_true")

    ap.add_argument("--method", type=str, required=True, choices=list_methods())
    ap.add_argument("--metric", type=str, default="euclidean", choices=["euclidean", "hvdm"])
    ap.add_argument("--k", type=int, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--percent", type=int, default=None)
    ap.add_argument("--balance-level", type=float, default=None)
    ap.add_argument("--threshold", type=float, default=None)
    ap.add_argument("--minority-label", type=str, default=None)

    ap.add_argument("--out", type=str, default=None, help="output CSV path")
    ap.add_argument("--log-file", type=str, default=None, help="run log JSON path")
    ap.add_argument("--log", action="store_true", help="write run log under REBALANCE_RUNS_DIR")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    s = get_settings()
    logging.basicConfig(
        level=s.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    spec = _spec_from_args(args)
    bundle = load_dataset(spec)

    # 재현을 위해 seed를 먼저 확정해서 로그 파일명/결과에 같이 남긴다
    seed = resolve_seed(args.seed)
    log_path: Path | None = None
    if args.log_file:
        log_path = Path(args.log_file)
    elif args.log:
        log_path = default_log_path(Path(s.runs_dir), method=args.method, seed=seed)

    params = _method_params(
        args.method,
        {
            "k": args.k,
            "metric": args.metric,
            "seed": seed,
            "percent": args.percent,
            "balance_level": args.balance_level,
            "threshold": args.threshold,
            "minority_label": _coerce_label(args.minority_label, bundle),
            "decimals": s.decimals,
            "log_path": log_path,
        },
    )
    result = get_method(args.method)(bundle, **params)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        label_col = str(bundle.meta.get("target_col") or "label")
        result.dataset.to_frame(label_col=label_col).to_csv(out_path, index=False)
        print(f"[OK] output: {out_path}")

    if result.log_path is not None:
        write_latest_pointer(
            Path(s.runs_dir), log_path=result.log_path, method=result.method, seed=result.seed
        )
        print(f"[OK] run log: {result.log_path}")

    print(f"[OK] method: {result.method} (seed={result.seed})")
    print(f"[OK] size: {sum(result.counts_before.values())} -> {result.dataset.n_samples()}")
    print(f"[OK] counts: {result.counts_before} -> {result.counts_after}")
    print(
        f"[OK] imbalance ratio: {result.imbalance_ratio_before:.4f} -> {result.imbalance_ratio_after:.4f}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
