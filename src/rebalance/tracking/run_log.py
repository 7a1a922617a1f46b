from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rebalance.common.version import get_build_info


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _slug(s: str) -> str:
    """Filesystem-safe short slug."""
    s = s.strip()
    s = re.sub(r"[^0-9A-Za-z]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "run"


def format_elapsed(seconds: float) -> str:
    """HH:MM:SS.mmm"""
    ms_total = int(round(seconds * 1000))
    hours, rem = divmod(ms_total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"


def default_log_path(
    runs_dir: Path, *, method: str, seed: int, created_dt: datetime | None = None
) -> Path:
    # 예: artifacts/runs/20260124_163015_adasyn_42.json
    created_dt = created_dt or _utc_now()
    ts = created_dt.strftime("%Y%m%d_%H%M%S")  # UTC 기준
    return runs_dir / f"{ts}_{_slug(method)}_{seed}.json"


def _jsonable_keys(d: dict[Any, Any]) -> dict[str, Any]:
    # 라벨이 숫자여도 JSON key는 문자열
    return {str(k): v for k, v in d.items()}


def write_run_log(path: Path, summary: dict[str, Any]) -> Path:
    """리샘플링 결과 요약을 JSON으로 기록. 수치 결과에는 영향 없음."""
    doc = dict(summary)
    for key in ("counts_before", "counts_after"):
        if isinstance(doc.get(key), dict):
            doc[key] = _jsonable_keys(doc[key])
    if "elapsed_seconds" in doc:
        doc["elapsed"] = format_elapsed(float(doc["elapsed_seconds"]))
    doc["created_at"] = _utc_now().isoformat()
    doc["build"] = get_build_info()

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(doc, ensure_ascii=False, indent=2, default=str),
        encoding="utf-8",
    )
    return path


def write_latest_pointer(runs_dir: Path, *, log_path: Path, method: str, seed: int) -> Path:
    """runs_dir/_latest.json -> 가장 최근 run log 위치."""
    runs_dir.mkdir(parents=True, exist_ok=True)
    p = runs_dir / "_latest.json"
    p.write_text(
        json.dumps(
            {
                "method": method,
                "seed": seed,
                "log_path": log_path.as_posix(),
                "created_at": _utc_now().isoformat(),
            },
            ensure_ascii=False,
            indent=2,
        ),
        encoding="utf-8",
    )
    return p
