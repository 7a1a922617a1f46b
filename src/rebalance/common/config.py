from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from rebalance.common.errors import ConfigError


@dataclass(frozen=True)
class Settings:
    decimals: int
    runs_dir: str
    log_level: str


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def get_settings() -> Settings:
    # 로컬 개발에서는 .env가 있으면 읽고, 배포에서는 환경변수만으로 동작
    load_dotenv(override=False)

    decimals = _int_env("REBALANCE_DECIMALS", 2)
    if decimals < 0:
        raise ConfigError(f"REBALANCE_DECIMALS must be >= 0, got {decimals}")

    runs_dir = os.getenv("REBALANCE_RUNS_DIR", "artifacts/runs")
    log_level = os.getenv("REBALANCE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    return Settings(
        decimals=decimals,
        runs_dir=runs_dir,
        log_level=log_level,
    )
