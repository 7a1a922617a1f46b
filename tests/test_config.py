import pytest

from rebalance.common.config import get_settings
from rebalance.common.errors import ConfigError


def test_settings_defaults(monkeypatch):
    for name in ("REBALANCE_DECIMALS", "REBALANCE_RUNS_DIR", "REBALANCE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    s = get_settings()

    assert s.decimals == 2
    assert s.runs_dir == "artifacts/runs"
    assert s.log_level == "WARNING"


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("REBALANCE_DECIMALS", "4")
    monkeypatch.setenv("REBALANCE_RUNS_DIR", str(tmp_path / "runs"))
    monkeypatch.setenv("REBALANCE_LOG_LEVEL", "debug")

    s = get_settings()

    assert s.decimals == 4
    assert s.runs_dir == str(tmp_path / "runs")
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["two", "-1"])
def test_settings_reject_bad_decimals(monkeypatch, raw):
    monkeypatch.setenv("REBALANCE_DECIMALS", raw)

    with pytest.raises(ConfigError):
        get_settings()
