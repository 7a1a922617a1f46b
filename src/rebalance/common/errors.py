from __future__ import annotations


class RebalanceError(Exception):
    """rebalance 코어에서 발생하는 모든 예외의 base."""


class ConfigError(RebalanceError, ValueError):
    """파라미터 범위/조합이 잘못된 경우 (balance level, percent, k, ...)."""


class InvalidMetric(ConfigError):
    """지원하지 않는 distance metric 식별자."""


class DimensionMismatch(RebalanceError, ValueError):
    """비교하는 두 feature vector의 길이가 다른 경우."""


class InsufficientNeighbors(RebalanceError, ValueError):
    """이웃 수가 부족해서 계산을 진행할 수 없는 경우 (예: 공분산/eigen 단계)."""
