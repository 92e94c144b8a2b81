"""Models package for the lottery strategy core."""

from .exceptions import (
    PredictionError,
    InvalidConfigurationError,
    StrategyNotFoundError,
    AmbiguousStrategyError
)

from .prediction_models import (
    StrategyKey,
    LotteryConfiguration,
    HistoricalDraw,
    PredictionResult,
    WeightedComponent,
    BasePredictionStrategy,
    StrategyRegistry
)

__all__ = [
    # Errors
    'PredictionError',
    'InvalidConfigurationError',
    'StrategyNotFoundError',
    'AmbiguousStrategyError',

    # Prediction models
    'StrategyKey',
    'LotteryConfiguration',
    'HistoricalDraw',
    'PredictionResult',
    'WeightedComponent',
    'BasePredictionStrategy',
    'StrategyRegistry'
]
