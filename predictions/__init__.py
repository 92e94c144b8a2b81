"""Predictions package: strategy implementations, the Mixed ensemble and the engine."""

from .registry import build_default_registry, build_base_strategies, build_mixed
from .mixed import MixedStrategy, weighted_vote, weighted_confidence
from .predictor_engine import PredictorEngine, predictor_engine

__all__ = [
    'build_default_registry',
    'build_base_strategies',
    'build_mixed',
    'MixedStrategy',
    'weighted_vote',
    'weighted_confidence',
    'PredictorEngine',
    'predictor_engine'
]
