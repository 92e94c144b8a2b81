"""Tests for the prediction engine facade and the default registry."""

import pytest

from config.settings import PredictionSettings
from models.exceptions import StrategyNotFoundError
from models.prediction_models import StrategyKey
from predictions.mixed import MixedStrategy
from predictions.predictor_engine import PredictorEngine
from predictions.registry import build_default_registry


@pytest.fixture
def engine():
    return PredictorEngine(PredictionSettings(max_plays=5))


def test_default_registry_mixed_uses_configured_weights():
    registry = build_default_registry(PredictionSettings())
    mixed = registry.resolve("mixed")
    assert isinstance(mixed, MixedStrategy)
    assert [(c.strategy.key, c.weight) for c in mixed.components] == [
        ("frequency-based", 0.5), ("reduced-number-pool", 0.3), ("cyclic-patterns", 0.2)
    ]


def test_default_registry_rejects_unknown_mixed_key():
    with pytest.raises(StrategyNotFoundError):
        build_default_registry(PredictionSettings(mixed_weights={"no-such-strategy": 1.0}))


def test_settings_tune_strategies():
    registry = build_default_registry(PredictionSettings(repeating_recent_draws=3, group_count=5))
    assert registry.resolve("repeating-numbers").recent_draws == 3
    assert registry.resolve("group-selection").group_count == 5


def test_available_strategies(engine):
    assert sorted(engine.available_strategies()) == sorted(k.value for k in StrategyKey)


def test_predict_is_reproducible_with_seed(engine, config, history):
    first = engine.predict("weighted-probability", config, history, seed=11)
    second = engine.predict("weighted-probability", config, history, seed=11)
    assert first == second


def test_predict_unknown_key(engine, config, history):
    with pytest.raises(StrategyNotFoundError):
        engine.predict("crystal-ball", config, history, seed=1)


def test_predict_many_independent_plays(engine, config, history):
    plays = engine.predict_many("random", config, history, plays=4, seed=3)
    again = engine.predict_many("random", config, history, plays=4, seed=3)
    assert plays == again
    assert len(plays) == 4
    assert len({p.predicted_numbers for p in plays}) > 1


def test_predict_many_limits(engine, config, history):
    assert engine.predict_many("random", config, history, plays=0, seed=1) == []
    with pytest.raises(ValueError):
        engine.predict_many("random", config, history, plays=6, seed=1)


def test_predict_mixed_ad_hoc(engine, config, history):
    result = engine.predict_mixed(
        config, history, {"frequency-based": 2.0, "random": 1.0}, seed=4
    )
    assert result.algorithm_key == "mixed"
    assert len(result.predicted_numbers) == config.main_numbers_count


def test_predict_mixed_rejects_unknown_and_nested(engine, config, history):
    with pytest.raises(StrategyNotFoundError):
        engine.predict_mixed(config, history, {"crystal-ball": 1.0}, seed=1)
    with pytest.raises(ValueError):
        engine.predict_mixed(config, history, {"mixed": 1.0}, seed=1)
