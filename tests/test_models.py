"""Tests for configuration validation, result normalization and the registry."""

from datetime import date

import numpy as np
import pytest

from models.exceptions import (
    PredictionError, InvalidConfigurationError, StrategyNotFoundError, AmbiguousStrategyError
)
from models.prediction_models import (
    LotteryConfiguration, HistoricalDraw, PredictionResult, StrategyKey, StrategyRegistry
)
from predictions.frequency import FrequencyStrategy, InvertedFrequencyStrategy


class TestLotteryConfiguration:
    def test_valid_configuration(self, config):
        assert config.has_bonus
        assert not LotteryConfiguration(1, 5, 40).has_bonus

    @pytest.mark.parametrize("kwargs", [
        dict(main_numbers_count=0, main_numbers_range=10),
        dict(main_numbers_count=3, main_numbers_range=0),
        dict(main_numbers_count=11, main_numbers_range=10),
        dict(main_numbers_count=3, main_numbers_range=10, bonus_numbers_count=-1),
        dict(main_numbers_count=3, main_numbers_range=10, bonus_numbers_count=1, bonus_numbers_range=0),
        dict(main_numbers_count=3, main_numbers_range=10, bonus_numbers_count=3, bonus_numbers_range=2),
    ])
    def test_invalid_configuration_raises(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            LotteryConfiguration(lottery_id=1, **kwargs)

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            LotteryConfiguration(1, -1, 10)

    def test_reports_every_problem(self):
        with pytest.raises(InvalidConfigurationError) as excinfo:
            LotteryConfiguration(7, 0, 0, bonus_numbers_count=-2)
        message = str(excinfo.value)
        assert "main_numbers_count" in message
        assert "main_numbers_range" in message
        assert "bonus_numbers_count" in message


def test_historical_draw_stores_int_tuples():
    draw = HistoricalDraw(1, 1, date(2024, 1, 1), [np.int64(3), 4], bonus_numbers=[5])
    assert draw.winning_numbers == (3, 4)
    assert draw.bonus_numbers == (5,)
    assert all(type(n) is int for n in draw.winning_numbers)


class TestPredictionResult:
    def test_create_cleans_numbers(self, config):
        result = PredictionResult.create(
            config, "frequency-based", [5, 5, 0, 60, 7, 8, 9, 10, 11, 12], [5, 3, 4], 0.4
        )
        assert result.predicted_numbers == (5, 7, 8, 9, 10, 11)
        assert result.bonus_numbers == (3,)
        assert result.lottery_id == config.lottery_id

    @pytest.mark.parametrize("raw,expected", [
        (1.7, 1.0), (-0.3, 0.0), (float('nan'), 0.0), (float('inf'), 0.0), (None, 0.0), (0.25, 0.25),
    ])
    def test_create_bounds_confidence(self, config, raw, expected):
        result = PredictionResult.create(config, "random", [1, 2], [], raw)
        assert result.confidence_score == expected

    def test_empty(self):
        result = PredictionResult.empty(3, StrategyKey.RANDOM)
        assert result.is_empty
        assert result.algorithm_key == "random"
        assert result.confidence_score == 0.0

    def test_to_dict(self, small_config):
        result = PredictionResult.create(small_config, "random", [4, 1], [], 1 / 3)
        assert result.to_dict() == {
            'lottery_id': 2,
            'algorithm_key': 'random',
            'predicted_numbers': [4, 1],
            'bonus_numbers': [],
            'confidence_score': 0.333333
        }


class TestStrategyRegistry:
    def test_resolve(self):
        registry = StrategyRegistry([FrequencyStrategy(), InvertedFrequencyStrategy()])
        assert isinstance(registry.resolve("inverted-frequency"), InvertedFrequencyStrategy)
        assert "frequency-based" in registry
        assert len(registry) == 2
        assert registry.keys() == ["frequency-based", "inverted-frequency"]

    def test_unknown_key_raises(self):
        registry = StrategyRegistry([FrequencyStrategy()])
        with pytest.raises(StrategyNotFoundError):
            registry.resolve("no-such-strategy")

    def test_keys_are_case_sensitive(self):
        registry = StrategyRegistry([FrequencyStrategy()])
        with pytest.raises(StrategyNotFoundError):
            registry.resolve("Frequency-Based")

    def test_duplicate_keys_are_ambiguous(self):
        registry = StrategyRegistry([FrequencyStrategy(), FrequencyStrategy()])
        with pytest.raises(AmbiguousStrategyError):
            registry.resolve("frequency-based")

    def test_dispatch_errors_share_base(self):
        assert issubclass(StrategyNotFoundError, PredictionError)
        assert issubclass(AmbiguousStrategyError, PredictionError)


def test_strategy_key_values_are_unique():
    values = [k.value for k in StrategyKey]
    assert len(values) == len(set(values)) == 29
    assert str(StrategyKey.MIXED) == "mixed"
