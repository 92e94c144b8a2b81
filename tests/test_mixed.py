"""Tests for the weighted-vote ensemble."""

import math

import numpy as np
import pytest

from models.prediction_models import (
    BasePredictionStrategy, LotteryConfiguration, PredictionResult, WeightedComponent
)
from predictions.mixed import MixedStrategy, weighted_vote, weighted_confidence
from predictions.frequency import FrequencyStrategy
from predictions.statistical import RandomStrategy
from tests.conftest import make_draws


class FixedStrategy(BasePredictionStrategy):
    """Always proposes the same numbers with the same confidence."""

    requires_history = False

    def __init__(self, key, numbers, confidence=0.0, bonus=()):
        self.key = key
        self.numbers = tuple(numbers)
        self.bonus = tuple(bonus)
        self.confidence = confidence
        self.calls = 0

    def predict(self, config, history, rng):
        self.calls += 1
        return PredictionResult(
            lottery_id=config.lottery_id,
            algorithm_key=self.key,
            predicted_numbers=self.numbers,
            bonus_numbers=self.bonus,
            confidence_score=self.confidence
        )

    def analyze(self, config, draws):
        return None

    def generate(self, config, statistic, draws, rng):
        return list(self.numbers)

    def score(self, config, draws, statistic, predicted):
        return self.confidence


def one_of(range_size=10, count=1, bonus_count=0, bonus_range=0):
    return LotteryConfiguration(lottery_id=5, main_numbers_count=count, main_numbers_range=range_size,
                                bonus_numbers_count=bonus_count, bonus_numbers_range=bonus_range)


def component(key, numbers, weight, confidence=0.0, bonus=()):
    return WeightedComponent(FixedStrategy(key, numbers, confidence, bonus), weight)


class TestWeightedVote:
    def test_heaviest_number_wins(self):
        assert weighted_vote([([2, 3], 3.0), ([1, 2], 1.0)], 1) == [2]

    def test_ties_go_to_lower_number(self):
        assert weighted_vote([([5], 1.0), ([3], 1.0)], 1) == [3]

    def test_excluded_numbers_never_selected(self):
        assert weighted_vote([([1, 2], 2.0), ([3], 1.0)], 2, exclude=[1]) == [2, 3]

    def test_zero_take(self):
        assert weighted_vote([([1], 1.0)], 0) == []


def test_weighted_confidence_average():
    votes = [
        (PredictionResult(1, "a", (1,), (), 0.2), 1.0),
        (PredictionResult(1, "b", (2,), (), 0.8), 3.0),
    ]
    assert weighted_confidence(votes) == pytest.approx(0.65)


def test_weighted_confidence_zero_weights():
    votes = [(PredictionResult(1, "a", (1,), (), 0.9), 0.0)]
    assert weighted_confidence(votes) == 0.0


class TestMixedStrategy:
    def test_no_components(self, rng):
        result = MixedStrategy([]).predict(one_of(), [], rng)
        assert result.predicted_numbers == ()
        assert result.confidence_score == 0.0
        assert result.algorithm_key == "mixed"

    def test_weighted_voting(self, rng):
        mixed = MixedStrategy([
            component("a", [2, 3], 3.0),
            component("b", [1, 2], 1.0),
        ])
        result = mixed.predict(one_of(), [], rng)
        assert result.predicted_numbers == (2,)
        assert result.lottery_id == 5

    def test_negative_weight_contributes_nothing(self, rng):
        mixed = MixedStrategy([
            component("a", [1], -5.0, confidence=1.0),
            component("b", [2], 1.0, confidence=0.4),
        ])
        result = mixed.predict(one_of(), [], rng)
        assert result.predicted_numbers == (2,)
        assert result.confidence_score == pytest.approx(0.4)

    def test_confidence_is_weighted_average(self, rng):
        mixed = MixedStrategy([
            component("a", [1], 1.0, confidence=0.2),
            component("b", [2], 3.0, confidence=0.8),
        ])
        result = mixed.predict(one_of(count=2), [], rng)
        assert result.confidence_score == pytest.approx(0.65)
        assert set(result.predicted_numbers) == {1, 2}

    def test_bonus_voting_excludes_main(self, rng):
        config = one_of(count=1, bonus_count=1, bonus_range=10)
        mixed = MixedStrategy([
            component("a", [4], 2.0, bonus=[4]),
            component("b", [5], 1.0, bonus=[7]),
        ])
        result = mixed.predict(config, [], rng)
        assert result.predicted_numbers == (4,)
        assert result.bonus_numbers == (7,)

    def test_no_bonus_without_bonus_config(self, rng):
        mixed = MixedStrategy([component("a", [4], 1.0, bonus=[6])])
        assert mixed.predict(one_of(), [], rng).bonus_numbers == ()

    def test_every_component_runs(self, rng):
        a = component("a", [1], 1.0)
        b = component("b", [2], 0.0)
        MixedStrategy([a, b]).predict(one_of(), [], rng)
        assert a.strategy.calls == 1 and b.strategy.calls == 1

    @pytest.mark.parametrize("weight", [math.nan, math.inf, -math.inf])
    def test_non_finite_weight_rejected(self, weight):
        with pytest.raises(ValueError):
            MixedStrategy([component("a", [1], weight)])

    def test_nested_mixed_rejected(self):
        inner = MixedStrategy([component("a", [1], 1.0)])
        with pytest.raises(ValueError):
            MixedStrategy([WeightedComponent(inner, 1.0)])

    def test_real_components(self, small_config):
        draws = make_draws([[1, 2, 3, 4], [1, 2, 3, 5]])
        mixed = MixedStrategy([
            WeightedComponent(FrequencyStrategy(), 0.7),
            WeightedComponent(RandomStrategy(), 0.3),
        ])
        first = mixed.predict(small_config, draws, np.random.default_rng(8))
        second = mixed.predict(small_config, draws, np.random.default_rng(8))
        assert first == second
        assert {1, 2, 3} <= set(first.predicted_numbers)
        assert 0.0 <= first.confidence_score <= 1.0
