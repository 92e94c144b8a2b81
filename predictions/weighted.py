"""Weighted random sampling strategies."""

from typing import List, Dict
import logging

from models.prediction_models import BasePredictionStrategy, StrategyKey
from analysis import statistics
from analysis.confidence import overlap_ratio, weight_coverage
from utils.helpers import weighted_sample_distinct, top_up

logger = logging.getLogger(__name__)


class WeightedProbabilityStrategy(BasePredictionStrategy):
    """Samples without replacement, each number weighted by its share of all draws."""

    key = StrategyKey.WEIGHTED_PROBABILITY.value
    requires_history = False

    def analyze(self, config, draws) -> Dict[int, float]:
        freq = statistics.number_frequencies(draws, config.main_numbers_range)
        return statistics.frequency_weights(freq)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        picked = weighted_sample_distinct(statistic, config.main_numbers_count, rng)
        return top_up(picked, config.main_numbers_count, config.main_numbers_range, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return weight_coverage(draws, statistic)


class WeightDistributionStrategy(WeightedProbabilityStrategy):
    """Same sampling as weighted-probability, scored by historical overlap."""

    key = StrategyKey.WEIGHT_DISTRIBUTION.value
    requires_history = True

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)
