"""Moment-based strategies: averages, sums, spread, skew and the uniform baseline."""

import numpy as np
from typing import List, Dict, Any, Optional, Tuple
import logging

from models.prediction_models import BasePredictionStrategy, StrategyKey
from analysis import statistics
from analysis.confidence import inverse_distance, mean_absolute_gap, random_confidence
from utils.helpers import (
    generate_distinct, shuffled, round_half_away, clamp, nearest_free, top_up
)

logger = logging.getLogger(__name__)


def _jitter_offsets():
    """+1, -1, +2, -2, ... around a centre value."""
    step = 1
    while True:
        yield step
        yield -step
        step += 1


def averaged_numbers(averages: List[Optional[float]], fallback_mean: Optional[float],
                     number_range: int, exclude: List[int]) -> List[int]:
    """Rounded position means, then jitter around the overall mean for missing positions."""
    used = set(exclude)
    result: List[int] = []

    for avg in averages:
        if avg is None:
            continue
        value = clamp(round_half_away(avg), 1, number_range)
        value = nearest_free(value, used, 1, number_range)
        if value is None:
            return result
        used.add(value)
        result.append(value)

    if len(result) < len(averages):
        if fallback_mean is None:
            centre = (number_range + 1) // 2
        else:
            centre = clamp(round_half_away(fallback_mean), 1, number_range)
        offsets = _jitter_offsets()
        while len(result) < len(averages):
            value = nearest_free(clamp(centre + next(offsets), 1, number_range),
                                 used, 1, number_range)
            if value is None:
                break
            used.add(value)
            result.append(value)

    return result


class StatisticalAveragingStrategy(BasePredictionStrategy):
    """Mean value of each stored position."""

    key = StrategyKey.STATISTICAL_AVERAGING.value
    requires_history = False

    def analyze(self, config, draws) -> Tuple[List[Optional[float]], Optional[float]]:
        averages = statistics.position_averages(
            draws, config.main_numbers_count, config.main_numbers_range)
        return averages, statistics.global_average(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        averages, overall = statistic
        return averaged_numbers(averages, overall, config.main_numbers_range, [])

    def generate_bonus(self, config, draws, main, rng) -> List[int]:
        averages = statistics.position_averages(
            draws, config.bonus_numbers_count, config.bonus_numbers_range, bonus=True)
        overall = statistics.global_average(draws, config.bonus_numbers_range, bonus=True)
        return averaged_numbers(averages, overall, config.bonus_numbers_range, list(main))

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        predicted_avg = float(np.mean(predicted))
        number_range = config.main_numbers_range
        draw_avgs = [float(np.mean(numbers)) for numbers in
                     (statistics.in_range(d.winning_numbers, number_range) for d in draws) if numbers]
        return inverse_distance(mean_absolute_gap(draw_avgs, predicted_avg))


class NumberSumStrategy(BasePredictionStrategy):
    """Steers the running total toward the average historical sum."""

    key = StrategyKey.NUMBER_SUM.value

    def __init__(self, jitter: int = 3, max_attempts: int = 200):
        self.jitter = max(0, int(jitter))
        self.max_attempts = max(1, int(max_attempts))

    def analyze(self, config, draws) -> float:
        return statistics.average_sum(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        number_range = config.main_numbers_range
        selected: List[int] = []

        attempts = 0
        budget = self.max_attempts * count
        while len(selected) < count and attempts < budget:
            attempts += 1
            remaining = count - len(selected)
            needed = (statistic - sum(selected)) / remaining
            jitter = int(rng.integers(-self.jitter, self.jitter + 1))
            candidate = clamp(round_half_away(needed + jitter), 1, number_range)

            if candidate in selected:
                for _ in range(5):
                    candidate = int(rng.integers(1, number_range + 1))
                    if candidate not in selected:
                        break
            if candidate not in selected:
                selected.append(candidate)

        if len(selected) < count:
            logger.debug(f"[{self.key}] Search budget spent, topping up {count - len(selected)} numbers")
        return shuffled(top_up(selected, count, number_range, rng), rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        sums = statistics.draw_sums(draws, config.main_numbers_range)
        return inverse_distance(mean_absolute_gap(sums, sum(predicted)))


class StandardDeviationStrategy(BasePredictionStrategy):
    """Accepts random candidates that keep the spread near the historical standard deviation."""

    key = StrategyKey.STANDARD_DEVIATION.value

    def __init__(self, tolerance: float = 0.5, max_attempts: int = 200):
        self.tolerance = float(tolerance)
        self.max_attempts = max(1, int(max_attempts))

    def analyze(self, config, draws) -> float:
        return statistics.historical_std(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        number_range = config.main_numbers_range
        selected: List[int] = []

        attempts = 0
        budget = self.max_attempts * count
        while len(selected) < count and attempts < budget:
            attempts += 1
            candidate = int(rng.integers(1, number_range + 1))
            if candidate in selected:
                continue
            spread = statistics.population_std(selected + [candidate])
            if not selected or abs(spread - statistic) < self.tolerance:
                selected.append(candidate)

        if len(selected) < count:
            logger.debug(f"[{self.key}] No candidate within tolerance, topping up {count - len(selected)} numbers")
        return shuffled(top_up(selected, count, number_range, rng), rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        return inverse_distance(abs(statistic - statistics.population_std(predicted)))


class SkewnessAnalysisStrategy(BasePredictionStrategy):
    """Leans toward the lower half when history is right-skewed and the upper half when left-skewed."""

    key = StrategyKey.SKEWNESS_ANALYSIS.value

    def __init__(self, threshold: float = 0.10, max_attempts: int = 200):
        self.threshold = abs(float(threshold))
        self.max_attempts = max(1, int(max_attempts))

    def analyze(self, config, draws) -> Tuple[float, float]:
        number_range = config.main_numbers_range
        return (statistics.historical_skewness(draws, number_range),
                statistics.historical_mean(draws, number_range))

    def low_bias(self, skewness: float) -> float:
        if skewness > self.threshold:
            return 0.75
        if skewness < -self.threshold:
            return 0.25
        return 0.5

    def generate(self, config, statistic, draws, rng) -> List[int]:
        skewness, _ = statistic
        count = config.main_numbers_count
        number_range = config.main_numbers_range
        half = number_range // 2
        bias = self.low_bias(skewness)

        selected: List[int] = []
        attempts = 0
        budget = self.max_attempts * count
        while len(selected) < count and attempts < budget:
            attempts += 1
            if rng.random() < bias:
                low, high = 1, half
            else:
                low, high = half + 1, number_range
            if low > high:
                low, high = 1, number_range
            candidate = int(rng.integers(low, high + 1))
            if candidate not in selected:
                selected.append(candidate)

        return shuffled(top_up(selected, count, number_range, rng), rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        skewness, mean = statistic
        return inverse_distance(abs(float(np.mean(predicted)) - mean) + abs(skewness))


class RandomStrategy(BasePredictionStrategy):
    """Uniform baseline."""

    key = StrategyKey.RANDOM.value
    requires_history = False
    history_free_confidence = True

    def analyze(self, config, draws) -> None:
        return None

    def generate(self, config, statistic, draws, rng) -> List[int]:
        return generate_distinct(1, config.main_numbers_range, (), config.main_numbers_count, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return random_confidence(config.main_numbers_range, config.main_numbers_count)
