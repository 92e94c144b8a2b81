"""Frequency-driven strategies: hot, cold, overdue, repeating, pooled, seasonal and decayed numbers."""

import numpy as np
from typing import List, Dict, Any, Optional, Tuple
from datetime import date
import logging

from models.prediction_models import (
    BasePredictionStrategy, LotteryConfiguration, HistoricalDraw, StrategyKey
)
from analysis import statistics
from analysis.confidence import overlap_ratio
from utils.helpers import weighted_sample_distinct, shuffled, top_up

logger = logging.getLogger(__name__)


class FrequencyStrategy(BasePredictionStrategy):
    """Hot numbers: the most frequently drawn numbers win."""

    key = StrategyKey.FREQUENCY_BASED.value
    requires_history = False

    def analyze(self, config: LotteryConfiguration, draws: List[HistoricalDraw]) -> np.ndarray:
        return statistics.number_frequencies(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        return statistics.ranked_by_frequency(statistic)[:config.main_numbers_count]

    def generate_bonus(self, config, draws, main, rng) -> List[int]:
        bonus_freq = statistics.number_frequencies(draws, config.bonus_numbers_range, bonus=True)
        ranked = [n for n in statistics.ranked_by_frequency(bonus_freq) if n not in main]
        return ranked[:config.bonus_numbers_count]

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)


class InvertedFrequencyStrategy(BasePredictionStrategy):
    """Cold numbers first; numbers sharing a count are shuffled."""

    key = StrategyKey.INVERTED_FREQUENCY.value
    requires_history = False

    def analyze(self, config, draws) -> np.ndarray:
        return statistics.number_frequencies(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        groups: Dict[int, List[int]] = {}
        for n in range(1, config.main_numbers_range + 1):
            groups.setdefault(int(statistic[n]), []).append(n)

        ordered: List[int] = []
        for count in sorted(groups):
            ordered.extend(shuffled(groups[count], rng))
            if len(ordered) >= config.main_numbers_count:
                break
        return ordered[:config.main_numbers_count]

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)


class LastAppearanceStrategy(BasePredictionStrategy):
    """Overdue numbers: longest absence first, ties by value."""

    key = StrategyKey.LAST_APPEARANCE.value

    def analyze(self, config, draws) -> Dict[int, int]:
        return statistics.draws_since_last_seen(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        ordered = sorted(statistic.items(), key=lambda kv: (-kv[1], kv[0]))
        return [n for n, _ in ordered[:config.main_numbers_count]]

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)


class RepeatingNumbersStrategy(BasePredictionStrategy):
    """Numbers repeating inside the most recent draws."""

    key = StrategyKey.REPEATING_NUMBERS.value

    def __init__(self, recent_draws: int = 10):
        self.recent_draws = max(1, int(recent_draws))

    def analyze(self, config, draws) -> List[int]:
        recent = statistics.recent_numbers(draws, self.recent_draws)
        return [n for n in statistics.repeating_numbers(recent) if 1 <= n <= config.main_numbers_range]

    def generate(self, config, statistic, draws, rng) -> List[int]:
        return top_up(statistic, config.main_numbers_count, config.main_numbers_range, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)


class ReducedNumberPoolStrategy(BasePredictionStrategy):
    """Samples only from numbers that show up often enough."""

    key = StrategyKey.REDUCED_NUMBER_POOL.value
    requires_history = False

    def __init__(self, threshold_ratio: float = 0.10):
        self.threshold_ratio = min(1.0, max(0.0, float(threshold_ratio)))

    def analyze(self, config, draws) -> List[int]:
        return statistics.reduced_pool(draws, config.main_numbers_range, self.threshold_ratio)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        picked = shuffled(statistic, rng)[:config.main_numbers_count]
        return top_up(picked, config.main_numbers_count, config.main_numbers_range, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return overlap_ratio(draws, predicted)


class SeasonalPatternsStrategy(BasePredictionStrategy):
    """Frequencies within the meteorological season of a reference date.

    Without an explicit ``reference_date`` the season of the latest draw
    is used, which keeps results reproducible for a fixed history.
    """

    key = StrategyKey.SEASONAL_PATTERNS.value

    def __init__(self, reference_date: Optional[date] = None):
        self.reference_date = reference_date

    def season_for(self, draws: List[HistoricalDraw]) -> str:
        when = self.reference_date or statistics.chronological(draws)[-1].draw_date
        return statistics.season_of(when)

    def analyze(self, config, draws) -> Tuple[str, np.ndarray]:
        season = self.season_for(draws)
        return season, statistics.seasonal_frequencies(draws, season, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        _, freq = statistic
        tie_break = rng.random(config.main_numbers_range + 1)
        ordered = sorted(range(1, config.main_numbers_range + 1),
                         key=lambda n: (-freq[n], tie_break[n]))
        return top_up(ordered[:config.main_numbers_count], config.main_numbers_count,
                      config.main_numbers_range, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        season, _ = statistic
        seasonal = [d for d in draws if statistics.season_of(d.draw_date) == season]
        return overlap_ratio(seasonal, predicted)


class TimeDecayStrategy(BasePredictionStrategy):
    """Recent draws weigh more: weight = decay ** age."""

    key = StrategyKey.TIME_DECAY.value

    def __init__(self, decay_factor: float = 0.9, recent_window: int = 10):
        self.decay_factor = min(1.0, max(0.0001, float(decay_factor)))
        self.recent_window = max(1, int(recent_window))

    def analyze(self, config, draws) -> Dict[int, float]:
        return statistics.decayed_frequencies(draws, config.main_numbers_range, self.decay_factor)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        picked = weighted_sample_distinct(statistic, config.main_numbers_count, rng)
        return top_up(picked, config.main_numbers_count, config.main_numbers_range, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        recent = statistics.chronological(draws)[-self.recent_window:]
        return overlap_ratio(recent, predicted)
