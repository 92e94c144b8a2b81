"""Distribution-shaped strategies.

These strategies reproduce how draws spread over the number range:
odd/even balance, low/high halves, contiguous groups and quadrants,
plus the bucket and position patterns built from those splits.
"""

from typing import List, Dict, Any, Callable, Optional, Sequence, Tuple
import logging

import numpy as np

from models.prediction_models import BasePredictionStrategy, StrategyKey
from analysis import statistics
from analysis.confidence import (
    inverse_distance, odd_even_split_share, pattern_share, high_low_distance
)
from utils.helpers import generate_distinct, shuffled, round_half_away, clamp, top_up

logger = logging.getLogger(__name__)


def _sample_where(number_range: int, predicate: Callable[[int], bool], count: int,
                  rng: np.random.Generator, exclude: Sequence[int] = ()) -> List[int]:
    """Random distinct numbers from 1..range that satisfy ``predicate``."""
    if count <= 0:
        return []
    blocked = set(exclude)
    pool = [n for n in range(1, number_range + 1) if predicate(n) and n not in blocked]
    return shuffled(pool, rng)[:count]


class OddEvenBalanceStrategy(BasePredictionStrategy):
    """Matches the historical share of odd numbers."""

    key = StrategyKey.ODD_EVEN_BALANCE.value
    requires_history = False

    def analyze(self, config, draws) -> Optional[Tuple[float, float]]:
        return statistics.odd_even_ratio(draws, config.main_numbers_range) if draws else None

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        if statistic is None:
            odd_target = count // 2
        else:
            odd_target = clamp(round_half_away(count * statistic[0]), 0, count)

        odds = _sample_where(config.main_numbers_range, lambda n: n % 2 == 1, odd_target, rng)
        evens = _sample_where(config.main_numbers_range, lambda n: n % 2 == 0, count - odd_target, rng)
        selected = top_up(odds + evens, count, config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return odd_even_split_share(draws, predicted)


class HighLowSplitStrategy(BasePredictionStrategy):
    """Matches the historical share of numbers in the lower half (<= range // 2)."""

    key = StrategyKey.HIGH_LOW_NUMBER_SPLIT.value
    requires_history = False

    def analyze(self, config, draws) -> Optional[Tuple[float, float]]:
        return statistics.high_low_ratio(draws, config.main_numbers_range) if draws else None

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        mid = config.main_numbers_range // 2
        if statistic is None:
            low_target = count // 2
        else:
            low_target = clamp(round_half_away(count * statistic[0]), 0, count)

        lows = generate_distinct(1, mid, (), low_target, rng)
        highs = generate_distinct(mid + 1, config.main_numbers_range, lows, count - low_target, rng)
        selected = top_up(lows + highs, count, config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        return inverse_distance(high_low_distance(predicted, config.main_numbers_range, statistic))


class GroupSelectionStrategy(BasePredictionStrategy):
    """Picks from contiguous groups in proportion to each group's historical weight."""

    key = StrategyKey.GROUP_SELECTION.value
    requires_history = False

    def __init__(self, group_count: int = 3):
        self.group_count = max(1, int(group_count))

    def buckets(self, number_range: int) -> List[statistics.Bucket]:
        return statistics.divide_into_buckets(number_range, min(self.group_count, number_range))

    def analyze(self, config, draws) -> Tuple[List[statistics.Bucket], List[int]]:
        buckets = self.buckets(config.main_numbers_range)
        return buckets, statistics.bucket_frequencies(draws, buckets)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        buckets, frequencies = statistic
        count = config.main_numbers_count
        allocation = statistics.proportional_allocation(frequencies, count)

        selected: List[int] = []
        for (start, end), need in zip(buckets, allocation):
            if need <= 0:
                continue
            selected.extend(generate_distinct(start, end, selected, need, rng))
            if len(selected) >= count:
                break

        selected = top_up(selected, count, config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        buckets, frequencies = statistic
        if not predicted:
            return 0.0
        predicted_counts = statistics.bucket_counts(predicted, buckets)
        distance = sum(abs(p - h) for p, h in zip(predicted_counts, frequencies))
        return inverse_distance(distance)


class QuadrantAnalysisStrategy(GroupSelectionStrategy):
    """Same allocation as group selection over equal-width quadrants."""

    key = StrategyKey.QUADRANT_ANALYSIS.value
    requires_history = True

    def __init__(self, quadrant_count: int = 4):
        super().__init__(group_count=quadrant_count)

    def buckets(self, number_range: int) -> List[statistics.Bucket]:
        return statistics.divide_into_quadrants(number_range, min(self.group_count, number_range))


class SymmetryAnalysisStrategy(BasePredictionStrategy):
    """Reproduces the historical high/low and odd/even ratios together."""

    key = StrategyKey.SYMMETRY_ANALYSIS.value

    def analyze(self, config, draws) -> Tuple[float, float]:
        return statistics.symmetry_ratios(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        high_low, odd_even = statistic
        count = config.main_numbers_count
        number_range = config.main_numbers_range
        mid = number_range // 2

        high_target = clamp(round_half_away(count * high_low / (1 + high_low)), 0, count)
        odd_target = clamp(round_half_away(count * odd_even / (1 + odd_even)), 0, count)

        highs = generate_distinct(mid + 1, number_range, (), high_target, rng)
        lows = generate_distinct(1, mid, (), count - high_target, rng)
        pool = highs + lows

        odds = shuffled([n for n in pool if n % 2 == 1], rng)[:odd_target]
        evens = shuffled([n for n in pool if n % 2 == 0], rng)[:count - odd_target]

        selected = top_up(odds + evens, count, number_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted:
            return 0.0
        high_low, odd_even = statistic
        predicted_hl, predicted_oe = statistics.split_ratios(predicted, config.main_numbers_range)
        return inverse_distance(abs(predicted_hl - high_low) + abs(predicted_oe - odd_even))


class RarePatternsStrategy(BasePredictionStrategy):
    """Builds a draw shaped like the rarest observed low/high and odd/even split."""

    key = StrategyKey.RARE_PATTERNS.value

    def analyze(self, config, draws) -> Dict[str, int]:
        return statistics.rare_pattern_frequencies(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        if not statistic:
            return []
        rarest = min(statistic.items(), key=lambda kv: (kv[1], kv[0]))[0]
        low_count, high_count, odd_count, even_count = statistics.parse_rare_pattern(rarest)

        count = config.main_numbers_count
        number_range = config.main_numbers_range
        mid = number_range // 2

        lows = generate_distinct(1, mid, (), low_count, rng)
        highs = generate_distinct(mid + 1, number_range, (), high_count, rng)
        pool = lows + highs

        odds = [n for n in pool if n % 2 == 1][:odd_count]
        evens = [n for n in pool if n % 2 == 0][:even_count]

        selected = top_up(odds + evens, count, number_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        if not predicted or not statistic:
            return 0.0
        label = statistics.rare_pattern_label(predicted, config.main_numbers_range)
        if label not in statistic:
            return 1.0
        return 1.0 / (1.0 + statistic[label])


class PatternMatchingStrategy(BasePredictionStrategy):
    """Fills the most common per-position parity and half template."""

    key = StrategyKey.PATTERN_MATCHING.value

    def analyze(self, config, draws) -> str:
        freq = statistics.position_pattern_frequencies(
            draws, config.main_numbers_count, config.main_numbers_range)
        if not freq:
            return ""
        return min(freq.items(), key=lambda kv: (-kv[1], kv[0]))[0]

    def generate(self, config, statistic, draws, rng) -> List[int]:
        if not statistic:
            return []
        number_range = config.main_numbers_range
        half = number_range // 2
        used: List[int] = []

        for token in statistic.split(','):
            def fits(n: int, token: str = token) -> bool:
                parity_ok = (n % 2 == 0) if 'E' in token else (n % 2 == 1)
                side_ok = (n <= half) if 'L' in token else (n > half)
                return parity_ok and side_ok

            pick = _sample_where(number_range, fits, 1, rng, exclude=used)
            if not pick:
                pick = _sample_where(number_range, lambda n: True, 1, rng, exclude=used)
            if not pick:
                break
            used.append(pick[0])

        return shuffled(used, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        number_range = config.main_numbers_range
        count = config.main_numbers_count
        return pattern_share(
            draws,
            statistic,
            lambda d: statistics.position_pattern_label(
                statistics.in_range(d.winning_numbers, number_range), number_range),
            eligible=lambda d: len(statistics.in_range(d.winning_numbers, number_range)) == count
        )
