"""Sequence and structure strategies.

Deltas, gaps, consecutive runs, co-drawn chains, appearance cycles,
sorted draw positions and co-occurrence clusters.
"""

from typing import List, Dict, Any, Tuple
import logging

import numpy as np
from sklearn.cluster import KMeans

from models.prediction_models import BasePredictionStrategy, StrategyKey
from analysis import statistics
from analysis.confidence import (
    delta_match_ratio, consecutive_pair_ratio, chain_confidence, due_ratio,
    position_match_ratio, cluster_cohesion
)
from utils.helpers import shuffled, nearest_free, top_up

logger = logging.getLogger(__name__)


def walk_from_seed(steps: List[int], number_range: int, count: int,
                   rng: np.random.Generator) -> List[int]:
    """Start low in the range and add each step in turn.

    The walk stops at the first value past the range; repeated values
    are skipped. Whatever is missing is filled uniformly.
    """
    if count <= 0:
        return []
    upper = max(2, number_range // 2)
    seed = min(int(rng.integers(1, upper)), number_range)
    numbers = [seed]
    for step in steps:
        if len(numbers) >= count:
            break
        nxt = numbers[-1] + step
        if nxt > number_range:
            break
        if nxt <= 0 or nxt in numbers:
            continue
        numbers.append(nxt)
    return sorted(top_up(numbers, count, number_range, rng))


class DeltaSystemStrategy(BasePredictionStrategy):
    """Chains the N-1 most common differences between sorted numbers."""

    key = StrategyKey.DELTA_SYSTEM.value

    def steps_to_take(self, count: int) -> int:
        return max(0, count - 1)

    def analyze(self, config, draws) -> List[int]:
        freq = statistics.delta_frequencies(draws, config.main_numbers_range)
        return statistics.most_frequent_deltas(freq, self.steps_to_take(config.main_numbers_count))

    def generate(self, config, statistic, draws, rng) -> List[int]:
        return walk_from_seed(statistic, config.main_numbers_range, config.main_numbers_count, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return delta_match_ratio(draws, predicted)


class GapAnalysisStrategy(DeltaSystemStrategy):
    """Delta walk over the N most common gaps."""

    key = StrategyKey.GAP_ANALYSIS.value

    def steps_to_take(self, count: int) -> int:
        return max(0, count)


class ConsecutiveNumbersStrategy(BasePredictionStrategy):
    """Favours members of frequently drawn (n, n + 1) pairs."""

    key = StrategyKey.CONSECUTIVE_NUMBERS.value

    def analyze(self, config, draws) -> List[Tuple[int, int]]:
        freq = statistics.consecutive_pair_frequencies(draws, config.main_numbers_range)
        ranked = sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))
        return [pair for pair, _ in ranked if 1 <= pair[0] and pair[1] <= config.main_numbers_range]

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        chosen: List[int] = []
        for a, b in statistic[:count]:
            for n in (a, b):
                if n not in chosen:
                    chosen.append(n)
        selected = top_up(chosen[:count], count, config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return consecutive_pair_ratio(draws, predicted)


class NumberChainStrategy(BasePredictionStrategy):
    """Fills the prediction from the most common co-drawn pairs and triplets."""

    key = StrategyKey.NUMBER_CHAIN.value

    def analyze(self, config, draws):
        number_range = config.main_numbers_range
        return [(chain, c) for chain, c in statistics.chain_frequencies(draws)
                if all(1 <= n <= number_range for n in chain)]

    def generate(self, config, statistic, draws, rng) -> List[int]:
        count = config.main_numbers_count
        chosen: List[int] = []
        for chain, _ in statistic:
            for n in sorted(chain):
                if n not in chosen:
                    chosen.append(n)
                if len(chosen) >= count:
                    break
            if len(chosen) >= count:
                break
        selected = top_up(chosen, count, config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return chain_confidence(draws, predicted, statistic)


class CyclicPatternsStrategy(BasePredictionStrategy):
    """Numbers with the shortest average return cycle."""

    key = StrategyKey.CYCLIC_PATTERNS.value

    def analyze(self, config, draws) -> Dict[int, List[int]]:
        return statistics.cyclic_gaps(draws, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        cycling = [(n, float(np.mean(g))) for n, g in statistic.items() if g]
        ordered = [n for n, _ in sorted(cycling, key=lambda x: (x[1], x[0]))]
        selected = top_up(ordered[:config.main_numbers_count], config.main_numbers_count,
                          config.main_numbers_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return due_ratio(draws, predicted, statistic)


class DrawPositionAnalysisStrategy(BasePredictionStrategy):
    """Most frequent value at each sorted position.

    Collisions move to the nearest free value so every position
    contributes a number.
    """

    key = StrategyKey.DRAW_POSITION_ANALYSIS.value

    def analyze(self, config, draws) -> np.ndarray:
        return statistics.position_frequencies(
            draws, config.main_numbers_count, config.main_numbers_range)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        number_range = config.main_numbers_range
        used: List[int] = []
        for row in statistic:
            counts = row[1:]
            best = np.flatnonzero(counts == counts.max()) + 1
            pick = int(best[rng.integers(len(best))])
            if pick in used:
                pick = nearest_free(pick, set(used), 1, number_range)
                if pick is None:
                    break
            used.append(pick)
        return shuffled(used, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return position_match_ratio(draws, predicted)


class ClusteringAnalysisStrategy(BasePredictionStrategy):
    """Groups numbers by co-occurrence with KMeans and takes one per cluster.

    Each cluster contributes the member with the largest co-occurrence
    mass (ties to the lower number); clusters are visited by total mass.
    """

    key = StrategyKey.CLUSTERING_ANALYSIS.value

    def __init__(self, n_init: int = 10):
        self.n_init = n_init

    def analyze(self, config, draws) -> np.ndarray:
        return statistics.co_occurrence_matrix(draws, config.main_numbers_range)

    def cluster(self, matrix: np.ndarray, n_clusters: int, rng: np.random.Generator) -> np.ndarray:
        features = matrix[1:, 1:]
        model = KMeans(
            n_clusters=n_clusters,
            n_init=self.n_init,
            random_state=int(rng.integers(0, 2**31 - 1))
        )
        return model.fit_predict(features)

    def generate(self, config, statistic, draws, rng) -> List[int]:
        number_range = config.main_numbers_range
        count = config.main_numbers_count
        n_clusters = min(count, number_range)

        labels = self.cluster(statistic, n_clusters, rng)
        mass = statistic.sum(axis=1)

        members: Dict[int, List[int]] = {}
        for idx, label in enumerate(labels):
            members.setdefault(int(label), []).append(idx + 1)

        clusters = sorted(
            members.values(),
            key=lambda nums: (-sum(mass[n] for n in nums), min(nums))
        )
        representatives = [min(nums, key=lambda n: (-mass[n], n)) for nums in clusters]

        logger.debug(f"[{self.key}] {len(members)} clusters found for {n_clusters} requested")

        selected = top_up(representatives[:count], count, number_range, rng)
        return shuffled(selected, rng)

    def score(self, config, draws, statistic, predicted) -> float:
        return cluster_cohesion(statistic, predicted)
