"""Confidence scorers.

Each scorer maps a prediction and the history it came from to a float
in [0, 1]. They return exactly 0.0 when either side is empty.
"""

import numpy as np
from typing import List, Dict, Iterable, Sequence, Callable, FrozenSet, Tuple
from itertools import combinations
import logging

from models.prediction_models import HistoricalDraw
from analysis.statistics import (
    chronological, draw_deltas, consecutive_pairs
)

logger = logging.getLogger(__name__)


def _bounded(value: float) -> float:
    if not np.isfinite(value):
        return 0.0
    return float(min(1.0, max(0.0, value)))


def overlap_ratio(draws: Sequence[HistoricalDraw], predicted: Sequence[int]) -> float:
    """Average share of the prediction found in each draw."""
    if not draws or not predicted:
        return 0.0
    chosen = set(predicted)
    matches = sum(len(chosen.intersection(d.winning_numbers)) for d in draws)
    return _bounded(matches / (len(draws) * len(chosen)))


def inverse_distance(distance: float) -> float:
    """1 / (1 + distance) for a non-negative distance."""
    return _bounded(1.0 / (1.0 + abs(distance)))


def delta_match_ratio(draws: Sequence[HistoricalDraw], predicted: Sequence[int]) -> float:
    """Historical deltas that also occur among the prediction's deltas, over all historical deltas."""
    if not draws or not predicted:
        return 0.0
    predicted_deltas = set(draw_deltas(predicted))
    matched = total = 0
    for draw in draws:
        deltas = draw_deltas(draw.winning_numbers)
        total += len(deltas)
        matched += len(predicted_deltas.intersection(deltas))
    return _bounded(matched / total) if total else 0.0


def consecutive_pair_ratio(draws: Sequence[HistoricalDraw], predicted: Sequence[int]) -> float:
    """Historical consecutive pairs reproduced by the prediction."""
    if not draws or not predicted:
        return 0.0
    predicted_pairs = set(consecutive_pairs(predicted))
    matched = total = 0
    for draw in draws:
        pairs = consecutive_pairs(draw.winning_numbers)
        total += len(pairs)
        matched += sum(1 for p in pairs if p in predicted_pairs)
    return _bounded(matched / total) if total else 0.0


def position_match_ratio(draws: Sequence[HistoricalDraw], predicted: Sequence[int]) -> float:
    """Exact matches between the sorted prediction and each sorted draw, position by position."""
    if not draws or not predicted:
        return 0.0
    ordered = sorted(predicted)
    matches = compared = 0
    for draw in draws:
        actual = sorted(draw.winning_numbers)
        for a, b in zip(ordered, actual):
            compared += 1
            if a == b:
                matches += 1
    return _bounded(matches / compared) if compared else 0.0


def pattern_share(draws: Sequence[HistoricalDraw], label: str,
                  label_fn: Callable[[HistoricalDraw], str],
                  eligible: Callable[[HistoricalDraw], bool] = lambda d: True) -> float:
    """Share of eligible draws whose label equals ``label``."""
    if not draws or not label:
        return 0.0
    considered = [d for d in draws if eligible(d)]
    if not considered:
        return 0.0
    hits = sum(1 for d in considered if label_fn(d) == label)
    return _bounded(hits / len(considered))


def odd_even_split_share(draws: Sequence[HistoricalDraw], predicted: Sequence[int]) -> float:
    """Share of draws with the same odd and even counts as the prediction."""
    if not draws or not predicted:
        return 0.0
    odd = sum(1 for n in predicted if n % 2 == 1)
    even = len(predicted) - odd
    hits = 0
    for draw in draws:
        draw_odd = sum(1 for n in draw.winning_numbers if n % 2 == 1)
        if draw_odd == odd and len(draw.winning_numbers) - draw_odd == even:
            hits += 1
    return _bounded(hits / len(draws))


def weight_coverage(draws: Sequence[HistoricalDraw], weights: Dict[int, float]) -> float:
    """Weight mass carried by drawn numbers, normalized by draws and total weight."""
    total_weight = sum(w for w in weights.values() if w > 0)
    if not draws or total_weight <= 0:
        return 0.0
    mass = sum(max(0.0, weights.get(n, 0.0)) for d in draws for n in d.winning_numbers)
    return _bounded(mass / (len(draws) * total_weight))


def chain_confidence(draws: Sequence[HistoricalDraw], predicted: Sequence[int],
                     chains: Sequence[Tuple[FrozenSet[int], int]]) -> float:
    """Mean of the covered-chain share and the overlap ratio."""
    if not predicted or not chains or not draws:
        return 0.0
    chosen = set(predicted)
    covered = sum(1 for chain, _ in chains if chain <= chosen)
    chain_share = covered / len(chains)
    return _bounded((chain_share + overlap_ratio(draws, predicted)) / 2.0)


def due_ratio(draws: Sequence[HistoricalDraw], predicted: Sequence[int],
              gaps: Dict[int, List[int]]) -> float:
    """Share of predicted numbers whose absence already reaches their average cycle."""
    if not draws or not predicted:
        return 0.0
    ordered = chronological(draws)
    last_seen: Dict[int, int] = {}
    for idx, draw in enumerate(ordered):
        for n in draw.winning_numbers:
            last_seen[n] = idx

    due = 0
    for n in predicted:
        cycle = gaps.get(n) or []
        if not cycle or n not in last_seen:
            continue
        since = len(ordered) - 1 - last_seen[n]
        if since >= round(float(np.mean(cycle))):
            due += 1
    return _bounded(due / len(predicted))


def cluster_cohesion(matrix: np.ndarray, predicted: Sequence[int]) -> float:
    """Co-occurrence shared inside the prediction relative to the numbers' total co-occurrence."""
    if matrix.size == 0 or len(predicted) < 2:
        return 0.0
    chosen = [n for n in dict.fromkeys(predicted) if 0 < n < matrix.shape[0]]
    total = float(sum(matrix[n].sum() for n in chosen))
    if total <= 0:
        return 0.0
    inner = 2.0 * sum(matrix[a, b] for a, b in combinations(chosen, 2))
    return _bounded(inner / total)


def random_confidence(number_range: int, count: int) -> float:
    if number_range <= 0 or count <= 0:
        return 0.0
    return _bounded(1.0 / (number_range - count + 1))


def high_low_distance(predicted: Sequence[int], number_range: int,
                      historical: Tuple[float, float]) -> float:
    """L1 distance between the predicted and historical low/high shares."""
    mid = number_range // 2
    low = sum(1 for n in predicted if n <= mid) / len(predicted)
    return abs(low - historical[0]) + abs((1.0 - low) - historical[1])


def mean_absolute_gap(values: Iterable[float], target: float) -> float:
    diffs = [abs(v - target) for v in values]
    return float(np.mean(diffs)) if diffs else 0.0
