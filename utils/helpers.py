"""Number-generation helpers shared by every strategy."""

import numpy as np
from typing import List, Dict, Iterable, Optional, Sequence, Set
import math
import logging

logger = logging.getLogger(__name__)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Build an explicit random source; ``None`` draws fresh OS entropy."""
    return np.random.default_rng(seed)


def generate_distinct(min_value: int, max_value: int, exclude: Iterable[int],
                      count: int, rng: np.random.Generator) -> List[int]:
    """Draw up to ``count`` distinct values from [min_value, max_value] minus ``exclude``.

    Never raises and never pads: if the pool is smaller than ``count``
    the whole pool comes back in random order.
    """
    if count <= 0 or max_value < min_value:
        return []

    blocked = set(int(x) for x in exclude)
    pool = [n for n in range(min_value, max_value + 1) if n not in blocked]
    if not pool:
        return []

    take = min(count, len(pool))
    picked = rng.choice(len(pool), size=take, replace=False)
    return [pool[i] for i in picked]


def weighted_sample_distinct(weights: Dict[int, float], count: int,
                             rng: np.random.Generator) -> List[int]:
    """Weighted sampling without replacement.

    Negative or non-finite weights count as zero. Once the remaining
    mass is exhausted the rest is drawn uniformly, so the loop always
    finishes after at most ``len(weights)`` picks.
    """
    remaining = {}
    for number, weight in weights.items():
        w = float(weight)
        remaining[int(number)] = w if math.isfinite(w) and w > 0 else 0.0

    selected: List[int] = []
    while remaining and len(selected) < count:
        keys = list(remaining.keys())
        mass = np.array([remaining[k] for k in keys], dtype=float)
        total = mass.sum()

        if total > 0:
            idx = rng.choice(len(keys), p=mass / total)
        else:
            idx = rng.integers(len(keys))

        chosen = keys[int(idx)]
        selected.append(chosen)
        del remaining[chosen]

    return selected


def shuffled(values: Iterable[int], rng: np.random.Generator) -> List[int]:
    """Return a new list holding ``values`` in rng-driven order."""
    items = list(values)
    if len(items) < 2:
        return items
    order = rng.permutation(len(items))
    return [items[i] for i in order]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, midpoints away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def nearest_free(value: int, used: Set[int], low: int, high: int) -> Optional[int]:
    """Closest value to ``value`` in [low, high] not in ``used``.

    Searches v, v+1, v-1, v+2, v-2, ... and returns None when every
    value in range is taken.
    """
    value = clamp(value, low, high)
    span = high - low
    for offset in range(span + 1):
        for candidate in (value + offset, value - offset):
            if low <= candidate <= high and candidate not in used:
                return candidate
    return None


def top_up(selected: Sequence[int], config_count: int, number_range: int,
           rng: np.random.Generator) -> List[int]:
    """Pad ``selected`` with uniform distinct numbers until it reaches ``config_count``.

    Values outside ``[1, number_range]`` are dropped before padding.
    """
    kept = [n for n in dict.fromkeys(selected) if 1 <= n <= number_range]
    result = kept[:config_count]
    missing = config_count - len(result)
    if missing > 0:
        result.extend(generate_distinct(1, number_range, result, missing, rng))
    return result
