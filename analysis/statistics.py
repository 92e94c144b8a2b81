"""Statistical analyzers over historical draws.

Every function here is pure: it reads the draws it is handed, ignores
numbers outside the configured range and returns a structurally valid
neutral value when the history is empty.
"""

import numpy as np
import pandas as pd
from typing import List, Dict, Any, Optional, Tuple, Iterable, Sequence, FrozenSet
from datetime import date
from collections import Counter
from itertools import combinations
import logging

from scipy import stats

from models.prediction_models import HistoricalDraw
from utils.helpers import round_half_away

logger = logging.getLogger(__name__)

Bucket = Tuple[int, int]

SEASONS = {
    12: "Winter", 1: "Winter", 2: "Winter",
    3: "Spring", 4: "Spring", 5: "Spring",
    6: "Summer", 7: "Summer", 8: "Summer",
    9: "Fall", 10: "Fall", 11: "Fall"
}


# ========================================
# HISTORY VIEWS
# ========================================

def chronological(draws: Iterable[HistoricalDraw]) -> List[HistoricalDraw]:
    """Oldest first, ordered by (draw_date, draw_id)."""
    return sorted(draws, key=lambda d: (d.draw_date, d.draw_id))


def in_range(numbers: Iterable[int], number_range: int) -> List[int]:
    return [n for n in numbers if 1 <= n <= number_range]


def pooled_numbers(draws: Iterable[HistoricalDraw], number_range: int) -> List[int]:
    """Every in-range winning number across ``draws``."""
    return [n for d in draws for n in in_range(d.winning_numbers, number_range)]


def draws_frame(draws: Iterable[HistoricalDraw]) -> pd.DataFrame:
    """Chronological DataFrame view with draw_id, draw_date, numbers and bonus columns."""
    rows = [
        {
            'draw_id': d.draw_id,
            'draw_date': pd.Timestamp(d.draw_date),
            'numbers': list(d.winning_numbers),
            'bonus': list(d.bonus_numbers)
        }
        for d in chronological(draws)
    ]
    frame = pd.DataFrame(rows, columns=['draw_id', 'draw_date', 'numbers', 'bonus'])
    return frame.reset_index(drop=True)


# ========================================
# FREQUENCIES
# ========================================

def number_frequencies(draws: Iterable[HistoricalDraw], number_range: int,
                       bonus: bool = False) -> np.ndarray:
    """Occurrence counts indexed by number; slot 0 is unused."""
    freq = np.zeros(number_range + 1, dtype=int)
    for draw in draws:
        numbers = draw.bonus_numbers if bonus else draw.winning_numbers
        for n in in_range(numbers, number_range):
            freq[n] += 1
    return freq


def ranked_by_frequency(freq: np.ndarray, descending: bool = True) -> List[int]:
    """Numbers 1..range by count, ties broken by ascending value."""
    numbers = range(1, len(freq))
    if descending:
        return sorted(numbers, key=lambda n: (-freq[n], n))
    return sorted(numbers, key=lambda n: (freq[n], n))


def frequency_weights(freq: np.ndarray) -> Dict[int, float]:
    """Normalized weights per number, uniform when nothing has been seen."""
    counts = freq[1:].astype(float)
    total = counts.sum()
    size = len(counts)
    if size == 0:
        return {}
    if total <= 0:
        return {n: 1.0 / size for n in range(1, size + 1)}
    return {n: counts[n - 1] / total for n in range(1, size + 1)}


def recent_numbers(draws: Sequence[HistoricalDraw], take: int) -> List[int]:
    """All winning numbers of the ``take`` most recent draws."""
    if take <= 0:
        return []
    recent = chronological(draws)[-take:]
    return [n for d in recent for n in d.winning_numbers]


def repeating_numbers(numbers: Iterable[int]) -> List[int]:
    """Numbers seen more than once, most repeated first (ties ascending)."""
    counts = Counter(numbers)
    repeated = [(n, c) for n, c in counts.items() if c > 1]
    return [n for n, _ in sorted(repeated, key=lambda x: (-x[1], x[0]))]


def reduced_pool(draws: Sequence[HistoricalDraw], number_range: int,
                 threshold_ratio: float) -> List[int]:
    """Numbers whose occurrences reach ``threshold_ratio * len(draws)``.

    Falls back to the full range when history is empty or nothing
    qualifies.
    """
    full = list(range(1, number_range + 1))
    if not draws:
        return full

    ratio = min(1.0, max(0.0, float(threshold_ratio)))
    threshold = ratio * len(draws)
    freq = number_frequencies(draws, number_range)
    pool = [n for n in full if freq[n] >= threshold]
    return pool or full


# ========================================
# TEMPORAL
# ========================================

def season_of(when: date) -> str:
    return SEASONS[when.month]


def seasonal_frequencies(draws: Iterable[HistoricalDraw], season: str,
                         number_range: int) -> np.ndarray:
    """Frequencies restricted to draws held in ``season``."""
    seasonal = [d for d in draws if season_of(d.draw_date) == season]
    return number_frequencies(seasonal, number_range)


def time_decay_weights(draws: Sequence[HistoricalDraw], decay: float) -> List[Tuple[HistoricalDraw, float]]:
    """Pairs each draw with decay ** age, the newest draw having age 0."""
    factor = min(1.0, max(0.0001, float(decay)))
    newest_first = list(reversed(chronological(draws)))
    return [(d, factor ** age) for age, d in enumerate(newest_first)]


def decayed_frequencies(draws: Sequence[HistoricalDraw], number_range: int,
                        decay: float) -> Dict[int, float]:
    weights = {n: 0.0 for n in range(1, number_range + 1)}
    for draw, weight in time_decay_weights(draws, decay):
        for n in in_range(draw.winning_numbers, number_range):
            weights[n] += weight
    return weights


def draws_since_last_seen(draws: Sequence[HistoricalDraw], number_range: int) -> Dict[int, int]:
    """Draws elapsed since each number's latest appearance.

    Numbers that appeared in the latest draw get 1; numbers never seen
    get ``len(draws) + 1`` so they rank as the most overdue.
    """
    ordered = chronological(draws)
    total = len(ordered)
    distance = {n: total + 1 for n in range(1, number_range + 1)}
    for idx, draw in enumerate(ordered):
        for n in in_range(draw.winning_numbers, number_range):
            distance[n] = total - idx
    return distance


def cyclic_gaps(draws: Sequence[HistoricalDraw], number_range: int) -> Dict[int, List[int]]:
    """Index gaps between successive appearances of each number."""
    ordered = chronological(draws)
    gaps: Dict[int, List[int]] = {n: [] for n in range(1, number_range + 1)}
    last_seen: Dict[int, int] = {}
    for idx, draw in enumerate(ordered):
        for n in set(in_range(draw.winning_numbers, number_range)):
            if n in last_seen:
                gaps[n].append(idx - last_seen[n])
            last_seen[n] = idx
    return gaps


def last_index(draws: Sequence[HistoricalDraw], number: int) -> int:
    """Chronological index of the latest draw containing ``number``, or -1."""
    ordered = chronological(draws)
    for idx in range(len(ordered) - 1, -1, -1):
        if number in ordered[idx].winning_numbers:
            return idx
    return -1


# ========================================
# DIFFERENCES AND SEQUENCES
# ========================================

def draw_deltas(numbers: Iterable[int]) -> List[int]:
    """Positive differences between consecutive sorted numbers."""
    ordered = sorted(numbers)
    return [b - a for a, b in zip(ordered, ordered[1:]) if b - a > 0]


def delta_frequencies(draws: Iterable[HistoricalDraw], number_range: int) -> Counter:
    freq: Counter = Counter()
    for draw in draws:
        freq.update(draw_deltas(in_range(draw.winning_numbers, number_range)))
    return freq


def most_frequent_deltas(freq: Counter, take: int) -> List[int]:
    """Top ``take`` deltas, ties by ascending delta."""
    if take <= 0:
        return []
    return [d for d, _ in sorted(freq.items(), key=lambda x: (-x[1], x[0]))[:take]]


def consecutive_pairs(numbers: Iterable[int]) -> List[Tuple[int, int]]:
    present = set(numbers)
    return [(n, n + 1) for n in sorted(present) if n + 1 in present]


def consecutive_pair_frequencies(draws: Iterable[HistoricalDraw], number_range: int) -> Counter:
    freq: Counter = Counter()
    for draw in draws:
        freq.update(consecutive_pairs(in_range(draw.winning_numbers, number_range)))
    return freq


def chain_frequencies(draws: Iterable[HistoricalDraw]) -> List[Tuple[FrozenSet[int], int]]:
    """Pair and triplet chains per draw, most frequent first.

    Ties keep the order in which a chain was first seen.
    """
    freq: Dict[FrozenSet[int], int] = {}
    for draw in draws:
        numbers = list(dict.fromkeys(draw.winning_numbers))
        for size in (2, 3):
            for combo in combinations(numbers, size):
                chain = frozenset(combo)
                freq[chain] = freq.get(chain, 0) + 1
    return sorted(freq.items(), key=lambda x: -x[1])


# ========================================
# POSITIONS
# ========================================

def position_frequencies(draws: Iterable[HistoricalDraw], count: int,
                         number_range: int) -> np.ndarray:
    """``count x (range + 1)`` table of values seen at each sorted position."""
    table = np.zeros((count, number_range + 1), dtype=int)
    for draw in draws:
        ordered = sorted(in_range(draw.winning_numbers, number_range))
        for pos, n in enumerate(ordered[:count]):
            table[pos, n] += 1
    return table


def position_averages(draws: Iterable[HistoricalDraw], count: int, number_range: int,
                      bonus: bool = False) -> List[Optional[float]]:
    """Mean value per stored position, None where no draw reaches that position.

    Out-of-range values are skipped without shifting the positions after them.
    """
    columns: List[List[int]] = [[] for _ in range(count)]
    for draw in draws:
        numbers = draw.bonus_numbers if bonus else draw.winning_numbers
        for pos, n in enumerate(numbers[:count]):
            if 1 <= n <= number_range:
                columns[pos].append(n)
    return [float(np.mean(col)) if col else None for col in columns]


def global_average(draws: Iterable[HistoricalDraw], number_range: int,
                   bonus: bool = False) -> Optional[float]:
    values = [n for d in draws
              for n in in_range(d.bonus_numbers if bonus else d.winning_numbers, number_range)]
    return float(np.mean(values)) if values else None


def co_occurrence_matrix(draws: Iterable[HistoricalDraw], number_range: int) -> np.ndarray:
    """Symmetric matrix counting how often two numbers were drawn together."""
    matrix = np.zeros((number_range + 1, number_range + 1), dtype=float)
    for draw in draws:
        numbers = sorted(set(in_range(draw.winning_numbers, number_range)))
        for a, b in combinations(numbers, 2):
            matrix[a, b] += 1
            matrix[b, a] += 1
    return matrix


# ========================================
# SPLITS AND RATIOS
# ========================================

def odd_even_ratio(draws: Iterable[HistoricalDraw], number_range: int) -> Tuple[float, float]:
    """(odd share, even share) across every in-range drawn number; 0.5/0.5 when empty."""
    odd = even = 0
    for n in pooled_numbers(draws, number_range):
        if n % 2 == 1:
            odd += 1
        else:
            even += 1
    total = odd + even
    if total == 0:
        return 0.5, 0.5
    return odd / total, even / total


def high_low_ratio(draws: Iterable[HistoricalDraw], number_range: int) -> Tuple[float, float]:
    """(low share, high share); low means <= range // 2."""
    mid = number_range // 2
    low = high = 0
    for n in pooled_numbers(draws, number_range):
        if n <= mid:
            low += 1
        else:
            high += 1
    total = low + high
    if total == 0:
        return 0.5, 0.5
    return low / total, high / total


def _safe_ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return 1.0 if numerator == 0 else 1e6
    return numerator / denominator


def split_ratios(numbers: Iterable[int], number_range: int) -> Tuple[float, float]:
    """(high / low, odd / even) for one set of numbers."""
    mid = number_range // 2
    values = list(numbers)
    high = sum(1 for n in values if n > mid)
    odd = sum(1 for n in values if n % 2 == 1)
    return _safe_ratio(high, len(values) - high), _safe_ratio(odd, len(values) - odd)


def symmetry_ratios(draws: Iterable[HistoricalDraw], number_range: int) -> Tuple[float, float]:
    """Pooled (high / low, odd / even) ratios; 1.0 each when empty."""
    return split_ratios(pooled_numbers(draws, number_range), number_range)


def rare_pattern_label(numbers: Sequence[int], number_range: int) -> str:
    """Bucket label such as ``2L3H-3O2E``."""
    mid = number_range // 2
    low = sum(1 for n in numbers if n <= mid)
    odd = sum(1 for n in numbers if n % 2 == 1)
    return f"{low}L{len(numbers) - low}H-{odd}O{len(numbers) - odd}E"


def parse_rare_pattern(label: str) -> Tuple[int, int, int, int]:
    """Inverse of ``rare_pattern_label``: (low, high, odd, even)."""
    split_part, parity_part = label.split('-')
    low, high = split_part.rstrip('H').split('L')
    odd, even = parity_part.rstrip('E').split('O')
    return int(low), int(high), int(odd), int(even)


def rare_pattern_frequencies(draws: Iterable[HistoricalDraw], number_range: int) -> Dict[str, int]:
    """Label counts over the in-range part of each draw; draws with nothing in range are skipped."""
    labels = []
    for draw in draws:
        numbers = in_range(draw.winning_numbers, number_range)
        if numbers:
            labels.append(rare_pattern_label(numbers, number_range))
    return dict(Counter(labels))


def position_pattern_label(numbers: Sequence[int], number_range: int) -> str:
    """Per-position parity and half tokens joined by commas, e.g. ``EL,OH``."""
    half = number_range // 2
    tokens = []
    for n in numbers:
        parity = 'E' if n % 2 == 0 else 'O'
        side = 'L' if n <= half else 'H'
        tokens.append(f"{parity}{side}")
    return ",".join(tokens)


def position_pattern_frequencies(draws: Iterable[HistoricalDraw], count: int,
                                 number_range: int) -> Dict[str, int]:
    """Frequencies of position patterns over draws holding exactly ``count`` in-range numbers."""
    freq: Dict[str, int] = {}
    for draw in draws:
        numbers = in_range(draw.winning_numbers, number_range)
        if len(numbers) != count:
            continue
        label = position_pattern_label(numbers, number_range)
        freq[label] = freq.get(label, 0) + 1
    return freq


# ========================================
# BUCKETS
# ========================================

def divide_into_buckets(number_range: int, bucket_count: int) -> List[Bucket]:
    """Contiguous buckets; the remainder goes one each to the earliest buckets."""
    if bucket_count <= 0:
        return []
    base, remainder = divmod(number_range, bucket_count)
    buckets = []
    start = 1
    for i in range(bucket_count):
        size = base + (1 if i < remainder else 0)
        end = start + size - 1
        buckets.append((start, end))
        start = end + 1
    return buckets


def divide_into_quadrants(number_range: int, count: int = 4) -> List[Bucket]:
    """Equal-width buckets; the last one absorbs the remainder."""
    if count <= 0:
        return []
    width = number_range // count
    quadrants = []
    for i in range(count):
        start = i * width + 1
        end = number_range if i == count - 1 else (i + 1) * width
        quadrants.append((start, end))
    return quadrants


def bucket_of(number: int, buckets: Sequence[Bucket]) -> Optional[int]:
    for idx, (start, end) in enumerate(buckets):
        if start <= number <= end:
            return idx
    return None


def bucket_counts(numbers: Iterable[int], buckets: Sequence[Bucket]) -> List[int]:
    counts = [0] * len(buckets)
    for n in numbers:
        idx = bucket_of(n, buckets)
        if idx is not None:
            counts[idx] += 1
    return counts


def bucket_frequencies(draws: Iterable[HistoricalDraw], buckets: Sequence[Bucket]) -> List[int]:
    counts = [0] * len(buckets)
    for draw in draws:
        for idx, c in enumerate(bucket_counts(draw.winning_numbers, buckets)):
            counts[idx] += c
    return counts


def proportional_allocation(frequencies: Sequence[int], total: int) -> List[int]:
    """Split ``total`` across buckets in proportion to ``frequencies``.

    Shares are rounded half away from zero and the rounding error is
    walked off the largest allocations first. With no frequency mass
    the split is even, remainder to the earliest buckets.
    """
    size = len(frequencies)
    if size == 0 or total <= 0:
        return [0] * size

    mass = sum(max(0, f) for f in frequencies)
    if mass == 0:
        base, remainder = divmod(total, size)
        return [base + (1 if i < remainder else 0) for i in range(size)]

    allocation = [round_half_away(max(0, f) / mass * total) for f in frequencies]
    diff = sum(allocation) - total
    if diff != 0:
        order = sorted(range(size), key=lambda i: -allocation[i])
        step = 1 if diff > 0 else -1
        idx = 0
        for _ in range(abs(diff)):
            allocation[order[idx]] -= step
            idx = (idx + 1) % size
    return [max(0, a) for a in allocation]


# ========================================
# MOMENTS
# ========================================

def draw_sums(draws: Iterable[HistoricalDraw], number_range: int) -> List[int]:
    return [sum(in_range(d.winning_numbers, number_range)) for d in draws]


def average_sum(draws: Sequence[HistoricalDraw], number_range: int) -> float:
    sums = draw_sums(draws, number_range)
    return float(np.mean(sums)) if sums else 0.0


def population_std(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def historical_std(draws: Iterable[HistoricalDraw], number_range: int) -> float:
    """Standard deviation of every in-range drawn number pooled together."""
    return population_std(pooled_numbers(draws, number_range))


def historical_mean(draws: Iterable[HistoricalDraw], number_range: int) -> float:
    values = pooled_numbers(draws, number_range)
    return float(np.mean(values)) if values else 0.0


def historical_skewness(draws: Iterable[HistoricalDraw], number_range: int) -> float:
    """Population skewness of pooled in-range numbers, 0.0 when undefined."""
    values = np.asarray(pooled_numbers(draws, number_range), dtype=float)
    if values.size < 3 or np.all(values == values[0]):
        return 0.0
    skew = float(stats.skew(values, bias=True))
    return skew if np.isfinite(skew) else 0.0


def summarize_history(draws: Sequence[HistoricalDraw], number_range: int) -> Dict[str, Any]:
    """Compact overview of the history used by the CLI's verbose mode."""
    frame = draws_frame(draws)
    freq = number_frequencies(draws, number_range)
    ranked = ranked_by_frequency(freq)
    odd, even = odd_even_ratio(draws, number_range)
    low, high = high_low_ratio(draws, number_range)
    return {
        'total_draws': len(frame),
        'first_draw': frame['draw_date'].min().date().isoformat() if len(frame) else None,
        'last_draw': frame['draw_date'].max().date().isoformat() if len(frame) else None,
        'hot_numbers': ranked[:5],
        'cold_numbers': list(reversed(ranked[-5:])),
        'average_sum': round(average_sum(draws, number_range), 3),
        'std_dev': round(historical_std(draws, number_range), 3),
        'skewness': round(historical_skewness(draws, number_range), 3),
        'odd_even': (round(odd, 3), round(even, 3)),
        'low_high': (round(low, 3), round(high, 3))
    }
