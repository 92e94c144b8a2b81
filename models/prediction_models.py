"""Prediction value objects, the strategy contract and the strategy registry."""

from typing import Dict, List, Any, Optional, Iterable, Sequence, Tuple
from dataclasses import dataclass, field
from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum
import logging

import numpy as np

from models.exceptions import (
    InvalidConfigurationError, StrategyNotFoundError, AmbiguousStrategyError
)
from utils.helpers import generate_distinct

logger = logging.getLogger(__name__)


class StrategyKey(str, Enum):
    """Closed set of case-sensitive strategy identifiers."""
    CLUSTERING_ANALYSIS = "clustering-analysis"
    CONSECUTIVE_NUMBERS = "consecutive-numbers"
    CYCLIC_PATTERNS = "cyclic-patterns"
    DELTA_SYSTEM = "delta-system"
    DRAW_POSITION_ANALYSIS = "draw-position-analysis"
    FREQUENCY_BASED = "frequency-based"
    GAP_ANALYSIS = "gap-analysis"
    GROUP_SELECTION = "group-selection"
    HIGH_LOW_NUMBER_SPLIT = "high-low-number-split"
    INVERTED_FREQUENCY = "inverted-frequency"
    LAST_APPEARANCE = "last-appearance"
    MIXED = "mixed"
    NUMBER_CHAIN = "number-chain"
    NUMBER_SUM = "number-sum"
    ODD_EVEN_BALANCE = "odd-even-balance"
    PATTERN_MATCHING = "pattern-matching"
    QUADRANT_ANALYSIS = "quadrant-analysis"
    RANDOM = "random"
    RARE_PATTERNS = "rare-patterns"
    REDUCED_NUMBER_POOL = "reduced-number-pool"
    REPEATING_NUMBERS = "repeating-numbers"
    SEASONAL_PATTERNS = "seasonal-patterns"
    SKEWNESS_ANALYSIS = "skewness-analysis"
    STANDARD_DEVIATION = "standard-deviation"
    STATISTICAL_AVERAGING = "statistical-averaging"
    SYMMETRY_ANALYSIS = "symmetry-analysis"
    TIME_DECAY = "time-decay"
    WEIGHT_DISTRIBUTION = "weight-distribution"
    WEIGHTED_PROBABILITY = "weighted-probability"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LotteryConfiguration:
    """Lottery parameters; validated on construction."""
    lottery_id: int
    main_numbers_count: int
    main_numbers_range: int
    bonus_numbers_count: int = 0
    bonus_numbers_range: int = 0

    def __post_init__(self):
        errors = []
        if self.main_numbers_count <= 0:
            errors.append(f"main_numbers_count must be positive, got {self.main_numbers_count}")
        if self.main_numbers_range <= 0:
            errors.append(f"main_numbers_range must be positive, got {self.main_numbers_range}")
        elif self.main_numbers_count > self.main_numbers_range:
            errors.append(
                f"main_numbers_count ({self.main_numbers_count}) exceeds "
                f"main_numbers_range ({self.main_numbers_range})"
            )
        if self.bonus_numbers_count < 0:
            errors.append(f"bonus_numbers_count must not be negative, got {self.bonus_numbers_count}")
        if self.bonus_numbers_count > 0:
            if self.bonus_numbers_range <= 0:
                errors.append(
                    f"bonus_numbers_range must be positive when bonus numbers are drawn, "
                    f"got {self.bonus_numbers_range}"
                )
            elif self.bonus_numbers_count > self.bonus_numbers_range:
                errors.append(
                    f"bonus_numbers_count ({self.bonus_numbers_count}) exceeds "
                    f"bonus_numbers_range ({self.bonus_numbers_range})"
                )
        if errors:
            raise InvalidConfigurationError(
                f"Invalid configuration for lottery {self.lottery_id}: " + "; ".join(errors)
            )

    @property
    def has_bonus(self) -> bool:
        return self.bonus_numbers_count > 0


@dataclass(frozen=True)
class HistoricalDraw:
    """One past draw. Never mutated."""
    draw_id: int
    lottery_id: int
    draw_date: date
    winning_numbers: Tuple[int, ...]
    bonus_numbers: Tuple[int, ...] = ()
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # Accept any iterable for convenience but store tuples
        object.__setattr__(self, 'winning_numbers', tuple(int(n) for n in self.winning_numbers))
        object.__setattr__(self, 'bonus_numbers', tuple(int(n) for n in self.bonus_numbers))


@dataclass(frozen=True)
class PredictionResult:
    """Output of a strategy run."""
    lottery_id: int
    algorithm_key: str
    predicted_numbers: Tuple[int, ...] = ()
    bonus_numbers: Tuple[int, ...] = ()
    confidence_score: float = 0.0

    @classmethod
    def create(cls, config: LotteryConfiguration, algorithm_key: str,
               predicted: Iterable[int], bonus: Iterable[int],
               confidence: float) -> "PredictionResult":
        """Build a result that honours the range, distinctness and disjointness invariants."""
        main = _clean_numbers(predicted, config.main_numbers_range,
                              config.main_numbers_count, exclude=())
        extra = _clean_numbers(bonus, config.bonus_numbers_range,
                               config.bonus_numbers_count, exclude=main)

        score = float(confidence) if confidence is not None else 0.0
        if not np.isfinite(score):
            score = 0.0
        score = min(1.0, max(0.0, score))

        return cls(
            lottery_id=config.lottery_id,
            algorithm_key=str(algorithm_key),
            predicted_numbers=main,
            bonus_numbers=extra,
            confidence_score=score
        )

    @classmethod
    def empty(cls, lottery_id: int, algorithm_key: str) -> "PredictionResult":
        """Degraded output used when a strategy has nothing to work with."""
        return cls(lottery_id=lottery_id, algorithm_key=str(algorithm_key))

    @property
    def is_empty(self) -> bool:
        return not self.predicted_numbers

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'lottery_id': self.lottery_id,
            'algorithm_key': self.algorithm_key,
            'predicted_numbers': list(self.predicted_numbers),
            'bonus_numbers': list(self.bonus_numbers),
            'confidence_score': round(self.confidence_score, 6)
        }


def _clean_numbers(numbers: Iterable[int], number_range: int, limit: int,
                   exclude: Sequence[int]) -> Tuple[int, ...]:
    """Keep order, drop duplicates, out-of-range and excluded values, cap at limit."""
    if limit <= 0:
        return ()
    blocked = set(exclude)
    kept: List[int] = []
    for n in numbers:
        n = int(n)
        if n < 1 or n > number_range or n in blocked:
            continue
        blocked.add(n)
        kept.append(n)
        if len(kept) >= limit:
            break
    return tuple(kept)


class BasePredictionStrategy(ABC):
    """Abstract base class for all prediction strategies.

    Subclasses are stateless: everything a call needs arrives through
    ``predict`` and nothing is stored on the instance between calls.
    The template runs analyze -> generate -> generate_bonus -> score.
    """

    key: str = ""
    requires_history: bool = True
    # Scored even without history (a fixed analytical confidence)
    history_free_confidence: bool = False

    def handles(self, key: str) -> bool:
        """Exact, case-sensitive match against this strategy's key."""
        return str(key) == str(self.key)

    def predict(self, config: LotteryConfiguration, history: Iterable[HistoricalDraw],
                rng: np.random.Generator) -> PredictionResult:
        """Generate one prediction for ``config`` from ``history`` using ``rng``."""
        draws = list(history)

        if self.requires_history and not draws:
            logger.debug(f"[{self.key}] No history available, returning empty prediction")
            return PredictionResult.empty(config.lottery_id, self.key)

        statistic = self.analyze(config, draws)
        main = list(self.generate(config, statistic, draws, rng))

        bonus: List[int] = []
        if config.has_bonus:
            bonus = list(self.generate_bonus(config, draws, main, rng))

        confidence = 0.0
        if draws or self.history_free_confidence:
            confidence = self.score(config, draws, statistic, main)

        return PredictionResult.create(config, self.key, main, bonus, confidence)

    @abstractmethod
    def analyze(self, config: LotteryConfiguration, draws: List[HistoricalDraw]) -> Any:
        """Derive the statistic this strategy is biased by."""
        pass

    @abstractmethod
    def generate(self, config: LotteryConfiguration, statistic: Any,
                 draws: List[HistoricalDraw], rng: np.random.Generator) -> List[int]:
        """Produce main numbers from the statistic."""
        pass

    @abstractmethod
    def score(self, config: LotteryConfiguration, draws: List[HistoricalDraw],
              statistic: Any, predicted: List[int]) -> float:
        """Confidence in [0, 1] for the predicted main numbers."""
        pass

    def generate_bonus(self, config: LotteryConfiguration, draws: List[HistoricalDraw],
                       main: List[int], rng: np.random.Generator) -> List[int]:
        """Uniform distinct bonus numbers that avoid the chosen main numbers."""
        return generate_distinct(1, config.bonus_numbers_range, main,
                                 config.bonus_numbers_count, rng)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"


@dataclass(frozen=True)
class WeightedComponent:
    """A strategy and the caller-supplied weight of its vote."""
    strategy: BasePredictionStrategy
    weight: float = 1.0


class StrategyRegistry:
    """Immutable collection of strategies dispatched by key."""

    def __init__(self, strategies: Iterable[BasePredictionStrategy]):
        self._strategies: Tuple[BasePredictionStrategy, ...] = tuple(strategies)
        logger.info(f"[REGISTRY] Strategy registry initialized with {len(self._strategies)} strategies")

    def resolve(self, key: str) -> BasePredictionStrategy:
        """Return the single strategy handling ``key``."""
        matches = [s for s in self._strategies if s.handles(key)]

        if not matches:
            logger.error(f"[REGISTRY] Strategy '{key}' not registered. Available: {self.keys()}")
            raise StrategyNotFoundError(f"No strategy registered for key '{key}'")
        if len(matches) > 1:
            names = [type(s).__name__ for s in matches]
            logger.error(f"[REGISTRY] Strategy '{key}' is handled by several strategies: {names}")
            raise AmbiguousStrategyError(f"Key '{key}' is handled by {len(matches)} strategies: {names}")

        return matches[0]

    def keys(self) -> List[str]:
        """List all registered keys."""
        return [str(s.key) for s in self._strategies]

    def __contains__(self, key: str) -> bool:
        return any(s.handles(key) for s in self._strategies)

    def __iter__(self):
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)
