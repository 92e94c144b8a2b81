"""Weighted-vote ensemble over other strategies."""

import math
from typing import List, Dict, Any, Iterable, Tuple
import logging

import numpy as np

from models.prediction_models import (
    BasePredictionStrategy, LotteryConfiguration, HistoricalDraw, PredictionResult,
    WeightedComponent, StrategyKey
)

logger = logging.getLogger(__name__)

Vote = Tuple[PredictionResult, float]


def weighted_vote(votes: Iterable[Tuple[Iterable[int], float]], take: int,
                  exclude: Iterable[int] = ()) -> List[int]:
    """Accumulate each vote's weight per number and keep the ``take`` heaviest.

    Negative weights count as zero. Ties go to the lower number.
    """
    if take <= 0:
        return []
    blocked = set(exclude)
    tally: Dict[int, float] = {}
    for numbers, weight in votes:
        w = max(0.0, weight)
        for n in numbers:
            if n in blocked:
                continue
            tally[n] = tally.get(n, 0.0) + w
    ranked = sorted(tally.items(), key=lambda kv: (-kv[1], kv[0]))
    return [n for n, _ in ranked[:take]]


def weighted_confidence(votes: Iterable[Vote]) -> float:
    """Sum(w * c) / Sum(w), 0.0 when the weights sum to zero."""
    total = weight_sum = 0.0
    for result, weight in votes:
        w = max(0.0, weight)
        total += result.confidence_score * w
        weight_sum += w
    return total / weight_sum if weight_sum > 0 else 0.0


class MixedStrategy(BasePredictionStrategy):
    """Runs every component on the same inputs and merges them by weighted vote."""

    key = StrategyKey.MIXED.value
    requires_history = False
    history_free_confidence = True

    def __init__(self, components: Iterable[WeightedComponent]):
        self.components: Tuple[WeightedComponent, ...] = tuple(components)
        for component in self.components:
            if not math.isfinite(component.weight):
                raise ValueError(
                    f"Weight for '{component.strategy.key}' must be finite, got {component.weight}"
                )
            if component.strategy.handles(self.key):
                raise ValueError("A mixed strategy cannot contain another mixed strategy")

        logger.info(
            f"[MIXED] Ensemble of {len(self.components)} strategies: "
            f"{[(c.strategy.key, c.weight) for c in self.components]}"
        )

    def predict(self, config: LotteryConfiguration, history: Iterable[HistoricalDraw],
                rng: np.random.Generator) -> PredictionResult:
        draws = list(history)
        if not self.components:
            return PredictionResult.empty(config.lottery_id, self.key)

        weights = self.analyze(config, draws)
        votes: List[Vote] = [
            (component.strategy.predict(config, draws, rng), weight)
            for component, weight in zip(self.components, weights)
        ]

        main = self.generate(config, votes, draws, rng)
        bonus: List[int] = []
        if config.has_bonus:
            bonus = weighted_vote(
                ((result.bonus_numbers, w) for result, w in votes),
                config.bonus_numbers_count,
                exclude=main
            )
        confidence = self.score(config, draws, votes, main)

        logger.debug(f"[MIXED] Voted {main} from {len(votes)} components, confidence {confidence:.4f}")
        return PredictionResult.create(config, self.key, main, bonus, confidence)

    def analyze(self, config, draws) -> List[float]:
        """Clamped component weights."""
        return [max(0.0, float(c.weight)) for c in self.components]

    def generate(self, config, statistic: List[Vote], draws, rng) -> List[int]:
        return weighted_vote(
            ((result.predicted_numbers, w) for result, w in statistic),
            config.main_numbers_count
        )

    def score(self, config, draws, statistic: List[Vote], predicted) -> float:
        return weighted_confidence(statistic)
