"""Explicit construction of the default strategy registry."""

from typing import Dict, List, Optional
from datetime import date
import logging

from config.settings import PredictionSettings, settings as default_settings
from models.prediction_models import (
    BasePredictionStrategy, StrategyRegistry, WeightedComponent
)
from models.exceptions import StrategyNotFoundError
from predictions.frequency import (
    FrequencyStrategy, InvertedFrequencyStrategy, LastAppearanceStrategy,
    RepeatingNumbersStrategy, ReducedNumberPoolStrategy, SeasonalPatternsStrategy,
    TimeDecayStrategy
)
from predictions.weighted import WeightedProbabilityStrategy, WeightDistributionStrategy
from predictions.distribution import (
    OddEvenBalanceStrategy, HighLowSplitStrategy, GroupSelectionStrategy,
    QuadrantAnalysisStrategy, SymmetryAnalysisStrategy, RarePatternsStrategy,
    PatternMatchingStrategy
)
from predictions.sequences import (
    DeltaSystemStrategy, GapAnalysisStrategy, ConsecutiveNumbersStrategy,
    NumberChainStrategy, CyclicPatternsStrategy, DrawPositionAnalysisStrategy,
    ClusteringAnalysisStrategy
)
from predictions.statistical import (
    StatisticalAveragingStrategy, NumberSumStrategy, StandardDeviationStrategy,
    SkewnessAnalysisStrategy, RandomStrategy
)
from predictions.mixed import MixedStrategy

logger = logging.getLogger(__name__)


def build_base_strategies(config: Optional[PredictionSettings] = None,
                          reference_date: Optional[date] = None) -> List[BasePredictionStrategy]:
    """Every single-heuristic strategy, tuned from ``config``."""
    cfg = config or default_settings
    return [
        # Frequency family
        FrequencyStrategy(),
        InvertedFrequencyStrategy(),
        LastAppearanceStrategy(),
        RepeatingNumbersStrategy(recent_draws=cfg.repeating_recent_draws),
        ReducedNumberPoolStrategy(threshold_ratio=cfg.reduced_pool_threshold),
        SeasonalPatternsStrategy(reference_date=reference_date),
        TimeDecayStrategy(decay_factor=cfg.time_decay_factor,
                          recent_window=cfg.time_decay_recent_window),

        # Weighted sampling
        WeightedProbabilityStrategy(),
        WeightDistributionStrategy(),

        # Distribution shape
        OddEvenBalanceStrategy(),
        HighLowSplitStrategy(),
        GroupSelectionStrategy(group_count=cfg.group_count),
        QuadrantAnalysisStrategy(quadrant_count=cfg.quadrant_count),
        SymmetryAnalysisStrategy(),
        RarePatternsStrategy(),
        PatternMatchingStrategy(),

        # Sequences and structure
        DeltaSystemStrategy(),
        GapAnalysisStrategy(),
        ConsecutiveNumbersStrategy(),
        NumberChainStrategy(),
        CyclicPatternsStrategy(),
        DrawPositionAnalysisStrategy(),
        ClusteringAnalysisStrategy(),

        # Moments
        StatisticalAveragingStrategy(),
        NumberSumStrategy(jitter=cfg.sum_jitter, max_attempts=cfg.max_attempts_per_number),
        StandardDeviationStrategy(tolerance=cfg.std_dev_tolerance,
                                  max_attempts=cfg.max_attempts_per_number),
        SkewnessAnalysisStrategy(threshold=cfg.skewness_threshold,
                                 max_attempts=cfg.max_attempts_per_number),
        RandomStrategy(),
    ]


def build_mixed(strategies: List[BasePredictionStrategy], weights: Dict[str, float]) -> MixedStrategy:
    """Mixed ensemble over the strategies named in ``weights``."""
    by_key = {s.key: s for s in strategies}
    components = []
    for key, weight in weights.items():
        if key not in by_key:
            raise StrategyNotFoundError(f"Mixed weight refers to unknown strategy '{key}'")
        components.append(WeightedComponent(strategy=by_key[key], weight=float(weight)))
    return MixedStrategy(components)


def build_default_registry(config: Optional[PredictionSettings] = None,
                           reference_date: Optional[date] = None) -> StrategyRegistry:
    """The closed set of strategies available by key, including the default Mixed ensemble."""
    cfg = config or default_settings
    strategies = build_base_strategies(cfg, reference_date=reference_date)
    strategies.append(build_mixed(strategies, cfg.mixed_weights))
    logger.info(f"[REGISTRY] Built default registry with {len(strategies)} strategies")
    return StrategyRegistry(strategies)
