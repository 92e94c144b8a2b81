"""Prediction engine: the facade callers use to run strategies by key."""

import numpy as np
from typing import Dict, List, Any, Optional, Iterable
import logging

from config.settings import PredictionSettings, settings
from models.prediction_models import (
    LotteryConfiguration, HistoricalDraw, PredictionResult, StrategyRegistry
)
from models.exceptions import PredictionError
from predictions.registry import build_default_registry, build_mixed
from utils.helpers import make_rng

logger = logging.getLogger(__name__)


class PredictorEngine:
    """Resolves strategies by key and runs them with explicit random sources."""

    def __init__(self, config: Optional[PredictionSettings] = None,
                 registry: Optional[StrategyRegistry] = None):
        self.settings = config or settings
        self._registry = registry

    @property
    def registry(self) -> StrategyRegistry:
        # Built on first use so importing the package stays cheap
        if self._registry is None:
            logger.info("[INIT] Building default strategy registry...")
            self._registry = build_default_registry(self.settings)
        return self._registry

    def available_strategies(self) -> List[str]:
        return self.registry.keys()

    def _rng_for(self, seed: Optional[int], rng: Optional[np.random.Generator]) -> np.random.Generator:
        if rng is not None:
            return rng
        return make_rng(seed if seed is not None else self.settings.default_seed)

    def predict(self, key: str, config: LotteryConfiguration, history: Iterable[HistoricalDraw],
                seed: Optional[int] = None,
                rng: Optional[np.random.Generator] = None) -> PredictionResult:
        """Run the strategy registered under ``key`` once."""
        draws = list(history)
        try:
            strategy = self.registry.resolve(key)
        except PredictionError as e:
            logger.error(f"[ENGINE] Cannot dispatch '{key}': {e}")
            raise

        logger.info(f"[ENGINE] Running '{key}' for lottery {config.lottery_id} with {len(draws)} draws")
        result = strategy.predict(config, draws, self._rng_for(seed, rng))

        if result.is_empty:
            logger.warning(f"[ENGINE] '{key}' produced no numbers (insufficient history?)")
        else:
            logger.info(f"[ENGINE] '{key}' -> {list(result.predicted_numbers)} "
                        f"confidence={result.confidence_score:.4f}")
        return result

    def predict_many(self, key: str, config: LotteryConfiguration, history: Iterable[HistoricalDraw],
                     plays: int = 1, seed: Optional[int] = None) -> List[PredictionResult]:
        """Several independent plays, each with its own child random stream."""
        if plays <= 0:
            return []
        if plays > self.settings.max_plays:
            raise ValueError(f"plays must be at most {self.settings.max_plays}, got {plays}")

        draws = list(history)
        root = np.random.SeedSequence(seed if seed is not None else self.settings.default_seed)
        children = root.spawn(plays)
        logger.info(f"[ENGINE] Generating {plays} plays with '{key}'")
        return [
            self.predict(key, config, draws, rng=np.random.default_rng(child))
            for child in children
        ]

    def predict_mixed(self, config: LotteryConfiguration, history: Iterable[HistoricalDraw],
                      weights: Dict[str, float], seed: Optional[int] = None,
                      rng: Optional[np.random.Generator] = None) -> PredictionResult:
        """Ad hoc weighted ensemble over registered strategies."""
        strategies = [s for s in self.registry if s.key in weights]
        try:
            mixed = build_mixed(strategies, weights)
        except PredictionError as e:
            logger.error(f"[ENGINE] Invalid ensemble {weights}: {e}")
            raise
        return mixed.predict(config, list(history), self._rng_for(seed, rng))


# Global predictor engine instance
predictor_engine = PredictorEngine()
