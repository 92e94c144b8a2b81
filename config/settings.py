"""Application settings for the prediction core using Pydantic BaseSettings."""

from pydantic_settings import BaseSettings
from typing import Dict, Optional


class PredictionSettings(BaseSettings):
    """Tunable settings for strategies, the ensemble and logging."""

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================
    log_level: str = "INFO"
    log_format: str = "text"  # "json" switches structlog to JSON rendering

    # ========================================
    # RANDOMNESS
    # ========================================
    default_seed: Optional[int] = None  # None => fresh OS entropy per call

    # ========================================
    # STRATEGY TUNING
    # ========================================
    # Frequency family
    reduced_pool_threshold: float = 0.10  # share of draws a number must reach
    repeating_recent_draws: int = 10
    time_decay_factor: float = 0.9  # lower means faster decay
    time_decay_recent_window: int = 10  # draws used to score time-decay

    # Bucket family
    group_count: int = 3
    quadrant_count: int = 4

    # Statistical family
    std_dev_tolerance: float = 0.5
    sum_jitter: int = 3
    skewness_threshold: float = 0.10

    # Random-greedy searches give up after this many candidates per number
    max_attempts_per_number: int = 200

    # ========================================
    # MIXED ENSEMBLE
    # ========================================
    mixed_weights: Dict[str, float] = {
        "frequency-based": 0.5,
        "reduced-number-pool": 0.3,
        "cyclic-patterns": 0.2,
    }

    # ========================================
    # CLI
    # ========================================
    max_plays: int = 50

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
        "validate_assignment": False,
        "protected_namespaces": ()
    }


# Global settings instance
settings = PredictionSettings()
