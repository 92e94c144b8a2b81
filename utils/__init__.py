"""Utilities package for the lottery strategy core."""

from .helpers import (
    make_rng,
    generate_distinct,
    weighted_sample_distinct,
    shuffled,
    round_half_away,
    clamp,
    nearest_free,
    top_up
)

__all__ = [
    'make_rng',
    'generate_distinct',
    'weighted_sample_distinct',
    'shuffled',
    'round_half_away',
    'clamp',
    'nearest_free',
    'top_up'
]
