"""Configuration package for the lottery prediction core."""

from .settings import settings, PredictionSettings

__all__ = [
    'settings',
    'PredictionSettings'
]
