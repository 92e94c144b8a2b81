"""Analysis package: history analyzers and confidence scorers."""

from . import statistics
from . import confidence
from .statistics import chronological, draws_frame, summarize_history

__all__ = [
    'statistics',
    'confidence',
    'chronological',
    'draws_frame',
    'summarize_history'
]
