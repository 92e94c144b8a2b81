"""Custom exceptions for the lottery prediction core."""


class PredictionError(Exception):
    """Base exception for all prediction-related errors."""
    pass


class InvalidConfigurationError(PredictionError, ValueError):
    """Raised when a lottery configuration has impossible counts or ranges."""
    pass


class StrategyNotFoundError(PredictionError, LookupError):
    """Raised when no registered strategy handles a key."""
    pass


class AmbiguousStrategyError(PredictionError, LookupError):
    """Raised when more than one registered strategy handles a key."""
    pass
