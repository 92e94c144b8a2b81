"""Command line entry point for the lottery strategy core."""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from models.prediction_models import LotteryConfiguration, StrategyKey
from models.exceptions import PredictionError
from analysis.statistics import summarize_history
from predictions.predictor_engine import PredictorEngine
from utils.history_loader import load_history_csv
import structlog

STRATEGY_DESCRIPTIONS = {
    StrategyKey.CLUSTERING_ANALYSIS: "One number per co-occurrence cluster",
    StrategyKey.CONSECUTIVE_NUMBERS: "Members of the most common (n, n+1) pairs",
    StrategyKey.CYCLIC_PATTERNS: "Numbers with the shortest return cycle",
    StrategyKey.DELTA_SYSTEM: "Walk built from the most common differences",
    StrategyKey.DRAW_POSITION_ANALYSIS: "Most common value per sorted position",
    StrategyKey.FREQUENCY_BASED: "Most drawn numbers",
    StrategyKey.GAP_ANALYSIS: "Walk built from the most common gaps",
    StrategyKey.GROUP_SELECTION: "Picks spread across range groups by history",
    StrategyKey.HIGH_LOW_NUMBER_SPLIT: "Keeps the historical low/high ratio",
    StrategyKey.INVERTED_FREQUENCY: "Least drawn numbers",
    StrategyKey.LAST_APPEARANCE: "Numbers absent the longest",
    StrategyKey.MIXED: "Weighted vote over several strategies",
    StrategyKey.NUMBER_CHAIN: "Most common co-drawn pairs and triplets",
    StrategyKey.NUMBER_SUM: "Steers toward the average draw sum",
    StrategyKey.ODD_EVEN_BALANCE: "Keeps the historical odd/even ratio",
    StrategyKey.PATTERN_MATCHING: "Repeats the most common odd/even position pattern",
    StrategyKey.QUADRANT_ANALYSIS: "Picks spread across range quadrants by history",
    StrategyKey.RANDOM: "Uniform random baseline",
    StrategyKey.RARE_PATTERNS: "Follows the rarest odd/even and low/high mix",
    StrategyKey.REDUCED_NUMBER_POOL: "Samples from numbers above a frequency threshold",
    StrategyKey.REPEATING_NUMBERS: "Numbers repeated in recent draws",
    StrategyKey.SEASONAL_PATTERNS: "Most drawn numbers in the current season",
    StrategyKey.SKEWNESS_ANALYSIS: "Leans low or high following historical skew",
    StrategyKey.STANDARD_DEVIATION: "Matches the historical spread",
    StrategyKey.STATISTICAL_AVERAGING: "Mean value per position",
    StrategyKey.SYMMETRY_ANALYSIS: "Mirrors the odd/even and low/high balance",
    StrategyKey.TIME_DECAY: "Frequency with recent draws weighted higher",
    StrategyKey.WEIGHT_DISTRIBUTION: "Frequency-weighted sampling scored by overlap",
    StrategyKey.WEIGHTED_PROBABILITY: "Frequency-weighted sampling",
}


# Configure structured logging
def setup_logging(level: str = None):
    """Setup structured logging configuration.

    With ``log_format == "json"`` every root handler renders records
    through structlog, so the stdlib loggers used across the package
    emit JSON lines too.
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    if settings.log_format == "json":
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer()
            ]
        )
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Heuristic lottery number strategies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Show every strategy key
    python main.py list

    # Five plays of 6/49 with two bonus numbers, reproducible
    python main.py predict draws.csv --strategy frequency-based \\
        --main-count 6 --main-range 49 --plays 5 --seed 42
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List strategy keys')

    predict = sub.add_parser('predict', help='Generate predictions from a draws CSV')
    predict.add_argument('history', help='CSV with draw_id, draw_date, numbers and optional bonus columns')
    predict.add_argument('--strategy', default=StrategyKey.MIXED.value, help='Strategy key')
    predict.add_argument('--lottery-id', type=int, default=1)
    predict.add_argument('--main-count', type=int, required=True)
    predict.add_argument('--main-range', type=int, required=True)
    predict.add_argument('--bonus-count', type=int, default=0)
    predict.add_argument('--bonus-range', type=int, default=0)
    predict.add_argument('--plays', type=int, default=1)
    predict.add_argument('--seed', type=int, default=settings.default_seed)
    predict.add_argument('--summary', action='store_true', help='Include a history summary in the output')
    return parser


def run_list(engine: PredictorEngine) -> dict:
    return {
        key: STRATEGY_DESCRIPTIONS.get(StrategyKey(key), "")
        for key in sorted(engine.available_strategies())
    }


def run_predict(engine: PredictorEngine, args) -> dict:
    config = LotteryConfiguration(
        lottery_id=args.lottery_id,
        main_numbers_count=args.main_count,
        main_numbers_range=args.main_range,
        bonus_numbers_count=args.bonus_count,
        bonus_numbers_range=args.bonus_range
    )
    draws = load_history_csv(args.history, args.lottery_id)
    results = engine.predict_many(args.strategy, config, draws, plays=args.plays, seed=args.seed)

    output = {
        'strategy': args.strategy,
        'predictions': [r.to_dict() for r in results]
    }
    if args.summary:
        output['history'] = summarize_history(draws, config.main_numbers_range)
    return output


def main(argv=None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else None)
    logger = logging.getLogger(__name__)

    engine = PredictorEngine(settings)
    try:
        if args.command == 'list':
            output = run_list(engine)
        else:
            output = run_predict(engine, args)
    except (PredictionError, ValueError, FileNotFoundError) as e:
        logger.error(f"Prediction failed: {e}")
        return 1

    print(json.dumps(output, indent=2, default=int))
    return 0


if __name__ == "__main__":
    sys.exit(main())
