"""Load historical draws from CSV files."""

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging

import pandas as pd

from models.prediction_models import HistoricalDraw

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('draw_id', 'draw_date', 'numbers')

_SEPARATORS = re.compile(r'[\s,;\-]+')


def parse_numbers(raw: Optional[str]) -> Tuple[int, ...]:
    """Parse "83-33-22", "5 12 30" or "1,2,3" into a tuple of ints."""
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ()
    text = str(raw).strip()
    if not text:
        return ()
    return tuple(int(part) for part in _SEPARATORS.split(text) if part)


def load_history_csv(path: Union[str, Path], lottery_id: int) -> List[HistoricalDraw]:
    """Read a draws CSV with columns draw_id, draw_date, numbers and an optional bonus.

    Rows that cannot be parsed are logged and skipped.
    """
    frame = pd.read_csv(path, dtype=str)

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"History file {path} is missing columns: {missing}")

    dates = pd.to_datetime(frame['draw_date'], errors='coerce')
    has_bonus = 'bonus' in frame.columns

    draws: List[HistoricalDraw] = []
    for idx, row in frame.iterrows():
        if pd.isna(dates[idx]):
            logger.warning(f"[PARSE] Invalid draw_date '{row['draw_date']}' on row {idx}, skipping")
            continue
        try:
            numbers = parse_numbers(row['numbers'])
            bonus = parse_numbers(row['bonus']) if has_bonus else ()
            draw_id = int(row['draw_id'])
        except (TypeError, ValueError) as e:
            logger.warning(f"[PARSE] Cannot parse row {idx}: {e}")
            continue

        draws.append(HistoricalDraw(
            draw_id=draw_id,
            lottery_id=lottery_id,
            draw_date=dates[idx].date(),
            winning_numbers=numbers,
            bonus_numbers=bonus
        ))

    logger.info(f"[PARSE] Loaded {len(draws)} of {len(frame)} draws from {path}")
    return draws
