"""Shared fixtures: lottery configurations, a seeded history and random sources."""

from datetime import date, timedelta
from typing import List

import numpy as np
import pytest

from models.prediction_models import LotteryConfiguration, HistoricalDraw


def make_draws(rows, lottery_id: int = 1, start: date = date(2024, 1, 6),
               bonus_rows=None) -> List[HistoricalDraw]:
    """Weekly draws built from literal number rows."""
    draws = []
    for idx, numbers in enumerate(rows):
        bonus = bonus_rows[idx] if bonus_rows else ()
        draws.append(HistoricalDraw(
            draw_id=idx + 1,
            lottery_id=lottery_id,
            draw_date=start + timedelta(days=7 * idx),
            winning_numbers=numbers,
            bonus_numbers=bonus
        ))
    return draws


@pytest.fixture
def config():
    """6/49 with one bonus number from 1..10."""
    return LotteryConfiguration(
        lottery_id=1,
        main_numbers_count=6,
        main_numbers_range=49,
        bonus_numbers_count=1,
        bonus_numbers_range=10
    )


@pytest.fixture
def small_config():
    return LotteryConfiguration(lottery_id=2, main_numbers_count=4, main_numbers_range=10)


@pytest.fixture
def history():
    """Forty seeded 6/49 draws with a bonus number, one per week."""
    source = np.random.default_rng(7)
    rows = [sorted(int(n) for n in source.choice(np.arange(1, 50), size=6, replace=False))
            for _ in range(40)]
    bonus = [(int(source.integers(1, 11)),) for _ in range(40)]
    return make_draws(rows, bonus_rows=bonus)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
