"""Tests for CSV history loading."""

from datetime import date

import pytest

from utils.history_loader import load_history_csv, parse_numbers


@pytest.mark.parametrize("raw,expected", [
    ("83-33-22", (83, 33, 22)),
    ("5 12 30", (5, 12, 30)),
    (" 1, 2 ,3 ", (1, 2, 3)),
    ("", ()),
    (None, ()),
    (float('nan'), ()),
])
def test_parse_numbers(raw, expected):
    assert parse_numbers(raw) == expected


def test_load_history_csv(tmp_path):
    path = tmp_path / "draws.csv"
    path.write_text(
        "draw_id,draw_date,numbers,bonus\n"
        "1,2024-01-06,1-2-3-4,7\n"
        "2,2024-01-13,5 6 7 8,\n"
        "3,not-a-date,1-2-3-4,1\n"
        "4,2024-01-20,1-x-3,2\n"
    )
    draws = load_history_csv(path, lottery_id=3)

    assert [d.draw_id for d in draws] == [1, 2]
    assert draws[0].winning_numbers == (1, 2, 3, 4)
    assert draws[0].bonus_numbers == (7,)
    assert draws[0].draw_date == date(2024, 1, 6)
    assert draws[1].bonus_numbers == ()
    assert all(d.lottery_id == 3 for d in draws)


def test_load_history_csv_without_bonus_column(tmp_path):
    path = tmp_path / "draws.csv"
    path.write_text("draw_id,draw_date,numbers\n1,2024-03-01,4 5 6\n")
    draws = load_history_csv(path, lottery_id=1)
    assert draws[0].bonus_numbers == ()


def test_load_history_csv_missing_columns(tmp_path):
    path = tmp_path / "draws.csv"
    path.write_text("id,date\n1,2024-01-01\n")
    with pytest.raises(ValueError):
        load_history_csv(path, lottery_id=1)
