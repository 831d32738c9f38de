from datetime import datetime

import pytz

from bharatgpt.utils.helpers import (
    average_percentage, clamp, format_timestamp, percent, round_half_up, to_csv
)


def test_round_half_up_rounds_halves_upward():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(66.4) == 66
    assert round_half_up(66.6667) == 67


def test_percent_handles_zero_total():
    assert percent(0, 0) == 0
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(1, 8) == 13  # 12.5


def test_average_percentage():
    assert average_percentage([]) == 0
    assert average_percentage([80, 85]) == 83  # 82.5


def test_clamp():
    assert clamp(9, 1, 5) == 5
    assert clamp(0, 1, 5) == 1
    assert clamp(None, 1, 5) is None


def test_format_timestamp_is_utc_with_z_suffix():
    dt = datetime(2024, 3, 1, 12, 30, 5, 123000)
    assert format_timestamp(dt) == "2024-03-01T12:30:05.123Z"
    aware = pytz.timezone("Asia/Kolkata").localize(datetime(2024, 3, 1, 18, 0, 5))
    assert format_timestamp(aware) == "2024-03-01T12:30:05.000Z"


def test_to_csv_quotes_every_field_and_keeps_falsy_values():
    rows = [
        {"name": "Asha", "score": 0, "note": None},
        {"name": 'Ravi "R"', "score": 90, "note": "ok"},
    ]
    assert to_csv(rows) == (
        '"name","score","note"\n'
        '"Asha","0",""\n'
        '"Ravi ""R""","90","ok"'
    )


def test_to_csv_header_follows_first_row():
    rows = [{"b": 1, "a": 2}, {"a": 3, "c": 4}]
    assert to_csv(rows).split("\n") == ['"b","a"', '"1","2"', '"","3"']


def test_to_csv_empty():
    assert to_csv([]) == ""
