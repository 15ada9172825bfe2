from datetime import datetime, timedelta, timezone

import pytest

from dizkaz.timefmt import format_time


@pytest.mark.parametrize(
    "parts, template, expected",
    [
        ((2023, 7, 24, 8, 24, 23), "YYYYMMDD hh:mm:ss", "20230724 08:24:23"),
        ((2023, 7, 24, 8, 24, 23), "DD/MM/YYYY hh:mm:ss", "24/07/2023 08:24:23"),
        ((2023, 7, 24, 11, 24, 23), "DD/MM/YYYY hh:mm:ss", "24/07/2023 11:24:23"),
        ((2023, 7, 24, 8, 24, 23), "YYYY-M-D h:m:s", "2023-7-24 8:24:23"),
        ((2023, 7, 24, 17, 4, 3), "h:m:s", "17:4:3"),
        ((2023, 7, 24, 17, 4, 3), "h:mm:ss", "17:04:03"),
    ],
)
def test_format_time_cases(parts, template, expected):
    assert format_time(datetime(*parts), template) == expected


def test_single_year_letter_gives_full_year():
    assert format_time(datetime(2023, 1, 5), "Y") == "2023"


def test_padded_day_and_month():
    assert format_time(datetime(2021, 3, 9), "DD.MM.YYYY") == "09.03.2021"


def test_midnight_uses_twelve_hour_form():
    assert format_time(datetime(2023, 7, 24, 0, 5, 0), "h:mm") == "12:05"


def test_literal_text_can_spell_layout_element():
    assert format_time(datetime(2023, 7, 24), "Jan D") == "Jul 24"


def test_zone_offset_literal():
    east = timezone(timedelta(hours=8))
    assert format_time(datetime(2023, 7, 24, 8, tzinfo=east), "Z07:00") == "+08:00"


def test_zone_utc_is_z():
    assert format_time(datetime(2023, 7, 24, 8, tzinfo=timezone.utc), "Z07:00") == "Z"


def test_plain_literals_pass_through():
    assert format_time(datetime(2023, 7, 24, 8, 24, 23), "at h o'clock") == "at 8 o'clock"