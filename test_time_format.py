import pytest

from supervision.utils.time_format import TimeFormatError, parse_display_time, to_12_hour, to_24_hour


def all_times():
    for hours in range(24):
        for minutes in range(60):
            yield f"{hours:02d}:{minutes:02d}"


def test_round_trip_for_every_valid_time():
    for time24 in all_times():
        converted = to_12_hour(time24)
        assert to_24_hour(converted.time, converted.period) == time24


@pytest.mark.parametrize("time24,expected_time,expected_period", [
    ("00:00", "12:00", "AM"),
    ("12:00", "12:00", "PM"),
    ("13:05", "01:05", "PM"),
    ("09:30", "09:30", "AM"),
    ("23:59", "11:59", "PM"),
])
def test_to_12_hour(time24, expected_time, expected_period):
    result = to_12_hour(time24)
    assert result.time == expected_time
    assert result.period == expected_period
    assert result.display == f"{expected_time} {expected_period}"


@pytest.mark.parametrize("value", ["24:00", "12:60", "7pm", "", "1:2", "-1:00", "9:05"])
def test_to_12_hour_rejects_bad_input(value):
    with pytest.raises(TimeFormatError):
        to_12_hour(value)


@pytest.mark.parametrize("time12,period,expected", [
    ("12:00", "AM", "00:00"),
    ("12:30", "PM", "12:30"),
    ("01:05", "PM", "13:05"),
    ("9:15", "am", "09:15"),
])
def test_to_24_hour(time12, period, expected):
    assert to_24_hour(time12, period) == expected


@pytest.mark.parametrize("time12,period", [
    ("00:30", "AM"),
    ("13:00", "PM"),
    ("10:60", "AM"),
    ("10:00", "XM"),
    ("10:00", ""),
])
def test_to_24_hour_rejects_bad_input(time12, period):
    with pytest.raises(TimeFormatError):
        to_24_hour(time12, period)


def test_parse_display_time():
    assert parse_display_time("02:30 pm") == ("02:30", "PM")
    with pytest.raises(TimeFormatError):
        parse_display_time("14:30")
