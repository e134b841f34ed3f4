import datetime

import pytest

from pqtypes.timestamps import (
    INFINITY_ENABLED_ALREADY,
    INFINITY_NEGATIVE_MUST_BE_SMALLER,
    Timestamp,
    disable_infinity_ts,
    enable_infinity_ts,
    format_timestamp,
    format_ts,
    parse_time,
    parse_timestamp,
    parse_ts,
)

H = 3600

TIME_TESTS = [
    ("22001-02-03", Timestamp(22001, 2, 3)),
    ("2001-02-03", Timestamp(2001, 2, 3)),
    ("0001-12-31 BC", Timestamp(0, 12, 31)),
    ("2001-02-03 BC", Timestamp(-2000, 2, 3)),
    ("2001-02-03 04:05:06", Timestamp(2001, 2, 3, 4, 5, 6)),
    ("2001-02-03 04:05:06.000001", Timestamp(2001, 2, 3, 4, 5, 6, 1000)),
    ("2001-02-03 04:05:06.00001", Timestamp(2001, 2, 3, 4, 5, 6, 10000)),
    ("2001-02-03 04:05:06.0001", Timestamp(2001, 2, 3, 4, 5, 6, 100000)),
    ("2001-02-03 04:05:06.001", Timestamp(2001, 2, 3, 4, 5, 6, 1000000)),
    ("2001-02-03 04:05:06.01", Timestamp(2001, 2, 3, 4, 5, 6, 10000000)),
    ("2001-02-03 04:05:06.1", Timestamp(2001, 2, 3, 4, 5, 6, 100000000)),
    ("2001-02-03 04:05:06.12", Timestamp(2001, 2, 3, 4, 5, 6, 120000000)),
    ("2001-02-03 04:05:06.123", Timestamp(2001, 2, 3, 4, 5, 6, 123000000)),
    ("2001-02-03 04:05:06.1234", Timestamp(2001, 2, 3, 4, 5, 6, 123400000)),
    ("2001-02-03 04:05:06.12345", Timestamp(2001, 2, 3, 4, 5, 6, 123450000)),
    ("2001-02-03 04:05:06.123456", Timestamp(2001, 2, 3, 4, 5, 6, 123456000)),
    ("2001-02-03 04:05:06.123-07", Timestamp(2001, 2, 3, 4, 5, 6, 123000000, -7 * H)),
    ("2001-02-03 04:05:06-07", Timestamp(2001, 2, 3, 4, 5, 6, 0, -7 * H)),
    ("2001-02-03 04:05:06-07:42", Timestamp(2001, 2, 3, 4, 5, 6, 0, -(7 * H + 42 * 60))),
    ("2001-02-03 04:05:06-07:30:09", Timestamp(2001, 2, 3, 4, 5, 6, 0, -(7 * H + 30 * 60 + 9))),
    ("2001-02-03 04:05:06+07:30:09", Timestamp(2001, 2, 3, 4, 5, 6, 0, 7 * H + 30 * 60 + 9)),
    ("2001-02-03 04:05:06+07", Timestamp(2001, 2, 3, 4, 5, 6, 0, 7 * H)),
    ("0011-02-03 04:05:06 BC", Timestamp(-10, 2, 3, 4, 5, 6)),
    ("0011-02-03 04:05:06.123 BC", Timestamp(-10, 2, 3, 4, 5, 6, 123000000)),
    ("0011-02-03 04:05:06.123-07 BC", Timestamp(-10, 2, 3, 4, 5, 6, 123000000, -7 * H)),
    ("0001-02-03 04:05:06.123", Timestamp(1, 2, 3, 4, 5, 6, 123000000)),
    ("0001-02-03 04:05:06.123 BC", Timestamp(0, 2, 3, 4, 5, 6, 123000000)),
    ("0002-02-03 04:05:06.123 BC", Timestamp(-1, 2, 3, 4, 5, 6, 123000000)),
    ("12345-02-03 04:05:06.1", Timestamp(12345, 2, 3, 4, 5, 6, 100000000)),
    ("123456-02-03 04:05:06.1", Timestamp(123456, 2, 3, 4, 5, 6, 100000000)),
]


@pytest.mark.parametrize("text,expected", TIME_TESTS)
def test_parse_timestamp(text, expected):
    assert parse_timestamp(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "BC",
        " BC",
        "2001",
        "2001-2-03",
        "2001-02-3",
        "2001-02-03 ",
        "2001-02-03 B",
        "2001-02-03 04",
        "2001-02-03 04:",
        "2001-02-03 04:05",
        "2001-02-03 04:05 B",
        "2001-02-03 04:05 BC",
        "2001-02-03 04:05:",
        "2001-02-03 04:05:6",
        "2001-02-03 04:05:06 B",
        "2001-02-03 04:05:06BC",
        "2001-02-03 04:05:06.123 B",
    ],
)
def test_parse_timestamp_errors(text):
    with pytest.raises(ValueError):
        parse_timestamp(text)


FORMAT_TESTS = [
    (Timestamp(1, 1, 1), "0001-01-01 00:00:00Z"),
    (Timestamp(2001, 2, 3, 4, 5, 6, 123456789), "2001-02-03 04:05:06.123456789Z"),
    (Timestamp(2001, 2, 3, 4, 5, 6, 123456789, 2 * H), "2001-02-03 04:05:06.123456789+02:00"),
    (Timestamp(2001, 2, 3, 4, 5, 6, 123456789, -6 * H), "2001-02-03 04:05:06.123456789-06:00"),
    (Timestamp(2001, 2, 3, 4, 5, 6, 0, -(7 * H + 30 * 60 + 9)), "2001-02-03 04:05:06-07:30:09"),
    (Timestamp(1, 2, 3, 4, 5, 6, 123456789), "0001-02-03 04:05:06.123456789Z"),
    (Timestamp(1, 2, 3, 4, 5, 6, 123456789, 2 * H), "0001-02-03 04:05:06.123456789+02:00"),
    (Timestamp(1, 2, 3, 4, 5, 6, 123456789, -6 * H), "0001-02-03 04:05:06.123456789-06:00"),
    (Timestamp(0, 2, 3, 4, 5, 6, 123456789), "0001-02-03 04:05:06.123456789Z BC"),
    (Timestamp(0, 2, 3, 4, 5, 6, 123456789, 2 * H), "0001-02-03 04:05:06.123456789+02:00 BC"),
    (Timestamp(0, 2, 3, 4, 5, 6, 123456789, -6 * H), "0001-02-03 04:05:06.123456789-06:00 BC"),
    (Timestamp(1, 2, 3, 4, 5, 6, 0, -(7 * H + 30 * 60 + 9)), "0001-02-03 04:05:06-07:30:09"),
    (Timestamp(0, 2, 3, 4, 5, 6, 0, -(7 * H + 30 * 60 + 9)), "0001-02-03 04:05:06-07:30:09 BC"),
]


@pytest.mark.parametrize("value,expected", FORMAT_TESTS)
def test_format_ts(value, expected):
    assert format_ts(value) == expected.encode()


@pytest.mark.parametrize("value,_", FORMAT_TESTS)
def test_format_and_parse_round_trip(value, _):
    assert parse_timestamp(format_timestamp(value).decode()) == value


def test_format_datetime():
    value = datetime.datetime(2001, 2, 3, 4, 5, 6, 7000, tzinfo=datetime.timezone.utc)
    assert format_timestamp(value) == b"2001-02-03 04:05:06.007Z"


def test_location_applied_when_offset_agrees():
    zone = datetime.timezone(datetime.timedelta(hours=-5))
    ts = parse_timestamp("2012-11-06 10:23:42-05", zone)
    assert ts.to_datetime().tzinfo is zone
    assert ts.hour == 10


def test_location_ignored_when_offset_differs():
    zone = datetime.timezone(datetime.timedelta(hours=3))
    ts = parse_timestamp("2012-11-06 10:23:42-05", zone)
    assert ts.zone is None
    assert ts.offset == -5 * H


@pytest.fixture
def infinity():
    low = Timestamp(1500, 1, 1)
    high = Timestamp(2500, 1, 1)
    enable_infinity_ts(low, high)
    yield low, high
    disable_infinity_ts()


def test_infinity_disabled_gives_bytes():
    assert parse_ts("infinity") == b"infinity"
    assert parse_ts("-infinity") == b"-infinity"


def test_infinity_enabled(infinity):
    low, high = infinity
    assert parse_ts("infinity") == high
    assert parse_ts("-infinity") == low
    assert format_ts(Timestamp(-1500, 1, 1)) == b"-infinity"
    assert format_ts(Timestamp(11500, 1, 1)) == b"infinity"
    assert format_ts(Timestamp(2000, 1, 1)) == b"2000-01-01 00:00:00Z"


def test_infinity_enabled_twice(infinity):
    with pytest.raises(RuntimeError, match=INFINITY_ENABLED_ALREADY):
        enable_infinity_ts(Timestamp(1, 1, 1), Timestamp(2, 1, 1))


def test_infinity_wrong_order():
    with pytest.raises(ValueError) as info:
        enable_infinity_ts(Timestamp(2500, 1, 1), Timestamp(1500, 1, 1))
    assert str(info.value) == INFINITY_NEGATIVE_MUST_BE_SMALLER


@pytest.mark.parametrize(
    "text,expected",
    [
        ("11:59:59", Timestamp(0, 1, 1, 11, 59, 59)),
        ("24:00", Timestamp(0, 1, 2)),
        ("24:00:00", Timestamp(0, 1, 2)),
        ("24:00:00.0", Timestamp(0, 1, 2)),
        ("24:00:00.000000", Timestamp(0, 1, 2)),
    ],
)
def test_parse_time(text, expected):
    assert parse_time(text, False) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("11:59:59+00:00", Timestamp(0, 1, 1, 11, 59, 59)),
        ("11:59:59+04:00", Timestamp(0, 1, 1, 11, 59, 59, 0, 4 * H)),
        ("11:59:59+04:01:02", Timestamp(0, 1, 1, 11, 59, 59, 0, 4 * H + 62)),
        ("11:59:59-04:01:02", Timestamp(0, 1, 1, 11, 59, 59, 0, -(4 * H + 62))),
        ("24:00+00", Timestamp(0, 1, 2)),
        ("24:00-04:00", Timestamp(0, 1, 2, 0, 0, 0, 0, -4 * H)),
        ("24:00:00.000000+00", Timestamp(0, 1, 2)),
    ],
)
def test_parse_timetz(text, expected):
    assert parse_time(text, True) == expected


def test_parse_time_invalid():
    with pytest.raises(ValueError):
        parse_time("noon", False)