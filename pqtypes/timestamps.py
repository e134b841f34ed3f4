"""Timestamps in PostgreSQL's text format (DateStyle "ISO, MDY").

Values are kept in a Timestamp rather than a datetime because the server
accepts years outside the range datetime supports: year 0 and negative
years (BC dates), and years above 9999.
"""

import calendar
import datetime
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

INFINITY_ENABLED_ALREADY = "pq: infinity timestamp enabled already"
INFINITY_NEGATIVE_MUST_BE_SMALLER = (
    "pq: infinity timestamp: negative value must be smaller (before) than positive"
)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_TIME_2400 = re.compile(r"^(24:00(?::00(?:\.0+)?)?)(?:[Z+-].*)?$", re.S)
_CLOCK = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?")
_ZONE = re.compile(r"([+-])([0-9]{2})(?::([0-9]{2}))?(?::([0-9]{2}))?|Z")


def _days_from_civil(year: int, month: int, day: int) -> int:
    year -= month <= 2
    era = year // 400
    yoe = year - era * 400
    doy = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


@dataclass(frozen=True)
class Timestamp:
    """A calendar date and time of day with a fixed UTC offset in seconds.

    ``year`` follows ISO numbering: 0 is 1 BC, -1 is 2 BC and so on.
    ``zone`` optionally names the time zone the value was placed in; it does
    not take part in comparisons.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    nanosecond: int = 0
    offset: int = 0
    zone: Optional[datetime.tzinfo] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_datetime(cls, value: datetime.datetime) -> "Timestamp":
        """Build a Timestamp from a datetime; naive values are taken as UTC."""
        delta = value.utcoffset()
        offset = 0 if delta is None else int(delta.total_seconds())
        return cls(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond * 1000,
            offset,
            value.tzinfo,
        )

    def to_datetime(self) -> datetime.datetime:
        """Return an aware datetime; raises ValueError outside its range."""
        tz = self.zone or datetime.timezone(datetime.timedelta(seconds=self.offset))
        return datetime.datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.nanosecond // 1000,
            tzinfo=tz,
        )

    def _instant(self) -> Tuple[int, int]:
        days = _days_from_civil(self.year, self.month, self.day)
        seconds = (
            days * 86400
            + self.hour * 3600
            + self.minute * 60
            + self.second
            - self.offset
        )
        return seconds, self.nanosecond


TimeLike = Union[Timestamp, datetime.datetime]


def _as_timestamp(value: TimeLike) -> Timestamp:
    if isinstance(value, Timestamp):
        return value
    if isinstance(value, datetime.datetime):
        return Timestamp.from_datetime(value)
    raise TypeError(f"expected a Timestamp or datetime, got {type(value).__name__}")


class _Parser:
    """Collects the first error met while picking a timestamp apart."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.error: Optional[str] = None

    def expect(self, char: str, pos: int) -> None:
        if self.error is not None:
            return
        if pos < 0 or pos + 1 > len(self.text):
            self.error = "invalid timestamp"
            return
        if self.text[pos] != char:
            self.error = (
                f"expected '{char}' at position {pos}; got '{self.text[pos]}'"
            )

    def number(self, begin: int, end: int) -> int:
        if self.error is not None:
            return 0
        if begin < 0 or end < 0 or begin > end or end > len(self.text):
            self.error = "invalid timestamp"
            return 0
        chunk = self.text[begin:end]
        if not _INTEGER.fullmatch(chunk):
            self.error = f"expected number; got '{self.text}'"
            return 0
        return int(chunk)


def parse_timestamp(
    text: str, location: Optional[datetime.tzinfo] = None
) -> Timestamp:
    """Parse the server's text form of a date, timestamp or timestamptz.

    If ``location`` is given and agrees with the offset sent by the server,
    the result is placed in that zone. Raises ValueError on bad input.
    """
    p = _Parser(text)
    mon_sep = text.find("-")
    year = p.number(0, mon_sep)
    day_sep = mon_sep + 3
    month = p.number(mon_sep + 1, day_sep)
    p.expect("-", day_sep)
    time_sep = day_sep + 3
    day = p.number(day_sep + 1, time_sep)

    min_len = mon_sep + len("01-01") + 1
    is_bc = text.endswith(" BC")
    if is_bc:
        min_len += 3

    hour = minute = second = 0
    if len(text) > min_len:
        p.expect(" ", time_sep)
        min_sep = time_sep + 3
        p.expect(":", min_sep)
        hour = p.number(time_sep + 1, min_sep)
        sec_sep = min_sep + 3
        p.expect(":", sec_sep)
        minute = p.number(min_sep + 1, sec_sep)
        second = p.number(sec_sep + 1, sec_sep + 3)

    rest = mon_sep + len("01-01 00:00:00") + 1
    nanosecond = 0
    tz_offset = 0

    if rest < len(text) and text[rest] == ".":
        frac_start = rest + 1
        tail = text[frac_start:]
        stops = [i for i in (tail.find(c) for c in "-+Z ") if i >= 0]
        frac_len = min(stops) if stops else len(tail)
        fraction = p.number(frac_start, frac_start + frac_len)
        nanosecond = fraction * (1_000_000_000 // 10**frac_len)
        rest += frac_len + 1

    if rest < len(text) and text[rest] in "+-":
        sign = -1 if text[rest] == "-" else 1
        tz_hours = p.number(rest + 1, rest + 3)
        rest += 3
        tz_min = tz_sec = 0
        if rest < len(text) and text[rest] == ":":
            tz_min = p.number(rest + 1, rest + 3)
            rest += 3
        if rest < len(text) and text[rest] == ":":
            tz_sec = p.number(rest + 1, rest + 3)
            rest += 3
        tz_offset = sign * (tz_hours * 3600 + tz_min * 60 + tz_sec)
    elif rest < len(text) and text[rest] == "Z":
        rest += 1

    if is_bc:
        year = 1 - year
        rest += 3
    if rest < len(text):
        raise ValueError(f"expected end of input, got {text[rest:]}")
    if p.error is not None:
        raise ValueError(p.error)

    result = Timestamp(year, month, day, hour, minute, second, nanosecond, tz_offset)
    if location is not None and 1 <= year <= 9999:
        local = result.to_datetime().astimezone(location)
        delta = local.utcoffset()
        if delta is not None and int(delta.total_seconds()) == tz_offset:
            result = Timestamp(
                local.year,
                local.month,
                local.day,
                local.hour,
                local.minute,
                local.second,
                nanosecond,
                tz_offset,
                location,
            )
    return result


def format_timestamp(value: TimeLike) -> bytes:
    """Format a value in the server's text format; years <= 0 get " BC"."""
    ts = _as_timestamp(value)
    year, month, day = ts.year, ts.month, ts.day
    bc = year <= 0
    if bc:
        year = 1 - year
        if month == 2 and day == 29 and not calendar.isleap(year):
            month, day = 3, 1
    out = f"{year:04d}-{month:02d}-{day:02d} {ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    if ts.nanosecond:
        out += "." + f"{ts.nanosecond:09d}".rstrip("0")
    if ts.offset == 0:
        out += "Z"
    else:
        sign = "-" if ts.offset < 0 else "+"
        magnitude = abs(ts.offset)
        out += f"{sign}{magnitude // 3600:02d}:{magnitude % 3600 // 60:02d}"
        if magnitude % 60:
            out += f":{magnitude % 60:02d}"
    if bc:
        out += " BC"
    return out.encode("ascii")


class _InfinitySettings:
    def __init__(self) -> None:
        self.enabled = False
        self.negative: Optional[Timestamp] = None
        self.positive: Optional[Timestamp] = None


_infinity = _InfinitySettings()


def enable_infinity_ts(negative: TimeLike, positive: TimeLike) -> None:
    """Map "-infinity"/"infinity" to and from the two given times.

    Raises RuntimeError when already enabled and ValueError unless
    ``negative`` is before ``positive``.
    """
    if _infinity.enabled:
        raise RuntimeError(INFINITY_ENABLED_ALREADY)
    neg = _as_timestamp(negative)
    pos = _as_timestamp(positive)
    if not neg._instant() < pos._instant():
        raise ValueError(INFINITY_NEGATIVE_MUST_BE_SMALLER)
    _infinity.enabled = True
    _infinity.negative = neg
    _infinity.positive = pos


def disable_infinity_ts() -> None:
    """Turn infinity mapping off again."""
    _infinity.enabled = False


def parse_ts(
    text: str, location: Optional[datetime.tzinfo] = None
) -> Union[Timestamp, bytes]:
    """Decode a timestamp; infinities stay bytes unless mapping is enabled."""
    if text == "-infinity":
        return _infinity.negative if _infinity.enabled else text.encode()
    if text == "infinity":
        return _infinity.positive if _infinity.enabled else text.encode()
    return parse_timestamp(text, location)


def format_ts(value: TimeLike) -> bytes:
    """Encode a time for the server, honouring infinity mapping."""
    ts = _as_timestamp(value)
    if _infinity.enabled:
        instant = ts._instant()
        if not instant > _infinity.negative._instant():
            return b"-infinity"
        if not instant < _infinity.positive._instant():
            return b"infinity"
    return format_timestamp(ts)


def parse_time(text: str, with_tz: bool = False) -> Timestamp:
    """Decode a time or timetz value; dated 0000-01-01, 24:00 rolls to the 2nd."""
    day = 1
    match_2400 = _TIME_2400.match(text)
    if match_2400:
        text = "00:00:00" + text[len(match_2400.group(1)):]
        day = 2
    clock = _CLOCK.match(text)
    if clock is None:
        raise ValueError(f"pq: decode: cannot parse time {text!r}")
    hour, minute, second = (int(g) for g in clock.group(1, 2, 3))
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError(f"pq: decode: time out of range {text!r}")
    fraction = clock.group(4) or ""
    nanosecond = int((fraction + "000000000")[:9])
    rest = text[clock.end():]
    offset = 0
    if with_tz:
        zone = _ZONE.fullmatch(rest)
        if zone is None:
            raise ValueError(f"pq: decode: cannot parse time zone {rest!r}")
        if zone.group(1):
            sign = -1 if zone.group(1) == "-" else 1
            offset = sign * (
                int(zone.group(2)) * 3600
                + int(zone.group(3) or 0) * 60
                + int(zone.group(4) or 0)
            )
    elif rest:
        raise ValueError(f"pq: decode: extra text {rest!r}")
    return Timestamp(0, 1, day, hour, minute, second, nanosecond, offset)