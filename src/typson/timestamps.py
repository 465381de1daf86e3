"""
Rendering and parsing of timestamps

Timestamps are written with seven fractional digits and an explicit UTC
offset, e.g. ``2021-03-04T05:06:07.1234560+01:00``. Python datetimes only
have a microsecond resolution, so the seventh digit is always ``0``.

Note:
    By default the offset is always written with a ``+`` sign, even for
    zones west of UTC: ``-05:00`` is rendered as ``+05:00``. Such values do
    not round-trip. Pass ``signed=True`` to `format_timestamp` (or use
    ``CodecOptions(signed_offsets=True)``) to render the true sign.

    Naive datetimes are rendered with the local UTC offset, and read back as
    aware datetimes. Pass ``local=True`` to `parse_timestamp` (or use
    ``CodecOptions(local_timestamps=True)``) to get naive local datetimes
    back, so that naive values round-trip.
"""
from __future__ import annotations

import datetime
import re

from typson.exceptions import FormatError

__all__ = ["format_timestamp", "parse_timestamp"]

_TIMESTAMP_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:T(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d+))?)?)?"
    r"(?:(?P<utc>Z)|(?P<sign>[+-])(?P<off_hour>\d{2}):(?P<off_minute>\d{2}))?",
    re.ASCII,
)


def format_timestamp(value: datetime.datetime, signed: bool = False) -> str:
    """
    Render a datetime as an unquoted timestamp

    Naive datetimes are interpreted as local time

    Arguments:
        value: datetime to render
        signed: render the real sign of the UTC offset instead of ``+``
    """
    offset = value.utcoffset()
    if offset is None:
        offset = value.astimezone().utcoffset()
    total = int(offset.total_seconds() / 60)
    sign = "-" if signed and total < 0 else "+"
    hours, minutes = divmod(abs(total), 60)
    return "%04d-%02d-%02dT%02d:%02d:%02d.%06d0%s%02d:%02d" % (
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        value.microsecond,
        sign,
        hours,
        minutes,
    )


def parse_timestamp(text: str, local: bool = False) -> datetime.datetime:
    """
    Parse an unquoted timestamp

    The fraction of seconds is truncated to microseconds. Timestamps with
    an offset give aware datetimes, the others give naive datetimes.

    Arguments:
        text: timestamp to parse
        local: convert the timestamp to a naive datetime in local time, the
            way naive datetimes are rendered by `format_timestamp`

    Raises:
        FormatError: ``text`` is not a valid timestamp
    """
    match = _TIMESTAMP_RE.fullmatch(text)
    if match is None:
        raise FormatError(text, datetime.datetime)
    fraction = (match["fraction"] or "").ljust(6, "0")[:6]
    tzinfo = None
    try:
        if match["utc"]:
            tzinfo = datetime.timezone.utc
        elif match["sign"]:
            delta = datetime.timedelta(
                hours=int(match["off_hour"]), minutes=int(match["off_minute"])
            )
            tzinfo = datetime.timezone(-delta if match["sign"] == "-" else delta)
        value = datetime.datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"] or 0),
            int(match["minute"] or 0),
            int(match["second"] or 0),
            int(fraction),
            tzinfo=tzinfo,
        )
        if local and value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError):
        raise FormatError(
            text, datetime.datetime, msg="{doc!r} is not a valid timestamp"
        ) from None
    return value
