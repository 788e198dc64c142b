"""
Timestamp decoders for log fields.

Each decoder is a pydantic annotated type that accepts the raw field value
and produces an aware datetime in UTC.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Callable

from pydantic import BeforeValidator, PlainSerializer

from .values import format_time


class TimestampError(ValueError):
    pass


def _utc(tm: datetime) -> datetime:
    if tm.tzinfo is None:
        return tm.replace(tzinfo=timezone.utc)
    return tm.astimezone(timezone.utc)


def _strptime(value: Any, *layouts: str) -> datetime:
    if isinstance(value, datetime):
        return _utc(value)
    if not isinstance(value, str):
        raise TimestampError(f"expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    for layout in layouts:
        try:
            return _utc(datetime.strptime(text, layout))
        except ValueError:
            continue
    raise TimestampError(f"cannot parse timestamp {value!r}")


def parse_rfc3339(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _utc(value)
    if not isinstance(value, str):
        raise TimestampError(f"expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        tm = datetime.fromisoformat(text)
    except ValueError:
        # fromisoformat on older interpreters rejects fractions that are not 3 or 6 digits
        return _strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
    return _utc(tm)


def parse_apache(value: Any) -> datetime:
    # 10/Oct/2000:13:55:36 -0700, the brackets are optional
    if isinstance(value, str):
        value = value.strip().lstrip("[").rstrip("]")
    return _strptime(value, "%d/%b/%Y:%H:%M:%S %z", "%d/%b/%Y:%H:%M:%S")


def parse_suricata(value: Any) -> datetime:
    # 2020-03-23T16:14:06.123456+0000
    return _strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def parse_fluentd(value: Any) -> datetime:
    # 2020-03-23 16:14:06 +0000
    return _strptime(value, "%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M:%S")


def parse_ansic_with_tz(value: Any) -> datetime:
    # Tue Nov 5 06:08:26 2018 UTC
    if isinstance(value, str):
        parts = value.split()
        if len(parts) == 6 and parts[5] == "UTC":
            value = " ".join(parts[:5])
        elif len(parts) == 6:
            raise TimestampError(f"unsupported time zone in {value!r}")
    return _strptime(value, "%a %b %d %H:%M:%S %Y")


def parse_unix(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _utc(value)
    if isinstance(value, bool):
        raise TimestampError("expected epoch seconds, got a boolean")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise TimestampError(f"cannot parse epoch seconds {value!r}")
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampError(f"epoch seconds out of range {value!r}: {e}")


def _timestamp_type(decoder: Callable[[Any], datetime]):
    return Annotated[
        datetime,
        BeforeValidator(decoder),
        PlainSerializer(format_time, return_type=str, when_used="json"),
    ]


RFC3339 = _timestamp_type(parse_rfc3339)
ApacheTime = _timestamp_type(parse_apache)
SuricataTime = _timestamp_type(parse_suricata)
FluentdTime = _timestamp_type(parse_fluentd)
ANSICWithTZ = _timestamp_type(parse_ansic_with_tz)
UnixSeconds = _timestamp_type(parse_unix)
