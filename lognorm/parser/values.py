import ipaddress
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class ValueKind(str, Enum):
    """Kinds of indicator values extracted from log records."""

    IP_ADDRESS = "ip_address"
    DOMAIN_NAME = "domain_name"
    AWS_ARN = "aws_arn"
    AWS_ACCOUNT_ID = "aws_account_id"
    AWS_INSTANCE_ID = "aws_instance_id"
    AWS_TAG = "aws_tag"
    STRING = "string"


def kind_name(kind: Any) -> str:
    return kind.value if isinstance(kind, Enum) else str(kind)


# Kinds added by individual formats
_EXTRA_KINDS: Set[str] = set()


def register_kind(name: str) -> str:
    """Declare a format-specific indicator kind.

    Extra kinds are plain strings; they serialize the same way as the
    built-in ``ValueKind`` members.
    """
    if not name:
        raise ValueError("empty value kind")
    if name not in ValueKind._value2member_map_:
        _EXTRA_KINDS.add(name)
    return name


def known_kinds() -> List[str]:
    return [kind.value for kind in ValueKind] + sorted(_EXTRA_KINDS)


@dataclass(frozen=True)
class Value:
    kind: str
    data: str

    def __post_init__(self):
        # kinds compare and hash as plain strings
        object.__setattr__(self, "kind", kind_name(self.kind))


def new_value(kind: Any, raw: Optional[str]) -> Optional[Value]:
    """Build an indicator value, or None when there is nothing to store."""
    if not raw:
        return None
    return Value(kind=kind, data=raw)


def ip_address(raw: Optional[str]) -> Optional[Value]:
    return new_value(ValueKind.IP_ADDRESS, raw)


def domain_name(raw: Optional[str]) -> Optional[Value]:
    return new_value(ValueKind.DOMAIN_NAME, raw)


def aws_arn(raw: Optional[str]) -> Optional[Value]:
    return new_value(ValueKind.AWS_ARN, raw)


def aws_account_id(raw: Optional[str]) -> Optional[Value]:
    return new_value(ValueKind.AWS_ACCOUNT_ID, raw)


def aws_instance_id(raw: Optional[str]) -> Optional[Value]:
    return new_value(ValueKind.AWS_INSTANCE_ID, raw)


def aws_tag(key: Optional[str], value: Optional[str]) -> Optional[Value]:
    if not key or not value:
        return None
    return Value(kind=ValueKind.AWS_TAG, data=f"{key}:{value}")


def is_ip_address(raw: Optional[str]) -> bool:
    if not raw:
        return False
    try:
        ipaddress.ip_address(raw)
    except ValueError:
        return False
    return True


def hostname(raw: Optional[str]) -> Optional[Value]:
    """IP address value if raw parses as one, domain name otherwise."""
    if is_ip_address(raw):
        return ip_address(raw)
    return domain_name(raw)


@dataclass
class Event:
    """
    Canonical normalized record produced from one raw log line.

    Indicator values are kept in one set per kind, so adding the same
    value twice has no effect. Timestamps are always stored in UTC.
    """

    log_type: str
    timestamp: datetime
    values: Dict[str, Set[str]] = field(default_factory=dict)
    record: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.timestamp.tzinfo is None:
            self.timestamp = self.timestamp.replace(tzinfo=timezone.utc)
        else:
            self.timestamp = self.timestamp.astimezone(timezone.utc)

    def add(self, *values: Optional[Value]) -> "Event":
        for value in values:
            if value is None or not value.data:
                continue
            self.values.setdefault(value.kind, set()).add(value.data)
        return self

    # Used when merging values taken from a sub-structure of the record
    extend = add

    def indicators(self, kind: Any) -> List[str]:
        return sorted(self.values.get(kind_name(kind), ()))

    def kinds(self) -> List[str]:
        return sorted(kind for kind, data in self.values.items() if data)

    def to_dict(self) -> Dict[str, Any]:
        row = dict(self.record)
        row["p_log_type"] = self.log_type
        row["p_event_time"] = format_time(self.timestamp)
        for kind in self.kinds():
            row[column_name(kind)] = self.indicators(kind)
        return row


def column_name(kind: Any) -> str:
    """Output column holding all values of a kind, e.g. p_any_ip_addresses."""
    name = kind_name(kind)
    suffix = "es" if name.endswith("s") else "s"
    return f"p_any_{name}{suffix}"


def new_event(log_type: str, timestamp: datetime, *values: Optional[Value]) -> Event:
    return Event(log_type=log_type, timestamp=timestamp).add(*values)


def format_time(tm: datetime) -> str:
    tm = tm.astimezone(timezone.utc)
    if tm.microsecond:
        return tm.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return tm.strftime("%Y-%m-%dT%H:%M:%SZ")
