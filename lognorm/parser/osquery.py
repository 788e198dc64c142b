from typing import Any, Dict, Optional

from pydantic import Field

from .envelope import LogEnvelope, compose_schema
from .jsonlog import JSONLogParser, LogRecord, RequiredStr
from .registry import LogType
from .timestamp import ANSICWithTZ
from .values import Event, hostname, new_event

TYPE_DIFFERENTIAL = "Osquery.Differential"
TYPE_STATUS = "Osquery.Status"

REFERENCE_URL = "https://osquery.readthedocs.io/en/stable/deployment/logging/"


class Differential(LogRecord):
    action: RequiredStr = Field(..., description="Action")
    calendar_time: ANSICWithTZ = Field(..., alias="calendarTime", description="The time of the event (UTC).")
    columns: Dict[str, Any] = Field(..., description="Columns")
    counter: Optional[int] = Field(None, description="Counter")
    decorations: Optional[Dict[str, str]] = Field(None, description="Decorations")
    epoch: Optional[int] = Field(None, description="Epoch")
    host_identifier: RequiredStr = Field(..., alias="hostIdentifier", description="HostIdentifier")
    log_type: Optional[str] = Field(None, description="LogType")
    log_numerics_as_numbers: Optional[bool] = Field(
        None, alias="logNumericsAsNumbers", description="LogNumericsAsNumbers"
    )
    name: RequiredStr = Field(..., description="Name")
    unix_time: int = Field(..., alias="unixTime", description="Unix epoch")


class Status(LogRecord):
    """A diagnostic osquery log about the daemon."""

    calendar_time: ANSICWithTZ = Field(..., alias="calendarTime", description="The time of the event (UTC).")
    decorations: Optional[Dict[str, str]] = Field(None, description="Decorations")
    filename: RequiredStr = Field(..., description="Filename")
    host_identifier: RequiredStr = Field(..., alias="hostIdentifier", description="HostIdentifier")
    line: int = Field(..., description="Line")
    log_type: Optional[str] = Field(None, description="LogType")
    log_underscore_type: Optional[str] = Field(None, alias="log_underscore_type", description="LogUnderScoreType")
    message: Optional[str] = Field(None, description="Message")
    severity: int = Field(..., description="Severity")
    unix_time: int = Field(..., alias="unixTime", description="UnixTime")
    version: RequiredStr = Field(..., description="Version")


class DifferentialParser(JSONLogParser):
    def __init__(self):
        super().__init__(TYPE_DIFFERENTIAL, Differential)

    def build_event(self, record: Differential) -> Event:
        return new_event(self.name, record.calendar_time, hostname(record.host_identifier))


class StatusParser(JSONLogParser):
    def __init__(self):
        super().__init__(TYPE_STATUS, Status)

    def build_event(self, record: Status) -> Event:
        return new_event(self.name, record.calendar_time, hostname(record.host_identifier))


LOG_TYPES = [
    LogType(
        name=TYPE_DIFFERENTIAL,
        description="Differential contains all the data included in OsQuery differential logs",
        reference_url=REFERENCE_URL,
        schema=compose_schema("OsqueryDifferential", Differential, LogEnvelope),
        new_parser=DifferentialParser,
    ),
    LogType(
        name=TYPE_STATUS,
        description="Status is a diagnostic osquery log about the daemon.",
        reference_url=REFERENCE_URL,
        schema=compose_schema("OsqueryStatus", Status, LogEnvelope),
        new_parser=StatusParser,
    ),
]
