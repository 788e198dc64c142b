from typing import Optional

from pydantic import Field

from .envelope import LogEnvelope, compose_schema
from .jsonlog import JSONLogParser, LogRecord, RequiredStr
from .registry import LogType
from .timestamp import FluentdTime
from .values import Event, hostname, new_event

TYPE_RFC3164 = "Fluentd.Syslog3164"
TYPE_RFC5424 = "Fluentd.Syslog5424"

REFERENCE_URL = "https://docs.fluentd.org/parser/syslog"


class RFC3164(LogRecord):
    """Syslog RFC3164 message parsed by fluentd's syslog input."""

    priority: Optional[int] = Field(None, alias="pri", ge=0, le=191, description="Priority is calculated by (Facility * 8 + Severity).")
    hostname: RequiredStr = Field(..., alias="host", description="Hostname identifies the machine that originally sent the syslog message.")
    ident: RequiredStr = Field(..., description="Appname identifies the device or application that originated the syslog message.")
    proc_id: Optional[int] = Field(None, alias="pid", description="ProcID is often the process ID, but can be any value used to enable log analyzers to detect discontinuities in syslog reporting.")
    message: RequiredStr = Field(..., description="Message contains free-form text that provides information about the event.")
    timestamp: FluentdTime = Field(..., alias="time", description="Timestamp of the syslog message in UTC.")
    tag: RequiredStr = Field(..., description="Tag of the syslog message")


class RFC5424(LogRecord):
    """Syslog RFC5424 message parsed by fluentd's syslog input."""

    priority: int = Field(..., alias="pri", ge=0, le=191, description="Priority is calculated by (Facility * 8 + Severity).")
    hostname: RequiredStr = Field(..., alias="host", description="Hostname identifies the machine that originally sent the syslog message.")
    ident: RequiredStr = Field(..., description="Appname identifies the device or application that originated the syslog message.")
    proc_id: Optional[int] = Field(None, alias="pid", description="ProcID is often the process ID, but can be any value used to enable log analyzers to detect discontinuities in syslog reporting.")
    msg_id: Optional[str] = Field(None, alias="msgid", description="MsgID identifies the type of message.")
    extra_data: Optional[str] = Field(None, alias="extradata", description="ExtraData contains syslog strucured data as string")
    message: RequiredStr = Field(..., description="Message contains free-form text that provides information about the event.")
    timestamp: FluentdTime = Field(..., alias="time", description="Timestamp of the syslog message in UTC.")
    tag: RequiredStr = Field(..., description="Tag of the syslog message")


class RFC3164Parser(JSONLogParser):
    def __init__(self):
        super().__init__(TYPE_RFC3164, RFC3164)

    def build_event(self, record: RFC3164) -> Event:
        return new_event(self.name, record.timestamp, hostname(record.hostname))


class RFC5424Parser(JSONLogParser):
    def __init__(self):
        super().__init__(TYPE_RFC5424, RFC5424)

    def build_event(self, record: RFC5424) -> Event:
        return new_event(self.name, record.timestamp, hostname(record.hostname))


LOG_TYPES = [
    LogType(
        name=TYPE_RFC3164,
        description="Fluentd syslog parser for the RFC3164 format (ie. BSD-syslog messages)",
        reference_url=REFERENCE_URL + "#rfc3164-log",
        schema=compose_schema("FluentdSyslog3164", RFC3164, LogEnvelope),
        new_parser=RFC3164Parser,
    ),
    LogType(
        name=TYPE_RFC5424,
        description="Fluentd syslog parser for the RFC5424 format (ie. BSD-syslog messages)",
        reference_url=REFERENCE_URL + "#rfc5424-log",
        schema=compose_schema("FluentdSyslog5424", RFC5424, LogEnvelope),
        new_parser=RFC5424Parser,
    ),
]
