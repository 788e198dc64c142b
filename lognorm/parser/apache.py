from typing import Any, Dict, List, Optional

from pydantic import Field

from .delimited import (
    RX_BRACKETS,
    RX_QUOTED,
    RX_SIZE,
    RX_STATUS_CODE,
    RX_UNQUOTED,
    DelimitedLogParser,
    build_rx,
    non_empty,
    split_request,
    strip_brackets,
    strip_quotes,
)
from .envelope import LogEnvelope, compose_schema
from .jsonlog import LogRecord
from .registry import LogType
from .timestamp import ApacheTime
from .values import Event, domain_name, ip_address, is_ip_address, new_event

TYPE_ACCESS_COMMON = "Apache.AccessCommon"
TYPE_ACCESS_COMBINED = "Apache.AccessCombined"

REFERENCE_URL = "https://httpd.apache.org/docs/current/logs.html"

# LogFormat "%h %l %u %t \"%r\" %>s %b" common
RX_ACCESS_COMMON = build_rx(
    RX_UNQUOTED,     # remote host
    RX_UNQUOTED,     # client identity
    RX_UNQUOTED,     # user id
    RX_BRACKETS,     # request time
    RX_QUOTED,       # request line
    RX_STATUS_CODE,  # response status
    RX_SIZE,         # response size
)

# LogFormat "%h %l %u %t \"%r\" %>s %b \"%{Referer}i\" \"%{User-agent}i\"" combined
RX_ACCESS_COMBINED = build_rx(
    RX_UNQUOTED,
    RX_UNQUOTED,
    RX_UNQUOTED,
    RX_BRACKETS,
    RX_QUOTED,
    RX_STATUS_CODE,
    RX_SIZE,
    RX_QUOTED,       # referer
    RX_QUOTED,       # user agent
)

NUM_FIELDS_ACCESS_COMMON = RX_ACCESS_COMMON.groups
NUM_FIELDS_ACCESS_COMBINED = RX_ACCESS_COMBINED.groups


class AccessCommonLog(LogRecord):
    remote_host_ip_address: Optional[str] = Field(
        None, description="The IP address of the client (remote host) which made the request to the server."
    )
    client_identity: Optional[str] = Field(
        None, description="The RFC 1413 identity of the client determined by identd on the clients machine."
    )
    user_id: Optional[str] = Field(
        None, description="The userid of the person requesting the document as determined by HTTP authentication."
    )
    request_time: ApacheTime = Field(..., description="The time that the request was received (UTC).")
    request_method: Optional[str] = Field(None, description="The HTTP request method")
    request_uri: Optional[str] = Field(None, description="The HTTP request URI")
    request_protocol: Optional[str] = Field(None, description="The HTTP request protocol")
    response_status: int = Field(
        ..., ge=100, le=999, description="The status code that the server sends back to the client."
    )
    response_size: Optional[int] = Field(
        None, ge=0, description="The size of the object returned to the client, not including the response headers."
    )


class AccessCombinedLog(AccessCommonLog):
    referer: Optional[str] = Field(None, description="The Referer HTTP header")
    user_agent: Optional[str] = Field(None, description="The User-Agent HTTP header")


def set_common_row(row: List[str]) -> Dict[str, Any]:
    remote_host, identity, user, request_time, request, status, size = row[:NUM_FIELDS_ACCESS_COMMON]
    request_line = split_request(non_empty(strip_quotes(request)))
    return {
        "remote_host_ip_address": non_empty(remote_host),
        "client_identity": non_empty(identity),
        "user_id": non_empty(user),
        "request_time": strip_brackets(request_time),
        "request_method": request_line["method"],
        "request_uri": request_line["uri"],
        "request_protocol": request_line["protocol"],
        "response_status": status,
        "response_size": non_empty(size),
    }


def access_event(log_type: str, record: AccessCommonLog) -> Event:
    event = new_event(log_type, record.request_time)
    remote_host = record.remote_host_ip_address
    if is_ip_address(remote_host):
        event.add(ip_address(remote_host))
    else:
        # servers with HostnameLookups enabled log resolved names
        event.add(domain_name(remote_host))
    return event


class AccessCommonParser(DelimitedLogParser):
    def __init__(self):
        super().__init__(TYPE_ACCESS_COMMON, RX_ACCESS_COMMON, AccessCommonLog)

    def set_row(self, row: List[str]) -> Dict[str, Any]:
        return set_common_row(row)

    def build_event(self, record: AccessCommonLog) -> Event:
        return access_event(self.name, record)


class AccessCombinedParser(DelimitedLogParser):
    def __init__(self):
        super().__init__(TYPE_ACCESS_COMBINED, RX_ACCESS_COMBINED, AccessCombinedLog)

    def set_row(self, row: List[str]) -> Dict[str, Any]:
        fields = set_common_row(row)
        referer, user_agent = row[NUM_FIELDS_ACCESS_COMMON:]
        fields["referer"] = non_empty(strip_quotes(referer))
        fields["user_agent"] = non_empty(strip_quotes(user_agent))
        return fields

    def build_event(self, record: AccessCombinedLog) -> Event:
        return access_event(self.name, record)


LOG_TYPES = [
    LogType(
        name=TYPE_ACCESS_COMMON,
        description="Apache HTTP server access logs using the 'common' format",
        reference_url=REFERENCE_URL + "#common",
        schema=compose_schema("AccessCommon", AccessCommonLog, LogEnvelope),
        new_parser=AccessCommonParser,
    ),
    LogType(
        name=TYPE_ACCESS_COMBINED,
        description="Apache HTTP server access logs using the 'combined' format",
        reference_url=REFERENCE_URL + "#combined",
        schema=compose_schema("AccessCombined", AccessCombinedLog, LogEnvelope),
        new_parser=AccessCombinedParser,
    ),
]
