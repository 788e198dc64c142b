import re
from typing import Any, Dict, List, Optional

from pydantic import Field

from .delimited import DelimitedLogParser, non_empty, split_request
from .envelope import LogEnvelope, compose_schema
from .jsonlog import LogRecord
from .registry import LogType
from .timestamp import ApacheTime
from .values import Event, hostname, new_event

TYPE_ACCESS = "Nginx.Access"

# Combined Log Format regex
# 127.0.0.1 - - [10/oct/2020:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326 "http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"
COMBINED_LOG_PATTERN = re.compile(
    r'^\s*(?P<remote_addr>\S+) - (?P<remote_user>\S+) \[(?P<time_local>[^\]]+)\] "(?P<request>[^"]*)" '
    r'(?P<status>\d{3}) (?P<body_bytes_sent>\d+|-) "(?P<http_referer>[^"]*)" "(?P<http_user_agent>[^"]*)"\s*$'
)

FIELD_NAMES = sorted(COMBINED_LOG_PATTERN.groupindex, key=COMBINED_LOG_PATTERN.groupindex.get)


class AccessLog(LogRecord):
    remote_addr: Optional[str] = Field(None, description="The IP address of the client.")
    remote_user: Optional[str] = Field(None, description="The user name supplied with basic authentication.")
    time_local: ApacheTime = Field(..., description="The local time of the request (UTC).")
    request: Optional[str] = Field(None, description="The full original request line.")
    method: Optional[str] = Field(None, description="The HTTP request method.")
    path: Optional[str] = Field(None, description="The HTTP request path.")
    protocol: Optional[str] = Field(None, description="The HTTP request protocol.")
    status: int = Field(..., ge=100, le=999, description="The response status.")
    body_bytes_sent: Optional[int] = Field(
        None, ge=0, description="The number of bytes sent to a client, not counting the response header."
    )
    http_referer: Optional[str] = Field(None, description="The Referer HTTP header.")
    http_user_agent: Optional[str] = Field(None, description="The User-Agent HTTP header.")


class NginxParser(DelimitedLogParser):
    def __init__(self):
        super().__init__(TYPE_ACCESS, COMBINED_LOG_PATTERN, AccessLog, literal_fields=1)

    def set_row(self, row: List[str]) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: non_empty(value) for name, value in zip(FIELD_NAMES, row)}
        # time_local is required, keep it as is so a bad value reports as a timestamp error
        data["time_local"] = row[FIELD_NAMES.index("time_local")]

        # Extract method and path from request
        request_line = split_request(data.get("request"))
        data["method"] = request_line["method"]
        data["path"] = request_line["uri"]
        data["protocol"] = request_line["protocol"]
        return data

    def build_event(self, record: AccessLog) -> Event:
        return new_event(self.name, record.time_local, hostname(record.remote_addr))


LOG_TYPES = [
    LogType(
        name=TYPE_ACCESS,
        description="Access logs for Nginx servers using the 'combined' log format",
        reference_url="http://nginx.org/en/docs/http/ngx_http_log_module.html#log_format",
        schema=compose_schema("NginxAccess", AccessLog, LogEnvelope),
        new_parser=NginxParser,
    ),
]
