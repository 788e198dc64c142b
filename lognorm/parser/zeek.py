from typing import List, Optional

from pydantic import Field

from .envelope import LogEnvelope, compose_schema
from .jsonlog import JSONLogParser, LogRecord, Port, RequiredStr
from .registry import LogType
from .timestamp import UnixSeconds
from .values import Event, hostname, new_event

TYPE_DNS = "Zeek.DNS"

# https://docs.zeek.org/en/current/scripts/base/protocols/dns/consts.zeek.html#id-DNS::query_types
A_QUERY_TYPE = 1
AAAA_QUERY_TYPE = 28


class ZeekDNS(LogRecord):
    ts: UnixSeconds = Field(
        ..., description="The earliest time at which a DNS protocol message over the associated connection is observed."
    )
    uid: RequiredStr = Field(
        ..., description="A unique identifier of the connection over which DNS messages are being transferred."
    )
    id_orig_h: RequiredStr = Field(..., alias="id.orig_h", description="The originator's IP address.")
    id_orig_p: Port = Field(..., alias="id.orig_p", description="The originator's port number.")
    id_resp_h: RequiredStr = Field(..., alias="id.resp_h", description="The responder's IP address.")
    id_resp_p: Port = Field(..., alias="id.resp_p", description="The responder's port number.")
    proto: RequiredStr = Field(..., description="The transport layer protocol of the connection.")
    trans_id: Optional[int] = Field(
        None, ge=0, le=65535, description="A 16-bit identifier assigned by the program that generated the DNS query."
    )
    query: Optional[str] = Field(None, description="The domain name that is the subject of the DNS query.")
    qclass: Optional[int] = Field(None, ge=0, description="The QCLASS value specifying the class of the query.")
    qclass_name: Optional[str] = Field(None, description="A descriptive name for the class of the query.")
    qtype: Optional[int] = Field(None, ge=0, description="A QTYPE value specifying the type of the query.")
    qtype_name: Optional[str] = Field(None, description="A descriptive name for the type of the query.")
    rcode: Optional[int] = Field(None, ge=0, description="The response code value in DNS response messages.")
    rcode_name: Optional[str] = Field(None, description="A descriptive name for the response code value.")
    aa: Optional[bool] = Field(None, alias="AA", description="The Authoritative Answer bit for response messages.")
    tc: Optional[bool] = Field(None, alias="TC", description="The Truncation bit specifies that the message was truncated.")
    rd: Optional[bool] = Field(None, alias="RD", description="The Recursion Desired bit in a request message.")
    ra: Optional[bool] = Field(None, alias="RA", description="The Recursion Available bit in a response message.")
    z: Optional[int] = Field(None, alias="Z", description="A reserved field that is usually zero in queries and responses.")
    answers: Optional[List[str]] = Field(None, description="The set of resource descriptions in the query answer.")
    ttls: Optional[List[float]] = Field(
        None, alias="TTLs", description="The caching intervals of the associated RRs described by the answers field."
    )
    rejected: Optional[bool] = Field(None, description="The DNS query was rejected by the server.")


class ZeekDNSParser(JSONLogParser):
    """Parses zeek dns.log lines written with the JSON writer."""

    def __init__(self):
        super().__init__(TYPE_DNS, ZeekDNS)

    def build_event(self, record: ZeekDNS) -> Event:
        event = new_event(self.name, record.ts, hostname(record.id_orig_h), hostname(record.id_resp_h))
        if record.qtype in (A_QUERY_TYPE, AAAA_QUERY_TYPE):
            event.add(hostname(record.query))
        for answer in record.answers or ():
            event.add(hostname(answer))
        return event


LOG_TYPES = [
    LogType(
        name=TYPE_DNS,
        description="Zeek DNS activity",
        reference_url="https://docs.zeek.org/en/current/scripts/base/protocols/dns/main.zeek.html#type-DNS::Info",
        schema=compose_schema("ZeekDNS", ZeekDNS, LogEnvelope),
        new_parser=ZeekDNSParser,
    ),
]
