from typing import List, Literal, Optional, Union

from pydantic import Field

from .envelope import LogEnvelope, compose_schema
from .jsonlog import JSONLogParser, LogRecord, Port, RequiredStr
from .registry import LogType
from .timestamp import SuricataTime
from .values import Event, domain_name, ip_address, new_event

TYPE_DNS = "Suricata.DNS"
TYPE_ANOMALY = "Suricata.Anomaly"

REFERENCE_URL = "https://suricata.readthedocs.io/en/suricata-5.0.2/output/eve/eve-json-output.html"


class DNSDetailsAnswer(LogRecord):
    rdata: Optional[str] = Field(None, description="Suricata DNSDetailsAnswers Rdata")
    rrname: Optional[str] = Field(None, description="Suricata DNSDetailsAnswers Rrname")
    rrtype: Optional[str] = Field(None, description="Suricata DNSDetailsAnswers Rrtype")
    ttl: Optional[int] = Field(None, description="Suricata DNSDetailsAnswers TTL")


class DNSDetailsAuthority(LogRecord):
    rrname: Optional[str] = Field(None, description="Suricata DNSDetailsAuthorities Rrname")
    rrtype: Optional[str] = Field(None, description="Suricata DNSDetailsAuthorities Rrtype")
    ttl: Optional[int] = Field(None, description="Suricata DNSDetailsAuthorities TTL")


class DNSDetailsGrouped(LogRecord):
    a: Optional[List[str]] = Field(None, alias="A", description="Suricata DNSDetailsGrouped A")
    aaaa: Optional[List[str]] = Field(None, alias="AAAA", description="Suricata DNSDetailsGrouped AAAA")
    cname: Optional[List[str]] = Field(None, alias="CNAME", description="Suricata DNSDetailsGrouped CNAME")
    mx: Optional[List[str]] = Field(None, alias="MX", description="Suricata DNSDetailsGrouped MX")
    ptr: Optional[List[str]] = Field(None, alias="PTR", description="Suricata DNSDetailsGrouped PTR")
    txt: Optional[List[str]] = Field(None, alias="TXT", description="Suricata DNSDetailsGrouped TXT")


class DNSDetails(LogRecord):
    aa: Optional[bool] = Field(None, description="Suricata DNSDetails Aa")
    answers: Optional[List[DNSDetailsAnswer]] = Field(None, description="Suricata DNSDetails Answers")
    authorities: Optional[List[DNSDetailsAuthority]] = Field(None, description="Suricata DNSDetails Authorities")
    flags: Optional[str] = Field(None, description="Suricata DNSDetails Flags")
    grouped: Optional[DNSDetailsGrouped] = Field(None, description="Suricata DNSDetails Grouped")
    id: Optional[int] = Field(None, description="Suricata DNSDetails ID")
    qr: Optional[bool] = Field(None, description="Suricata DNSDetails Qr")
    ra: Optional[bool] = Field(None, description="Suricata DNSDetails Ra")
    rcode: Optional[str] = Field(None, description="Suricata DNSDetails Rcode")
    rd: Optional[bool] = Field(None, description="Suricata DNSDetails Rd")
    rrname: Optional[str] = Field(None, description="Suricata DNSDetails Rrname")
    rdata: Optional[str] = Field(None, description="Suricata DNSDetails RData")
    rrtype: Optional[str] = Field(None, description="Suricata DNSDetails Rrtype")
    ttl: Optional[int] = Field(None, description="Suricata DNSDetails TTL")
    tx_id: Optional[int] = Field(None, description="Suricata DNSDetails TxID")
    type: Optional[Literal["query", "answer"]] = Field(None, description="Suricata DNSDetails Type")
    version: Optional[int] = Field(None, description="Suricata DNSDetails Version")


class DNS(LogRecord):
    community_id: Optional[str] = Field(None, description="Suricata DNS CommunityID")
    dns: DNSDetails = Field(..., description="Suricata DNS DNS")
    dest_ip: RequiredStr = Field(..., description="Suricata DNS DestIP")
    dest_port: Optional[Port] = Field(None, description="Suricata DNS DestPort")
    event_type: Literal["dns"] = Field(..., description="Suricata DNS EventType")
    flow_id: Optional[int] = Field(None, description="Suricata DNS FlowID")
    pcap_cnt: Optional[int] = Field(None, description="Suricata DNS PcapCnt")
    pcap_filename: Optional[str] = Field(None, description="Suricata DNS PcapFilename")
    proto: Union[int, str] = Field(..., description="Suricata DNS Proto")
    src_ip: RequiredStr = Field(..., description="Suricata DNS SrcIP")
    src_port: Optional[Port] = Field(None, description="Suricata DNS SrcPort")
    timestamp: SuricataTime = Field(..., description="Suricata DNS Timestamp")
    vlan: Optional[List[int]] = Field(None, description="Suricata DNS Vlan")


class AnomalyDetails(LogRecord):
    code: Optional[int] = Field(None, description="Suricata AnomalyDetails Code")
    event: Optional[str] = Field(None, description="Suricata AnomalyDetails Event")
    layer: Optional[str] = Field(None, description="Suricata AnomalyDetails Layer")
    type: Optional[str] = Field(None, description="Suricata AnomalyDetails Type")


class AnomalyPacketInfo(LogRecord):
    linktype: Optional[int] = Field(None, description="Suricata AnomalyPacketInfo Linktype")


class Anomaly(LogRecord):
    anomaly: AnomalyDetails = Field(..., description="Suricata Anomaly Anomaly")
    app_proto: Optional[str] = Field(None, description="Suricata Anomaly AppProto")
    community_id: Optional[str] = Field(None, description="Suricata Anomaly CommunityID")
    dest_ip: Optional[str] = Field(None, description="Suricata Anomaly DestIP")
    dest_port: Optional[Port] = Field(None, description="Suricata Anomaly DestPort")
    event_type: Literal["anomaly"] = Field(..., description="Suricata Anomaly EventType")
    flow_id: Optional[int] = Field(None, description="Suricata Anomaly FlowID")
    icmp_code: Optional[int] = Field(None, description="Suricata Anomaly IcmpCode")
    icmp_type: Optional[int] = Field(None, description="Suricata Anomaly IcmpType")
    packet: Optional[str] = Field(None, description="Suricata Anomaly Packet")
    packet_info: Optional[AnomalyPacketInfo] = Field(None, description="Suricata Anomaly PacketInfo")
    pcap_cnt: Optional[int] = Field(None, description="Suricata Anomaly PcapCnt")
    pcap_filename: Optional[str] = Field(None, description="Suricata Anomaly PcapFilename")
    proto: Optional[Union[int, str]] = Field(None, description="Suricata Anomaly Proto")
    src_ip: Optional[str] = Field(None, description="Suricata Anomaly SrcIP")
    src_port: Optional[Port] = Field(None, description="Suricata Anomaly SrcPort")
    timestamp: SuricataTime = Field(..., description="Suricata Anomaly Timestamp")
    tx_id: Optional[int] = Field(None, description="Suricata Anomaly TxID")
    vlan: Optional[List[int]] = Field(None, description="Suricata Anomaly Vlan")


class DNSParser(JSONLogParser):
    """Parses Suricata DNS events in the EVE JSON format."""

    def __init__(self):
        super().__init__(TYPE_DNS, DNS)

    def build_event(self, record: DNS) -> Event:
        event = new_event(self.name, record.timestamp, ip_address(record.src_ip), ip_address(record.dest_ip))
        details = record.dns
        event.extend(domain_name(details.rrname), ip_address(details.rdata))
        for answer in details.answers or ():
            if answer.rrtype in ("A", "AAAA"):
                event.extend(ip_address(answer.rdata), domain_name(answer.rrname))
            elif answer.rrtype in ("CNAME", "MX"):
                event.extend(domain_name(answer.rrname), domain_name(answer.rdata))
            elif answer.rrtype == "PTR":
                event.extend(domain_name(answer.rdata))
            elif answer.rrtype == "TXT":
                event.extend(domain_name(answer.rrname))
        grouped = details.grouped
        if grouped is not None:
            event.extend(*(ip_address(addr) for addr in (grouped.a or []) + (grouped.aaaa or [])))
            event.extend(*(domain_name(name) for name in (grouped.cname or []) + (grouped.mx or [])))
        return event


class AnomalyParser(JSONLogParser):
    """Parses Suricata Anomaly events in the EVE JSON format."""

    def __init__(self):
        super().__init__(TYPE_ANOMALY, Anomaly)

    def build_event(self, record: Anomaly) -> Event:
        return new_event(self.name, record.timestamp, ip_address(record.src_ip), ip_address(record.dest_ip))


LOG_TYPES = [
    LogType(
        name=TYPE_DNS,
        description="Suricata parser for the DNS event type in the EVE JSON output.",
        reference_url=REFERENCE_URL + "#dns",
        schema=compose_schema("SuricataDNS", DNS, LogEnvelope),
        new_parser=DNSParser,
    ),
    LogType(
        name=TYPE_ANOMALY,
        description="Suricata parser for the Anomaly event type in the EVE JSON output.",
        reference_url=REFERENCE_URL + "#anomaly",
        schema=compose_schema("SuricataAnomaly", Anomaly, LogEnvelope),
        new_parser=AnomalyParser,
    ),
]
