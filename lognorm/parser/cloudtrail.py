"""
AWS CloudTrail events.

CloudTrail records have a fixed envelope but free-form, per-service
payloads (requestParameters, responseElements, ...). The envelope is
validated with a schema and the whole record is walked by a ValueScanner
to find the AWS identifiers hidden in the payloads.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..errors import GrammarError, ScanError
from .base import LogParser
from .envelope import LogEnvelope, compose_schema
from .jsonlog import LogRecord, RequiredStr, dump_record, validate_record
from .registry import LogType
from .scanner import ScannerPool, default_pool
from .timestamp import RFC3339
from .values import Event, Value, aws_account_id, hostname, new_event

TYPE_CLOUDTRAIL = "AWS.CloudTrail"


class CloudTrail(LogRecord):
    additional_event_data: Optional[Any] = Field(
        None, alias="additionalEventData", description="Additional data about the event that was not part of the request or response."
    )
    api_version: Optional[str] = Field(None, alias="apiVersion", description="Identifies the API version associated with the AwsApiCall eventType value.")
    aws_region: RequiredStr = Field(..., alias="awsRegion", description="The AWS region that the request was made to, such as us-east-2.")
    error_code: Optional[str] = Field(None, alias="errorCode", description="The AWS service error if the request returns an error.")
    error_message: Optional[str] = Field(None, alias="errorMessage", description="If the request returns an error, the description of the error.")
    event_id: RequiredStr = Field(..., alias="eventID", description="GUID generated by CloudTrail to uniquely identify each event.")
    event_name: RequiredStr = Field(..., alias="eventName", description="The requested action, which is one of the actions in the API for that service.")
    event_source: RequiredStr = Field(..., alias="eventSource", description="The service that the request was made to.")
    event_time: RFC3339 = Field(..., alias="eventTime", description="The date and time the request was made, in coordinated universal time (UTC).")
    event_type: RequiredStr = Field(..., alias="eventType", description="Identifies the type of event that generated the event record.")
    event_version: RequiredStr = Field(..., alias="eventVersion", description="The version of the log event format.")
    management_event: Optional[bool] = Field(None, alias="managementEvent", description="A Boolean value that identifies whether the event is a management event.")
    read_only: Optional[bool] = Field(None, alias="readOnly", description="Identifies whether this operation is a read-only operation.")
    recipient_account_id: Optional[str] = Field(None, alias="recipientAccountId", description="Represents the account ID that received this event.")
    request_id: Optional[str] = Field(None, alias="requestID", description="The value that identifies the request.")
    request_parameters: Optional[Any] = Field(None, alias="requestParameters", description="The parameters, if any, that were sent with the request.")
    resources: Optional[List[Dict[str, Any]]] = Field(None, description="A list of resources accessed in the event.")
    response_elements: Optional[Any] = Field(None, alias="responseElements", description="The response element for actions that make changes (create, update, or delete actions).")
    service_event_details: Optional[Any] = Field(None, alias="serviceEventDetails", description="Identifies the service event, including what triggered the event and the result.")
    shared_event_id: Optional[str] = Field(None, alias="sharedEventID", description="GUID generated by CloudTrail to uniquely identify CloudTrail events from the same AWS action that is sent to different AWS accounts.")
    source_ip_address: Optional[str] = Field(None, alias="sourceIPAddress", description="The IP address that the request was made from.")
    user_agent: Optional[str] = Field(None, alias="userAgent", description="The agent through which the request was made.")
    user_identity: Optional[Dict[str, Any]] = Field(None, alias="userIdentity", description="Information about the user that made a request.")
    vpc_endpoint_id: Optional[str] = Field(None, alias="vpcEndpointId", description="Identifies the VPC endpoint in which requests were made from a VPC to another AWS service.")


class CloudTrailParser(LogParser):
    """
    Parses CloudTrail events, either one record per line or a
    {"Records": [...]} delivery file flattened to a single line.

    Holds a scanner borrowed from the pool until close().
    """

    def __init__(self, pool: ScannerPool = default_pool):
        super().__init__(TYPE_CLOUDTRAIL)
        self.pool = pool
        self.scanner = pool.acquire()
        self._values: List[Value] = []

    def new(self) -> "CloudTrailParser":
        return CloudTrailParser(self.pool)

    def close(self):
        scanner, self.scanner = self.scanner, None
        if scanner is not None:
            self.pool.release(scanner)

    def parse(self, line: str) -> List[Event]:
        try:
            document = json.loads(line)
        except (ValueError, RecursionError) as e:
            raise GrammarError(self.name, f"invalid JSON log: {e}") from e

        if isinstance(document, dict) and isinstance(document.get("Records"), list):
            records = document["Records"]
        else:
            records = [document]
        return [self._parse_record(record) for record in records]

    def _parse_record(self, data: Any) -> Event:
        record = validate_record(self.name, CloudTrail, data)
        event = new_event(
            self.name,
            record.event_time,
            hostname(record.source_ip_address),
            aws_account_id(record.recipient_account_id),
        )
        if self.scanner is None:
            self.scanner = self.pool.acquire()
        self._values.clear()
        try:
            self.scanner.scan(self._values, data)
        except ScanError as e:
            raise GrammarError(self.name, str(e)) from e
        event.extend(*self._values)
        self._values.clear()
        event.record = dump_record(self.name, record)
        return event


LOG_TYPES = [
    LogType(
        name=TYPE_CLOUDTRAIL,
        description="AWSCloudTrail represents the content of a CloudTrail S3 object.",
        reference_url="https://docs.aws.amazon.com/awscloudtrail/latest/userguide/cloudtrail-event-reference.html",
        schema=compose_schema("AWSCloudTrail", CloudTrail, LogEnvelope),
        new_parser=CloudTrailParser,
    ),
]
