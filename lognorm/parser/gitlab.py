from pydantic import Field

from .envelope import LogEnvelope, compose_schema
from .jsonlog import JSONLogParser, LogRecord, RequiredStr
from .registry import LogType
from .timestamp import RFC3339
from .values import Event, new_event

TYPE_AUDIT = "GitLab.Audit"


class Audit(LogRecord):
    """A GitLab audit log line recording a change to group or project settings."""

    severity: RequiredStr = Field(..., description="The log level")
    time: RFC3339 = Field(..., description="The event timestamp")
    author_id: int = Field(..., description="User id that made the change")
    entity_id: int = Field(..., description="Id of the entity that was modified")
    entity_type: RequiredStr = Field(..., description="Type of the modified entity")
    change: RequiredStr = Field(..., description="Type of change to the settings")
    from_: str = Field(..., alias="from", description="Old setting value")
    to: str = Field(..., description="New setting value")
    author_name: RequiredStr = Field(..., description="Name of the user that made the change")
    target_id: int = Field(..., description="Target id of the modified setting")
    target_type: RequiredStr = Field(..., description="Target type of the modified setting")
    target_details: RequiredStr = Field(..., description="Details of the target of the modified setting")


class AuditParser(JSONLogParser):
    def __init__(self):
        super().__init__(TYPE_AUDIT, Audit)

    def build_event(self, record: Audit) -> Event:
        return new_event(self.name, record.time)


LOG_TYPES = [
    LogType(
        name=TYPE_AUDIT,
        description="GitLab log file containing changes to group or project settings",
        reference_url="https://docs.gitlab.com/ee/administration/logs.html#audit_jsonlog",
        schema=compose_schema("GitLabAudit", Audit, LogEnvelope),
        new_parser=AuditParser,
    ),
]
