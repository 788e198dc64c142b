from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, create_model

from .timestamp import RFC3339


class LogEnvelope(BaseModel):
    """Columns added to every normalized row, whatever the log type."""

    p_log_type: str = Field("", description="The type of log")
    p_event_time: Optional[RFC3339] = Field(None, description="Timestamp of the event in UTC")
    p_any_ip_addresses: List[str] = Field(default_factory=list, description="IP addresses in the event")
    p_any_domain_names: List[str] = Field(default_factory=list, description="Domain names in the event")
    p_any_aws_arns: List[str] = Field(default_factory=list, description="AWS ARNs in the event")
    p_any_aws_account_ids: List[str] = Field(default_factory=list, description="AWS account ids in the event")
    p_any_aws_instance_ids: List[str] = Field(default_factory=list, description="AWS EC2 instance ids in the event")
    p_any_aws_tags: List[str] = Field(default_factory=list, description="AWS tags in the event as key:value")


def compose_schema(name: str, *parts: Type[BaseModel]) -> Type[BaseModel]:
    """
    Build one flat model holding the fields of every part.

    Parts are included by value, so a record model composed with
    LogEnvelope still describes a single flat JSON object.
    """
    fields: Dict[str, Tuple[Any, Any]] = {}
    for part in parts:
        for field_name, info in part.model_fields.items():
            if field_name in fields:
                raise ValueError(f"duplicate field {field_name!r} in schema {name}")
            fields[field_name] = (info.annotation, info)
    return create_model(name, __config__=ConfigDict(populate_by_name=True), **fields)

