import json
from datetime import datetime, timezone

import pytest

from lognorm.errors import ValidationFailure
from lognorm.parser.gitlab import TYPE_AUDIT, AuditParser

AUDIT_LOG = {
    "severity": "INFO",
    "time": "2018-10-17T17:38:22.523Z",
    "author_id": 3,
    "entity_id": 2,
    "entity_type": "Project",
    "change": "visibility",
    "from": "Private",
    "to": "Public",
    "author_name": "John Doe4",
    "target_id": 2,
    "target_type": "Project",
    "target_details": "namespace2/project2",
}


def test_parse():
    event = AuditParser().parse(json.dumps(AUDIT_LOG))[0]
    assert event.log_type == TYPE_AUDIT
    assert event.timestamp == datetime(2018, 10, 17, 17, 38, 22, 523000, tzinfo=timezone.utc)
    assert event.kinds() == []
    assert event.record["from"] == "Private"
    assert event.record["to"] == "Public"


def test_missing_author():
    log = dict(AUDIT_LOG)
    del log["author_name"]
    with pytest.raises(ValidationFailure):
        AuditParser().parse(json.dumps(log))


def test_empty_change_values_are_allowed():
    event = AuditParser().parse(json.dumps(dict(AUDIT_LOG, **{"from": "", "to": ""})))[0]
    assert event.record["from"] == ""
