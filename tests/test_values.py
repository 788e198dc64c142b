from datetime import datetime, timedelta, timezone

from lognorm.parser.values import (
    Event,
    Value,
    ValueKind,
    aws_tag,
    column_name,
    domain_name,
    hostname,
    ip_address,
    new_event,
    new_value,
    register_kind,
)


class TestValues:
    def test_empty_raw_values_are_dropped(self):
        assert new_value(ValueKind.IP_ADDRESS, "") is None
        assert new_value(ValueKind.IP_ADDRESS, None) is None
        assert aws_tag("env", "") is None
        assert aws_tag("env", "prod") == Value(ValueKind.AWS_TAG, "env:prod")

    def test_kind_compares_as_string(self):
        assert ip_address("10.0.0.1") == Value("ip_address", "10.0.0.1")
        assert len({ip_address("10.0.0.1"), Value("ip_address", "10.0.0.1")}) == 1

    def test_hostname(self):
        assert hostname("192.168.0.1") == ip_address("192.168.0.1")
        assert hostname("2001:db8::1") == ip_address("2001:db8::1")
        assert hostname("ip-192-168-0-1") == domain_name("ip-192-168-0-1")
        assert hostname(None) is None

    def test_register_kind(self):
        assert register_kind("ip_address") == "ip_address"
        assert register_kind("gitlab_project") == "gitlab_project"
        assert column_name("gitlab_project") == "p_any_gitlab_projects"
        assert column_name(ValueKind.IP_ADDRESS) == "p_any_ip_addresses"


class TestEvent:
    def test_add_deduplicates(self):
        event = Event(log_type="Test.Log", timestamp=datetime(2020, 1, 1, tzinfo=timezone.utc))
        event.add(ip_address("10.0.0.1"), ip_address("10.0.0.1"), None, domain_name("example.com"))
        event.extend(ip_address("10.0.0.1"), ip_address("10.0.0.2"))
        assert event.indicators(ValueKind.IP_ADDRESS) == ["10.0.0.1", "10.0.0.2"]
        assert event.indicators(ValueKind.DOMAIN_NAME) == ["example.com"]
        assert event.indicators(ValueKind.AWS_ARN) == []

    def test_timestamp_normalized_to_utc(self):
        local = datetime(2020, 10, 10, 13, 55, 36, tzinfo=timezone(timedelta(hours=-7)))
        event = new_event("Test.Log", local)
        assert event.timestamp == datetime(2020, 10, 10, 20, 55, 36, tzinfo=timezone.utc)
        assert event.timestamp.utcoffset() == timedelta(0)

        naive = new_event("Test.Log", datetime(2020, 1, 1, 12, 0, 0))
        assert naive.timestamp.tzinfo == timezone.utc

    def test_to_dict(self):
        event = new_event(
            "Test.Log",
            datetime(2020, 1, 1, 12, 0, 0, 500000, tzinfo=timezone.utc),
            ip_address("10.0.0.2"),
            ip_address("10.0.0.1"),
        )
        event.record = {"message": "hello"}
        assert event.to_dict() == {
            "message": "hello",
            "p_log_type": "Test.Log",
            "p_event_time": "2020-01-01T12:00:00.500000Z",
            "p_any_ip_addresses": ["10.0.0.1", "10.0.0.2"],
        }

    def test_equality_ignores_insertion_order(self):
        tm = datetime(2020, 1, 1, tzinfo=timezone.utc)
        a = new_event("Test.Log", tm, ip_address("10.0.0.1"), ip_address("10.0.0.2"))
        b = new_event("Test.Log", tm, ip_address("10.0.0.2"), ip_address("10.0.0.1"), ip_address("10.0.0.1"))
        assert a == b
