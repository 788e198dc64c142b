from datetime import datetime, timezone

import pytest

from lognorm.errors import FieldCountError, GrammarError, ParseError, TimestampFailure, ValidationFailure
from lognorm.parser.apache import (
    NUM_FIELDS_ACCESS_COMBINED,
    NUM_FIELDS_ACCESS_COMMON,
    TYPE_ACCESS_COMBINED,
    TYPE_ACCESS_COMMON,
    AccessCombinedParser,
    AccessCommonParser,
)
from lognorm.parser.values import ValueKind

COMBINED_LINE = '192.168.0.1 - - [10/Oct/2020:13:55:36] "GET /x HTTP/1.1" 200 123 "-" "curl/7.64"'
COMMON_LINE = '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326'


class TestAccessCombined:
    def test_parse(self):
        events = AccessCombinedParser().parse(COMBINED_LINE)
        assert len(events) == 1
        event = events[0]
        assert event.log_type == TYPE_ACCESS_COMBINED
        assert event.timestamp == datetime(2020, 10, 10, 13, 55, 36, tzinfo=timezone.utc)
        assert event.indicators(ValueKind.IP_ADDRESS) == ["192.168.0.1"]
        assert event.indicators(ValueKind.DOMAIN_NAME) == []
        assert event.record == {
            "remote_host_ip_address": "192.168.0.1",
            "request_time": "2020-10-10T13:55:36Z",
            "request_method": "GET",
            "request_uri": "/x",
            "request_protocol": "HTTP/1.1",
            "response_status": 200,
            "response_size": 123,
            "user_agent": "curl/7.64",
        }

    def test_time_zone_offset(self):
        line = (
            '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326 '
            '"http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"'
        )
        event = AccessCombinedParser().parse(line)[0]
        assert event.timestamp == datetime(2000, 10, 10, 20, 55, 36, tzinfo=timezone.utc)
        assert event.record["user_id"] == "frank"
        assert event.record["referer"] == "http://www.example.com/start.html"
        assert event.record["user_agent"] == "Mozilla/4.08 [en] (Win98; I ;Nav)"

    def test_resolved_remote_host(self):
        line = 'client.example.com - - [10/Oct/2020:13:55:36 +0000] "GET / HTTP/1.1" 304 - "-" "-"'
        event = AccessCombinedParser().parse(line)[0]
        assert event.indicators(ValueKind.IP_ADDRESS) == []
        assert event.indicators(ValueKind.DOMAIN_NAME) == ["client.example.com"]
        assert "response_size" not in event.record
        assert "user_agent" not in event.record

    def test_field_count_mismatch(self):
        with pytest.raises(FieldCountError) as excinfo:
            AccessCombinedParser().parse(COMMON_LINE)
        assert excinfo.value.expected == NUM_FIELDS_ACCESS_COMBINED
        assert excinfo.value.actual == NUM_FIELDS_ACCESS_COMMON

    def test_split_yields_arity_fields(self):
        parser = AccessCombinedParser()
        assert parser.arity == NUM_FIELDS_ACCESS_COMBINED == 9
        row = parser.split(COMBINED_LINE)
        assert len(row) == parser.arity
        assert row[0] == "192.168.0.1"
        assert row[-1] == '"curl/7.64"'

    def test_grammar_mismatch(self):
        line = '192.168.0.1 - - [10/Oct/2020:13:55:36] "GET /x HTTP/1.1" OK 123 "-" "curl/7.64"'
        with pytest.raises(GrammarError):
            AccessCombinedParser().parse(line)

    def test_bad_timestamp(self):
        line = '192.168.0.1 - - [99/Foo/2020:13:55:36] "GET /x HTTP/1.1" 200 123 "-" "curl/7.64"'
        with pytest.raises(TimestampFailure):
            AccessCombinedParser().parse(line)

    def test_not_a_log_line(self):
        with pytest.raises(ParseError):
            AccessCombinedParser().parse("hello world")

    def test_idempotent(self):
        first = AccessCombinedParser().parse(COMBINED_LINE)
        parser = AccessCombinedParser()
        assert parser.parse(COMBINED_LINE) == first
        assert parser.new().parse(COMBINED_LINE) == first

    def test_new(self):
        parser = AccessCombinedParser()
        other = parser.new()
        assert other is not parser
        assert isinstance(other, AccessCombinedParser)
        assert other.log_type == TYPE_ACCESS_COMBINED


class TestAccessCommon:
    def test_parse(self):
        event = AccessCommonParser().parse(COMMON_LINE)[0]
        assert event.log_type == TYPE_ACCESS_COMMON
        assert event.timestamp == datetime(2000, 10, 10, 20, 55, 36, tzinfo=timezone.utc)
        assert event.indicators(ValueKind.IP_ADDRESS) == ["127.0.0.1"]
        assert event.record["response_size"] == 2326

    def test_field_count_mismatch(self):
        with pytest.raises(FieldCountError):
            AccessCommonParser().parse(COMBINED_LINE)

    def test_status_out_of_range(self):
        line = '127.0.0.1 - - [10/Oct/2000:13:55:36 -0700] "GET / HTTP/1.0" 099 10'
        with pytest.raises(ValidationFailure):
            AccessCommonParser().parse(line)
