import json

import pytest

from lognorm.errors import ScanError
from lognorm.parser.scanner import ScannerPool, ValueScanner, parse_arn, scan_values
from lognorm.parser.values import (
    Value,
    aws_account_id,
    aws_arn,
    aws_instance_id,
    aws_tag,
    domain_name,
    ip_address,
)


@pytest.fixture
def scanner():
    s = ValueScanner()
    yield s
    s.close()


class TestParseARN:
    def test_sections(self):
        arn = parse_arn("arn:aws:ec2:us-east-1:123456789012:instance/i-0abc")
        assert arn.partition == "aws"
        assert arn.service == "ec2"
        assert arn.region == "us-east-1"
        assert arn.account_id == "123456789012"
        assert arn.resource == "instance/i-0abc"

    def test_resource_with_colons(self):
        arn = parse_arn("arn:aws:lambda:us-east-1:123456789012:function:my-function:1")
        assert arn.resource == "function:my-function:1"

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_arn("arn:aws:s3")
        with pytest.raises(ValueError):
            parse_arn("not-an-arn")


class TestValueScanner:
    def test_instance_id_and_tags(self, scanner):
        values = scanner.scan([], '{"instanceId":"i-0123456789abcdef0","tags":[{"key":"env","value":"prod"}]}')
        assert values == [aws_instance_id("i-0123456789abcdef0"), aws_tag("env", "prod")]

    def test_arn_with_instance(self, scanner):
        values = scanner.scan([], '{"role":"arn:aws:iam::123456789012:instance/i-0abc"}')
        assert values == [
            aws_arn("arn:aws:iam::123456789012:instance/i-0abc"),
            aws_account_id("123456789012"),
            aws_instance_id("i-0abc"),
        ]

    def test_arn_takes_precedence_over_key_rules(self, scanner):
        values = scanner.scan([], {"accountId": "arn:aws:iam::123456789012:root"})
        assert values == [aws_arn("arn:aws:iam::123456789012:root"), aws_account_id("123456789012")]
        assert aws_account_id("arn:aws:iam::123456789012:root") not in values

    def test_arn_without_account(self, scanner):
        values = scanner.scan([], {"bucket": "arn:aws:s3:::my-bucket"})
        assert values == [aws_arn("arn:aws:s3:::my-bucket")]

    def test_malformed_arn_is_ignored(self, scanner):
        assert scanner.scan([], {"accountId": "arn:aws"}) == []

    def test_key_suffix_rules(self, scanner):
        values = scanner.scan(
            [],
            {
                "sourceInstanceId": "i-1111",
                "reservedInstanceId": "r-2222",
                "ownerAccountId": "111122223333",
                "accountId": "444455556666",
            },
        )
        assert values == [
            aws_instance_id("i-1111"),
            aws_account_id("111122223333"),
            aws_account_id("444455556666"),
        ]

    def test_address_and_dns_keys(self, scanner):
        values = scanner.scan(
            [],
            {
                "publicIp": "54.0.0.1",
                "privateIpAddress": "10.0.0.1",
                "ipAddressV4": "1.2.3.4",
                "publicDnsName": "ec2-54-0-0-1.compute.amazonaws.com",
                "privateDnsName": "ip-10-0-0-1.ec2.internal",
                "domain": "evil.example.com",
                "hostname": "ignored.example.com",
                "ipv6Addresses": ["2001:db8::1", "2001:db8::2"],
            },
        )
        assert values == [
            ip_address("54.0.0.1"),
            ip_address("10.0.0.1"),
            ip_address("1.2.3.4"),
            domain_name("ec2-54-0-0-1.compute.amazonaws.com"),
            domain_name("ip-10-0-0-1.ec2.internal"),
            domain_name("evil.example.com"),
            ip_address("2001:db8::1"),
            ip_address("2001:db8::2"),
        ]

    def test_tags_require_key_and_value(self, scanner):
        values = scanner.scan([], {"tags": [{"key": "env", "value": ""}, {"key": "team"}, {"key": "a", "value": "b"}]})
        assert values == [aws_tag("a", "b")]

    def test_nested_structures(self, scanner):
        document = {
            "detail": {
                "resource": {
                    "instanceDetails": {
                        "instanceId": "i-99",
                        "networkInterfaces": [
                            {"privateIpAddress": "10.1.1.1", "ipv6Addresses": []},
                            {"publicIp": "54.1.1.1"},
                        ],
                    },
                },
                "items": [["arn:aws:sns:us-east-1:210987654321:topic"]],
            }
        }
        values = scanner.scan([], json.dumps(document))
        assert values == [
            aws_instance_id("i-99"),
            ip_address("10.1.1.1"),
            ip_address("54.1.1.1"),
            aws_arn("arn:aws:sns:us-east-1:210987654321:topic"),
            aws_account_id("210987654321"),
        ]

    def test_non_string_scalars_are_ignored(self, scanner):
        assert scanner.scan([], {"accountId": 123456789012, "publicIp": None, "instanceId": True}) == []

    def test_appends_to_accumulator(self, scanner):
        existing = [ip_address("10.0.0.1")]
        values = scanner.scan(existing, {"publicIp": "10.0.0.2"})
        assert values is existing
        assert values == [ip_address("10.0.0.1"), ip_address("10.0.0.2")]

    def test_decode_error_leaves_accumulator_untouched(self, scanner):
        existing = [ip_address("10.0.0.1")]
        with pytest.raises(ScanError):
            scanner.scan(existing, '{"publicIp": "10.0.0.2", ')
        assert existing == [ip_address("10.0.0.1")]
        # no residue from the failed input
        assert scanner.scan([], "{}") == []

    def test_scan_fields(self, scanner):
        fields = [("remote", "10.0.0.1"), ("publicIp", "10.0.0.2"), ("role", "arn:aws:iam::123456789012:root")]
        values = scanner.scan_fields([], fields)
        assert values == [
            ip_address("10.0.0.2"),
            aws_arn("arn:aws:iam::123456789012:root"),
            aws_account_id("123456789012"),
        ]

    def test_deeply_nested_text(self, scanner):
        existing = [ip_address("10.0.0.1")]
        depth = 5000
        text = '{"a":' * depth + '"arn:aws:iam::123456789012:root"' + "}" * depth
        with pytest.raises(ScanError):
            scanner.scan(existing, text)
        assert existing == [ip_address("10.0.0.1")]
        assert scanner.scan([], '{"publicIp": "10.0.0.2"}') == [ip_address("10.0.0.2")]

    def test_deeply_nested_document(self, scanner):
        document = {"publicIp": "10.0.0.2"}
        for _ in range(5000):
            document = {"a": document}
        existing = []
        with pytest.raises(ScanError):
            scanner.scan(existing, document)
        with pytest.raises(ScanError):
            scanner.scan_fields(existing, [("publicIp", "10.0.0.3"), ("nested", document)])
        assert existing == []
        assert scanner.scan([], "{}") == []

    def test_instance_arn_without_id(self, scanner):
        values = scanner.scan([], {"role": "arn:aws:ec2:us-east-1:123456789012:instance/"})
        assert values == [
            aws_arn("arn:aws:ec2:us-east-1:123456789012:instance/"),
            aws_account_id("123456789012"),
        ]

    def test_closed_scanner(self):
        scanner = ValueScanner()
        scanner.close()
        assert scanner.closed
        with pytest.raises(ScanError):
            scanner.scan([], "{}")


class TestScannerPool:
    def test_reuse(self):
        pool = ScannerPool(max_idle=2)
        first = pool.acquire()
        pool.release(first)
        assert pool.idle_count() == 1
        second = pool.acquire()
        assert second is first
        assert pool.idle_count() == 0

    def test_released_scanners_are_reset(self):
        pool = ScannerPool()
        scanner = pool.acquire()
        scanner._values.append(Value("ip_address", "10.0.0.1"))
        pool.release(scanner)
        assert pool.acquire().scan([], "{}") == []

    def test_extra_scanners_are_closed(self):
        pool = ScannerPool(max_idle=1)
        a, b = pool.acquire(), pool.acquire()
        pool.release(a)
        pool.release(b)
        assert pool.idle_count() == 1
        assert b.closed
        assert not a.closed

    def test_resize(self):
        pool = ScannerPool(max_idle=4)
        scanners = [pool.acquire() for _ in range(3)]
        for scanner in scanners:
            pool.release(scanner)
        pool.resize(1)
        assert pool.idle_count() == 1
        assert sum(scanner.closed for scanner in scanners) == 2
        with pytest.raises(ValueError):
            pool.resize(-1)

    def test_closed_scanners_are_not_pooled(self):
        pool = ScannerPool()
        scanner = pool.acquire()
        scanner.close()
        pool.release(scanner)
        assert pool.idle_count() == 0

    def test_borrow(self):
        pool = ScannerPool()
        with pool.borrow() as scanner:
            assert scanner.scan([], {"domain": "example.com"}) == [domain_name("example.com")]
        assert pool.idle_count() == 1

    def test_scan_values_uses_default_pool(self):
        assert scan_values({"publicIp": "10.0.0.1"}) == [ip_address("10.0.0.1")]
