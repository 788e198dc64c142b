"""
Generic indicator extraction from nested JSON structures.

The scanner knows nothing about the shape of a specific log format. It
walks any decoded JSON document (or a flat list of key/value fields) and
recognizes AWS identifiers, IP addresses, domain names and tags using
key names and value shapes.
"""

import json
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from ..errors import ScanError
from ..utils.logging import get_logger
from .values import (
    Value,
    aws_account_id,
    aws_arn,
    aws_instance_id,
    aws_tag,
    domain_name,
    ip_address,
)

logger = get_logger("value_scanner")

ARN_PREFIX = "arn:"
INSTANCE_ID_PREFIX = "i-"

IP_ADDRESS_KEYS = frozenset(["publicIp", "privateIpAddress", "ipAddressV4"])
DOMAIN_NAME_KEYS = frozenset(["publicDnsName", "privateDnsName", "domain"])


@dataclass(frozen=True)
class ARN:
    partition: str
    service: str
    region: str
    account_id: str
    resource: str


def parse_arn(value: str) -> ARN:
    """
    Split an ARN into its sections.

    Formats:
        arn:partition:service:region:account-id:resource-id
        arn:partition:service:region:account-id:resource-type/resource-id
        arn:partition:service:region:account-id:resource-type:resource-id
    """
    if not value.startswith(ARN_PREFIX):
        raise ValueError(f"arn: invalid prefix in {value!r}")
    sections = value.split(":", 5)
    if len(sections) != 6:
        raise ValueError(f"arn: not enough sections in {value!r}")
    return ARN(*sections[1:])


class ValueScanner:
    """
    Accumulates indicator values by walking through a JSON document.

    A scanner holds a scratch buffer and is not safe for concurrent use.
    Borrow one per worker from a ScannerPool.
    """

    def __init__(self):
        self._values: List[Value] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def reset(self):
        self._values.clear()

    def close(self):
        self._values = []
        self._closed = True

    def scan(self, values: List[Value], data: Any) -> List[Value]:
        """
        Append the values found in data to the values list and return it.

        data is either JSON text or an already decoded document. On error
        the values list is left untouched.
        """
        if self._closed:
            raise ScanError("scan on a closed scanner")
        self.reset()
        if isinstance(data, (str, bytes, bytearray)):
            try:
                data = json.loads(data)
            except (ValueError, RecursionError) as e:
                raise ScanError(f"invalid JSON input: {e}") from e
        try:
            self._visit("", data)
        except RecursionError as e:
            self.reset()
            raise ScanError(f"input nested too deeply: {e}") from e
        return self._flush(values)

    def scan_fields(self, values: List[Value], fields: Iterable[Tuple[str, Any]]) -> List[Value]:
        """Same as scan for a flat ordered list of (key, value) fields."""
        if self._closed:
            raise ScanError("scan on a closed scanner")
        self.reset()
        try:
            for key, value in fields:
                self._visit(key, value)
        except RecursionError as e:
            self.reset()
            raise ScanError(f"input nested too deeply: {e}") from e
        return self._flush(values)

    def _flush(self, values: List[Value]) -> List[Value]:
        values.extend(self._values)
        self.reset()
        return values

    def _append(self, value: Optional[Value]):
        if value is not None:
            self._values.append(value)

    def _visit(self, key: str, value: Any):
        if isinstance(value, str):
            self._visit_string(key, value)
        elif isinstance(value, dict):
            for k, v in value.items():
                self._visit(k, v)
        elif isinstance(value, list):
            self._visit_array(key, value)

    def _visit_string(self, key: str, value: str):
        # value based matching takes precedence over any key rule
        if value.startswith(ARN_PREFIX):
            self._visit_arn(value)
            return

        if key == "instanceId" or key.endswith("InstanceId"):
            if value.startswith(INSTANCE_ID_PREFIX):
                self._append(aws_instance_id(value))
            return

        if key == "accountId" or key.endswith("AccountId"):
            self._append(aws_account_id(value))
            return

        if key in IP_ADDRESS_KEYS:
            self._append(ip_address(value))
        elif key in DOMAIN_NAME_KEYS:
            self._append(domain_name(value))

    def _visit_arn(self, value: str):
        try:
            arn = parse_arn(value)
        except ValueError:
            logger.debug(f"Skipping malformed ARN {value!r}")
            return
        self._append(aws_arn(value))
        self._append(aws_account_id(arn.account_id))
        # https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/iam-policy-structure.html#EC2_ARN_Format
        if arn.resource.startswith("instance/"):
            instance_id = arn.resource.rsplit("/", 1)[1]
            if instance_id.startswith(INSTANCE_ID_PREFIX):
                self._append(aws_instance_id(instance_id))

    def _visit_array(self, key: str, items: list):
        if key == "tags":
            for item in items:
                if isinstance(item, dict):
                    tag_key, tag_value = item.get("key"), item.get("value")
                    if isinstance(tag_key, str) and isinstance(tag_value, str):
                        self._append(aws_tag(tag_key, tag_value))
            return

        if key == "ipv6Addresses":
            for item in items:
                if isinstance(item, str):
                    self._append(ip_address(item))
            return

        for item in items:
            if isinstance(item, dict):
                self._visit("", item)
            elif isinstance(item, list):
                self._visit_array("", item)
            elif isinstance(item, str) and item.startswith(ARN_PREFIX):
                self._visit_arn(item)


class ScannerPool:
    """
    Pool of reusable scanners.

    Scanners are reset when borrowed and again when returned, so a caller
    never sees values left over from a previous input. At most max_idle
    scanners are kept, extra ones are closed on release.
    """

    def __init__(self, factory: Callable[[], ValueScanner] = ValueScanner, max_idle: int = 16):
        self._factory = factory
        self._max_idle = max_idle
        self._idle: List[ValueScanner] = []
        self._lock = threading.Lock()

    @property
    def max_idle(self) -> int:
        return self._max_idle

    def resize(self, max_idle: int):
        if max_idle < 0:
            raise ValueError(f"invalid scanner pool size {max_idle}")
        with self._lock:
            self._max_idle = max_idle
            extra, self._idle = self._idle[max_idle:], self._idle[:max_idle]
        for scanner in extra:
            scanner.close()

    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)

    def acquire(self) -> ValueScanner:
        with self._lock:
            scanner = self._idle.pop() if self._idle else None
        if scanner is None:
            scanner = self._factory()
        scanner.reset()
        return scanner

    def release(self, scanner: ValueScanner):
        if scanner.closed:
            return
        scanner.reset()
        with self._lock:
            if len(self._idle) < self._max_idle and scanner not in self._idle:
                self._idle.append(scanner)
                return
        scanner.close()

    @contextmanager
    def borrow(self) -> Iterator[ValueScanner]:
        scanner = self.acquire()
        try:
            yield scanner
        finally:
            self.release(scanner)


default_pool = ScannerPool()


def scan_values(data: Any, values: Optional[List[Value]] = None) -> List[Value]:
    """Scan data with a scanner borrowed from the default pool."""
    if values is None:
        values = []
    with default_pool.borrow() as scanner:
        return scanner.scan(values, data)
