from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .errors import ParseError
from .parser.base import LogParser
from .parser.registry import Registry
from .parser.values import Event
from .utils.logging import get_logger

logger = get_logger("parse_pipeline")


@dataclass
class ParseOutcome:
    """What one input line produced: events, or the error that rejected it."""

    line_number: int
    line: str
    events: List[Event] = field(default_factory=list)
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineStats:
    lines: int = 0
    events: int = 0
    failures: int = 0
    skipped: int = 0


class ParsePipeline:
    """
    Feeds raw lines of one log type through a dedicated parser instance.

    Per-line failures become outcomes; nothing is retried or persisted.
    """

    def __init__(self, registry: Registry, log_type: str):
        self.entry = registry.must_get(log_type)
        self.parser: LogParser = self.entry.new_parser()
        self.stats = PipelineStats()

    @property
    def log_type(self) -> str:
        return self.entry.name

    def process(self, line: str, line_number: int = 0) -> ParseOutcome:
        self.stats.lines += 1
        outcome = ParseOutcome(line_number=line_number, line=line)
        try:
            outcome.events = self.parser.parse(line)
        except ParseError as e:
            logger.debug(f"Line {line_number} rejected: {e}")
            outcome.error = e
            self.stats.failures += 1
            return outcome
        self.stats.events += len(outcome.events)
        return outcome

    def run(self, lines: Iterable[str]) -> Iterator[ParseOutcome]:
        """Process lines in order. Blank lines are skipped."""
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                self.stats.skipped += 1
                continue
            yield self.process(line, line_number)

    def close(self):
        self.parser.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
