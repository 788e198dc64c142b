from abc import ABC, abstractmethod
from typing import List

from .values import Event


class LogParser(ABC):
    """
    Parser for one log type.

    Instances may hold scratch state and must not be shared between
    concurrent workers; use new() to get an independent instance.
    """

    def __init__(self, name: str):
        self.name = name

    @property
    def log_type(self) -> str:
        return self.name

    @abstractmethod
    def parse(self, line: str) -> List[Event]:
        """
        Parse one raw log line into one or more events.

        Raises ParseError if the line does not belong to this log type.
        """
        pass

    def new(self) -> "LogParser":
        return type(self)()

    def close(self):
        """Release any resources held by the parser."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
