"""
Log parsers and the registry of supported log types.

Formats are not registered as a side effect of importing them. The
process entry point calls register_all() (or default_registry()) once at
startup and any failure aborts startup.
"""

import threading
from typing import Iterable, List, Optional

from ..utils.logging import get_logger
from . import apache, cloudtrail, fluentd, gitlab, nginx, osquery, suricata, zeek
from .registry import LogType, Registry

logger = get_logger("parser")

# Registration order
FORMAT_MODULES = [apache, nginx, cloudtrail, suricata, zeek, gitlab, osquery, fluentd]


def all_log_types() -> List[LogType]:
    log_types: List[LogType] = []
    for module in FORMAT_MODULES:
        log_types.extend(module.LOG_TYPES)
    return log_types


def register_all(registry: Registry, names: Optional[Iterable[str]] = None) -> Registry:
    """
    Register every shipped log type, or only the named ones.

    Raises RegistrationError on the first failure.
    """
    wanted = set(names) if names is not None else None
    for log_type in all_log_types():
        if wanted is not None and log_type.name not in wanted:
            continue
        try:
            registry.register(log_type)
        except Exception as e:
            logger.error(f"Failed to register log type {log_type.name}: {e}")
            raise
    if wanted:
        missing = wanted.difference(entry.name for entry in registry.available_types())
        if missing:
            logger.warning(f"Unknown log types requested: {', '.join(sorted(missing))}")
    return registry


_default_registry: Optional[Registry] = None
_default_lock = threading.Lock()


def default_registry() -> Registry:
    """The process-wide registry holding every shipped log type."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = register_all(Registry())
        return _default_registry


__all__ = ["LogType", "Registry", "all_log_types", "default_registry", "register_all"]
