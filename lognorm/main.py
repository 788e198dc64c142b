from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config.loader import load_config
from .config.schema import LogNormConfig
from .parser import register_all
from .parser.registry import Registry
from .parser.scanner import default_pool
from .utils.logging import get_logger, setup_logging

logger = get_logger("main")


@dataclass
class Runtime:
    config: LogNormConfig
    registry: Registry


def bootstrap(config_path: Optional[str] = None, log_level: Optional[str] = None) -> Runtime:
    """
    Load configuration, set up logging and register log types.

    Registration failures propagate: a process that cannot register its
    log types must not start.
    """
    config = load_config(Path(config_path) if config_path else None)
    setup_logging(log_level or config.logging.level, Path(config.logging.file) if config.logging.file else None)

    default_pool.resize(config.scanner.pool_size)

    registry = Registry()
    register_all(registry, config.ingest.log_types or None)
    logger.debug(f"Registered {len(registry)} log types")
    return Runtime(config=config, registry=registry)
