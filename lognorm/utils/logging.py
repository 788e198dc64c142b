import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_file: Optional[Path] = None):
    """
    Configure logging with Rich for console output
    and standard formatting for file output.

    Console output goes to stderr so parsed events can be piped from stdout.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    if os.environ.get("LOGNORM_NO_RICH"):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers = [handler]
    else:
        handlers = [RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str):
    return logging.getLogger(f"lognorm.{name}")
