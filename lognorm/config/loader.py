import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .defaults import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH
from .schema import LogNormConfig


class ConfigLoader:
    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        self.config_path = config_path

    def load(self) -> LogNormConfig:
        """
        Load configuration from YAML file, validation with Pydantic schema.
        Returns default config if file does not exist.
        """
        if not self.config_path.exists():
            return LogNormConfig()

        try:
            with open(self.config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
            if not isinstance(raw_config, dict):
                raise ValueError(f"Invalid configuration: expected a mapping in {self.config_path}")

            # Pydantic handles validation and default values
            return LogNormConfig(**raw_config)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing config file: {e}")
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}")


def load_config(path: Optional[Path] = None) -> LogNormConfig:
    """Helper function to load config from a specific path, $LOGNORM_CONFIG or the default."""
    if path is None and os.environ.get(CONFIG_PATH_ENV):
        path = Path(os.environ[CONFIG_PATH_ENV])
    loader = ConfigLoader(path or DEFAULT_CONFIG_PATH)
    return loader.load()
