from pathlib import Path

DEFAULT_CONFIG_PATH = Path("/etc/lognorm/config.yml")
CONFIG_PATH_ENV = "LOGNORM_CONFIG"
