"""User configuration for drdisk."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DRDISK_CONFIG"
CONFIG_DIR = Path(os.path.expanduser("~/.drdisk"))
CONFIG_FILE = CONFIG_DIR / "config.json"


class Config(BaseModel):
    """Defaults for command line options."""

    total_disk_color: bool = Field(
        False, description="Use total disk space for color thresholds by default"
    )
    verbosity: int = Field(0, ge=0, description="Default log verbosity (1 info, 2 debug)")


def config_path(path: Optional[Path] = None) -> Path:
    """Resolve the config file: explicit path, then $DRDISK_CONFIG, then ~/.drdisk."""
    if path is not None:
        return Path(path)
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(os.path.expanduser(env))
    return CONFIG_FILE


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from disk, falling back to defaults."""
    path = config_path(path)
    if not path.exists():
        return Config()

    try:
        with open(path) as f:
            return Config.model_validate(json.load(f))
    except (json.JSONDecodeError, OSError, ValidationError) as e:
        log.warning("Ignoring invalid config file %s: %s", path, e)
        return Config()
