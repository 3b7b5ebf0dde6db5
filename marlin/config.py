import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from marlin.core.constants import DEFAULT_TT_SIZE
from marlin.core.errors import InvalidConfigError

load_dotenv()

# Installed next to this module
DEFAULT_CONFIG_PATH = Path(__file__).with_name("settings.yaml")


class Settings(BaseModel):
    tt_size: int = Field(default=DEFAULT_TT_SIZE, gt=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


def _read_section(path: Path) -> dict:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"{path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfigError(f"{path}: expected a mapping at the top level")
    section = data.get("solver") or {}
    if not isinstance(section, dict):
        raise InvalidConfigError(f"{path}: 'solver' must be a mapping")
    return section


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Reads the `solver:` section of a YAML file, then applies environment overrides.
    A missing file just means defaults.
    """
    path = Path(path or os.getenv("MARLIN_CONFIG") or DEFAULT_CONFIG_PATH)
    values = {}

    if path.is_file():
        values.update(_read_section(path))

    # Environment wins over the file
    if os.getenv("MARLIN_TT_SIZE"):
        values["tt_size"] = os.getenv("MARLIN_TT_SIZE")
    if os.getenv("MARLIN_LOG_LEVEL"):
        values["log_level"] = os.getenv("MARLIN_LOG_LEVEL")

    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
