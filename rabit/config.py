import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .tracker import WEEKDAYS

APP_DIR = "rabit"
FILE_NAME = "habit.json"
DEFAULT_PROFILE = "default"
DEFAULT_WEEK_START = "mon"


class ConfigError(ValueError):
    pass


@dataclass
class Config:
    data_path: str
    week_start: str = DEFAULT_WEEK_START
    db_url: Optional[str] = None
    profile: str = DEFAULT_PROFILE
    log_file: Optional[str] = None


def default_data_path(env: Mapping[str, str]) -> str:
    base = env.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, APP_DIR, FILE_NAME)


def load_config(
    data_path: Optional[str] = None,
    week_start: Optional[str] = None,
    log_file: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Config:
    env = os.environ if env is None else env
    path = data_path or env.get("RABIT_FILE") or default_data_path(env)
    start = (week_start or env.get("RABIT_WEEK_START") or DEFAULT_WEEK_START).lower()
    if start not in WEEKDAYS:
        raise ConfigError(f"Week start must be one of {', '.join(WEEKDAYS)}, got '{start}'.")
    return Config(
        data_path=os.path.expanduser(path),
        week_start=start,
        db_url=env.get("DATABASE_URL") or env.get("RABIT_DB_URL"),
        profile=env.get("RABIT_PROFILE", DEFAULT_PROFILE),
        log_file=log_file or env.get("RABIT_LOG_FILE"),
    )
