"""Settings loaded from UPKEEP_* environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .classifier import CRITICAL_DAYS, SOON_DAYS

ENV_PREFIX = "UPKEEP"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


@dataclass
class Settings:
    data_file: Path = Path("upkeep.yaml")
    soon_days: int = SOON_DAYS
    critical_days: int = CRITICAL_DAYS
    log_level: int = logging.WARNING
    secret_key: str = "dev-secret-key-change-in-prod"


def load_settings() -> Settings:
    """Read settings from the environment; bad values fall back to defaults."""
    defaults = Settings()
    return Settings(
        data_file=_env_path(_k("DATA_FILE"), defaults.data_file),
        soon_days=_env_int(_k("SOON_DAYS"), defaults.soon_days),
        critical_days=_env_int(_k("CRITICAL_DAYS"), defaults.critical_days),
        log_level=_env_log_level(_k("LOG_LEVEL"), defaults.log_level),
        secret_key=os.environ.get("SECRET_KEY", defaults.secret_key),
    )
