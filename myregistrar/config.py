"""
Application settings.

Values come from environment variables prefixed with MYREGISTRAR_ (or a local
.env file), e.g.:

    MYREGISTRAR_DATA_DIR=/srv/registrar/data
    MYREGISTRAR_LOG_LEVEL=INFO
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # --- storage ---
    DATA_DIR: Path = PACKAGE_DIR / "data"

    # --- logging ---
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[Path] = None

    # --- remote catalog ---
    CATALOG_URL: str = ""
    REQUEST_TIMEOUT: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="MYREGISTRAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    A function instead of a module constant so tests can patch os.environ.
    """
    return Settings()
