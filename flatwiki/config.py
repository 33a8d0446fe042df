from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flatwiki.models.page import is_valid_title

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # Storage
    DATA_DIR: Path = Path("data")
    TEMPLATE_DIR: Path = PACKAGE_DIR / "templates"

    # Wiki
    FRONT_PAGE: str = "FrontPage"

    # Server
    HOST: str = "localhost"
    PORT: int = 8080
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("FRONT_PAGE")
    def validate_front_page(cls, v: str):
        if not is_valid_title(v):
            raise ValueError("FRONT_PAGE must contain only letters and digits")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    model_config = SettingsConfigDict(env_prefix="WIKI_", env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
