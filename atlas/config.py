import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from atlas.constants import BASE64_MIN_RUN, MAX_DEPTH, MAX_TABLE_COLSPAN, WHITESPACE_MIN_RUN


class Settings(BaseSettings):
    max_depth: int = Field(default=MAX_DEPTH, ge=1)  # block nesting rendered before truncation
    max_table_colspan: int = Field(default=MAX_TABLE_COLSPAN, ge=1)

    # Confluence cleanup thresholds
    base64_min_run: int = Field(default=BASE64_MIN_RUN, ge=1)
    whitespace_min_run: int = Field(default=WHITESPACE_MIN_RUN, ge=2)

    log_level: str = "INFO"
    log_file: Path | None = None  # JSON lines, rotated

    model_config = SettingsConfigDict(
        env_prefix="ATLAS_",
        env_file=[os.getenv("ENV_FILE", ""), ".env"],
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
