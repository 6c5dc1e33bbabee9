"""
Configuration settings for the discount engine.

Uses Pydantic Settings to load environment variables for the input file, the
record store, logging, and batch behaviour. Values can also come from a local
`.env` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MalformedRowPolicy = Literal["abort", "skip"]


class Settings(BaseSettings):
    # Database (used by the postgres record store)
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("discount_engine", alias="DB_NAME")
    db_connect_timeout: int = Field(5, alias="DB_CONNECT_TIMEOUT")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    # Batch defaults
    input_path: str = Field("data/sample_transactions.csv", alias="INPUT_PATH")
    input_has_header: bool = Field(True, alias="INPUT_HAS_HEADER")
    malformed_row_policy: MalformedRowPolicy = Field("abort", alias="MALFORMED_ROW_POLICY")
    record_store: str = Field("log", alias="RECORD_STORE")
    store_delay_ms: int = Field(0, alias="STORE_DELAY_MS")
    preview_rows: int = Field(10, alias="PREVIEW_ROWS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["MalformedRowPolicy", "Settings", "get_settings"]
