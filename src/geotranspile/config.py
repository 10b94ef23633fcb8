"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Transpiler settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEOTRANSPILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None  # append-mode log, stderr only when unset

    # Serializer
    coordinate_precision: int = Field(default=6, ge=0, le=17)
    write_buffer_size: int = Field(default=8192, ge=1)  # characters per sink write

    # File I/O
    encoding: str = "utf-8"


settings = Settings()
