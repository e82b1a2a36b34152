from __future__ import annotations
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", alias="ARBOR_LOG_LEVEL")

    # Default directory for root/proof documents written by the CLI
    storage_dir: str = Field(default="./storage", alias="ARBOR_STORAGE_DIR")

    digest_display: Literal["hex", "b64"] = Field(
        default="hex", alias="ARBOR_DIGEST_DISPLAY"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()  # load at import
