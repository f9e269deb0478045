from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogFormat = Literal["json", "console"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JAVAC_PIPELINE_",
        env_file=".env",
        extra="ignore",
    )

    out_dir: Path = Field(default=Path("out"))
    javac_path: str = Field(default="javac")
    jar_path: str = Field(default="jar")
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default="console")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()
