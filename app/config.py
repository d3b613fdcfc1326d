from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import RoundingConfig

DEFAULT_CONFIG_PATH = Path("config/fdl.yaml")


class RoundingSettings(BaseModel):
    even: Literal["whole", "even"] = "whole"
    mode: Literal["up", "down", "round"] = "round"

    @field_validator("even", "mode", mode="before")
    @classmethod
    def normalize_choice(cls, value: object) -> str:
        return str(value).strip().lower()

    def to_config(self) -> RoundingConfig:
        return RoundingConfig(even=self.even, mode=self.mode)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FDL_", env_nested_delimiter="__")

    log_level: str = "WARNING"
    fdl_creator: str = "fdl-framing-engine"
    version_minor: int = Field(default=0, ge=0, le=1)
    camera_table_path: Path | None = None
    indent_output: bool = True
    rounding: RoundingSettings = RoundingSettings()

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "WARNING").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_sources: tuple[PydanticBaseSettingsSource, ...] = ()
        if cls._yaml_path is not None:
            yaml_sources = (YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path),)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings, *yaml_sources)


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then ``FDL_CONFIG_PATH``, then ``config/fdl.yaml`` if present."""
    env_path = os.getenv("FDL_CONFIG_PATH")
    candidate = config_path or (Path(env_path) if env_path else None)
    if candidate is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.is_file() else None
    if not candidate.is_file():
        msg = f"Config file not found: {candidate}"
        raise FileNotFoundError(msg)
    return candidate


def load_settings(config_path: Path | None = None) -> AppSettings:
    yaml_path = resolve_config_path(config_path)
    saved, AppSettings._yaml_path = AppSettings._yaml_path, yaml_path
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = saved
