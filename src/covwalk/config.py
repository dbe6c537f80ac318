"""Configuration settings and loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from covwalk.agent import Advance
from covwalk.agent.coverer import BestPathRandom
from covwalk.core.coverage import CoverageKind
from covwalk.errors import ConfigValidationError, ErrorContext

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CovwalkConfig(BaseSettings):
    """Configuration for a test generation session."""

    model_config = SettingsConfigDict(
        env_prefix="COVWALK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_depth: int = 6
    max_steps: int | None = None
    seed: int | None = None
    randomness: str = "none"
    advance: str = "first_increase"
    coverage: list[str] | str = Field(default_factory=lambda: ["state_actions"])
    combination_length: int = 1
    strict_paths: bool = False
    log_level: str = "WARNING"

    @field_validator("max_depth", "combination_length")
    @classmethod
    def validate_positive(cls, v: int, info: ValidationInfo) -> int:
        if v < 1:
            raise ConfigValidationError(
                message=f"{info.field_name} must be at least 1, got {v}",
                field=info.field_name,
                value=v,
            )
        return v

    @field_validator("randomness")
    @classmethod
    def validate_randomness(cls, v: str) -> str:
        valid = [mode.name.lower() for mode in BestPathRandom]
        if v.lower() not in valid:
            raise ConfigValidationError(
                message=f"Invalid randomness: {v!r}. Valid: {valid}",
                field="randomness",
                value=v,
                context=ErrorContext(extra={"valid_modes": valid}),
            )
        return v.lower()

    @field_validator("advance")
    @classmethod
    def validate_advance(cls, v: str) -> str:
        valid = [mode.value for mode in Advance]
        if v not in valid:
            raise ConfigValidationError(
                message=f"Invalid advance mode: {v!r}. Valid: {valid}",
                field="advance",
                value=v,
            )
        return v

    @field_validator("coverage", mode="before")
    @classmethod
    def validate_coverage(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",") if item.strip()]
        valid = {kind.value for kind in CoverageKind}
        invalid = set(v) - valid
        if invalid:
            raise ConfigValidationError(
                message=f"Invalid coverage kinds: {sorted(invalid)}. Valid: {sorted(valid)}",
                field="coverage",
                value=v,
                context=ErrorContext(extra={"valid_kinds": sorted(valid)}),
            )
        return list(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigValidationError(
                message=f"Invalid log level: {v!r}",
                field="log_level",
                value=v,
            )
        return level


def load_config(config_path: str | Path | None = None) -> CovwalkConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

    config_data.update(_get_env_overrides())
    return CovwalkConfig(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "COVWALK_MAX_DEPTH": ("max_depth", int),
        "COVWALK_MAX_STEPS": ("max_steps", int),
        "COVWALK_SEED": ("seed", int),
        "COVWALK_RANDOMNESS": "randomness",
        "COVWALK_ADVANCE": "advance",
        "COVWALK_COVERAGE": "coverage",
        "COVWALK_STRICT_PATHS": ("strict_paths", lambda x: x.lower() in ("true", "1", "yes")),
        "COVWALK_LOG_LEVEL": "log_level",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Attach a stream handler to the covwalk logger unless one exists."""
    logger = logging.getLogger("covwalk")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
