"""Pydantic configuration models for bakebot."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LLM_PROVIDERS = {"auto", "openai", "claude"}
VALID_STORE_BACKENDS = {"sqlite", "json"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LLMConfig(BaseModel):
    """LLM provider configuration for the intent oracle."""

    provider: str = "auto"
    model: Optional[str] = None  # None = provider default
    api_key: Optional[str] = None
    max_tokens: int = 600
    max_attempts: int = 3

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    data_dir: Path = Path("~/.bakebot")
    catalog_file: Optional[Path] = None  # None = built-in bakery catalog
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.data_dir = self.data_dir.expanduser()
        if self.catalog_file:
            self.catalog_file = self.catalog_file.expanduser()
        if self.log_file:
            self.log_file = self.log_file.expanduser()
        return self


class StoreConfig(BaseModel):
    """Document store backend."""

    backend: str = "sqlite"

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        if v not in VALID_STORE_BACKENDS:
            raise ValueError(f"Invalid store backend: {v}. Must be one of {VALID_STORE_BACKENDS}")
        return v


class InventoryConfig(BaseModel):
    """Reconciliation and reporting knobs."""

    history_limit: int = Field(default=500, ge=1)
    tonight_hour: int = Field(default=20, ge=0, le=23)
    recent_count: int = Field(default=3, ge=0)
    max_predictions: int = Field(default=5, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_mode: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class BakebotConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    inventory: InventoryConfig = Field(default_factory=InventoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} patterns in the API key."""
        key = self.llm.api_key
        if key and key.startswith("${") and key.endswith("}"):
            self.llm.api_key = os.getenv(key[2:-1], "") or None
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "BakebotConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
