"""Shared configuration primitives for the shoprec package."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, TypeVar
import tomllib

from pydantic import BaseModel, ConfigDict, Field

from .const import ALGORITHM_ENV


class BaseConfig(BaseModel):
    """Base config with strict validation rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_toml(cls: "type[C]", path: Path) -> "C":
        """Construct the config object from a TOML file."""
        data = _load_toml(path)
        return cls.model_validate(data)


C = TypeVar("C", bound="BaseConfig")


def load_config(config_cls: type[C], path: Path) -> C:
    """Parse the given TOML file into the provided config class."""
    return config_cls.from_toml(path)


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    if not isinstance(data, dict):
        raise ValueError("Root TOML value must be a table")
    return data


__all__ = ["BaseConfig", "load_config"]


class RecommenderConfig(BaseConfig):
    """Algorithm selection settings."""

    algorithm: str | None = None
    max_recommendations: int = Field(default=10, ge=1)


class RestClientConfig(BaseConfig):
    """Connection settings for a REST service such as the persistence service."""

    host: str
    application: str = "rest"
    use_https: bool = False
    connect_timeout: float = Field(default=0.6, gt=0)
    read_timeout: float = Field(default=6.0, gt=0)
    # Historic deployments trusted every certificate; keep it explicit here.
    verify_tls: bool = False


class TrainingConfig(BaseConfig):
    """Retraining schedule."""

    interval_seconds: float | None = Field(default=None, gt=0)
    max_order_time: datetime | None = None


class AppConfig(BaseConfig):
    """Application configuration."""

    recommender: RecommenderConfig = RecommenderConfig()
    persistence: RestClientConfig | None = None
    training: TrainingConfig = TrainingConfig()


__all__ += [
    "RecommenderConfig",
    "RestClientConfig",
    "TrainingConfig",
    "AppConfig",
]


# ---------------------------------------------------------------------- #
# Key/value providers consumed by the recommender selector
# ---------------------------------------------------------------------- #


class ConfigProvider(Protocol):
    """Anything that can answer a single named setting."""

    def get(self, key: str) -> str | None:
        """Return the value for ``key`` or ``None`` when it is not set."""


class MappingConfigProvider:
    """Serve settings from a plain mapping."""

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._mapping = dict(mapping or {})

    def get(self, key: str) -> str | None:
        return self._mapping.get(key)


class EnvConfigProvider:
    """Serve settings from the process environment."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key)


class AppConfigProvider:
    """Expose values of an :class:`AppConfig` under their environment keys.

    Keys missing from the file fall through to ``fallback`` (the environment
    by default), so a deployment can still override the TOML file.
    """

    def __init__(self, config: AppConfig, fallback: ConfigProvider | None = None) -> None:
        self.config = config
        self._fallback = fallback if fallback is not None else EnvConfigProvider()

    def get(self, key: str) -> str | None:
        if key == ALGORITHM_ENV and self.config.recommender.algorithm is not None:
            return self.config.recommender.algorithm
        return self._fallback.get(key)


__all__ += [
    "ConfigProvider",
    "MappingConfigProvider",
    "EnvConfigProvider",
    "AppConfigProvider",
]
