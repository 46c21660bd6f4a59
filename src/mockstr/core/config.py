"""
Pydantic configuration models for the simulator, server, and CLI.

All models validate at construction. Loading from YAML goes through
[load_yaml()][mockstr.core.yaml.load_yaml]; pydantic validation errors are
re-raised as [ConfigurationError][mockstr.core.exceptions.ConfigurationError]
so callers handle a single exception type.

Examples:
    ```yaml
    simulator:
      intercept_urls:
        - localhost:7000
        - "wss://*.example.com"
      passthrough: false
      debug: true
    server:
      host: 127.0.0.1
      port: 7000
    seed_files:
      - seeds/repos.yaml
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .yaml import load_yaml


ModelT = TypeVar("ModelT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Configuration Models
# ---------------------------------------------------------------------------


class SimulatorConfig(BaseModel):
    """Behavior of a [RelaySimulator][mockstr.relay.simulator.RelaySimulator].

    An empty ``intercept_urls`` list intercepts every ``ws://``/``wss://``
    connection.
    """

    intercept_urls: list[str] = Field(
        default_factory=list, description="URL patterns routed into the simulator"
    )
    passthrough: bool = Field(
        default=True, description="Let unmatched WebSocket URLs reach real infrastructure"
    )
    latency: float = Field(
        default=0.0, ge=0.0, description="Seconds each relay frame is held before delivery"
    )
    debug: bool = Field(default=False, description="Log every frame received and sent")
    json_logs: bool = Field(default=False, description="Emit log records as JSON lines")

    @field_validator("intercept_urls")
    @classmethod
    def _no_blank_patterns(cls, v: list[str]) -> list[str]:
        patterns = [p.strip() for p in v]
        if any(not p for p in patterns):
            raise ValueError("intercept_urls must not contain empty patterns")
        return patterns


class ServerConfig(BaseModel):
    """Bind address of the standalone [RelayServer][mockstr.transport.server.RelayServer].

    ``port=0`` binds an ephemeral port.
    """

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=7000, ge=0, le=65535, description="Bind port (0 = ephemeral)")


class MockstrConfig(BaseModel):
    """Root configuration consumed by ``python -m mockstr``."""

    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    seed_files: list[Path] = Field(
        default_factory=list, description="YAML/JSON files of wire events seeded at startup"
    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> MockstrConfig:
        """Load and validate configuration from a YAML file.

        Relative ``seed_files`` entries are resolved against the directory
        of *config_path*.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file is not valid YAML or fails validation.
        """
        try:
            data = load_yaml(config_path)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {config_path}: {e}") from e
        config = cls.from_dict(data)
        base = Path(config_path).parent
        config.seed_files = [p if p.is_absolute() else base / p for p in config.seed_files]
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MockstrConfig:
        """Validate a configuration dictionary.

        Raises:
            ConfigurationError: If *data* is not a mapping or fails validation.
        """
        return validate_config(cls, data)


def validate_config(model: type[ModelT], data: Any) -> ModelT:
    """Validate *data* against *model*, wrapping pydantic errors.

    Raises:
        ConfigurationError: If *data* is not a mapping or fails validation.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"{model.__name__} expects a mapping, got {type(data).__name__}"
        )
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid {model.__name__}: {e}") from e
