"""Core layer: configuration, exceptions, structured logging, and YAML loading.

Sits in the middle of the diamond DAG -- depends only on ``mockstr.models``
and is depended upon by ``mockstr.relay``, ``mockstr.transport`` and
``mockstr.fixtures``.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes,
        with per-session context via
        [bind()][mockstr.core.logger.Logger.bind].
    SimulatorConfig: Interception patterns, passthrough, and debug flags.
        See [SimulatorConfig][mockstr.core.config.SimulatorConfig].
    ServerConfig: Bind address of the standalone relay server.
    MockstrConfig: Root CLI configuration with
        [from_yaml()][mockstr.core.config.MockstrConfig.from_yaml].
    MockstrError: Root of the exception hierarchy.
        See [mockstr.core.exceptions][mockstr.core.exceptions].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
"""

from .config import MockstrConfig, ServerConfig, SimulatorConfig, validate_config
from .exceptions import (
    ConfigurationError,
    FixtureError,
    InvalidEventError,
    MalformedFrameError,
    MockstrError,
    ProtocolError,
    ReferentialIntegrityError,
    RelayClosedError,
    WaitTimeoutError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "FixtureError",
    "InvalidEventError",
    "Logger",
    "MalformedFrameError",
    "MockstrConfig",
    "MockstrError",
    "ProtocolError",
    "ReferentialIntegrityError",
    "RelayClosedError",
    "ServerConfig",
    "SimulatorConfig",
    "StructuredFormatter",
    "WaitTimeoutError",
    "format_kv_pairs",
    "load_yaml",
    "validate_config",
]
