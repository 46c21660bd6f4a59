r"""Mockstr -- deterministic Nostr relay simulator for end-to-end tests.

Stands in for the relays a Nostr web client talks to: intercepts the
client's WebSocket connections, replays seeded events through subscription
filters, fans injected events out live, and captures what the client
publishes so tests can wait for and assert on it.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
              relay   fixtures   transport    Simulator, scenarios, transports
                 \       |       /
                       core                   Config, exceptions, logging, YAML
                        |
                      models                  Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Pure frozen dataclasses (events, filters, addresses, relay URLs).
    core: Configuration, exceptions, structured logging, YAML loading.
    relay: Event store, filter engine, subscriptions, capture, simulator.
    transport: Playwright interceptor and standalone aiohttp relay server.
    fixtures: Test identities, NIP-34 event builders, scenario builder.
    testing: pytest plugin with isolation hook and fixtures.

Note:
    Top-level imports (``from mockstr import RelaySimulator``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("mockstr")

__all__ = [
    "Address",
    "Event",
    "EventKind",
    "Filter",
    "Logger",
    "MockstrConfig",
    "MockstrError",
    "PlaywrightInterceptor",
    "RelayClosedError",
    "RelayServer",
    "RelaySimulator",
    "ScenarioBuilder",
    "ServerConfig",
    "Session",
    "SimulatorConfig",
    "StatusKind",
    "TEST_IDENTITIES",
    "Tag",
    "WaitTimeoutError",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Address": ("mockstr.models", "Address"),
    "Event": ("mockstr.models", "Event"),
    "EventKind": ("mockstr.models", "EventKind"),
    "Filter": ("mockstr.models", "Filter"),
    "StatusKind": ("mockstr.models", "StatusKind"),
    "Tag": ("mockstr.models", "Tag"),
    "Logger": ("mockstr.core", "Logger"),
    "MockstrConfig": ("mockstr.core", "MockstrConfig"),
    "MockstrError": ("mockstr.core", "MockstrError"),
    "RelayClosedError": ("mockstr.core", "RelayClosedError"),
    "ServerConfig": ("mockstr.core", "ServerConfig"),
    "SimulatorConfig": ("mockstr.core", "SimulatorConfig"),
    "WaitTimeoutError": ("mockstr.core", "WaitTimeoutError"),
    "RelaySimulator": ("mockstr.relay", "RelaySimulator"),
    "Session": ("mockstr.relay", "Session"),
    "PlaywrightInterceptor": ("mockstr.transport", "PlaywrightInterceptor"),
    "RelayServer": ("mockstr.transport", "RelayServer"),
    "ScenarioBuilder": ("mockstr.fixtures", "ScenarioBuilder"),
    "TEST_IDENTITIES": ("mockstr.fixtures", "TEST_IDENTITIES"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'mockstr' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
