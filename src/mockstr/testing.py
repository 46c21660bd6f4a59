"""
pytest plugin: per-test isolation and simulator fixtures.

Registered through the ``pytest11`` entry point, so installing mockstr makes
these fixtures available everywhere:

* ``relay_simulator`` -- the process-wide
  [RelaySimulator][mockstr.relay.simulator.RelaySimulator], reset before
  and after every test (no events, captures, sessions or hooks leak).
* ``scenario`` -- a fresh [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder].
* ``make_session`` -- factory opening a session on ``relay_simulator``
  whose outbound frames are collected by a
  [FrameRecorder][mockstr.testing.FrameRecorder].

The simulator configuration can be set with the ``mockstr_config`` ini
option (path to a YAML file of ``SimulatorConfig`` fields).

Examples:
    ```python
    def test_backlog(relay_simulator, scenario, make_session):
        scenario.repo("repo-x").seed(relay_simulator)
        session, client = make_session()
        session.handle_frame(client_frame("REQ", "repos", {"kinds": [30617]}))
        assert len(client.events_for("repos")) == 1
    ```
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from mockstr.fixtures import ScenarioBuilder
from mockstr.models import MessageType
from mockstr.relay import RelaySimulator, Session


DEFAULT_SESSION_URL = "ws://localhost:7000"


def client_frame(*parts: Any) -> str:
    """Encode a client frame, e.g. ``client_frame("CLOSE", "sub")``."""
    return json.dumps(list(parts))


class FrameRecorder:
    """Send callable that keeps every relay frame as a parsed JSON array."""

    def __init__(self) -> None:
        self.frames: list[list[Any]] = []

    def __call__(self, frame: str) -> None:
        self.frames.append(json.loads(frame))

    def __len__(self) -> int:
        return len(self.frames)

    def of_type(self, verb: str | MessageType) -> list[list[Any]]:
        """Frames whose first element is *verb*."""
        return [f for f in self.frames if f[0] == verb]

    def events_for(self, sub_id: str) -> list[dict[str, Any]]:
        """Event objects delivered to *sub_id*, in delivery order."""
        return [f[2] for f in self.of_type(MessageType.EVENT) if f[1] == sub_id]

    def clear(self) -> None:
        self.frames.clear()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "mockstr_config",
        help="YAML config (SimulatorConfig fields or a full mockstr config) for relay_simulator",
        default="",
    )


@pytest.fixture(scope="session")
def mockstr_simulator(pytestconfig: pytest.Config) -> RelaySimulator:
    """The single simulator instance shared by the whole test session."""
    config_path = pytestconfig.getini("mockstr_config")
    if config_path:
        return RelaySimulator.from_yaml(pytestconfig.rootpath / config_path)
    return RelaySimulator()


@pytest.fixture
def relay_simulator(mockstr_simulator: RelaySimulator) -> Iterator[RelaySimulator]:
    """The shared simulator, pristine at the start of the test."""
    mockstr_simulator.reset()
    mockstr_simulator.on_subscribe = None
    mockstr_simulator.on_publish = None
    yield mockstr_simulator
    mockstr_simulator.reset()
    mockstr_simulator.on_subscribe = None
    mockstr_simulator.on_publish = None


@pytest.fixture
def scenario() -> ScenarioBuilder:
    return ScenarioBuilder()


@pytest.fixture
def make_session(
    relay_simulator: RelaySimulator,
) -> Callable[..., tuple[Session, FrameRecorder]]:
    """Factory: ``make_session(url=...)`` returns ``(session, recorder)``."""

    def factory(url: str = DEFAULT_SESSION_URL) -> tuple[Session, FrameRecorder]:
        recorder = FrameRecorder()
        return relay_simulator.open_session(url, recorder), recorder

    return factory
