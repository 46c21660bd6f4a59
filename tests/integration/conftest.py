"""Integration fixtures: a real aiohttp relay server on an ephemeral port.

The server is function-scoped and bound to port 0, so tests never collide on
a fixed port and every test starts with a pristine simulator.
"""

from __future__ import annotations

import aiohttp
import pytest

from mockstr.core.config import ServerConfig
from mockstr.relay import RelaySimulator
from mockstr.transport import RelayServer


@pytest.fixture
async def relay_server(relay_simulator: RelaySimulator):
    """A running [RelayServer][mockstr.transport.server.RelayServer] on 127.0.0.1."""
    async with RelayServer(relay_simulator, ServerConfig(port=0)) as server:
        yield server


@pytest.fixture
async def http():
    async with aiohttp.ClientSession() as session:
        yield session
