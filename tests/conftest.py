"""
Pytest configuration and shared fixtures for mockstr tests.

Provides:
- make_event factory for valid events with content-derived ids
- Fixed author pubkeys for tests that do not need real keys
- Debug logging for the whole session

The ``relay_simulator``, ``scenario`` and ``make_session`` fixtures come from
the ``mockstr.testing`` plugin (registered through the ``pytest11`` entry
point).
"""

import logging
from collections.abc import Callable, Sequence

import pytest

from mockstr.models import Event


PUBKEY_A = "a" * 64
PUBKEY_B = "b" * 64
BASE_TS = 1_705_320_000


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Event Fixtures
# ============================================================================


def build_event(
    kind: int = 1,
    *,
    pubkey: str = PUBKEY_A,
    created_at: int = BASE_TS,
    tags: Sequence[Sequence[str]] = (),
    content: str = "",
) -> Event:
    """Create a valid event whose id is derived from its content."""
    raw_tags = [list(t) for t in tags]
    event_id = Event.compute_id(
        pubkey=pubkey, created_at=created_at, kind=kind, tags=raw_tags, content=content
    )
    return Event(
        id=event_id,
        pubkey=pubkey,
        created_at=created_at,
        kind=kind,
        tags=raw_tags,
        content=content,
        sig="f" * 128,
    )


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory fixture: ``make_event(kind, pubkey=..., created_at=..., tags=..., content=...)``."""
    return build_event


@pytest.fixture
def event_dict(make_event: Callable[..., Event]) -> dict:
    """A wire-format event object."""
    return make_event(1621, tags=[["a", f"30617:{PUBKEY_A}:repo-x"]], content="bug").to_dict()
