"""Mockstr exception hierarchy.

Provides typed exceptions for the failure categories a test harness needs to
tell apart: bad configuration, protocol drift from the client under test, a
synchronization wait that never completed, a simulator torn down while a test
was still waiting, and fixture graphs with dangling references.

Exception hierarchy:

```text
MockstrError (base -- never raised directly)
├── ConfigurationError         -- config validation, bad YAML, bad patterns
├── ProtocolError              -- wire protocol violations
│   ├── MalformedFrameError    -- frame missing required positional fields
│   └── InvalidEventError      -- EVENT/AUTH payload fails validation
├── WaitTimeoutError           -- wait_for_event() deadline elapsed
├── RelayClosedError           -- simulator/session torn down while waiting
└── FixtureError               -- scenario construction failures
    └── ReferentialIntegrityError -- reference to an unknown entity
```

See Also:
    [Session][mockstr.relay.session.Session]: Converts
        [MalformedFrameError][mockstr.core.exceptions.MalformedFrameError]
        into ``NOTICE`` frames instead of propagating it.
    [PublishedLog][mockstr.relay.capture.PublishedLog]: Raises
        [WaitTimeoutError][mockstr.core.exceptions.WaitTimeoutError] and
        [RelayClosedError][mockstr.core.exceptions.RelayClosedError].
    [ScenarioBuilder][mockstr.fixtures.scenario.ScenarioBuilder]: Raises
        [ReferentialIntegrityError][mockstr.core.exceptions.ReferentialIntegrityError].
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class MockstrError(Exception):
    """Base exception for all mockstr errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(MockstrError):
    """Invalid or missing configuration (YAML, interception patterns, CLI flags)."""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(MockstrError):
    """A frame from the client violates the wire protocol."""


class MalformedFrameError(ProtocolError):
    """A frame could not be decoded: bad JSON, unknown verb, or missing fields.

    Attributes:
        frame: The raw frame text, kept for diagnostics.
    """

    def __init__(self, message: str, frame: str | None = None) -> None:
        super().__init__(message)
        self.frame = frame


class InvalidEventError(ProtocolError):
    """An ``EVENT`` or ``AUTH`` frame carries an event object that fails validation.

    Attributes:
        event_id: The id read from the payload, or ``None`` if unreadable.
            Relays answer with ``OK false`` when it is known and ``NOTICE``
            otherwise.
    """

    def __init__(self, message: str, event_id: str | None = None) -> None:
        super().__init__(message)
        self.event_id = event_id


# ---------------------------------------------------------------------------
# Synchronization
# ---------------------------------------------------------------------------


class WaitTimeoutError(MockstrError, TimeoutError):
    """No matching event was published before the wait deadline.

    Also a builtin ``TimeoutError`` so generic ``except TimeoutError``
    handlers still catch it.

    Attributes:
        kind: The event kind that was awaited (``None`` for predicate-only waits).
        predicate: The extra predicate that was awaited, if any.
        timeout: The deadline in seconds.
    """

    def __init__(
        self,
        *,
        kind: int | None,
        timeout: float,
        predicate: Callable[[Any], bool] | None = None,
        detail: str = "",
    ) -> None:
        what = f"kind {kind}" if kind is not None else "matching events"
        if predicate is not None:
            name = getattr(predicate, "__name__", repr(predicate))
            what += f" matching predicate {name}"
        message = f"Timed out after {timeout:g}s waiting for published {what}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.kind = kind
        self.predicate = predicate
        self.timeout = timeout


class RelayClosedError(MockstrError):
    """The simulator or its sessions were closed while a caller was waiting."""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class FixtureError(MockstrError):
    """A scenario could not be constructed."""


class ReferentialIntegrityError(FixtureError):
    """A scenario entity referenced a key that was not produced earlier."""
