"""
Process-wide relay simulator facade.

[RelaySimulator][mockstr.relay.simulator.RelaySimulator] owns the
[EventStore][mockstr.relay.store.EventStore], the
[PublishedLog][mockstr.relay.capture.PublishedLog] and every open
[Session][mockstr.relay.session.Session]. Transports create sessions with
[open_session()][mockstr.relay.simulator.RelaySimulator.open_session]; tests
and page objects use the seeding, injection, capture and wait methods.

Isolation is explicit: [reset()][mockstr.relay.simulator.RelaySimulator.reset]
closes every session, rejects pending waits, and empties the store and the
published-log. The pytest plugin in [mockstr.testing][] calls it before and
after every test.

Examples:
    ```python
    simulator = RelaySimulator(SimulatorConfig(intercept_urls=["localhost:7000"]))
    simulator.seed_events(scenario.build())

    await PlaywrightInterceptor(simulator).install(page)
    await page.goto("http://localhost:5173/repos")
    await page.click("text=New issue")

    issue = await simulator.wait_for_event(EventKind.ISSUE, timeout=5)
    assert issue.first_tag_value("subject") == "Crash on startup"
    ```
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from mockstr.core.config import MockstrConfig, SimulatorConfig, validate_config
from mockstr.core.exceptions import RelayClosedError
from mockstr.core.logger import Logger
from mockstr.core.yaml import load_yaml
from mockstr.models import Event, Filter, events_from_dicts, filters_from_dicts

from .capture import EventPredicate, PublishedLog
from .matching import select_for_subscription
from .session import SendFrame, Session
from .store import EventStore


SubscribeHook = Callable[[str, list[Filter]], object]
PublishHook = Callable[[Event], object]

DEFAULT_WAIT_TIMEOUT = 5.0


class RelaySimulator:
    """Deterministic in-process stand-in for one or more Nostr relays.

    All sessions share one store, whatever URL they were opened for.

    Attributes:
        on_subscribe: Optional hook called with ``(sub_id, filters)`` after a
            subscription's backlog and ``EOSE`` were sent.
        on_publish: Optional hook called with the event after a client
            publish was stored, captured and acknowledged.
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        on_subscribe: SubscribeHook | None = None,
        on_publish: PublishHook | None = None,
    ) -> None:
        self._config = config or SimulatorConfig()
        self._logger = Logger("mockstr.relay", json_output=self._config.json_logs)
        self._store = EventStore()
        self._store.add_listener(self._fan_out)
        self._published = PublishedLog()
        self._sessions: dict[str, Session] = {}
        self._session_ids = itertools.count(1)
        self.on_subscribe = on_subscribe
        self.on_publish = on_publish

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> RelaySimulator:
        """Create a simulator from a YAML file.

        The file holds either ``SimulatorConfig`` fields or a full
        ``MockstrConfig`` such as ``config/mockstr.yaml``.
        """
        return cls.from_dict(load_yaml(config_path), **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> RelaySimulator:
        """Create a simulator from a configuration dictionary.

        A top-level ``simulator`` key marks a root ``MockstrConfig``; its
        ``simulator`` section is used.

        Raises:
            ConfigurationError: If *data* fails validation.
        """
        if isinstance(data, dict) and "simulator" in data:
            return cls(MockstrConfig.from_dict(data).simulator, **kwargs)
        return cls(validate_config(SimulatorConfig, data), **kwargs)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> SimulatorConfig:
        return self._config

    @property
    def debug(self) -> bool:
        """Whether frame-level traffic is logged."""
        return self._config.debug

    @property
    def logger(self) -> Logger:
        return self._logger

    @property
    def store(self) -> EventStore:
        return self._store

    @property
    def published(self) -> PublishedLog:
        return self._published

    @property
    def sessions(self) -> list[Session]:
        """Snapshot of the open sessions in opening order."""
        return list(self._sessions.values())

    # -------------------------------------------------------------------------
    # Store population
    # -------------------------------------------------------------------------

    def seed_events(self, events: Iterable[Event | Mapping[str, Any]]) -> None:
        """Add backlog events. Open subscriptions are not notified."""
        parsed = events_from_dicts(events)
        for event in parsed:
            self._store.insert(event, broadcast=False)
        self._logger.info("events_seeded", count=len(parsed), stored=len(self._store))

    def inject_events(self, events: Iterable[Event | Mapping[str, Any]]) -> None:
        """Add events as if another client published them just now.

        Each event is fanned out to every matching open subscription of every
        session before the next one is inserted.
        """
        parsed = events_from_dicts(events)
        for event in parsed:
            self._store.insert(event)
        self._logger.info("events_injected", count=len(parsed), stored=len(self._store))

    def get_events(
        self, filters: Sequence[Filter | Mapping[str, Any]] | None = None
    ) -> list[Event]:
        """Read the store.

        Without *filters*, every stored event in insertion order. With
        *filters*, the selection a ``REQ`` with those filters would replay
        (newest first, ``limit`` applied).
        """
        if filters is None:
            return self._store.scan()
        return select_for_subscription(self._store.scan(), filters_from_dicts(filters))

    def _fan_out(self, event: Event) -> None:
        delivered = 0
        for session in list(self._sessions.values()):
            for subscription in session.subscriptions.matching(event):
                session.deliver(subscription, event)
                delivered += 1
        self._logger.debug(
            "event_fanned_out", event_id=event.id, kind=event.kind, deliveries=delivered
        )

    # -------------------------------------------------------------------------
    # Capture
    # -------------------------------------------------------------------------

    def get_published_events(self) -> list[Event]:
        """Events published by the client, in arrival order."""
        return self._published.snapshot()

    def get_published_events_by_kind(self, kind: int) -> list[Event]:
        return self._published.by_kind(kind)

    def clear_published(self) -> None:
        """Forget captured events without touching the store."""
        self._published.clear()

    async def wait_for_event(
        self,
        kind: int,
        timeout: float = DEFAULT_WAIT_TIMEOUT,
        predicate: EventPredicate | None = None,
    ) -> Event:
        """Wait until the client publishes an event of *kind* (seconds).

        Resolves immediately if a matching event was already captured.

        Raises:
            WaitTimeoutError: Nothing matched within *timeout* seconds.
            RelayClosedError: The simulator was closed or reset meanwhile.
        """
        return await self._published.wait_for(kind, timeout, predicate)

    async def wait_for_events(
        self,
        predicate: EventPredicate,
        count: int = 1,
        timeout: float = DEFAULT_WAIT_TIMEOUT,
    ) -> list[Event]:
        """Wait until *count* published events satisfy *predicate*."""
        return await self._published.wait_for_many(predicate, count, timeout)

    def accept_published(self, event: Event, session: Session) -> None:
        """Store, fan out and capture a client publish. Called by sessions."""
        self._store.insert(event)
        self._published.append(event)
        self._logger.info(
            "event_published", event_id=event.id, kind=event.kind, session=session.id
        )

    def notify_subscribe(self, sub_id: str, filters: list[Filter]) -> None:
        if self.on_subscribe is not None:
            self.on_subscribe(sub_id, filters)

    def notify_publish(self, event: Event) -> None:
        if self.on_publish is not None:
            self.on_publish(event)

    # -------------------------------------------------------------------------
    # Sessions & lifecycle
    # -------------------------------------------------------------------------

    def open_session(
        self,
        url: str,
        send: SendFrame,
        *,
        on_close: Callable[[], object] | None = None,
    ) -> Session:
        """Create a session for a new client connection to *url*.

        Args:
            url: The relay URL the client opened.
            send: Callable emitting one text frame to the client.
            on_close: Called once when the session is closed by the
                simulator, to shut the transport down.
        """
        session = Session(f"s{next(self._session_ids)}", url, send, self, on_close=on_close)
        self._sessions[session.id] = session
        self._logger.info("session_opened", session=session.id, url=url)
        return session

    def detach_session(self, session: Session) -> None:
        """Forget a closed session. Called by ``Session.close()``."""
        self._sessions.pop(session.id, None)

    def close(self) -> None:
        """Close every session and reject pending waits. Stored data is kept."""
        sessions = list(self._sessions.values())
        for session in sessions:
            session.close()
        self._published.release(RelayClosedError("relay simulator closed while waiting"))
        self._logger.info("simulator_closed", sessions=len(sessions))

    def reset(self) -> None:
        """Return to a pristine state: no sessions, waits, events or captures."""
        self.close()
        self._store.clear()
        self._published.clear()
        self._logger.info("simulator_reset")
