"""
Id-addressed event store.

The store is deliberately dumb: no validation of cross-references and no
secondary indexes. Inserting an event whose id is already present
overwrites the stored copy. Live fan-out is delegated to listeners
registered with [add_listener()][mockstr.relay.store.EventStore.add_listener];
seeding inserts with ``broadcast=False`` so backlog population never reaches
open subscriptions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TypeAlias

from mockstr.models import Event


Listener: TypeAlias = Callable[[Event], None]


class EventStore:
    """Insertion-ordered map of event id to [Event][mockstr.models.event.Event]."""

    def __init__(self) -> None:
        self._events: dict[str, Event] = {}
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events.values()))

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked synchronously after each broadcast insert."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def insert(self, event: Event, *, broadcast: bool = True) -> bool:
        """Store *event*, replacing any event with the same id.

        Args:
            event: The event to store.
            broadcast: Notify listeners (live fan-out). ``False`` for seeding.

        Returns:
            True if the id was not present before.
        """
        is_new = event.id not in self._events
        self._events[event.id] = event
        if broadcast:
            for listener in list(self._listeners):
                listener(event)
        return is_new

    def get(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    def scan(self, predicate: Callable[[Event], bool] | None = None) -> list[Event]:
        """Return stored events in insertion order, optionally filtered."""
        if predicate is None:
            return list(self._events.values())
        return [e for e in self._events.values() if predicate(e)]

    def clear(self) -> None:
        """Drop every stored event. Listeners stay registered."""
        self._events.clear()
