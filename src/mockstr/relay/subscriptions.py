"""
Per-session subscription registry.

A subscription id is scoped to one [Session][mockstr.relay.session.Session].
Lifecycle per id: absent -> open (``REQ``) -> closed (``CLOSE`` or session
teardown). A ``REQ`` for an id that is already open replaces its filters.
Closed ids are simply removed, so late fan-out finds nothing to deliver to.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mockstr.models import Event, Filter

from .matching import matches_any


if TYPE_CHECKING:
    from .session import Session


@dataclass(frozen=True, slots=True)
class Subscription:
    """A named live query bound to one session.

    Attributes:
        id: Client-chosen subscription id.
        filters: OR'd filters.
        session: The owning session.
    """

    id: str
    filters: tuple[Filter, ...]
    session: Session = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))

    def matches(self, event: Event) -> bool:
        return matches_any(event, self.filters)


class SubscriptionRegistry:
    """Map of subscription id to open [Subscription][mockstr.relay.subscriptions.Subscription]."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._subscriptions: dict[str, Subscription] = {}

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, sub_id: object) -> bool:
        return sub_id in self._subscriptions

    def __iter__(self) -> Iterator[Subscription]:
        return iter(list(self._subscriptions.values()))

    def get(self, sub_id: str) -> Subscription | None:
        return self._subscriptions.get(sub_id)

    def open(self, sub_id: str, filters: Sequence[Filter]) -> Subscription:
        """Open *sub_id*, replacing the filters of an already-open id."""
        subscription = Subscription(sub_id, tuple(filters), self._session)
        self._subscriptions[sub_id] = subscription
        return subscription

    def close(self, sub_id: str) -> bool:
        """Close *sub_id*. Returns False if it was not open."""
        return self._subscriptions.pop(sub_id, None) is not None

    def close_all(self) -> None:
        self._subscriptions.clear()

    def matching(self, event: Event) -> list[Subscription]:
        """Open subscriptions whose filters accept *event*."""
        return [s for s in self._subscriptions.values() if s.matches(event)]
