"""Pure frozen dataclasses with zero I/O for events, filters, and relay URLs.

The models layer is the foundation of the diamond DAG. It has **no
dependencies** on any other mockstr package. Every model uses
``@dataclass(frozen=True, slots=True)`` and validates in ``__post_init__``,
so invalid instances never escape the constructor.

Attributes:
    Event: Immutable Nostr event with wire conversion and NIP-01 id
        derivation.
    Tag: Validated ``{name, values}`` record replacing positional tag arrays.
    Filter: Parsed subscription filter (ids, kinds, authors, time bounds,
        limit, single-letter tag filters).
    Address: ``kind:pubkey:identifier`` coordinate of addressable events.
    RelayUrl: Normalized ``ws://``/``wss://`` URL with ``host:port`` authority.
    EventKind: Event kinds used by git collaboration clients.
    StatusKind: The closed set of issue/patch status transitions.
    LabelNamespace: Label namespaces for ``L`` tags.
    MessageType: Wire frame verbs.
"""

from .address import Address
from .constants import (
    ADDRESSABLE_KIND_MAX,
    ADDRESSABLE_KIND_MIN,
    EVENT_KIND_MAX,
    EventKind,
    LabelNamespace,
    MessageType,
    StatusKind,
)
from .event import Event, events_from_dicts
from .filter import Filter, filters_from_dicts
from .relay_url import RelayUrl
from .tag import Tag


__all__ = [
    "ADDRESSABLE_KIND_MAX",
    "ADDRESSABLE_KIND_MIN",
    "EVENT_KIND_MAX",
    "Address",
    "Event",
    "EventKind",
    "Filter",
    "LabelNamespace",
    "MessageType",
    "RelayUrl",
    "StatusKind",
    "Tag",
    "events_from_dicts",
    "filters_from_dicts",
]
