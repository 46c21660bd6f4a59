"""Relay layer: the in-process relay simulator.

Depends on ``mockstr.core`` and ``mockstr.models``; transports and the
fixture layer plug into it.

Attributes:
    RelaySimulator: Facade owning the store, the published-log and all
        sessions. See [RelaySimulator][mockstr.relay.simulator.RelaySimulator].
    Session: One intercepted client connection.
    EventStore: Id-addressed event store with fan-out listeners.
    SubscriptionRegistry: Per-session map of subscription id to filters.
    PublishedLog: Capture of client publishes with future-based waits.
    matches: The filter interpreter.
    select_for_subscription: Backlog selection for a ``REQ``.
"""

from .capture import PublishedLog
from .codec import (
    AuthMessage,
    ClientMessage,
    CloseMessage,
    EventMessage,
    ReqMessage,
    decode_client_frame,
    encode_eose,
    encode_event,
    encode_notice,
    encode_ok,
)
from .matching import matches, matches_any, select_for_subscription
from .session import Session
from .simulator import RelaySimulator
from .store import EventStore
from .subscriptions import Subscription, SubscriptionRegistry


__all__ = [
    "AuthMessage",
    "ClientMessage",
    "CloseMessage",
    "EventMessage",
    "EventStore",
    "PublishedLog",
    "RelaySimulator",
    "ReqMessage",
    "Session",
    "Subscription",
    "SubscriptionRegistry",
    "decode_client_frame",
    "encode_eose",
    "encode_event",
    "encode_notice",
    "encode_ok",
    "matches",
    "matches_any",
    "select_for_subscription",
]
