"""
One intercepted client connection.

A [Session][mockstr.relay.session.Session] is transport-agnostic: it receives
raw client frames through
[handle_frame()][mockstr.relay.session.Session.handle_frame] and emits relay
frames through the ``send`` callable supplied by the transport (a Playwright
``WebSocketRoute.send`` or a queue feeding an aiohttp writer task). Each
frame is handled to completion, store mutation and fan-out included, before
``handle_frame`` returns; nothing in it awaits.

With a configured ``latency`` only delivery is delayed: frames are queued
in order with a due time and flushed by a loop timer, so a handler still
mutates the store and fans out in one step.

Malformed frames never escape: they are answered with ``NOTICE`` (or
``OK false`` for an invalid event whose id is readable) and logged as
``frame_rejected``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import TYPE_CHECKING

from mockstr.core.exceptions import InvalidEventError, MalformedFrameError
from mockstr.models import Event

from .codec import (
    AuthMessage,
    CloseMessage,
    EventMessage,
    ReqMessage,
    decode_client_frame,
    encode_eose,
    encode_event,
    encode_notice,
    encode_ok,
)
from .matching import select_for_subscription
from .subscriptions import Subscription, SubscriptionRegistry


if TYPE_CHECKING:
    from .simulator import RelaySimulator


SendFrame = Callable[[str], object]


class Session:
    """Simulated relay connection owned by a simulator.

    Attributes:
        id: Simulator-unique session id (``s1``, ``s2``...).
        url: The relay URL the client tried to open.
        subscriptions: Open subscriptions of this connection.
    """

    def __init__(
        self,
        session_id: str,
        url: str,
        send: SendFrame,
        simulator: RelaySimulator,
        *,
        on_close: Callable[[], object] | None = None,
    ) -> None:
        self.id = session_id
        self.url = url
        self.subscriptions = SubscriptionRegistry(self)
        self._send = send
        self._simulator = simulator
        self._on_close = on_close
        self._closed = False
        self._latency = simulator.config.latency
        self._outbox: deque[tuple[float, str]] = deque()
        self._flush_handle: asyncio.TimerHandle | None = None
        self._logger = simulator.logger.bind(session=session_id, url=url)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"Session(id={self.id!r}, url={self.url!r}, {state}, "
            f"subscriptions={len(self.subscriptions)})"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_frames(self) -> int:
        """Frames queued for delayed delivery."""
        return len(self._outbox)

    def _tracing(self) -> bool:
        return self._simulator.debug and self._logger.is_enabled_for(logging.DEBUG)

    # -------------------------------------------------------------------------
    # Inbound
    # -------------------------------------------------------------------------

    def handle_frame(self, data: str | bytes) -> None:
        """Dispatch one client frame. Frames arriving after close are dropped."""
        if self._closed:
            self._logger.debug("frame_dropped", reason="session closed")
            return
        if self._tracing():
            self._logger.debug("frame_received", frame=data)

        try:
            message = decode_client_frame(data)
        except MalformedFrameError as e:
            self._logger.warning("frame_rejected", error=str(e))
            self.send(encode_notice(str(e)))
            return
        except InvalidEventError as e:
            self._logger.warning("frame_rejected", error=str(e), event_id=e.event_id)
            if e.event_id is not None:
                self.send(encode_ok(e.event_id, False, str(e)))
            else:
                self.send(encode_notice(str(e)))
            return

        if isinstance(message, ReqMessage):
            self._handle_req(message)
        elif isinstance(message, CloseMessage):
            self._handle_close(message)
        elif isinstance(message, EventMessage):
            self._handle_event(message)
        elif isinstance(message, AuthMessage):
            self._handle_auth(message)

    def _handle_req(self, message: ReqMessage) -> None:
        replaced = message.sub_id in self.subscriptions
        subscription = self.subscriptions.open(message.sub_id, message.filters)
        backlog = select_for_subscription(self._simulator.store.scan(), subscription.filters)
        self._logger.info(
            "subscription_opened",
            sub_id=message.sub_id,
            filters=len(message.filters),
            backlog=len(backlog),
            replaced=replaced,
        )
        for event in backlog:
            self.send(encode_event(message.sub_id, event))
        self.send(encode_eose(message.sub_id))
        self._simulator.notify_subscribe(message.sub_id, list(message.filters))

    def _handle_close(self, message: CloseMessage) -> None:
        if self.subscriptions.close(message.sub_id):
            self._logger.info("subscription_closed", sub_id=message.sub_id)
        else:
            self._logger.debug("subscription_close_ignored", sub_id=message.sub_id)

    def _handle_event(self, message: EventMessage) -> None:
        event = message.event
        self._simulator.accept_published(event, self)
        self.send(encode_ok(event.id, True, ""))
        self._simulator.notify_publish(event)

    def _handle_auth(self, message: AuthMessage) -> None:
        self._logger.info("auth_accepted", event_id=message.event.id, pubkey=message.event.pubkey)
        self.send(encode_ok(message.event.id, True, ""))

    # -------------------------------------------------------------------------
    # Outbound
    # -------------------------------------------------------------------------

    def send(self, frame: str) -> None:
        """Emit one relay frame to the client unless the session is closed.

        With a positive ``latency`` the frame is queued and delivered by the
        running event loop once due; queued frames keep their order.
        """
        if self._closed:
            return
        if self._latency <= 0:
            self._emit(frame)
            return
        loop = asyncio.get_running_loop()
        self._outbox.append((loop.time() + self._latency, frame))
        if self._flush_handle is None:
            self._flush_handle = loop.call_at(self._outbox[0][0], self._flush)

    def _emit(self, frame: str) -> None:
        if self._tracing():
            self._logger.debug("frame_sent", frame=frame)
        self._send(frame)

    def _flush(self) -> None:
        self._flush_handle = None
        loop = asyncio.get_running_loop()
        now = loop.time()
        while self._outbox and self._outbox[0][0] <= now and not self._closed:
            self._emit(self._outbox.popleft()[1])
        if self._outbox and not self._closed:
            self._flush_handle = loop.call_at(self._outbox[0][0], self._flush)

    def deliver(self, subscription: Subscription, event: Event) -> None:
        """Live fan-out of *event* to one of this session's subscriptions."""
        if subscription.id not in self.subscriptions:
            return
        self.send(encode_event(subscription.id, event))

    def close(self) -> None:
        """Close all subscriptions and detach from the simulator. Idempotent.

        Invokes the transport's ``on_close`` callback so the underlying
        socket is shut down too. Frames still waiting out their latency are
        dropped.
        """
        if self._closed:
            return
        self._closed = True
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        self._outbox.clear()
        self.subscriptions.close_all()
        self._simulator.detach_session(self)
        self._logger.info("session_closed")
        if self._on_close is not None:
            self._on_close()
