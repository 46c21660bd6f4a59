"""
Published-log: capture of client-originated events plus wait primitives.

Events published by the client under test are appended here in arrival
order, separately from the store, so tests can tell captured events from
seeded or injected ones.

Waits never poll. Each pending wait is a future registered on the log;
[append()][mockstr.relay.capture.PublishedLog.append] resolves every waiter
the new event completes, synchronously, before it returns. A timer handle
created with ``loop.call_later`` races the future and is cancelled as soon as
the wait finishes either way.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from mockstr.core.exceptions import WaitTimeoutError
from mockstr.models import Event


EventPredicate = Callable[[Event], bool]


@dataclass(slots=True, eq=False)
class _Waiter:
    accepts: EventPredicate
    count: int
    future: asyncio.Future[list[Event]]
    matched: list[Event] = field(default_factory=list)

    def offer(self, event: Event) -> None:
        if self.future.done():
            return
        try:
            accepted = self.accepts(event)
        except Exception as e:  # noqa: BLE001 - surfaced to the waiting caller
            self.future.set_exception(e)
            return
        if accepted:
            self.matched.append(event)
            if len(self.matched) >= self.count:
                self.future.set_result(list(self.matched))


class PublishedLog:
    """Ordered record of published events with future-based waits."""

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._waiters: list[_Waiter] = []

    def __len__(self) -> int:
        return len(self._events)

    @property
    def pending_waits(self) -> int:
        """Number of waits currently suspended."""
        return len(self._waiters)

    def append(self, event: Event) -> None:
        """Record *event* and wake every waiter it completes."""
        self._events.append(event)
        for waiter in list(self._waiters):
            waiter.offer(event)

    def snapshot(self) -> list[Event]:
        """Copy of all captured events in arrival order."""
        return list(self._events)

    def by_kind(self, kind: int) -> list[Event]:
        return [e for e in self._events if e.kind == kind]

    def clear(self) -> None:
        """Forget captured events. Pending waits stay pending."""
        self._events.clear()

    def release(self, exc: BaseException) -> None:
        """Fail every pending wait with *exc*."""
        for waiter in list(self._waiters):
            if not waiter.future.done():
                waiter.future.set_exception(exc)

    async def wait_for(
        self,
        kind: int,
        timeout: float,
        predicate: EventPredicate | None = None,
    ) -> Event:
        """Return the first captured event of *kind* accepted by *predicate*.

        Already-captured events are considered first.

        Raises:
            WaitTimeoutError: No matching event within *timeout* seconds.
            RelayClosedError: The simulator was closed while waiting.
        """

        def accepts(event: Event) -> bool:
            return event.kind == kind and (predicate is None or predicate(event))

        def on_timeout(waiter: _Waiter) -> WaitTimeoutError:
            return WaitTimeoutError(kind=kind, timeout=timeout, predicate=predicate)

        events = await self._wait(accepts, 1, timeout, on_timeout)
        return events[0]

    async def wait_for_many(
        self,
        predicate: EventPredicate,
        count: int,
        timeout: float,
    ) -> list[Event]:
        """Return the first *count* captured events accepted by *predicate*.

        Raises:
            ValueError: If *count* is less than 1.
            WaitTimeoutError: Fewer than *count* matches within *timeout*.
            RelayClosedError: The simulator was closed while waiting.
        """
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")

        def on_timeout(waiter: _Waiter) -> WaitTimeoutError:
            return WaitTimeoutError(
                kind=None,
                timeout=timeout,
                predicate=predicate,
                detail=f"{len(waiter.matched)}/{count} received",
            )

        return await self._wait(predicate, count, timeout, on_timeout)

    async def _wait(
        self,
        accepts: EventPredicate,
        count: int,
        timeout: float,
        on_timeout: Callable[[_Waiter], WaitTimeoutError],
    ) -> list[Event]:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        loop = asyncio.get_running_loop()
        waiter = _Waiter(accepts=accepts, count=count, future=loop.create_future())
        for event in self._events:
            waiter.offer(event)
        if waiter.future.done():
            return waiter.future.result()

        def expire() -> None:
            if not waiter.future.done():
                waiter.future.set_exception(on_timeout(waiter))

        self._waiters.append(waiter)
        handle = loop.call_later(timeout, expire)
        try:
            return await waiter.future
        finally:
            handle.cancel()
            self._waiters.remove(waiter)
