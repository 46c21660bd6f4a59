"""
Playwright WebSocket interceptor.

Routes the browser's WebSocket connections into a
[RelaySimulator][mockstr.relay.simulator.RelaySimulator] with Playwright's
``route_web_socket``. The route handler never calls
``connect_to_server()``, so matched sockets are fully mocked: the page sees
an open connection whose frames are answered by a
[Session][mockstr.relay.session.Session].

With ``passthrough`` enabled (the default), only matching URLs are routed and
everything else reaches the network untouched. With it disabled, every
WebSocket URL is routed and the unmatched ones are closed immediately with
code 1008.

Closing the page or browser context closes the simulator's sessions and
rejects pending waits.

Examples:
    ```python
    async with async_playwright() as p:
        browser = await p.chromium.launch()
        page = await browser.new_page()
        await PlaywrightInterceptor(simulator).install(page)
        await page.goto("http://localhost:5173")
    ```
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Iterable
from typing import TYPE_CHECKING, Any

from mockstr.core.logger import Logger

from .patterns import UrlMatcher, UrlPattern, is_websocket_url


if TYPE_CHECKING:
    from playwright.async_api import BrowserContext, Page, WebSocketRoute

    from mockstr.relay import RelaySimulator


POLICY_VIOLATION = 1008
NORMAL_CLOSURE = 1000


class PlaywrightInterceptor:
    """Installs simulator-backed WebSocket routes on a page or context.

    Args:
        simulator: The simulator that receives intercepted connections.
        patterns: Interception patterns. Defaults to the simulator's
            ``intercept_urls``.
        passthrough: Let unmatched URLs reach the network. Defaults to the
            simulator's ``passthrough`` setting.
    """

    def __init__(
        self,
        simulator: RelaySimulator,
        *,
        patterns: Iterable[str | UrlPattern] | None = None,
        passthrough: bool | None = None,
    ) -> None:
        config = simulator.config
        self._simulator = simulator
        self._matcher = UrlMatcher(config.intercept_urls if patterns is None else patterns)
        self._passthrough = config.passthrough if passthrough is None else passthrough
        self._logger = Logger("mockstr.transport.playwright", json_output=config.json_logs)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def matcher(self) -> UrlMatcher:
        return self._matcher

    def should_route(self, url: str) -> bool:
        """URL predicate handed to ``route_web_socket``."""
        if self._passthrough:
            return self._matcher(url)
        return is_websocket_url(url)

    async def install(self, target: Page | BrowserContext) -> None:
        """Route WebSocket connections opened by *target* into the simulator."""
        await target.route_web_socket(self.should_route, self._handle_route)
        target.on("close", self._on_target_close)
        self._logger.info(
            "interceptor_installed",
            patterns=",".join(p.pattern for p in self._matcher.patterns) or "*",
            passthrough=self._passthrough,
        )

    async def _handle_route(self, route: WebSocketRoute) -> None:
        url = route.url
        if not self._matcher(url):
            self._logger.info("connection_blocked", url=url)
            await route.close(code=POLICY_VIOLATION, reason="not intercepted by mockstr")
            return

        client_closed = False

        def close_route() -> None:
            if not client_closed:
                self._spawn(route.close(code=NORMAL_CLOSURE, reason="relay simulator closed"))

        session = self._simulator.open_session(url, route.send, on_close=close_route)

        def on_client_close(code: int | None, reason: str | None) -> None:
            nonlocal client_closed
            client_closed = True
            self._logger.debug("client_closed", session=session.id, code=code, reason=reason)
            session.close()

        route.on_message(session.handle_frame)
        route.on_close(on_client_close)

    def _on_target_close(self, *_: Any) -> None:
        self._logger.info("target_closed")
        self._simulator.close()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            # The page may already be gone when the simulator closes its routes
            self._logger.debug("route_close_failed", error=str(task.exception()))
