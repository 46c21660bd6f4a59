"""
Standalone WebSocket relay server.

Exposes a [RelaySimulator][mockstr.relay.simulator.RelaySimulator] on a real
``host:port`` with aiohttp, for clients that are not driven through
Playwright (a dev server, a CLI, another test process). Every connection,
whatever its path, becomes one [Session][mockstr.relay.session.Session].

Sessions emit frames synchronously; each connection owns an
``asyncio.Queue`` drained by a writer task, so frames reach the socket in
the order the session produced them.

Examples:
    ```python
    async with RelayServer(simulator, ServerConfig(port=0)) as server:
        async with aiohttp.ClientSession() as http:
            async with http.ws_connect(server.url) as ws:
                await ws.send_json(["REQ", "sub", {"kinds": [30617]}])
    ```
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Self

from aiohttp import WSMsgType, web

from mockstr.core.config import ServerConfig
from mockstr.core.logger import Logger


if TYPE_CHECKING:
    from mockstr.relay import RelaySimulator, Session


class RelayServer:
    """aiohttp server bridging WebSocket connections to simulator sessions.

    Built on the same ``AppRunner``/``TCPSite`` lifecycle as any aiohttp
    service: [start()][mockstr.transport.server.RelayServer.start] binds,
    [stop()][mockstr.transport.server.RelayServer.stop] closes every session
    opened through this server and releases the port.
    """

    def __init__(self, simulator: RelaySimulator, config: ServerConfig | None = None) -> None:
        self._simulator = simulator
        self._config = config or ServerConfig()
        self._logger = Logger("mockstr.transport.server", json_output=simulator.config.json_logs)
        self._runner: web.AppRunner | None = None
        self._port: int | None = None
        self._sessions: set[Session] = set()

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        """The bound port (resolved after start when configured as 0).

        Raises:
            RuntimeError: If the server is not running.
        """
        if self._port is None:
            raise RuntimeError("RelayServer is not running")
        return self._port

    @property
    def url(self) -> str:
        """``ws://host:port`` of the running server."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"ws://{host}:{self.port}"

    async def start(self) -> None:
        """Bind the server.

        Raises:
            OSError: If the port is already in use or binding fails.
        """
        app = web.Application()
        app.router.add_get("/{tail:.*}", self._handle_websocket)

        self._runner = web.AppRunner(app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await site.start()

        self._port = self._runner.addresses[0][1]
        self._logger.info("server_started", url=self.url)

    async def stop(self) -> None:
        """Close this server's sessions and release the port.

        Idempotent: safe to call if the server was never started or has
        already been stopped.
        """
        for session in list(self._sessions):
            session.close()
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._logger.info("server_stopped", port=self._port)
        self._port = None

    async def _handle_websocket(self, request: web.Request) -> web.StreamResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        outbox: asyncio.Queue[str | None] = asyncio.Queue()
        url = f"ws://{request.host}{request.path_qs}"
        session = self._simulator.open_session(
            url, outbox.put_nowait, on_close=lambda: outbox.put_nowait(None)
        )
        self._sessions.add(session)
        writer = asyncio.create_task(self._write_frames(ws, outbox, session.id))

        try:
            async for msg in ws:
                if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                    session.handle_frame(msg.data)
                elif msg.type == WSMsgType.ERROR:
                    self._logger.warning(
                        "connection_error", session=session.id, error=str(ws.exception())
                    )
        finally:
            session.close()
            self._sessions.discard(session)
            await writer
        return ws

    async def _write_frames(
        self, ws: web.WebSocketResponse, outbox: asyncio.Queue[str | None], session_id: str
    ) -> None:
        while (frame := await outbox.get()) is not None:
            try:
                await ws.send_str(frame)
            except ConnectionResetError:
                self._logger.debug("frame_dropped", session=session_id, reason="connection reset")
                return
        await ws.close()
