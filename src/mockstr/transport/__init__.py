"""Transport layer: ways of connecting a client to the relay simulator.

Attributes:
    PlaywrightInterceptor: Routes a browser page's WebSocket connections
        into the simulator. See
        [PlaywrightInterceptor][mockstr.transport.playwright.PlaywrightInterceptor].
    RelayServer: aiohttp WebSocket server exposing the simulator on a real
        port. See [RelayServer][mockstr.transport.server.RelayServer].
    UrlPattern: One interception pattern (authority, host, prefix, or glob).
    UrlMatcher: Set of patterns deciding which URLs are intercepted.
"""

from .patterns import UrlMatcher, UrlPattern, is_websocket_url
from .playwright import PlaywrightInterceptor
from .server import RelayServer


__all__ = [
    "PlaywrightInterceptor",
    "RelayServer",
    "UrlMatcher",
    "UrlPattern",
    "is_websocket_url",
]
