"""
Parsed WebSocket relay URL.

Parses and normalizes ``ws://`` / ``wss://`` URLs so that interception
patterns can be compared against a stable ``host:port`` authority. Unlike a
production relay registry, local and private hosts are the norm here
(``ws://localhost:7000``) and are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator


@dataclass(frozen=True, slots=True)
class RelayUrl:
    """Immutable, normalized relay URL.

    Attributes:
        url: Normalized URL (lowercase scheme/host, default port dropped,
            trailing slash stripped).
        scheme: ``ws`` or ``wss``.
        host: Hostname or IP address (brackets stripped for IPv6).
        port: Effective port (explicit, or the scheme default).
        path: URL path component, or ``None``.

    Raises:
        ValueError: If the URL is malformed or not a WebSocket URL.

    Examples:
        ```python
        url = RelayUrl("ws://LocalHost:7000/")
        url.url         # 'ws://localhost:7000'
        url.authority   # 'localhost:7000'
        RelayUrl("wss://relay.example.com").port   # 443
        ```
    """

    raw_url: str = field(repr=False)

    url: str = field(init=False)
    scheme: str = field(init=False)
    host: str = field(init=False)
    port: int = field(init=False)
    path: str | None = field(init=False)

    _PORT_WS: ClassVar[int] = 80
    _PORT_WSS: ClassVar[int] = 443

    def __post_init__(self) -> None:
        parsed = self._parse(self.raw_url)
        object.__setattr__(self, "url", parsed["url"])
        object.__setattr__(self, "scheme", parsed["scheme"])
        object.__setattr__(self, "host", parsed["host"])
        object.__setattr__(self, "port", parsed["port"])
        object.__setattr__(self, "path", parsed["path"])

    def __str__(self) -> str:
        return self.url

    @property
    def authority(self) -> str:
        """``host:port`` with the effective port, IPv6 hosts bracketed."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"

    @staticmethod
    def _parse(raw: str) -> dict[str, Any]:
        """Validate *raw* with RFC 3986 rules and compute the normalized parts.

        Raises:
            ValueError: If the scheme is not ``ws``/``wss`` or the URI is invalid.
        """
        if "\x00" in raw:
            raise ValueError("Relay URL contains null bytes")

        uri = uri_reference(raw.strip()).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("ws", "wss")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise ValueError(f"Invalid scheme in {raw!r}: must be ws or wss") from None
        except ValidationError as e:
            raise ValueError(f"Invalid URL {raw!r}: {e}") from None

        scheme = uri.scheme
        host = uri.host.strip("[]")
        default_port = RelayUrl._PORT_WSS if scheme == "wss" else RelayUrl._PORT_WS
        port = int(uri.port) if uri.port else default_port

        path = uri.path or ""
        while "//" in path:
            path = path.replace("//", "/")
        path = path.rstrip("/") or None

        formatted_host = f"[{host}]" if ":" in host else host
        netloc = formatted_host if port == default_port else f"{formatted_host}:{port}"
        query = f"?{uri.query}" if uri.query else ""

        return {
            "url": f"{scheme}://{netloc}{path or ''}{query}",
            "scheme": scheme,
            "host": host,
            "port": port,
            "path": path,
        }
