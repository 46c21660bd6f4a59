"""
Interception URL patterns.

A [UrlPattern][mockstr.transport.patterns.UrlPattern] accepts four forms:

* ``host:port`` -- exact authority (``localhost:7000``).
* ``host`` -- any port on that host (``relay.example.com``).
* ``ws://host:port/path`` -- URL prefix, compared against the raw and the
  normalized URL.
* anything containing ``*`` -- glob matched against the full URL and
  against the authority (``wss://*.example.com``, ``localhost:*``).

Only ``ws://``/``wss://`` URLs are ever matched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from fnmatch import fnmatchcase

from mockstr.core.exceptions import ConfigurationError
from mockstr.models import RelayUrl


@dataclass(frozen=True, slots=True)
class UrlPattern:
    """One interception pattern.

    Raises:
        ValueError: If *pattern* is empty, or a URL prefix with a scheme
            other than ``ws``/``wss``.
    """

    pattern: str
    _kind: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern = self.pattern.strip().lower()
        if not pattern:
            raise ValueError("URL pattern must not be empty")
        object.__setattr__(self, "pattern", pattern)

        if "*" in pattern:
            kind = "glob"
        elif "://" in pattern:
            if not pattern.startswith(("ws://", "wss://")):
                raise ValueError(f"URL pattern must use ws:// or wss://: {pattern}")
            kind = "prefix"
        elif ":" in pattern and (not pattern.startswith("[") or "]:" in pattern):
            kind = "authority"
        else:
            kind = "host"
        object.__setattr__(self, "_kind", kind)

    def matches(self, url: str | RelayUrl) -> bool:
        """Whether the WebSocket *url* is covered by this pattern."""
        raw = url.url if isinstance(url, RelayUrl) else url.strip().lower()
        try:
            relay_url = url if isinstance(url, RelayUrl) else RelayUrl(raw)
        except ValueError:
            return False

        if self._kind == "glob":
            return any(
                fnmatchcase(candidate, self.pattern)
                for candidate in (raw, relay_url.url, relay_url.authority)
            )
        if self._kind == "prefix":
            prefix = self.pattern.rstrip("/")
            return raw.startswith(prefix) or relay_url.url.startswith(prefix)
        if self._kind == "authority":
            return relay_url.authority == self.pattern
        host = self.pattern.strip("[]")
        return relay_url.host == host


class UrlMatcher:
    """Decides which WebSocket URLs a transport routes into the simulator.

    With no patterns, every ``ws://``/``wss://`` URL matches.
    """

    def __init__(self, patterns: Iterable[str | UrlPattern] = ()) -> None:
        try:
            self._patterns = tuple(
                p if isinstance(p, UrlPattern) else UrlPattern(p) for p in patterns
            )
        except ValueError as e:
            raise ConfigurationError(f"invalid intercept pattern: {e}") from e

    @property
    def patterns(self) -> tuple[UrlPattern, ...]:
        return self._patterns

    def __call__(self, url: str) -> bool:
        if not self._patterns:
            return is_websocket_url(url)
        return any(p.matches(url) for p in self._patterns)


def is_websocket_url(url: str) -> bool:
    try:
        RelayUrl(url)
    except ValueError:
        return False
    return True
