"""
Structured subscription filter.

A [Filter][mockstr.models.filter.Filter] is the parsed form of one filter
object in a ``REQ`` frame. Parsing happens once, in
[from_dict()][mockstr.models.filter.Filter.from_dict], so the matching code in
[mockstr.relay.matching][] works on sets and never on raw JSON.

Wire keys:

* ``ids``, ``authors`` -- lists of 64-hex strings (not re-validated; a
  malformed value simply never matches).
* ``kinds`` -- list of non-negative integers.
* ``since``, ``until`` -- inclusive unix-time bounds.
* ``limit`` -- maximum number of backlog events.
* ``#<letter>`` -- accepted values for tags named by a single letter.

Unknown keys (``search``, multi-letter ``#`` keys...) are ignored, as public
relays do.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ._validation import validate_int, validate_int_list, validate_mapping, validate_str_list


@dataclass(frozen=True, slots=True)
class Filter:
    """Immutable subscription filter.

    Every field is optional; ``None`` means "does not constrain". An empty
    set is a constraint that nothing satisfies.

    Attributes:
        ids: Accepted event ids.
        kinds: Accepted event kinds.
        authors: Accepted author pubkeys.
        since: Lower bound on ``created_at`` (inclusive).
        until: Upper bound on ``created_at`` (inclusive).
        limit: Maximum number of backlog events for the subscription.
        tags: Tag letter to accepted values (``{"e": {"<id>"}}``).

    Examples:
        ```python
        f = Filter.from_dict({"kinds": [1621], "#a": ["30617:<pk>:repo-x"]})
        f.kinds            # frozenset({1621})
        f.tags["a"]        # frozenset({'30617:<pk>:repo-x'})
        ```
    """

    ids: frozenset[str] | None = None
    kinds: frozenset[int] | None = None
    authors: frozenset[str] | None = None
    since: int | None = None
    until: int | None = None
    limit: int | None = None
    tags: Mapping[str, frozenset[str]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        for name in ("ids", "authors"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, frozenset):
                validate_str_list(list(value), name)
                object.__setattr__(self, name, frozenset(value))
        if self.kinds is not None and not isinstance(self.kinds, frozenset):
            validate_int_list(list(self.kinds), "kinds")
            object.__setattr__(self, "kinds", frozenset(self.kinds))
        for name in ("since", "until", "limit"):
            value = getattr(self, name)
            if value is not None:
                validate_int(value, name)

        tags: dict[str, frozenset[str]] = {}
        for letter, values in self.tags.items():
            if not isinstance(letter, str) or len(letter) != 1:
                raise ValueError(f"tag filter key must be a single letter, got {letter!r}")
            values_list = list(values)
            validate_str_list(values_list, f"#{letter}")
            tags[letter] = frozenset(values_list)
        object.__setattr__(self, "tags", MappingProxyType(tags))

    @classmethod
    def from_dict(cls, data: Any) -> Filter:
        """Parse one wire filter object.

        Raises:
            TypeError: If *data* is not a mapping or a field has the wrong type.
            ValueError: If an integer field is negative.
        """
        validate_mapping(data, "filter")
        kwargs: dict[str, Any] = {}

        for name in ("ids", "authors"):
            if name in data:
                validate_str_list(data[name], name)
                kwargs[name] = frozenset(data[name])
        if "kinds" in data:
            validate_int_list(data["kinds"], "kinds")
            kwargs["kinds"] = frozenset(data["kinds"])
        for name in ("since", "until", "limit"):
            if data.get(name) is not None:
                validate_int(data[name], name)
                kwargs[name] = data[name]

        tags: dict[str, frozenset[str]] = {}
        for key, values in data.items():
            if not (isinstance(key, str) and len(key) == 2 and key.startswith("#")):  # noqa: PLR2004
                continue
            validate_str_list(values, key)
            tags[key[1]] = frozenset(values)
        kwargs["tags"] = tags

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Render the wire filter object (sets become sorted lists)."""
        result: dict[str, Any] = {}
        if self.ids is not None:
            result["ids"] = sorted(self.ids)
        if self.authors is not None:
            result["authors"] = sorted(self.authors)
        if self.kinds is not None:
            result["kinds"] = sorted(self.kinds)
        for name in ("since", "until", "limit"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        for letter in sorted(self.tags):
            result[f"#{letter}"] = sorted(self.tags[letter])
        return result


def filters_from_dicts(items: Iterable[Filter | Mapping[str, Any]]) -> list[Filter]:
    """Normalize a mix of [Filter][mockstr.models.filter.Filter] objects and wire dicts."""
    return [item if isinstance(item, Filter) else Filter.from_dict(item) for item in items]
