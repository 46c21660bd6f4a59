"""
Immutable Nostr event with wire (de)serialization.

Events enter the simulator from three places -- seeded fixtures, injected
fixtures, and frames published by the client under test -- and all three
pass through [Event.from_dict()][mockstr.models.event.Event.from_dict] or the
dataclass constructor, so every stored event has the same validated shape.

Signatures are carried as opaque 128-hex blobs and are never verified. Ids
are not recomputed on receipt either; [compute_id()][mockstr.models.event.Event.compute_id]
exists for the fixture layer, which needs content-derived ids.

See Also:
    [Tag][mockstr.models.tag.Tag]: Validated tag record held in ``tags``.
    [Address][mockstr.models.address.Address]: Coordinate derived from
        addressable events.
    [mockstr.relay.store][]: The id-keyed store these events live in.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ._validation import validate_hex, validate_int, validate_mapping, validate_str
from .address import Address
from .constants import ADDRESSABLE_KIND_MAX, ADDRESSABLE_KIND_MIN, EVENT_KIND_MAX
from .tag import Tag


_REQUIRED_FIELDS = ("id", "pubkey", "created_at", "kind", "tags", "content", "sig")


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable Nostr event.

    Validation is performed eagerly at construction time: ``id`` and
    ``pubkey`` must be 64 lowercase hex characters, ``sig`` 128, and
    ``created_at``/``kind`` non-negative integers. ``tags`` may be given as
    positional lists and are converted to [Tag][mockstr.models.tag.Tag]
    records.

    Attributes:
        id: 64-hex event identifier; the unique key in the store.
        pubkey: 64-hex author public key.
        created_at: Unix timestamp in seconds.
        kind: Event kind (0-65535).
        tags: Ordered tag records.
        content: Arbitrary content string.
        sig: 128-hex signature (opaque, unverified).

    Examples:
        ```python
        event = Event.from_dict(frame[1])
        event.kind                  # 1621
        event.tag_values("a")       # ['30617:<pubkey>:repo-x']
        event.to_dict() == frame[1] # True
        ```
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[Tag, ...] = ()
    content: str = ""
    sig: str = field(default="0" * 128, repr=False)

    def __post_init__(self) -> None:
        validate_hex(self.id, "id", 64)
        validate_hex(self.pubkey, "pubkey", 64)
        validate_int(self.created_at, "created_at")
        validate_int(self.kind, "kind", maximum=EVENT_KIND_MAX)
        validate_str(self.content, "content")
        validate_hex(self.sig, "sig", 128)

        if not isinstance(self.tags, (list, tuple)):
            raise TypeError(f"tags must be a list, got {type(self.tags).__name__}")
        tags = tuple(t if isinstance(t, Tag) else Tag.from_list(t) for t in self.tags)
        object.__setattr__(self, "tags", tags)

    # -------------------------------------------------------------------------
    # Wire conversion
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any) -> Event:
        """Build an event from its wire object.

        Raises:
            TypeError: If *data* is not a mapping or a field has the wrong type.
            ValueError: If a required field is missing or a value is invalid.
        """
        validate_mapping(data, "event")
        missing = [name for name in _REQUIRED_FIELDS if name not in data]
        if missing:
            raise ValueError(f"event is missing fields: {', '.join(missing)}")
        return cls(
            id=data["id"],
            pubkey=data["pubkey"],
            created_at=data["created_at"],
            kind=data["kind"],
            tags=data["tags"],
            content=data["content"],
            sig=data["sig"],
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the wire object (JSON-serializable)."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [tag.to_list() for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    @staticmethod
    def compute_id(
        *,
        pubkey: str,
        created_at: int,
        kind: int,
        tags: Iterable[Tag | list[str]],
        content: str,
    ) -> str:
        """Derive the NIP-01 event id.

        The id is the SHA-256 of the compact JSON array
        ``[0, pubkey, created_at, kind, tags, content]``.
        """
        raw_tags = [t.to_list() if isinstance(t, Tag) else list(t) for t in tags]
        serialized = json.dumps(
            [0, pubkey, created_at, kind, raw_tags, content],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return hashlib.sha256(serialized.encode("utf-8")).hexdigest()

    # -------------------------------------------------------------------------
    # Tag helpers
    # -------------------------------------------------------------------------

    def tag_values(self, name: str) -> list[str]:
        """Return element 1 of every tag named *name*, in tag order."""
        return [tag.values[0] for tag in self.tags if tag.name == name and tag.values]

    def first_tag_value(self, name: str) -> str | None:
        """Return element 1 of the first tag named *name*, or ``None``."""
        for tag in self.tags:
            if tag.name == name and tag.values:
                return tag.values[0]
        return None

    @property
    def is_addressable(self) -> bool:
        """Whether the kind falls in the addressable range (30000-39999)."""
        return ADDRESSABLE_KIND_MIN <= self.kind <= ADDRESSABLE_KIND_MAX

    @property
    def identifier(self) -> str | None:
        """The ``d`` tag value, or ``None`` if absent."""
        return self.first_tag_value("d")

    @property
    def address(self) -> Address | None:
        """The ``kind:pubkey:identifier`` coordinate of an addressable event.

        ``None`` for non-addressable kinds. A missing ``d`` tag yields the
        empty identifier, as relays treat it.
        """
        if not self.is_addressable:
            return None
        return Address(self.kind, self.pubkey, self.identifier or "")


def events_from_dicts(items: Iterable[Event | Mapping[str, Any]]) -> list[Event]:
    """Normalize a mix of [Event][mockstr.models.event.Event] objects and wire dicts."""
    return [item if isinstance(item, Event) else Event.from_dict(item) for item in items]
