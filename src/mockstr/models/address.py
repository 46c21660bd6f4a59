"""Coordinates of addressable events (``kind:pubkey:identifier``).

Addressable events (kinds 30000-39999) are referenced by an ``a`` tag whose
value is the coordinate triple rather than an event id, so that the
reference always points at the latest version of the entity.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from nostr_sdk import Coordinate, Kind, Nip19Coordinate, NostrSdkError, PublicKey

from ._validation import validate_hex, validate_int, validate_str
from .constants import EVENT_KIND_MAX


@dataclass(frozen=True, slots=True)
class Address:
    """Immutable ``kind:pubkey:identifier`` coordinate.

    Examples:
        ```python
        addr = Address.parse("30617:" + "a" * 64 + ":repo-x")
        addr.identifier   # 'repo-x'
        str(addr)         # '30617:aaaa...:repo-x'
        addr.to_naddr(["ws://localhost:7000"])   # 'naddr1...'
        ```
    """

    kind: int
    pubkey: str
    identifier: str

    def __post_init__(self) -> None:
        validate_int(self.kind, "address kind", maximum=EVENT_KIND_MAX)
        validate_hex(self.pubkey, "address pubkey", 64)
        validate_str(self.identifier, "address identifier")

    def __str__(self) -> str:
        return f"{self.kind}:{self.pubkey}:{self.identifier}"

    @classmethod
    def parse(cls, raw: str) -> Address:
        """Parse a coordinate string.

        The identifier may itself contain ``:``; only the first two
        separators are significant.

        Raises:
            ValueError: If *raw* does not have the ``kind:pubkey:identifier``
                shape or a component is invalid.
        """
        parts = raw.split(":", 2)
        if len(parts) != 3:  # noqa: PLR2004
            raise ValueError(f"Invalid address {raw!r}: expected kind:pubkey:identifier")
        kind, pubkey, identifier = parts
        if not kind.isdigit():
            raise ValueError(f"Invalid address {raw!r}: kind must be an integer")
        return cls(int(kind), pubkey, identifier)

    def to_naddr(self, relays: Sequence[str] = ()) -> str:
        """Encode as a NIP-19 ``naddr`` with optional relay hints.

        Web clients route repositories by ``naddr``, so page objects use this
        to build repository URLs.
        """
        coordinate = Coordinate(Kind(self.kind), PublicKey.parse(self.pubkey), self.identifier)
        return Nip19Coordinate(coordinate, list(relays)).to_bech32()

    @classmethod
    def from_naddr(cls, naddr: str) -> Address:
        """Decode a NIP-19 ``naddr`` (relay hints are discarded).

        Raises:
            ValueError: If *naddr* is not a valid ``naddr`` string.
        """
        try:
            coordinate = Nip19Coordinate.from_bech32(naddr).coordinate()
        except NostrSdkError as e:
            raise ValueError(f"Invalid naddr {naddr!r}: {e}") from e
        return cls(
            coordinate.kind().as_u16(),
            coordinate.public_key().to_hex(),
            coordinate.identifier(),
        )
