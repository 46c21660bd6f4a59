"""
Deterministic test identities and timestamps.

The roster uses fixed secret keys so pubkeys, addresses and event ids are
identical across runs. Public keys are derived and events signed with
``nostr_sdk.Keys``, so fixtures carry real ids and valid signatures even
though the simulator never verifies them.

Warning:
    These keys are public test material. Never reuse them outside tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nostr_sdk import EventBuilder, Keys, Timestamp
from nostr_sdk import Event as NostrEvent

from mockstr.core.exceptions import FixtureError
from mockstr.models import Event


BASE_TIMESTAMP = 1_705_320_000  # 2024-01-15 12:00:00 UTC
DEFAULT_STEP = 60


@dataclass(frozen=True, slots=True)
class Identity:
    """A named test keypair.

    Attributes:
        name: Roster name (``alice``, ``bob``...).
        secret_key: 64-hex secret key.
        pubkey: 64-hex public key derived from ``secret_key``.
        keys: The ``nostr_sdk.Keys`` used for signing.
    """

    name: str
    secret_key: str = field(repr=False)
    pubkey: str = field(init=False)
    keys: Keys = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        keys = Keys.parse(self.secret_key)
        object.__setattr__(self, "keys", keys)
        object.__setattr__(self, "pubkey", keys.public_key().to_hex())

    def sign(self, builder: EventBuilder, created_at: int) -> Event:
        """Stamp *builder* with *created_at*, sign it, and convert it.

        ``p`` tags naming the signer are kept (an issue addressed to its own
        author, a status on the owner's own patch).
        """
        stamped = builder.custom_created_at(Timestamp.from_secs(created_at))
        signed = stamped.allow_self_tagging().sign_with_keys(self.keys)
        return event_from_nostr(signed)


def event_from_nostr(inner: NostrEvent) -> Event:
    """Convert a signed ``nostr_sdk.Event`` into a [Event][mockstr.models.event.Event]."""
    return Event(
        id=inner.id().to_hex(),
        pubkey=inner.author().to_hex(),
        created_at=inner.created_at().as_secs(),
        kind=inner.kind().as_u16(),
        tags=tuple(list(tag.as_vec()) for tag in inner.tags().to_vec()),
        content=inner.content(),
        sig=inner.signature(),
    )


TEST_IDENTITIES: dict[str, Identity] = {
    identity.name: identity
    for identity in (
        Identity("alice", "01" * 32),
        Identity("bob", "02" * 32),
        Identity("charlie", "03" * 32),
        Identity("maintainer", "04" * 32),
        # Same key as the web client's dev login button
        Identity("dev_user", "0123456789abcdef" * 4),
    )
}


def get_identity(who: str | Identity) -> Identity:
    """Resolve a roster name (or pass an [Identity][mockstr.fixtures.identities.Identity] through).

    Raises:
        FixtureError: If *who* is not a roster name.
    """
    if isinstance(who, Identity):
        return who
    try:
        return TEST_IDENTITIES[who]
    except KeyError:
        raise FixtureError(
            f"Unknown test identity {who!r}, expected one of: {', '.join(TEST_IDENTITIES)}"
        ) from None


def identity_for_pubkey(pubkey: str) -> Identity | None:
    """Reverse lookup of a roster identity by public key."""
    for identity in TEST_IDENTITIES.values():
        if identity.pubkey == pubkey:
            return identity
    return None


class Clock:
    """Monotonic ``created_at`` source starting at a fixed base.

    Examples:
        ```python
        clock = Clock()
        clock.tick()   # 1705320000
        clock.tick()   # 1705320060
        ```
    """

    def __init__(self, start: int = BASE_TIMESTAMP, step: int = DEFAULT_STEP) -> None:
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        self._next = start
        self._step = step

    def peek(self) -> int:
        """The value the next [tick()][mockstr.fixtures.identities.Clock.tick] returns."""
        return self._next

    def tick(self) -> int:
        value = self._next
        self._next += self._step
        return value
