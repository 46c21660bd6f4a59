"""Shared constants for the models layer.

Defines the event kinds, status transitions, label namespaces, and wire
message verbs used across the simulator and the fixture layer. Placing them
here avoids circular dependencies between ``mockstr.relay`` and
``mockstr.fixtures``.

See Also:
    [mockstr.fixtures.builders][]: Uses [EventKind][mockstr.models.constants.EventKind]
        and [StatusKind][mockstr.models.constants.StatusKind] to stamp events.
    [mockstr.relay.codec][]: Uses [MessageType][mockstr.models.constants.MessageType]
        to decode and encode frames.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Well-known Nostr event kinds produced or consumed by git clients.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        TEXT_NOTE: Kind 1 -- short text note (NIP-01).
        DELETION: Kind 5 -- deletion request (NIP-09).
        COMMENT: Kind 1111 -- threaded comment (NIP-22).
        PATCH: Kind 1617 -- git patch (NIP-34).
        PULL_REQUEST: Kind 1618 -- pull request (NIP-34).
        PULL_REQUEST_UPDATE: Kind 1619 -- pull request update (NIP-34).
        ISSUE: Kind 1621 -- git issue (NIP-34).
        ISSUE_REPLY: Kind 1622 -- reply to an issue or patch.
        STATUS_OPEN: Kind 1630 -- open status (NIP-34).
        STATUS_APPLIED: Kind 1631 -- applied/merged/resolved status (NIP-34).
        STATUS_CLOSED: Kind 1632 -- closed status (NIP-34).
        STATUS_DRAFT: Kind 1633 -- draft status (NIP-34).
        LABEL: Kind 1985 -- namespaced label (NIP-32).
        REPO_ANNOUNCEMENT: Kind 30617 -- repository announcement
            (addressable, NIP-34).
        REPO_STATE: Kind 30618 -- repository refs state (addressable, NIP-34).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1
    DELETION = 5
    COMMENT = 1111
    PATCH = 1617
    PULL_REQUEST = 1618
    PULL_REQUEST_UPDATE = 1619
    ISSUE = 1621
    ISSUE_REPLY = 1622
    STATUS_OPEN = 1630
    STATUS_APPLIED = 1631
    STATUS_CLOSED = 1632
    STATUS_DRAFT = 1633
    LABEL = 1985
    REPO_ANNOUNCEMENT = 30_617
    REPO_STATE = 30_618


class StatusKind(IntEnum):
    """The closed set of status transitions for issues and patches.

    Each member's value is the event kind of the corresponding status event.
    Use [from_name()][mockstr.models.constants.StatusKind.from_name] to map a
    human-readable status (``"open"``, ``"applied"``...) to its kind.
    """

    OPEN = EventKind.STATUS_OPEN
    APPLIED = EventKind.STATUS_APPLIED
    CLOSED = EventKind.STATUS_CLOSED
    DRAFT = EventKind.STATUS_DRAFT

    @classmethod
    def from_name(cls, name: str) -> StatusKind:
        """Resolve a status by case-insensitive name.

        Raises:
            ValueError: If *name* is not one of open, applied, closed, draft.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Unknown status {name!r}, expected one of: {valid}") from None


class LabelNamespace(StrEnum):
    """Label namespaces (``L`` tag values) used in git workflows."""

    UGC = "ugc"
    GIT = "git"
    REVIEW = "review"
    PRIORITY = "priority"
    STATUS = "status"
    TYPE = "type"
    ROLE = "role"


class MessageType(StrEnum):
    """Verbs that open every wire frame (element 0 of the JSON array)."""

    REQ = "REQ"
    CLOSE = "CLOSE"
    EVENT = "EVENT"
    AUTH = "AUTH"
    EOSE = "EOSE"
    OK = "OK"
    NOTICE = "NOTICE"


EVENT_KIND_MAX = 65_535

ADDRESSABLE_KIND_MIN = 30_000
ADDRESSABLE_KIND_MAX = 39_999
