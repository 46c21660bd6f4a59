"""
Wire codec for the client/relay frame subset.

Every frame is one JSON array whose first element is the verb.

Client to relay:

* ``["REQ", sub_id, filter, ...]``
* ``["CLOSE", sub_id]``
* ``["EVENT", event]``
* ``["AUTH", event]``

Relay to client:

* ``["EVENT", sub_id, event]``
* ``["EOSE", sub_id]``
* ``["OK", event_id, accepted, message]``
* ``["NOTICE", message]``

[decode_client_frame()][mockstr.relay.codec.decode_client_frame] raises
[MalformedFrameError][mockstr.core.exceptions.MalformedFrameError] for
anything it cannot dispatch and
[InvalidEventError][mockstr.core.exceptions.InvalidEventError] for event
payloads that fail model validation.
"""

from __future__ import annotations

import json
from typing import Any, NamedTuple, TypeAlias

from mockstr.core.exceptions import InvalidEventError, MalformedFrameError
from mockstr.models import Event, Filter, MessageType


class ReqMessage(NamedTuple):
    sub_id: str
    filters: tuple[Filter, ...]


class CloseMessage(NamedTuple):
    sub_id: str


class EventMessage(NamedTuple):
    event: Event


class AuthMessage(NamedTuple):
    event: Event


ClientMessage: TypeAlias = ReqMessage | CloseMessage | EventMessage | AuthMessage


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_client_frame(raw: str | bytes) -> ClientMessage:
    """Parse one client frame.

    Binary frames are decoded as UTF-8 text.

    Raises:
        MalformedFrameError: Bad UTF-8 or JSON, not a non-empty array,
            unknown verb, or missing/ill-typed positional fields.
        InvalidEventError: The ``EVENT``/``AUTH`` payload is an object but
            not a valid event.
    """
    text = _as_text(raw)
    try:
        frame = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedFrameError(f"could not parse frame: {e.msg}", text) from e

    if not isinstance(frame, list) or not frame:
        raise MalformedFrameError("frame must be a non-empty JSON array", text)
    verb = frame[0]
    if not isinstance(verb, str):
        raise MalformedFrameError("frame verb must be a string", text)

    if verb == MessageType.REQ:
        return ReqMessage(_sub_id(frame, text), _filters(frame[2:], text))
    if verb == MessageType.CLOSE:
        return CloseMessage(_sub_id(frame, text))
    if verb == MessageType.EVENT:
        return EventMessage(_event(frame, text))
    if verb == MessageType.AUTH:
        return AuthMessage(_event(frame, text))
    raise MalformedFrameError(f"unknown message type: {verb}", text)


def _as_text(raw: str | bytes) -> str:
    if isinstance(raw, (bytes, bytearray)):
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedFrameError("binary frame is not valid UTF-8") from e
    return raw


def _sub_id(frame: list[Any], text: str) -> str:
    if len(frame) < 2:  # noqa: PLR2004
        raise MalformedFrameError(f"{frame[0]}: missing subscription id", text)
    sub_id = frame[1]
    if not isinstance(sub_id, str) or not sub_id:
        raise MalformedFrameError(f"{frame[0]}: subscription id must be a non-empty string", text)
    return sub_id


def _filters(raw_filters: list[Any], text: str) -> tuple[Filter, ...]:
    try:
        return tuple(Filter.from_dict(f) for f in raw_filters)
    except (TypeError, ValueError) as e:
        raise MalformedFrameError(f"REQ: invalid filter: {e}", text) from e


def _event(frame: list[Any], text: str) -> Event:
    if len(frame) < 2:  # noqa: PLR2004
        raise MalformedFrameError(f"{frame[0]}: missing event", text)
    payload = frame[1]
    if not isinstance(payload, dict):
        raise MalformedFrameError(f"{frame[0]}: event must be an object", text)
    try:
        return Event.from_dict(payload)
    except (TypeError, ValueError) as e:
        event_id = payload.get("id")
        raise InvalidEventError(
            f"invalid: {e}", event_id if isinstance(event_id, str) and event_id else None
        ) from e


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _dumps(frame: list[Any]) -> str:
    return json.dumps(frame, separators=(",", ":"), ensure_ascii=False)


def encode_event(sub_id: str, event: Event) -> str:
    return _dumps([MessageType.EVENT.value, sub_id, event.to_dict()])


def encode_eose(sub_id: str) -> str:
    return _dumps([MessageType.EOSE.value, sub_id])


def encode_ok(event_id: str, accepted: bool, message: str = "") -> str:  # noqa: FBT001
    return _dumps([MessageType.OK.value, event_id, accepted, message])


def encode_notice(message: str) -> str:
    return _dumps([MessageType.NOTICE.value, message])
