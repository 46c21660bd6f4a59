"""Unit tests for models.constants module."""

from enum import IntEnum, StrEnum

import pytest

from mockstr.models.constants import (
    ADDRESSABLE_KIND_MAX,
    ADDRESSABLE_KIND_MIN,
    EVENT_KIND_MAX,
    EventKind,
    LabelNamespace,
    MessageType,
    StatusKind,
)


class TestEventKind:
    """Tests for EventKind IntEnum."""

    def test_is_int_enum(self) -> None:
        assert issubclass(EventKind, IntEnum)
        assert EventKind.ISSUE == 1621

    def test_git_kinds(self) -> None:
        assert EventKind.PATCH == 1617
        assert EventKind.PULL_REQUEST == 1618
        assert EventKind.ISSUE_REPLY == 1622
        assert EventKind.LABEL == 1985

    def test_repository_kinds_are_addressable(self) -> None:
        for kind in (EventKind.REPO_ANNOUNCEMENT, EventKind.REPO_STATE):
            assert ADDRESSABLE_KIND_MIN <= kind <= ADDRESSABLE_KIND_MAX

    def test_all_within_range(self) -> None:
        assert all(0 <= kind <= EVENT_KIND_MAX for kind in EventKind)


class TestStatusKind:
    """Tests for StatusKind."""

    def test_values_are_status_kinds(self) -> None:
        assert [int(s) for s in StatusKind] == [1630, 1631, 1632, 1633]
        assert StatusKind.APPLIED == EventKind.STATUS_APPLIED

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("open", StatusKind.OPEN),
            ("APPLIED", StatusKind.APPLIED),
            ("Closed", StatusKind.CLOSED),
            ("draft", StatusKind.DRAFT),
        ],
    )
    def test_from_name(self, name: str, expected: StatusKind) -> None:
        assert StatusKind.from_name(name) is expected

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError, match="expected one of: open, applied, closed, draft"):
            StatusKind.from_name("merged")


class TestLabelNamespace:
    """Tests for LabelNamespace StrEnum."""

    def test_is_str_enum(self) -> None:
        assert issubclass(LabelNamespace, StrEnum)
        assert LabelNamespace.REVIEW == "review"

    def test_reexported_from_models_init(self) -> None:
        from mockstr.models import LabelNamespace as ReexportedLabelNamespace

        assert ReexportedLabelNamespace is LabelNamespace


class TestMessageType:
    """Tests for MessageType StrEnum."""

    def test_verbs(self) -> None:
        assert {m.value for m in MessageType} == {
            "REQ",
            "CLOSE",
            "EVENT",
            "AUTH",
            "EOSE",
            "OK",
            "NOTICE",
        }

    def test_string_comparison(self) -> None:
        assert MessageType.EOSE == "EOSE"
        assert MessageType("REQ") is MessageType.REQ
