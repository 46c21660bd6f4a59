"""Tests for mockstr.models._validation shared helpers."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from mockstr.models._validation import (
    validate_hex,
    validate_int,
    validate_int_list,
    validate_mapping,
    validate_str,
    validate_str_list,
)


class TestValidateInt:
    def test_zero_accepted(self) -> None:
        validate_int(0, "kind")

    def test_bool_rejected(self) -> None:
        with pytest.raises(TypeError, match="kind must be an int, got bool"):
            validate_int(True, "kind")

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError, match="got float"):
            validate_int(1.0, "kind")

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="kind must be non-negative"):
            validate_int(-1, "kind")

    def test_maximum(self) -> None:
        validate_int(65535, "kind", maximum=65535)
        with pytest.raises(ValueError, match="at most 65535, got 65536"):
            validate_int(65536, "kind", maximum=65535)


class TestValidateHex:
    def test_valid(self) -> None:
        validate_hex("0123456789abcdef" * 4, "id", 64)

    def test_uppercase_rejected(self) -> None:
        with pytest.raises(ValueError, match="64 lowercase hex characters"):
            validate_hex("A" * 64, "id", 64)

    def test_wrong_length(self) -> None:
        with pytest.raises(ValueError, match="128 lowercase hex"):
            validate_hex("a" * 64, "sig", 128)

    def test_non_str(self) -> None:
        with pytest.raises(TypeError, match="id must be a str, got NoneType"):
            validate_hex(None, "id", 64)


class TestValidateStr:
    def test_valid(self) -> None:
        validate_str("", "content")

    def test_invalid(self) -> None:
        with pytest.raises(TypeError, match="content must be a str, got int"):
            validate_str(1, "content")


class TestValidateLists:
    def test_str_list(self) -> None:
        validate_str_list(["a", "b"], "tag")
        validate_str_list(("a",), "tag")

    def test_str_list_not_a_list(self) -> None:
        with pytest.raises(TypeError, match="tag must be a list, got str"):
            validate_str_list("abc", "tag")

    def test_str_list_bad_item(self) -> None:
        with pytest.raises(TypeError, match="tag must contain only str, got int"):
            validate_str_list(["a", 1], "tag")

    def test_int_list(self) -> None:
        validate_int_list([0, 1621], "kinds")

    def test_int_list_negative(self) -> None:
        with pytest.raises(ValueError, match="kinds must be non-negative"):
            validate_int_list([1, -2], "kinds")

    def test_int_list_set_rejected(self) -> None:
        with pytest.raises(TypeError, match="kinds must be a list, got set"):
            validate_int_list({1}, "kinds")


class TestValidateMapping:
    def test_dict_accepted(self) -> None:
        validate_mapping({}, "filter")

    def test_mapping_proxy_accepted(self) -> None:
        validate_mapping(MappingProxyType({"a": 1}), "filter")

    def test_list_rejected(self) -> None:
        with pytest.raises(TypeError, match="filter must be a Mapping, got list"):
            validate_mapping([], "filter")
