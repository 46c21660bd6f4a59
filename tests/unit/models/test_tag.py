"""Unit tests for models.tag module."""

import pytest

from mockstr.models import Tag


class TestTag:
    """Tag record validation and wire form."""

    def test_from_list(self):
        tag = Tag.from_list(["e", "abc", "", "root"])
        assert tag.name == "e"
        assert tag.values == ("abc", "", "root")
        assert tag.value == "abc"

    def test_to_list(self):
        assert Tag("l", ("approved", "review")).to_list() == ["l", "approved", "review"]

    def test_name_only(self):
        tag = Tag.from_list(["t"])
        assert tag.values == ()
        assert tag.value is None

    def test_values_list_coerced_to_tuple(self):
        assert Tag("t", ["a"]).values == ("a",)  # type: ignore[arg-type]

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            Tag.from_list([])

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="name"):
            Tag("")

    def test_not_a_list(self):
        with pytest.raises(TypeError):
            Tag.from_list("e")
