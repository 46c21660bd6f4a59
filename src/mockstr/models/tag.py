"""Validated record for a single event tag.

Tags arrive on the wire as positional string arrays (``["e", "<id>", "",
"root"]``). [Tag][mockstr.models.tag.Tag] checks that shape once, at
construction, so the rest of the code base reads ``tag.name`` and
``tag.value`` instead of indexing into lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ._validation import validate_str, validate_str_list


@dataclass(frozen=True, slots=True)
class Tag:
    """Immutable event tag.

    Attributes:
        name: Element 0 of the wire array (e.g. ``"e"``, ``"a"``, ``"L"``).
        values: The remaining elements, in order.

    Examples:
        ```python
        tag = Tag.from_list(["e", "ab" * 32, "", "root"])
        tag.name    # 'e'
        tag.value   # 'abab...'
        tag.to_list()
        # ['e', 'abab...', '', 'root']
        ```
    """

    name: str
    values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        validate_str(self.name, "tag name")
        if not self.name:
            raise ValueError("tag name must not be empty")
        validate_str_list(self.values, "tag values")
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    @property
    def value(self) -> str | None:
        """The first value (element 1), or ``None`` for a name-only tag."""
        return self.values[0] if self.values else None

    @classmethod
    def from_list(cls, raw: Any) -> Tag:
        """Build a tag from its positional wire form.

        Raises:
            TypeError: If *raw* is not a list of strings.
            ValueError: If *raw* is empty or its name is empty.
        """
        validate_str_list(raw, "tag")
        if not raw:
            raise ValueError("tag must not be empty")
        return cls(raw[0], tuple(raw[1:]))

    def to_list(self) -> list[str]:
        """Return the positional wire form."""
        return [self.name, *self.values]
