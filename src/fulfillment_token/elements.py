"""
ElementFactory — create a namespaced child with text and attach it.

Stateless apart from the TreeFactory it delegates element creation to.
Creation and attachment are separate steps so a caller can build every
element of a batch before any of them touches the tree.
"""

from __future__ import annotations

import re
from typing import Any

from fulfillment_token.domain.errors import InvalidFormatError
from fulfillment_token.domain.ports import TreeFactory

# Outside the XML 1.0 Char production: cannot be stored in text or attribute values.
_NOT_XML_CHAR = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def check_text(field: str, value: str) -> str:
    """Return `value` unchanged, or raise InvalidFormatError if XML cannot carry it."""
    if not isinstance(value, str):
        raise InvalidFormatError(f"{field} must be text, got {type(value).__name__}")
    bad = _NOT_XML_CHAR.search(value)
    if bad is not None:
        raise InvalidFormatError(
            f"{field} contains {bad.group()!r} at offset {bad.start()}, which XML cannot carry"
        )
    return value


class ElementFactory:
    def __init__(self, tree_factory: TreeFactory) -> None:
        self._tree_factory = tree_factory

    def create_element(self, name: str, text: str | None = None) -> Any:
        """A detached `name` element holding `text`."""
        return self._tree_factory.create_element(name, text)

    @staticmethod
    def attach(parent: Any, element: Any, *, before: Any | None = None) -> Any:
        """
        Add `element` to `parent`: last, or immediately ahead of `before`
        when given (which must be a child of `parent`).
        """
        if before is None:
            parent.append(element)
        else:
            parent.insert(parent.index(before), element)
        return element

    def append_element(self, parent: Any, name: str, text: str | None = None, *, before: Any | None = None) -> Any:
        """Create `name` with `text` and attach it to `parent`."""
        return self.attach(parent, self.create_element(name, text), before=before)
