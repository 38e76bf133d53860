"""
Ports — Protocol-based interfaces for the XML collaborators.

The token layer never touches a parser or an XPath engine directly; it talks
to these contracts, and the lxml adapters satisfy them structurally:

  DocumentModel / builder ← Ports (protocols) ← adapters.lxml_tree, adapters.xml_codec
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from railway.result import Result


@runtime_checkable
class PathResolver(Protocol):
    """
    Port: evaluate a symbolic path against a document.

    Never raises into callers. A path that matches nothing, or that the
    engine cannot evaluate, yields None. Keyword arguments bind the
    path's $variables.
    """

    def find_node(self, document: Any, path: str, **variables: str) -> Any | None:
        """First element matched by `path`, or None."""
        ...

    def find_string(self, document: Any, path: str, **variables: str) -> str | None:
        """String value of the first text/attribute node matched by `path`, or None."""
        ...

    def attributes(self, element: Any) -> dict[str, str]:
        """Attribute bag of a located element."""
        ...


@runtime_checkable
class TreeFactory(Protocol):
    """Port: create namespaced documents and detached elements."""

    def new_document(self, root_name: str) -> Any:
        """A fresh document whose root is `root_name` in the token namespace."""
        ...

    def create_element(self, name: str, text: str | None = None) -> Any:
        """A detached element `name` in the token namespace."""
        ...


@runtime_checkable
class DocumentCodec(Protocol):
    """Port: move a document between bytes and tree form."""

    def parse(self, raw: bytes) -> Result[Any]:
        ...

    def serialize(self, document: Any) -> Result[bytes]:
        ...
