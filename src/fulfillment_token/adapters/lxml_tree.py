"""
lxml tree adapter — XPath resolution and namespaced element creation.

Adapter layer — implements the PathResolver and TreeFactory ports with
lxml.etree. Documents are `etree._ElementTree` instances; nodes are
`etree._Element`.

Resolution is fail-soft: an XPath that matches nothing, or that lxml
refuses to evaluate (a syntax error, an unbound $variable), is logged at
debug level and reported as None. Caller-supplied values travel as XPath
variables (`$key`) and are compared as strings, never parsed as XPath.
"""

from __future__ import annotations

from typing import Any

import structlog
from lxml import etree

from fulfillment_token.domain.paths import ADEPT_NS, ADEPT_PREFIX, NAMESPACES

log = structlog.get_logger()


def _evaluate(document: Any, path: str, variables: dict[str, str]) -> list[Any]:
    try:
        matches = document.xpath(path, namespaces=NAMESPACES, **variables)
    except etree.XPathError as e:
        log.debug("token.path_unresolved", path=path, error=str(e))
        return []
    if not isinstance(matches, list):
        # string(), count() and friends return scalars
        return [matches]
    return matches


class LxmlPathResolver:
    """Evaluate `adept:`-prefixed XPath expressions with lxml."""

    def find_node(self, document: Any, path: str, **variables: str) -> etree._Element | None:
        for match in _evaluate(document, path, variables):
            if isinstance(match, etree._Element):
                return match
        return None

    def find_string(self, document: Any, path: str, **variables: str) -> str | None:
        matches = _evaluate(document, path, variables)
        if not matches:
            return None
        first = matches[0]
        if isinstance(first, etree._Element):
            return "".join(first.itertext())
        return str(first)

    def attributes(self, element: Any) -> dict[str, str]:
        return extract_attributes(element)


def extract_attributes(element: etree._Element) -> dict[str, str]:
    """Attribute bag of `element`; un-namespaced names stay bare."""
    return {str(name): str(value) for name, value in element.attrib.items()}


class LxmlTreeFactory:
    """Create `adept:` elements and documents."""

    def new_document(self, root_name: str) -> etree._ElementTree:
        root = etree.Element(f"{{{ADEPT_NS}}}{root_name}", nsmap={ADEPT_PREFIX: ADEPT_NS})
        return etree.ElementTree(root)

    def create_element(self, name: str, text: str | None = None) -> etree._Element:
        element = etree.Element(f"{{{ADEPT_NS}}}{name}", nsmap={ADEPT_PREFIX: ADEPT_NS})
        if text is not None:
            element.text = text
        return element


def local_name(element: etree._Element) -> str:
    """Tag without its namespace."""
    return etree.QName(element).localname
