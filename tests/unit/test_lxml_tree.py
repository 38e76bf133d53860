"""
Unit tests for the lxml tree adapter — resolver and factory.

Test categories:
  - Port conformance: adapters satisfy the Protocol contracts
  - Resolution: nodes, text and attributes found by adept: paths
  - Fail-soft: unmatched and unevaluable paths yield None
  - Factory: namespaced documents and elements
"""

from __future__ import annotations

import pytest
from lxml import etree

from fulfillment_token.adapters.lxml_tree import (
    LxmlPathResolver,
    LxmlTreeFactory,
    extract_attributes,
    local_name,
)
from fulfillment_token.domain import paths
from fulfillment_token.domain.ports import PathResolver, TreeFactory

_DOC = b"""<adept:fulfillmentToken xmlns:adept="http://ns.adobe.com/adept" auth="user">
  <adept:distributor>dist-A</adept:distributor>
  <adept:hmac/>
  <adept:resourceItemInfo><adept:metadata>
    <dc:title xmlns:dc="http://purl.org/dc/elements/1.1/" lang="en">Title</dc:title>
  </adept:metadata></adept:resourceItemInfo>
</adept:fulfillmentToken>"""


@pytest.fixture()
def document() -> etree._ElementTree:
    return etree.fromstring(_DOC).getroottree()


@pytest.fixture()
def resolver() -> LxmlPathResolver:
    return LxmlPathResolver()


class TestPortConformance:
    def test_resolver_satisfies_port(self, resolver: LxmlPathResolver) -> None:
        assert isinstance(resolver, PathResolver)

    def test_factory_satisfies_port(self) -> None:
        assert isinstance(LxmlTreeFactory(), TreeFactory)


class TestResolution:
    def test_find_string_text(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        """
        GIVEN a document with a distributor
        WHEN its text path is resolved
        THEN the text is returned as a plain str.
        """
        value = resolver.find_string(document, paths.DISTRIBUTOR.text)
        assert value == "dist-A"
        assert type(value) is str

    def test_find_string_attribute(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_string(document, paths.AUTH.value) == "user"

    def test_find_node(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        node = resolver.find_node(document, paths.HMAC.node)
        assert node is not None
        assert local_name(node) == "hmac"

    def test_find_string_on_element_path_joins_text(
        self, resolver: LxmlPathResolver, document: etree._ElementTree
    ) -> None:
        assert resolver.find_string(document, paths.DISTRIBUTOR.node) == "dist-A"

    def test_scalar_xpath_result(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_string(document, f"string({paths.DISTRIBUTOR.node})") == "dist-A"

    def test_local_name_predicate_crosses_namespaces(
        self, resolver: LxmlPathResolver, document: etree._ElementTree
    ) -> None:
        node = resolver.find_node(document, paths.METADATA_ENTRY, key="title")
        assert node is not None
        assert node.text == "Title"


class TestFailSoft:
    def test_missing_text_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_string(document, paths.TRANSACTION.text) is None

    def test_empty_element_text_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_string(document, paths.HMAC.text) is None

    def test_missing_attribute_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_string(document, paths.FULFILLMENT_TYPE.value) is None

    def test_missing_node_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_node(document, paths.SRC.node) is None

    def test_text_path_is_not_a_node(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_node(document, paths.DISTRIBUTOR.text) is None

    def test_broken_expression_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        """
        GIVEN an expression lxml cannot compile
        WHEN resolved
        THEN no exception escapes and None is returned.
        """
        assert resolver.find_node(document, "/adept:fulfillmentToken[") is None
        assert resolver.find_string(document, "/adept:fulfillmentToken[") is None

    def test_unbound_variable_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_node(document, paths.METADATA_ENTRY) is None

    def test_quoted_key_is_compared_not_parsed(
        self, resolver: LxmlPathResolver, document: etree._ElementTree
    ) -> None:
        """
        GIVEN a key shaped like an XPath predicate that would match every entry
        WHEN it is bound to $key
        THEN it is compared as a literal local name and matches nothing.
        """
        key = "nosuch' or 'a'='a"
        assert resolver.find_node(document, paths.METADATA_ENTRY, key=key) is None
        assert resolver.find_string(document, paths.METADATA_ENTRY, key=key) is None

    def test_unknown_prefix_is_none(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        assert resolver.find_node(document, "/dc:fulfillmentToken") is None


class TestAttributes:
    def test_extract_attributes(self, resolver: LxmlPathResolver, document: etree._ElementTree) -> None:
        node = resolver.find_node(document, paths.METADATA_ENTRY, key="title")
        assert extract_attributes(node) == {"lang": "en"}
        assert resolver.attributes(node) == {"lang": "en"}

    def test_namespaced_attribute_keeps_clark_name(self) -> None:
        element = etree.fromstring(b'<a xmlns:x="urn:x" x:k="v" k="w"/>')
        assert extract_attributes(element) == {"{urn:x}k": "v", "k": "w"}


class TestTreeFactory:
    def test_new_document_root(self) -> None:
        """
        GIVEN the tree factory
        WHEN a document is created
        THEN its root is in the adept namespace with the adept prefix.
        """
        document = LxmlTreeFactory().new_document(paths.ROOT_NAME)
        root = document.getroot()
        assert root.tag == "{http://ns.adobe.com/adept}fulfillmentToken"
        assert root.prefix == "adept"
        assert len(root) == 0

    def test_create_element_with_text(self) -> None:
        element = LxmlTreeFactory().create_element("distributor", "dist-A")
        assert element.tag == "{http://ns.adobe.com/adept}distributor"
        assert element.text == "dist-A"

    def test_create_element_without_text(self) -> None:
        assert LxmlTreeFactory().create_element("resourceItemInfo").text is None
