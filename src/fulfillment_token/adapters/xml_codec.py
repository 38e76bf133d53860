"""
XML codec adapter — bytes to tree and back with lxml.

Adapter layer — implements the DocumentCodec port. Parsing uses a parser
with entity resolution and network access disabled; failures are returned
as Result values, never raised into the caller.
"""

from __future__ import annotations

from typing import Any

import structlog
from lxml import etree
from railway import ErrorCode
from railway.result import Result

from fulfillment_token.config import SerializationSettings

log = structlog.get_logger()


class LxmlDocumentCodec:
    """Parse and serialize fulfillment tokens."""

    def __init__(self, settings: SerializationSettings | None = None) -> None:
        self._settings = settings or SerializationSettings()

    def parse(self, raw: bytes) -> Result[etree._ElementTree]:
        """
        Parse raw token bytes into an element tree.

        Returns Result.failure(INVALID_FORMAT, ...) for empty or malformed input.
        """
        if not raw or not raw.strip():
            return Result.failure(ErrorCode.INVALID_FORMAT, "Token payload is empty")
        return Result.from_computation(
            lambda: self._do_parse(raw),
            ErrorCode.INVALID_FORMAT,
            "Token payload is not well-formed XML",
        )

    def serialize(self, document: Any) -> Result[bytes]:
        """
        Render the tree to bytes according to the serialization settings.

        Returns Result.failure(TECHNICAL_ERROR, ...) if lxml cannot encode it.
        """
        return Result.from_computation(
            lambda: self._do_serialize(document),
            ErrorCode.TECHNICAL_ERROR,
            "Token serialization failed",
        )

    def _do_parse(self, raw: bytes) -> etree._ElementTree:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)
        root = etree.fromstring(raw, parser)
        log.debug("token.parsed", size=len(raw), root=root.tag)
        return root.getroottree()

    def _do_serialize(self, document: Any) -> bytes:
        data: bytes = etree.tostring(
            document,
            encoding=self._settings.encoding,
            xml_declaration=self._settings.xml_declaration,
            pretty_print=self._settings.pretty_print,
        )
        log.debug("token.serialized", size=len(data))
        return data
