"""
Shared test fixtures for the fulfillment-token test suite.

Provides path resolution for the sample token files under tests/fixtures
and a fully built model for tests that only need "some valid token".
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

import pytest

from fulfillment_token.adapters.xml_codec import LxmlDocumentCodec
from fulfillment_token.builder import FulfillmentTokenBuilder
from fulfillment_token.model import DocumentModel

FIXTURES_DIR = Path(__file__).parent / "fixtures"

RESOURCE_ID = UUID("11111111-1111-1111-1111-111111111111")
PURCHASE = datetime(2024, 1, 1, tzinfo=UTC)
EXPIRATION = datetime(2024, 2, 1, tzinfo=UTC)


@pytest.fixture()
def fixtures_dir() -> Path:
    """Return the absolute path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture()
def sample_token_bytes() -> bytes:
    """A complete token as served by a content server (default namespace, no prefix)."""
    return (FIXTURES_DIR / "sample.acsm").read_bytes()


@pytest.fixture()
def wrong_root_bytes() -> bytes:
    """An adept: document that is not a fulfillment token."""
    return (FIXTURES_DIR / "wrong_root.xml").read_bytes()


@pytest.fixture()
def codec() -> LxmlDocumentCodec:
    return LxmlDocumentCodec()


@pytest.fixture()
def sample_model(sample_token_bytes: bytes, codec: LxmlDocumentCodec) -> DocumentModel:
    """The sample token parsed and wrapped in a model."""
    return DocumentModel(codec.parse(sample_token_bytes).value())


@pytest.fixture()
def built_model() -> DocumentModel:
    """A token built with only the mandatory fields."""
    return (
        FulfillmentTokenBuilder.start()
        .set_distributor("dist-A")
        .set_operator_url("http://example/op")
        .set_transaction("tx-1")
        .set_purchase(PURCHASE)
        .set_expiration(EXPIRATION)
        .set_resource_id(RESOURCE_ID)
        .build()
    )
