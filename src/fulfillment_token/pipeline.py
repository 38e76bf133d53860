"""
Pipelines — bytes to DocumentModel and back, as Result railways.

  codec.parse(raw) → DocumentModel.open(tree)      (read_token)
  codec.serialize(model.document)                  (write_token)

Each stage returns Result[T]; the first failure short-circuits.
"""

from __future__ import annotations

from railway.result import Result

from fulfillment_token.domain.ports import DocumentCodec, PathResolver
from fulfillment_token.model import DocumentModel


def read_token(
    raw: bytes,
    codec: DocumentCodec,
    resolver: PathResolver | None = None,
) -> Result[DocumentModel]:
    """
    Parse token bytes and wrap the tree in a DocumentModel.

    Failures: INVALID_FORMAT from the codec for malformed XML,
    INVALID_STRUCTURE when the root is not fulfillmentToken.
    """
    return codec.parse(raw).flat_map(lambda document: DocumentModel.open(document, resolver))


def write_token(model: DocumentModel, codec: DocumentCodec) -> Result[bytes]:
    """Serialize the model's (shared) tree."""
    return codec.serialize(model.document)
