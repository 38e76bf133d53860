"""
fulfillment_token — typed access to, and safe construction of, fulfillment tokens.

A fulfillment token is the XML document (`adept:fulfillmentToken`) that
authorizes retrieval of a licensed digital resource. This package offers:

  - DocumentModel: fail-soft read/write access to a token's fields by symbolic path
  - FulfillmentTokenBuilder: a staged builder that only yields a model once
    every mandatory field has been supplied, in order

Boundary operations report failures on the Railway-Oriented `Result` track.
"""

__version__ = "0.1.0"

from fulfillment_token.builder import FulfillmentTokenBuilder  # noqa: E402
from fulfillment_token.model import DocumentModel  # noqa: E402

__all__ = ["DocumentModel", "FulfillmentTokenBuilder", "__version__"]
