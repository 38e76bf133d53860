"""Exceptions raised by the token layer for conditions callers cannot ignore."""

from __future__ import annotations


class FulfillmentTokenError(Exception):
    """Base class for token-layer exceptions."""


class InvalidStructureError(FulfillmentTokenError, ValueError):
    """The tree is not a fulfillment token (wrong root element)."""


class InvalidFormatError(FulfillmentTokenError, ValueError):
    """A stored value cannot be parsed into its structured form."""


class StageConsumedError(FulfillmentTokenError, RuntimeError):
    """A builder stage was used again after it handed over to the next one."""
