"""
Failure description — structured error information for the failure track.

An ErrorCode names the kind of failure; a FailureDescription carries the code,
a human-readable message, the optional causing exception, and when it happened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """Structured error codes for the failure track."""

    # --- Document / input errors ---
    INVALID_STRUCTURE = "INVALID_STRUCTURE"
    """The document's shape is wrong (e.g. unexpected root element)."""

    INVALID_FORMAT = "INVALID_FORMAT"
    """A value or payload cannot be parsed or stored (malformed XML, control characters)."""

    NOT_FOUND = "NOT_FOUND"
    """A path resolved to nothing."""

    # --- Environment errors ---
    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Unexpected failure in an adapter (I/O, encoder, library)."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.NOT_FOUND, "No node at /adept:fulfillmentToken/adept:src")
    >>> desc.code
    <ErrorCode.NOT_FOUND: 'NOT_FOUND'>
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
