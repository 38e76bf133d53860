"""
Convenience factories for the failures the token layer produces.

    ResultFailures.not_found("hmac", "/adept:fulfillmentToken/adept:hmac")

instead of spelling out Result.failure(ErrorCode.NOT_FOUND, ...) at every call site.
"""

from __future__ import annotations

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """Factory methods for common failure types."""

    @staticmethod
    def invalid_structure(message: str, exception: BaseException | None = None) -> Result:
        """Document shape rejected — wrong root element."""
        return Result.failure(ErrorCode.INVALID_STRUCTURE, message, exception)

    @staticmethod
    def invalid_format(message: str, exception: BaseException | None = None) -> Result:
        """Value rejected — naive timestamp, text XML cannot carry."""
        return Result.failure(ErrorCode.INVALID_FORMAT, message, exception)

    @staticmethod
    def not_found(field: str, path: str) -> Result:
        """Nothing at the path the field is addressed by."""
        return Result.failure(
            ErrorCode.NOT_FOUND,
            f"{field} not found at path: {path}",
        )

    @staticmethod
    def technical_error(message: str, exception: BaseException | None = None) -> Result:
        return Result.failure(ErrorCode.TECHNICAL_ERROR, message, exception)
