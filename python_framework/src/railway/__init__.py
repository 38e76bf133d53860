"""
Railway-Oriented Programming (ROP) helpers.

Boundary operations return a Result instead of raising:

    from railway import Result, ErrorCode

    def require_node(node, path: str) -> Result:
        if node is None:
            return Result.failure(ErrorCode.NOT_FOUND, f"No node at {path}")
        return Result.success(node)
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.result_failures import ResultFailures
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultFailures",
    "ResultAssertions",
]

__version__ = "1.1.0"
