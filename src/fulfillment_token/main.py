"""
Application entry point — inspect fulfillment token files from the command line.

Composition root: loads settings, configures structlog, creates the lxml
codec and resolver, and runs each file through the read_token railway.

    fulfillment-token book.acsm other.acsm

Exit status is 0 when every file opens as a fulfillment token, 1 otherwise.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog
from railway import ResultFailures
from railway.result import Result

from fulfillment_token import __version__
from fulfillment_token.adapters.lxml_tree import LxmlPathResolver
from fulfillment_token.adapters.xml_codec import LxmlDocumentCodec
from fulfillment_token.config import TokenSettings
from fulfillment_token.model import DocumentModel
from fulfillment_token.pipeline import read_token


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for human-readable console output.

    Unknown level names fall back to INFO.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _read_file(path: Path, codec: LxmlDocumentCodec, resolver: LxmlPathResolver) -> Result[DocumentModel]:
    try:
        raw = path.read_bytes()
    except OSError as e:
        return ResultFailures.technical_error(f"Cannot read {path}", e)
    return read_token(raw, codec, resolver)


def _summary(model: DocumentModel) -> dict[str, str | None]:
    return {
        "distributor": model.distributor,
        "operator_url": model.operator_url,
        "transaction": model.transaction,
        "purchase": model.purchase,
        "expiration": model.expiration,
        "resource": model.resource,
        "resource_item": model.resource_item,
        "fulfillment_type": model.fulfillment_type,
    }


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fulfillment-token", description="Inspect fulfillment token files.")
    parser.add_argument("paths", nargs="+", type=Path, help=".acsm files to open")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Open every file given on the command line and log its mandatory fields."""
    args = _parse_args(argv)
    try:
        settings = TokenSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        return 1

    configure_structlog(settings.log_level)
    log = structlog.get_logger()
    log.info("app.starting", version=__version__, files=len(args.paths))

    codec = LxmlDocumentCodec(settings.serialization)
    resolver = LxmlPathResolver()
    failures = 0
    for path in args.paths:
        result = _read_file(path, codec, resolver)
        if result.is_success():
            log.info("token.inspected", file=str(path), **_summary(result.value()))
        else:
            failures += 1
            error = result.error()
            log.error("token.unreadable", file=str(path), code=error.code.value, error=error.message)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
