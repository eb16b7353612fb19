"""Logging utilities for site-audit commands and services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator, Optional

_LOGGER_NAME = "site_audit"
_NO_REPORT = "-"

_current_report: ContextVar[Optional[str]] = ContextVar("site_audit_report", default=None)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the site_audit hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def current_report() -> Optional[str]:
    return _current_report.get()


@contextmanager
def report_context(report_id: str) -> Iterator[None]:
    """Tag every record logged inside the block with ``report_id``.

    The id lives in a context variable, so each request thread or task sees
    only the report it is building. Code handed to an executor must enter the
    context inside the submitted callable.
    """
    token = _current_report.set(report_id)
    try:
        yield
    finally:
        _current_report.reset(token)


class ReportContextFilter(logging.Filter):
    """Add ``report_id`` and ``report_tag`` attributes for the formatters below.

    ``report_tag`` is ``"[<id>] "`` inside a report context and empty outside,
    which keeps console lines for non-report work unchanged.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        report_id = current_report()
        record.report_id = report_id or _NO_REPORT
        record.report_tag = f"[{report_id}] " if report_id else ""
        return True


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the site_audit logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    context_filter = ReportContextFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(context_filter)
    stream_handler.setFormatter(
        logging.Formatter("[site-audit] %(levelname)s %(report_tag)s%(message)s")
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(report_id)s]: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = [
    "ReportContextFilter",
    "configure_logging",
    "current_report",
    "get_logger",
    "report_context",
]
