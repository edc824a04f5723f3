"""Logging utilities for gl-provision."""

from __future__ import annotations

import json
import logging
import sys

RESULT_ICONS = {"created": "✓", "already_exists": "·", "error": "✗"}


def describe_result(result) -> str:
    """One-line summary of a GroupResult."""
    icon = RESULT_ICONS.get(result.action, "?")
    line = (
        f"{icon} {result.group_path or result.source}: {result.action} "
        f"(links created={result.links_created}, existing={result.links_existing})"
    )
    return f"{line} {result.detail}" if result.detail else line


class StructuredFormatter(logging.Formatter):
    """Renders plain ``[LEVEL] message`` lines, or JSON lines in json_mode.

    Records carrying a ``group_result`` attribute are rendered from the result
    itself: its ``to_dict()`` in JSON mode, a one-line summary otherwise.
    """

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        result = getattr(record, "group_result", None)
        if self.json_mode:
            if result is not None:
                return json.dumps(result.to_dict())
            return json.dumps({"level": record.levelname, "message": record.getMessage()})
        message = describe_result(result) if result is not None else record.getMessage()
        return f"[{record.levelname:<7}] {message}"


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    """Point the gl-provision logger at stderr, replacing any earlier handler."""
    logger = logging.getLogger("gl-provision")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.addHandler(handler)
    return logger
