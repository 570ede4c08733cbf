#!/usr/bin/env python3
"""Diagnostic logging: stderr always, plus an append-only file in debug mode."""

import logging
import sys
from typing import Optional, TextIO

from think_mcp.settings import ServerSettings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Marker attribute so repeated configuration replaces our handlers only
_HANDLER_FLAG = "_think_mcp_handler"


def configure_logging(settings: ServerSettings, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure the package logger.

    stdout carries protocol records, so console diagnostics always go to
    stderr. In debug mode every record is also appended to settings.log_file.
    An unwritable log path is reported on stderr and the server keeps
    running; later write failures go through Handler.handleError.
    """
    root = logging.getLogger("think_mcp")
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_FLAG, True)
    root.addHandler(console)

    if settings.debug:
        root.setLevel(logging.DEBUG)
        try:
            file_handler = logging.FileHandler(settings.log_file, mode="a", encoding="utf-8")
        except OSError as e:
            root.error(f"Failed to open log file {settings.log_file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            setattr(file_handler, _HANDLER_FLAG, True)
            root.addHandler(file_handler)
    else:
        root.setLevel(logging.WARNING)

    root.propagate = False
    return root


def flush_logging() -> None:
    """Flush every handler attached to the package logger."""
    for handler in logging.getLogger("think_mcp").handlers:
        try:
            handler.flush()
        except (OSError, ValueError) as e:
            print(f"Failed to flush log handler: {e}", file=sys.stderr)
