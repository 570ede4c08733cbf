#!/usr/bin/env python3
"""
Process-wide settings, read once from the environment at startup.

Environment variables:
- CLAUDE_THINK_DEBUG: "true" enables diagnostic logging
- CLAUDE_THINK_LOG_FILE: diagnostic log path (default ~/.cursor-claud-think-mcp.log)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from think_mcp import __version__

SERVER_NAME = "Cursor-Claud-Think-MCP"
DEBUG_ENV = "CLAUDE_THINK_DEBUG"
LOG_FILE_ENV = "CLAUDE_THINK_LOG_FILE"
LOG_FILE_NAME = ".cursor-claud-think-mcp.log"


def default_log_file(environ: Mapping[str, str]) -> Path:
    """Dotfile under the user's home directory, falling back to the cwd."""
    home = environ.get("HOME") or environ.get("USERPROFILE") or "."
    return Path(home) / LOG_FILE_NAME


@dataclass(frozen=True)
class ServerSettings:
    debug: bool = False
    log_file: Path = field(default_factory=lambda: default_log_file(os.environ))
    server_name: str = SERVER_NAME
    version: str = __version__

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        environ = os.environ if environ is None else environ
        debug = environ.get(DEBUG_ENV, "").strip().lower() == "true"
        log_file = environ.get(LOG_FILE_ENV)
        return cls(
            debug=debug,
            log_file=Path(log_file) if log_file else default_log_file(environ),
        )
