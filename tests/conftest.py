"""
Pytest configuration and fixtures for Think MCP tests.
"""

import logging
import sys
from pathlib import Path

# Make the think_mcp package importable without installing it
_repo_root = Path(__file__).resolve().parents[1]
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import pytest

REPO_ROOT = _repo_root


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep the real HOME and debug settings out of every test."""
    for key in ("CLAUDE_THINK_DEBUG", "CLAUDE_THINK_LOG_FILE"):
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers configure_logging attached during a test."""
    yield
    logger = logging.getLogger("think_mcp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def execute_request(prompt=None, request_id="1", tool="think", arguments=None):
    """Build an mcp/execute request dict."""
    if arguments is None:
        arguments = {} if prompt is None else {"prompt": prompt}
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "mcp/execute",
        "params": {"tool": tool, "arguments": arguments},
    }
