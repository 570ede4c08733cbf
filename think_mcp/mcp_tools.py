#!/usr/bin/env python3
"""Tool definitions and the startup capability announcement."""

import copy
from typing import Any, Dict, List, Tuple

from think_mcp.protocol import JSONRPC_VERSION, SERVER_INFO_METHOD
from think_mcp.settings import ServerSettings

THINK_TOOL: Dict[str, Any] = {
    "name": "think",
    "description": "Instructs Claude to use explicit, structured reasoning before providing an answer",
    "parameters": {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "description": "The question or task Claude should think about"
            }
        },
        "required": ["prompt"]
    }
}

# Tool definitions in announcement format
TOOLS: List[Dict[str, Any]] = [THINK_TOOL]

# Pre-built announcements keyed by (name, version)
_CACHED_SERVER_INFO: Dict[Tuple[str, str], Dict[str, Any]] = {}


def build_server_info(settings: ServerSettings) -> Dict[str, Any]:
    """Get the server_info notification, built once per server identity."""
    key = (settings.server_name, settings.version)
    if key not in _CACHED_SERVER_INFO:
        _CACHED_SERVER_INFO[key] = {
            "jsonrpc": JSONRPC_VERSION,
            "method": SERVER_INFO_METHOD,
            "params": {
                "name": settings.server_name,
                "version": settings.version,
                "tools": TOOLS
            }
        }
    # Return a copy so callers can't mutate the cached record
    return copy.deepcopy(_CACHED_SERVER_INFO[key])
