#!/usr/bin/env python3
"""
Launcher copied by think-mcp-install into the user's install directory.

Editors start this file with the interpreter that ran the installer, so the
think_mcp package only needs to be importable from that interpreter.
"""

import sys

from think_mcp.mcp_stdio_server import main

if __name__ == "__main__":
    sys.exit(main())
