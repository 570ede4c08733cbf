import sys

from think_mcp.mcp_stdio_server import main

sys.exit(main())
