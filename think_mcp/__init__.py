"""Think MCP - a stdio server that wraps prompts in structured reasoning markers."""

__version__ = "1.0.0"
