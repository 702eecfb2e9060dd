"""
MCP application instance.

Creates and exports the single FastMCP application object used by the
catalog service. The item tools register themselves on this instance via
the @mcp.tool decorator.

Session handling (session ids, initialization, teardown) belongs to the
FastMCP transport; the HTTP app built from this instance is mounted by
main.py next to the REST routes.
"""

from fastmcp import FastMCP

# The shared FastMCP application instance.
mcp = FastMCP("catalog-mcp-server")
