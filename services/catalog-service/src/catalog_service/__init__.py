"""catalog-service: item catalog exposed over REST and MCP."""

__version__ = "1.0.0"
