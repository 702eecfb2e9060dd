"""
Optional API-key protection for the MCP endpoint.

When MCP_API_KEY is set, requests to /mcp must carry
'Authorization: Bearer <key>' unless they come from a loopback or private
network address. The REST routes are never guarded.
"""

import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from catalog_service.app.config import settings

# IP prefixes of loopback and Docker-internal networks.
# Requests from these IPs skip API-key authentication.
_TRUSTED_PREFIXES = ("172.", "10.", "192.168.", "127.0.0.1")

MCP_PATH = "/mcp"


def _is_authorized(auth_header: str, api_key: str) -> bool:
    prefix = "Bearer "
    if not auth_header.startswith(prefix):
        return False
    token = auth_header[len(prefix):].strip()
    return bool(token) and secrets.compare_digest(token, api_key)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware that enforces Bearer-token authentication on /mcp.
    """

    async def dispatch(self, request, call_next):
        """
        Check the bearer token on /mcp requests from outside the trusted
        networks; every other path goes straight through.

        Returns:
            The downstream response, or a 401 JSON-RPC error when the key
            is configured and the token is missing or wrong.
        """
        api_key = settings.MCP_API_KEY.strip()
        if api_key and request.url.path.startswith(MCP_PATH):
            client_ip = request.client.host if request.client else ""
            if not client_ip.startswith(_TRUSTED_PREFIXES):
                auth = request.headers.get("authorization", "")
                if not _is_authorized(auth, api_key):
                    # Reject with a JSON-RPC-style error so MCP clients
                    # can parse the failure programmatically.
                    return JSONResponse(
                        {"jsonrpc": "2.0", "id": None,
                         "error": {"code": -32001, "message": "Unauthorized"}},
                        status_code=401,
                    )
        return await call_next(request)
