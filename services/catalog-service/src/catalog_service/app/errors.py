"""
Error taxonomy for the catalog service.

Every failure the catalog layer reports is a CatalogError carrying a stable
``kind`` and a ``public_message`` that is safe to show to clients. The REST
routes and MCP tools translate these into their own response shapes; the
original exception (driver errors, schema errors) is kept as ``__cause__``
for logging only.
"""

from typing import Any, Dict


class CatalogError(Exception):
    """Base class for every error raised by the catalog layer."""

    kind = "CatalogError"

    def __init__(self, public_message: str):
        super().__init__(public_message)
        self.public_message = public_message

    def to_dict(self) -> Dict[str, Any]:
        """Return the client-facing representation of this error."""
        return {"type": self.kind, "message": self.public_message}


class NotFoundError(CatalogError):
    """An update or delete targeted an id with no matching item."""

    kind = "NotFoundError"

    def __init__(self, item_id: str):
        super().__init__("Item not found")
        self.item_id = item_id


class ValidationError(CatalogError):
    """The item schema rejected a payload or a filter."""

    kind = "ValidationError"

    def __init__(self, public_message: str, fields=()):
        super().__init__(public_message)
        self.fields = tuple(fields)


class StoreUnavailableError(CatalogError):
    """The item store could not be reached or failed to run a statement."""

    kind = "StoreUnavailable"

    def __init__(self, public_message: str = "Item store unavailable"):
        super().__init__(public_message)
