"""
Item catalog tools.

Exposes the catalog over MCP as four tools:
  - get-all-items: list every item.
  - create-item:   create an item from name, price and category.
  - update-item:   merge the given fields into an existing item.
  - delete-item:   delete an item by id.

Every result is a single text block holding JSON (or a fixed message).
Failures are reported as error results through ToolError rather than as
protocol faults, so the calling model can read what went wrong.
"""

import json
import logging
import math
from typing import Annotated, Any, Dict, Optional

from fastmcp.exceptions import ToolError
from pydantic import Field

from catalog_service.app.catalog import (
    add_catalog_item,
    delete_catalog_item,
    get_catalog,
    update_catalog_item,
)
from catalog_service.app.db import get_store
from catalog_service.app.errors import CatalogError
from catalog_service.app.mcp_app import mcp

logger = logging.getLogger(__name__)


def _error_text(exc: Exception) -> str:
    """Map an exception onto the message shown in the tool result."""
    if isinstance(exc, CatalogError):
        return f"Error: {exc.public_message}"
    logger.exception("Unexpected tool failure")
    return "Error: Unexpected server error"


async def _run(operation, *args):
    """Call a catalog operation with the shared store, converting failures to ToolError."""
    try:
        return await operation(get_store(), *args)
    except Exception as exc:
        raise ToolError(_error_text(exc)) from exc


def _dump(value) -> str:
    if isinstance(value, list):
        return json.dumps([v.model_dump() for v in value], ensure_ascii=False)
    return json.dumps(value.model_dump(), ensure_ascii=False)


def _is_usable_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_usable_number(value: Any) -> bool:
    # bool is an int subclass, but True is not a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


@mcp.tool(name="get-all-items", description="Get all items", output_schema=None)
async def get_all_items() -> str:
    """Return every catalog item as a JSON array."""
    items = await _run(get_catalog)
    return _dump(items)


@mcp.tool(name="create-item", description="Create an item", output_schema=None)
async def create_item(
    name: Annotated[Optional[str], Field(description="Item name")] = None,
    price: Annotated[Optional[float], Field(description="Item price")] = None,
    category: Annotated[Optional[str], Field(description="Item category")] = None,
) -> str:
    """
    Create a new item.

    All three fields are required. Any falsy value counts as missing,
    which means a price of 0 is rejected as well.

    Returns:
        str: The created item (with its id) as JSON.

    Raises:
        ToolError: If fields are missing or the catalog rejects the item.
    """
    provided = {"name": name, "price": price, "category": category}
    missing = [field for field, value in provided.items() if not value]
    if missing:
        raise ToolError(f"Error: Missing required field(s): {', '.join(missing)}")

    item = await _run(add_catalog_item, provided)
    return _dump(item)


@mcp.tool(name="update-item", description="Update an item", output_schema=None)
async def update_item(
    id: Annotated[Optional[str], Field(description="Id of the item to update")] = None,
    name: Annotated[Optional[str], Field(description="New item name")] = None,
    price: Annotated[Optional[float], Field(description="New item price")] = None,
    category: Annotated[Optional[str], Field(description="New item category")] = None,
) -> str:
    """
    Update some fields of an existing item.

    Only non-blank strings and real numbers are applied; other values are
    ignored. At least one field must survive that check.

    Returns:
        str: The updated item as JSON.

    Raises:
        ToolError: If ``id`` is missing, nothing is left to update, the
            item does not exist, or the catalog rejects the update.
    """
    if not _is_usable_text(id):
        raise ToolError("Error: Missing required field: id")

    data: Dict[str, Any] = {}
    if _is_usable_text(name):
        data["name"] = name
    if _is_usable_number(price):
        data["price"] = price
    if _is_usable_text(category):
        data["category"] = category

    if not data:
        raise ToolError(
            "Error: No valid fields to update. Provide at least one of: name, price, category"
        )

    item = await _run(update_catalog_item, id, data)
    return _dump(item)


@mcp.tool(name="delete-item", description="Delete an item", output_schema=None)
async def delete_item(
    id: Annotated[str, Field(description="Id of the item to delete")],
) -> str:
    """Delete an item by id."""
    await _run(delete_catalog_item, id)
    return "Item deleted successfully"
