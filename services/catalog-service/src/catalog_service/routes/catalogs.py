"""
REST routes for the item catalog, mounted under /catalogs.

Handlers translate query strings, JSON bodies and path parameters into
catalog operations and shape the results as JSON responses:

  - GET    /catalogs/test  liveness probe
  - GET    /catalogs[/]    list items, optionally filtered
  - POST   /catalogs[/]    create an item
  - PUT    /catalogs/{id}  merge fields into an item
  - PATCH  /catalogs/{id}  same merge, response without a message
  - DELETE /catalogs/{id}  delete an item

Any failure other than a missing item becomes a 500 whose ``error`` field
is the client-safe description of the error kind.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from catalog_service.app.catalog import (
    add_catalog_item,
    delete_catalog_item,
    find_items,
    update_catalog_item,
)
from catalog_service.app.db import get_store
from catalog_service.app.errors import CatalogError, NotFoundError, ValidationError
from catalog_service.app.store import ItemStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalogs", tags=["catalogs"])


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": "Item not found"})


def _server_error(message: str, exc: Exception) -> JSONResponse:
    """Build the 500 response for a failed operation without leaking internals."""
    if isinstance(exc, CatalogError):
        logger.error("%s: %s", message, exc.public_message)
        error = exc.to_dict()
    else:
        logger.exception(message)
        error = {"type": "InternalError", "message": "Unexpected server error"}
    return JSONResponse(status_code=500, content={"message": message, "error": error})


async def _json_body(request: Request) -> Any:
    """
    Decode the raw request body. Shape checks are left to the item schema,
    so an empty body comes back as None and any JSON value is passed on.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Request body is not valid JSON", ["body"]) from exc


@router.get("/test", response_class=PlainTextResponse)
async def test_route():
    """Liveness probe."""
    return "Test route OK"


@router.get("")
@router.get("/", include_in_schema=False)
async def get_filtered_items(
    category: Optional[str] = None,
    name: Optional[str] = None,
    price: Optional[str] = None,
    store: ItemStore = Depends(get_store),
):
    """
    List items, filtered by equality on any of the given query parameters.

    Empty parameters impose no constraint; ``price`` is compared as a number.
    """
    filters: Dict[str, Any] = {}
    if category:
        filters["category"] = category
    if name:
        filters["name"] = name
    if price:
        filters["price"] = price

    try:
        items = await find_items(store, filters)
    except Exception as exc:
        return _server_error("Error retrieving items", exc)

    return JSONResponse(status_code=200, content=[i.model_dump() for i in items])


@router.post("")
@router.post("/", include_in_schema=False)
async def create_item(
    request: Request,
    store: ItemStore = Depends(get_store),
):
    """Create an item from the whole request body. Schema errors surface as 500."""
    try:
        item = await add_catalog_item(store, await _json_body(request))
    except Exception as exc:
        return _server_error("Error creating item", exc)

    return JSONResponse(
        status_code=201,
        content={"message": "Item created successfully", "data": item.model_dump()},
    )


@router.put("/{item_id}")
async def update_item(
    item_id: str,
    request: Request,
    store: ItemStore = Depends(get_store),
):
    """Merge the body into item ``item_id``."""
    try:
        item = await update_catalog_item(store, item_id, await _json_body(request))
    except NotFoundError:
        return _not_found()
    except Exception as exc:
        return _server_error("Error updating item", exc)

    return JSONResponse(
        status_code=200,
        content={"message": "Item updated successfully", "data": item.model_dump()},
    )


@router.patch("/{item_id}")
async def patch_item(
    item_id: str,
    request: Request,
    store: ItemStore = Depends(get_store),
):
    """Partial update; same merge as PUT but the response only carries ``data``."""
    try:
        item = await update_catalog_item(store, item_id, await _json_body(request))
    except NotFoundError:
        return _not_found()
    except Exception as exc:
        return _server_error("Error patching item", exc)

    return JSONResponse(status_code=200, content={"data": item.model_dump()})


@router.delete("/{item_id}")
async def delete_item(item_id: str, store: ItemStore = Depends(get_store)):
    """Delete item ``item_id`` and return the removed record."""
    try:
        item = await delete_catalog_item(store, item_id)
    except NotFoundError:
        return _not_found()
    except Exception as exc:
        return _server_error("Error deleting item", exc)

    return JSONResponse(
        status_code=200,
        content={"message": "Item deleted successfully", "data": item.model_dump()},
    )
