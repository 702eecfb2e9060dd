"""
Catalog operations shared by the REST routes and the MCP tools.

Each function issues exactly one store operation. Missing records are
turned into NotFoundError here; schema and driver failures come up from
the store already translated.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from catalog_service.app.errors import NotFoundError
from catalog_service.app.models import Item, ItemUpdate
from catalog_service.app.store import ItemStore

logger = logging.getLogger(__name__)


async def get_catalog(store: ItemStore) -> List[Item]:
    """Return every item in the catalog."""
    return await store.find({})


async def find_items(
    store: ItemStore, filters: Optional[Mapping[str, Any]] = None
) -> List[Item]:
    """Return the items matching all of ``filters`` (equality on each key)."""
    return await store.find(filters)


async def add_catalog_item(store: ItemStore, fields: Mapping[str, Any]) -> Item:
    """
    Create a new item.

    Args:
        store: The item store.
        fields: ``name``, ``price`` and ``category`` of the new item.

    Returns:
        Item: The persisted item including its assigned id.

    Raises:
        ValidationError: If the store schema rejects the payload.
    """
    item = await store.insert(fields)
    logger.info("Created item %s", item.id)
    return item


async def update_catalog_item(
    store: ItemStore, item_id: str, data: Union[Mapping[str, Any], ItemUpdate]
) -> Item:
    """
    Merge ``data`` into an existing item and return the updated record.

    Fields absent from ``data`` keep their stored value.

    Raises:
        NotFoundError: If no item has ``item_id``.
        ValidationError: If a present field is mistyped or empty.
    """
    item = await store.find_by_id_and_update(item_id, data)
    if item is None:
        logger.warning("Update of unknown item %s", item_id)
        raise NotFoundError(item_id)
    logger.info("Updated item %s", item_id)
    return item


async def delete_catalog_item(store: ItemStore, item_id: str) -> Item:
    """
    Delete an item and return the removed record.

    Raises:
        NotFoundError: If no item has ``item_id``.
    """
    item = await store.find_by_id_and_delete(item_id)
    if item is None:
        logger.warning("Delete of unknown item %s", item_id)
        raise NotFoundError(item_id)
    logger.info("Deleted item %s", item_id)
    return item
