"""
PostgreSQL-backed item store.

The store exposes the four record operations the catalog layer depends on
(find, insert, find-and-update-by-id, find-and-delete-by-id). Each one is a
single SQL statement, so every mutation is atomic at the row level and
concurrent writers are arbitrated by the database (last write wins).

Payloads are validated against the item schema in ``app.models`` before any
SQL is built, and driver failures are translated into StoreUnavailableError
so callers never see asyncpg exceptions.
"""

import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Union

import asyncpg

from catalog_service.app.errors import StoreUnavailableError
from catalog_service.app.models import (
    Item,
    ItemUpdate,
    parse_filter,
    parse_item_update,
    parse_new_item,
)

logger = logging.getLogger(__name__)

# Column list shared by every statement that returns an item.
_RETURNING = "id, name, price, category"

# Failures that mean "the store did not answer properly" rather than
# "the payload was wrong".
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

PoolGetter = Callable[[], Awaitable[Any]]


def _to_item(row) -> Optional[Item]:
    if row is None:
        return None
    return Item.model_validate(dict(row))


class ItemStore:
    """
    Item record collection stored in the ``items`` table.

    Args:
        get_pool: Async callable returning an asyncpg pool. It is awaited on
            every operation so the pool can be created lazily.
    """

    def __init__(self, get_pool: PoolGetter):
        self._get_pool = get_pool

    async def _fetch(self, sql: str, *args) -> list:
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                return await conn.fetch(sql, *args)
        except _DRIVER_ERRORS as exc:
            logger.exception("Item store query failed")
            raise StoreUnavailableError() from exc

    async def _fetchrow(self, sql: str, *args):
        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                return await conn.fetchrow(sql, *args)
        except _DRIVER_ERRORS as exc:
            logger.exception("Item store query failed")
            raise StoreUnavailableError() from exc

    async def find(self, filters: Optional[Mapping[str, Any]] = None) -> List[Item]:
        """
        Return every item matching all the given equality filters.

        Args:
            filters: Mapping with any of ``name``, ``category`` and ``price``.
                Empty or None returns the whole collection.

        Returns:
            list[Item]: Matching items in database order.

        Raises:
            ValidationError: If a filter value has the wrong type.
            StoreUnavailableError: If the query could not be executed.
        """
        conditions = parse_filter(filters).conditions()

        sql = f"SELECT {_RETURNING} FROM items"
        args = []
        if conditions:
            clauses = []
            for column, value in conditions.items():
                args.append(value)
                clauses.append(f"{column} = ${len(args)}")
            sql += " WHERE " + " AND ".join(clauses)

        rows = await self._fetch(sql + ";", *args)
        return [_to_item(r) for r in rows]

    async def insert(self, fields: Mapping[str, Any]) -> Item:
        """
        Persist a new item and return it with its store-assigned id.

        Raises:
            ValidationError: If a required field is missing or mistyped.
            StoreUnavailableError: If the insert could not be executed.
        """
        new_item = parse_new_item(fields)
        row = await self._fetchrow(
            f"""
            INSERT INTO items (name, price, category)
            VALUES ($1, $2, $3)
            RETURNING {_RETURNING};
            """,
            new_item.name,
            new_item.price,
            new_item.category,
        )
        return _to_item(row)

    async def find_by_id_and_update(
        self, item_id: str, fields: Union[Mapping[str, Any], ItemUpdate]
    ) -> Optional[Item]:
        """
        Merge ``fields`` into the item with ``item_id``.

        Only the fields present in the payload are written. An empty payload
        leaves the record untouched and simply returns it.

        Returns:
            Item | None: The post-update item, or None if no item has that id.
        """
        changes = parse_item_update(fields).changes()

        if not changes:
            row = await self._fetchrow(
                f"SELECT {_RETURNING} FROM items WHERE id = $1;", item_id
            )
            return _to_item(row)

        args = [item_id]
        assignments = []
        for column, value in changes.items():
            args.append(value)
            assignments.append(f"{column} = ${len(args)}")

        row = await self._fetchrow(
            f"UPDATE items SET {', '.join(assignments)} WHERE id = $1 "
            f"RETURNING {_RETURNING};",
            *args,
        )
        return _to_item(row)

    async def find_by_id_and_delete(self, item_id: str) -> Optional[Item]:
        """Delete the item with ``item_id`` and return it, or None if absent."""
        row = await self._fetchrow(
            f"DELETE FROM items WHERE id = $1 RETURNING {_RETURNING};", item_id
        )
        return _to_item(row)
