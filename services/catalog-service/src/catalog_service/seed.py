"""
Seed the catalog with demo items for local development.

Run with the ``catalog-seed`` console script. Items are only inserted when
the catalog is empty, so running it twice is harmless.
"""

import logging

import anyio

from catalog_service.app.catalog import add_catalog_item, get_catalog
from catalog_service.app.config import settings
from catalog_service.app.db import close_pool, ensure_schema, get_store
from catalog_service.app.logging_config import configure_logging

logger = logging.getLogger(__name__)

DEMO_ITEMS = [
    {"name": "The Alchemist", "price": 500, "category": "Books"},
    {"name": "Atomic Habits", "price": 650, "category": "Books"},
    {"name": "Smartphone", "price": 30000, "category": "Electronics"},
    {"name": "Headphones", "price": 2000, "category": "Electronics"},
    {"name": "Jeans", "price": 1200, "category": "Clothing"},
]


async def seed(store=None) -> int:
    """
    Insert DEMO_ITEMS unless the catalog already has items.

    Returns:
        int: Number of items inserted.
    """
    store = store or get_store()
    existing = await get_catalog(store)
    if existing:
        logger.info(f"Catalog already holds {len(existing)} items, nothing to seed")
        return 0

    for fields in DEMO_ITEMS:
        await add_catalog_item(store, fields)
    logger.info(f"Seeded {len(DEMO_ITEMS)} items")
    return len(DEMO_ITEMS)


async def _run() -> None:
    try:
        await ensure_schema()
        await seed()
    finally:
        await close_pool()


def main() -> None:
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    anyio.run(_run)


if __name__ == "__main__":
    main()
