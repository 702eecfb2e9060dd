"""
Shared fixtures for the catalog-service tests.

The real store talks to PostgreSQL; here it is replaced by an in-memory
double that runs payloads through the same schema helpers, injected into
``catalog_service.app.db`` so both the REST routes and the MCP tools
pick it up.
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from catalog_service.app import db
from catalog_service.app.models import (
    Item,
    parse_filter,
    parse_item_update,
    parse_new_item,
)


class InMemoryItemStore:
    """Dictionary-backed stand-in for ItemStore with the same four operations."""

    def __init__(self):
        self.items = {}

    async def find(self, filters=None):
        conditions = parse_filter(filters).conditions()
        return [
            item for item in self.items.values()
            if all(getattr(item, key) == value for key, value in conditions.items())
        ]

    async def insert(self, fields):
        new_item = parse_new_item(fields)
        item = Item(id=uuid.uuid4().hex, **new_item.model_dump())
        self.items[item.id] = item
        return item

    async def find_by_id_and_update(self, item_id, fields):
        changes = parse_item_update(fields).changes()
        current = self.items.get(item_id)
        if current is None:
            return None
        updated = current.model_copy(update=changes)
        self.items[item_id] = updated
        return updated

    async def find_by_id_and_delete(self, item_id):
        return self.items.pop(item_id, None)


class FailingItemStore:
    """Store whose every operation raises the given exception."""

    def __init__(self, exc):
        self.exc = exc

    async def find(self, filters=None):
        raise self.exc

    async def insert(self, fields):
        raise self.exc

    async def find_by_id_and_update(self, item_id, fields):
        raise self.exc

    async def find_by_id_and_delete(self, item_id):
        raise self.exc


@pytest.fixture
def store(monkeypatch):
    """An empty in-memory store installed as the shared store."""
    memory_store = InMemoryItemStore()
    monkeypatch.setattr(db, "_store", memory_store)
    return memory_store


@pytest.fixture
def use_store(monkeypatch):
    """Install an arbitrary store object as the shared store."""
    def _install(custom_store):
        monkeypatch.setattr(db, "_store", custom_store)
        return custom_store
    return _install


@pytest.fixture
def client(store):
    """Test client for the full application, backed by the in-memory store."""
    from catalog_service.main import create_app
    return TestClient(create_app())
