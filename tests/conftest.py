"""Pytest configuration and fixtures"""
import os

import pytest
import pytest_asyncio

from cart_service.models import CartItem, dump_snapshot
from cart_service.storage import MemoryStorage
from cart_service.store import DEFAULT_CART_KEY, CartStore

# Keep the app module from pointing at a real Redis when imported
os.environ.setdefault("STORAGE_BACKEND", "memory")


class FailingStorage(MemoryStorage):
    """MemoryStorage whose reads and/or writes raise."""

    def __init__(self, fail_get: bool = False, fail_set: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.fail_get = fail_get
        self.fail_set = fail_set

    async def get(self, key):
        if self.fail_get:
            raise ConnectionError("storage unavailable")
        return await super().get(key)

    async def set(self, key, value):
        if self.fail_set:
            raise ConnectionError("storage unavailable")
        await super().set(key, value)


@pytest.fixture
def shirt():
    """Product payload as sent by the catalog screen"""
    return {"id": "1", "title": "Shirt", "image_url": "u", "price": 10}


@pytest.fixture
def mug():
    return {"id": "2", "title": "Mug", "image_url": "https://img/mug.png", "price": 4.5}


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest_asyncio.fixture
async def store(storage):
    cart_store = CartStore(storage)
    yield cart_store
    await cart_store.flush()


@pytest.fixture
def saved_storage():
    """Storage already holding a two-item cart"""
    products = [
        CartItem(id="1", title="Shirt", image_url="u", price=10, quantity=2),
        CartItem(id="2", title="Mug", image_url="https://img/mug.png", price=4.5, quantity=1),
    ]
    return MemoryStorage({DEFAULT_CART_KEY: dump_snapshot(products)})
