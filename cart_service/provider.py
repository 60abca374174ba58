"""
Provider scope and accessor for the cart.

Code that uses the cart runs inside ``cart_provider(store)``; inside that
scope ``use_cart()`` returns the shared CartContext. Outside it, use_cart
raises CartProviderError instead of handing back a default.

    async with cart_provider(CartStore(storage)):
        cart = use_cart()
        cart.add_to_cart({"id": "1", "title": "Shirt", "image_url": "u", "price": 10})
"""

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import AsyncIterator, Callable, Optional, Tuple

from cart_service.exceptions import CartProviderError
from cart_service.models import CartItem
from cart_service.store import CartStore

logger = logging.getLogger(__name__)


class CartContext:
    """What consumers of the cart see: the products and the three operations."""

    def __init__(self, store: CartStore):
        self.store = store
        self.add_to_cart: Callable = store.add_to_cart
        self.increment: Callable = store.increment
        self.decrement: Callable = store.decrement

    @property
    def products(self) -> Tuple[CartItem, ...]:
        return self.store.products


_current_cart: ContextVar[Optional[CartContext]] = ContextVar("current_cart", default=None)


@asynccontextmanager
async def cart_provider(store: CartStore) -> AsyncIterator[CartContext]:
    """Load the store and make it available to use_cart() for the duration of the block."""
    await store.load()
    context = CartContext(store)
    token = _current_cart.set(context)
    try:
        yield context
    finally:
        _current_cart.reset(token)
        await store.flush()
        logger.debug("Cart provider closed", extra={"cart_key": store.key, "generation": store.generation})


def use_cart() -> CartContext:
    context = _current_cart.get()
    if context is None:
        raise CartProviderError()
    return context
