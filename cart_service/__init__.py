"""GoMarketplace cart store: in-memory cart state persisted to a key-value store."""

from cart_service.exceptions import (
    CartError,
    CartItemNotFoundError,
    CartProviderError,
    SnapshotDecodeError,
)
from cart_service.models import CartItem, NewCartItem
from cart_service.provider import CartContext, cart_provider, use_cart
from cart_service.storage import MemoryStorage, RedisStorage
from cart_service.store import CartStore

__all__ = [
    "CartContext",
    "CartError",
    "CartItem",
    "CartItemNotFoundError",
    "CartProviderError",
    "CartStore",
    "MemoryStorage",
    "NewCartItem",
    "RedisStorage",
    "SnapshotDecodeError",
    "cart_provider",
    "use_cart",
]
