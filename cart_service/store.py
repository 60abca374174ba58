"""
Cart Store Module

Owns the in-memory cart state, mirrors it to a key-value storage backend and
notifies subscribers of every change.

Lifecycle:
    - Created empty
    - load() replaces the state with the persisted snapshot, once;
      mutating while it is reading storage raises CartError
    - add_to_cart / increment / decrement mutate it
    - Discarded with the owning scope (no delete API)

Persistence:
    Every mutation serializes the whole post-mutation sequence and schedules
    an overwrite of the cart key on the running event loop. The new state is
    published right away; callers never wait for the write. Writes run one
    at a time in mutation order, so storage converges to the latest state.
    A failed write is logged and otherwise dropped; the next successful write
    reconciles storage.

Example Usage:
    ```python
    store = CartStore(MemoryStorage())
    await store.load()

    store.add_to_cart({"id": "1", "title": "Shirt", "image_url": "u", "price": 10})
    store.add_to_cart({"id": "1", "title": "Shirt", "image_url": "u", "price": 10})
    # store.products -> (CartItem(id="1", ..., quantity=2),)

    store.decrement("1")
    store.decrement("1")
    # store.products -> ()

    await store.flush()
    ```
"""

import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Set, Tuple, Union

from cart_service.events import CartAction, CartUpdatedEvent
from cart_service.exceptions import CartError, CartItemNotFoundError, SnapshotDecodeError
from cart_service.models import CartItem, NewCartItem, dump_snapshot, load_snapshot
from cart_service.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_CART_KEY = "@GoMarketplace:cart"

Listener = Callable[[CartUpdatedEvent], Any]


class CartStore:
    """Cart state holder with fire-and-forget persistence."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_CART_KEY):
        self.storage = storage
        self.key = key
        self.generation = 0
        self.persisted_generation = 0
        self._products: Tuple[CartItem, ...] = ()
        self._loaded = False
        self._loading = False
        self._listeners: List[Listener] = []
        self._write_lock = asyncio.Lock()
        self._pending: Set[asyncio.Task] = set()

    @property
    def products(self) -> Tuple[CartItem, ...]:
        """Current published cart. A new tuple is installed on every change."""
        return self._products

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    @property
    def total_amount(self) -> float:
        return sum(item.item_total for item in self._products)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._products)

    def get_item(self, product_id: str) -> Optional[CartItem]:
        index = self._index_of(product_id)
        return self._products[index] if index >= 0 else None

    async def load(self) -> Tuple[CartItem, ...]:
        """Replace the state with the persisted snapshot. Runs once per store."""
        if self._loaded:
            return self._products
        self._loaded = True

        self._loading = True
        try:
            raw = await self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read saved cart, starting empty: {e}", extra={"cart_key": self.key})
            return self._products
        finally:
            self._loading = False

        if not raw:
            logger.info("No saved cart found", extra={"cart_key": self.key})
            return self._products

        try:
            products = load_snapshot(raw)
        except SnapshotDecodeError as e:
            logger.warning(f"Ignoring unreadable saved cart: {e}", extra={"cart_key": self.key})
            return self._products

        self.generation += 1
        self.persisted_generation = self.generation
        self._products = products
        logger.info(
            f"Loaded {len(products)} items from saved cart",
            extra={"cart_key": self.key, "generation": self.generation},
        )
        self._notify("loaded", None)
        return self._products

    def add_to_cart(self, item: Union[NewCartItem, Mapping[str, Any]]) -> Tuple[CartItem, ...]:
        """Append a product with quantity 1, or increment it if already in the cart."""
        self._ensure_ready()
        if not isinstance(item, NewCartItem):
            item = NewCartItem.model_validate(item)

        if self._index_of(item.id) >= 0:
            return self.increment(item.id)

        new_item = CartItem(
            id=item.id,
            title=item.title,
            image_url=item.image_url,
            price=item.price,
            quantity=1,
        )
        self._commit(self._products + (new_item,), "item_added", item.id)
        logger.info(f"Added item {item.id} to cart", extra={"cart_key": self.key, "generation": self.generation})
        return self._products

    def increment(self, product_id: str) -> Tuple[CartItem, ...]:
        """Raise the quantity of an item by one."""
        self._ensure_ready()
        index = self._require_index(product_id)
        current = self._products[index]
        updated = current.model_copy(update={"quantity": current.quantity + 1})

        self._commit(self._replace(index, updated), "item_incremented", product_id)
        logger.info(
            f"Incremented item {product_id} to {updated.quantity}",
            extra={"cart_key": self.key, "generation": self.generation},
        )
        return self._products

    def decrement(self, product_id: str) -> Tuple[CartItem, ...]:
        """Lower the quantity of an item by one, removing it when it would reach zero."""
        self._ensure_ready()
        index = self._require_index(product_id)
        current = self._products[index]

        if current.quantity <= 1:
            products = self._products[:index] + self._products[index + 1:]
            self._commit(products, "item_removed", product_id)
            logger.info(f"Removed item {product_id} from cart", extra={"cart_key": self.key, "generation": self.generation})
            return self._products

        updated = current.model_copy(update={"quantity": current.quantity - 1})
        self._commit(self._replace(index, updated), "item_decremented", product_id)
        logger.info(
            f"Decremented item {product_id} to {updated.quantity}",
            extra={"cart_key": self.key, "generation": self.generation},
        )
        return self._products

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for CartUpdatedEvent. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _ensure_ready(self) -> None:
        # load() replaces state wholesale, so a mutation racing it would be lost
        if self._loading:
            raise CartError("Cart is still loading; await load() before mutating it")

    def _index_of(self, product_id: str) -> int:
        for index, item in enumerate(self._products):
            if item.id == product_id:
                return index
        return -1

    def _require_index(self, product_id: str) -> int:
        index = self._index_of(product_id)
        if index < 0:
            logger.warning(f"Product {product_id} not in cart", extra={"cart_key": self.key})
            raise CartItemNotFoundError(product_id)
        return index

    def _replace(self, index: int, item: CartItem) -> Tuple[CartItem, ...]:
        return self._products[:index] + (item,) + self._products[index + 1:]

    def _commit(self, products: Tuple[CartItem, ...], action: CartAction, product_id: str) -> None:
        # Write is scheduled before publishing; a missing event loop leaves state untouched
        generation = self.generation + 1
        self._schedule_write(dump_snapshot(products), generation)

        self.generation = generation
        self._products = products
        self._notify(action, product_id)

    def _schedule_write(self, payload: str, generation: int) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._write(payload, generation))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, payload: str, generation: int) -> None:
        async with self._write_lock:
            try:
                await self.storage.set(self.key, payload)
            except Exception:
                logger.exception(
                    "Failed to persist cart",
                    extra={"cart_key": self.key, "generation": generation},
                )
                return
            self.persisted_generation = max(self.persisted_generation, generation)

    def _notify(self, action: CartAction, product_id: Optional[str]) -> None:
        if not self._listeners:
            return

        event = CartUpdatedEvent(
            action=action,
            product_id=product_id,
            generation=self.generation,
            products=self._products,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Cart listener failed",
                    extra={"event_type": event.event_type, "correlation_id": event.correlation_id},
                )
