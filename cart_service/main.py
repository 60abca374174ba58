"""
cart_service/main.py - Local Cart API

PURPOSE:
    Serves the cart store to a local UI shell over HTTP. The app lifespan is
    the provider scope: it opens storage, loads the saved cart and keeps the
    store on app.state until shutdown.

API ENDPOINTS:
    GET    /health                          - Health check endpoint
    GET    /cart                            - View cart contents
    POST   /cart/items                      - Add product (quantity 1, or +1 if present)
    POST   /cart/items/{product_id}/increment - Raise quantity by one
    POST   /cart/items/{product_id}/decrement - Lower quantity by one (removes at zero)

DATA STORAGE:
    - Redis (default): key "@GoMarketplace:cart", value '[{"id": "1", ..., "quantity": 2}]'
    - Memory: set STORAGE_BACKEND=memory

TESTING COMMANDS:
    1. Add Item:
        curl -X POST http://localhost:8001/cart/items \
          -H "Content-Type: application/json" \
          -d '{"id": "1", "title": "Shirt", "image_url": "https://img/shirt.png", "price": 10}'

    2. Increment / Decrement:
        curl -X POST http://localhost:8001/cart/items/1/increment
        curl -X POST http://localhost:8001/cart/items/1/decrement

    3. View Cart:
        curl -X GET http://localhost:8001/cart

USAGE:
    python -m cart_service.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status

from cart_service.config import Settings, get_settings
from cart_service.exceptions import CartItemNotFoundError, CartProviderError
from cart_service.logging_config import setup_logging
from cart_service.models import NewCartItem
from cart_service.provider import CartContext
from cart_service.schemas import CartItemResponse, CartResponse, HealthResponse
from cart_service.storage import KeyValueStorage, MemoryStorage, RedisStorage
from cart_service.store import CartStore

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the storage backend named by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return RedisStorage.from_settings(settings)


def get_cart_context(request: Request) -> CartContext:
    """Route dependency returning the cart of the running app."""
    store = getattr(request.app.state, "cart_store", None)
    if store is None:
        raise CartProviderError("Cart store is not initialized; requests must run inside the app lifespan")
    return CartContext(store)


def _cart_response(cart: CartContext) -> CartResponse:
    return CartResponse(
        products=[
            CartItemResponse(**item.model_dump(), item_total=item.item_total)
            for item in cart.products
        ],
        total_amount=cart.store.total_amount,
        item_count=cart.store.item_count,
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[KeyValueStorage] = None) -> FastAPI:
    """Build the cart API. An injected storage is used as-is and not closed on shutdown."""
    settings = settings or get_settings()

    # 1. Startup (before yield): open storage, load the saved cart
    # 2. Shutdown (after yield): wait for pending writes, close Redis
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.service_name, level=settings.log_level, timezone=settings.log_timezone)
        logger.info("Starting Cart Service...")

        owns_storage = storage is None
        cart_storage = storage if storage is not None else build_storage(settings)

        if isinstance(cart_storage, RedisStorage):
            try:
                await cart_storage.ping()
                logger.info("Redis connected")
            except Exception as e:
                # Unreachable storage means no saved cart; each later mutation writes again
                logger.warning(f"Failed to connect to Redis, starting with an empty cart: {e}")

        store = CartStore(cart_storage, key=settings.cart_storage_key)
        await store.load()
        app.state.cart_store = store

        yield

        logger.info("Shutting down Cart Service...")
        await store.flush()
        app.state.cart_store = None
        if owns_storage and isinstance(cart_storage, RedisStorage):
            await cart_storage.close()

    app = FastAPI(title="Cart Service", version=settings.version, lifespan=lifespan)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", service=settings.service_name, version=settings.version)

    @app.get("/cart", response_model=CartResponse)
    async def get_cart(cart: CartContext = Depends(get_cart_context)) -> CartResponse:
        """Get the cart."""
        return _cart_response(cart)

    @app.post("/cart/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
    async def add_item(item: NewCartItem, cart: CartContext = Depends(get_cart_context)) -> CartResponse:
        """Add product to cart."""
        cart.add_to_cart(item)
        return _cart_response(cart)

    @app.post("/cart/items/{product_id}/increment", response_model=CartResponse)
    async def increment_item(product_id: str, cart: CartContext = Depends(get_cart_context)) -> CartResponse:
        """Raise item quantity by one."""
        try:
            cart.increment(product_id)
        except CartItemNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return _cart_response(cart)

    @app.post("/cart/items/{product_id}/decrement", response_model=CartResponse)
    async def decrement_item(product_id: str, cart: CartContext = Depends(get_cart_context)) -> CartResponse:
        """Lower item quantity by one. The item is removed when it reaches zero."""
        try:
            cart.decrement(product_id)
        except CartItemNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        return _cart_response(cart)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().cart_service_port)
