"""Error taxonomy for the cart store."""


class CartError(Exception):
    """Base class for cart store errors."""


class CartProviderError(CartError):
    """Raised when the cart accessor is used outside a provider scope."""

    def __init__(self, message: str = "use_cart must be used within a cart_provider"):
        super().__init__(message)


class CartItemNotFoundError(CartError):
    """Raised when increment/decrement targets an id that is not in the cart."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Item {product_id} not found in cart")


class SnapshotDecodeError(CartError):
    """Raised when a persisted cart snapshot cannot be decoded."""
