"""
Cart Models Module

Pydantic models for cart line items and the JSON snapshot written to storage.

Data Format (storage):
    Key: "@GoMarketplace:cart"
    Value: '[
        {"id": "1", "title": "Shirt", "image_url": "https://...", "price": 10.0, "quantity": 2},
        {"id": "7", "title": "Mug", "image_url": "https://...", "price": 4.5, "quantity": 1}
    ]'

The array order is the order in which items were first added to the cart.
"""

from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from cart_service.exceptions import SnapshotDecodeError


class NewCartItem(BaseModel):
    """Product reference submitted to add_to_cart (no quantity yet)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    image_url: str
    price: float


class CartItem(NewCartItem):
    """Cart line item: a product reference plus the quantity to purchase."""

    quantity: int = Field(ge=1)

    @property
    def item_total(self) -> float:
        return self.price * self.quantity


_snapshot_adapter = TypeAdapter(List[CartItem])


def dump_snapshot(products: Iterable[CartItem]) -> str:
    """Serialize the full cart sequence to the JSON array stored under the cart key."""
    return _snapshot_adapter.dump_json(list(products)).decode("utf-8")


def load_snapshot(raw: str) -> Tuple[CartItem, ...]:
    """
    Deserialize a stored snapshot.

    Raises:
        SnapshotDecodeError: invalid JSON, schema mismatch or duplicate ids
    """
    try:
        products = _snapshot_adapter.validate_json(raw)
    except ValidationError as e:
        raise SnapshotDecodeError(f"Invalid cart snapshot: {e}") from e

    seen = set()
    for product in products:
        if product.id in seen:
            raise SnapshotDecodeError(f"Duplicate item {product.id} in cart snapshot")
        seen.add(product.id)

    return tuple(products)
