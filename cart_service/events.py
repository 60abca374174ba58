"""
events.py - Cart Update Event Schema

PURPOSE:
    Describes each state publication of the CartStore so subscribers
    (UI bindings, analytics hooks) can react without polling.

ACTIONS:
    - loaded: persisted snapshot replaced the empty initial state
    - item_added: new product appended with quantity 1
    - item_incremented: existing product quantity + 1
    - item_decremented: existing product quantity - 1
    - item_removed: product dropped after decrementing from quantity 1

USAGE:
    def on_change(event: CartUpdatedEvent) -> None:
        print(event.action, event.product_id, len(event.products))

    unsubscribe = store.subscribe(on_change)
"""

from datetime import datetime
from typing import Literal, Optional, Tuple
from uuid import uuid4
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from cart_service.config import get_settings
from cart_service.models import CartItem

CartAction = Literal[
    "loaded",
    "item_added",
    "item_incremented",
    "item_decremented",
    "item_removed",
]


class CartUpdatedEvent(BaseModel):
    """Published after every change of the store's visible state."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str = "cart.updated"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(ZoneInfo(get_settings().log_timezone)))
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))
    action: CartAction
    product_id: Optional[str] = None
    generation: int
    products: Tuple[CartItem, ...]
