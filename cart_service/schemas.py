from typing import List

from pydantic import BaseModel


class CartItemResponse(BaseModel):
    """Response model for cart item."""

    id: str
    title: str
    image_url: str
    price: float
    quantity: int
    item_total: float


class CartResponse(BaseModel):
    """Response model for cart."""

    products: List[CartItemResponse]
    total_amount: float
    item_count: int


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str
