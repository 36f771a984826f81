# storefront/schemas/cart.py
import uuid
from datetime import datetime

from storefront.schemas.product import CamelModel, ProductRead


class CartItemCreate(CamelModel):
    """
    Payload for adding to cart.

    Both fields are optional here so the service can answer with its own
    messages: missing productId => 400, falsy quantity => 1.
    """

    product_id: str | None = None
    quantity: int | None = None


class CartItemRead(CamelModel):
    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    added_at: datetime


class CartItemAdded(CamelModel):
    message: str = "Product added to cart successfully"
    cart_item: CartItemRead


class CartLineRead(CartItemRead):
    """
    Cart line with its product embedded.
    """

    product: ProductRead
