# storefront/services/cart_service.py
import uuid

from sqlmodel import Session

from storefront.core.errors import NotFoundError, ValidationError
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate, CartItemRead, CartLineRead
from storefront.services.product_service import product_to_read


def cart_item_to_read(item: CartItem) -> CartItemRead:
    return CartItemRead(
        id=item.id,
        product_id=item.product_id,
        quantity=item.quantity,
        added_at=item.added_at,
    )


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence
      - quantity defaulting (falsy => 1)
      - one line per product, repeated adds accumulate
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_product(self, session: Session, raw_id: str) -> Product:
        # A malformed id can't reference anything, so it is "not found" too.
        try:
            product_id = uuid.UUID(str(raw_id))
        except ValueError:
            raise NotFoundError("Product not found")

        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    # ---- public operations ----

    def add_to_cart(
        self,
        session: Session,
        payload: CartItemCreate | None,
    ) -> CartItemRead:
        """
        Add a product to the cart.

        Rules:
          - productId is required                      => 400
          - product must exist                         => 404
          - quantity missing / null / 0 counts as 1
          - negative quantity                          => 400
        """
        if payload is None or not payload.product_id:
            raise ValidationError("Product ID is required")

        quantity = payload.quantity or 1
        if quantity < 0:
            raise ValidationError("Quantity must be a positive integer")

        product = self._get_product(session, payload.product_id)
        item = self.cart_repo.add_or_increment(session, product.id, quantity)
        return cart_item_to_read(item)

    def list_cart(self, session: Session) -> list[CartLineRead]:
        """
        Every cart line with its product embedded.
        """
        return [
            CartLineRead(
                **cart_item_to_read(item).model_dump(),
                product=product_to_read(product),
            )
            for item, product in self.cart_repo.list_with_product(session)
        ]
