# storefront/repositories/cart_repo.py
import logging
import uuid

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.models.cart import CartItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class CartRepository:

    def get_by_product(self, session: Session, product_id: uuid.UUID) -> CartItem | None:
        stmt = select(CartItem).where(CartItem.product_id == product_id)
        return session.exec(stmt).first()

    def _increment(
        self, session: Session, item_id: uuid.UUID, quantity: int
    ) -> CartItem:
        # SQL-side increment; concurrent adds never overwrite each other.
        session.execute(
            update(CartItem)
            .where(CartItem.id == item_id)
            .values(quantity=CartItem.quantity + quantity)
        )
        session.commit()
        item = session.get(CartItem, item_id)
        session.refresh(item)
        return item

    def add_or_increment(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartItem:
        """
        Add `quantity` of a product to the cart.

        Existing line => quantity is increased in place.
        No line       => a new one is inserted.

        The unique index on product_id turns a lost insert race into an
        IntegrityError; in that case the winner's line is incremented.
        Product existence is checked by the caller.
        """
        existing = self.get_by_product(session, product_id)
        if existing:
            return self._increment(session, existing.id, quantity)

        item = CartItem(product_id=product_id, quantity=quantity)
        session.add(item)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.info("Concurrent insert for product %s, incrementing instead", product_id)
            existing = self.get_by_product(session, product_id)
            if existing is None:
                raise
            return self._increment(session, existing.id, quantity)

        session.refresh(item)
        return item

    def list_with_product(self, session: Session) -> list[tuple[CartItem, Product]]:
        """
        Every cart line joined with the product it references.

        Rows come back in storage order; no explicit sort.
        """
        stmt = select(CartItem, Product).join(Product, CartItem.product_id == Product.id)
        return list(session.exec(stmt).all())
