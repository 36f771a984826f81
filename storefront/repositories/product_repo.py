# storefront/repositories/product_repo.py
import uuid
from typing import Sequence

from sqlmodel import Session, select

from storefront.models.product import Product, ProductImage


class ProductRepository:
    """
    Data access layer for Product & ProductImage.

    - Pure DB operations (insert + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_by_recency(self, session: Session) -> list[Product]:
        """
        All products, most recently created first.
        """
        stmt = select(Product).order_by(Product.created_at.desc())
        return list(session.exec(stmt).all())

    def create(
        self,
        session: Session,
        product: Product,
        image_urls: Sequence[str] = (),
    ) -> Product:
        """
        Insert the product and its image rows in a single commit.
        """
        product.images = [
            ProductImage(product_id=product.id, image_url=url, sort_order=idx)
            for idx, url in enumerate(image_urls)
        ]
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
