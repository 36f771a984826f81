# storefront/services/product_service.py
import logging
import math
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.errors import StorageError, ValidationError
from storefront.core.storage_utils import MediaStore, UploadedImage
from storefront.models.product import ItemType, Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductRead

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 5.0


def product_to_read(product: Product) -> ProductRead:
    return ProductRead(
        id=product.id,
        title=product.title,
        price=product.price,
        discount=product.discount,
        item_type=product.item_type,
        rating=product.rating,
        images=[img.image_url for img in product.images],
        created_at=product.created_at,
    )


class ProductService:
    """
    Business logic for products.

    Responsibilities:
      - required-field checks and numeric parsing of form values
      - defaults for omitted optional fields
      - image storage orchestration (validate, store, roll back)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _parse_number(raw: str, label: str) -> float:
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a number")
        if not math.isfinite(value):
            raise ValidationError(f"{label} must be a number")
        return value

    @staticmethod
    def _parse_item_type(raw: str | None) -> ItemType:
        if not raw:
            return ItemType.REGULAR
        try:
            return ItemType(raw.strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in ItemType)
            raise ValidationError(f"Item type must be one of: {allowed}")

    def _build_product(self, payload: ProductCreate) -> Product:
        """
        Validate form values and build an unsaved Product.

        Falsy optional values ("", "0", missing) fall back to defaults.
        """
        title = (payload.title or "").strip()
        if not title or not payload.price:
            raise ValidationError("Title and price are required")

        price = self._parse_number(payload.price, "Price")
        if price < 0:
            raise ValidationError("Price must be non-negative")

        discount = self._parse_number(payload.discount, "Discount") if payload.discount else 0.0

        rating = self._parse_number(payload.rating, "Rating") if payload.rating else 0.0
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError("Rating must be between 0 and 5")

        return Product(
            title=title,
            price=price,
            discount=discount,
            item_type=self._parse_item_type(payload.item_type),
            rating=rating,
        )

    # ----- Products -----

    def list_products(self, session: Session) -> list[ProductRead]:
        return [product_to_read(p) for p in self.repo.list_by_recency(session)]

    def create_product(
        self,
        session: Session,
        media_store: MediaStore,
        payload: ProductCreate,
        files: Sequence[UploadedImage] = (),
    ) -> ProductRead:
        """
        Create a product with up to MAX_UPLOAD_FILES images.

        Steps:
          1. validate the upload batch (count, type, size)
          2. validate and parse form fields
          3. store images
          4. insert product + image rows in one commit

        Nothing is stored when 1 or 2 fails. When 4 fails the stored
        images are discarded before the error propagates.
        """
        media_store.validate(files)
        product = self._build_product(payload)

        image_urls = media_store.store(files)
        try:
            created = self.repo.create(session, product, image_urls)
        except SQLAlchemyError as e:
            session.rollback()
            media_store.discard(image_urls)
            raise StorageError(f"Could not save product: {e}") from e

        logger.info("Created product %s with %d image(s)", created.id, len(image_urls))
        return product_to_read(created)
