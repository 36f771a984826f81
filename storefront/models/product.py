# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlmodel import SQLModel, Field, Relationship


class ItemType(str, Enum):
    COLD = "cold"
    ORGANIC = "organic"
    REGULAR = "regular"


class Product(SQLModel, table=True):
    """
    Catalog entry. Immutable once created.

    Images live in `product_images`, one row per stored file, ordered
    by sort_order.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(
        min_length=1,
        description="Display name of the product",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    discount: float = Field(default=0)

    item_type: ItemType = Field(
        default=ItemType.REGULAR,
        description="cold / organic / regular",
    )

    rating: float = Field(
        default=0,
        ge=0,
        le=5,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )

    images: list["ProductImage"] = Relationship(
        sa_relationship_kwargs={
            "order_by": "ProductImage.sort_order",
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
        },
    )


class ProductImage(SQLModel, table=True):
    """
    Stored image reference for a product (0..5 per product).
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_url: str = Field(
        description="Stored path (uploads/<file>) or public Storage URL",
    )

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the product's images",
    )
