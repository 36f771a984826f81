# storefront/schemas/product.py
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.models.product import ItemType


class CamelModel(BaseModel):
    """
    Base for API payloads: snake_case in Python, camelCase on the wire.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductRead(CamelModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    title: str
    price: float
    discount: float
    item_type: ItemType
    rating: float
    images: list[str]
    created_at: datetime


class ProductCreated(CamelModel):
    message: str = "Product created successfully"
    product: ProductRead


class ProductCreate(CamelModel):
    """
    Raw form fields for product creation.

    Values arrive as text (multipart / url-encoded form) and are parsed
    by ProductService, which owns the required-field and range rules.
    """

    title: str | None = None
    price: str | None = None
    discount: str | None = None
    item_type: str | None = None
    rating: str | None = None
