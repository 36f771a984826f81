# storefront/routers/products.py
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from storefront.core.errors import UploadError
from storefront.core.storage_utils import (
    TOO_MANY_FILES_MESSAGE,
    MediaStore,
    UploadedImage,
    get_media_store,
)
from storefront.database import get_session
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductCreated, ProductRead
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


def _read_uploads(
    files: list[UploadFile],
    media_store: MediaStore,
) -> list[UploadedImage]:
    """
    Read uploaded parts into memory, at most max_bytes + 1 per file.

    One byte past the limit is enough for the media store to reject it.
    Parts without a filename (empty file inputs) are skipped.
    """
    files = [f for f in files if f.filename]
    if len(files) > media_store.max_files:
        raise UploadError(TOO_MANY_FILES_MESSAGE)

    return [
        UploadedImage(
            content_type=f.content_type or "",
            filename=f.filename or "",
            data=f.file.read(media_store.max_bytes + 1),
        )
        for f in files
    ]


@router.get("", response_model=list[ProductRead])
def list_products(session: Session = Depends(get_session)):
    """
    List all products, most recent first.
    """
    return service.list_products(session)


@router.post(
    "",
    response_model=ProductCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product with up to 5 images",
)
def create_product(
    title: str | None = Form(default=None),
    price: str | None = Form(default=None),
    discount: str | None = Form(default=None),
    item_type: str | None = Form(default=None, alias="itemType"),
    rating: str | None = Form(default=None),
    images: list[UploadFile] | None = File(default=None),
    session: Session = Depends(get_session),
    media_store: MediaStore = Depends(get_media_store),
):
    """
    Create a new product.

    - Multipart form: title, price, discount?, itemType?, rating?, images[].
    - Accepts JPEG, JPG, PNG up to 5MB each.
    """
    files = _read_uploads(images or [], media_store)
    payload = ProductCreate(
        title=title,
        price=price,
        discount=discount,
        item_type=item_type,
        rating=rating,
    )
    product = service.create_product(session, media_store, payload, files)
    return ProductCreated(product=product)
