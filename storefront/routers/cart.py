# storefront/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemAdded, CartItemCreate, CartLineRead
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=list[CartLineRead])
def get_cart(session: Session = Depends(get_session)):
    """
    List cart lines, each with its product embedded.
    """
    return service.list_cart(session)


@router.post("", response_model=CartItemAdded, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate | None = None,
    session: Session = Depends(get_session),
):
    """
    Add a product to the cart.

    Adding a product that is already in the cart increases its quantity.
    """
    return CartItemAdded(cart_item=service.add_to_cart(session, payload))
