import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import select

from storefront.models.cart import CartItem
from storefront.models.product import ItemType, Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository

products = ProductRepository()
cart = CartRepository()


@pytest.fixture
def product(session):
    return products.create(session, Product(title="Kombucha", price=3.2))


# ----- Products -----


def test_create_applies_defaults(session):
    created = products.create(session, Product(title="Oat milk", price=2.0))

    assert isinstance(created.id, uuid.UUID)
    assert created.discount == 0
    assert created.item_type == ItemType.REGULAR
    assert created.rating == 0
    assert created.images == []
    assert created.created_at is not None


def test_create_keeps_image_order(session):
    urls = [f"uploads/{n}.png" for n in (3, 1, 2)]

    created = products.create(session, Product(title="Ice cream", price=6), urls)

    assert [img.image_url for img in created.images] == urls
    assert [img.sort_order for img in created.images] == [0, 1, 2]


def test_get_by_id(session, product):
    assert products.get_by_id(session, product.id).title == "Kombucha"
    assert products.get_by_id(session, uuid.uuid4()) is None


def test_list_by_recency_is_newest_first_for_any_insertion_order(session):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for title, offset in [("middle", 5), ("oldest", 0), ("newest", 10)]:
        products.create(
            session,
            Product(title=title, price=1, created_at=base + timedelta(minutes=offset)),
        )

    assert [p.title for p in products.list_by_recency(session)] == [
        "newest",
        "middle",
        "oldest",
    ]


# ----- Cart -----


def test_add_creates_line(session, product):
    item = cart.add_or_increment(session, product.id, 2)

    assert item.product_id == product.id
    assert item.quantity == 2
    assert item.added_at is not None


def test_repeated_adds_accumulate_on_one_line(session, product):
    first = cart.add_or_increment(session, product.id, 3)
    second = cart.add_or_increment(session, product.id, 2)
    third = cart.add_or_increment(session, product.id)

    assert first.id == second.id == third.id
    assert third.quantity == 6
    assert len(session.exec(select(CartItem)).all()) == 1


def test_lost_insert_race_increments_existing_line(session, product, monkeypatch):
    # Another request inserted the line after our lookup saw nothing.
    session.add(CartItem(product_id=product.id, quantity=4))
    session.commit()

    real_lookup = cart.get_by_product
    calls = []

    def stale_lookup(s, product_id):
        calls.append(product_id)
        if len(calls) == 1:
            return None
        return real_lookup(s, product_id)

    monkeypatch.setattr(cart, "get_by_product", stale_lookup)

    item = cart.add_or_increment(session, product.id, 3)

    assert item.quantity == 7
    rows = session.exec(select(CartItem)).all()
    assert len(rows) == 1


def test_list_with_product_joins_each_line(session, product):
    other = products.create(session, Product(title="Yogurt", price=1.1))
    cart.add_or_increment(session, product.id, 1)
    cart.add_or_increment(session, other.id, 5)

    rows = cart.list_with_product(session)

    assert {(p.title, item.quantity) for item, p in rows} == {
        ("Kombucha", 1),
        ("Yogurt", 5),
    }
    for item, p in rows:
        assert item.product_id == p.id


def test_list_with_product_empty(session):
    assert cart.list_with_product(session) == []
