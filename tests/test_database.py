import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from storefront.database import Database


def test_engine_is_unavailable_before_connect():
    db = Database("sqlite://")
    with pytest.raises(RuntimeError, match="connect"):
        db.engine


def test_connect_creates_tables_and_dispose_releases_engine():
    db = Database("sqlite://", poolclass=StaticPool)

    db.connect()
    tables = set(inspect(db.engine).get_table_names())
    db.dispose()

    assert {"products", "product_images", "cart_items"} <= tables
    with pytest.raises(RuntimeError):
        db.engine


def test_require_ssl_only_touches_postgres_urls():
    pg = Database("postgresql://u:p@db.example.com/shop", require_ssl=True)
    assert pg.url == "postgresql://u:p@db.example.com/shop?sslmode=require"

    pg_with_query = Database(
        "postgresql://u:p@db.example.com/shop?application_name=api", require_ssl=True
    )
    assert pg_with_query.url.endswith("?application_name=api&sslmode=require")

    already = Database("postgresql://db/shop?sslmode=disable", require_ssl=True)
    assert already.url == "postgresql://db/shop?sslmode=disable"

    lite = Database("sqlite:///./shop.db", require_ssl=True)
    assert lite.url == "sqlite:///./shop.db"
