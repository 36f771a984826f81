import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.database import Database
from storefront.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        UPLOAD_DIR=str(upload_dir),
    )


@pytest.fixture
def database():
    # One shared in-memory connection for the whole test.
    return Database("sqlite://", poolclass=StaticPool)


@pytest.fixture
def session(database):
    database.connect()
    with Session(database.engine) as s:
        yield s
    database.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(client):
    """Session on the same database the running app uses."""
    with Session(client.app.state.db.engine) as s:
        yield s


@pytest.fixture
def make_product(client):
    def _make(**fields):
        data = {"title": "Green tea", "price": "4.50"}
        data.update(fields)
        resp = client.post("/api/products", data=data)
        assert resp.status_code == 201, resp.text
        return resp.json()["product"]

    return _make
