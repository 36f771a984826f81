# storefront/database.py
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


def _with_sslmode(url: str) -> str:
    """
    Append sslmode=require to a Postgres URL if it is not already present.
    """
    if "sslmode=" in url:
        return url
    return url + ("&" if "?" in url else "?") + "sslmode=require"


class Database:
    """
    Process-wide datastore handle.

    Lifecycle:
      - connect()  once before serving: builds the engine, creates tables
      - session()  per request
      - dispose()  on shutdown

    The application lifespan keeps the instance on `app.state.db`;
    repositories only ever see the Session handed to them.
    """

    def __init__(self, url: str, require_ssl: bool = False, **engine_kwargs):
        if require_ssl and url.startswith("postgresql"):
            url = _with_sslmode(url)
        if url.startswith("sqlite"):
            # Sessions are used from FastAPI's threadpool.
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.url = url
        self.engine_kwargs = engine_kwargs
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database.connect() has not been called")
        return self._engine

    def connect(self) -> None:
        """
        Create the engine and all tables defined in SQLModel metadata
        if they do not exist.
        """
        # Import models so SQLModel metadata is populated before create_all()
        from storefront.models import cart as _cart_models  # noqa: F401
        from storefront.models import product as _product_models  # noqa: F401

        self._engine = create_engine(self.url, echo=False, **self.engine_kwargs)
        SQLModel.metadata.create_all(self._engine)
        logger.info("Connected to %s", self._engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Datastore connections closed")

    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session


def get_session(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    yield from request.app.state.db.session()
