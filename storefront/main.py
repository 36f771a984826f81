# storefront/main.py
from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.core.config import Settings, get_settings
from storefront.core.errors import register_exception_handlers
from storefront.core.storage_utils import MediaStore, build_media_store
from storefront.database import Database

# Routers
from storefront.routers.cart import router as cart_router
from storefront.routers.products import router as products_router

logger = logging.getLogger("uvicorn")


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    media_store: MediaStore | None = None,
) -> FastAPI:
    """
    Build the API application.

    `database` and `media_store` default to the ones described by
    `settings`; tests pass their own.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    db = database or Database(
        settings.DATABASE_URL, require_ssl=settings.DATABASE_REQUIRE_SSL
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Connect to the datastore and create tables.
          - Create the content directory (local backend).
          - Build the media store.

        Shutdown:
          - Dispose of the connection pool.
        """
        logger.info("🔄 Startup: connecting to datastore...")
        try:
            db.connect()
            logger.info("✅ Startup: datastore OK, tables verified.")
        except Exception as e:
            logger.error(f"❌ Startup: datastore connection FAILED: {e}")
            raise
        app.state.db = db
        if settings.STORAGE_BACKEND == "local":
            Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        app.state.media_store = media_store or build_media_store(settings)
        yield
        db.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(products_router, prefix=settings.API_PREFIX)
    app.include_router(cart_router, prefix=settings.API_PREFIX)

    if settings.STORAGE_BACKEND == "local":
        # Directory is created in lifespan, before the first request.
        app.mount(
            settings.UPLOAD_URL_PREFIX,
            StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
            name="uploads",
        )

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "storefront"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=get_settings().PORT)


if __name__ == "__main__":
    run()
