# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.core.config import Settings, get_settings
from storefront.core.errors import register_exception_handlers
from storefront.core.storage_utils import LocalFileStore, build_file_store
from storefront.storage.factory import build_backend
from storefront.storage.seed import seed_defaults

# Routers
from storefront.routers.cart import router as cart_router
from storefront.routers.categories import router as categories_router
from storefront.routers.customers import router as customers_router
from storefront.routers.products import router as products_router
from storefront.routers.subscriptions import router as subscriptions_router

logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Prepare the storage backend (create tables).
      - Seed the default catalog on first run.

    Shutdown:
      - Release the backend (dispose engine).
    """
    settings: Settings = app.state.settings
    backend = app.state.storage_backend

    logger.info("🔄 Startup: preparing %s storage...", settings.STORAGE_BACKEND)
    try:
        backend.startup()
    except Exception as e:
        logger.error(f"❌ Startup: storage FAILED: {e}")
        raise

    if settings.SEED_DATA:
        with backend.open() as storage:
            if seed_defaults(storage):
                logger.info("🌱 Startup: default catalog seeded.")
    logger.info("✅ Startup: storage ready.")

    yield

    backend.shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API. Tests pass their own Settings for isolated apps.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage_backend = build_backend(settings)
    app.state.file_store = build_file_store(settings)

    # --- CORS configuration ---
    # Wildcard origin: the storefront and admin UIs are plain HTTP clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # API prefix, e.g. /api
    app.include_router(categories_router, prefix=settings.API_PREFIX)
    app.include_router(products_router, prefix=settings.API_PREFIX)
    app.include_router(subscriptions_router, prefix=settings.API_PREFIX)
    app.include_router(cart_router, prefix=settings.API_PREFIX)
    app.include_router(customers_router, prefix=settings.API_PREFIX)

    # Uploaded STL files are served back verbatim
    if isinstance(app.state.file_store, LocalFileStore):
        app.mount(
            settings.UPLOAD_URL_PREFIX,
            StaticFiles(directory=app.state.file_store.root, check_dir=False),
            name="uploads",
        )

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "figure-storefront"}

    return app


app = create_app()
