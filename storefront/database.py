# storefront/database.py
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from storefront.core.config import Settings

# ---------------------------------------------------------
# Engine construction
#
# SQLite (local dev / tests):
#   - check_same_thread=False : FastAPI runs sync routes in a threadpool
#   - in-memory URLs share one connection (StaticPool), otherwise every
#     new connection would see an empty database
#
# Postgres (hosted, via pooler):
#   - sslmode=require   : when DATABASE_REQUIRE_SSL is set
#   - pool_size=1       : keep only 1 connection to the pooler
#   - max_overflow=0    : do not open extra connections beyond the pool
#   - pool_pre_ping=True: validate connections before using them
# ---------------------------------------------------------

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _with_sslmode(db_url: str) -> str:
    if "sslmode=" in db_url:
        return db_url
    if "?" in db_url:
        return db_url + "&sslmode=require"
    return db_url + "?sslmode=require"


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured DATABASE_URL.
    """
    db_url = settings.DATABASE_URL

    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if db_url in _MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=settings.DATABASE_ECHO, **kwargs)

    if settings.DATABASE_REQUIRE_SSL:
        db_url = _with_sslmode(db_url)

    return create_engine(
        db_url,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    # Import models so SQLModel metadata is populated before create_all()
    from storefront.models import cart as _cart_models  # noqa: F401
    from storefront.models import catalog as _catalog_models  # noqa: F401
    from storefront.models import customer as _customer_models  # noqa: F401

    SQLModel.metadata.create_all(engine)
