# tests/conftest.py
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from storefront.core.config import Settings
from storefront.database import build_engine, create_db_and_tables
from storefront.main import create_app
from storefront.schemas.category import CategoryCreate
from storefront.schemas.product import ProductCreate
from storefront.storage.database import DatabaseStorage
from storefront.storage.memory import MemoryStorage


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "STORAGE_BACKEND": "memory",
        "DATABASE_URL": "sqlite://",
        "SEED_DATA": False,
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(params=["memory", "database"])
def backend_name(request) -> str:
    return request.param


@pytest.fixture
def settings(tmp_path, backend_name) -> Settings:
    return make_settings(tmp_path, STORAGE_BACKEND=backend_name)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def storage(tmp_path, backend_name):
    """
    A bare Storage of each backend, without the HTTP layer.
    """
    if backend_name == "memory":
        yield MemoryStorage()
        return

    engine = build_engine(make_settings(tmp_path, STORAGE_BACKEND="database"))
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield DatabaseStorage(session)
    engine.dispose()


# ---- API helpers ----


@pytest.fixture
def make_category(client):
    def _make(slug: str = "animais", name: str = "Animais", icon: str = "fas fa-paw") -> dict:
        resp = client.post("/api/categories", json={"name": name, "icon": icon, "slug": slug})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_product(client):
    def _make(**fields) -> dict:
        payload = {
            "name": "Dragão Fantasia",
            "description": "Miniatura detalhada para pintura",
            "price": "25.00",
            "printType": "resin",
            "featured": False,
        }
        payload.update(fields)
        resp = client.post("/api/products", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


# ---- Storage helpers ----


def add_category(storage, slug: str = "animais"):
    return storage.create_category(CategoryCreate(name=slug.title(), icon="fas fa-star", slug=slug))


def add_product(storage, name: str = "Dragão", **fields):
    data = {
        "name": name,
        "description": "Miniatura detalhada",
        "price": Decimal("25.00"),
        "print_type": "resin",
    }
    data.update(fields)
    return storage.create_product(ProductCreate(**data))
