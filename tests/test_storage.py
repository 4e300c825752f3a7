# tests/test_storage.py
"""
Storage contract, run against the in-memory and the SQLite backend.
"""
import threading
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from conftest import add_category, add_product, make_settings
from sqlmodel import Session

from storefront.database import build_engine, create_db_and_tables
from storefront.schemas.cart import CustomerOwner, SessionOwner
from storefront.schemas.category import CategoryCreate
from storefront.schemas.customer import CustomerCreate
from storefront.storage.base import DuplicateError
from storefront.storage.database import DatabaseStorage
from storefront.storage.memory import MemoryStorage


# ---- Categories ----


def test_category_by_slug_returns_none_when_missing(storage):
    add_category(storage, "animais")

    assert storage.get_category_by_slug("animais").slug == "animais"
    assert storage.get_category_by_slug("nope") is None


def test_duplicate_category_slug_is_rejected(storage):
    add_category(storage, "festas")

    with pytest.raises(DuplicateError):
        storage.create_category(CategoryCreate(name="Again", icon="x", slug="festas"))

    assert len(storage.list_categories()) == 1


# ---- Products ----


def test_products_are_listed_newest_first(storage):
    old = add_product(storage, "Old")
    new = add_product(storage, "New")
    now = datetime.now(timezone.utc)
    storage.update_product(old.id, {"created_at": now - timedelta(days=2)})
    storage.update_product(new.id, {"created_at": now - timedelta(days=1)})

    assert [p.name for p in storage.list_products()] == ["New", "Old"]


def test_search_matches_name_or_description_case_insensitively(storage):
    add_product(storage, "Dragon Statue", description="Big wings")
    add_product(storage, "Vase", description="Geometric DRAGON pattern")
    add_product(storage, "Cat", description="Cute")

    names = {p.name for p in storage.search_products("dragon")}

    assert names == {"Dragon Statue", "Vase"}


def test_search_treats_wildcards_literally(storage):
    add_product(storage, "100% PLA vase")
    add_product(storage, "Resin cat")

    assert [p.name for p in storage.search_products("100%")] == ["100% PLA vase"]
    assert storage.search_products("_") == []


def test_featured_and_category_filters(storage):
    animals = add_category(storage, "animais")
    add_product(storage, "Cat", category_id=animals.id, featured=True)
    add_product(storage, "Dog", category_id=animals.id)
    add_product(storage, "Vase", featured=True)

    assert {p.name for p in storage.list_featured_products()} == {"Cat", "Vase"}
    assert {p.name for p in storage.list_products_by_category(animals.id)} == {"Cat", "Dog"}


def test_update_and_delete_report_missing_products(storage):
    missing = uuid.uuid4()

    assert storage.update_product(missing, {"name": "x"}) is None
    assert storage.delete_product(missing) is False


def test_delete_product(storage):
    product = add_product(storage)

    assert storage.delete_product(product.id) is True
    assert storage.get_product(product.id) is None
    assert storage.delete_product(product.id) is False


# ---- Customers ----


def test_duplicate_customer_email_is_rejected(storage):
    storage.create_customer(CustomerCreate(email="ana@example.com", name="Ana"))

    with pytest.raises(DuplicateError):
        storage.create_customer(CustomerCreate(email="ana@example.com", name="Other"))

    assert storage.get_customer_by_email("ana@example.com").name == "Ana"


# ---- Cart ----


def test_adding_same_product_twice_merges_quantities(storage):
    product = add_product(storage)
    owner = SessionOwner("s1")

    first = storage.add_to_cart(owner, product.id, 2)
    second = storage.add_to_cart(owner, product.id, 3)

    items = storage.list_cart_items(owner)
    assert len(items) == 1
    assert second.id == first.id
    assert items[0].quantity == 5


def test_carts_are_scoped_by_owner(storage):
    product = add_product(storage)
    customer = storage.create_customer(CustomerCreate(email="c@example.com", name="C"))

    storage.add_to_cart(SessionOwner("s1"), product.id, 1)
    storage.add_to_cart(SessionOwner("s2"), product.id, 4)
    line = storage.add_to_cart(CustomerOwner(customer.id), product.id, 7)

    assert line.session_id is None
    assert line.customer_id == customer.id
    assert [it.quantity for it in storage.list_cart_items(SessionOwner("s1"))] == [1]
    assert [it.quantity for it in storage.list_cart_items(CustomerOwner(customer.id))] == [7]


def test_update_cart_item_rejects_quantity_below_one(storage):
    product = add_product(storage)
    item = storage.add_to_cart(SessionOwner("s1"), product.id, 2)

    with pytest.raises(ValueError):
        storage.update_cart_item(item.id, 0)

    assert storage.list_cart_items(SessionOwner("s1"))[0].quantity == 2


def test_update_cart_item(storage):
    product = add_product(storage)
    item = storage.add_to_cart(SessionOwner("s1"), product.id, 2)

    updated = storage.update_cart_item(item.id, 9)

    assert updated.quantity == 9
    assert storage.update_cart_item(uuid.uuid4(), 1) is None


def test_remove_cart_item_is_idempotent(storage):
    product = add_product(storage)
    item = storage.add_to_cart(SessionOwner("s1"), product.id, 1)

    assert storage.remove_cart_item(item.id) is True
    assert storage.remove_cart_item(item.id) is False


def test_clear_cart_only_touches_that_owner(storage):
    cat = add_product(storage, "Cat")
    vase = add_product(storage, "Vase")
    storage.add_to_cart(SessionOwner("s1"), cat.id, 1)
    storage.add_to_cart(SessionOwner("s1"), vase.id, 1)
    storage.add_to_cart(SessionOwner("s2"), cat.id, 1)

    assert storage.clear_cart(SessionOwner("s1")) == 2
    assert storage.list_cart_items(SessionOwner("s1")) == []
    assert len(storage.list_cart_items(SessionOwner("s2"))) == 1


# ---- Concurrency ----

WORKERS = 8


def _run_together(work) -> list[BaseException]:
    """Start WORKERS threads at once and collect whatever they raise."""
    barrier = threading.Barrier(WORKERS)
    errors: list[BaseException] = []

    def _worker():
        try:
            barrier.wait()
            work()
        except BaseException as exc:
            errors.append(exc)

    threads = [threading.Thread(target=_worker) for _ in range(WORKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


def test_concurrent_adds_merge_into_one_database_row(tmp_path):
    settings = make_settings(
        tmp_path,
        STORAGE_BACKEND="database",
        DATABASE_URL=f"sqlite:///{tmp_path / 'race.db'}",
    )
    engine = build_engine(settings)
    create_db_and_tables(engine)
    with Session(engine) as session:
        product_id = add_product(DatabaseStorage(session)).id

    def _add():
        with Session(engine) as session:
            DatabaseStorage(session).add_to_cart(SessionOwner("s1"), product_id, 1)

    assert _run_together(_add) == []

    with Session(engine) as session:
        items = DatabaseStorage(session).list_cart_items(SessionOwner("s1"))
    engine.dispose()
    assert len(items) == 1
    assert items[0].quantity == WORKERS


def test_concurrent_adds_merge_into_one_memory_line():
    storage = MemoryStorage()
    product_id = add_product(storage).id

    errors = _run_together(lambda: storage.add_to_cart(SessionOwner("s1"), product_id, 1))

    assert errors == []
    items = storage.list_cart_items(SessionOwner("s1"))
    assert len(items) == 1
    assert items[0].quantity == WORKERS


def test_memory_cart_reads_survive_concurrent_writes():
    storage = MemoryStorage()
    owner = SessionOwner("s1")
    done = threading.Event()
    errors: list[BaseException] = []

    def _read():
        while not done.is_set():
            try:
                storage.list_cart_items(owner)
            except BaseException as exc:
                errors.append(exc)
                return

    reader = threading.Thread(target=_read)
    reader.start()
    try:
        for _ in range(3000):
            storage.add_to_cart(owner, uuid.uuid4(), 1)
    finally:
        done.set()
        reader.join()

    assert errors == []
    assert len(storage.list_cart_items(owner)) == 3000
