# storefront/dependencies.py
import uuid
from collections.abc import Iterator

from fastapi import HTTPException, Query, Request, status

from storefront.core.storage_utils import FileStore
from storefront.schemas.cart import CartOwner, resolve_owner
from storefront.storage.base import Storage


def get_storage(request: Request) -> Iterator[Storage]:
    """
    FastAPI dependency that yields the Storage for this request.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(storage: Storage = Depends(get_storage)):
            ...
    """
    with request.app.state.storage_backend.open() as storage:
        yield storage


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def get_max_upload_bytes(request: Request) -> int:
    return request.app.state.settings.MAX_UPLOAD_BYTES


def require_owner(
    session_id: str | None,
    customer_id: uuid.UUID | None,
) -> CartOwner:
    owner = resolve_owner(session_id, customer_id)
    if owner is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session ID or Customer ID is required",
        )
    return owner


def get_cart_owner(
    session_id: str | None = Query(default=None, alias="sessionId"),
    customer_id: uuid.UUID | None = Query(default=None, alias="customerId"),
) -> CartOwner:
    """
    Cart owner from the query string; customerId wins over sessionId.
    """
    return require_owner(session_id, customer_id)
