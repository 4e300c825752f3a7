# storefront/routers/categories.py
from fastapi import APIRouter, Depends, status

from storefront.dependencies import get_storage
from storefront.schemas.category import CategoryCreate, CategoryRead
from storefront.services.category_service import CategoryService
from storefront.storage.base import Storage

router = APIRouter(prefix="/categories", tags=["Categories"])

service = CategoryService()


@router.get("", response_model=list[CategoryRead])
def list_categories(storage: Storage = Depends(get_storage)):
    """
    List all catalog categories.
    """
    return service.list_categories(storage)


@router.get("/{slug}", response_model=CategoryRead)
def get_category(slug: str, storage: Storage = Depends(get_storage)):
    return service.get_by_slug(storage, slug)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    payload: CategoryCreate,
    storage: Storage = Depends(get_storage),
):
    """
    Create a new category. The slug must be unique.
    """
    return service.create_category(storage, payload)
