# storefront/services/category_service.py
import logging

from fastapi import HTTPException, status

from storefront.models.catalog import Category
from storefront.schemas.category import CategoryCreate
from storefront.storage.base import DuplicateError, Storage

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Business logic for catalog categories.
    """

    def list_categories(self, storage: Storage) -> list[Category]:
        return storage.list_categories()

    def get_by_slug(self, storage: Storage, slug: str) -> Category:
        category = storage.get_category_by_slug(slug)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def create_category(self, storage: Storage, payload: CategoryCreate) -> Category:
        """
        Create a category; the slug must be unique (409 otherwise).
        """
        try:
            category = storage.create_category(payload)
        except DuplicateError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category slug already exists",
            )
        logger.info("Created category %s (%s)", category.slug, category.id)
        return category
