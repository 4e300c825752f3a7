# storefront/services/product_service.py
import logging
import uuid
from dataclasses import dataclass

from fastapi import HTTPException, status

from storefront.core.storage_utils import FileStore, generate_filename
from storefront.models.catalog import Product
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.storage.base import Storage

logger = logging.getLogger(__name__)


# --- Upload config ---

ALLOWED_MODEL_CONTENT_TYPES = frozenset(
    {
        "application/octet-stream",
        "application/sla",
        "application/vnd.ms-pki.stl",
        "model/stl",
    }
)


@dataclass
class ModelUpload:
    """An STL file attached to a product form."""

    filename: str | None
    content_type: str | None
    data: bytes


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - filter precedence for the public listing
      - category reference checks
      - STL upload validation and storage orchestration
    """

    # ----- Helpers -----

    @staticmethod
    def _validate_upload(upload: ModelUpload, max_bytes: int) -> None:
        filename = (upload.filename or "").lower()
        if not filename.endswith(".stl") and upload.content_type not in ALLOWED_MODEL_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only STL files are allowed",
            )

        if len(upload.data) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large (max {max_bytes // (1024 * 1024)}MB).",
            )

    @staticmethod
    def _ensure_category(storage: Storage, category_id: uuid.UUID | None) -> None:
        if category_id is not None and storage.get_category(category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown category",
            )

    # ----- Queries -----

    def list_products(
        self,
        storage: Storage,
        category: str | None = None,
        search: str | None = None,
        featured: bool | None = None,
    ) -> list[Product]:
        """
        Public listing with optional filters.

        Precedence: featured > search > category > all. Only the
        winning filter applies; an unknown category slug yields [].
        """
        if featured:
            return storage.list_featured_products()

        term = (search or "").strip()
        if term:
            return storage.search_products(term)

        if category:
            found = storage.get_category_by_slug(category)
            if found is None:
                return []
            return storage.list_products_by_category(found.id)

        return storage.list_products()

    def get_product(self, storage: Storage, product_id: uuid.UUID) -> Product:
        product = storage.get_product(product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Mutations -----

    def create_product(
        self,
        storage: Storage,
        payload: ProductCreate,
        file_store: FileStore,
        upload: ModelUpload | None = None,
        max_upload_bytes: int = 50 * 1024 * 1024,
    ) -> Product:
        """
        Create a product. An attached STL file is stored first and its
        reference replaces any stlFileUrl sent in the payload.
        """
        self._ensure_category(storage, payload.category_id)

        url = None
        if upload is not None:
            self._validate_upload(upload, max_upload_bytes)
            path = f"models/{generate_filename(upload.filename)}"
            url = file_store.save(path, upload.data, upload.content_type)
            payload = payload.model_copy(update={"stl_file_url": url})
            logger.info("Stored STL upload %s (%d bytes)", url, len(upload.data))

        try:
            product = storage.create_product(payload)
        except Exception:
            if url:
                file_store.delete(url)
            raise
        logger.info("Created product %s (%s)", product.name, product.id)
        return product

    def update_product(
        self,
        storage: Storage,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update; only fields present in the payload change.
        """
        changes = payload.changes()
        if "category_id" in changes:
            self._ensure_category(storage, changes["category_id"])

        product = storage.update_product(product_id, changes)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def delete_product(
        self,
        storage: Storage,
        product_id: uuid.UUID,
        file_store: FileStore,
    ) -> None:
        """
        Delete a product and the STL file it owns, unless another
        product still references that file.
        """
        product = self.get_product(storage, product_id)
        stl_file_url = product.stl_file_url

        if not storage.delete_product(product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        # Another product may point at the same file
        if stl_file_url and not any(
            p.stl_file_url == stl_file_url for p in storage.list_products()
        ):
            file_store.delete(stl_file_url)
        logger.info("Deleted product %s", product_id)
