# storefront/routers/products.py
import json
import uuid

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Request,
    status,
)
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from storefront.core.storage_utils import FileStore
from storefront.dependencies import get_file_store, get_max_upload_bytes, get_storage
from storefront.schemas.product import ProductCreate, ProductRead, ProductUpdate
from storefront.services.product_service import ModelUpload, ProductService
from storefront.storage.base import Storage

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductService()

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
STL_FIELD = "stlFile"


async def _read_product_form(request: Request, max_bytes: int) -> tuple[dict, ModelUpload | None]:
    """
    Split a product form into scalar fields and the optional STL part.

    Reads at most max_bytes + 1 of the file so oversize uploads are
    detected without buffering everything.
    """
    form = await request.form()
    data = {key: value for key, value in form.items() if key != STL_FIELD}

    upload = None
    part = form.get(STL_FIELD)
    if isinstance(part, UploadFile) and part.filename:
        upload = ModelUpload(
            filename=part.filename,
            content_type=part.content_type,
            data=await part.read(max_bytes + 1),
        )
        await part.close()
    return data, upload


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    storage: Storage = Depends(get_storage),
    category: str | None = None,
    search: str | None = None,
    featured: bool | None = None,
):
    """
    List products, newest first.

    Filters (only the first one present applies):
      1. `featured=true`
      2. `search` (name / description, case-insensitive)
      3. `category` (slug; unknown slug => empty list)
    """
    return service.list_products(
        storage, category=category, search=search, featured=featured
    )


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    storage: Storage = Depends(get_storage),
):
    """
    Get a single product by id.
    """
    return service.get_product(storage, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product, optionally with an STL model file",
)
async def create_product(
    request: Request,
    storage: Storage = Depends(get_storage),
    file_store: FileStore = Depends(get_file_store),
    max_bytes: int = Depends(get_max_upload_bytes),
):
    """
    Create a new product.

    - Accepts a JSON body, or multipart form fields plus an optional
      `stlFile` part (.stl, max 50MB by default).
    - The stored file path is recorded as `stlFileUrl`.
    """
    upload = None
    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES):
        data, upload = await _read_product_form(request, max_bytes)
    else:
        try:
            data = await request.json()
        except json.JSONDecodeError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Body must be JSON or multipart form data",
            )

    payload = ProductCreate.model_validate(data)
    return await run_in_threadpool(
        service.create_product,
        storage,
        payload,
        file_store,
        upload,
        max_bytes,
    )


@router.put("/{product_id}", response_model=ProductRead)
@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    storage: Storage = Depends(get_storage),
):
    """
    Update an existing product. Only the fields sent are changed.
    """
    return service.update_product(storage, product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_200_OK,
)
def delete_product(
    product_id: uuid.UUID,
    storage: Storage = Depends(get_storage),
    file_store: FileStore = Depends(get_file_store),
) -> dict[str, str]:
    """
    Delete a product (and its uploaded STL file).
    """
    service.delete_product(storage, product_id, file_store)
    return {"message": "Product deleted successfully"}
