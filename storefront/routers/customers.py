# storefront/routers/customers.py
import uuid

from fastapi import APIRouter, Depends, status

from storefront.dependencies import get_storage
from storefront.schemas.customer import CustomerCreate, CustomerRead
from storefront.services.customer_service import CustomerService
from storefront.storage.base import Storage

router = APIRouter(prefix="/customers", tags=["Customers"])

service = CustomerService()


@router.post(
    "",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
)
def create_customer(
    payload: CustomerCreate,
    storage: Storage = Depends(get_storage),
):
    """
    Register a customer so carts can be kept under a customer id.
    """
    return service.create_customer(storage, payload)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: uuid.UUID,
    storage: Storage = Depends(get_storage),
):
    return service.get_customer(storage, customer_id)
