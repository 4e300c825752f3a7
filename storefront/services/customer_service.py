# storefront/services/customer_service.py
import uuid

from fastapi import HTTPException, status

from storefront.models.customer import Customer
from storefront.schemas.customer import CustomerCreate
from storefront.storage.base import DuplicateError, Storage


class CustomerService:
    """
    Customer records that registered carts hang off.
    """

    def get_customer(self, storage: Storage, customer_id: uuid.UUID) -> Customer:
        customer = storage.get_customer(customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found",
            )
        return customer

    def create_customer(self, storage: Storage, payload: CustomerCreate) -> Customer:
        try:
            return storage.create_customer(payload)
        except DuplicateError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A customer with this email already exists",
            )
