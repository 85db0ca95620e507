# storefront/api/dependencies.py
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.services.lock_service import CheckoutLockService
from storefront.services.order_service import OrderService


@lru_cache
def get_lock_service() -> CheckoutLockService:
    return CheckoutLockService()


def get_order_service(
    db: Session = Depends(get_db),
    lock_service: CheckoutLockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db, lock_service=lock_service)
