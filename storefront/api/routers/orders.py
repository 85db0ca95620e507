# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.dependencies import get_order_service
from storefront.domain.errors import (
    AddressNotFoundError,
    CheckoutInProgressError,
    EmptyCartError,
    InsufficientStockError,
    NotCancellableError,
    OrderNotFoundError,
    OrderNumberExhaustedError,
    TransactionFailure,
)
from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/", response_model=List[OrderOut])
def list_orders(user_id: int = Query(...), svc: OrderService = Depends(get_order_service)):
    return [OrderOut.model_validate(o) for o in svc.list_orders(user_id)]


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Places an order from the user's cart.
    Confirmation mail is delivered asynchronously through the outbox.
    """
    try:
        order = svc.create_order(user_id, payload.address_id, payload.notes)
        return OrderOut.model_validate(order)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AddressNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InsufficientStockError, CheckoutInProgressError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OrderNumberExhaustedError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except TransactionFailure as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return OrderOut.model_validate(svc.get_order(order_id, user_id))
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{order_id}", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Cancels a PENDING or CONFIRMED order and puts its stock back.
    """
    try:
        return OrderOut.model_validate(svc.cancel_order(order_id, user_id))
    except NotCancellableError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransactionFailure as e:
        raise HTTPException(status_code=500, detail=str(e))
