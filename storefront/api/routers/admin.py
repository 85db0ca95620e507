# storefront/api/routers/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.dependencies import get_order_service
from storefront.data.database import get_db
from storefront.domain.errors import (
    InsufficientStockError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    ProductNotFoundError,
    TransactionFailure,
)
from storefront.domain.schemas import (
    InventoryAlertOut,
    OrderOut,
    OrderStatusUpdate,
    ProductOut,
    StockAdjustment,
)
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.utils.settings import LOW_STOCK_THRESHOLD

router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    try:
        return OrderOut.model_validate(svc.update_status(order_id, payload.status))
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransactionFailure as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/products/{product_id}/stock", response_model=ProductOut)
def adjust_stock(product_id: int, payload: StockAdjustment, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return ProductOut.model_validate(svc.adjust_stock(product_id, payload.delta, payload.reason))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/inventory/alerts", response_model=List[InventoryAlertOut])
def inventory_alerts(
    threshold: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    svc = ProductService(db)
    return svc.low_stock_alerts(LOW_STOCK_THRESHOLD if threshold is None else threshold)
