# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import ProductNotFoundError
from storefront.domain.schemas import CartOut, ItemIn, QuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).get_cart(user_id)


@router.post("/items", response_model=CartOut)
def add_item(payload: ItemIn, user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.add_product(user_id, payload.product_id, payload.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: int,
    payload: QuantityIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    try:
        return svc.update_quantity(user_id, product_id, payload.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = CartService(db)
    try:
        return svc.remove_product(user_id, product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/", response_model=CartOut)
def clear_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).clear_cart(user_id)
