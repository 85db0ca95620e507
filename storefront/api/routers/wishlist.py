# storefront/api/routers/wishlist.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import AlreadyInWishlistError, ProductNotFoundError, WishlistItemNotFoundError
from storefront.domain.schemas import WishlistAdd, WishlistItemOut
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("/", response_model=List[WishlistItemOut])
def list_wishlist(user_id: int = Query(...), db: Session = Depends(get_db)):
    return WishlistService(db).list_items(user_id)


@router.post("/", response_model=WishlistItemOut, status_code=201)
def add_to_wishlist(payload: WishlistAdd, user_id: int = Query(...), db: Session = Depends(get_db)):
    try:
        return WishlistService(db).add_product(user_id, payload.product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyInWishlistError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def remove_from_wishlist(product_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    try:
        WishlistService(db).remove_product(user_id, product_id)
    except WishlistItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
