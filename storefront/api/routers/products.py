# storefront/api/routers/products.py
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import (
    CategoryNotFoundError,
    DuplicateReviewError,
    ProductNotFoundError,
    UserNotFoundError,
)
from storefront.domain.schemas import ProductCreate, ProductOut, ProductPage, ReviewCreate, ReviewOut, ReviewPage
from storefront.domain.status import ProductStatus
from storefront.services.product_service import ProductService
from storefront.services.recommendation_service import RecommendationService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("/", response_model=ProductPage)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: ProductStatus = Query(ProductStatus.ACTIVE),
    category: Optional[str] = Query(None, description="category slug"),
    search: Optional[str] = Query(None, max_length=100),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    in_stock: bool = False,
    sort: Literal["created_at", "name", "price", "popularity", "rating"] = "created_at",
    direction: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    return ProductService(db).list_products(
        page=page,
        limit=limit,
        status=status.value,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        sort=sort,
        direction=direction,
    )


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return ProductOut.model_validate(svc.create_product(payload))
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"SKU {payload.sku} already exists")


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return ProductOut.model_validate(svc.get_product(product_id))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{product_id}/related", response_model=List[ProductOut])
def related_products(product_id: int, limit: int = Query(4, ge=1, le=20), db: Session = Depends(get_db)):
    try:
        return ProductService(db).related_products(product_id, limit)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{product_id}/view", status_code=204)
def track_view(product_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    try:
        RecommendationService(db).track_view(user_id, product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{product_id}/reviews", response_model=ReviewPage)
def list_reviews(
    product_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort: Literal["created_at", "rating"] = "created_at",
    direction: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    try:
        return ReviewService(db).list_reviews(
            product_id, page=page, limit=limit, rating=rating, sort=sort, direction=direction
        )
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{product_id}/reviews", response_model=ReviewOut, status_code=201)
def create_review(
    product_id: int,
    payload: ReviewCreate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return ReviewService(db).create_review(user_id, product_id, payload)
    except (ProductNotFoundError, UserNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateReviewError as e:
        raise HTTPException(status_code=409, detail=str(e))
