# storefront/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryCreate, CategoryOut
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return ProductService(db).list_categories()


@router.post("/", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return CategoryOut.model_validate(svc.create_category(payload))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Category slug {payload.slug} already exists")
