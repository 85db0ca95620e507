# storefront/api/routers/recommendations.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ProductOut
from storefront.services.recommendation_service import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("/", response_model=List[ProductOut])
def recommendations(
    user_id: int = Query(...),
    category_id: Optional[int] = Query(None, gt=0),
    exclude: List[int] = Query([]),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return RecommendationService(db).recommend(user_id, category_id=category_id, exclude=exclude, limit=limit)


@router.get("/recent", response_model=List[ProductOut])
def recently_viewed(user_id: int = Query(...), limit: int = Query(6, ge=1, le=20), db: Session = Depends(get_db)):
    return RecommendationService(db).recently_viewed(user_id, limit)
