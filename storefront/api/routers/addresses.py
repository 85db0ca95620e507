# storefront/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import AddressCreate, AddressOut
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.get("/", response_model=List[AddressOut])
def list_addresses(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = AddressService(db)
    return [AddressOut.model_validate(a) for a in svc.list_addresses(user_id)]


@router.post("/", response_model=AddressOut, status_code=201)
def create_address(payload: AddressCreate, user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = AddressService(db)
    return AddressOut.model_validate(svc.create_address(user_id, payload))
