# storefront/services/address_service.py
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.schemas import AddressCreate
from storefront.repos.address_repo import AddressRepo


class AddressService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_for_user(user_id)

    def create_address(self, user_id: int, payload: AddressCreate) -> AddressModel:
        # a new default address takes the flag from the others
        if payload.is_default:
            self.repo.clear_default(user_id)

        address = self.repo.create_address(AddressModel(user_id=user_id, **payload.model_dump()))
        self.db.commit()
        self.db.refresh(address)
        return address
