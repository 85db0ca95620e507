# storefront/services/wishlist_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.wishlist_item import WishlistItemModel
from storefront.domain.errors import AlreadyInWishlistError, ProductNotFoundError, WishlistItemNotFoundError
from storefront.repos.product_repo import ProductRepo
from storefront.repos.wishlist_repo import WishlistRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService:
    """Saved-for-later products, newest first. Products are not reserved."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WishlistRepo(db)
        self.product_repo = ProductRepo(db)

    def list_items(self, user_id: int) -> list[WishlistItemModel]:
        return self.repo.list_items(user_id)

    def add_product(self, user_id: int, product_id: int) -> WishlistItemModel:
        if not self.product_repo.get_product(product_id):
            raise ProductNotFoundError(product_id)
        if self.repo.get_item(user_id, product_id):
            raise AlreadyInWishlistError(product_id)

        try:
            item = self.repo.add_item(WishlistItemModel(user_id=user_id, product_id=product_id))
            self.db.commit()
        except IntegrityError as e:
            # same product added from another request in between
            self.db.rollback()
            raise AlreadyInWishlistError(product_id) from e

        self.db.refresh(item)
        logger.info(f"User {user_id} added product {product_id} to the wishlist")
        return item

    def remove_product(self, user_id: int, product_id: int) -> None:
        if not self.repo.delete_item(user_id, product_id):
            self.db.rollback()
            raise WishlistItemNotFoundError(product_id)
        self.db.commit()
