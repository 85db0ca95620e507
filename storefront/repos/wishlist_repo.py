# storefront/repos/wishlist_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.wishlist_item import WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_items(self, user_id: int) -> list[WishlistItemModel]:
        return list(
            self.db.execute(
                select(WishlistItemModel)
                .where(WishlistItemModel.user_id == user_id)
                .order_by(WishlistItemModel.created_at.desc(), WishlistItemModel.id.desc())
            ).scalars().unique().all()
        )

    def get_item(self, user_id: int, product_id: int) -> WishlistItemModel | None:
        return self.db.execute(
            select(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.product_id == product_id,
            )
        ).scalars().unique().one_or_none()

    def add_item(self, item: WishlistItemModel) -> WishlistItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, user_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.product_id == product_id,
            )
        )
        return result.rowcount
