# storefront/repos/cart_repo.py
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_items(self, user_id: int) -> list[CartItemModel]:
        # product is joined-loaded, price is the current catalogue price
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
                .execution_options(populate_existing=True)
            ).scalars().unique().all()
        )

    def get_item(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalars().unique().one_or_none()

    def add_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, user_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def count_quantity(self, user_id: int) -> int:
        total = self.db.execute(
            select(func.sum(CartItemModel.quantity)).where(CartItemModel.user_id == user_id)
        ).scalar()
        return int(total or 0)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
