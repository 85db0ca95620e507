# storefront/repos/product_view_repo.py
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.data.models.product_view import ProductViewModel
from storefront.data.models.review import ReviewModel
from storefront.domain.status import ProductStatus


class ProductViewRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_since(self, user_id: int, product_id: int, since: datetime) -> ProductViewModel | None:
        return self.db.execute(
            select(ProductViewModel)
            .where(
                ProductViewModel.user_id == user_id,
                ProductViewModel.product_id == product_id,
                ProductViewModel.viewed_at >= since,
            )
            .order_by(ProductViewModel.viewed_at.desc())
        ).scalars().first()

    def add(self, view: ProductViewModel) -> ProductViewModel:
        self.db.add(view)
        self.db.flush()
        return view

    def recent_product_ids(self, user_id: int, limit: int) -> list[int]:
        """Product ids of the user's last `limit` views, newest first (may repeat)."""
        return list(
            self.db.execute(
                select(ProductViewModel.product_id)
                .where(ProductViewModel.user_id == user_id)
                .order_by(ProductViewModel.viewed_at.desc(), ProductViewModel.id.desc())
                .limit(limit)
            ).scalars().all()
        )

    def co_viewed_counts(self, user_id: int, product_ids, exclude_ids) -> list[tuple[int, int]]:
        """
        Products viewed by other users who also viewed any of product_ids,
        with the number of such views, most viewed first.
        """
        neighbours = (
            select(ProductViewModel.user_id)
            .where(
                ProductViewModel.product_id.in_(list(product_ids)),
                ProductViewModel.user_id != user_id,
            )
            .distinct()
        )
        views = func.count(ProductViewModel.id)
        rows = self.db.execute(
            select(ProductViewModel.product_id, views)
            .where(
                ProductViewModel.user_id.in_(neighbours),
                ProductViewModel.product_id.not_in(list(exclude_ids)),
            )
            .group_by(ProductViewModel.product_id)
            .order_by(views.desc(), ProductViewModel.product_id.asc())
        ).all()
        return [(product_id, count) for product_id, count in rows]

    def popular_in_categories(self, category_ids, exclude_ids, limit: int) -> list[int]:
        """
        Active products of the given categories ranked by
        views + 3 * reviews + 5 * times ordered.
        """
        views = (
            select(func.count(ProductViewModel.id))
            .where(ProductViewModel.product_id == ProductModel.id)
            .scalar_subquery()
        )
        reviews = (
            select(func.count(ReviewModel.id))
            .where(ReviewModel.product_id == ProductModel.id)
            .scalar_subquery()
        )
        ordered = (
            select(func.count(OrderItemModel.id))
            .where(OrderItemModel.product_id == ProductModel.id)
            .scalar_subquery()
        )
        score = views + reviews * 3 + ordered * 5
        return list(
            self.db.execute(
                select(ProductModel.id)
                .where(
                    ProductModel.category_id.in_(list(category_ids)),
                    ProductModel.id.not_in(list(exclude_ids)),
                    ProductModel.status == ProductStatus.ACTIVE.value,
                )
                .order_by(score.desc(), ProductModel.id.asc())
                .limit(limit)
            ).scalars().all()
        )
