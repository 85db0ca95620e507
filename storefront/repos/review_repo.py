# storefront/repos/review_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_for_product(
        self,
        product_id: int,
        rating: int | None = None,
        sort: str = "created_at",
        direction: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ReviewModel], int]:
        conditions = [ReviewModel.product_id == product_id]
        if rating is not None:
            conditions.append(ReviewModel.rating == rating)

        total = self.db.execute(
            select(func.count()).select_from(ReviewModel).where(*conditions)
        ).scalar_one()

        column = ReviewModel.rating if sort == "rating" else ReviewModel.created_at
        order = column.asc() if direction == "asc" else column.desc()
        items = self.db.execute(
            select(ReviewModel)
            .where(*conditions)
            .order_by(order, ReviewModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(items), total

    def rating_distribution(self, product_id: int) -> dict[int, int]:
        rows = self.db.execute(
            select(ReviewModel.rating, func.count(ReviewModel.id))
            .where(ReviewModel.product_id == product_id)
            .group_by(ReviewModel.rating)
        ).all()
        return {rating: count for rating, count in rows}

    def find_by_author(self, user_id: int, product_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.product_id == product_id)
        ).scalars().first()

    def add(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.flush()
        return review
