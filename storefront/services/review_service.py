# storefront/services/review_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel
from storefront.domain.errors import DuplicateReviewError, ProductNotFoundError, UserNotFoundError
from storefront.domain.schemas import ReviewCreate
from storefront.repos.product_repo import ProductRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.product_service import paginate
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepo(db)
        self.product_repo = ProductRepo(db)
        self.user_repo = UserRepo(db)

    def list_reviews(
        self,
        product_id: int,
        page: int = 1,
        limit: int = 10,
        rating: int | None = None,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> dict:
        """
        One page of a product's reviews plus stats over all of them:
        average rating, review count and the count per star (1-5).
        """
        if not self.product_repo.get_product(product_id):
            raise ProductNotFoundError(product_id)

        reviews, total = self.repo.list_for_product(
            product_id, rating=rating, sort=sort, direction=direction, offset=(page - 1) * limit, limit=limit
        )
        return {
            "reviews": reviews,
            "pagination": paginate(page, limit, total),
            "stats": self.stats(product_id),
        }

    def stats(self, product_id: int) -> dict:
        counts = self.repo.rating_distribution(product_id)
        total = sum(counts.values())
        average = sum(r * n for r, n in counts.items()) / total if total else 0.0
        return {
            "average_rating": round(average, 2),
            "total_reviews": total,
            "rating_distribution": {star: counts.get(star, 0) for star in range(1, 6)},
        }

    def create_review(self, user_id: int, product_id: int, payload: ReviewCreate) -> ReviewModel:
        """Use Case: a user reviews a product once."""
        if not self.product_repo.get_product(product_id):
            raise ProductNotFoundError(product_id)
        if not self.user_repo.get_user(user_id):
            raise UserNotFoundError(user_id)
        if self.repo.find_by_author(user_id, product_id):
            raise DuplicateReviewError(product_id)

        try:
            review = self.repo.add(
                ReviewModel(
                    user_id=user_id,
                    product_id=product_id,
                    rating=payload.rating,
                    title=payload.title,
                    comment=payload.comment,
                )
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateReviewError(product_id) from e

        self.db.refresh(review)
        logger.info(f"User {user_id} reviewed product {product_id} ({payload.rating}/5)")
        return review
