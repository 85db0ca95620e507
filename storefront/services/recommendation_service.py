# storefront/services/recommendation_service.py
from collections import Counter
from datetime import datetime, timedelta, timezone
from math import ceil

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.product_view import ProductViewModel
from storefront.domain.errors import ProductNotFoundError
from storefront.repos.product_repo import ProductRepo
from storefront.repos.product_view_repo import ProductViewRepo
from storefront.utils.settings import PRODUCT_VIEW_WINDOW_MINUTES
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# how much of the view history feeds each strategy
COLLABORATIVE_HISTORY = 20
CATEGORY_HISTORY = 10
TOP_CATEGORIES = 3


class RecommendationService:
    """
    View tracking and "you may also like" lists.

    Two strategies are merged, co-viewing first:
    - co-viewing: what other users who viewed the same products also viewed
    - category popularity: best scoring products of the categories the
      user looks at most
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductViewRepo(db)
        self.product_repo = ProductRepo(db)

    def track_view(self, user_id: int, product_id: int, now: datetime | None = None) -> ProductViewModel:
        now = now or datetime.now(timezone.utc)
        if not self.product_repo.get_product(product_id):
            raise ProductNotFoundError(product_id)

        since = now - timedelta(minutes=PRODUCT_VIEW_WINDOW_MINUTES)
        view = self.repo.find_since(user_id, product_id, since)
        if view:
            view.viewed_at = now
        else:
            view = self.repo.add(ProductViewModel(user_id=user_id, product_id=product_id, viewed_at=now))
        self.db.commit()
        return view

    def recently_viewed(self, user_id: int, limit: int = 6) -> list[ProductModel]:
        ids = list(dict.fromkeys(self.repo.recent_product_ids(user_id, limit)))
        return self._active_in_order(ids)

    def recommend(self, user_id: int, category_id: int | None = None, exclude=(), limit: int = 10) -> list[ProductModel]:
        viewed = list(dict.fromkeys(self.repo.recent_product_ids(user_id, COLLABORATIVE_HISTORY)))
        skip = set(viewed) | set(exclude)

        picks = []
        if viewed:
            co_viewed = self.repo.co_viewed_counts(user_id, viewed, skip)
            picks = [pid for pid, _ in co_viewed[: ceil(limit * 0.6)]]

        for pid in self._by_category(user_id, category_id, skip, ceil(limit * 0.8)):
            if len(picks) >= limit:
                break
            if pid not in picks:
                picks.append(pid)

        return self._active_in_order(picks[:limit])

    def _by_category(self, user_id: int, category_id: int | None, skip, limit: int) -> list[int]:
        if category_id is not None:
            categories = [category_id]
        else:
            recent = self.repo.recent_product_ids(user_id, CATEGORY_HISTORY)
            products = {p.id: p for p in self.product_repo.list_active_by_ids(set(recent))}
            counts = Counter(
                products[pid].category_id
                for pid in recent
                if pid in products and products[pid].category_id is not None
            )
            categories = [c for c, _ in counts.most_common(TOP_CATEGORIES)]
        if not categories:
            return []
        return self.repo.popular_in_categories(categories, skip, limit)

    def _active_in_order(self, product_ids: list[int]) -> list[ProductModel]:
        found = {p.id: p for p in self.product_repo.list_active_by_ids(product_ids)}
        return [found[pid] for pid in product_ids if pid in found]
