# storefront/services/product_service.py
from math import ceil

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import CategoryNotFoundError, InsufficientStockError, ProductNotFoundError
from storefront.domain.schemas import CategoryCreate, ProductCreate
from storefront.domain.status import ProductStatus
from storefront.repos.product_repo import ProductRepo
from storefront.utils.settings import LOW_STOCK_THRESHOLD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def paginate(page: int, limit: int, total: int) -> dict:
    return {"page": page, "limit": limit, "total": total, "pages": ceil(total / limit) if limit else 0}


class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        status: str = ProductStatus.ACTIVE.value,
        category: str | None = None,
        search: str | None = None,
        min_price=None,
        max_price=None,
        in_stock: bool = False,
        sort: str = "created_at",
        direction: str = "desc",
    ) -> dict:
        """
        Catalogue browsing: filter by status (ACTIVE unless asked otherwise),
        category slug, price range, availability and a free-text search over
        name, description and SKU. Returns one page plus pagination info.
        """
        products, total = self.repo.list_products(
            status=status,
            category=category,
            search=search.strip() if search else None,
            min_price=min_price,
            max_price=max_price,
            in_stock=in_stock,
            sort=sort,
            direction=direction,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {"products": products, "pagination": paginate(page, limit, total)}

    def related_products(self, product_id: int, limit: int = 4) -> list[ProductModel]:
        """Other active products from the same category."""
        return self.repo.list_related(self.get_product(product_id), limit)

    def list_categories(self) -> list[dict]:
        return [
            {
                "id": c.id,
                "name": c.name,
                "slug": c.slug,
                "description": c.description,
                "product_count": count,
            }
            for c, count in self.repo.list_categories()
        ]

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        category = self.repo.create_category(
            CategoryModel(name=payload.name, slug=payload.slug, description=payload.description)
        )
        self.db.commit()
        self.db.refresh(category)
        return category

    def create_product(self, payload: ProductCreate) -> ProductModel:
        if payload.category_id is not None and not self.repo.get_category(payload.category_id):
            raise CategoryNotFoundError(payload.category_id)

        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                sku=payload.sku,
                description=payload.description,
                category_id=payload.category_id,
                price=payload.price,
                stock=payload.stock,
                status=ProductStatus.ACTIVE.value,
            )
        )
        self.db.commit()
        self.db.refresh(product)
        return product

    def adjust_stock(self, product_id: int, delta: int, reason: str) -> ProductModel:
        """
        Use Case: manual stock correction (admin).
        Negative deltas use the same conditional decrement as checkout.
        """
        product = self.get_product(product_id)

        if delta < 0:
            if not self.repo.decrement_stock(product_id, -delta):
                self.db.rollback()
                raise InsufficientStockError(product_id, -delta)
        elif delta > 0:
            self.repo.increment_stock(product_id, delta)

        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Stock of product {product_id} adjusted by {delta} ({reason}), now {product.stock}")
        return product

    def low_stock_alerts(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[dict]:
        return [
            {
                "product_id": p.id,
                "name": p.name,
                "sku": p.sku,
                "alert_type": "OUT_OF_STOCK" if p.stock <= 0 else "LOW_STOCK",
                "current_stock": p.stock,
                "threshold": threshold,
            }
            for p in self.repo.list_low_stock(threshold)
        ]
