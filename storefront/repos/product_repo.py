# storefront/repos/product_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.order import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.data.models.review import ReviewModel
from storefront.domain.status import ProductStatus


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    # =====================================================
    # CATALOGUE
    # =====================================================
    def list_products(
        self,
        status: str = ProductStatus.ACTIVE.value,
        category: str | None = None,
        search: str | None = None,
        min_price=None,
        max_price=None,
        in_stock: bool = False,
        sort: str = "created_at",
        direction: str = "desc",
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[ProductModel], int]:
        """Filtered, sorted page of products plus the total count of the filter."""
        conditions = [ProductModel.status == status]
        if category:
            conditions.append(
                ProductModel.category_id.in_(select(CategoryModel.id).where(CategoryModel.slug == category))
            )
        if min_price is not None:
            conditions.append(ProductModel.price >= min_price)
        if max_price is not None:
            conditions.append(ProductModel.price <= max_price)
        if in_stock:
            conditions.append(ProductModel.stock > 0)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    ProductModel.name.ilike(pattern),
                    ProductModel.description.ilike(pattern),
                    ProductModel.sku.ilike(pattern),
                )
            )

        total = self.db.execute(
            select(func.count()).select_from(ProductModel).where(*conditions)
        ).scalar_one()

        stmt = select(ProductModel).where(*conditions)
        stmt = stmt.order_by(*self._ordering(sort, direction), ProductModel.id.desc())
        items = self.db.execute(stmt.offset(offset).limit(limit)).scalars().all()
        return list(items), total

    @staticmethod
    def _ordering(sort: str, direction: str):
        def by(column):
            return column.asc() if direction == "asc" else column.desc()

        if sort == "popularity":
            sold = (
                select(func.count(OrderItemModel.id))
                .where(OrderItemModel.product_id == ProductModel.id)
                .scalar_subquery()
            )
            return [by(sold)]
        if sort == "rating":
            reviewed = (
                select(func.count(ReviewModel.id))
                .where(ReviewModel.product_id == ProductModel.id)
                .scalar_subquery()
            )
            return [by(reviewed), ProductModel.created_at.desc()]
        column = {
            "name": ProductModel.name,
            "price": ProductModel.price,
            "created_at": ProductModel.created_at,
        }[sort]
        return [by(column)]

    def list_related(self, product: ProductModel, limit: int) -> list[ProductModel]:
        if product.category_id is None:
            return []
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.category_id == product.category_id,
                    ProductModel.id != product.id,
                    ProductModel.status == ProductStatus.ACTIVE.value,
                )
                .order_by(ProductModel.id.asc())
                .limit(limit)
            ).scalars().all()
        )

    def list_active_by_ids(self, product_ids) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).where(
                    ProductModel.id.in_(list(product_ids)),
                    ProductModel.status == ProductStatus.ACTIVE.value,
                )
            ).scalars().all()
        )

    def list_categories(self) -> list[tuple[CategoryModel, int]]:
        """Categories by name with their number of active products."""
        active_count = (
            select(func.count(ProductModel.id))
            .where(
                ProductModel.category_id == CategoryModel.id,
                ProductModel.status == ProductStatus.ACTIVE.value,
            )
            .scalar_subquery()
        )
        rows = self.db.execute(
            select(CategoryModel, active_count).order_by(CategoryModel.name.asc())
        ).all()
        return [(category, count) for category, count in rows]

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    # =====================================================
    # STOCK
    # =====================================================
    def decrement_stock(self, product_id: int, amount: int) -> bool:
        """
        Conditional decrement: UPDATE ... SET stock = stock - n WHERE stock >= n.
        Returns False when the row would go negative (nothing is changed).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= amount)
            .values(stock=ProductModel.stock - amount)
        )
        return result.rowcount == 1

    def increment_stock(self, product_id: int, amount: int) -> None:
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + amount)
        )

    def list_low_stock(self, threshold: int, product_ids=None) -> list[ProductModel]:
        stmt = (
            select(ProductModel)
            .where(
                ProductModel.status == ProductStatus.ACTIVE.value,
                ProductModel.stock <= threshold,
            )
            .order_by(ProductModel.stock.asc(), ProductModel.id.asc())
            .execution_options(populate_existing=True)
        )
        if product_ids is not None:
            stmt = stmt.where(ProductModel.id.in_(product_ids))
        return list(self.db.execute(stmt).scalars().all())
