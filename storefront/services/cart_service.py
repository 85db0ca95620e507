# storefront/services/cart_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import ProductNotFoundError
from storefront.domain.status import ProductStatus
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Per-user cart: one line per (user, product) with a positive quantity.
    Prices are not stored on the line, the current product price is used.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.product_repo = ProductRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_cart(self, user_id: int):
        items = self.repo.list_items(user_id)
        subtotal = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        return {
            "user_id": user_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.product.name,
                    "quantity": i.quantity,
                    "price": i.product.price,
                }
                for i in items
            ],
            "subtotal": subtotal,
            "item_count": sum(i.quantity for i in items),
        }

    def item_count(self, user_id: int) -> int:
        return self.repo.count_quantity(user_id)

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_product(self, user_id: int, product_id: int, quantity: int = 1):
        """
        Use Case: add a product to the cart.
        An existing line for the same product gets its quantity increased.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.product_repo.get_product(product_id)
        if not product or product.status != ProductStatus.ACTIVE.value:
            raise ProductNotFoundError(product_id)

        existing = self.repo.get_item(user_id, product_id)
        if existing:
            existing.quantity += quantity
        else:
            self.repo.add_item(
                CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
            )
        self.repo.commit()

        logger.info(f"User {user_id} added {quantity} x product {product_id} to cart")
        return self.get_cart(user_id)

    def update_quantity(self, user_id: int, product_id: int, quantity: int):
        """
        Use Case: set the quantity of a line; 0 or less removes it.
        """
        if quantity <= 0:
            return self.remove_product(user_id, product_id)

        item = self.repo.get_item(user_id, product_id)
        if not item:
            raise ProductNotFoundError(product_id)

        item.quantity = quantity
        self.repo.commit()
        return self.get_cart(user_id)

    def remove_product(self, user_id: int, product_id: int):
        removed = self.repo.delete_item(user_id, product_id)
        if not removed:
            self.repo.rollback()
            raise ProductNotFoundError(product_id)
        self.repo.commit()
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int):
        self.repo.clear(user_id)
        self.repo.commit()
        logger.info(f"Cart of user {user_id} cleared")
        return self.get_cart(user_id)
