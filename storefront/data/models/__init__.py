# import every model so SQLAlchemy registers it in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.address import AddressModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.wishlist_item import WishlistItemModel
from storefront.data.models.review import ReviewModel
from storefront.data.models.product_view import ProductViewModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.outbox import OutboxMessageModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "AddressModel",
    "CartItemModel",
    "WishlistItemModel",
    "ReviewModel",
    "ProductViewModel",
    "OrderModel",
    "OrderItemModel",
    "OutboxMessageModel",
]
