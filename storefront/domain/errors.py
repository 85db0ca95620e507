# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base class for errors raised by storefront services."""


class EmptyCartError(StorefrontError, ValueError):
    def __init__(self, user_id: int):
        super().__init__(f"Cart of user {user_id} is empty")
        self.user_id = user_id


class AddressNotFoundError(StorefrontError, LookupError):
    def __init__(self, address_id: int):
        super().__init__(f"Address {address_id} not found")
        self.address_id = address_id


class OrderNotFoundError(StorefrontError, LookupError):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class ProductNotFoundError(StorefrontError, LookupError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class UserNotFoundError(StorefrontError, LookupError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class CategoryNotFoundError(StorefrontError, LookupError):
    def __init__(self, category_id: int):
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id


class WishlistItemNotFoundError(StorefrontError, LookupError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not in the wishlist")
        self.product_id = product_id


class AlreadyInWishlistError(StorefrontError, ValueError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is already in the wishlist")
        self.product_id = product_id


class DuplicateReviewError(StorefrontError, ValueError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} has already been reviewed by this user")
        self.product_id = product_id


class NotCancellableError(StorefrontError, ValueError):
    """Order is missing, not owned by the caller, or past the cancellable states."""

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} cannot be cancelled")
        self.order_id = order_id


class InsufficientStockError(StorefrontError, ValueError):
    def __init__(self, product_id: int, requested: int):
        super().__init__(f"Insufficient stock for product {product_id} (requested {requested})")
        self.product_id = product_id
        self.requested = requested


class InvalidStatusTransitionError(StorefrontError, ValueError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move order from {current} to {target}")
        self.current = current
        self.target = target


class CheckoutInProgressError(StorefrontError, RuntimeError):
    def __init__(self, user_id: int):
        super().__init__(f"Checkout already in progress for user {user_id}")
        self.user_id = user_id


class OrderNumberConflictError(StorefrontError, RuntimeError):
    """Raised when an insert hits the unique order number constraint."""


class OrderNumberExhaustedError(StorefrontError, RuntimeError):
    pass


class TransactionFailure(StorefrontError, RuntimeError):
    """A data store error inside an atomic block; nothing was persisted."""
