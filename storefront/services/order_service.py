# storefront/services/order_service.py
import random
from contextlib import nullcontext
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.errors import (
    AddressNotFoundError,
    EmptyCartError,
    InsufficientStockError,
    InvalidStatusTransitionError,
    NotCancellableError,
    OrderNotFoundError,
    OrderNumberConflictError,
    OrderNumberExhaustedError,
    TransactionFailure,
)
from storefront.domain.status import CANCELLABLE, OrderStatus, can_transition
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.services.pricing import summarize
from storefront.utils.retry import order_number_retry
from storefront.utils.settings import LOW_STOCK_THRESHOLD, ORDER_NUMBER_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def generate_order_number(now: datetime | None = None, rng=random) -> str:
    """EC + YYMMDD + four random digits, e.g. EC2610190042."""
    now = now or datetime.now()
    return f"EC{now:%y%m%d}{rng.randrange(10000):04d}"


class OrderService:
    """
    Order workflow: placing an order from the cart, cancelling it, and the
    admin-driven status lifecycle.
    """

    def __init__(self, db: Session, lock_service=None, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.address_repo = AddressRepo(db)
        self.product_repo = ProductRepo(db)
        self.user_repo = UserRepo(db)
        self.lock_service = lock_service
        self.notifications = notification_service or NotificationService(db)

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: int, user_id: int) -> OrderModel:
        order = self.repo.find_owned(order_id, user_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(self, user_id: int) -> list[OrderModel]:
        return self.repo.list_for_user(user_id)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_order(self, user_id: int, address_id: int, notes: str | None = None) -> OrderModel:
        """
        Use Case: place an order from the user's cart.

        1. Reads the cart (current prices) and checks the address owner
        2. Computes subtotal, shipping and tax
        3. In one transaction: order + items, stock decrement, cart clear, outbox rows
        4. Schedules notification delivery (best effort, after commit)
        """
        guard = self.lock_service.hold(user_id) if self.lock_service else nullcontext()
        with guard:
            cart_items = self.cart_repo.list_items(user_id)
            if not cart_items:
                raise EmptyCartError(user_id)

            address = self.address_repo.find_owned(address_id, user_id)
            if not address:
                raise AddressNotFoundError(address_id)

            lines = [
                (item.product_id, item.product.name, item.quantity, item.product.price)
                for item in cart_items
            ]
            summary = summarize((price, qty) for _, _, qty, price in lines)

            try:
                order = self._place_order(user_id, address, lines, summary, notes)
            except OrderNumberConflictError as e:
                raise OrderNumberExhaustedError(
                    f"No free order number after {ORDER_NUMBER_ATTEMPTS} attempts"
                ) from e

        logger.info(
            f"Order {order.order_number} (id={order.id}) created for user {user_id}, "
            f"total {summary.total_amount}"
        )
        self.notifications.schedule_dispatch()
        return order

    @order_number_retry()
    def _place_order(self, user_id, address, lines, summary, notes) -> OrderModel:
        order_number = self._allocate_order_number()
        try:
            order = self.repo.insert(
                OrderModel(
                    order_number=order_number,
                    status=OrderStatus.PENDING.value,
                    total_amount=summary.total_amount,
                    shipping_cost=summary.shipping_cost,
                    tax_amount=summary.tax_amount,
                    notes=notes,
                    user_id=user_id,
                    address_id=address.id,
                )
            )
            self.repo.insert_items(
                [
                    OrderItemModel(order_id=order.id, product_id=pid, quantity=qty, price=price)
                    for pid, _, qty, price in lines
                ]
            )

            for pid, _, qty, _ in lines:
                if not self.product_repo.decrement_stock(pid, qty):
                    raise InsufficientStockError(pid, qty)

            self.cart_repo.clear(user_id)

            self.notifications.enqueue_order_confirmation(
                order, self.user_repo.get_user(user_id), address, lines, summary
            )
            # alert once, on the order that takes a product to the threshold
            ordered = {pid: qty for pid, _, qty, _ in lines}
            for product in self.product_repo.list_low_stock(LOW_STOCK_THRESHOLD, product_ids=list(ordered)):
                if product.stock + ordered[product.id] > LOW_STOCK_THRESHOLD:
                    self.notifications.enqueue_low_stock(product)

            self.db.commit()
        except InsufficientStockError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            if "order_number" in str(e.orig):
                logger.warning(f"Order number {order_number} already taken, retrying")
                raise OrderNumberConflictError(order_number) from e
            raise TransactionFailure("Order could not be created") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise TransactionFailure("Order could not be created") from e

        return order

    def _allocate_order_number(self) -> str:
        candidate = None
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            if not self.repo.order_number_exists(candidate):
                return candidate
        raise OrderNumberConflictError(candidate)

    def cancel_order(self, order_id: int, user_id: int) -> OrderModel:
        """
        Use Case: customer cancels an order (PENDING or CONFIRMED only).
        Restores stock; monetary fields stay as they were.
        """
        order = self.repo.find_owned(order_id, user_id)
        if not order or OrderStatus(order.status) not in CANCELLABLE:
            raise NotCancellableError(order_id)

        if not self._cancel(order, [s.value for s in CANCELLABLE]):
            raise NotCancellableError(order_id)
        logger.info(f"Order {order.order_number} cancelled by user {user_id}")
        return order

    def update_status(self, order_id: int, status: OrderStatus | str) -> OrderModel:
        """
        Use Case: admin moves an order along its lifecycle.
        Cancelling through here restocks exactly like cancel_order.
        The change only applies if the order is still in the status it was read in.
        """
        target = OrderStatus(status)
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        current = order.status
        if not can_transition(current, target):
            raise InvalidStatusTransitionError(current, target.value)

        if target is OrderStatus.CANCELLED:
            moved = self._cancel(order, [current])
        else:
            try:
                moved = self.repo.transition_status(order_id, [current], target.value)
                if moved:
                    self.db.commit()
                else:
                    self.db.rollback()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise TransactionFailure(f"Status of order {order_id} could not be updated") from e

        if not moved:
            self.db.refresh(order)
            raise InvalidStatusTransitionError(order.status, target.value)

        self.db.refresh(order)
        logger.info(f"Order {order_id} moved from {current} to {target.value}")
        return order

    def _cancel(self, order: OrderModel, from_statuses: list[str]) -> bool:
        """Flip to CANCELLED and restock in one transaction; False if the status changed underneath."""
        try:
            if not self.repo.transition_status(order.id, from_statuses, OrderStatus.CANCELLED.value):
                self.db.rollback()
                logger.warning(f"Order {order.id} left {from_statuses} before it could be cancelled")
                return False
            for item in order.items:
                self.product_repo.increment_stock(item.product_id, item.quantity)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise TransactionFailure(f"Order {order.id} could not be cancelled") from e
        return True
