"""Tests for the per-user wishlist."""

import pytest

from storefront.domain.errors import AlreadyInWishlistError, ProductNotFoundError, WishlistItemNotFoundError
from storefront.services.wishlist_service import WishlistService


@pytest.fixture
def service(db):
    return WishlistService(db)


class TestWishlist:
    def test_add_and_list_newest_first(self, service, make_user, make_product):
        make_user(user_id=1)
        a = make_product(price=1000, name="Lamp")
        b = make_product(price=2000, name="Desk")

        service.add_product(1, a.id)
        service.add_product(1, b.id)

        items = service.list_items(1)
        assert [i.product.name for i in items] == ["Desk", "Lamp"]

    def test_duplicate_is_rejected(self, service, make_user, make_product):
        make_user(user_id=1)
        a = make_product(price=1000)
        service.add_product(1, a.id)

        with pytest.raises(AlreadyInWishlistError):
            service.add_product(1, a.id)

        assert len(service.list_items(1)) == 1

    def test_unknown_product(self, service, make_user):
        make_user(user_id=1)
        with pytest.raises(ProductNotFoundError):
            service.add_product(1, 42)

    def test_remove(self, service, make_user, make_product):
        make_user(user_id=1)
        a = make_product(price=1000)
        service.add_product(1, a.id)

        service.remove_product(1, a.id)

        assert service.list_items(1) == []

    def test_remove_missing(self, service, make_user, make_product):
        make_user(user_id=1)
        a = make_product(price=1000)
        with pytest.raises(WishlistItemNotFoundError):
            service.remove_product(1, a.id)

    def test_lists_are_per_user(self, service, make_user, make_product):
        make_user(user_id=1)
        make_user(user_id=2)
        a = make_product(price=1000)
        service.add_product(1, a.id)

        assert service.list_items(2) == []

    def test_does_not_touch_stock_or_cart(self, db, service, make_user, make_product):
        from storefront.services.cart_service import CartService

        make_user(user_id=1)
        a = make_product(price=1000, stock=3)
        service.add_product(1, a.id)

        db.refresh(a)
        assert a.stock == 3
        assert CartService(db).item_count(1) == 0
