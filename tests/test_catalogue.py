"""Tests for addresses, the product catalogue and stock administration."""

from decimal import Decimal

import pytest

from storefront.domain.errors import CategoryNotFoundError, InsufficientStockError, ProductNotFoundError
from storefront.domain.schemas import AddressCreate, CategoryCreate, ProductCreate
from storefront.services.address_service import AddressService
from storefront.services.product_service import ProductService


def _address(**overrides):
    fields = dict(name="Taro", address1="4-5-6 Umeda", city="Kita-ku", state="Osaka", zip_code="530-0001")
    fields.update(overrides)
    return AddressCreate(**fields)


class TestAddresses:
    def test_new_default_takes_the_flag(self, db, make_user):
        make_user(user_id=1)
        svc = AddressService(db)
        first = svc.create_address(1, _address(is_default=True))
        second = svc.create_address(1, _address(name="Office", is_default=True))

        db.refresh(first)
        assert first.is_default is False
        assert second.is_default is True

    def test_default_listed_first(self, db, make_user):
        make_user(user_id=1)
        svc = AddressService(db)
        home = svc.create_address(1, _address(is_default=True))
        svc.create_address(1, _address(name="Office"))

        assert svc.list_addresses(1)[0].id == home.id

    def test_country_defaults_to_jp(self, db, make_user):
        make_user(user_id=1)
        address = AddressService(db).create_address(1, _address())
        assert address.country == "JP"


class TestProducts:
    def test_create_and_get(self, db):
        svc = ProductService(db)
        created = svc.create_product(ProductCreate(name="Kettle", sku="KT-1", price=Decimal("4500"), stock=3))

        fetched = svc.get_product(created.id)
        assert (fetched.name, fetched.stock, fetched.status) == ("Kettle", 3, "ACTIVE")

    def test_missing(self, db):
        with pytest.raises(ProductNotFoundError):
            ProductService(db).get_product(1)


class TestAdjustStock:
    def test_restock(self, db, make_product):
        p = make_product(price=1000, stock=2)
        assert ProductService(db).adjust_stock(p.id, 5, "delivery").stock == 7

    def test_remove(self, db, make_product):
        p = make_product(price=1000, stock=5)
        assert ProductService(db).adjust_stock(p.id, -5, "damaged").stock == 0

    def test_cannot_go_negative(self, db, make_product):
        p = make_product(price=1000, stock=2)
        with pytest.raises(InsufficientStockError):
            ProductService(db).adjust_stock(p.id, -3, "shrinkage")
        db.refresh(p)
        assert p.stock == 2


def test_low_stock_alerts(db, make_product):
    empty = make_product(price=1000, stock=0)
    low = make_product(price=1000, stock=4)
    make_product(price=1000, stock=50)
    make_product(price=1000, stock=1, status="INACTIVE")

    alerts = ProductService(db).low_stock_alerts(threshold=10)

    assert [(a["product_id"], a["alert_type"]) for a in alerts] == [
        (empty.id, "OUT_OF_STOCK"),
        (low.id, "LOW_STOCK"),
    ]


def test_seed_runs_once(db):
    from storefront.data.models import ProductModel
    from storefront.data.seed import seed

    seed()
    seed()

    assert db.query(ProductModel).count() == 3


class TestCatalogue:
    @pytest.fixture
    def catalogue(self, make_category, make_product):
        kitchen = make_category("kitchen")
        garden = make_category("garden")
        return {
            "kettle": make_product(price=4500, stock=3, name="Kettle", category=kitchen, description="Electric, 1.2L"),
            "mug": make_product(price=800, stock=0, name="Mug", category=kitchen),
            "pot": make_product(price=12000, stock=7, name="Stock Pot", category=kitchen),
            "hose": make_product(price=2500, stock=20, name="Garden Hose", category=garden),
            "old": make_product(price=100, stock=5, name="Old Kettle", category=kitchen, status="INACTIVE"),
        }

    def _names(self, result):
        return [p.name for p in result["products"]]

    def test_active_only_newest_first(self, db, catalogue):
        result = ProductService(db).list_products()
        assert self._names(result) == ["Garden Hose", "Stock Pot", "Mug", "Kettle"]
        assert result["pagination"] == {"page": 1, "limit": 20, "total": 4, "pages": 1}

    def test_inactive_on_request(self, db, catalogue):
        assert self._names(ProductService(db).list_products(status="INACTIVE")) == ["Old Kettle"]

    def test_category_slug(self, db, catalogue):
        assert self._names(ProductService(db).list_products(category="garden")) == ["Garden Hose"]

    def test_unknown_category_is_empty(self, db, catalogue):
        result = ProductService(db).list_products(category="toys")
        assert result["products"] == []
        assert result["pagination"]["total"] == 0

    def test_search_matches_name_description_and_sku(self, db, catalogue):
        svc = ProductService(db)
        assert self._names(svc.list_products(search="kettle")) == ["Kettle"]
        assert self._names(svc.list_products(search="ELECTRIC")) == ["Kettle"]
        assert self._names(svc.list_products(search=catalogue["hose"].sku)) == ["Garden Hose"]

    def test_price_range_and_stock(self, db, catalogue):
        svc = ProductService(db)
        result = svc.list_products(min_price=Decimal("800"), max_price=Decimal("4500"), sort="price", direction="asc")
        assert self._names(result) == ["Mug", "Garden Hose", "Kettle"]
        assert "Mug" not in self._names(svc.list_products(in_stock=True))

    def test_sort_by_name(self, db, catalogue):
        result = ProductService(db).list_products(sort="name", direction="asc")
        assert self._names(result) == ["Garden Hose", "Kettle", "Mug", "Stock Pot"]

    def test_sort_by_popularity(self, db, catalogue, make_user, make_address, fill_cart):
        from storefront.services.order_service import OrderService

        make_user(user_id=1)
        address = make_address(user_id=1)
        fill_cart(1, (catalogue["pot"], 1))
        OrderService(db).create_order(1, address.id)

        result = ProductService(db).list_products(sort="popularity")
        assert self._names(result)[0] == "Stock Pot"

    def test_paging(self, db, catalogue):
        svc = ProductService(db)
        first = svc.list_products(page=1, limit=3)
        second = svc.list_products(page=2, limit=3)

        assert len(first["products"]) == 3
        assert self._names(second) == ["Kettle"]
        assert second["pagination"] == {"page": 2, "limit": 3, "total": 4, "pages": 2}

    def test_related_products(self, db, catalogue):
        related = ProductService(db).related_products(catalogue["kettle"].id)
        assert [p.name for p in related] == ["Mug", "Stock Pot"]

    def test_related_without_category(self, db, make_product):
        loose = make_product(price=100)
        assert ProductService(db).related_products(loose.id) == []

    def test_categories_count_active_products(self, db, catalogue):
        categories = ProductService(db).list_categories()
        assert [(c["slug"], c["product_count"]) for c in categories] == [("garden", 1), ("kitchen", 3)]


class TestCategories:
    def test_create_product_in_category(self, db):
        svc = ProductService(db)
        category = svc.create_category(CategoryCreate(name="Kitchen", slug="kitchen"))

        product = svc.create_product(
            ProductCreate(name="Kettle", sku="KT-1", price=Decimal("4500"), category_id=category.id)
        )

        assert product.category.slug == "kitchen"

    def test_unknown_category(self, db):
        with pytest.raises(CategoryNotFoundError):
            ProductService(db).create_product(ProductCreate(name="Kettle", sku="KT-1", price=Decimal("1"), category_id=99))
