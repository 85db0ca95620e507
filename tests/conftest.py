import os

# must be set before storefront.data.database creates the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from decimal import Decimal

import pytest

import storefront.data.models  # noqa: F401
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import AddressModel, CartItemModel, CategoryModel, ProductModel, UserModel
from storefront.services.lock_service import CheckoutLockService
from storefront.services.notification_service import NotificationService


class FakeRedis:
    """Just enough of redis.Redis for CheckoutLockService."""

    def __init__(self):
        self.store = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def get(self, name):
        return self.store.get(name)

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


class FakeMailer:
    def __init__(self, fail_with=None):
        self.sent = []
        self.fail_with = fail_with

    def send(self, to, subject, body):
        if self.fail_with:
            raise self.fail_with
        self.sent.append({"to": to, "subject": subject, "body": body})
        return {"id": len(self.sent)}


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_db):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def dispatch_calls(monkeypatch):
    """Keeps tests away from the Celery broker; records dispatch kicks."""
    calls = []
    monkeypatch.setattr(NotificationService, "schedule_dispatch", staticmethod(lambda: calls.append(True)))
    return calls


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def lock_service(fake_redis):
    return CheckoutLockService(client=fake_redis)


@pytest.fixture
def mailer():
    return FakeMailer()


# ---------------------------------------------------------------------------
# data helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db):
    def _make(user_id=1, name="Hanako", email=None):
        user = UserModel(id=user_id, name=name, email=email or f"user{user_id}@example.com")
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(price, stock=100, name=None, status="ACTIVE", category=None, description=None):
        counter["n"] += 1
        n = counter["n"]
        product = ProductModel(
            name=name or f"Product {n}",
            sku=f"SKU-{n:03d}",
            description=description,
            category_id=category.id if category else None,
            price=Decimal(str(price)),
            stock=stock,
            status=status,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_category(db):
    def _make(slug, name=None):
        category = CategoryModel(name=name or slug.title(), slug=slug)
        db.add(category)
        db.commit()
        return category

    return _make


@pytest.fixture
def make_address(db):
    def _make(user_id=1, **overrides):
        fields = dict(
            user_id=user_id,
            name="Hanako Yamada",
            address1="1-2-3 Shibuya",
            city="Shibuya-ku",
            state="Tokyo",
            zip_code="150-0002",
        )
        fields.update(overrides)
        address = AddressModel(**fields)
        db.add(address)
        db.commit()
        return address

    return _make


@pytest.fixture
def fill_cart(db):
    def _fill(user_id, *lines):
        for product, quantity in lines:
            db.add(CartItemModel(user_id=user_id, product_id=product.id, quantity=quantity))
        db.commit()

    return _fill


@pytest.fixture
def failing_mailer():
    def _make(exc):
        return FakeMailer(fail_with=exc)

    return _make
