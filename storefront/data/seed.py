# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import AddressModel, CategoryModel, ProductModel, UserModel

CATEGORIES = [
    ("Peripherals", "peripherals", "Keyboards, mice and other input devices"),
    ("Displays", "displays", "Monitors"),
]

PRODUCTS = [
    ("Keyboard", "KB-001", "peripherals", Decimal("3000"), 50),
    ("Mouse", "MS-001", "peripherals", Decimal("1000"), 120),
    ("Monitor", "MN-001", "displays", Decimal("25000"), 8),
]


def seed():
    db = SessionLocal()
    try:
        # only seed an empty database
        if db.query(ProductModel).first():
            return
        db.add(UserModel(id=1, name="Demo User", email="demo@example.com"))
        db.add(
            AddressModel(
                user_id=1,
                name="Demo User",
                address1="1-1 Chiyoda",
                city="Chiyoda-ku",
                state="Tokyo",
                zip_code="100-0001",
                is_default=True,
            )
        )
        categories = {}
        for name, slug, description in CATEGORIES:
            categories[slug] = CategoryModel(name=name, slug=slug, description=description)
            db.add(categories[slug])
        for name, sku, slug, price, stock in PRODUCTS:
            db.add(
                ProductModel(
                    name=name,
                    sku=sku,
                    category=categories[slug],
                    price=price,
                    stock=stock,
                    status="ACTIVE",
                )
            )
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
