# storefront/api/__init__.py
from storefront.api.routers import (
    health,
    users,
    categories,
    products,
    addresses,
    carts,
    wishlist,
    orders,
    admin,
    recommendations,
)

ROUTERS = [
    health.router,
    users.router,
    categories.router,
    products.router,
    addresses.router,
    carts.router,
    wishlist.router,
    orders.router,
    admin.router,
    recommendations.router,
]
