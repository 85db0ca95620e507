# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.status import OrderStatus


class UserCreate(BaseModel):
    """Schema for creating a user."""

    id: int = Field(..., gt=0, description="User ID (must be > 0)")
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)


class UserRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    product_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    description: Optional[str] = None
    category_id: Optional[int] = Field(None, gt=0)


class ProductOut(BaseModel):
    id: int
    name: str
    sku: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    price: Decimal
    stock: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ProductPage(BaseModel):
    products: List[ProductOut]
    pagination: Pagination


class StockAdjustment(BaseModel):
    """Positive delta restocks, negative delta removes stock."""

    delta: int
    reason: str = Field(..., min_length=1, max_length=200)


class InventoryAlertOut(BaseModel):
    product_id: int
    name: str
    sku: str
    alert_type: str  # LOW_STOCK, OUT_OF_STOCK
    current_stock: int
    threshold: int


class AddressCreate(BaseModel):
    name: str = Field(..., min_length=1)
    company: Optional[str] = None
    address1: str = Field(..., min_length=1)
    address2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "JP"
    phone: Optional[str] = None
    is_default: bool = False


class AddressOut(AddressCreate):
    id: int
    user_id: int

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class QuantityIn(BaseModel):
    # 0 or less removes the line
    quantity: int


class CartItemOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal


class CartOut(BaseModel):
    user_id: int
    items: List[CartItemOut]
    subtotal: Decimal
    item_count: int


class OrderSummary(BaseModel):
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    total_amount: Decimal


class OrderCreate(BaseModel):
    address_id: int = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=1000)


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: str
    status: OrderStatus
    user_id: int
    address_id: int
    total_amount: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    notes: Optional[str] = None
    items: List[OrderItemOut] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class WishlistAdd(BaseModel):
    product_id: int = Field(..., gt=0)


class WishlistItemOut(BaseModel):
    id: int
    product: ProductOut
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=100)
    comment: str = Field(..., min_length=10, max_length=2000)


class ReviewOut(BaseModel):
    id: int
    user_id: int
    product_id: int
    rating: int
    title: Optional[str] = None
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]


class ReviewPage(BaseModel):
    reviews: List[ReviewOut]
    pagination: Pagination
    stats: ReviewStats
