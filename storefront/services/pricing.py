# storefront/services/pricing.py
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, Tuple

from storefront.domain.schemas import OrderSummary
from storefront.utils.settings import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE, TAX_RATE


def shipping_cost_for(subtotal: Decimal) -> Decimal:
    return Decimal("0") if subtotal >= FREE_SHIPPING_THRESHOLD else SHIPPING_FEE


def tax_for(subtotal: Decimal) -> Decimal:
    # rounded down to a whole currency unit
    return (subtotal * TAX_RATE).to_integral_value(rounding=ROUND_FLOOR)


def summarize(lines: Iterable[Tuple[Decimal, int]]) -> OrderSummary:
    """
    Totals for (unit_price, quantity) lines:
    total = subtotal + shipping + floor(subtotal * tax rate).
    """
    subtotal = sum((Decimal(price) * qty for price, qty in lines), Decimal("0"))
    shipping = shipping_cost_for(subtotal)
    tax = tax_for(subtotal)
    return OrderSummary(
        subtotal=subtotal,
        shipping_cost=shipping,
        tax_amount=tax,
        total_amount=subtotal + shipping + tax,
    )
