# storefront/services/mail_templates.py
from typing import NamedTuple

ORDER_CONFIRMATION = "order.confirmation"
LOW_STOCK = "inventory.low_stock"


class Mail(NamedTuple):
    to: list
    subject: str
    body: str


def _order_confirmation(payload: dict) -> Mail:
    lines = [
        f"Hello {payload['customer_name']},",
        "",
        f"Thank you for your order {payload['order_number']}.",
        "",
    ]
    for item in payload["items"]:
        lines.append(f"  {item['name']} x {item['quantity']} @ {item['price']}")
    address = payload["shipping_address"]
    lines += [
        "",
        f"Subtotal: {payload['subtotal']}",
        f"Shipping: {payload['shipping_cost']}",
        f"Tax: {payload['tax_amount']}",
        f"Total: {payload['total_amount']}",
        "",
        "Ship to:",
        f"  {address['name']}",
        f"  {address['address1']}",
    ]
    if address.get("address2"):
        lines.append(f"  {address['address2']}")
    lines.append(f"  {address['city']}, {address['state']} {address['zip_code']}")
    return Mail(
        to=[payload["customer_email"]],
        subject=f"Order confirmation {payload['order_number']}",
        body="\n".join(lines),
    )


def _low_stock(payload: dict) -> Mail:
    if payload["current_stock"] == 0:
        subject = f"Out of stock: {payload['name']} ({payload['sku']})"
    else:
        subject = f"Low stock: {payload['name']} ({payload['sku']})"
    body = (
        f"Product {payload['name']} (SKU {payload['sku']}) has "
        f"{payload['current_stock']} units left; threshold is {payload['threshold']}."
    )
    return Mail(to=list(payload["recipients"]), subject=subject, body=body)


_RENDERERS = {
    ORDER_CONFIRMATION: _order_confirmation,
    LOW_STOCK: _low_stock,
}


def render(topic: str, payload: dict) -> Mail:
    try:
        renderer = _RENDERERS[topic]
    except KeyError:
        raise ValueError(f"No template for topic {topic!r}") from None
    return renderer(payload)
