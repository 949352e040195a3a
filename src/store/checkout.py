from __future__ import annotations

from typing import Any, Dict, Iterable

import api.orders as orders_api
from api.client import ApiClient
from api.errors import MarketError, ValidationError
from api.models import CartItem, Order, PaymentMethod, User
from store.cart import CartStore
from store.session import SessionStore
from utils.forms import CheckoutForm, validate_checkout_form
from utils.logger import get_logger
from utils.pure import cart_subtotal

_logger = get_logger(__name__)


def build_order_payload(
    user: User, items: Iterable[CartItem], form: CheckoutForm
) -> Dict[str, Any]:
    """Order payload with each cart line copied at its current price."""
    items = list(items)
    order_items = [
        {
            "productId": item.product_id,
            "productName": item.product_name,
            "quantity": item.quantity,
            "unitPrice": item.unit_price,
            "totalPrice": item.unit_price * item.quantity,
        }
        for item in items
    ]
    return {
        "customerId": user.id,
        "orderItems": order_items,
        "totalAmount": cart_subtotal(items),
        "shippingAddress": form.shipping_address.strip(),
        "billingAddress": form.billing_address.strip(),
        "paymentMethod": PaymentMethod(form.payment_method).value,
        "notes": form.notes.strip(),
    }


async def place_order(
    session: SessionStore,
    cart_store: CartStore,
    client: ApiClient,
    form: CheckoutForm,
) -> Order:
    """
    Turn the current cart into an order.

    Nothing is sent when the cart is empty or the form incomplete. If the order
    is rejected the cart is left as it was. The cart is cleared only after the
    order was created.
    """
    user = session.require_user()
    items = cart_store.items
    if not items:
        raise ValidationError("Your cart is empty.")
    errors = validate_checkout_form(form)
    if errors:
        raise ValidationError(" ".join(errors.values()))

    payload = build_order_payload(user, items, form)
    order = await orders_api.create_order(client, payload)
    _logger.info(f"Order {order.id} placed, total {order.total_amount:.2f}")

    try:
        await cart_store.clear_cart()
    except MarketError as e:
        # the order stands; resync with whatever the server kept
        _logger.error(f"Order {order.id} placed but clearing the cart failed: {e}")
        await cart_store.load_cart()

    return order
