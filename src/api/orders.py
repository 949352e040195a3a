# src/api/orders.py
from __future__ import annotations

from typing import Any, Dict, List

from api import models
from api.client import ApiClient


def _orders(data) -> List[models.Order]:
    return [models.Order.from_json(o) for o in data or []]


async def create_order(client: ApiClient, payload: Dict[str, Any]) -> models.Order:
    """Submit an order payload built from the cart, see store.checkout."""
    return models.Order.from_json(await client.post("/orders", json=payload))


async def list_orders(client: ApiClient) -> List[models.Order]:
    """All orders, admins and farmers only."""
    return _orders(await client.get("/orders"))


async def list_customer_orders(client: ApiClient) -> List[models.Order]:
    return _orders(await client.get("/orders/customer"))


async def get_order(client: ApiClient, order_id: str) -> models.Order:
    return models.Order.from_json(await client.get(f"/orders/{order_id}"))


async def update_order_status(
    client: ApiClient, order_id: str, status: models.OrderStatus
) -> models.Order:
    data = await client.put(
        f"/orders/{order_id}/status", json={"status": models.OrderStatus(status).value}
    )
    return models.Order.from_json(data)


async def delete_order(client: ApiClient, order_id: str) -> None:
    await client.delete(f"/orders/{order_id}")
