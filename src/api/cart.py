# src/api/cart.py
# every mutating call answers with the full cart, which replaces the local snapshot
from __future__ import annotations

from api import models
from api.client import ApiClient


async def get_cart(client: ApiClient) -> models.Cart:
    return models.Cart.from_json(await client.get("/cart"))


async def add_item(client: ApiClient, product_id: str, quantity: int) -> models.Cart:
    data = await client.post(
        "/cart/items", json={"productId": product_id, "quantity": quantity}
    )
    return models.Cart.from_json(data)


async def update_item(
    client: ApiClient, product_id: str, quantity: int
) -> models.Cart:
    data = await client.put(f"/cart/items/{product_id}", json={"quantity": quantity})
    return models.Cart.from_json(data)


async def remove_item(client: ApiClient, product_id: str) -> models.Cart:
    return models.Cart.from_json(await client.delete(f"/cart/items/{product_id}"))


async def clear_cart(client: ApiClient) -> None:
    await client.delete("/cart")
