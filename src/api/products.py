# src/api/products.py
from __future__ import annotations

from typing import List

from api import models
from api.client import ApiClient


def _products(data) -> List[models.Product]:
    return [models.Product.from_json(p) for p in data or []]


# ---------------------------
# Public catalogue
# ---------------------------


async def list_products(client: ApiClient) -> List[models.Product]:
    return _products(await client.get("/products/public"))


async def get_product(client: ApiClient, product_id: str) -> models.Product:
    """Raises NotFoundError when the product does not exist."""
    return models.Product.from_json(await client.get(f"/products/public/{product_id}"))


async def list_products_by_category(
    client: ApiClient, category: str
) -> List[models.Product]:
    return _products(await client.get(f"/products/public/category/{category}"))


async def search_products(client: ApiClient, query: str) -> List[models.Product]:
    """Server-side search; the products screen filters locally instead."""
    return _products(await client.get("/products/public/search", params={"q": query}))


async def list_organic_products(client: ApiClient) -> List[models.Product]:
    return _products(await client.get("/products/public/organic"))


# ---------------------------
# Farmer management
# ---------------------------


async def list_farmer_products(
    client: ApiClient, farmer_id: str
) -> List[models.Product]:
    return _products(await client.get(f"/products/farmer/{farmer_id}"))


async def create_product(client: ApiClient, product: models.Product) -> models.Product:
    data = await client.post("/products", json=product.to_json())
    return models.Product.from_json(data)


async def update_product(
    client: ApiClient, product_id: str, product: models.Product
) -> models.Product:
    data = await client.put(f"/products/{product_id}", json=product.to_json())
    return models.Product.from_json(data)


async def delete_product(client: ApiClient, product_id: str) -> None:
    await client.delete(f"/products/{product_id}")
