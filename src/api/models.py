# provide dataclass models, built from the backend's camelCase json

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    FARMER = "FARMER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"


def _parse_dt(val) -> Optional[datetime]:
    if not val:
        return None
    try:
        return datetime.fromisoformat(str(val).replace("Z", "+00:00"))
    except ValueError:
        return None


def _to_float(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


def _to_id(val) -> Optional[str]:
    return str(val) if val is not None else None


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
    role: Role
    address: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> User:
        name = data.get("name")
        if not name:
            parts = [data.get("firstName") or "", data.get("lastName") or ""]
            name = " ".join(p for p in parts if p) or data.get("email", "")
        return cls(
            id=str(data.get("id") or data.get("userId") or ""),
            email=data.get("email", ""),
            name=name,
            role=Role(str(data.get("role", "CUSTOMER")).upper()),
            address=data.get("address") or "",
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "address": self.address,
        }


@dataclass(frozen=True)
class Product:
    id: Optional[str]
    name: str
    description: str
    price: float
    quantity: int
    category: str
    unit: str = "kg"
    organic: bool = False
    available: bool = True
    image_urls: Tuple[str, ...] = ()
    farmer_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Product:
        return cls(
            id=_to_id(data.get("id")),
            name=data.get("name", ""),
            description=data.get("description") or "",
            price=_to_float(data.get("price")),
            quantity=int(data.get("quantity") or 0),
            category=data.get("category") or "",
            unit=data.get("unit") or "kg",
            organic=bool(data.get("organic", False)),
            available=bool(data.get("available", True)),
            image_urls=tuple(data.get("imageUrls") or ()),
            farmer_id=_to_id(data.get("farmerId")),
        )

    def to_json(self) -> Dict[str, Any]:
        """Payload for create/update, the id travels in the url."""
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "quantity": self.quantity,
            "category": self.category,
            "unit": self.unit,
            "organic": self.organic,
            "available": self.available,
            "imageUrls": list(self.image_urls),
            "farmerId": self.farmer_id,
        }

    @property
    def in_stock(self) -> bool:
        return self.available and self.quantity > 0


@dataclass(frozen=True)
class CartItem:
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    image_url: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> CartItem:
        return cls(
            product_id=str(data["productId"]),
            product_name=data.get("productName", ""),
            unit_price=_to_float(data.get("unitPrice")),
            quantity=int(data.get("quantity") or 0),
            image_url=data.get("imageUrl"),
        )

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Cart:
    id: Optional[str] = None
    customer_id: Optional[str] = None
    items: Tuple[CartItem, ...] = ()

    @classmethod
    def empty(cls) -> Cart:
        return cls()

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> Cart:
        if not data:
            return cls.empty()
        return cls(
            id=data.get("id"),
            customer_id=data.get("customerId"),
            items=tuple(CartItem.from_json(i) for i in data.get("cartItems") or ()),
        )

    def find(self, product_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None


@dataclass(frozen=True)
class OrderItem:
    product_id: Optional[str]
    product_name: str
    quantity: int
    unit_price: float
    total_price: float

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> OrderItem:
        return cls(
            product_id=_to_id(data.get("productId")),
            product_name=data.get("productName", ""),
            quantity=int(data.get("quantity") or 0),
            unit_price=_to_float(data.get("unitPrice")),
            total_price=_to_float(data.get("totalPrice")),
        )


@dataclass(frozen=True)
class Order:
    id: str
    customer_id: Optional[str]
    items: Tuple[OrderItem, ...]
    total_amount: float
    status: OrderStatus
    shipping_address: str = ""
    billing_address: str = ""
    payment_method: str = ""
    payment_status: str = ""
    notes: str = ""
    order_date: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Order:
        return cls(
            id=str(data["id"]),
            customer_id=data.get("customerId"),
            items=tuple(OrderItem.from_json(i) for i in data.get("orderItems") or ()),
            total_amount=_to_float(data.get("totalAmount")),
            status=OrderStatus(data.get("status") or "PENDING"),
            shipping_address=data.get("shippingAddress") or "",
            billing_address=data.get("billingAddress") or "",
            payment_method=data.get("paymentMethod") or "",
            payment_status=data.get("paymentStatus") or "",
            notes=data.get("notes") or "",
            order_date=_parse_dt(data.get("orderDate")),
            updated_at=_parse_dt(data.get("updatedAt")),
        )

    @property
    def short_id(self) -> str:
        return self.id[-8:]
