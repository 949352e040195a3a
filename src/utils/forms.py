# immutable form values, updated through update_form so they can be tested without a screen

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TypeVar

from api.errors import ValidationError
from api.models import PaymentMethod, Product, User

F = TypeVar("F")


def update_form(form: F, field: str, value) -> F:
    """Return a copy of form with one field replaced."""
    if field not in {f.name for f in dataclasses.fields(form)}:
        raise KeyError(f"{type(form).__name__} has no field {field!r}")
    return dataclasses.replace(form, **{field: value})


@dataclass(frozen=True)
class CheckoutForm:
    shipping_address: str = ""
    billing_address: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""

    @classmethod
    def for_user(cls, user: Optional[User]) -> CheckoutForm:
        address = user.address if user else ""
        return cls(shipping_address=address, billing_address=address)


def validate_checkout_form(form: CheckoutForm) -> Dict[str, str]:
    """Field name -> message, empty when the form can be submitted."""
    errors = {}
    if not form.shipping_address.strip():
        errors["shipping_address"] = "Shipping address is required."
    if not form.billing_address.strip():
        errors["billing_address"] = "Billing address is required."
    try:
        PaymentMethod(form.payment_method)
    except ValueError:
        errors["payment_method"] = "Unknown payment method."
    return errors


@dataclass(frozen=True)
class ProductForm:
    """Text-typed fields as entered, coerced by to_product."""

    name: str = ""
    description: str = ""
    price: str = ""
    quantity: str = ""
    category: str = ""
    unit: str = "kg"
    organic: bool = True
    available: bool = True
    image_urls: Tuple[str, ...] = ()

    @classmethod
    def from_product(cls, product: Product) -> ProductForm:
        return cls(
            name=product.name,
            description=product.description,
            price=str(product.price),
            quantity=str(product.quantity),
            category=product.category,
            unit=product.unit or "kg",
            organic=product.organic,
            available=product.available,
            image_urls=product.image_urls,
        )

    def to_product(self, farmer_id: Optional[str], product_id=None) -> Product:
        required = ("name", "description", "category")
        missing = [f for f in required if not getattr(self, f).strip()]
        if missing:
            raise ValidationError(f"Required: {', '.join(missing)}.")
        try:
            price = float(self.price)
        except ValueError:
            raise ValidationError(f"Price must be a number, got {self.price!r}.")
        try:
            quantity = int(self.quantity)
        except ValueError:
            raise ValidationError(
                f"Quantity must be a whole number, got {self.quantity!r}."
            )
        if price < 0 or quantity < 0:
            raise ValidationError("Price and quantity cannot be negative.")

        return Product(
            id=product_id,
            name=self.name.strip(),
            description=self.description.strip(),
            price=price,
            quantity=quantity,
            category=self.category.strip(),
            unit=self.unit,
            organic=self.organic,
            available=self.available,
            image_urls=self.image_urls,
            farmer_id=farmer_id,
        )
