from typing import Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Checkbox, Input, Label, Select

from api.errors import ValidationError
from api.models import Product
from utils.forms import ProductForm, update_form

UNITS = ["kg", "g", "lb", "piece", "bunch", "dozen", "litre"]

INPUT_FIELDS = {
    "input-prod-name": "name",
    "input-prod-descr": "description",
    "input-prod-price": "price",
    "input-prod-qty": "quantity",
    "input-prod-category": "category",
}


class ProductFormModal(ModalScreen[Optional[Product]]):
    """
    Add or edit a product. Dismisses with the Product to save
    (id set when editing), or None when cancelled. Nothing is sent from here.
    """

    def __init__(self, farmer_id: str, product: Optional[Product] = None):
        super().__init__()
        self._farmer_id = farmer_id
        self._product = product
        self.form = ProductForm.from_product(product) if product else ProductForm()

    def compose(self) -> ComposeResult:
        title = "Edit Product" if self._product else "Add New Product"
        with VerticalScroll(id="div-product-form"):
            yield Label(f"[b]{title}[/b]")
            yield Label("Name")
            yield Input(self.form.name, id="input-prod-name")
            yield Label("Description")
            yield Input(self.form.description, id="input-prod-descr")
            with Horizontal(classes="hort-pair"):
                with Vertical():
                    yield Label("Price ($)")
                    yield Input(
                        self.form.price,
                        id="input-prod-price",
                        type="number",
                        validators=[Number(minimum=0.0)],
                    )
                with Vertical():
                    yield Label("Quantity")
                    yield Input(
                        self.form.quantity,
                        id="input-prod-qty",
                        type="integer",
                        validators=[Number(minimum=0)],
                    )
            with Horizontal(classes="hort-pair"):
                with Vertical():
                    yield Label("Category")
                    yield Input(
                        self.form.category,
                        placeholder="vegetables",
                        id="input-prod-category",
                    )
                with Vertical():
                    yield Label("Unit")
                    units = UNITS if self.form.unit in UNITS else [self.form.unit, *UNITS]
                    yield Select(
                        [(u, u) for u in units],
                        value=self.form.unit,
                        allow_blank=False,
                        id="select-prod-unit",
                    )
            with Horizontal(classes="hort-pair"):
                yield Checkbox("Organic", self.form.organic, id="chk-prod-organic")
                yield Checkbox("Available", self.form.available, id="chk-prod-available")
            yield Label("", id="label-form-error")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-prod-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Input.Changed)
    def handle_input_changed(self, message: Input.Changed) -> None:
        field = INPUT_FIELDS.get(message.input.id)
        if field:
            self.form = update_form(self.form, field, message.value)

    @on(Select.Changed, "#select-prod-unit")
    def handle_unit_changed(self, message: Select.Changed) -> None:
        self.form = update_form(self.form, "unit", message.value)

    @on(Checkbox.Changed)
    def handle_checkbox_changed(self, message: Checkbox.Changed) -> None:
        field = {"chk-prod-organic": "organic", "chk-prod-available": "available"}
        if message.checkbox.id in field:
            self.form = update_form(self.form, field[message.checkbox.id], message.value)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self) -> None:
        product_id = self._product.id if self._product else None
        try:
            product = self.form.to_product(self._farmer_id, product_id)
        except ValidationError as e:
            self.query_one("#label-form-error", Label).update(str(e))
            return
        self.dismiss(product)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
