from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, MarkdownViewer

import api.products
from api.errors import MarketError, NotFoundError, ValidationError
from api.models import CartItem, Product
from utils.pure import generate_markdown_table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail plus add-to-cart.
    Returns True if the cart changed, False if not.
    """

    CSS = """
    #input-order-qty {
        width: 10;
    }
    #btn-sub-qty {
        min-width: 4
    }
    #btn-add-qty {
        min-width: 4
    }
    """

    order_qty = reactive(1)

    def __init__(self, product_id: str) -> None:
        super().__init__()
        self._product_id = product_id
        self._prod: Optional[Product] = None
        self._existing_cart_item: Optional[CartItem] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("Loading...", show_table_of_contents=False)
            with Vertical():
                yield Label("Order Quantity")
                with Horizontal():
                    yield Button("-", id="btn-sub-qty")
                    yield Input(value="1", id="input-order-qty", type="integer")
                    yield Button("+", id="btn-add-qty")
                yield Label("", id="label-line-total")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        self.query_one("#btn-addcart").disabled = True
        self.load_product()

    @work(exclusive=True, group="load")
    async def load_product(self) -> None:
        try:
            self._prod = await api.products.get_product(
                self.app.state.client, self._product_id
            )
        except NotFoundError:
            self.notify("This product no longer exists.", severity="error")
            self.dismiss(False)
            return
        except MarketError as e:
            self.notify(f"Could not load product: {e}", severity="error")
            self.dismiss(False)
            return

        prod = self._prod
        table_rows = [
            ["Category", prod.category],
            ["Price", f"${prod.price:.2f} per {prod.unit}"],
            ["In Stock", f"{prod.quantity} {prod.unit}"],
            ["Organic", "Yes" if prod.organic else "No"],
            ["Available", "Yes" if prod.available else "No"],
        ]
        md_table_str = generate_markdown_table(
            ["Attribute", "Value"], table_rows, ["l", "l"]
        )
        md = f"### {prod.name}\n\n{prod.description}\n\n{md_table_str}"
        await self.query_one(MarkdownViewer).document.update(md)

        order_btn = self.query_one("#btn-addcart", Button)
        if not prod.in_stock:
            order_btn.label = "Out of Stock"
            order_btn.variant = "warning"
        else:
            order_btn.disabled = False

        self.query_one("#input-order-qty").validators = [
            Number(minimum=1, maximum=max(prod.quantity, 1))
        ]

        self._existing_cart_item = self.app.state.cart.cart.find(prod.id)
        if self._existing_cart_item:
            self.order_qty = self._existing_cart_item.quantity
            order_btn.label = "Update Cart"

        self.watch_order_qty(self.order_qty)
        self.query_one("#input-order-qty").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    async def on_input_changed(self, message: Input.Changed) -> None:
        if (
            message.input.id == "input-order-qty"
            and message.input.is_valid
            and self.focused == message.input
            and message.value
        ):
            self.order_qty = int(message.value)

    def watch_order_qty(self, qty: int) -> None:
        if self._prod is None:
            return
        self.query_one("#btn-sub-qty").disabled = qty <= 1
        self.query_one("#btn-add-qty").disabled = qty >= self._prod.quantity
        self.query_one("#input-order-qty", Input).value = str(qty)
        self.query_one("#label-line-total", Label).update(
            f"Total: ${self._prod.price * qty:.2f}"
        )

    @on(Button.Pressed, "#btn-add-qty")
    def handle_add_qty(self):
        self.order_qty += 1

    @on(Button.Pressed, "#btn-sub-qty")
    def handle_sub_qty(self):
        if self.order_qty > 1:
            self.order_qty -= 1

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    @work(exclusive=True)
    async def handle_addcart(self):
        state = self.app.state
        button = self.query_one("#btn-addcart", Button)
        button.disabled = True
        try:
            state.session.require_user()
            if self._existing_cart_item is None:
                await state.cart.add_to_cart(self._prod.id, self.order_qty)
                self.app.notify("Item added to cart successfully.")
            else:
                await state.cart.update_cart_item(self._prod.id, self.order_qty)
                self.app.notify("Updated cart item quantity.")
        except ValidationError as e:
            self.notify(str(e), severity="warning")
            button.disabled = False
            return
        except MarketError as e:
            self.notify(f"Could not update cart: {e}", severity="error")
            button.disabled = False
            return

        self.dismiss(True)
