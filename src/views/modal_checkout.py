from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer, Select, TextArea

from api.errors import MarketError
from api.models import Order, PaymentMethod
from store.checkout import place_order
from utils.forms import CheckoutForm, update_form, validate_checkout_form
from utils.pure import cart_subtotal, generate_markdown_table
from views.modal_dialog import ConfirmModal

PAYMENT_CHOICES = [
    ("Cash on Delivery", PaymentMethod.CASH),
    ("Credit/Debit Card", PaymentMethod.CARD),
    ("Bank Transfer", PaymentMethod.BANK_TRANSFER),
]

INPUT_FIELDS = {
    "input-shipping-address": "shipping_address",
    "input-billing-address": "billing_address",
}


class CheckoutModal(ModalScreen[Optional[Order]]):
    """
    Order summary plus shipping and payment details.
    Dismisses with the created Order, or None when the user backs out.
    A failed submission keeps the form as entered so it can be retried.
    """

    def __init__(self):
        super().__init__()
        self.form = CheckoutForm.for_user(self.app.state.user)

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="div-checkout"):
            yield MarkdownViewer("", show_table_of_contents=False)
            yield Label("Shipping Address")
            yield Input(
                self.form.shipping_address,
                placeholder="12 Orchard Lane, Springfield",
                id="input-shipping-address",
            )
            yield Label("Billing Address")
            yield Input(
                self.form.billing_address,
                placeholder="12 Orchard Lane, Springfield",
                id="input-billing-address",
            )
            yield Label("Payment Method")
            yield Select(
                PAYMENT_CHOICES,
                value=self.form.payment_method,
                allow_blank=False,
                id="select-payment",
            )
            yield Label("Order Notes (Optional)")
            yield TextArea(self.form.notes, id="textarea-notes")
            yield Label("", id="label-checkout-error")
            with Horizontal():
                yield Button("Back to Cart", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        items = self.app.state.cart.items
        if not items:
            await self.query_one(MarkdownViewer).document.update(
                "### Your cart is empty\n\nAdd some products to checkout!"
            )
            self.query_one("#btn-submit").disabled = True
            return

        headers = ["Product", "Unit Price", "Quantity", "Total Price"]
        rows = [
            [
                item.product_name,
                f"{item.unit_price:.2f}",
                item.quantity,
                f"{item.line_total:.2f}",
            ]
            for item in items
        ]
        md = "### Order Summary\n\n"
        md += generate_markdown_table(headers, rows, ["l", "r", "c", "r"])
        md += f"\n\n**Subtotal:** ${cart_subtotal(items):.2f}  \n"
        md += "**Shipping:** Free  \n"
        md += f"**Total:** ${cart_subtotal(items):.2f}"
        await self.query_one(MarkdownViewer).document.update(md)
        self.query_one("#input-shipping-address").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Input.Changed)
    def handle_input_changed(self, message: Input.Changed) -> None:
        field = INPUT_FIELDS.get(message.input.id)
        if field:
            self.form = update_form(self.form, field, message.value)
            message.input.remove_class("-invalid")

    @on(Select.Changed, "#select-payment")
    def handle_payment_changed(self, message: Select.Changed) -> None:
        self.form = update_form(self.form, "payment_method", message.value)

    @on(TextArea.Changed, "#textarea-notes")
    def handle_notes_changed(self, message: TextArea.Changed) -> None:
        self.form = update_form(self.form, "notes", message.text_area.text)

    def show_error(self, text: str) -> None:
        self.query_one("#label-checkout-error", Label).update(text)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        errors = validate_checkout_form(self.form)
        if errors:
            for input_id, field in INPUT_FIELDS.items():
                if field in errors:
                    self.query_one(f"#{input_id}", Input).add_class("-invalid")
            self.show_error(" ".join(errors.values()))
            return

        if not await self.app.push_screen_wait(
            ConfirmModal("Place order? This cannot be undone.", tone="positive")
        ):
            return

        button = self.query_one("#btn-submit", Button)
        button.disabled = True
        button.label = "Placing Order..."
        self.show_error("")
        state = self.app.state
        try:
            order = await place_order(
                state.session, state.cart, state.client, self.form
            )
        except MarketError as e:
            self.show_error(f"Order failed: {e}")
            return
        finally:
            button.disabled = False
            button.label = "Place Order"

        self.notify(f"Order placed. Your order number is #{order.short_id}.")
        self.dismiss(order)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)
