from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.events import ScreenResume
from textual.message import Message
from textual.widgets import Button, Label, LoadingIndicator, Rule

from api.errors import MarketError
from api.models import CartItem
from store.cart import CartStatus
from utils.messages import CartChangedMessage
from utils.pure import cart_subtotal
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import ConfirmModal


class CartItemQuantityMessage(Message):
    """Posted by a cart row, quantity may be 0 meaning remove."""

    bubble = True

    def __init__(self, item: CartItem, quantity: int) -> None:
        super().__init__()
        self.item = item
        self.quantity = quantity


class CartItemRemoveMessage(Message):
    bubble = True

    def __init__(self, item: CartItem) -> None:
        super().__init__()
        self.item = item


class CartItemWidget(HorizontalGroup):
    def __init__(self, item: CartItem):
        super().__init__()
        self.item = item

    def compose(self):
        with Container(classes="div-item"):
            yield Label(self.item.product_name, classes="label-item-name")
            yield Label(
                f"${self.item.unit_price:.2f} each", classes="label-item-price"
            )
            yield Label(f"${self.item.line_total:.2f}", classes="label-item-total")
        with Container(classes="div-actions"):
            yield Button("-", classes="btn-item-sub")
            yield Label(str(self.item.quantity), classes="label-item-qty")
            yield Button("+", classes="btn-item-add")
            yield Button("Remove", classes="btn-item-remove", variant="error")

    def _busy(self) -> None:
        for button in self.query(Button):
            button.disabled = True

    @on(Button.Pressed, ".btn-item-sub")
    def handle_sub(self):
        self._busy()
        self.post_message(CartItemQuantityMessage(self.item, self.item.quantity - 1))

    @on(Button.Pressed, ".btn-item-add")
    def handle_add(self):
        self._busy()
        self.post_message(CartItemQuantityMessage(self.item, self.item.quantity + 1))

    @on(Button.Pressed, ".btn-item-remove")
    def handle_remove(self):
        self.post_message(CartItemRemoveMessage(self.item))


class CartScreen(BaseScreen):
    """
    Renders the cart store's snapshot; every change goes through the store.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield LoadingIndicator(id="loading-cart")
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Total Cart Value: $0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Refresh", id="btn-refresh")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    async def on_mount(self):
        self.query_one("#loading-cart").display = False
        await self.render_cart()

    @on(CartChangedMessage)
    async def handle_cart_change(self):
        await self.render_cart()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="cart")
    async def handle_reload(self):
        if not self.app.state.session.is_authenticated:
            await self.render_cart()
            return
        # the store emits on completion, which re-renders through CartChangedMessage
        await self.app.state.cart.load_cart()

    async def render_cart(self) -> None:
        cart_store = self.app.state.cart
        items = cart_store.items

        self.query_one("#loading-cart").display = (
            cart_store.status == CartStatus.LOADING
        )

        content = self.query_one("#vertscroll-content")
        await content.remove_children()
        if not items:
            content.add_class("no-items")
            if not self.app.state.session.is_authenticated:
                message = "Log in to start shopping."
            elif cart_store.status == CartStatus.ERROR:
                message = "Your cart could not be loaded. Try Refresh."
            else:
                message = "Your cart is empty. Add some products to get started!"
            await content.mount(Label(message, id="label-empty-cart"))
        else:
            content.remove_class("no-items")
            await content.mount_all([CartItemWidget(item) for item in items])

        total_value = cart_subtotal(items)
        self.query_one("#label-cart-total", Label).update(
            f"{len(items)} item(s), Total Cart Value: ${total_value:.2f}"
        )
        self.query_one("#btn-checkout").disabled = not items
        self.query_one("#btn-clear-cart").disabled = not items

    @on(CartItemQuantityMessage)
    @work(group="cart-mutation")
    async def handle_quantity(self, message: CartItemQuantityMessage) -> None:
        cart_store = self.app.state.cart
        try:
            if message.quantity <= 0:
                await cart_store.remove_from_cart(message.item.product_id)
            else:
                await cart_store.update_cart_item(
                    message.item.product_id, message.quantity
                )
        except MarketError as e:
            self.notify_error(e, "Updating cart")
            # re-enable the row, the snapshot did not change
            await self.render_cart()

    @on(CartItemRemoveMessage)
    @work(group="cart-mutation")
    async def handle_remove_item(self, message: CartItemRemoveMessage):
        if not await self.app.push_screen_wait(
            ConfirmModal(f"Remove {message.item.product_name} from your cart?")
        ):
            return
        try:
            await self.app.state.cart.remove_from_cart(message.item.product_id)
        except MarketError as e:
            self.notify_error(e, "Removing item")
            return
        self.notify("Item removed from cart.", severity="information")

    @on(Button.Pressed, "#btn-clear-cart")
    @work(group="cart-mutation")
    async def handle_clear_cart(self) -> None:
        if not self.app.state.cart.items:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if not await self.app.push_screen_wait(
            ConfirmModal("Do you really want to remove all items from cart?", "error")
        ):
            return
        try:
            await self.app.state.cart.clear_cart()
        except MarketError as e:
            self.notify_error(e, "Clearing cart")

    @on(Button.Pressed, "#btn-checkout")
    @work
    async def handle_checkout(self) -> None:
        if not self.app.state.cart.items:
            self.app.notify("Cart is empty.", severity="warning")
            return

        order = await self.app.push_screen_wait(CheckoutModal())
        if order:
            await self.app.switch_mode("orders")
