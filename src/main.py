from typing import Optional

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from api.models import Role
from utils.logger import get_logger
from utils.messages import (
    CartChangedMessage,
    LoginRequestedMessage,
    QuitRequestedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.state import GlobalState
from views.scr_admin_dashboard import AdminDashboardScreen
from views.scr_cart import CartScreen
from views.scr_farmer_dashboard import FarmerDashboardScreen
from views.scr_login import LoginScreen
from views.scr_orders import OrdersScreen
from views.scr_products import ProductsScreen

_logger = get_logger(__name__)


class MarketApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "products": ProductsScreen,
        "cart": CartScreen,
        "orders": OrdersScreen,
        "farmer": FarmerDashboardScreen,
        "admin": AdminDashboardScreen,
    }

    MODE_TITLES = {
        "products": "Products",
        "cart": "Cart",
        "orders": "My Orders",
        "farmer": "Farmer Dashboard",
        "admin": "Admin Dashboard",
    }

    # menu entries per role, first entry is the landing mode
    ROLE_MODES = {
        Role.CUSTOMER: ["products", "cart", "orders"],
        Role.FARMER: ["farmer", "products", "cart", "orders"],
        Role.ADMIN: ["admin", "products", "cart", "orders"],
    }
    GUEST_MODES = ["products"]

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/products.tcss",
        "styles/cart.tcss",
        "styles/orders.tcss",
        "styles/dashboard.tcss",
    ]

    state: GlobalState

    def __init__(self, state: Optional[GlobalState] = None):
        super().__init__()
        self.state = state or GlobalState()
        self._restore_tried = False
        self.state.cart.changed.connect(self._on_cart_changed)
        self.state.session.identity_changed.connect(self._on_identity_changed)

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.title = "Farmers Market"
        self.main_flow()

    def modes_for(self, role: Optional[Role]) -> list[str]:
        if role is None:
            return self.GUEST_MODES
        return self.ROLE_MODES[role]

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    # store events -> textual messages, delivered to whatever screen is active

    def _broadcast(self, message) -> None:
        if self.screen_stack:
            self.screen.post_message(message)

    def _on_cart_changed(self, cart_store) -> None:
        self._broadcast(CartChangedMessage(cart_store.count))

    def _on_identity_changed(self, user) -> None:
        self._broadcast(UserLoginMessage(user))

    @on(UserLogoutMessage)
    def handle_user_logout(self):
        self.state.session.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(LoginRequestedMessage)
    def handle_login_requested(self):
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.state.close()
        self.exit()

    @work(exclusive=True, group="main_flow")
    async def main_flow(self):
        user = self.state.user
        if user is None and not self._restore_tried:
            self._restore_tried = True
            user = await self.state.session.restore()
            if user:
                self.notify(f"Welcome back, {user.name}!")

        if user is None:
            await self.push_screen_wait(LoginScreen())

        landing = self.modes_for(self.state.role)[0]
        _logger.debug(f"Landing on {landing} for role {self.state.role}")
        await self.switch_mode(landing)


def run() -> None:
    MarketApp().run()


if __name__ == "__main__":
    run()
