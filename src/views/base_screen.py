from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from api.errors import MarketError
from utils.messages import (
    CartChangedMessage,
    LoginRequestedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.pure import generate_markdown_table
from views.modal_dialog import ConfirmModal, QuitDialogModal


class Sidebar(Container):
    """User info, cart count and the menu for the current role."""

    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Label("Cart: 0 item(s)", id="label-cart-count")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Button("Log in", id="btn-login", variant="primary")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        await self.refresh_info()

    async def refresh_info(self) -> None:
        state = self.app.state
        user = state.user

        if user:
            rows = [
                ["Name", user.name],
                ["Email", user.email],
                ["Role", user.role.title()],
            ]
        else:
            rows = [["Name", "Guest"], ["Role", "-"]]
        md_table_str = generate_markdown_table(None, rows, ["l", "l"])
        await self.query_one("#md-userinfo", Markdown).update(md_table_str)

        self.query_one("#btn-logout").display = user is not None
        self.query_one("#btn-login").display = user is None
        self.query_one("#label-cart-count").display = user is not None
        self.update_cart_count(state.cart.count)

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(self.app.MODE_TITLES[m]), id="list-menu-item-" + m)
                for m in self.app.modes_for(state.role)
            ]
        )
        self.highlight_item(self.app.current_mode)

    def update_cart_count(self, count: int) -> None:
        self.query_one("#label-cart-count", Label).update(f"Cart: {count} item(s)")

    async def on_list_view_selected(self, event: ListView.Selected):
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        self.highlight_item(self.app.current_mode)
        if self.app.current_mode != selected_mode:
            await self.app.switch_mode(selected_mode)

    @on(Button.Pressed, "#btn-logout")
    @work
    async def handle_logout(self):
        if await self.app.push_screen_wait(
            ConfirmModal("Are you sure you want to log out?")
        ):
            self.post_message(UserLogoutMessage())

    @on(Button.Pressed, "#btn-login")
    def handle_login(self):
        self.post_message(LoginRequestedMessage())

    def highlight_item(self, mode_str: str):
        list_menu = self.query_one("#list-menu")
        for item in list_menu.children:
            item.highlighted = item.id == "list-menu-item-" + mode_str


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        """
        configure behavior of the base screen
        """
        self.sub_title = header_sub_title
        for mode, screen_cls in self.app.MODES.items():
            if type(self) is screen_cls:
                self.sub_title = self.app.MODE_TITLES[mode]
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    @on(ScreenResume)
    @on(UserLoginMessage)
    async def handle_identity_refresh(self) -> None:
        for sidebar in self.query(Sidebar):
            await sidebar.refresh_info()

    @on(CartChangedMessage)
    def handle_cart_count(self, message: CartChangedMessage) -> None:
        for sidebar in self.query(Sidebar):
            sidebar.update_cart_count(message.count)

    def notify_error(self, error: MarketError, action: str = "") -> None:
        prefix = f"{action} failed: " if action else ""
        self.notify(f"{prefix}{error}", severity="error")

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
