from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, Select, TabbedContent, TabPane

from api.errors import AuthError, MarketError
from api.models import Role
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal


class LoginScreen(BaseScreen):
    """
    Dismisses once the user logged in, registered, or chose to browse as a guest.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Email")
                    yield Input(placeholder="jane@example.com", id="input-login-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Quit", id="btn-quit")
                        yield Button("Continue as Guest", id="btn-guest")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    with Horizontal(id="div-reg-names"):
                        with Vertical():
                            yield Label("First Name")
                            yield Input(placeholder="Jane", id="input-reg-first")
                        with Vertical():
                            yield Label("Last Name")
                            yield Input(placeholder="Doe", id="input-reg-last")
                    yield Label("Email")
                    yield Input(placeholder="jane@example.com", id="input-reg-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd"
                    )
                    yield Label("Address")
                    yield Input(placeholder="12 Orchard Lane", id="input-reg-address")
                    yield Label("I am a")
                    yield Select(
                        [("Customer", Role.CUSTOMER), ("Farmer", Role.FARMER)],
                        value=Role.CUSTOMER,
                        allow_blank=False,
                        id="select-reg-role",
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email = self.query_one("#input-login-email", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value.strip()

        if not email or not pwd:
            self.notify("Email or password cannot be empty!", severity="error")
            return

        button = self.query_one("#btn-login", Button)
        button.disabled = True
        try:
            user = await self.app.state.session.login(email, pwd)
        except AuthError as e:
            self.notify(str(e.message), severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return
        except MarketError as e:
            self.notify_error(e, "Login")
            return
        finally:
            button.disabled = False

        self.notify(f"Hello {user.name}!")
        self.dismiss(user)

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        first = self.query_one("#input-reg-first", Input).value.strip()
        last = self.query_one("#input-reg-last", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value.strip()
        address = self.query_one("#input-reg-address", Input).value.strip()
        role = self.query_one("#select-reg-role", Select).value

        if not first or not last or not email or not pwd:
            self.notify("Make sure all inputs are filled.", severity="error")
            return

        try:
            user = await self.app.state.session.register(
                first, last, email, pwd, role, address
            )
        except MarketError as e:
            self.notify_error(e, "Registration")
            return

        self.notify(f"Registration successful. Welcome, {user.name}!")
        self.dismiss(user)

    @on(Button.Pressed, "#btn-guest")
    def handle_guest(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
