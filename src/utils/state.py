from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from api.client import ApiClient
from api.models import Role, User
from store.cart import CartStore
from store.session import SESSION_PATH, SessionStore
from utils.logger import close_log_file


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - client: the api client, carries the session token
      - session: signed-in user and token
      - cart: the signed-in user's cart snapshot, reset when the identity changes
    """

    client: ApiClient = field(default_factory=ApiClient)
    session_path: Optional[str] = SESSION_PATH
    session: SessionStore = field(init=False)
    cart: CartStore = field(init=False)

    def __post_init__(self):
        self.session = SessionStore(self.client, self.session_path)
        self.cart = CartStore(self.client)
        self.session.identity_changed.connect(self.cart.on_identity_changed)

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def role(self) -> Optional[Role]:
        return self.session.role

    def close(self) -> None:
        self.client.close()
        close_log_file()
