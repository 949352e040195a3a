from __future__ import annotations

import json
import os
from typing import Optional

import api.auth as auth_api
from api.client import ApiClient
from api.errors import AuthError, MarketError, ValidationError
from api.models import Role, User
from store.events import Signal
from utils.logger import get_logger

_logger = get_logger(__name__)

SESSION_PATH = os.getenv("MARKET_SESSION_FILE", "data/session.json")


class SessionStore:
    """
    Holds the signed-in user and the session token.

    identity_changed is emitted with the new User on login/restore
    and with None on logout. The cart store listens to it.
    """

    def __init__(self, client: ApiClient, session_path: Optional[str] = SESSION_PATH):
        self._client = client
        self._session_path = session_path
        self.user: Optional[User] = None
        self.token: Optional[str] = None
        self.identity_changed = Signal("identity_changed")

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    @property
    def role(self) -> Optional[Role]:
        return self.user.role if self.user else None

    def require_user(self) -> User:
        if not self.is_authenticated:
            raise ValidationError("Please log in to continue.")
        return self.user

    async def login(self, email: str, password: str) -> User:
        token, user = await auth_api.login(self._client, email, password)
        await self._start(token, user)
        _logger.info(f"User {user.email} logged in as {user.role.value}.")
        return user

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: Role = Role.CUSTOMER,
        address: Optional[str] = None,
    ) -> User:
        token, user = await auth_api.register(
            self._client, first_name, last_name, email, password, role, address
        )
        await self._start(token, user)
        _logger.info(f"Registered {user.email}.")
        return user

    def logout(self) -> None:
        """Drop the session. Listeners run before this returns."""
        email = self.user.email if self.user else None
        self.user = None
        self.token = None
        self._client.token = None
        self._forget()
        for pending in self.identity_changed.emit(None):
            # logout listeners are expected to be synchronous
            _logger.warning(f"Ignoring async logout listener result {pending!r}")
            if hasattr(pending, "close"):
                pending.close()
        if email:
            _logger.info(f"User {email} logged out.")

    async def restore(self) -> Optional[User]:
        """
        Resume the session saved by a previous run, if the server still accepts it.
        """
        saved = self._load()
        if not saved or not saved.get("token"):
            return None

        self._client.token = saved["token"]
        try:
            user = await auth_api.me(self._client)
        except AuthError:
            _logger.info("Saved session expired, discarding it.")
            self._client.token = None
            self._forget()
            return None
        except MarketError as e:
            _logger.warning(f"Could not restore saved session: {e}")
            self._client.token = None
            return None

        await self._start(saved["token"], user)
        _logger.info(f"Restored session for {user.email}.")
        return user

    async def _start(self, token: str, user: User) -> None:
        self.token = token
        self.user = user
        self._client.token = token
        self._save()
        await self.identity_changed.emit_async(user)

    # ---------------------------
    # Persistence
    # ---------------------------

    def _save(self) -> None:
        if not self._session_path:
            return
        try:
            directory = os.path.dirname(self._session_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._session_path, "w", encoding="utf-8") as f:
                json.dump({"token": self.token, "user": self.user.to_json()}, f)
        except OSError as e:
            _logger.warning(f"Could not save session to {self._session_path}: {e}")

    def _load(self) -> Optional[dict]:
        if not self._session_path or not os.path.exists(self._session_path):
            return None
        try:
            with open(self._session_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            _logger.warning(f"Ignoring unreadable session file: {e}")
            return None

    def _forget(self) -> None:
        if self._session_path and os.path.exists(self._session_path):
            try:
                os.remove(self._session_path)
            except OSError as e:
                _logger.warning(f"Could not remove {self._session_path}: {e}")
