# src/api/auth.py
from __future__ import annotations

from typing import Optional, Tuple

from api import models
from api.client import ApiClient
from api.errors import AuthError, BackendError


def _token_and_user(data: dict) -> Tuple[str, models.User]:
    token = data.get("token") or data.get("accessToken")
    if not token:
        raise BackendError(None, "Server response did not include a session token")
    user_data = data.get("user") or data
    return token, models.User.from_json(user_data)


async def login(
    client: ApiClient, email: str, password: str
) -> Tuple[str, models.User]:
    """Return (token, user) for valid credentials; AuthError otherwise."""
    try:
        data = await client.post(
            "/auth/login", json={"email": email, "password": password}
        )
    except BackendError as e:
        if e.status in (400, 401, 403):
            raise AuthError("Invalid email or password", e.status) from e
        raise
    return _token_and_user(data or {})


async def register(
    client: ApiClient,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    role: models.Role = models.Role.CUSTOMER,
    address: Optional[str] = None,
) -> Tuple[str, models.User]:
    """
    Create an account and return (token, user).
    The backend answers 400 with an error message when the email is taken.
    """
    data = await client.post(
        "/auth/register",
        json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
            "role": role.value,
            "address": address or "",
        },
    )
    return _token_and_user(data or {})


async def me(client: ApiClient) -> models.User:
    """The user owning the token currently attached to the client."""
    data = await client.get("/auth/me")
    return models.User.from_json(data or {})
