# manages the connection to the backend, provides the request helpers used by the service modules
import asyncio
import os
from typing import Any, Optional

import requests

from api.errors import AuthError, BackendError, NetworkError, NotFoundError
from utils.logger import get_logger

_logger = get_logger(__name__)

API_BASE_URL = os.getenv("MARKET_API_URL", "http://localhost:8080/api")
REQUEST_TIMEOUT = float(os.getenv("MARKET_API_TIMEOUT", "10"))


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return response.reason or f"Request failed with status {response.status_code}"


class ApiClient:
    """
    Thin wrapper around a requests.Session.

    Requests run in a worker thread so awaiting them never blocks the event loop.
    The session token, when set, is attached as a bearer credential.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token: Optional[str] = None
        self._session = session or requests.Session()

    @property
    def session(self) -> requests.Session:
        return self._session

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _send(self, method: str, path: str, json=None, params=None) -> Any:
        url = self.base_url + path
        _logger.debug(f"{method} {url}")
        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            _logger.warning(f"{method} {url} failed: {e}")
            raise NetworkError(f"Could not reach the server: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise AuthError(_error_message(response), status)
        if status == 404:
            raise NotFoundError(_error_message(response))
        if not 200 <= status < 300:
            raise BackendError(status, _error_message(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def request(self, method: str, path: str, json=None, params=None) -> Any:
        return await asyncio.to_thread(self._send, method, path, json, params)

    async def get(self, path: str, params=None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json=None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json=None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def close(self) -> None:
        self._session.close()
