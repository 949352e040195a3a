# error types surfaced by the api package and the stores

from typing import Optional


class MarketError(Exception):
    """Base class for every error the client raises on purpose."""


class ValidationError(MarketError):
    """
    Raised before anything is sent to the backend,
    e.g. adding to cart without a session or a quantity below 1.
    """


class BackendError(MarketError):
    """Non-2xx response from the backend."""

    def __init__(self, status: Optional[int], message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"


class NetworkError(BackendError):
    """Transport failure, the backend was never reached or never answered."""

    def __init__(self, message: str):
        super().__init__(None, message)


class NotFoundError(BackendError):
    def __init__(self, message: str = "Not found"):
        super().__init__(404, message)


class AuthError(BackendError):
    def __init__(self, message: str = "Authentication required", status: int = 401):
        super().__init__(status, message)
