from __future__ import annotations

from enum import Enum
from typing import Awaitable, Optional

import api.cart as cart_api
from api.client import ApiClient
from api.errors import MarketError, NotFoundError, ValidationError
from api.models import Cart, User
from store.events import Signal
from utils.logger import get_logger

_logger = get_logger(__name__)


class CartStatus(str, Enum):
    EMPTY = "empty"  # nobody signed in
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"  # first load failed, no snapshot held


class CartStore:
    """
    Client-side view of the signed-in user's cart.

    Every successful call replaces the snapshot with the cart the server returned,
    nothing is merged locally. Each request takes a sequence number and a response
    is only applied when it is newer than the last applied one and was issued for
    the current identity.
    """

    def __init__(self, client: ApiClient):
        self._client = client
        self.cart: Cart = Cart.empty()
        self.status: CartStatus = CartStatus.EMPTY
        self.changed = Signal("cart_changed")

        self._signed_in = False
        self._seq = 0
        self._applied_seq = 0
        self._epoch = 0

    @property
    def count(self) -> int:
        """Distinct products in the cart, not the sum of quantities."""
        return len(self.cart.items)

    @property
    def items(self):
        return self.cart.items

    def on_identity_changed(self, user: Optional[User]) -> Optional[Awaitable[None]]:
        self.reset()
        self._signed_in = user is not None
        if user is None:
            return None
        return self.load_cart()

    def reset(self) -> None:
        self._epoch += 1
        self._applied_seq = self._seq
        self.cart = Cart.empty()
        self.status = CartStatus.EMPTY
        self._notify()

    async def load_cart(self) -> None:
        """
        Fetch the cart. Failures are logged, never raised:
        the previous snapshot is kept.
        """
        if not self._signed_in:
            # nobody to load for, stay EMPTY
            return
        ticket = self._ticket()
        if self.status != CartStatus.READY:
            self.status = CartStatus.LOADING
            self._notify()
        try:
            cart = await cart_api.get_cart(self._client)
        except MarketError as e:
            _logger.error(f"Error loading cart: {e}")
            if self._is_current(ticket) and self.status == CartStatus.LOADING:
                self.status = CartStatus.ERROR
                self._notify()
            return
        self._apply(ticket, cart)

    async def add_to_cart(self, product_id: str, quantity: int) -> Cart:
        _check_quantity(quantity)
        ticket = self._ticket()
        cart = await cart_api.add_item(self._client, product_id, quantity)
        self._apply(ticket, cart)
        return self.cart

    async def update_cart_item(self, product_id: str, quantity: int) -> Cart:
        """Quantities below 1 are rejected, callers remove the item instead."""
        _check_quantity(quantity)
        ticket = self._ticket()
        cart = await cart_api.update_item(self._client, product_id, quantity)
        self._apply(ticket, cart)
        return self.cart

    async def remove_from_cart(self, product_id: str) -> Cart:
        ticket = self._ticket()
        try:
            cart = await cart_api.remove_item(self._client, product_id)
        except NotFoundError:
            _logger.info(f"Product {product_id} was not in the cart.")
            await self.load_cart()
            return self.cart
        self._apply(ticket, cart)
        return self.cart

    async def clear_cart(self) -> None:
        ticket = self._ticket()
        await cart_api.clear_cart(self._client)
        self._apply(ticket, Cart.empty())

    # ---------------------------
    # internals
    # ---------------------------

    def _ticket(self) -> tuple[int, int]:
        self._seq += 1
        return self._epoch, self._seq

    def _is_current(self, ticket: tuple[int, int]) -> bool:
        epoch, seq = ticket
        return epoch == self._epoch and seq > self._applied_seq

    def _apply(self, ticket: tuple[int, int], cart: Cart) -> bool:
        if not self._is_current(ticket):
            _logger.debug(f"Discarding stale cart response {ticket}")
            return False
        self._applied_seq = ticket[1]
        self.cart = cart
        self.status = CartStatus.READY
        self._notify()
        return True

    def _notify(self) -> None:
        self.changed.emit(self)


def _check_quantity(quantity) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValidationError(
            f"Quantity must be a whole number of at least 1, got {quantity!r}."
        )
