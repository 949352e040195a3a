import unittest
from unittest import mock

from api.errors import BackendError, ValidationError
from api.models import CartItem, OrderStatus, PaymentMethod, Role, User
from fake_backend import FakeBackend, make_client
from store.cart import CartStatus
from store.checkout import build_order_payload, place_order
from utils.forms import CheckoutForm, update_form
from utils.state import GlobalState


class OrderPayloadTestCase(unittest.TestCase):
    def test_payload_copies_cart_lines(self):
        user = User("u1", "ann@example.com", "Ann", Role.CUSTOMER)
        items = [
            CartItem("p1", "Apple", 2.50, 3),
            CartItem("p2", "Carrot", 1.00, 2),
        ]
        form = CheckoutForm(" 5 Mill St ", "5 Mill St", PaymentMethod.CARD, " ring twice ")

        payload = build_order_payload(user, items, form)

        self.assertEqual(payload["customerId"], "u1")
        self.assertAlmostEqual(payload["totalAmount"], 9.50)
        self.assertEqual(payload["shippingAddress"], "5 Mill St")
        self.assertEqual(payload["paymentMethod"], "CARD")
        self.assertEqual(payload["notes"], "ring twice")
        self.assertEqual(
            payload["orderItems"][0],
            {
                "productId": "p1",
                "productName": "Apple",
                "quantity": 3,
                "unitPrice": 2.50,
                "totalPrice": 7.50,
            },
        )


class PlaceOrderTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.backend.add_user("ann@example.com", "pw", address="5 Mill St")
        self.kale = self.backend.add_product("Kale", 3.0)
        self.apple = self.backend.add_product("Apple", 1.5)
        self.state = GlobalState(client=make_client(self.backend), session_path=None)
        self.form = CheckoutForm("5 Mill St", "5 Mill St")

    def tearDown(self):
        self.state.close()

    async def checkout(self, form=None):
        return await place_order(
            self.state.session, self.state.cart, self.state.client, form or self.form
        )

    async def fill_cart(self):
        await self.state.session.login("ann@example.com", "pw")
        await self.state.cart.add_to_cart(self.kale["id"], 2)
        await self.state.cart.add_to_cart(self.apple["id"], 1)

    def order_posts(self):
        return [c for c in self.backend.calls if c == ("POST", "/orders")]

    # ---------- blocked before sending ----------

    async def test_guest_cannot_check_out(self):
        with self.assertRaises(ValidationError):
            await self.checkout()
        self.assertEqual(self.order_posts(), [])

    async def test_empty_cart_is_rejected(self):
        await self.state.session.login("ann@example.com", "pw")
        with self.assertRaises(ValidationError) as ctx:
            await self.checkout()
        self.assertEqual(str(ctx.exception), "Your cart is empty.")
        self.assertEqual(self.order_posts(), [])

    async def test_incomplete_form_is_rejected(self):
        await self.fill_cart()
        form = update_form(self.form, "billing_address", "")
        with self.assertRaises(ValidationError):
            await self.checkout(form)
        self.assertEqual(self.order_posts(), [])
        self.assertEqual(self.state.cart.count, 2)

    # ---------- submission ----------

    async def test_success_clears_cart(self):
        await self.fill_cart()

        order = await self.checkout()

        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertAlmostEqual(order.total_amount, 7.50)
        self.assertEqual(len(order.items), 2)
        self.assertEqual(self.state.cart.items, ())
        self.assertEqual(self.state.cart.status, CartStatus.READY)
        self.assertEqual(self.backend.cart_of(order.customer_id), [])

    async def test_rejected_order_leaves_cart_untouched(self):
        await self.fill_cart()
        self.backend.fail_next[("POST", "/orders")] = (500, {"error": "Out of stock"})

        with self.assertRaises(BackendError):
            await self.checkout()

        self.assertEqual(self.state.cart.count, 2)
        self.assertNotIn(("DELETE", "/cart"), self.backend.calls)
        self.assertEqual(self.backend.orders, {})

    async def test_order_stands_when_clearing_fails(self):
        await self.fill_cart()
        self.backend.fail_next[("DELETE", "/cart")] = (500, {"error": "busy"})

        with mock.patch("store.checkout._logger") as logger:
            order = await self.checkout()

        self.assertIn(order.id, self.backend.orders)
        logger.error.assert_called_once()
        # resynced with the server, which still holds the items
        self.assertEqual(self.backend.calls[-1], ("GET", "/cart"))
        self.assertEqual(self.state.cart.count, 2)


if __name__ == "__main__":
    unittest.main()
