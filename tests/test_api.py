import unittest

import api.auth
import api.cart
import api.orders
import api.products
from api.client import ApiClient
from api.errors import (
    AuthError,
    BackendError,
    MarketError,
    NetworkError,
    NotFoundError,
)
from api.models import Cart, OrderStatus, Product, Role
from fake_backend import BASE_URL, DownAdapter, FakeBackend, make_client


class ClientTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.client = make_client(self.backend)

    def tearDown(self):
        self.client.close()

    # ---------- error mapping ----------

    async def test_missing_token_maps_to_auth_error(self):
        with self.assertRaises(AuthError) as ctx:
            await api.cart.get_cart(self.client)
        self.assertEqual(ctx.exception.status, 401)
        self.assertIn("Authentication required", str(ctx.exception))

    async def test_404_maps_to_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            await api.products.get_product(self.client, "nope")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.message, "Product not found")

    async def test_other_status_maps_to_backend_error(self):
        self.backend.fail_next[("GET", "/products/public")] = (500, {"message": "boom"})
        with self.assertRaises(BackendError) as ctx:
            await api.products.list_products(self.client)
        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(str(ctx.exception), "boom (HTTP 500)")

    async def test_error_without_body_uses_reason(self):
        self.backend.fail_next[("GET", "/products/public")] = (500, None)
        with self.assertRaises(BackendError) as ctx:
            await api.products.list_products(self.client)
        self.assertEqual(ctx.exception.message, "Internal Server Error")

    async def test_unreachable_server_maps_to_network_error(self):
        client = ApiClient(BASE_URL, timeout=1)
        client.session.mount("http://market.test/", DownAdapter())
        with self.assertRaises(NetworkError) as ctx:
            await api.products.list_products(client)
        self.assertIsNone(ctx.exception.status)
        self.assertIsInstance(ctx.exception, MarketError)
        client.close()

    async def test_token_is_sent_as_bearer(self):
        user = self.backend.add_user("ann@example.com")
        self.client.token = self.backend.issue_token(user)
        me = await api.auth.me(self.client)
        self.assertEqual(me.email, "ann@example.com")


class AuthServiceTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.client = make_client(self.backend)
        self.backend.add_user("ann@example.com", "pw", first_name="Ann", last_name="Lee")

    def tearDown(self):
        self.client.close()

    async def test_login(self):
        token, user = await api.auth.login(self.client, "ann@example.com", "pw")
        self.assertTrue(token)
        self.assertEqual(user.name, "Ann Lee")
        self.assertEqual(user.role, Role.CUSTOMER)

    async def test_login_wrong_password(self):
        with self.assertRaises(AuthError) as ctx:
            await api.auth.login(self.client, "ann@example.com", "nope")
        self.assertEqual(ctx.exception.message, "Invalid email or password")

    async def test_register(self):
        token, user = await api.auth.register(
            self.client, "Bo", "Farm", "bo@example.com", "pw", Role.FARMER, "Hill 3"
        )
        self.assertTrue(token)
        self.assertEqual(user.role, Role.FARMER)
        self.assertEqual(user.address, "Hill 3")

    async def test_register_duplicate_email(self):
        with self.assertRaises(BackendError) as ctx:
            await api.auth.register(self.client, "A", "L", "ann@example.com", "pw")
        self.assertEqual(ctx.exception.status, 400)
        self.assertIn("already in use", str(ctx.exception))


class ProductServiceTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.client = make_client(self.backend)
        self.farmer = self.backend.add_user("farm@example.com", role="FARMER")
        self.kale = self.backend.add_product(
            "Kale", 3.0, category="vegetables", organic=True, farmer_id=self.farmer["id"]
        )
        self.backend.add_product("Apple", 1.5, category="fruits")

    def tearDown(self):
        self.client.close()

    async def test_public_catalogue(self):
        products = await api.products.list_products(self.client)
        self.assertEqual([p.name for p in products], ["Kale", "Apple"])

        kale = await api.products.get_product(self.client, self.kale["id"])
        self.assertEqual(kale.price, 3.0)
        self.assertTrue(kale.organic)

        fruits = await api.products.list_products_by_category(self.client, "fruits")
        self.assertEqual([p.name for p in fruits], ["Apple"])

        found = await api.products.search_products(self.client, "ka")
        self.assertEqual([p.name for p in found], ["Kale"])

        organic = await api.products.list_organic_products(self.client)
        self.assertEqual([p.name for p in organic], ["Kale"])

    async def test_farmer_manages_products(self):
        self.client.token = self.backend.issue_token(self.farmer)
        fid = self.farmer["id"]

        mine = await api.products.list_farmer_products(self.client, fid)
        self.assertEqual([p.id for p in mine], [self.kale["id"]])

        draft = Product(None, "Leeks", "Long", 2.0, 8, "vegetables", farmer_id=fid)
        created = await api.products.create_product(self.client, draft)
        self.assertIsNotNone(created.id)
        self.assertEqual(created.farmer_id, fid)

        updated = await api.products.update_product(
            self.client, created.id, Product(None, "Leeks", "Long", 2.5, 8, "vegetables")
        )
        self.assertEqual(updated.price, 2.5)

        await api.products.delete_product(self.client, created.id)
        with self.assertRaises(NotFoundError):
            await api.products.get_product(self.client, created.id)

    async def test_customer_cannot_create_products(self):
        customer = self.backend.add_user("c@example.com")
        self.client.token = self.backend.issue_token(customer)
        with self.assertRaises(AuthError) as ctx:
            await api.products.create_product(
                self.client, Product(None, "X", "", 1.0, 1, "misc")
            )
        self.assertEqual(ctx.exception.status, 403)


class CartServiceTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.client = make_client(self.backend)
        user = self.backend.add_user("ann@example.com")
        self.client.token = self.backend.issue_token(user)
        self.kale = self.backend.add_product("Kale", 3.0, quantity=5)

    def tearDown(self):
        self.client.close()

    async def test_cart_calls_return_full_cart(self):
        cart = await api.cart.get_cart(self.client)
        self.assertEqual(cart.items, ())

        cart = await api.cart.add_item(self.client, self.kale["id"], 2)
        self.assertEqual(cart.find(self.kale["id"]).quantity, 2)
        self.assertEqual(cart.find(self.kale["id"]).product_name, "Kale")

        cart = await api.cart.update_item(self.client, self.kale["id"], 4)
        self.assertEqual(cart.find(self.kale["id"]).quantity, 4)

        cart = await api.cart.remove_item(self.client, self.kale["id"])
        self.assertIsNone(cart.find(self.kale["id"]))

    async def test_clear_cart_returns_nothing(self):
        await api.cart.add_item(self.client, self.kale["id"], 1)
        self.assertIsNone(await api.cart.clear_cart(self.client))
        cart = await api.cart.get_cart(self.client)
        self.assertEqual(cart.items, ())

    async def test_empty_body_is_an_empty_cart(self):
        self.backend.fail_next[("GET", "/cart")] = (200, None)
        self.assertEqual(await api.cart.get_cart(self.client), Cart.empty())

    async def test_insufficient_stock(self):
        with self.assertRaises(BackendError) as ctx:
            await api.cart.add_item(self.client, self.kale["id"], 6)
        self.assertEqual(ctx.exception.status, 400)


class OrderServiceTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.backend = FakeBackend()
        self.client = make_client(self.backend)
        self.admin = self.backend.add_user("admin@example.com", role="ADMIN")
        self.client.token = self.backend.issue_token(self.admin)

    def tearDown(self):
        self.client.close()

    def payload(self, total=6.0):
        return {
            "customerId": self.admin["id"],
            "orderItems": [
                {
                    "productId": "p1",
                    "productName": "Kale",
                    "quantity": 2,
                    "unitPrice": total / 2,
                    "totalPrice": total,
                }
            ],
            "totalAmount": total,
            "shippingAddress": "1 Farm Road",
            "billingAddress": "1 Farm Road",
            "paymentMethod": "CASH",
            "notes": "",
        }

    async def test_order_lifecycle(self):
        order = await api.orders.create_order(self.client, self.payload())
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.total_amount, 6.0)
        self.assertEqual(order.items[0].product_name, "Kale")
        self.assertIsNotNone(order.order_date)

        self.assertEqual(
            [o.id for o in await api.orders.list_orders(self.client)], [order.id]
        )
        self.assertEqual(
            [o.id for o in await api.orders.list_customer_orders(self.client)],
            [order.id],
        )

        shipped = await api.orders.update_order_status(
            self.client, order.id, OrderStatus.SHIPPED
        )
        self.assertEqual(shipped.status, OrderStatus.SHIPPED)
        fetched = await api.orders.get_order(self.client, order.id)
        self.assertEqual(fetched.status, OrderStatus.SHIPPED)

        await api.orders.delete_order(self.client, order.id)
        with self.assertRaises(NotFoundError):
            await api.orders.get_order(self.client, order.id)

    async def test_customers_cannot_list_all_orders(self):
        customer = self.backend.add_user("c@example.com")
        self.client.token = self.backend.issue_token(customer)
        with self.assertRaises(AuthError):
            await api.orders.list_orders(self.client)


if __name__ == "__main__":
    unittest.main()
