import unittest
from datetime import datetime

from api.errors import ValidationError
from api.models import (
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    Product,
    Role,
    User,
)
from utils.forms import (
    CheckoutForm,
    ProductForm,
    update_form,
    validate_checkout_form,
)
from utils.pure import (
    cart_subtotal,
    categories_of,
    filter_products,
    generate_markdown_table,
    order_stats,
    orders_for_farmer,
    paginate,
)


def product(pid, name, category, description="", price=1.0, quantity=10):
    return Product(
        id=pid,
        name=name,
        description=description,
        price=price,
        quantity=quantity,
        category=category,
    )


def order(oid, status, total, product_ids=()):
    return Order(
        id=oid,
        customer_id="c1",
        items=tuple(OrderItem(p, p, 1, total, total) for p in product_ids),
        total_amount=total,
        status=status,
        order_date=datetime(2024, 5, 1),
    )


class FilterTestCase(unittest.TestCase):
    def setUp(self):
        self.products = [
            product("1", "Apple", "fruits", "Crisp red apple"),
            product("2", "Carrot", "vegetables", "Orange root"),
            product("3", "Pineapple", "fruits", "Tropical"),
        ]

    def test_search_matches_name_or_description_case_insensitive(self):
        names = [p.name for p in filter_products(self.products, "APPLE")]
        self.assertEqual(names, ["Apple", "Pineapple"])

        names = [p.name for p in filter_products(self.products, "root")]
        self.assertEqual(names, ["Carrot"])

    def test_apple_carrot(self):
        products = [
            product("1", "Apple", "fruit", "Red fruit"),
            product("2", "Carrot", "veg", "Orange veg"),
        ]
        self.assertEqual([p.name for p in filter_products(products, "app")], ["Apple"])
        self.assertEqual([p.name for p in filter_products(products, "", "veg")], ["Carrot"])
        self.assertEqual(filter_products(products, "app", "veg"), [])

    def test_category_must_match_exactly(self):
        names = [p.name for p in filter_products(self.products, "", "fruits")]
        self.assertEqual(names, ["Apple", "Pineapple"])
        self.assertEqual(filter_products(self.products, "", "fruit"), [])

    def test_both_filters_combine(self):
        names = [p.name for p in filter_products(self.products, "apple", "vegetables")]
        self.assertEqual(names, [])

    def test_empty_filters_keep_everything_in_order(self):
        self.assertEqual(filter_products(self.products, "", ""), self.products)
        self.assertEqual(filter_products(self.products, None, None), self.products)

    def test_categories_are_distinct_in_first_seen_order(self):
        self.assertEqual(categories_of(self.products), ["fruits", "vegetables"])
        self.assertEqual(categories_of([]), [])


class CartMathTestCase(unittest.TestCase):
    def test_subtotal(self):
        items = [
            CartItem("1", "Apple", 2.50, 3),
            CartItem("2", "Carrot", 1.00, 2),
        ]
        self.assertAlmostEqual(cart_subtotal(items), 9.50)
        self.assertEqual(cart_subtotal([]), 0.0)

    def test_line_total(self):
        self.assertAlmostEqual(CartItem("1", "Apple", 2.50, 4).line_total, 10.0)


class OrderHelpersTestCase(unittest.TestCase):
    def test_order_stats(self):
        orders = [
            order("a", OrderStatus.PENDING, 10.0),
            order("b", OrderStatus.PENDING, 5.5),
            order("c", OrderStatus.DELIVERED, 4.5),
        ]
        stats = order_stats(orders)
        self.assertEqual(stats["total_orders"], 3)
        self.assertAlmostEqual(stats["total_revenue"], 20.0)
        self.assertEqual(stats["by_status"][OrderStatus.PENDING], 2)
        self.assertEqual(stats["by_status"][OrderStatus.DELIVERED], 1)
        self.assertEqual(stats["by_status"][OrderStatus.CANCELLED], 0)

    def test_order_stats_empty(self):
        stats = order_stats([])
        self.assertEqual(stats["total_orders"], 0)
        self.assertEqual(stats["total_revenue"], 0.0)

    def test_orders_for_farmer(self):
        mine = [product("p1", "Kale", "vegetables")]
        orders = [
            order("a", OrderStatus.PENDING, 3.0, ["p1", "p9"]),
            order("b", OrderStatus.PENDING, 3.0, ["p9"]),
        ]
        self.assertEqual([o.id for o in orders_for_farmer(orders, mine)], ["a"])

    def test_orders_for_farmer_with_numeric_ids(self):
        kale = Product.from_json(
            {"id": 7, "name": "Kale", "price": 3, "quantity": 4, "farmerId": 12}
        )
        placed = Order.from_json(
            {
                "id": 99,
                "orderItems": [{"productId": 7, "productName": "Kale", "quantity": 1}],
                "totalAmount": 3,
            }
        )
        self.assertEqual(kale.farmer_id, "12")
        self.assertEqual(placed.items[0].product_id, "7")
        self.assertEqual(orders_for_farmer([placed], [kale]), [placed])

    def test_short_id(self):
        o = order("order-00000042", OrderStatus.PENDING, 1.0)
        self.assertEqual(o.short_id, "00000042")


class PaginateTestCase(unittest.TestCase):
    def test_pages(self):
        items = list(range(12))
        self.assertEqual(paginate(items, 1), ([0, 1, 2, 3, 4], 3))
        self.assertEqual(paginate(items, 3), ([10, 11], 3))

    def test_out_of_range_pages_clamp(self):
        items = list(range(7))
        self.assertEqual(paginate(items, 9), ([5, 6], 2))
        self.assertEqual(paginate(items, 0), ([0, 1, 2, 3, 4], 2))
        self.assertEqual(paginate([], 1), ([], 1))


class MarkdownTableTestCase(unittest.TestCase):
    def test_table(self):
        md = generate_markdown_table(["A", "B"], [[1, "x"]], ["l", "r"])
        self.assertEqual(md, "| A | B |\n| :--- | ---: |\n| 1 | x |")

    def test_first_row_as_header(self):
        md = generate_markdown_table(None, [["k", "v"], ["Name", "Kale"]], ["l", "l"])
        self.assertTrue(md.startswith("| k | v |"))

    def test_cells_are_escaped(self):
        md = generate_markdown_table(["A"], [["a|b\nc"]], ["l"])
        self.assertIn("a\\|b c", md)

    def test_misaligned_aligns(self):
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [[1, 2]], ["l"])

    def test_empty_rows(self):
        self.assertEqual(generate_markdown_table(["A"], []), "")


class FormsTestCase(unittest.TestCase):
    def test_update_form_returns_copy(self):
        form = CheckoutForm()
        changed = update_form(form, "shipping_address", "12 Orchard Lane")
        self.assertEqual(form.shipping_address, "")
        self.assertEqual(changed.shipping_address, "12 Orchard Lane")

    def test_update_form_unknown_field(self):
        with self.assertRaises(KeyError):
            update_form(CheckoutForm(), "coupon", "FREE")

    def test_checkout_form_prefills_user_address(self):
        user = User("u1", "a@b.c", "Ann", Role.CUSTOMER, "5 Mill St")
        form = CheckoutForm.for_user(user)
        self.assertEqual(form.shipping_address, "5 Mill St")
        self.assertEqual(form.billing_address, "5 Mill St")
        self.assertEqual(CheckoutForm.for_user(None).shipping_address, "")

    def test_validate_checkout_form(self):
        errors = validate_checkout_form(CheckoutForm(shipping_address="  "))
        self.assertEqual(set(errors), {"shipping_address", "billing_address"})

        ok = CheckoutForm("a", "b", PaymentMethod.CARD)
        self.assertEqual(validate_checkout_form(ok), {})

        bad = CheckoutForm("a", "b", "BITCOIN")
        self.assertIn("payment_method", validate_checkout_form(bad))

    def test_product_form_to_product(self):
        form = ProductForm(
            name=" Kale ",
            description="Curly",
            price="3.25",
            quantity="12",
            category="vegetables",
        )
        prod = form.to_product("farmer-1")
        self.assertEqual(prod.name, "Kale")
        self.assertEqual(prod.price, 3.25)
        self.assertEqual(prod.quantity, 12)
        self.assertEqual(prod.farmer_id, "farmer-1")
        self.assertIsNone(prod.id)

    def test_product_form_rejects_bad_input(self):
        base = ProductForm("Kale", "Curly", "3", "1", "vegetables")
        for field, value in [
            ("name", ""),
            ("price", "cheap"),
            ("quantity", "1.5"),
            ("price", "-1"),
        ]:
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    update_form(base, field, value).to_product("f1")

    def test_product_form_round_trip_from_product(self):
        prod = product("p1", "Kale", "vegetables", "Curly", price=3.0, quantity=4)
        form = ProductForm.from_product(prod)
        self.assertEqual(form.to_product(None, "p1"), prod)


if __name__ == "__main__":
    unittest.main()
