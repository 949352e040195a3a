import asyncio
from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, LoadingIndicator, Markdown

import api.orders
import api.products
from api.errors import MarketError
from api.models import Order, Product
from utils.logger import get_logger
from utils.pure import orders_for_farmer
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmModal
from views.modal_product_form import ProductFormModal

_logger = get_logger(__name__)


class FarmerDashboardScreen(BaseScreen):
    """
    Farmers manage their own products and see orders that include them.

    Layout:
    - Summary stats at the top.
    - Product table with Add / Edit / Delete.
    - Orders containing any of the farmer's products.
    """

    def __init__(self) -> None:
        super().__init__()
        self._products: List[Product] = []
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-dashboard"):
            yield Markdown("", id="md-farmer-stats")
            yield LoadingIndicator(id="loading-dashboard")
            yield Label("[b]My Products[/b]")
            yield DataTable(id="table-my-products")
            with Horizontal(classes="hort-dashboard-buttons"):
                yield Button("Add Product", id="btn-add-product", variant="primary")
                yield Button("Edit", id="btn-edit-product")
                yield Button("Delete", id="btn-delete-product", variant="error")
                yield Button("Refresh", id="btn-refresh")
            yield Label("[b]Orders for My Products[/b]")
            yield DataTable(id="table-farmer-orders")

    def on_mount(self) -> None:
        products = self.query_one("#table-my-products", DataTable)
        products.cursor_type = "row"
        products.zebra_stripes = True
        products.add_columns(
            "Name", "Category", "Price ($)", "Stock", "Organic", "Available"
        )

        orders = self.query_one("#table-farmer-orders", DataTable)
        orders.cursor_type = "row"
        orders.add_columns("Order", "Date", "Status", "Items", "Total ($)")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_dashboard()

    @work(exclusive=True, group="dashboard")
    async def load_dashboard(self) -> None:
        user = self.app.state.user
        if user is None:
            return

        client = self.app.state.client
        loading = self.query_one("#loading-dashboard")
        loading.display = True
        try:
            products, orders = await asyncio.gather(
                api.products.list_farmer_products(client, user.id),
                api.orders.list_orders(client),
            )
        except MarketError as e:
            _logger.error(f"Error loading farmer dashboard: {e}")
            self.notify_error(e, "Loading dashboard")
            return
        finally:
            loading.display = False

        self._products = products
        self._orders = orders_for_farmer(orders, products)
        await self.render_dashboard()

    async def render_dashboard(self) -> None:
        available = sum(1 for p in self._products if p.available)
        await self.query_one("#md-farmer-stats", Markdown).update(
            "### Overview\n\n"
            f"- Total Products: {len(self._products)}\n"
            f"- Orders for My Products: {len(self._orders)}\n"
            f"- Available Products: {available}\n"
        )

        table = self.query_one("#table-my-products", DataTable)
        table.clear()
        for p in self._products:
            table.add_row(
                p.name,
                p.category,
                f"{p.price:.2f}",
                f"{p.quantity} {p.unit}",
                "Yes" if p.organic else "No",
                "Yes" if p.available else "No",
                key=p.id,
            )

        orders = self.query_one("#table-farmer-orders", DataTable)
        orders.clear()
        for o in self._orders:
            placed = o.order_date.strftime("%Y-%m-%d") if o.order_date else "-"
            orders.add_row(
                f"#{o.short_id}",
                placed,
                o.status.value,
                len(o.items),
                f"{o.total_amount:.2f}",
                key=o.id,
            )

        has_products = bool(self._products)
        self.query_one("#btn-edit-product").disabled = not has_products
        self.query_one("#btn-delete-product").disabled = not has_products

    def selected_product(self) -> Optional[Product]:
        table = self.query_one("#table-my-products", DataTable)
        if not self._products or table.cursor_row is None:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        for p in self._products:
            if p.id == row_key.value:
                return p
        return None

    @on(Button.Pressed, "#btn-add-product")
    @work(group="product-mutation")
    async def handle_add(self) -> None:
        user = self.app.state.user
        product = await self.app.push_screen_wait(ProductFormModal(user.id))
        if product is None:
            return
        try:
            created = await api.products.create_product(self.app.state.client, product)
        except MarketError as e:
            self.notify_error(e, "Creating product")
            return
        self.notify(f"Product {created.name} created.")
        self.load_dashboard()

    @on(Button.Pressed, "#btn-edit-product")
    @on(DataTable.RowSelected, "#table-my-products")
    @work(group="product-mutation")
    async def handle_edit(self) -> None:
        current = self.selected_product()
        if current is None:
            self.notify("Select a product first.", severity="warning")
            return

        user = self.app.state.user
        product = await self.app.push_screen_wait(ProductFormModal(user.id, current))
        if product is None:
            return
        try:
            await api.products.update_product(
                self.app.state.client, current.id, product
            )
        except MarketError as e:
            self.notify_error(e, "Updating product")
            return
        self.notify("Product updated successfully.")
        self.load_dashboard()

    @on(Button.Pressed, "#btn-delete-product")
    @work(group="product-mutation")
    async def handle_delete(self) -> None:
        current = self.selected_product()
        if current is None:
            self.notify("Select a product first.", severity="warning")
            return

        if not await self.app.push_screen_wait(
            ConfirmModal(f"Delete {current.name}? This cannot be undone.", "error")
        ):
            return
        try:
            await api.products.delete_product(self.app.state.client, current.id)
        except MarketError as e:
            self.notify_error(e, "Deleting product")
            return
        self.notify(f"Product {current.name} deleted.")
        self.load_dashboard()
