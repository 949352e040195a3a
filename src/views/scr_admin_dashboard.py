from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import (
    Button,
    DataTable,
    Label,
    LoadingIndicator,
    MarkdownViewer,
    Select,
)

import api.orders
from api.errors import MarketError
from api.models import Order, OrderStatus
from utils.logger import get_logger
from utils.pure import generate_markdown_table, order_stats
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmModal

_logger = get_logger(__name__)

RECENT_COUNT = 5


def stats_markdown(orders: List[Order]) -> str:
    stats = order_stats(orders)
    by_status = stats["by_status"]
    md = (
        "### Overview\n\n"
        f"- Total Orders: {stats['total_orders']}\n"
        f"- Total Revenue: ${stats['total_revenue']:.2f}\n"
        f"- Pending Orders: {by_status[OrderStatus.PENDING]}\n"
        f"- Delivered Orders: {by_status[OrderStatus.DELIVERED]}\n\n"
    )
    rows = [[status.value.title(), count] for status, count in by_status.items()]
    md += "#### Order Status Distribution\n\n"
    md += generate_markdown_table(["Status", "Orders"], rows, ["l", "r"])

    recent = sorted(
        orders,
        key=lambda o: o.order_date.timestamp() if o.order_date else 0.0,
        reverse=True,
    )[:RECENT_COUNT]
    if recent:
        rows = [
            [f"#{o.short_id}", o.status.value, f"{o.total_amount:.2f}"]
            for o in recent
        ]
        md += "\n\n#### Recent Orders\n\n"
        md += generate_markdown_table(["Order", "Status", "Total ($)"], rows)
    return md


class AdminDashboardScreen(BaseScreen):
    """
    Admins see order statistics for the whole market and move orders
    through their lifecycle.
    """

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-dashboard"):
            yield MarkdownViewer(id="md-admin-stats", show_table_of_contents=False)
            yield LoadingIndicator(id="loading-dashboard")
            yield Label("[b]All Orders[/b]")
            yield DataTable(id="table-all-orders")
            with Horizontal(classes="hort-dashboard-buttons"):
                yield Select(
                    [(s.value.title(), s) for s in OrderStatus],
                    prompt="Set status",
                    id="select-order-status",
                )
                yield Button("Update Status", id="btn-update-status", variant="primary")
                yield Button("Delete Order", id="btn-delete-order", variant="error")
                yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one("#table-all-orders", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Customer", "Date", "Status", "Items", "Total ($)")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_orders()

    @work(exclusive=True, group="dashboard")
    async def load_orders(self) -> None:
        if self.app.state.user is None:
            return

        loading = self.query_one("#loading-dashboard")
        loading.display = True
        try:
            orders = await api.orders.list_orders(self.app.state.client)
        except MarketError as e:
            _logger.error(f"Error loading orders: {e}")
            self.notify_error(e, "Loading orders")
            return
        finally:
            loading.display = False

        self._orders = orders
        self.render_orders()

    def render_orders(self) -> None:
        self.query_one("#md-admin-stats", MarkdownViewer).document.update(
            stats_markdown(self._orders)
        )

        table = self.query_one("#table-all-orders", DataTable)
        table.clear()
        for o in self._orders:
            placed = o.order_date.strftime("%Y-%m-%d") if o.order_date else "-"
            table.add_row(
                f"#{o.short_id}",
                o.customer_id,
                placed,
                o.status.value,
                len(o.items),
                f"{o.total_amount:.2f}",
                key=o.id,
            )

        self.query_one("#btn-update-status").disabled = not self._orders
        self.query_one("#btn-delete-order").disabled = not self._orders

    def selected_order(self) -> Optional[Order]:
        table = self.query_one("#table-all-orders", DataTable)
        if not self._orders:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        for o in self._orders:
            if o.id == row_key.value:
                return o
        return None

    @on(DataTable.RowHighlighted, "#table-all-orders")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        for o in self._orders:
            if o.id == event.row_key.value:
                self.query_one("#select-order-status", Select).value = o.status
                break

    @on(Button.Pressed, "#btn-update-status")
    @work(group="order-mutation")
    async def handle_update_status(self) -> None:
        order = self.selected_order()
        select = self.query_one("#select-order-status", Select)
        if order is None or select.is_blank():
            self.notify("Select an order and a status first.", severity="warning")
            return

        status = OrderStatus(select.value)
        if status == order.status:
            self.notify("Nothing to update.", severity="warning")
            return
        try:
            await api.orders.update_order_status(
                self.app.state.client, order.id, status
            )
        except MarketError as e:
            self.notify_error(e, "Updating order status")
            return
        self.notify(f"Order #{order.short_id} is now {status.value}.")
        self.load_orders()

    @on(Button.Pressed, "#btn-delete-order")
    @work(group="order-mutation")
    async def handle_delete(self) -> None:
        order = self.selected_order()
        if order is None:
            self.notify("Select an order first.", severity="warning")
            return

        if not await self.app.push_screen_wait(
            ConfirmModal(f"Delete order #{order.short_id}?", "error")
        ):
            return
        try:
            await api.orders.delete_order(self.app.state.client, order.id)
        except MarketError as e:
            self.notify_error(e, "Deleting order")
            return
        self.notify(f"Order #{order.short_id} deleted.")
        self.load_orders()
