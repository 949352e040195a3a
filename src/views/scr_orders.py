from typing import List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.reactive import reactive
from textual.widgets import Button, DataTable, Label, LoadingIndicator, MarkdownViewer

import api.orders
from api.errors import MarketError
from api.models import Order
from utils.logger import get_logger
from utils.pure import generate_markdown_table, paginate
from views.base_screen import BaseScreen

_logger = get_logger(__name__)

PAGE_SIZE = 5


def order_detail_markdown(order: Optional[Order]) -> str:
    if order is None:
        return "### Select an order to view its details."

    placed = "-"
    if order.order_date:
        placed = order.order_date.strftime("%B %d, %Y %H:%M")
    header = (
        f"### Order #{order.short_id}  ({order.status.value})\n"
        f"Placed on: {placed}  \n"
        f"Payment: {order.payment_method or '-'}  \n"
        f"Ship To: {order.shipping_address or '-'}\n\n"
    )
    rows = [
        [
            item.product_name,
            item.quantity,
            f"{item.unit_price:.2f}",
            f"{item.total_price:.2f}",
        ]
        for item in order.items
    ]
    table = generate_markdown_table(
        ["Product", "Qty", "Unit Price", "Line Total"], rows, ["l", "r", "r", "r"]
    )
    footer = f"\n\n**Grand Total:** ${order.total_amount:.2f}"
    if order.notes:
        footer += f"\n\n**Notes:** {order.notes}"
    return header + table + footer


class OrdersScreen(BaseScreen):
    """
    Customers browse their order history, newest first, 5 per page.

    Layout:
    - Markdown detail view at the top, showing the highlighted order.
    - Orders table below with Prev/Next.
    """

    BINDINGS = [
        Binding("enter", "noop", "View Order Detail", show=True, key_display="⏎"),
    ]

    page_idx = reactive(1)
    page_cnt = reactive(1)

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []
        self._page_orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield LoadingIndicator(id="loading-orders")
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("<", id="btn-prev")
            yield Label(" 1 / 1 ", id="label-page")
            yield Button(">", id="btn-next")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Date", "Status", "Items", "Total ($)")

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_orders()

    @work(exclusive=True, group="orders")
    async def load_orders(self) -> None:
        if not self.app.state.session.is_authenticated:
            self._orders = []
            self.render_page()
            return

        loading = self.query_one("#loading-orders")
        loading.display = True
        try:
            orders = await api.orders.list_customer_orders(self.app.state.client)
        except MarketError as e:
            _logger.error(f"Error loading orders: {e}")
            self.notify_error(e, "Loading orders")
            return
        finally:
            loading.display = False

        orders.sort(
            key=lambda o: o.order_date.timestamp() if o.order_date else 0.0,
            reverse=True,
        )
        self._orders = orders
        self.page_idx = 1
        self.render_page()

    def watch_page_idx(self, old: int, new: int) -> None:
        self.render_page()

    def render_page(self) -> None:
        self._page_orders, self.page_cnt = paginate(
            self._orders, self.page_idx, PAGE_SIZE
        )

        table = self.query_one(DataTable)
        table.clear()
        for o in self._page_orders:
            placed = o.order_date.strftime("%Y-%m-%d") if o.order_date else "-"
            table.add_row(
                f"#{o.short_id}",
                placed,
                o.status.value,
                len(o.items),
                f"{o.total_amount:.2f}",
                key=o.id,
            )

        self.query_one("#label-page", Label).update(
            f" {self.page_idx} / {self.page_cnt} "
        )
        self.query_one("#btn-prev", Button).disabled = self.page_idx <= 1
        self.query_one("#btn-next", Button).disabled = self.page_idx >= self.page_cnt

        if self._page_orders:
            table.move_cursor(row=0)
            self.render_detail(self._page_orders[0])
        elif not self._orders:
            self.query_one("#md-order-detail", MarkdownViewer).document.update(
                "### No orders yet\n\nStart shopping to see your orders here!"
            )

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        for o in self._page_orders:
            if o.id == event.row_key.value:
                self.render_detail(o)
                break

    def render_detail(self, order: Optional[Order]) -> None:
        self.query_one("#md-order-detail", MarkdownViewer).document.update(
            order_detail_markdown(order)
        )

    @on(Button.Pressed, "#btn-prev")
    def handle_prev(self) -> None:
        if self.page_idx > 1:
            self.page_idx -= 1

    @on(Button.Pressed, "#btn-next")
    def handle_next(self) -> None:
        if self.page_idx < self.page_cnt:
            self.page_idx += 1

    def action_noop(self) -> None:
        pass
