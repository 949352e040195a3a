from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, LoadingIndicator, Select

import api.products
from api.errors import MarketError
from api.models import Product
from utils.logger import get_logger
from utils.pure import categories_of, filter_products
from views.base_screen import BaseScreen
from views.modal_prod_detail import ProdDetailModal

_logger = get_logger(__name__)


class ProductsScreen(BaseScreen):
    """
    Product catalogue. The full list is fetched once per visit,
    search and category filtering happen locally on every change.
    """

    # only here to be displayed in footer
    BINDINGS = [
        Binding("enter", "noop", "View Product", show=True, key_display="⏎"),
    ]

    def __init__(self):
        super().__init__()
        self._products: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Input(
                id="input-search", placeholder="Search by name or description..."
            )
            yield Select([], prompt="All Categories", id="select-category")
            yield Button("Clear Filters", id="btn-clear-filters")
        yield LoadingIndicator(id="loading-products")
        yield DataTable(id="table-products")
        yield Label("", id="label-result-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Name", "Category", "Price", "Stock", "Organic")
        self.query_one("#input-search").focus()

    @on(ScreenResume)
    def handle_resume(self) -> None:
        self.load_products()

    @work(exclusive=True, group="products")
    async def load_products(self) -> None:
        loading = self.query_one("#loading-products")
        loading.display = True
        try:
            self._products = await api.products.list_products(self.app.state.client)
        except MarketError as e:
            # keep whatever was shown before
            _logger.error(f"Error loading products: {e}")
            self.notify_error(e, "Loading products")
        finally:
            loading.display = False

        select = self.query_one("#select-category", Select)
        current = select.value
        categories = categories_of(self._products)
        select.set_options([(c.capitalize(), c) for c in categories])
        if current in categories:
            select.value = current
        self.apply_filters()

    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-category")
    def apply_filters(self) -> None:
        search_term = self.query_one("#input-search", Input).value
        select = self.query_one("#select-category", Select)
        category = "" if select.is_blank() else select.value

        filtered = filter_products(self._products, search_term, category)

        table = self.query_one(DataTable)
        table.clear()
        for p in filtered:
            table.add_row(
                p.name,
                p.category,
                f"${p.price:.2f}/{p.unit}",
                p.quantity if p.available else "unavailable",
                "yes" if p.organic else "",
                key=p.id,
            )
        self.query_one("#label-result-cnt", Label).update(
            f"Showing {len(filtered)} of {len(self._products)} products"
        )

    @on(Button.Pressed, "#btn-clear-filters")
    def handle_clear_filters(self) -> None:
        self.query_one("#input-search", Input).value = ""
        self.query_one("#select-category", Select).clear()

    @on(DataTable.RowSelected)
    @work
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        await self.app.push_screen_wait(ProdDetailModal(event.row_key.value))

    def action_noop(self) -> None:
        pass
