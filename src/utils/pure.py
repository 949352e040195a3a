from collections import Counter
from typing import Dict, Iterable, List, Literal, Optional, Sequence

from api.models import CartItem, Order, OrderStatus, Product


def filter_products(
    products: Iterable[Product],
    search_term: Optional[str] = "",
    category: Optional[str] = "",
) -> List[Product]:
    """
    Products whose name or description contains search_term (case-insensitive)
    and whose category equals category. Empty values don't constrain.
    """
    term = (search_term or "").lower()
    result = []
    for p in products:
        if term and term not in p.name.lower() and term not in p.description.lower():
            continue
        if category and p.category != category:
            continue
        result.append(p)
    return result


def categories_of(products: Iterable[Product]) -> List[str]:
    """Distinct categories, in the order they first appear."""
    return list(dict.fromkeys(p.category for p in products if p.category))


def cart_subtotal(items: Iterable[CartItem]) -> float:
    return sum((item.unit_price * item.quantity for item in items), 0.0)


def orders_for_farmer(
    orders: Iterable[Order], products: Iterable[Product]
) -> List[Order]:
    """Orders with at least one line for one of the farmer's products."""
    own_ids = {p.id for p in products}
    return [o for o in orders if any(i.product_id in own_ids for i in o.items)]


def order_stats(orders: Sequence[Order]) -> Dict[str, object]:
    by_status = Counter(o.status for o in orders)
    return {
        "total_orders": len(orders),
        "total_revenue": sum((o.total_amount for o in orders), 0.0),
        "by_status": {s: by_status.get(s, 0) for s in OrderStatus},
    }


def paginate(items: Sequence, page: int, page_size: int = 5) -> tuple[list, int]:
    """Return (items on page, page count). Pages start from 1."""
    page_cnt = max((len(items) + page_size - 1) // page_size, 1)
    page = max(1, min(page, page_cnt))
    start = (page - 1) * page_size
    return list(items[start : start + page_size]), page_cnt


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = [str(h) for h in headers]
    rows = [[_md_cell(c) for c in row] for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def _md_cell(value) -> str:
    # pipes would split the cell
    return str(value).replace("|", "\\|").replace("\n", " ")
