"""Stock availability gates for line-item entry."""

from collections.abc import Iterable

from billdesk.core.entities.line_item import LineItem
from billdesk.core.entities.stock import AvailabilityTable, StockAvailability


def is_within_availability(requested: float, available: float) -> bool:
    """True when ``0 < requested <= available``."""
    return 0 < requested <= available


def is_already_committed(
    item_code: str,
    items: Iterable[LineItem],
    exclude_id: int | None = None,
) -> bool:
    """True if a committed line other than ``exclude_id`` already uses ``item_code``."""
    code = item_code.strip()
    return any(item.item_code == code and item.id != exclude_id for item in items)


def build_availability_table(
    stocks: Iterable[StockAvailability],
    location_ids: Iterable[int] | None = None,
) -> AvailabilityTable:
    """Collapse per-location stock into ``item_code -> available quantity``.

    With ``location_ids`` only those locations count (a transfer draws from
    its source location alone). Repeated item codes are summed.
    """
    wanted = list(location_ids) if location_ids is not None else None
    table: AvailabilityTable = {}
    for stock in stocks:
        qty = stock.available_quantity if wanted is None else stock.available_at(wanted)
        table[stock.item_code] = table.get(stock.item_code, 0.0) + qty
    return table
