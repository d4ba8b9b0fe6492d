"""Stock availability entities."""

from collections.abc import Iterable

from pydantic import BaseModel, Field


class StockLocationLevel(BaseModel):
    """Quantity of one item held at one stock location."""

    location_id: int
    location_name: str = ""
    quantity: float = 0.0


class StockAvailability(BaseModel):
    """Read-only snapshot of an item's stock across locations."""

    item_code: str
    item_name: str = ""
    unit_price: float = 0.0
    unit: str = ""
    locations: list[StockLocationLevel] = Field(default_factory=list)

    @property
    def available_quantity(self) -> float:
        """Total quantity across every location."""
        return sum(level.quantity for level in self.locations)

    def available_at(self, location_ids: Iterable[int]) -> float:
        """Total quantity across the given locations only."""
        wanted = set(location_ids)
        return sum(level.quantity for level in self.locations if level.location_id in wanted)


# item_code -> available quantity
AvailabilityTable = dict[str, float]
