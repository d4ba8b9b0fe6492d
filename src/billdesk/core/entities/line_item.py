"""Line item domain entities."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from billdesk.core.pricing import (
    amount_from_percent,
    compute_amount,
    compute_amount_from_discount_value,
    line_subtotal,
    percent_from_amount,
)


class PercentDiscount(BaseModel):
    """Discount expressed as a percentage of the line subtotal."""

    kind: Literal["percent"] = "percent"
    value: float = Field(default=0.0, ge=0, le=100)

    def percent_for(self, unit_price: float, quantity: float) -> float:
        return self.value

    def amount_for(self, unit_price: float, quantity: float) -> float:
        return amount_from_percent(unit_price, quantity, self.value)

    def apply(self, unit_price: float, quantity: float) -> float:
        return compute_amount(unit_price, quantity, self.value)


class AmountDiscount(BaseModel):
    """Discount expressed as an absolute value off the line subtotal."""

    kind: Literal["amount"] = "amount"
    value: float = Field(default=0.0, ge=0)

    def percent_for(self, unit_price: float, quantity: float) -> float:
        return percent_from_amount(unit_price, quantity, self.value)

    def amount_for(self, unit_price: float, quantity: float) -> float:
        return self.value

    def apply(self, unit_price: float, quantity: float) -> float:
        return compute_amount_from_discount_value(unit_price, quantity, self.value)


Discount = Annotated[PercentDiscount | AmountDiscount, Field(discriminator="kind")]

# Derived fields, never accepted as input
COMPUTED_FIELDS = frozenset({"subtotal", "discount_percentage", "discount_amount", "amount"})


class LineItem(BaseModel):
    """A committed product line on a bill or stock transfer.

    ``discount`` holds whichever representation was last set; the paired
    percentage/amount and the line ``amount`` are always derived from it and
    the current price and quantity.
    """

    id: int
    item_code: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)
    unit: str = ""
    category: str | None = None
    unit_price: float = Field(..., ge=0)
    quantity: float = Field(..., gt=0)
    free_quantity: float = Field(default=0.0, ge=0)
    discount: Discount = Field(default_factory=PercentDiscount)
    selling_price: float | None = Field(default=None, ge=0)  # supplier bills
    mrp: float | None = Field(default=None, ge=0)  # supplier bills

    @field_validator("item_code", "item_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def check_discount_within_subtotal(self) -> "LineItem":
        """An absolute discount may not exceed the line subtotal."""
        if isinstance(self.discount, AmountDiscount) and self.discount.value > self.subtotal:
            raise ValueError(
                f"discount amount {self.discount.value:g} exceeds line subtotal {self.subtotal:g}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def subtotal(self) -> float:
        return line_subtotal(self.unit_price, self.quantity)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def discount_percentage(self) -> float:
        return self.discount.percent_for(self.unit_price, self.quantity)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def discount_amount(self) -> float:
        return self.discount.amount_for(self.unit_price, self.quantity)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> float:
        return self.discount.apply(self.unit_price, self.quantity)

    def with_changes(self, **changes: Any) -> "LineItem":
        """Return a re-validated copy with ``changes`` applied."""
        data = self.model_dump(exclude=set(COMPUTED_FIELDS))
        data.update(changes)
        return LineItem.model_validate(data)


class DraftLineItem(BaseModel):
    """The not-yet-committed data-entry row.

    Numeric fields stay raw strings so partial input is tolerated; a blank
    string means the field has not been filled in.
    """

    item_code: str = ""
    item_name: str = ""
    unit_price: str = ""
    quantity: str = ""
    unit: str = ""
    discount_percentage: str = ""
    discount_amount: str = ""
    free_quantity: str = ""
    selling_price: str = ""
    mrp: str = ""
    category: str | None = None

    @field_validator(
        "unit_price",
        "quantity",
        "discount_percentage",
        "discount_amount",
        "free_quantity",
        "selling_price",
        "mrp",
        mode="before",
    )
    @classmethod
    def stringify_numbers(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """Names of required fields that are still blank."""
        return [name for name in required if not str(getattr(self, name) or "").strip()]
