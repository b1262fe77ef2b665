"""Source orders: the customer quotes and jobs that create garment demand.

They are owned by the sales side of the shop; the purchasing domain only
reads them when consolidating a purchase order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from purchasing.domain.exceptions import ValidationError
from purchasing.domain.model.value_objects import Money, SizeVector


UNKNOWN_COLOR = "Unknown"


class OrderKind(Enum):
    QUOTE = "quote"
    JOB = "job"


@dataclass(frozen=True)
class SourceLineItem:
    """One garment request on a quote or job.

    ``quantity`` defaults to the size total; an explicit quantity that
    disagrees with the sizes is rejected.
    """

    style_name: str
    brand_or_type_label: str
    color: str
    sizes: SizeVector
    unit_price: Money
    quantity: int | None = None

    def __post_init__(self) -> None:
        if not self.style_name or not self.style_name.strip():
            raise ValidationError("Style name is required")
        if self.quantity is None:
            object.__setattr__(self, "quantity", self.sizes.total)
        elif self.quantity != self.sizes.total:
            raise ValidationError(
                f"Quantity {self.quantity} for '{self.style_name}' does not match "
                f"size total {self.sizes.total}"
            )

    @property
    def consolidation_key(self) -> tuple[str, str]:
        return consolidation_key(self.style_name, self.color)


@dataclass(frozen=True)
class SourceOrder:
    """A quote or job selected for purchasing."""

    kind: OrderKind
    id: str
    display_number: str
    customer_name: str
    line_items: list[SourceLineItem] = field(default_factory=list)


def consolidation_key(style_name: str, color: str) -> tuple[str, str]:
    """Key that decides which source line items share one PO line."""
    return (style_name.strip(), (color or "").strip() or UNKNOWN_COLOR)
