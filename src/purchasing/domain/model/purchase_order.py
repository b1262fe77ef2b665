"""PurchaseOrder aggregate: the core of the domain.

A PurchaseOrder is the consolidated, supplier-facing order built from one
or more customer quotes/jobs.  It owns its line items, and each line item
owns an append-only ledger of receipt records.  Status is derived from
ordered vs received counts; only ``cancelled`` is set explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from purchasing.domain.exceptions import EntityNotFoundError, ValidationError
from purchasing.domain.model.source_order import OrderKind, consolidation_key
from purchasing.domain.model.value_objects import Money, SizeVector


class PurchaseOrderStatus(Enum):
    DRAFT = "draft"
    ORDERED = "ordered"
    PARTIALLY_RECEIVED = "partially-received"
    RECEIVED = "received"
    CANCELLED = "cancelled"


SUPPLIER_LABELS: dict[str, str] = {
    "ssactivewear": "S&S Activewear",
    "sanmar": "SanMar",
}


def supplier_label(supplier_id: str) -> str:
    return SUPPLIER_LABELS.get(supplier_id, supplier_id)


@dataclass(frozen=True)
class OrderRef:
    """Points at the quote or job a receipt is set aside for."""

    kind: OrderKind
    id: str
    display_number: str


@dataclass(frozen=True)
class AssociatedOrderRef:
    """Snapshot of what one quote/job contributed to a PO line at creation.

    Never touched by receiving.
    """

    kind: OrderKind
    id: str
    display_number: str
    customer_name: str
    sizes: SizeVector

    @property
    def ref(self) -> OrderRef:
        return OrderRef(kind=self.kind, id=self.id, display_number=self.display_number)


@dataclass(frozen=True)
class ReceiptRecord:
    """One physical delivery event against a PO line.  Append-only."""

    id: str
    sizes: SizeVector
    received_date: date
    received_by: str
    assigned_to: OrderRef | None = None

    @property
    def quantity(self) -> int:
        return self.sizes.total


@dataclass
class PurchaseOrderLineItem:
    """A consolidated garment line: one style/color from one supplier.

    ``sizes_ordered`` and ``unit_cost`` are fixed once the line is built.
    ``quantity_received`` moves only through ``record_receipt()`` so it
    always equals the sum of the ledger.
    """

    id: str
    supplier_id: str
    style_id: str
    style_name: str
    brand_name: str
    color_name: str
    sizes_ordered: SizeVector
    unit_cost: Money
    color_code: str = ""
    quantity_received: int = 0
    associated_orders: list[AssociatedOrderRef] = field(default_factory=list)
    received_items: list[ReceiptRecord] = field(default_factory=list)

    @property
    def quantity_ordered(self) -> int:
        return self.sizes_ordered.total

    @property
    def line_total(self) -> Money:
        return self.unit_cost * self.quantity_ordered

    @property
    def consolidation_key(self) -> tuple[str, str]:
        return consolidation_key(self.style_name, self.color_name)

    @property
    def sizes_received(self) -> SizeVector:
        return SizeVector.sum_of(record.sizes for record in self.received_items)

    @property
    def remaining_sizes(self) -> SizeVector:
        """Ordered minus received per size, never below zero."""
        return self.sizes_ordered - self.sizes_received

    def remaining(self, size: str) -> int:
        return self.remaining_sizes[size]

    @property
    def is_fully_received(self) -> bool:
        return self.quantity_received >= self.quantity_ordered

    def find_associated_order(self, order_id: str) -> AssociatedOrderRef:
        """First snapshot contributed by ``order_id``."""
        for order in self.associated_orders:
            if order.id == order_id:
                return order
        raise EntityNotFoundError(
            f"Order '{order_id}' is not associated with {self.style_name} / {self.color_name}"
        )

    def record_receipt(self, record: ReceiptRecord) -> None:
        """Append a receipt to the ledger."""
        if record.sizes.is_zero:
            raise ValidationError("Receipt must contain at least one unit")
        self.received_items.append(record)
        self.quantity_received += record.quantity


def derive_status(
    current: PurchaseOrderStatus,
    line_items: list[PurchaseOrderLineItem],
) -> PurchaseOrderStatus:
    """Status implied by ordered vs received totals.

    ``cancelled`` is terminal and returned unchanged.  When nothing has
    been received the prior status (draft/ordered) is kept, so a zero
    receipt never regresses it.
    """
    if current == PurchaseOrderStatus.CANCELLED:
        return current

    total_ordered = sum(item.quantity_ordered for item in line_items)
    total_received = sum(item.quantity_received for item in line_items)

    if total_ordered > 0 and total_received >= total_ordered:
        return PurchaseOrderStatus.RECEIVED
    if 0 < total_received < total_ordered:
        return PurchaseOrderStatus.PARTIALLY_RECEIVED
    return current


# ---------------------------------------------------------------------------
# Rating bounds for receiving feedback
# ---------------------------------------------------------------------------
ACCURACY_RATING_RANGE = (0, 100)
DELIVERY_RATING_RANGE = (1, 5)


@dataclass
class PurchaseOrder:
    """Aggregate root for supplier purchase orders.

    Built by ``OrderAggregator.consolidate()``.  The ``__init__`` stays
    simple so the repository can reconstitute persisted orders without
    re-validating.
    """

    id: str
    po_number: str
    supplier_id: str
    order_date: date
    line_items: list[PurchaseOrderLineItem]
    created_at: datetime
    updated_at: datetime
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    shipping: Money = field(default_factory=Money.zero)
    tax: Money = field(default_factory=Money.zero)
    expected_delivery_date: date | None = None
    actual_delivery_date: date | None = None
    notes: str | None = None
    tracking: str | None = None
    received_by: str | None = None
    accuracy_rating: int | None = None
    delivery_rating: int | None = None
    quality_issues: list[str] = field(default_factory=list)

    # --- State transitions ----------------------------------------------------

    def mark_ordered(self, now: datetime) -> None:
        """Transition DRAFT -> ORDERED once the PO is sent to the supplier."""
        if self.status != PurchaseOrderStatus.DRAFT:
            raise ValidationError(
                f"Cannot mark PO {self.po_number} as ordered, current status is "
                f"{self.status.value}, expected draft"
            )
        self.status = PurchaseOrderStatus.ORDERED
        self.updated_at = now

    def cancel(self, now: datetime) -> None:
        """Cancel the PO.  Receipts already recorded stay on the ledger."""
        if self.status == PurchaseOrderStatus.CANCELLED:
            raise ValidationError(f"PO {self.po_number} is already cancelled")
        if self.status == PurchaseOrderStatus.RECEIVED:
            raise ValidationError(f"Cannot cancel PO {self.po_number}, already received")
        self.status = PurchaseOrderStatus.CANCELLED
        self.updated_at = now

    def update_details(
        self,
        now: datetime,
        notes: str | None = None,
        tracking: str | None = None,
        expected_delivery_date: date | None = None,
    ) -> None:
        """Change the free-form PO fields; ``None`` leaves a field as is."""
        if notes is not None:
            self.notes = notes.strip() or None
        if tracking is not None:
            self.tracking = tracking.strip() or None
        if expected_delivery_date is not None:
            self.expected_delivery_date = expected_delivery_date
        self.updated_at = now

    def refresh_status(self) -> None:
        self.status = derive_status(self.status, self.line_items)

    def set_receiving_feedback(
        self,
        accuracy_rating: int | None = None,
        delivery_rating: int | None = None,
        quality_issues: list[str] | None = None,
    ) -> None:
        if accuracy_rating is not None:
            _check_rating("Accuracy rating", accuracy_rating, ACCURACY_RATING_RANGE)
            self.accuracy_rating = accuracy_rating
        if delivery_rating is not None:
            _check_rating("Delivery rating", delivery_rating, DELIVERY_RATING_RANGE)
            self.delivery_rating = delivery_rating
        if quality_issues is not None:
            self.quality_issues = clean_quality_issues(quality_issues)

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return Money.sum_of(item.line_total for item in self.line_items)

    @property
    def total(self) -> Money:
        return self.subtotal + self.shipping + self.tax

    @property
    def total_ordered(self) -> int:
        return sum(item.quantity_ordered for item in self.line_items)

    @property
    def total_received(self) -> int:
        return sum(item.quantity_received for item in self.line_items)

    @property
    def receive_progress(self) -> int:
        """Percent of ordered units received, rounded."""
        if self.total_ordered == 0:
            return 0
        return round(self.total_received * 100 / self.total_ordered)

    @property
    def associated_order_count(self) -> int:
        return len(
            {
                (order.kind, order.id)
                for item in self.line_items
                for order in item.associated_orders
            }
        )

    @property
    def supplier_label(self) -> str:
        return supplier_label(self.supplier_id)

    @property
    def is_cancelled(self) -> bool:
        return self.status == PurchaseOrderStatus.CANCELLED

    # --- Lookup ---------------------------------------------------------------

    def find_line_item(self, line_id: str) -> PurchaseOrderLineItem:
        for item in self.line_items:
            if item.id == line_id:
                return item
        raise EntityNotFoundError(f"Line item '{line_id}' not found on PO {self.po_number}")


def clean_quality_issues(issues: list[str]) -> list[str]:
    return [issue.strip() for issue in issues if issue and issue.strip()]


def _check_rating(name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValidationError(f"{name} must be an integer from {low} to {high}, got {value!r}")
