"""Receiving session: staging area for one receiving action.

Holds a working size vector (and an optional order assignment) for every
line on a purchase order.  Nothing here touches the purchase order; the
ReconciliationCommitter applies a finished session.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from purchasing.domain.exceptions import EmptyReceiptError, EntityNotFoundError
from purchasing.domain.model.purchase_order import (
    OrderRef,
    PurchaseOrder,
    PurchaseOrderLineItem,
)
from purchasing.domain.model.value_objects import SizeVector


@dataclass
class ReceivingLine:
    line_id: str
    sizes: SizeVector = field(default_factory=SizeVector.zero)
    assigned_to: OrderRef | None = None


class ReceivingSession:
    """Working quantities for one receiving action against one PO.

    Quantities are only checked for being non-negative integers here;
    whether they may exceed what is still outstanding is the committer's
    call.
    """

    def __init__(self, purchase_order: PurchaseOrder) -> None:
        self._purchase_order = purchase_order
        self._lines: dict[str, ReceivingLine] = {
            item.id: ReceivingLine(line_id=item.id) for item in purchase_order.line_items
        }

    @property
    def purchase_order_id(self) -> str:
        return self._purchase_order.id

    @property
    def lines(self) -> list[ReceivingLine]:
        return list(self._lines.values())

    def working(self, line_id: str) -> SizeVector:
        return self._line(line_id).sizes

    def assigned_to(self, line_id: str) -> OrderRef | None:
        return self._line(line_id).assigned_to

    # --- Editing --------------------------------------------------------------

    def set_size(self, line_id: str, size: str, qty: int) -> None:
        line = self._line(line_id)
        line.sizes = line.sizes.with_size(size, qty)

    def set_sizes(self, line_id: str, sizes: SizeVector) -> None:
        self._line(line_id).sizes = sizes

    def fill_all_remaining(self, line_id: str) -> None:
        """Receive everything still outstanding on the line."""
        self._line(line_id).sizes = self.remaining_sizes(line_id)

    def quick_fill_from_order(self, line_id: str, associated_order_id: str) -> None:
        """Receive exactly what one associated order asked for, assigned to it.

        Overwrites whatever was entered for the line before.  When one order
        contributed several source lines with this key, only its first
        snapshot is copied.
        """
        line = self._line(line_id)
        order = self._po_line(line_id).find_associated_order(associated_order_id)
        line.sizes = order.sizes
        line.assigned_to = order.ref

    def assign_to(self, line_id: str, order_ref: OrderRef | None) -> None:
        self._line(line_id).assigned_to = order_ref

    # --- Queries --------------------------------------------------------------

    def remaining(self, line_id: str, size: str) -> int:
        return self._po_line(line_id).remaining(size)

    def remaining_sizes(self, line_id: str) -> SizeVector:
        # Always read from the ledger.
        return self._po_line(line_id).remaining_sizes

    def total_receiving(self) -> int:
        return sum(line.sizes.total for line in self._lines.values())

    def validate(self, received_by: str) -> None:
        """Commit preconditions: a receiver and at least one unit."""
        if not received_by or not received_by.strip():
            raise EmptyReceiptError("Enter who received the inventory")
        if self.total_receiving() == 0:
            raise EmptyReceiptError("Enter at least one quantity to receive")

    # --- Internal helpers -----------------------------------------------------

    def _line(self, line_id: str) -> ReceivingLine:
        line = self._lines.get(line_id)
        if line is None:
            raise EntityNotFoundError(
                f"Line item '{line_id}' not found on PO {self._purchase_order.po_number}"
            )
        return line

    def _po_line(self, line_id: str) -> PurchaseOrderLineItem:
        return self._purchase_order.find_line_item(line_id)
