"""Application service: Receive Inventory use case.

Builds a ReceivingSession from per-line instructions, hands it to the
ReconciliationCommitter, and stores the purchase order it returns in
place of the old one.
"""

from __future__ import annotations

from datetime import date, datetime

from purchasing.application.dto import (
    LineReceivingSpec,
    PurchaseOrderDTO,
    purchase_order_to_dto,
)
from purchasing.domain.exceptions import EntityNotFoundError
from purchasing.domain.model.purchase_order import (
    AssociatedOrderRef,
    PurchaseOrder,
    PurchaseOrderLineItem,
)
from purchasing.domain.model.receiving_session import ReceivingSession
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)
from purchasing.domain.service.reconciliation_committer import (
    ReconciliationCommitter,
)

CLEAR_ASSIGNMENT = "none"


class ReceiveInventoryHandler:

    def __init__(
        self,
        po_repo: PurchaseOrderRepository,
        committer: ReconciliationCommitter,
    ) -> None:
        self._po_repo = po_repo
        self._committer = committer

    def handle(
        self,
        po_id: str,
        line_specs: list[LineReceivingSpec],
        received_by: str,
        received_date: date,
        now: datetime,
        accuracy_rating: int | None = None,
        delivery_rating: int | None = None,
        quality_issues: list[str] | None = None,
    ) -> PurchaseOrderDTO:
        purchase_order = self._po_repo.get_by_id(po_id)
        if purchase_order is None:
            raise EntityNotFoundError(f"Purchase order '{po_id}' not found")

        session = ReceivingSession(purchase_order)
        for spec in line_specs:
            self._apply(session, purchase_order, spec)

        updated = self._committer.commit(
            purchase_order,
            session,
            received_by=received_by,
            received_date=received_date,
            now=now,
            accuracy_rating=accuracy_rating,
            delivery_rating=delivery_rating,
            quality_issues=quality_issues,
        )
        self._po_repo.save(updated)
        return purchase_order_to_dto(updated)

    # --- Internal helpers -----------------------------------------------------

    def _apply(
        self,
        session: ReceivingSession,
        purchase_order: PurchaseOrder,
        spec: LineReceivingSpec,
    ) -> None:
        item = _resolve_line(purchase_order, spec.line)

        if spec.quick_fill_from is not None:
            order = _resolve_associated_order(item, spec.quick_fill_from)
            session.quick_fill_from_order(item.id, order.id)
        if spec.fill_remaining:
            session.fill_all_remaining(item.id)
        for size, qty in spec.sizes.items():
            session.set_size(item.id, size, qty)

        if spec.assign_to is not None:
            if spec.assign_to.strip().lower() == CLEAR_ASSIGNMENT:
                session.assign_to(item.id, None)
            else:
                order = _resolve_associated_order(item, spec.assign_to)
                session.assign_to(item.id, order.ref)


def _resolve_line(purchase_order: PurchaseOrder, line: str) -> PurchaseOrderLineItem:
    """Find a line by ID, falling back to its 1-based position."""
    for item in purchase_order.line_items:
        if item.id == line:
            return item
    if line.isdigit() and 1 <= int(line) <= len(purchase_order.line_items):
        return purchase_order.line_items[int(line) - 1]
    raise EntityNotFoundError(f"Line '{line}' not found on PO {purchase_order.po_number}")


def _resolve_associated_order(item: PurchaseOrderLineItem, ref: str) -> AssociatedOrderRef:
    """Find an associated order by ID or display number (case-insensitive)."""
    for order in item.associated_orders:
        if order.id == ref or order.display_number.lower() == ref.lower():
            return order
    raise EntityNotFoundError(
        f"Order '{ref}' is not associated with {item.style_name} / {item.color_name}"
    )
