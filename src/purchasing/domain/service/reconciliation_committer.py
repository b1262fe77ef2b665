"""Domain service: Reconciliation Committer.

Applies a finished ReceivingSession to a PurchaseOrder: one new receipt
record per line that is receiving something, running totals bumped,
status re-derived.

Everything is validated before anything is written, so a bad session never
leaves the purchase order half-received.  Mutation happens on a copy, so
the caller's instance is never changed and the returned order replaces it
wholesale.
"""

from __future__ import annotations

import copy
import logging
from datetime import date, datetime

from purchasing.domain.exceptions import (
    EntityNotFoundError,
    OverReceiptError,
    ValidationError,
)
from purchasing.domain.model.purchase_order import (
    PurchaseOrder,
    PurchaseOrderLineItem,
    ReceiptRecord,
)
from purchasing.domain.model.receiving_session import ReceivingLine, ReceivingSession
from purchasing.domain.service.id_generator import IdGenerator

logger = logging.getLogger(__name__)


class ReconciliationCommitter:

    def __init__(self, id_generator: IdGenerator, allow_over_receipt: bool = False) -> None:
        self._ids = id_generator
        self._allow_over_receipt = allow_over_receipt

    def commit(
        self,
        purchase_order: PurchaseOrder,
        session: ReceivingSession,
        received_by: str,
        received_date: date,
        now: datetime,
        accuracy_rating: int | None = None,
        delivery_rating: int | None = None,
        quality_issues: list[str] | None = None,
    ) -> PurchaseOrder:
        """Return a new PurchaseOrder with the session's receipts applied."""
        # Phase 1: validate everything against the untouched order
        if session.purchase_order_id != purchase_order.id:
            raise ValidationError(
                f"Receiving session does not belong to PO {purchase_order.po_number}"
            )
        if purchase_order.is_cancelled:
            raise ValidationError(
                f"Cannot receive against PO {purchase_order.po_number}: it is cancelled"
            )
        session.validate(received_by)

        receiving: list[ReceivingLine] = []
        for line in session.lines:
            if line.sizes.is_zero:
                continue  # no empty ledger entries
            item = purchase_order.find_line_item(line.line_id)
            if not self._allow_over_receipt:
                self._check_remaining(item, line)
            self._warn_on_assignment_overage(item, line)
            receiving.append(line)

        # Phase 2: mutate a copy
        updated = copy.deepcopy(purchase_order)
        updated.set_receiving_feedback(
            accuracy_rating=accuracy_rating,
            delivery_rating=delivery_rating,
            quality_issues=quality_issues,
        )

        receiver = received_by.strip()
        for line in receiving:
            record = ReceiptRecord(
                id=self._ids.next("ri"),
                sizes=line.sizes,
                received_date=received_date,
                received_by=receiver,
                assigned_to=line.assigned_to,
            )
            updated.find_line_item(line.line_id).record_receipt(record)

        updated.refresh_status()
        updated.actual_delivery_date = received_date
        updated.received_by = receiver
        updated.updated_at = now

        logger.info(
            "Received %d unit(s) on %d line(s) of %s by %s; status %s -> %s",
            session.total_receiving(),
            len(receiving),
            updated.po_number,
            receiver,
            purchase_order.status.value,
            updated.status.value,
        )
        return updated

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _check_remaining(item: PurchaseOrderLineItem, line: ReceivingLine) -> None:
        remaining = item.remaining_sizes
        over = line.sizes.exceeds(remaining)
        if over:
            detail = ", ".join(
                f"{size} {line.sizes[size]} > {remaining[size]} remaining" for size in over
            )
            raise OverReceiptError(
                f"Cannot receive more than ordered for {item.style_name} / "
                f"{item.color_name}: {detail}"
            )

    @staticmethod
    def _warn_on_assignment_overage(item: PurchaseOrderLineItem, line: ReceivingLine) -> None:
        # Assignments are for picking only; they never block a receipt.
        if line.assigned_to is None:
            return
        try:
            order = item.find_associated_order(line.assigned_to.id)
        except EntityNotFoundError:
            logger.warning(
                "Line %s assigned to %s, which did not contribute to it",
                item.id,
                line.assigned_to.display_number,
            )
            return
        over = line.sizes.exceeds(order.sizes)
        if over:
            logger.warning(
                "Line %s assigns more than %s ordered in size(s) %s",
                item.id,
                order.display_number,
                ", ".join(over),
            )
