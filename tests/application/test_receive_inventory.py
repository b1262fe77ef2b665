"""Integration tests for the ReceiveInventory use case."""

from datetime import date, datetime, timezone

import pytest

from purchasing.application.dto import LineReceivingSpec
from purchasing.application.receive_inventory import ReceiveInventoryHandler
from purchasing.domain.exceptions import (
    EmptyReceiptError,
    EntityNotFoundError,
    OverReceiptError,
)
from purchasing.domain.model.purchase_order import PurchaseOrderStatus
from purchasing.domain.model.source_order import OrderKind
from purchasing.domain.service.reconciliation_committer import (
    ReconciliationCommitter,
)
from tests.fakes import FakePurchaseOrderRepository, SequentialIdGenerator
from tests.samples import sample_po

DELIVERED = date(2024, 3, 6)
LATER = datetime(2024, 3, 6, 15, 0, tzinfo=timezone.utc)


def _setup(allow_over_receipt=False):
    po_repo = FakePurchaseOrderRepository()
    po = sample_po()
    po.mark_ordered(LATER)
    po_repo.save(po)
    committer = ReconciliationCommitter(SequentialIdGenerator(), allow_over_receipt)
    return ReceiveInventoryHandler(po_repo, committer), po_repo, po


class TestReceiveInventory:

    def test_explicit_sizes_by_line_number(self):
        handler, po_repo, po = _setup()

        dto = handler.handle(
            po.id,
            [LineReceivingSpec(line="1", sizes={"M": 10, "L": 10})],
            received_by="Alice",
            received_date=DELIVERED,
            now=LATER,
        )

        assert dto.status == "partially-received"
        assert dto.total_received == 20
        assert dto.progress == 67
        assert dto.items[0].receipts[0].sizes == "M:10, L:10"
        assert po_repo.get_by_id(po.id).status == PurchaseOrderStatus.PARTIALLY_RECEIVED

    def test_fill_remaining_completes_po(self):
        handler, po_repo, po = _setup()
        line_id = po.line_items[0].id

        handler.handle(po.id, [LineReceivingSpec(line=line_id, sizes={"M": 10})], "Alice", DELIVERED, LATER)
        dto = handler.handle(po.id, [LineReceivingSpec(line=line_id, fill_remaining=True)], "Bob", DELIVERED, LATER)

        assert dto.status == "received"
        assert dto.items[0].remaining == "-"
        assert dto.received_by == "Bob"
        assert [r.received_by for r in dto.items[0].receipts] == ["Alice", "Bob"]

    def test_quick_fill_by_order_number(self):
        handler, po_repo, po = _setup()

        dto = handler.handle(
            po.po_number,
            [LineReceivingSpec(line="1", quick_fill_from="j-2002")],
            received_by="Alice",
            received_date=DELIVERED,
            now=LATER,
        )

        receipt = dto.items[0].receipts[0]
        assert receipt.sizes == "L:5, XL:5"
        assert receipt.assigned_to == "J-2002"
        saved = po_repo.get_by_id(po.id).line_items[0].received_items[0]
        assert saved.assigned_to.kind == OrderKind.JOB

    def test_explicit_sizes_override_quick_fill_and_clear_assignment(self):
        handler, _, po = _setup()

        dto = handler.handle(
            po.id,
            [LineReceivingSpec(line="1", quick_fill_from="q1", sizes={"L": 2}, assign_to="none")],
            received_by="Alice",
            received_date=DELIVERED,
            now=LATER,
        )

        receipt = dto.items[0].receipts[0]
        assert receipt.sizes == "M:10, L:2"
        assert receipt.assigned_to is None

    def test_feedback_passed_through(self):
        handler, _, po = _setup()
        dto = handler.handle(
            po.id,
            [LineReceivingSpec(line="1", sizes={"M": 1})],
            received_by="Alice",
            received_date=DELIVERED,
            now=LATER,
            accuracy_rating=80,
            quality_issues=["Box crushed"],
        )
        assert dto.quality_issues == ["Box crushed"]


class TestReceiveInventoryErrors:

    def test_unknown_po(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            handler.handle("po-404", [], "Alice", DELIVERED, LATER)

    def test_unknown_line(self):
        handler, _, po = _setup()
        with pytest.raises(EntityNotFoundError, match="Line '7'"):
            handler.handle(po.id, [LineReceivingSpec(line="7", sizes={"M": 1})], "Alice", DELIVERED, LATER)

    def test_unknown_assignment_target(self):
        handler, _, po = _setup()
        with pytest.raises(EntityNotFoundError, match="not associated"):
            handler.handle(
                po.id,
                [LineReceivingSpec(line="1", sizes={"M": 1}, assign_to="Q-9999")],
                "Alice",
                DELIVERED,
                LATER,
            )

    def test_nothing_to_receive_leaves_po_unchanged(self):
        handler, po_repo, po = _setup()
        with pytest.raises(EmptyReceiptError):
            handler.handle(po.id, [LineReceivingSpec(line="1")], "Alice", DELIVERED, LATER)
        assert po_repo.get_by_id(po.id).status == PurchaseOrderStatus.ORDERED

    def test_over_receipt_rejected(self):
        handler, po_repo, po = _setup()
        with pytest.raises(OverReceiptError):
            handler.handle(po.id, [LineReceivingSpec(line="1", sizes={"XL": 6})], "Alice", DELIVERED, LATER)
        assert po_repo.get_by_id(po.id).total_received == 0

    def test_over_receipt_allowed_when_configured(self):
        handler, _, po = _setup(allow_over_receipt=True)
        dto = handler.handle(po.id, [LineReceivingSpec(line="1", sizes={"XL": 40})], "Alice", DELIVERED, LATER)
        assert dto.total_received == 40
        assert dto.status == "received"
