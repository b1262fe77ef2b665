"""Integration tests for the CreatePurchaseOrder use case."""

from datetime import date

import pytest

from purchasing.application.create_purchase_order import CreatePurchaseOrderHandler
from purchasing.application.dto import SourceOrderSelection
from purchasing.domain.exceptions import (
    EmptySelectionError,
    EntityNotFoundError,
    ValidationError,
)
from tests.fakes import (
    FakePurchaseOrderRepository,
    FakeSourceOrderRepository,
    SequentialIdGenerator,
)
from tests.samples import NOW, ORDER_DATE, job_j2, quote_q1


def _setup():
    po_repo = FakePurchaseOrderRepository()
    source_repo = FakeSourceOrderRepository([quote_q1(), job_j2()])
    handler = CreatePurchaseOrderHandler(po_repo, source_repo, SequentialIdGenerator())
    return handler, po_repo


class TestCreatePurchaseOrderHappyPath:

    def test_create_consolidates_and_persists(self):
        handler, po_repo = _setup()

        dto = handler.handle(
            [SourceOrderSelection("quote", "q1"), SourceOrderSelection("job", "j2")],
            supplier_id="ssactivewear",
            order_date=ORDER_DATE,
            now=NOW,
            shipping="10.00",
            tax="2.50",
        )

        assert dto.status == "draft"
        assert dto.supplier == "S&S Activewear"
        assert dto.subtotal == "$150.00"
        assert dto.total == "$162.50"
        assert len(dto.items) == 1
        assert dto.items[0].sizes_ordered == "M:10, L:15, XL:5"
        assert [o.number for o in dto.items[0].associated_orders] == ["Q-1001", "J-2002"]

        saved = po_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.total_ordered == 30

    def test_duplicate_selection_counted_once(self):
        handler, _ = _setup()
        dto = handler.handle(
            [SourceOrderSelection("quote", "q1"), SourceOrderSelection("QUOTE", "q1")],
            supplier_id="sanmar",
            order_date=ORDER_DATE,
            now=NOW,
        )
        assert dto.total_ordered == 20
        assert len(dto.items[0].associated_orders) == 1

    def test_optional_fields(self):
        handler, _ = _setup()
        dto = handler.handle(
            [SourceOrderSelection("job", "j2")],
            supplier_id="sanmar",
            order_date=ORDER_DATE,
            now=NOW,
            expected_delivery_date=date(2024, 3, 10),
            notes="Deliver to back door",
            tracking="1Z0001",
        )
        assert dto.expected_delivery_date == "2024-03-10"
        assert dto.notes == "Deliver to back door"
        assert dto.tracking == "1Z0001"


class TestCreatePurchaseOrderErrors:

    def test_empty_selection_rejected(self):
        handler, po_repo = _setup()
        with pytest.raises(EmptySelectionError):
            handler.handle([], supplier_id="sanmar", order_date=ORDER_DATE, now=NOW)
        assert po_repo.list_all() == []

    def test_unknown_order_rejected(self):
        handler, po_repo = _setup()
        with pytest.raises(EntityNotFoundError, match="Job 'j404' not found"):
            handler.handle(
                [SourceOrderSelection("quote", "q1"), SourceOrderSelection("job", "j404")],
                supplier_id="sanmar",
                order_date=ORDER_DATE,
                now=NOW,
            )
        assert po_repo.list_all() == []

    def test_unknown_kind_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown order kind"):
            handler.handle(
                [SourceOrderSelection("invoice", "q1")],
                supplier_id="sanmar",
                order_date=ORDER_DATE,
                now=NOW,
            )

    def test_negative_shipping_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="cannot be negative"):
            handler.handle(
                [SourceOrderSelection("quote", "q1")],
                supplier_id="sanmar",
                order_date=ORDER_DATE,
                now=NOW,
                shipping="-5",
            )

    def test_blank_supplier_rejected(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Supplier is required"):
            handler.handle(
                [SourceOrderSelection("quote", "q1")],
                supplier_id=" ",
                order_date=ORDER_DATE,
                now=NOW,
            )
