"""End-to-end tests for the click CLI against a temporary data directory."""

import json

import pytest
from click.testing import CliRunner

from purchasing.infrastructure.cli.main import cli
from purchasing.infrastructure.config import Config
from purchasing.infrastructure.persistence.json_purchase_order_repository import (
    JsonPurchaseOrderRepository,
)

SOURCE_ORDERS = [
    {
        "kind": "quote",
        "id": "q1",
        "display_number": "Q-1001",
        "customer_name": "Acme Co",
        "line_items": [
            {
                "style_name": "Gildan G500",
                "brand_or_type_label": "tshirt",
                "color": "Black",
                "sizes": {"M": 10, "L": 10},
                "unit_price": "5.00",
            }
        ],
    },
    {
        "kind": "job",
        "id": "j2",
        "display_number": "J-2002",
        "customer_name": "Beta LLC",
        "line_items": [
            {
                "style_name": "Gildan G500",
                "brand_or_type_label": "tshirt",
                "color": "Black",
                "sizes": {"L": 5, "XL": 5},
                "unit_price": "5.00",
            }
        ],
    },
]


@pytest.fixture
def config(tmp_path):
    (tmp_path / "source_orders.json").write_text(json.dumps(SOURCE_ORDERS), encoding="utf-8")
    return Config(data_dir=tmp_path, allow_over_receipt=False, default_supplier="sanmar")


def _run(config, *args):
    return CliRunner().invoke(cli, list(args), obj=config)


def _only_po(config):
    orders = JsonPurchaseOrderRepository(config.purchase_orders_path).list_all()
    assert len(orders) == 1
    return orders[0]


def _create(config):
    result = _run(config, "po", "create", "--orders", "quote:q1,job:J-2002", "--shipping", "10")
    assert result.exit_code == 0, result.output
    return _only_po(config)


class TestOrdersCommand:

    def test_list_source_orders(self, config):
        result = _run(config, "orders", "list")
        assert result.exit_code == 0
        assert "Q-1001" in result.output
        assert "J-2002" in result.output


class TestPoCommands:

    def test_create_uses_default_supplier(self, config):
        result = _run(config, "po", "create", "--orders", "quote:q1,job:j2")
        assert result.exit_code == 0, result.output
        assert "created" in result.output
        assert "Supplier: SanMar" in result.output
        assert "M:10, L:15, XL:5" in result.output
        assert _only_po(config).total_ordered == 30

    def test_create_bad_selection_format(self, config):
        result = _run(config, "po", "create", "--orders", "q1")
        assert result.exit_code != 0
        assert "Expected 'quote:ID' or 'job:ID'" in result.output

    def test_create_unknown_order(self, config):
        result = _run(config, "po", "create", "--orders", "job:j404")
        assert result.exit_code == 1
        assert "Job 'j404' not found" in result.output

    def test_show_and_list(self, config):
        po = _create(config)

        shown = _run(config, "po", "show", "--id", po.po_number)
        assert shown.exit_code == 0
        assert "$160.00" in shown.output
        assert "<- job J-2002 (Beta LLC): L:5, XL:5" in shown.output

        listed = _run(config, "po", "list", "--search", "acme")
        assert listed.exit_code == 0
        assert po.po_number in listed.output
        assert "draft (1)" in listed.output

    def test_list_unknown_status(self, config):
        result = _run(config, "po", "list", "--status", "lost")
        assert result.exit_code == 1
        assert "Unknown status" in result.output

    def test_mark_ordered_then_cancel(self, config):
        po = _create(config)

        assert _run(config, "po", "mark-ordered", "--id", po.id, "--tracking", "1Z1").exit_code == 0
        assert _only_po(config).tracking == "1Z1"

        again = _run(config, "po", "mark-ordered", "--id", po.id)
        assert again.exit_code == 1
        assert "expected draft" in again.output

        assert _run(config, "po", "cancel", "--id", po.id).exit_code == 0
        assert _only_po(config).status.value == "cancelled"


class TestReceiveCommand:

    def test_receive_in_two_deliveries(self, config):
        po = _create(config)

        first = _run(
            config, "po", "receive", "--id", po.id, "--received-by", "Alice",
            "--date", "2024-03-06", "--quick-fill", "1:Q-1001",
        )
        assert first.exit_code == 0, first.output
        assert "status=partially-received" in first.output
        assert "20 / 30" in first.output

        second = _run(
            config, "po", "receive", "--id", po.id, "--received-by", "Bob",
            "--fill-remaining", "1", "--accuracy", "100", "--issue", "One misprint",
        )
        assert second.exit_code == 0, second.output
        assert "status=received" in second.output

        saved = _only_po(config)
        receipts = saved.line_items[0].received_items
        assert [r.received_by for r in receipts] == ["Alice", "Bob"]
        assert receipts[0].assigned_to.display_number == "Q-1001"
        assert saved.accuracy_rating == 100
        assert saved.quality_issues == ["One misprint"]

    def test_receive_explicit_sizes(self, config):
        po = _create(config)
        result = _run(
            config, "po", "receive", "--id", po.id, "--received-by", "Alice",
            "--line", "1:m=4,XL=1", "--assign", "1:J-2002",
        )
        assert result.exit_code == 0, result.output
        record = _only_po(config).line_items[0].received_items[0]
        assert record.quantity == 5
        assert record.assigned_to.id == "j2"

    def test_over_receipt_reported(self, config):
        po = _create(config)
        result = _run(
            config, "po", "receive", "--id", po.id, "--received-by", "Alice",
            "--line", "1:XL=9",
        )
        assert result.exit_code == 1
        assert "remaining" in result.output
        assert _only_po(config).total_received == 0

    def test_nothing_entered(self, config):
        po = _create(config)
        result = _run(config, "po", "receive", "--id", po.id, "--received-by", "Alice")
        assert result.exit_code == 1
        assert "at least one quantity" in result.output

    def test_bad_size_format(self, config):
        po = _create(config)
        result = _run(
            config, "po", "receive", "--id", po.id, "--received-by", "Alice",
            "--line", "1:M10",
        )
        assert result.exit_code != 0
        assert "SIZE=QTY" in result.output


class TestUpdateCommand:

    def test_update_notes_and_expected_delivery(self, config):
        po = _create(config)
        result = _run(
            config, "po", "update", "--id", po.po_number,
            "--notes", "Leave at dock 2", "--expected-delivery", "2024-04-01",
        )
        assert result.exit_code == 0, result.output
        assert "updated" in result.output
        assert "Expected: 2024-04-01" in result.output

        saved = _only_po(config)
        assert saved.notes == "Leave at dock 2"
        assert saved.expected_delivery_date.isoformat() == "2024-04-01"
        assert saved.status.value == "draft"

    def test_update_without_fields(self, config):
        po = _create(config)
        result = _run(config, "po", "update", "--id", po.id)
        assert result.exit_code == 1
        assert "Nothing to update" in result.output


class TestSupplierCommand:

    def test_drafts_not_scored(self, config):
        _create(config)
        result = _run(config, "supplier", "performance")
        assert result.exit_code == 0, result.output
        assert "Orders:            0" in result.output

    def test_performance_report(self, config):
        po = _create(config)
        assert _run(config, "po", "mark-ordered", "--id", po.id).exit_code == 0

        result = _run(config, "supplier", "performance", "--days", "30")
        assert result.exit_code == 0, result.output
        assert "All Suppliers (last 30 day(s))" in result.output
        assert "Orders:            1" in result.output
        assert "$160.00" in result.output

    def test_known_supplier_without_orders(self, config):
        result = _run(config, "supplier", "performance", "--supplier", "ssactivewear")
        assert result.exit_code == 0, result.output
        assert "S&S Activewear (all time)" in result.output
        assert "Orders:            0" in result.output

    def test_days_must_be_positive(self, config):
        result = _run(config, "supplier", "performance", "--days", "0")
        assert result.exit_code == 2

    def test_unknown_supplier(self, config):
        _create(config)
        result = _run(config, "supplier", "performance", "--supplier", "alphabroder")
        assert result.exit_code == 1
        assert "No purchase orders" in result.output
