"""Unit tests for supplier performance metrics."""

from datetime import date

from purchasing.domain.model.purchase_order import PurchaseOrderStatus
from purchasing.domain.model.value_objects import Money
from purchasing.domain.service.supplier_performance import (
    COMBINED,
    calculate_metrics,
    compute_supplier_performance,
)
from tests.fakes import SequentialIdGenerator
from tests.samples import job_j2, quote_q1, sample_po


def _po(
    ids,
    supplier="ssactivewear",
    expected=None,
    actual=None,
    accuracy=None,
    issues=(),
    status=PurchaseOrderStatus.ORDERED,
):
    po = sample_po([quote_q1(), job_j2()], ids=ids)
    po.supplier_id = supplier
    po.expected_delivery_date = expected
    po.actual_delivery_date = actual
    po.accuracy_rating = accuracy
    po.quality_issues = list(issues)
    po.status = status
    return po


class TestCalculateMetrics:

    def test_empty(self):
        metrics = calculate_metrics([])
        assert metrics.total_orders == 0
        assert metrics.avg_delivery_days == 0
        assert metrics.on_time_rate == 0
        assert metrics.avg_accuracy == 0
        assert metrics.total_spent == Money.zero()
        assert metrics.avg_order_value == Money.zero()
        assert metrics.recent_issues == []

    def test_delivery_and_accuracy(self):
        ids = SequentialIdGenerator()
        orders = [
            # ordered 2024-03-01
            _po(ids, expected=date(2024, 3, 5), actual=date(2024, 3, 4), accuracy=100),
            _po(ids, expected=date(2024, 3, 5), actual=date(2024, 3, 8), accuracy=95),
            _po(ids, actual=date(2024, 3, 20)),  # no expectation -> ignored for timing
        ]
        metrics = calculate_metrics(orders)

        assert metrics.total_orders == 3
        assert metrics.avg_delivery_days == 5  # (3 + 7) / 2
        assert metrics.on_time_rate == 50
        assert metrics.avg_accuracy == 98  # 97.5 rounds half up
        assert metrics.total_spent == Money.of("450")
        assert metrics.avg_order_value == Money.of("150")

    def test_recent_issues_keeps_last_five(self):
        ids = SequentialIdGenerator()
        orders = [
            _po(ids, issues=["a", "b", "c"]),
            _po(ids, issues=["d", "e", "f"]),
        ]
        metrics = calculate_metrics(orders)
        assert metrics.issue_count == 6
        assert [i.issue for i in metrics.recent_issues] == ["b", "c", "d", "e", "f"]


class TestComputeSupplierPerformance:

    def test_per_supplier_and_combined(self):
        ids = SequentialIdGenerator()
        orders = [_po(ids), _po(ids, supplier="sanmar"), _po(ids, supplier="sanmar")]
        result = compute_supplier_performance(orders)

        assert set(result) == {"ssactivewear", "sanmar", COMBINED}
        assert result["sanmar"].total_orders == 2
        assert result[COMBINED].total_orders == 3

    def test_drafts_and_cancelled_orders_not_scored(self):
        ids = SequentialIdGenerator()
        orders = [
            _po(ids, status=PurchaseOrderStatus.DRAFT),
            _po(ids, status=PurchaseOrderStatus.CANCELLED),
            _po(ids, status=PurchaseOrderStatus.ORDERED),
            _po(ids, supplier="sanmar", status=PurchaseOrderStatus.DRAFT),
        ]
        result = compute_supplier_performance(orders)

        assert result["ssactivewear"].total_orders == 1
        assert result["ssactivewear"].total_spent == Money.of("150")
        assert result[COMBINED].total_orders == 1
        assert "sanmar" not in result

    def test_received_orders_scored(self):
        ids = SequentialIdGenerator()
        orders = [
            _po(ids, status=PurchaseOrderStatus.PARTIALLY_RECEIVED),
            _po(ids, status=PurchaseOrderStatus.RECEIVED),
        ]
        assert compute_supplier_performance(orders)[COMBINED].total_orders == 2

    def test_since_drops_older_orders(self):
        ids = SequentialIdGenerator()
        old = _po(ids)
        old.order_date = date(2023, 12, 1)
        recent = _po(ids, supplier="sanmar")  # ordered 2024-03-01
        on_cutoff = _po(ids)
        on_cutoff.order_date = date(2024, 2, 1)

        result = compute_supplier_performance([old, recent, on_cutoff], since=date(2024, 2, 1))

        assert result[COMBINED].total_orders == 2
        assert result["ssactivewear"].total_orders == 1
        assert result["sanmar"].total_orders == 1

    def test_nothing_scored_still_has_combined(self):
        ids = SequentialIdGenerator()
        result = compute_supplier_performance([_po(ids, status=PurchaseOrderStatus.DRAFT)])
        assert set(result) == {COMBINED}
        assert result[COMBINED].total_orders == 0
