"""Domain service: supplier performance metrics (query only).

Summarises delivery timeliness, receiving accuracy, spend and reported
quality issues per supplier over a set of purchase orders.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from purchasing.domain.model.purchase_order import PurchaseOrder, PurchaseOrderStatus
from purchasing.domain.model.value_objects import Money

COMBINED = "combined"
RECENT_ISSUE_LIMIT = 5
EXCLUDED_STATUSES = (PurchaseOrderStatus.DRAFT, PurchaseOrderStatus.CANCELLED)


@dataclass(frozen=True)
class QualityIssue:
    po_number: str
    issue: str
    order_date: date


@dataclass(frozen=True)
class SupplierMetrics:
    total_orders: int
    avg_delivery_days: int
    on_time_rate: int  # percent
    avg_accuracy: int  # percent
    total_spent: Money
    avg_order_value: Money
    issue_count: int
    recent_issues: list[QualityIssue]


def calculate_metrics(orders: list[PurchaseOrder]) -> SupplierMetrics:
    """Metrics over *orders*; every average is 0 when it has no samples."""
    # Only orders with both an expected and an actual date say anything
    # about timeliness.
    deliveries = [
        po
        for po in orders
        if po.actual_delivery_date is not None and po.expected_delivery_date is not None
    ]
    delivery_days = [(po.actual_delivery_date - po.order_date).days for po in deliveries]
    on_time = [po for po in deliveries if po.actual_delivery_date <= po.expected_delivery_date]

    accuracy = [po.accuracy_rating for po in orders if po.accuracy_rating is not None]

    total_spent = Money.sum_of(po.total for po in orders)

    issues = [
        QualityIssue(po_number=po.po_number, issue=issue, order_date=po.order_date)
        for po in orders
        for issue in po.quality_issues
    ]

    return SupplierMetrics(
        total_orders=len(orders),
        avg_delivery_days=_rounded_ratio(sum(delivery_days), len(delivery_days)),
        on_time_rate=_rounded_ratio(len(on_time) * 100, len(deliveries)),
        avg_accuracy=_rounded_ratio(sum(accuracy), len(accuracy)),
        total_spent=total_spent,
        avg_order_value=total_spent.divided_by(len(orders)),
        issue_count=len(issues),
        recent_issues=issues[-RECENT_ISSUE_LIMIT:],
    )


def counts_towards_performance(po: PurchaseOrder, since: date | None = None) -> bool:
    """True for sent, non-cancelled orders placed on or after ``since``."""
    if po.status in EXCLUDED_STATUSES:
        return False
    return since is None or po.order_date >= since


def compute_supplier_performance(
    orders: list[PurchaseOrder],
    since: date | None = None,
) -> dict[str, SupplierMetrics]:
    """Metrics keyed by supplier ID, plus a ``combined`` entry over everything.

    Only sent, non-cancelled orders count.  ``since`` drops orders placed
    before that date.
    """
    scored = [po for po in orders if counts_towards_performance(po, since)]

    by_supplier: dict[str, list[PurchaseOrder]] = {}
    for po in scored:
        by_supplier.setdefault(po.supplier_id, []).append(po)

    result = {supplier: calculate_metrics(pos) for supplier, pos in by_supplier.items()}
    result[COMBINED] = calculate_metrics(scored)
    return result


def _rounded_ratio(numerator: int, denominator: int) -> int:
    if denominator == 0:
        return 0
    ratio = Decimal(numerator) / Decimal(denominator)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
