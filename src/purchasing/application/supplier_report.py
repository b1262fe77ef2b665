"""Application service: Supplier Performance report (query)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from purchasing.domain.exceptions import EntityNotFoundError
from purchasing.domain.model.purchase_order import SUPPLIER_LABELS, supplier_label
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)
from purchasing.domain.service.supplier_performance import (
    COMBINED,
    SupplierMetrics,
    calculate_metrics,
    compute_supplier_performance,
)


@dataclass(frozen=True)
class SupplierPerformanceDTO:
    supplier: str
    total_orders: int
    avg_delivery_days: int
    on_time_rate: int
    avg_accuracy: int
    total_spent: str
    avg_order_value: str
    issue_count: int
    recent_issues: list[str]  # "PO-12345678: Wrong color"


class SupplierPerformanceHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(
        self,
        supplier_id: str = COMBINED,
        since: date | None = None,
    ) -> SupplierPerformanceDTO:
        """Metrics for one supplier, or across all suppliers by default.

        Known suppliers with nothing scored report zeroed metrics.
        """
        metrics = compute_supplier_performance(self._po_repo.list_all(), since=since)
        if supplier_id in metrics:
            supplier_metrics = metrics[supplier_id]
        elif supplier_id in SUPPLIER_LABELS:
            supplier_metrics = calculate_metrics([])
        else:
            raise EntityNotFoundError(f"No purchase orders for supplier '{supplier_id}'")
        label = "All Suppliers" if supplier_id == COMBINED else supplier_label(supplier_id)
        return self._to_dto(label, supplier_metrics)

    @staticmethod
    def _to_dto(label: str, metrics: SupplierMetrics) -> SupplierPerformanceDTO:
        return SupplierPerformanceDTO(
            supplier=label,
            total_orders=metrics.total_orders,
            avg_delivery_days=metrics.avg_delivery_days,
            on_time_rate=metrics.on_time_rate,
            avg_accuracy=metrics.avg_accuracy,
            total_spent=str(metrics.total_spent),
            avg_order_value=str(metrics.avg_order_value),
            issue_count=metrics.issue_count,
            recent_issues=[f"{i.po_number}: {i.issue}" for i in metrics.recent_issues],
        )
