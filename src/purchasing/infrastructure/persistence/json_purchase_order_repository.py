"""JSON-file-backed implementation of PurchaseOrderRepository.

Every field of the aggregate is written, including the full receipt
ledger and the associated-order snapshots, so a save/reload cycle is
lossless.  Derived totals (subtotal, line totals, total) are written for
readers of the file but recomputed on load.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from purchasing.domain.model.purchase_order import (
    AssociatedOrderRef,
    OrderRef,
    PurchaseOrder,
    PurchaseOrderLineItem,
    PurchaseOrderStatus,
    ReceiptRecord,
)
from purchasing.domain.model.source_order import OrderKind
from purchasing.domain.model.value_objects import Money, SizeVector
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)


class JsonPurchaseOrderRepository(PurchaseOrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- PurchaseOrderRepository interface ------------------------------------

    def get_by_id(self, po_id: str) -> PurchaseOrder | None:
        for raw in self._load_raw():
            if raw["id"] == po_id or raw["po_number"] == po_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[PurchaseOrder]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, purchase_order: PurchaseOrder) -> None:
        records = self._load_raw()

        # Upsert: replace if exists, otherwise append
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == purchase_order.id:
                records[i] = self._to_raw(purchase_order)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(purchase_order))

        self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(po: PurchaseOrder) -> dict:
        return {
            "id": po.id,
            "po_number": po.po_number,
            "supplier_id": po.supplier_id,
            "status": po.status.value,
            "order_date": po.order_date.isoformat(),
            "expected_delivery_date": _date_or_none(po.expected_delivery_date),
            "actual_delivery_date": _date_or_none(po.actual_delivery_date),
            "currency": po.shipping.currency,
            "subtotal": str(po.subtotal.amount),
            "shipping": str(po.shipping.amount),
            "tax": str(po.tax.amount),
            "total": str(po.total.amount),
            "notes": po.notes,
            "tracking": po.tracking,
            "received_by": po.received_by,
            "accuracy_rating": po.accuracy_rating,
            "delivery_rating": po.delivery_rating,
            "quality_issues": list(po.quality_issues),
            "created_at": po.created_at.isoformat(),
            "updated_at": po.updated_at.isoformat(),
            "line_items": [
                {
                    "id": item.id,
                    "supplier_id": item.supplier_id,
                    "style_id": item.style_id,
                    "style_name": item.style_name,
                    "brand_name": item.brand_name,
                    "color_name": item.color_name,
                    "color_code": item.color_code,
                    "sizes_ordered": item.sizes_ordered.to_dict(),
                    "quantity_ordered": item.quantity_ordered,
                    "quantity_received": item.quantity_received,
                    "unit_cost": str(item.unit_cost.amount),
                    "currency": item.unit_cost.currency,
                    "line_total": str(item.line_total.amount),
                    "associated_orders": [
                        {
                            "kind": order.kind.value,
                            "id": order.id,
                            "display_number": order.display_number,
                            "customer_name": order.customer_name,
                            "sizes": order.sizes.to_dict(),
                        }
                        for order in item.associated_orders
                    ],
                    "received_items": [
                        {
                            "id": record.id,
                            "sizes": record.sizes.to_dict(),
                            "received_date": record.received_date.isoformat(),
                            "received_by": record.received_by,
                            "assigned_to": _ref_to_raw(record.assigned_to),
                        }
                        for record in item.received_items
                    ],
                }
                for item in po.line_items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> PurchaseOrder:
        currency = raw.get("currency", "USD")
        line_items = [
            PurchaseOrderLineItem(
                id=i["id"],
                supplier_id=i["supplier_id"],
                style_id=i["style_id"],
                style_name=i["style_name"],
                brand_name=i["brand_name"],
                color_name=i["color_name"],
                color_code=i.get("color_code", ""),
                sizes_ordered=SizeVector.of(i["sizes_ordered"]),
                unit_cost=Money(Decimal(i["unit_cost"]), i.get("currency", currency)),
                quantity_received=i.get("quantity_received", 0),
                associated_orders=[
                    AssociatedOrderRef(
                        kind=OrderKind(o["kind"]),
                        id=o["id"],
                        display_number=o["display_number"],
                        customer_name=o["customer_name"],
                        sizes=SizeVector.of(o["sizes"]),
                    )
                    for o in i.get("associated_orders", [])
                ],
                received_items=[
                    ReceiptRecord(
                        id=r["id"],
                        sizes=SizeVector.of(r["sizes"]),
                        received_date=date.fromisoformat(r["received_date"]),
                        received_by=r["received_by"],
                        assigned_to=_ref_from_raw(r.get("assigned_to")),
                    )
                    for r in i.get("received_items", [])
                ],
            )
            for i in raw["line_items"]
        ]
        return PurchaseOrder(
            id=raw["id"],
            po_number=raw["po_number"],
            supplier_id=raw["supplier_id"],
            order_date=date.fromisoformat(raw["order_date"]),
            line_items=line_items,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            status=PurchaseOrderStatus(raw["status"]),
            shipping=Money(Decimal(raw.get("shipping", "0")), currency),
            tax=Money(Decimal(raw.get("tax", "0")), currency),
            expected_delivery_date=_parse_date(raw.get("expected_delivery_date")),
            actual_delivery_date=_parse_date(raw.get("actual_delivery_date")),
            notes=raw.get("notes"),
            tracking=raw.get("tracking"),
            received_by=raw.get("received_by"),
            accuracy_rating=raw.get("accuracy_rating"),
            delivery_rating=raw.get("delivery_rating"),
            quality_issues=list(raw.get("quality_issues", [])),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")


def _ref_to_raw(ref: OrderRef | None) -> dict | None:
    if ref is None:
        return None
    return {"kind": ref.kind.value, "id": ref.id, "display_number": ref.display_number}


def _ref_from_raw(raw: dict | None) -> OrderRef | None:
    if raw is None:
        return None
    return OrderRef(kind=OrderKind(raw["kind"]), id=raw["id"], display_number=raw["display_number"])


def _date_or_none(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_date(raw: str | None) -> date | None:
    return date.fromisoformat(raw) if raw else None
