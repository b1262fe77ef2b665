"""JSON-file-backed implementation of SourceOrderRepository.

The file is maintained by the quoting/jobs side of the shop; purchasing
only reads it.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from purchasing.domain.model.source_order import OrderKind, SourceLineItem, SourceOrder
from purchasing.domain.model.value_objects import Money, SizeVector
from purchasing.domain.repository.source_order_repository import (
    SourceOrderRepository,
)


class JsonSourceOrderRepository(SourceOrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- SourceOrderRepository interface --------------------------------------

    def get(self, kind: OrderKind, order_id: str) -> SourceOrder | None:
        for raw in self._load_raw():
            if raw["kind"] == kind.value and order_id in (raw["id"], raw["display_number"]):
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[SourceOrder]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> SourceOrder:
        return SourceOrder(
            kind=OrderKind(raw["kind"]),
            id=raw["id"],
            display_number=raw["display_number"],
            customer_name=raw["customer_name"],
            line_items=[
                SourceLineItem(
                    style_name=i["style_name"],
                    brand_or_type_label=i.get("brand_or_type_label", ""),
                    color=i.get("color", ""),
                    sizes=SizeVector.of(i["sizes"]),
                    unit_price=Money(Decimal(str(i.get("unit_price", "0")))),
                    quantity=i.get("quantity"),
                )
                for i in raw.get("line_items", [])
            ],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
