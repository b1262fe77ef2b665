"""Application service: List Source Orders use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from purchasing.domain.repository.source_order_repository import (
    SourceOrderRepository,
)


@dataclass(frozen=True)
class SourceOrderLineDTO:
    kind: str
    id: str
    number: str
    customer_name: str
    line_count: int
    units: int


class ListSourceOrdersHandler:

    def __init__(self, source_repo: SourceOrderRepository) -> None:
        self._source_repo = source_repo

    def handle(self) -> list[SourceOrderLineDTO]:
        return [
            SourceOrderLineDTO(
                kind=order.kind.value,
                id=order.id,
                number=order.display_number,
                customer_name=order.customer_name,
                line_count=len(order.line_items),
                units=sum(item.sizes.total for item in order.line_items),
            )
            for order in self._source_repo.list_all()
        ]
