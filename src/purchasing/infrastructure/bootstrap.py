"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from purchasing.domain.service.reconciliation_committer import (
    ReconciliationCommitter,
)
from purchasing.infrastructure.config import Config
from purchasing.infrastructure.id_generator import TimestampIdGenerator
from purchasing.infrastructure.persistence.json_purchase_order_repository import (
    JsonPurchaseOrderRepository,
)
from purchasing.infrastructure.persistence.json_source_order_repository import (
    JsonSourceOrderRepository,
)


def purchase_order_repository(config: Config) -> JsonPurchaseOrderRepository:
    return JsonPurchaseOrderRepository(config.purchase_orders_path)


def source_order_repository(config: Config) -> JsonSourceOrderRepository:
    return JsonSourceOrderRepository(config.source_orders_path)


def id_generator() -> TimestampIdGenerator:
    return TimestampIdGenerator()


def reconciliation_committer(config: Config) -> ReconciliationCommitter:
    return ReconciliationCommitter(
        id_generator(), allow_over_receipt=config.allow_over_receipt
    )
