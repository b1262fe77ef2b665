"""Abstract repository for quotes and jobs (read-only from purchasing)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from purchasing.domain.model.source_order import OrderKind, SourceOrder


class SourceOrderRepository(ABC):

    @abstractmethod
    def get(self, kind: OrderKind, order_id: str) -> SourceOrder | None:
        """Return a quote or job by kind and ID, or None."""

    @abstractmethod
    def list_all(self) -> list[SourceOrder]:
        """Return every quote and job available for purchasing."""
