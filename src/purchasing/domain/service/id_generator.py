"""Abstract ID source.

Domain services never invent identifiers themselves; they ask an injected
generator so tests can hand out predictable IDs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IdGenerator(ABC):

    @abstractmethod
    def next(self, prefix: str) -> str:
        """Return a new unique identifier starting with *prefix*."""
