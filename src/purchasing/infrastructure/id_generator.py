"""Production IdGenerator: ``<prefix>-<epoch millis>-<9 random base36 chars>``."""

from __future__ import annotations

import secrets
import string
import time

from purchasing.domain.service.id_generator import IdGenerator

_ALPHABET = string.digits + string.ascii_lowercase


class TimestampIdGenerator(IdGenerator):

    def next(self, prefix: str) -> str:
        millis = time.time_ns() // 1_000_000
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
        return f"{prefix}-{millis}-{suffix}"
