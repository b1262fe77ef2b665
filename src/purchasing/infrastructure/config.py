"""
Central configuration for the purchasing engine.

Settings priority (highest wins):
  1. Values passed to Config(...) directly
  2. Environment variables
  3. Hardcoded defaults in this file
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

PURCHASE_ORDERS_FILE = "purchase_orders.json"
SOURCE_ORDERS_FILE = "source_orders.json"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("PURCHASING_DATA_DIR", str(DEFAULT_DATA_DIR)))
    )
    # False: receipts beyond what is still outstanding are rejected.
    allow_over_receipt: bool = field(
        default_factory=lambda: _env_flag("PURCHASING_ALLOW_OVER_RECEIPT")
    )
    default_supplier: str = field(
        default_factory=lambda: os.getenv("PURCHASING_DEFAULT_SUPPLIER", "ssactivewear")
    )

    @property
    def purchase_orders_path(self) -> Path:
        return self.data_dir / PURCHASE_ORDERS_FILE

    @property
    def source_orders_path(self) -> Path:
        return self.data_dir / SOURCE_ORDERS_FILE
