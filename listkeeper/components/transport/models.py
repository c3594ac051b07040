"""
Transport component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

TableName = Literal["transport", "mailboxes"]


@dataclass(frozen=True)
class TableSpec:
    """One managed lookup table: working copy name, line target, install path."""

    name: TableName
    target: str
    production_path: Path


@dataclass(frozen=True)
class TableEdit:
    """Outcome of editing one table."""

    table: TableName
    added: int = 0
    removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)
