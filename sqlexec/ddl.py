"""Executors for schema statements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import results


@dataclass
class CreateTable:
    """Creates a table from its schema."""

    table: Any

    def execute(self, txn: Any) -> results.CreateTable:
        name = self.table.name
        txn.create_table(self.table)
        return results.CreateTable(name)


@dataclass
class DropTable:
    """Drops a table by name."""

    table: str

    def execute(self, txn: Any) -> results.DropTable:
        txn.delete_table(self.table)
        return results.DropTable(self.table)