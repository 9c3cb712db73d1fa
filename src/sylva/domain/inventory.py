"""Ordered item ledger."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class InventoryEntry:
    item_id: str
    quantity: int


@dataclass(slots=True)
class InventoryLedger:
    """Item stacks in pickup order. A stack that reaches zero is removed."""

    entries: List[InventoryEntry] = field(default_factory=list)

    def _find(self, item_id: str) -> InventoryEntry | None:
        for entry in self.entries:
            if entry.item_id == item_id:
                return entry
        return None

    def add(self, item_id: str, quantity: int = 1) -> None:
        if quantity <= 0:
            return
        entry = self._find(item_id)
        if entry is None:
            self.entries.append(InventoryEntry(item_id=item_id, quantity=quantity))
        else:
            entry.quantity += quantity

    def remove(self, item_id: str, quantity: int = 1) -> bool:
        """Remove ``quantity`` items; returns False without mutating when short."""
        if quantity <= 0:
            return True
        entry = self._find(item_id)
        if entry is None or entry.quantity < quantity:
            return False
        entry.quantity -= quantity
        if entry.quantity == 0:
            self.entries.remove(entry)
        return True

    def quantity_of(self, item_id: str) -> int:
        entry = self._find(item_id)
        return entry.quantity if entry is not None else 0

    def has(self, item_id: str, quantity: int = 1) -> bool:
        return self.quantity_of(item_id) >= quantity

    def clear(self) -> None:
        self.entries.clear()
