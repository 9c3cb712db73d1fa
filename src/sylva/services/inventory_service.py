"""Inventory views and item use."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sylva.data.repositories import ItemsRepository
from sylva.domain.needs import feed
from sylva.domain.state import GameState, append_log
from sylva.services.progression_service import apply_stat_boost


@dataclass(slots=True)
class ItemUseResult:
    success: bool
    message: str


@dataclass(slots=True)
class InventoryItemView:
    item_id: str
    name: str
    description: str
    quantity: int
    usable: bool


class InventoryService:
    """Applies item effects to the companion and exposes read-only views."""

    def __init__(self, *, items_repo: ItemsRepository) -> None:
        self._items_repo = items_repo

    def build_inventory_view(self, state: GameState) -> List[InventoryItemView]:
        views: List[InventoryItemView] = []
        for entry in state.inventory.entries:
            if self._items_repo.has(entry.item_id):
                item_def = self._items_repo.get(entry.item_id)
                views.append(
                    InventoryItemView(
                        item_id=entry.item_id,
                        name=item_def.name,
                        description=item_def.description,
                        quantity=entry.quantity,
                        usable=item_def.kind != "quest",
                    )
                )
            else:
                views.append(
                    InventoryItemView(
                        item_id=entry.item_id,
                        name=entry.item_id,
                        description="Unknown item.",
                        quantity=entry.quantity,
                        usable=False,
                    )
                )
        return views

    def add_loot(self, state: GameState, item_id: str, quantity: int = 1) -> None:
        item_def = self._items_repo.get(item_id)
        state.inventory.add(item_id, quantity)
        append_log(state, f"{item_def.name} was added to your inventory.")

    def use_item(self, state: GameState, item_id: str) -> ItemUseResult:
        """Consume one item. Nothing changes unless the result is successful."""
        if not self._items_repo.has(item_id):
            return ItemUseResult(False, "Unknown item.")
        item_def = self._items_repo.get(item_id)
        if state.inventory.quantity_of(item_id) < 1:
            return ItemUseResult(False, f"You have no {item_def.name} left.")

        if item_def.kind == "food":
            state.inventory.remove(item_id)
            feed(state, item_def.hunger_restore)
            return ItemUseResult(True, f"{item_def.name} eases your companion's hunger.")
        if item_def.kind == "boost":
            if state.companion is None:
                return ItemUseResult(False, "You need a companion to use this.")
            state.inventory.remove(item_id)
            apply_stat_boost(state.companion, item_def.stat_boost)
            return ItemUseResult(True, f"{item_def.name} strengthens your companion.")
        return ItemUseResult(False, f"{item_def.name} cannot be used here.")
