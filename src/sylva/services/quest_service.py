"""Quest activation, progress and reward payout."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from sylva.data.errors import DataReferenceError
from sylva.data.repositories import ItemsRepository, QuestsRepository
from sylva.domain.defs import NpcDef, QuestDef
from sylva.domain.needs import feed
from sylva.domain.state import GameState, append_log
from sylva.services.progression_service import apply_stat_boost

logger = logging.getLogger(__name__)

MISSING_ITEM_MESSAGE = "You still lack the requested item."
NOT_DONE_MESSAGE = "Come back once the task is done."


@dataclass(slots=True)
class QuestCompletion:
    quest_id: str
    title: str
    gold: int
    item_ids: List[str]


class QuestService:
    """Centralized quest logic: activation, hunt targets, deliveries and rewards.

    Every reward is validated before anything is written, and status is checked
    first, so completing a quest twice never pays twice.
    """

    def __init__(self, *, quests_repo: QuestsRepository, items_repo: ItemsRepository) -> None:
        self._quests_repo = quests_repo
        self._items_repo = items_repo

    def get_definition(self, quest_id: str) -> QuestDef:
        return self._quests_repo.get(quest_id)

    def activate_quest(self, state: GameState, quest_id: str) -> bool:
        """Move an available quest to active. Returns True only on that transition."""
        quest_def = self.get_definition(quest_id)
        progress = state.quest_progress(quest_id)
        if progress.status != "available":
            return False
        progress.status = "active"
        append_log(state, f"Quest received: {quest_def.title}")
        logger.debug("Quest %s activated", quest_id)
        return True

    def complete_quest(self, state: GameState, quest_id: str) -> QuestCompletion | None:
        """Complete a quest and pay its reward exactly once; None when already completed."""
        quest_def = self.get_definition(quest_id)
        existing = state.find_quest(quest_id)
        if existing is not None and existing.status == "completed":
            return None

        self._validate_reward(quest_def)
        progress = state.quest_progress(quest_id)
        reward = quest_def.reward
        progress.status = "completed"
        progress.requirement_met = True
        append_log(state, f"Quest complete: {quest_def.title}")

        if reward.gold:
            state.gold += reward.gold
            append_log(state, f"You receive {reward.gold} gold.")
        for item_id, quantity in reward.items.items():
            state.inventory.add(item_id, quantity)
            append_log(state, f"{self._items_repo.get(item_id).name} added to your inventory.")
        if reward.hunger:
            feed(state, reward.hunger)
            append_log(state, "Your companion feels revitalised.")
        if reward.stats and state.companion is not None:
            apply_stat_boost(state.companion, reward.stats)
            append_log(state, "Your companion's stats rise thanks to the reward.")
        for scene_id in reward.unlocks:
            state.unlocked_scene_ids.add(scene_id)

        logger.info("Quest %s completed", quest_id)
        return QuestCompletion(
            quest_id=quest_id,
            title=quest_def.title,
            gold=reward.gold,
            item_ids=list(reward.items),
        )

    def _validate_reward(self, quest_def: QuestDef) -> None:
        for item_id in quest_def.reward.items:
            if not self._items_repo.has(item_id):
                raise DataReferenceError(f"quest '{quest_def.quest_id}' grants missing item '{item_id}'.")

    def mark_boss_defeated(self, state: GameState, quest_id: str, target_id: str) -> bool:
        """Record a hunt target; completes the quest once every target is in.

        Returns True when this call completed the quest.
        """
        quest_def = self.get_definition(quest_id)
        if quest_def.quest_type != "hunt" or target_id not in quest_def.targets:
            return False
        progress = state.quest_progress(quest_id)
        if progress.status == "completed":
            return False
        if progress.status == "available":
            self.activate_quest(state, quest_id)

        progress.completed_targets.add(target_id)
        if not progress.completed_targets.issuperset(quest_def.targets):
            remaining = len(set(quest_def.targets) - progress.completed_targets)
            append_log(state, f"{quest_def.title}: {remaining} target(s) remaining.")
            return False
        progress.requirement_met = True
        return self.complete_quest(state, quest_id) is not None

    def deliver_item(self, state: GameState, quest_id: str) -> bool:
        """Hand over a delivery quest's item. False, with nothing changed, when it is missing."""
        quest_def = self.get_definition(quest_id)
        if quest_def.quest_type != "delivery" or quest_def.item_id is None:
            return False
        existing = state.find_quest(quest_id)
        if existing is not None and existing.status == "completed":
            return False
        self._validate_reward(quest_def)
        if not state.inventory.remove(quest_def.item_id):
            return False

        progress = state.quest_progress(quest_id)
        if progress.status == "available":
            progress.status = "active"
        progress.requirement_met = True
        append_log(state, f"{self._items_repo.get(quest_def.item_id).name} handed over.")
        self.complete_quest(state, quest_id)
        return True

    def talk_to_npc(self, state: GameState, npc: NpcDef) -> None:
        """Play an NPC's dialogue and let them react to their quest."""
        for line in npc.dialogue:
            append_log(state, f"{npc.name}: {line}")
        if npc.quest_id is None:
            return

        quest_def = self.get_definition(npc.quest_id)
        progress = state.quest_progress(npc.quest_id)
        if progress.status == "completed":
            append_log(state, f"{npc.name}: Thank you again for your help.")
            return
        self.activate_quest(state, npc.quest_id)
        if npc.role == "giver":
            return

        if quest_def.quest_type == "delivery":
            if not self.deliver_item(state, npc.quest_id):
                append_log(state, MISSING_ITEM_MESSAGE)
        elif progress.requirement_met:
            self.complete_quest(state, npc.quest_id)
        else:
            append_log(state, NOT_DONE_MESSAGE)

    def build_quest_lines(self, state: GameState) -> List[str]:
        lines: List[str] = []
        for progress in state.quests:
            if progress.status == "available":
                continue
            quest_def = self.get_definition(progress.quest_id)
            marker = "[x]" if progress.status == "completed" else "[ ]"
            line = f"{marker} {quest_def.title}"
            if quest_def.quest_type == "hunt" and progress.status == "active" and len(quest_def.targets) > 1:
                done = len(progress.completed_targets & set(quest_def.targets))
                line += f" ({done}/{len(quest_def.targets)})"
            lines.append(line)
        return lines
