"""Domain definition exports."""

from .item_def import ItemDef
from .quest_def import QuestDef, QuestRewardDef
from .scene_def import (
    EncounterDef,
    NpcDef,
    PedestalDef,
    SceneDef,
    TrainingStationDef,
    TransitionDef,
)
from .species_def import AttackDef, EvolutionRuleDef, SpeciesDef
from .terrain_def import TerrainDef

__all__ = [
    "AttackDef",
    "EncounterDef",
    "EvolutionRuleDef",
    "ItemDef",
    "NpcDef",
    "PedestalDef",
    "QuestDef",
    "QuestRewardDef",
    "SceneDef",
    "SpeciesDef",
    "TerrainDef",
    "TrainingStationDef",
    "TransitionDef",
]
