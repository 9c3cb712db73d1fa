"""Scene layout repository."""
from __future__ import annotations

from typing import Dict

from sylva.core.types import GROWABLE_STATS
from sylva.data.errors import DataReferenceError, DataValidationError
from sylva.data.repositories.base import RepositoryBase
from sylva.domain.defs import (
    EncounterDef,
    NpcDef,
    PedestalDef,
    SceneDef,
    TrainingStationDef,
    TransitionDef,
)

_EDGES = {"north", "south", "east", "west"}
_SCENE_KINDS = {"exploration", "starter"}
_NPC_ROLES = {"giver", "turnin"}


class ScenesRepository(RepositoryBase[SceneDef]):
    """Loads exploration scenes. Maps are lists of space separated tile symbols."""

    def __init__(self, base_path=None) -> None:
        super().__init__("scenes.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SceneDef]:
        scenes: Dict[str, SceneDef] = {}
        for raw_id, payload in raw.items():
            context = f"scene '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(
                data,
                {"name", "kind", "intro", "map", "spawn"},
                {"transitions", "encounters", "npcs", "stations", "pedestals"},
                context,
            )
            kind = self._require_str(data["kind"], f"{context} kind")
            if kind not in _SCENE_KINDS:
                raise DataValidationError(f"{context} kind must be one of {sorted(_SCENE_KINDS)}.")
            scenes[raw_id] = SceneDef(
                scene_id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                kind=kind,
                intro=self._require_str(data["intro"], f"{context} intro"),
                rows=self._parse_rows(data["map"], f"{context} map"),
                spawn=self._require_tile(data["spawn"], f"{context} spawn"),
                transitions=self._parse_transitions(data.get("transitions", []), context),
                encounters=self._parse_encounters(data.get("encounters", []), context),
                npcs=self._parse_npcs(data.get("npcs", []), context),
                stations=self._parse_stations(data.get("stations", []), context),
                pedestals=self._parse_pedestals(data.get("pedestals", []), context),
            )

        for scene in scenes.values():
            for transition in scene.transitions:
                if transition.target not in scenes:
                    raise DataReferenceError(
                        f"scene '{scene.scene_id}' links to unknown scene '{transition.target}'."
                    )
        return scenes

    def _parse_rows(self, value: object, context: str) -> tuple[str, ...]:
        rows = self._require_str_list(value, context)
        return tuple(row.replace(" ", "") for row in rows)

    def _parse_transitions(self, value: object, context: str) -> tuple[TransitionDef, ...]:
        transitions = []
        for index, entry in enumerate(self._require_list(value, f"{context} transitions")):
            entry_context = f"{context} transitions[{index}]"
            data = self._require_mapping(entry, entry_context)
            self._assert_fields(
                data,
                {"edge", "target", "spawn"},
                {"message", "unlock_id", "locked_message"},
                entry_context,
            )
            edge = self._require_str(data["edge"], f"{entry_context} edge")
            if edge not in _EDGES:
                raise DataValidationError(f"{entry_context} edge must be one of {sorted(_EDGES)}.")
            transitions.append(
                TransitionDef(
                    edge=edge,  # type: ignore[arg-type]
                    target=self._require_str(data["target"], f"{entry_context} target"),
                    spawn=self._require_tile(data["spawn"], f"{entry_context} spawn"),
                    message=self._require_str(data.get("message", ""), f"{entry_context} message"),
                    unlock_id=self._optional_str(data.get("unlock_id"), f"{entry_context} unlock_id"),
                    locked_message=self._require_str(
                        data.get("locked_message", ""), f"{entry_context} locked_message"
                    ),
                )
            )
        return tuple(transitions)

    def _parse_encounters(self, value: object, context: str) -> tuple[EncounterDef, ...]:
        encounters = []
        for index, entry in enumerate(self._require_list(value, f"{context} encounters")):
            entry_context = f"{context} encounters[{index}]"
            data = self._require_mapping(entry, entry_context)
            self._assert_fields(
                data,
                {"id", "species_id", "spawn"},
                {"roam_radius", "respawn_time", "boss", "loot", "quest_id"},
                entry_context,
            )
            encounters.append(
                EncounterDef(
                    id=self._require_str(data["id"], f"{entry_context} id"),
                    species_id=self._require_str(data["species_id"], f"{entry_context} species_id"),
                    spawn=self._require_tile(data["spawn"], f"{entry_context} spawn"),
                    roam_radius=self._require_number(data.get("roam_radius", 12), f"{entry_context} roam_radius"),
                    respawn_time=self._require_number(data.get("respawn_time", 0), f"{entry_context} respawn_time"),
                    boss=self._require_bool(data.get("boss", False), f"{entry_context} boss"),
                    loot=self._require_str_list(data.get("loot", []), f"{entry_context} loot"),
                    quest_id=self._optional_str(data.get("quest_id"), f"{entry_context} quest_id"),
                )
            )
        return tuple(encounters)

    def _parse_npcs(self, value: object, context: str) -> tuple[NpcDef, ...]:
        npcs = []
        for index, entry in enumerate(self._require_list(value, f"{context} npcs")):
            entry_context = f"{context} npcs[{index}]"
            data = self._require_mapping(entry, entry_context)
            self._assert_fields(data, {"id", "name", "position"}, {"dialogue", "quest_id", "role"}, entry_context)
            role = self._require_str(data.get("role", "giver"), f"{entry_context} role")
            if role not in _NPC_ROLES:
                raise DataValidationError(f"{entry_context} role must be one of {sorted(_NPC_ROLES)}.")
            npcs.append(
                NpcDef(
                    id=self._require_str(data["id"], f"{entry_context} id"),
                    name=self._require_str(data["name"], f"{entry_context} name"),
                    position=self._require_tile(data["position"], f"{entry_context} position"),
                    dialogue=self._require_str_list(data.get("dialogue", []), f"{entry_context} dialogue"),
                    quest_id=self._optional_str(data.get("quest_id"), f"{entry_context} quest_id"),
                    role=role,  # type: ignore[arg-type]
                )
            )
        return tuple(npcs)

    def _parse_stations(self, value: object, context: str) -> tuple[TrainingStationDef, ...]:
        stations = []
        for index, entry in enumerate(self._require_list(value, f"{context} stations")):
            entry_context = f"{context} stations[{index}]"
            data = self._require_mapping(entry, entry_context)
            self._assert_exact_fields(
                data,
                {"id", "position", "stat", "description", "hunger_cost", "reward"},
                entry_context,
            )
            stat = self._require_str(data["stat"], f"{entry_context} stat")
            if stat not in GROWABLE_STATS:
                raise DataValidationError(f"{entry_context} stat must be one of {list(GROWABLE_STATS)}.")
            stations.append(
                TrainingStationDef(
                    id=self._require_str(data["id"], f"{entry_context} id"),
                    position=self._require_tile(data["position"], f"{entry_context} position"),
                    stat=stat,
                    description=self._require_str(data["description"], f"{entry_context} description"),
                    hunger_cost=self._require_int(data["hunger_cost"], f"{entry_context} hunger_cost"),
                    reward=self._require_int(data["reward"], f"{entry_context} reward"),
                )
            )
        return tuple(stations)

    def _parse_pedestals(self, value: object, context: str) -> tuple[PedestalDef, ...]:
        pedestals = []
        for index, entry in enumerate(self._require_list(value, f"{context} pedestals")):
            entry_context = f"{context} pedestals[{index}]"
            data = self._require_mapping(entry, entry_context)
            self._assert_exact_fields(data, {"species_id", "position"}, entry_context)
            pedestals.append(
                PedestalDef(
                    species_id=self._require_str(data["species_id"], f"{entry_context} species_id"),
                    position=self._require_tile(data["position"], f"{entry_context} position"),
                )
            )
        return tuple(pedestals)
