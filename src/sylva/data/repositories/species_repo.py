"""Species repository."""
from __future__ import annotations

from typing import Dict

from sylva.core.types import GROWABLE_STATS
from sylva.data.errors import DataReferenceError, DataValidationError
from sylva.data.repositories.base import RepositoryBase
from sylva.domain.defs import AttackDef, EvolutionRuleDef, SpeciesDef
from sylva.domain.entities import Stats

_STAT_FIELDS = {"level", *GROWABLE_STATS}


class SpeciesRepository(RepositoryBase[SpeciesDef]):
    """Loads species with their attacks and evolution rules.

    Evolution targets are checked against the loaded registry, so a target may be
    declared later in the file than the species that evolves into it.
    """

    def __init__(self, base_path=None) -> None:
        super().__init__("species.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, SpeciesDef]:
        species: Dict[str, SpeciesDef] = {}
        for raw_id, payload in raw.items():
            context = f"species '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(
                data,
                {"name", "description", "base_stats", "attacks"},
                {"evolutions"},
                context,
            )
            attacks = self._parse_attacks(data["attacks"], context)
            if not attacks:
                raise DataValidationError(f"{context} must declare at least one attack.")
            species[raw_id] = SpeciesDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                description=self._require_str(data["description"], f"{context} description"),
                base_stats=self._parse_stats(data["base_stats"], f"{context} base_stats"),
                attacks=attacks,
                evolutions=self._parse_evolutions(data.get("evolutions", []), context),
            )

        for species_def in species.values():
            for rule in species_def.evolutions:
                if rule.target not in species:
                    raise DataReferenceError(
                        f"species '{species_def.id}' evolves into unknown species '{rule.target}'."
                    )
        return species

    def _parse_stats(self, value: object, context: str) -> Stats:
        data = self._require_mapping(value, context)
        self._assert_exact_fields(data, _STAT_FIELDS, context)
        return Stats(
            level=self._require_int(data["level"], f"{context} level"),
            power=self._require_int(data["power"], f"{context} power"),
            defense=self._require_int(data["defense"], f"{context} defense"),
            speed=self._require_int(data["speed"], f"{context} speed"),
            morale=self._require_int(data["morale"], f"{context} morale"),
        )

    def _parse_attacks(self, value: object, context: str) -> tuple[AttackDef, ...]:
        attacks = []
        for index, entry in enumerate(self._require_list(value, f"{context} attacks")):
            attack_context = f"{context} attacks[{index}]"
            data = self._require_mapping(entry, attack_context)
            self._assert_fields(
                data,
                {"id", "name", "damage", "success_rate", "description"},
                {"animation"},
                attack_context,
            )
            success_rate = self._require_number(data["success_rate"], f"{attack_context} success_rate")
            if not 0.0 <= success_rate <= 1.0:
                raise DataValidationError(f"{attack_context} success_rate must be within [0, 1].")
            attacks.append(
                AttackDef(
                    id=self._require_str(data["id"], f"{attack_context} id"),
                    name=self._require_str(data["name"], f"{attack_context} name"),
                    damage=self._require_int(data["damage"], f"{attack_context} damage"),
                    success_rate=success_rate,
                    description=self._require_str(data["description"], f"{attack_context} description"),
                    animation=dict(self._require_mapping(data.get("animation", {}), f"{attack_context} animation")),
                )
            )
        return tuple(attacks)

    def _parse_evolutions(self, value: object, context: str) -> tuple[EvolutionRuleDef, ...]:
        rules = []
        for index, entry in enumerate(self._require_list(value, f"{context} evolutions")):
            rule_context = f"{context} evolutions[{index}]"
            data = self._require_mapping(entry, rule_context)
            self._assert_fields(data, {"target", "requires"}, {"description"}, rule_context)
            requires = self._require_int_map(data["requires"], f"{rule_context} requires")
            unknown = set(requires) - _STAT_FIELDS
            if unknown:
                raise DataValidationError(f"{rule_context} requires unknown stats {sorted(unknown)}.")
            rules.append(
                EvolutionRuleDef(
                    target=self._require_str(data["target"], f"{rule_context} target"),
                    requires=requires,
                    description=self._require_str(data.get("description", ""), f"{rule_context} description"),
                )
            )
        return tuple(rules)
