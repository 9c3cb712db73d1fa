"""Factory helpers for runtime entities."""

from .id_factory import make_instance_id
from .monster_factory import create_monster_instance, get_species

__all__ = [
    "create_monster_instance",
    "get_species",
    "make_instance_id",
]
