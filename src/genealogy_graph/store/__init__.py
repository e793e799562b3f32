"""Entity stores supplying Person and Family snapshots."""

from genealogy_graph.store.base import EntityStore
from genealogy_graph.store.gramps_web import GrampsWebConfig, GrampsWebError, GrampsWebStore
from genealogy_graph.store.memory import InMemoryStore

__all__ = [
    "EntityStore",
    "GrampsWebConfig",
    "GrampsWebError",
    "GrampsWebStore",
    "InMemoryStore",
]
