"""Storage module for covert operations.

This module provides the world port interfaces the engine reads and writes
through, an in-memory implementation, and JSON loading for world snapshots
and catalog overrides.

Usage:
    from covertops.storage import InMemoryWorld, get_catalog

    world = InMemoryWorld()
    world.add_actor(id="north", name="Northreach", food=10)

    # Standard catalog, or the override named in the environment
    catalog = get_catalog()

Configuration via environment variables:
    COVERTOPS_SEED: Default RNG seed (default: unseeded)
    COVERTOPS_CATALOG_PATH: JSON catalog override (default: standard catalog)
    COVERTOPS_WORLD_PATH: World snapshot file (default: "worlds/default.json")
"""

from .config import (
    get_catalog,
    get_catalog_path,
    get_seed,
    get_world,
    get_world_path,
)
from .file_repo import load_catalog, load_world, save_world
from .memory_repo import InMemoryWorld, RelationshipRecord, WorldSnapshot, relationship_key
from .repository import World, WorldReader, WorldWriter

__all__ = [
    # Abstract interfaces
    "WorldReader",
    "WorldWriter",
    "World",
    # In-memory implementation
    "InMemoryWorld",
    "WorldSnapshot",
    "RelationshipRecord",
    "relationship_key",
    # File loading
    "load_world",
    "save_world",
    "load_catalog",
    # Configuration
    "get_seed",
    "get_catalog_path",
    "get_world_path",
    # Factory functions
    "get_catalog",
    "get_world",
]
