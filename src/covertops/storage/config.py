"""Environment configuration for covert operations.

Settings come from environment variables with a COVERTOPS_ prefix and fall
back to the defaults below. Balance numbers live in covertops.parameters,
not here.
"""

import os
from typing import Optional

from covertops.models.catalog import DEFAULT_CATALOG, Catalog

from .file_repo import load_catalog, load_world
from .memory_repo import InMemoryWorld

# Default configuration (can be overridden via environment variables)
DEFAULT_SEED: Optional[int] = None
DEFAULT_WORLD_PATH = "worlds/default.json"


def get_seed() -> Optional[int]:
    """Get the configured RNG seed, or None for an unseeded run."""
    value = os.environ.get("COVERTOPS_SEED")
    if value is None or value.strip() == "":
        return DEFAULT_SEED
    return int(value)


def get_catalog_path() -> Optional[str]:
    """Get the configured catalog override path, if any."""
    return os.environ.get("COVERTOPS_CATALOG_PATH") or None


def get_world_path() -> str:
    """Get the configured world snapshot path."""
    return os.environ.get("COVERTOPS_WORLD_PATH", DEFAULT_WORLD_PATH)


def get_catalog(path: Optional[str] = None) -> Catalog:
    """Factory function for the active catalog.

    Args:
        path: Override file to load. If None, uses environment config and
            falls back to the standard catalog.

    Returns:
        Catalog instance
    """
    if path is None:
        path = get_catalog_path()
    if path is None:
        return DEFAULT_CATALOG
    return load_catalog(path)


def get_world(path: Optional[str] = None) -> InMemoryWorld:
    """Factory function for a world loaded from a snapshot file."""
    return load_world(path or get_world_path())
