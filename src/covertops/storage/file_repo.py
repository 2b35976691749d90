"""JSON file loading for world snapshots and catalog overrides.

World snapshot files hold a serialized WorldSnapshot. Catalog override files
look like:

    {
        "version": "balance-2",
        "actions": [ {ActionDefinition fields...}, ... ]
    }

Entries whose kind is not a known ActionKind are skipped with a warning so
that an older engine can still read a newer catalog file.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from covertops.models.actions import ActionDefinition, ActionKind
from covertops.models.catalog import DEFAULT_CATALOG_VERSION, Catalog

from .memory_repo import InMemoryWorld, WorldSnapshot

logger = logging.getLogger(__name__)

_KNOWN_KINDS = {kind.value for kind in ActionKind}


def load_world(path: str | Path) -> InMemoryWorld:
    """Load a world snapshot file into an InMemoryWorld.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the snapshot is malformed
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    snapshot = WorldSnapshot.model_validate(data)
    logger.info(f"Loaded world snapshot {path.name}: {len(snapshot.actors)} actors")
    return InMemoryWorld.from_snapshot(snapshot)


def save_world(world: InMemoryWorld, path: str | Path) -> None:
    """Write an InMemoryWorld to a snapshot file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(world.to_snapshot().model_dump(mode="json"), f, indent=2)


def load_catalog(path: str | Path) -> Catalog:
    """Load a catalog override file.

    Raises:
        FileNotFoundError: If the file does not exist
        CatalogError: If the file defines the same kind twice
        pydantic.ValidationError: If a known entry is malformed
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    version = str(data.get("version", DEFAULT_CATALOG_VERSION))
    definitions = []
    for entry in data.get("actions", []):
        kind = entry.get("kind")
        if kind not in _KNOWN_KINDS:
            logger.warning(f"Skipping unknown action kind {kind!r} in catalog {path.name}")
            continue
        try:
            definitions.append(ActionDefinition.model_validate(entry))
        except ValidationError:
            logger.error(f"Invalid catalog entry {kind!r} in {path.name}")
            raise

    logger.info(f"Loaded catalog {version} from {path.name}: {len(definitions)} actions")
    return Catalog(definitions, version=version)
