"""Integration tests for world snapshots, catalog overrides and configuration."""

import json
import logging

import pytest
from pydantic import ValidationError

from covertops.errors import CatalogError
from covertops.models import (
    DEFAULT_CATALOG,
    ActionKind,
    CapabilityInstance,
    Character,
    MemoryEvent,
    RelationshipStatus,
    StatKey,
)
from covertops.storage import (
    InMemoryWorld,
    get_catalog,
    get_seed,
    get_world,
    get_world_path,
    load_catalog,
    load_world,
    save_world,
)


def write_json(path, data) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


BURN_GRANARIES_ENTRY = {
    "kind": "burn_granaries",
    "category": "economic",
    "base_difficulty": 30,
    "base_detect_chance": 50,
    "war_risk": 35,
    "effect_vector": {"food": -40},
}


# =============================================================================
# World Snapshots
# =============================================================================


class TestWorldSnapshots:
    """Tests for saving and loading worlds."""

    def test_save_and_load(self, world: InMemoryWorld, tmp_path) -> None:
        world.add_relationship("north", "south", trust=-45, status=RelationshipStatus.HOSTILE)
        world.add_memory(MemoryEvent(actor="north", kind="betrayal", emotional_weight=-50, target="south"))
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south", skill=65))
        world.add_character(Character(id="c1", name="Ada", owner="south", role="heir"))
        path = tmp_path / "worlds" / "saved.json"

        save_world(world, path)
        loaded = load_world(path)

        assert loaded.to_snapshot() == world.to_snapshot()
        assert loaded.get_relationship("south", "north").status == RelationshipStatus.HOSTILE

    def test_load_hand_written_snapshot(self, tmp_path) -> None:
        path = write_json(
            tmp_path / "world.json",
            {
                "actors": [
                    {"id": "north", "name": "Northreach", "food": 10},
                    {"id": "south", "name": "Southmarch", "food": 60},
                ],
                "relationships": [{"a": "south", "b": "north", "trust": -20}],
                "personalities": {"north": {"cunning": 80}},
            },
        )

        world = load_world(path)

        assert world.get_actor("north").food == 10
        assert world.get_relationship("north", "south").trust == -20
        assert world.get_personality("north").cunning == 80

    def test_malformed_snapshot(self, tmp_path) -> None:
        path = write_json(tmp_path / "world.json", {"actors": [{"name": "no id"}]})

        with pytest.raises(ValidationError):
            load_world(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_world(tmp_path / "absent.json")


# =============================================================================
# Catalog Overrides
# =============================================================================


class TestCatalogOverrides:
    """Tests for JSON catalog files."""

    def test_load_catalog(self, tmp_path) -> None:
        path = write_json(tmp_path / "catalog.json", {"version": "balance-2", "actions": [BURN_GRANARIES_ENTRY]})

        catalog = load_catalog(path)

        assert catalog.version == "balance-2"
        definition = catalog.get(ActionKind.BURN_GRANARIES)
        assert definition.base_difficulty == 30
        assert definition.effect_vector == {StatKey.FOOD: -40}

    def test_unknown_kind_skipped(self, tmp_path, caplog) -> None:
        path = write_json(
            tmp_path / "catalog.json",
            {"actions": [BURN_GRANARIES_ENTRY, {"kind": "summon_dragons", "category": "economic"}]},
        )

        with caplog.at_level(logging.WARNING, logger="covertops.storage.file_repo"):
            catalog = load_catalog(path)

        assert catalog.kinds() == [ActionKind.BURN_GRANARIES]
        assert catalog.version == "1.0"
        assert "summon_dragons" in caplog.text

    def test_duplicate_kind(self, tmp_path) -> None:
        path = write_json(tmp_path / "catalog.json", {"actions": [BURN_GRANARIES_ENTRY, BURN_GRANARIES_ENTRY]})

        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_malformed_entry(self, tmp_path) -> None:
        entry = dict(BURN_GRANARIES_ENTRY, base_difficulty=150)
        path = write_json(tmp_path / "catalog.json", {"actions": [entry]})

        with pytest.raises(ValidationError):
            load_catalog(path)


# =============================================================================
# Configuration
# =============================================================================


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_standard_catalog_by_default(self, monkeypatch) -> None:
        monkeypatch.delenv("COVERTOPS_CATALOG_PATH", raising=False)
        assert get_catalog() is DEFAULT_CATALOG

    def test_catalog_from_environment(self, tmp_path, monkeypatch) -> None:
        path = write_json(tmp_path / "catalog.json", {"version": "env", "actions": [BURN_GRANARIES_ENTRY]})
        monkeypatch.setenv("COVERTOPS_CATALOG_PATH", path)

        assert get_catalog().version == "env"

    @pytest.mark.parametrize("value,expected", [(None, None), ("", None), ("42", 42)])
    def test_seed(self, monkeypatch, value, expected) -> None:
        if value is None:
            monkeypatch.delenv("COVERTOPS_SEED", raising=False)
        else:
            monkeypatch.setenv("COVERTOPS_SEED", value)

        assert get_seed() == expected

    def test_world_path(self, tmp_path, monkeypatch) -> None:
        monkeypatch.delenv("COVERTOPS_WORLD_PATH", raising=False)
        assert get_world_path() == "worlds/default.json"

        world = InMemoryWorld()
        world.add_actor(id="north")
        path = tmp_path / "env.json"
        save_world(world, path)
        monkeypatch.setenv("COVERTOPS_WORLD_PATH", str(path))

        assert [a.id for a in get_world().list_actors()] == ["north"]
