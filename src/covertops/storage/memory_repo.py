"""In-memory world adapter.

InMemoryWorld implements both world ports over plain dictionaries. It backs
the test suite and the simulation scripts, and doubles as the reference
behavior for adapters over real persistence.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from covertops.models.actions import StatKey
from covertops.models.state import (
    ActorSnapshot,
    CapabilityInstance,
    CapabilityStatus,
    Character,
    Creed,
    Faction,
    MemoryEvent,
    Personality,
    Relationship,
    RelationshipStatus,
    Rivalry,
    WorldEvent,
    clamp_stat,
    clamp_trust,
)

from .repository import World


def relationship_key(a: str, b: str) -> tuple[str, str]:
    """Order-independent key for a bilateral relationship."""
    return (a, b) if a <= b else (b, a)


class RelationshipRecord(BaseModel):
    a: str
    b: str
    trust: float = 0.0
    status: RelationshipStatus = RelationshipStatus.NEUTRAL
    war_cause: str | None = None
    war_start_tick: int | None = None


class WorldSnapshot(BaseModel):
    """Serializable form of an InMemoryWorld."""

    actors: list[ActorSnapshot] = Field(default_factory=list)
    relationships: list[RelationshipRecord] = Field(default_factory=list)
    memories: list[MemoryEvent] = Field(default_factory=list)
    capabilities: list[CapabilityInstance] = Field(default_factory=list)
    rivalries: dict[str, list[Rivalry]] = Field(default_factory=dict)
    creeds: dict[str, Creed] = Field(default_factory=dict)
    personalities: dict[str, Personality] = Field(default_factory=dict)
    characters: list[Character] = Field(default_factory=list)
    factions: list[Faction] = Field(default_factory=list)
    events: list[WorldEvent] = Field(default_factory=list)


class InMemoryWorld(World):
    """Dictionary-backed implementation of the world ports."""

    def __init__(self) -> None:
        self.actors: dict[str, ActorSnapshot] = {}
        self.relationships: dict[tuple[str, str], Relationship] = {}
        self.memories: dict[str, list[MemoryEvent]] = {}
        self.capabilities: dict[str, CapabilityInstance] = {}
        self.rivalries: dict[str, list[Rivalry]] = {}
        self.creeds: dict[str, Creed] = {}
        self.personalities: dict[str, Personality] = {}
        self.characters: dict[str, Character] = {}
        self.factions: list[Faction] = []
        self.events: list[WorldEvent] = []

    # -------------------------------------------------------------------------
    # Setup helpers
    # -------------------------------------------------------------------------

    def add_actor(self, actor: ActorSnapshot | None = None, **fields) -> ActorSnapshot:
        """Register a polity, either as a snapshot or from keyword fields."""
        if actor is None:
            actor = ActorSnapshot(**fields)
        self.actors[actor.id] = actor
        return actor

    def add_relationship(
        self,
        a: str,
        b: str,
        trust: float = 0.0,
        status: RelationshipStatus = RelationshipStatus.NEUTRAL,
    ) -> Relationship:
        relationship = Relationship(trust=trust, status=status)
        self.relationships[relationship_key(a, b)] = relationship
        return relationship

    def add_memory(self, memory: MemoryEvent) -> None:
        self.memories.setdefault(memory.actor, []).append(memory)

    def add_capability(self, instance: CapabilityInstance) -> CapabilityInstance:
        self.capabilities[instance.id] = instance
        return instance

    def add_rivalry(self, actor_id: str, rivalry: Rivalry) -> None:
        self.rivalries.setdefault(actor_id, []).append(rivalry)

    def set_creed(self, actor_id: str, creed: Creed) -> None:
        self.creeds[actor_id] = creed

    def set_personality(self, actor_id: str, personality: Personality) -> None:
        self.personalities[actor_id] = personality

    def add_character(self, character: Character) -> Character:
        self.characters[character.id] = character
        return character

    # -------------------------------------------------------------------------
    # Read port
    # -------------------------------------------------------------------------

    def get_actor(self, actor_id: str) -> Optional[ActorSnapshot]:
        actor = self.actors.get(actor_id)
        return actor.model_copy() if actor is not None else None

    def list_actors(self) -> list[ActorSnapshot]:
        return [actor.model_copy() for actor in self.actors.values()]

    def get_relationship(self, a: str, b: str) -> Optional[Relationship]:
        relationship = self.relationships.get(relationship_key(a, b))
        return relationship.model_copy() if relationship is not None else None

    def get_memories(self, actor_id: str) -> list[MemoryEvent]:
        return list(self.memories.get(actor_id, []))

    def get_capability_instances(self, owner: str, target: str) -> list[CapabilityInstance]:
        return [
            instance.model_copy()
            for instance in self.capabilities.values()
            if instance.owner == owner and instance.target == target
        ]

    def get_rivalries(self, actor_id: str) -> list[Rivalry]:
        return list(self.rivalries.get(actor_id, []))

    def get_creed(self, actor_id: str) -> Optional[Creed]:
        return self.creeds.get(actor_id)

    def get_personality(self, actor_id: str) -> Optional[Personality]:
        return self.personalities.get(actor_id)

    def get_characters(self, actor_id: str) -> list[Character]:
        return [c.model_copy() for c in self.characters.values() if c.owner == actor_id]

    # -------------------------------------------------------------------------
    # Write port
    # -------------------------------------------------------------------------

    def apply_stat_delta(self, actor_id: str, deltas: dict[StatKey, float]) -> None:
        actor = self.actors[actor_id]
        updates = {key.value: clamp_stat(key, actor.stat(key) + delta) for key, delta in deltas.items()}
        self.actors[actor_id] = actor.model_copy(update=updates)

    def set_relationship(
        self,
        a: str,
        b: str,
        trust: Optional[float] = None,
        status: Optional[RelationshipStatus] = None,
        war_cause: Optional[str] = None,
        war_start_tick: Optional[int] = None,
    ) -> None:
        key = relationship_key(a, b)
        relationship = self.relationships.get(key, Relationship())
        if trust is not None:
            relationship.trust = clamp_trust(trust)
        if status is not None:
            relationship.status = status
        if war_cause is not None:
            relationship.war_cause = war_cause
        if war_start_tick is not None:
            relationship.war_start_tick = war_start_tick
        self.relationships[key] = relationship

    def invalidate_capability_instance(self, instance_id: str) -> None:
        instance = self.capabilities[instance_id]
        instance.status = CapabilityStatus.CAPTURED

    def emit_world_event(self, event: WorldEvent) -> None:
        self.events.append(event)

    def emit_memory_event(self, memory: MemoryEvent) -> None:
        self.add_memory(memory)

    def move_character(self, character_id: str, new_owner: str) -> None:
        self.characters[character_id].owner = new_owner

    def kill_character(self, character_id: str, cause: str, tick: int) -> None:
        character = self.characters[character_id]
        character.is_alive = False
        character.cause_of_death = cause
        character.death_tick = tick

    def spawn_faction(self, faction: Faction) -> None:
        self.factions.append(faction)

    def mark_sick(self, actor_id: str, count: int) -> None:
        actor = self.actors[actor_id]
        sick = min(int(actor.population), actor.sick_population + count)
        self.actors[actor_id] = actor.model_copy(update={"sick_population": max(0, sick)})

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @classmethod
    def from_snapshot(cls, snapshot: WorldSnapshot) -> InMemoryWorld:
        world = cls()
        for actor in snapshot.actors:
            world.add_actor(actor)
        for record in snapshot.relationships:
            world.relationships[relationship_key(record.a, record.b)] = Relationship(
                trust=record.trust,
                status=record.status,
                war_cause=record.war_cause,
                war_start_tick=record.war_start_tick,
            )
        for memory in snapshot.memories:
            world.add_memory(memory)
        for instance in snapshot.capabilities:
            world.add_capability(instance)
        for actor_id, rivalries in snapshot.rivalries.items():
            for rivalry in rivalries:
                world.add_rivalry(actor_id, rivalry)
        world.creeds.update(snapshot.creeds)
        world.personalities.update(snapshot.personalities)
        for character in snapshot.characters:
            world.add_character(character)
        world.factions.extend(snapshot.factions)
        world.events.extend(snapshot.events)
        return world

    def to_snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            actors=list(self.actors.values()),
            relationships=[
                RelationshipRecord(
                    a=a,
                    b=b,
                    trust=rel.trust,
                    status=rel.status,
                    war_cause=rel.war_cause,
                    war_start_tick=rel.war_start_tick,
                )
                for (a, b), rel in self.relationships.items()
            ],
            memories=[m for memories in self.memories.values() for m in memories],
            capabilities=list(self.capabilities.values()),
            rivalries=dict(self.rivalries),
            creeds=dict(self.creeds),
            personalities=dict(self.personalities),
            characters=list(self.characters.values()),
            factions=list(self.factions),
            events=list(self.events),
        )
