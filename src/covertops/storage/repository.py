"""Abstract world ports for the covert operations engine.

The engine reads and writes polity state only through these interfaces.
The simulation supplies an adapter over its own persistence; tests and
scripts use the in-memory adapter in covertops.storage.memory_repo.
"""

from abc import ABC, abstractmethod
from typing import Optional

from covertops.models.actions import StatKey
from covertops.models.state import (
    ActorSnapshot,
    CapabilityInstance,
    Character,
    Creed,
    Faction,
    MemoryEvent,
    Personality,
    Relationship,
    RelationshipStatus,
    Rivalry,
    WorldEvent,
)


class WorldReader(ABC):
    """Read side of the world ports."""

    @abstractmethod
    def get_actor(self, actor_id: str) -> Optional[ActorSnapshot]:
        """Load a polity snapshot.

        Returns:
            Snapshot, or None if the identifier does not resolve
        """
        pass

    @abstractmethod
    def list_actors(self) -> list[ActorSnapshot]:
        """Return every polity, eliminated ones included."""
        pass

    @abstractmethod
    def get_relationship(self, a: str, b: str) -> Optional[Relationship]:
        """Load the symmetric relationship between two polities.

        Returns:
            Relationship, or None if the pair has never interacted
        """
        pass

    @abstractmethod
    def get_memories(self, actor_id: str) -> list[MemoryEvent]:
        """Return an actor's memories, oldest first."""
        pass

    @abstractmethod
    def get_capability_instances(self, owner: str, target: str) -> list[CapabilityInstance]:
        """Return every agent `owner` has placed in `target`, any status."""
        pass

    @abstractmethod
    def get_rivalries(self, actor_id: str) -> list[Rivalry]:
        pass

    @abstractmethod
    def get_creed(self, actor_id: str) -> Optional[Creed]:
        """Return the creed an actor founded, or None (disables ideological motives)."""
        pass

    @abstractmethod
    def get_personality(self, actor_id: str) -> Optional[Personality]:
        pass

    @abstractmethod
    def get_characters(self, actor_id: str) -> list[Character]:
        """Return the actor's roster in stable order, dead characters included."""
        pass


class WorldWriter(ABC):
    """Write side of the world ports.

    Every method is a side effect invoked by the engine. Values passed in are
    already clamped by the engine.
    """

    @abstractmethod
    def apply_stat_delta(self, actor_id: str, deltas: dict[StatKey, float]) -> None:
        pass

    @abstractmethod
    def set_relationship(
        self,
        a: str,
        b: str,
        trust: Optional[float] = None,
        status: Optional[RelationshipStatus] = None,
        war_cause: Optional[str] = None,
        war_start_tick: Optional[int] = None,
    ) -> None:
        """Update (or create) the relationship between two polities.

        Fields left as None are unchanged.
        """
        pass

    @abstractmethod
    def invalidate_capability_instance(self, instance_id: str) -> None:
        """Permanently mark an embedded agent as captured."""
        pass

    @abstractmethod
    def emit_world_event(self, event: WorldEvent) -> None:
        pass

    @abstractmethod
    def emit_memory_event(self, memory: MemoryEvent) -> None:
        pass

    @abstractmethod
    def move_character(self, character_id: str, new_owner: str) -> None:
        pass

    @abstractmethod
    def kill_character(self, character_id: str, cause: str, tick: int) -> None:
        pass

    @abstractmethod
    def spawn_faction(self, faction: Faction) -> None:
        pass

    @abstractmethod
    def mark_sick(self, actor_id: str, count: int) -> None:
        """Add `count` to the actor's sick head count, capped at its population."""
        pass


class World(WorldReader, WorldWriter):
    """Both sides of the world ports, as the engine consumes them."""
