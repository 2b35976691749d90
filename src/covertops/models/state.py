"""Polity-side records read and written through the world ports.

The engine owns none of this state. These models are the shapes the ports
exchange: snapshots of a polity, bilateral relationships, memories, embedded
agents (capability instances), rivalries, creeds, personalities, characters
and factions, plus the world events the engine emits.

Clamping rules:
- Probabilities, scores and rate-type stats: [0, 100]
- Trust: [-100, 100]
- Magnitude-type stats (population, wealth, food): floored at 0, never capped
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from covertops.models.actions import StatKey
from covertops.parameters import (
    DEFAULT_AGENT_SKILL,
    DEFAULT_COUNTER_INTEL,
    DEFAULT_PERSONALITY_TRAIT,
    SCORE_MAX,
    SCORE_MIN,
    TRUST_MAX,
    TRUST_MIN,
)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value to the specified range."""
    return max(min_val, min(max_val, value))


def clamp_score(value: float) -> float:
    """Clamp a probability or score to [0, 100]."""
    return clamp(value, SCORE_MIN, SCORE_MAX)


def clamp_trust(value: float) -> float:
    return clamp(value, TRUST_MIN, TRUST_MAX)


def clamp_stat(key: StatKey, value: float) -> float:
    """Apply the stat's saturation rule.

    Rate-type stats clamp to [0, 100]; magnitude-type stats only floor at 0.

    Examples:
        >>> clamp_stat(StatKey.HAPPINESS, 130)
        100.0
        >>> clamp_stat(StatKey.WEALTH, 130)
        130
        >>> clamp_stat(StatKey.FOOD, -5)
        0.0
    """
    if key.is_rate:
        return clamp_score(value)
    return max(0.0, value)


class ActorSnapshot(BaseModel):
    """Read-only view of one polity's stats.

    Attributes:
        id: Stable polity identifier
        name: Display name used in event and memory text
        counter_intel: Strength of the polity's counter-intelligence (0-100)
        sick_population: Head count currently marked sick
        eliminated: Eliminated polities are never targeted
    """

    id: str
    name: str = ""
    population: float = Field(default=100.0, ge=0.0)
    food: float = Field(default=50.0, ge=0.0)
    wealth: float = Field(default=50.0, ge=0.0)
    military: float = Field(default=50.0, ge=0.0, le=100.0)
    happiness: float = Field(default=50.0, ge=0.0, le=100.0)
    influence: float = Field(default=50.0, ge=0.0, le=100.0)
    technology: float = Field(default=50.0, ge=0.0, le=100.0)
    knowledge: float = Field(default=50.0, ge=0.0, le=100.0)
    piety: float = Field(default=50.0, ge=0.0, le=100.0)
    counter_intel: float = Field(default=DEFAULT_COUNTER_INTEL, ge=0.0, le=100.0)
    sick_population: int = Field(default=0, ge=0)
    eliminated: bool = False

    @field_validator("population", "food", "wealth", mode="before")
    @classmethod
    def floor_magnitude(cls, v: float) -> float:
        """Floor magnitude stats at 0."""
        return max(0.0, float(v))

    @field_validator(
        "military", "happiness", "influence", "technology", "knowledge", "piety", "counter_intel", mode="before"
    )
    @classmethod
    def clamp_rate(cls, v: float) -> float:
        """Clamp rate stats to [0, 100]."""
        return clamp_score(float(v))

    @field_validator("sick_population", mode="before")
    @classmethod
    def floor_sick(cls, v: int) -> int:
        return max(0, int(v))

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def stat(self, key: StatKey) -> float:
        return getattr(self, key.value)


class RelationshipStatus(str, Enum):
    """Diplomatic status between two polities.

    neutral -> {friendly, tense} -> {allied, hostile} -> at_war

    This engine only ever moves a relationship toward hostile or at_war.
    """

    ALLIED = "allied"
    FRIENDLY = "friendly"
    NEUTRAL = "neutral"
    TENSE = "tense"
    HOSTILE = "hostile"
    AT_WAR = "at_war"

    @property
    def severity(self) -> int:
        return _STATUS_SEVERITY[self]

    def escalate_to(self, other: RelationshipStatus) -> RelationshipStatus:
        """Return whichever of the two statuses is more hostile."""
        return other if other.severity > self.severity else self


_STATUS_SEVERITY = {
    RelationshipStatus.ALLIED: 0,
    RelationshipStatus.FRIENDLY: 1,
    RelationshipStatus.NEUTRAL: 2,
    RelationshipStatus.TENSE: 3,
    RelationshipStatus.HOSTILE: 4,
    RelationshipStatus.AT_WAR: 5,
}


class Relationship(BaseModel):
    """Symmetric bilateral relationship between two polities."""

    trust: float = Field(default=0.0, ge=TRUST_MIN, le=TRUST_MAX)
    status: RelationshipStatus = RelationshipStatus.NEUTRAL
    war_cause: str | None = None
    war_start_tick: int | None = None

    @field_validator("trust", mode="before")
    @classmethod
    def clamp_trust_value(cls, v: float) -> float:
        """Clamp trust to [-100, 100]."""
        return clamp_trust(float(v))


class MemoryEvent(BaseModel):
    """An emotionally weighted memory held by (or emitted for) an actor.

    Negative weights are grievances; a betrayal recorded after a detected
    sabotage carries -50.
    """

    actor: str
    kind: str
    description: str = ""
    emotional_weight: float = 0.0
    target: str | None = None


class CapabilityStatus(str, Enum):
    ACTIVE = "active"
    CAPTURED = "captured"
    RECALLED = "recalled"


class CapabilityInstance(BaseModel):
    """An embedded agent owned by one polity and placed inside another."""

    id: str
    owner: str
    target: str
    skill: float = Field(default=DEFAULT_AGENT_SKILL, ge=0.0, le=100.0)
    status: CapabilityStatus = CapabilityStatus.ACTIVE

    @field_validator("skill", mode="before")
    @classmethod
    def clamp_skill(cls, v: float) -> float:
        return clamp_score(float(v))

    @property
    def is_active(self) -> bool:
        return self.status == CapabilityStatus.ACTIVE


class Rivalry(BaseModel):
    other: str
    intensity: float = Field(default=0.0, ge=0.0, le=100.0)
    status: str = "active"

    @field_validator("intensity", mode="before")
    @classmethod
    def clamp_intensity(cls, v: float) -> float:
        return clamp_score(float(v))


class Creed(BaseModel):
    """The faith a polity founded; tolerance gates ideological conflict."""

    name: str
    tolerance: float = Field(default=50.0, ge=0.0, le=100.0)

    @field_validator("tolerance", mode="before")
    @classmethod
    def clamp_tolerance(cls, v: float) -> float:
        return clamp_score(float(v))


class Personality(BaseModel):
    cunning: float = Field(default=DEFAULT_PERSONALITY_TRAIT, ge=0.0, le=100.0)
    aggression: float = Field(default=DEFAULT_PERSONALITY_TRAIT, ge=0.0, le=100.0)
    wrath: float = Field(default=DEFAULT_PERSONALITY_TRAIT, ge=0.0, le=100.0)

    @field_validator("cunning", "aggression", "wrath", mode="before")
    @classmethod
    def clamp_trait(cls, v: float) -> float:
        """Clamp personality traits to [0, 100]."""
        return clamp_score(float(v))


class Character(BaseModel):
    """A named person on a polity's roster."""

    id: str
    name: str
    owner: str
    role: str | None = None
    profession: str | None = None
    is_alive: bool = True
    cause_of_death: str | None = None
    death_tick: int | None = None


class Faction(BaseModel):
    """An internal faction seeded inside a polity."""

    owner: str
    name: str
    kind: str
    power: float = Field(default=0.0, ge=0.0, le=100.0)
    loyalty: float = Field(default=0.0, ge=0.0, le=100.0)
    grievances: list[str] = Field(default_factory=list)
    is_rebelling: bool = False
    rebellion_risk: float = Field(default=0.0, ge=0.0, le=100.0)
    created_tick: int | None = None

    @field_validator("power", "loyalty", "rebellion_risk", mode="before")
    @classmethod
    def clamp_scores(cls, v: float) -> float:
        return clamp_score(float(v))


class EventSeverity(str, Enum):
    INFO = "info"
    NEGATIVE = "negative"
    CRITICAL = "critical"


class WorldEvent(BaseModel):
    tick: int
    kind: str
    actor: str
    target: str | None = None
    title: str
    description: str
    severity: EventSeverity = EventSeverity.INFO
