"""Covert operations models.

This module exports the catalog, the polity-side records exchanged through
the world ports, and the report models the engine produces.
"""

from .actions import (
    MAGNITUDE_STATS,
    ActionCategory,
    ActionDefinition,
    ActionKind,
    EffectCode,
    StatKey,
)
from .catalog import DEFAULT_CATALOG, DEFAULT_CATALOG_VERSION, Catalog
from .reports import (
    Motive,
    MotiveKind,
    OperationOutcome,
    PressureReport,
    ResolutionResult,
    ResolutionStatus,
    RetaliationOutcome,
    TargetCandidate,
)
from .state import (
    ActorSnapshot,
    CapabilityInstance,
    CapabilityStatus,
    Character,
    Creed,
    EventSeverity,
    Faction,
    MemoryEvent,
    Personality,
    Relationship,
    RelationshipStatus,
    Rivalry,
    WorldEvent,
    clamp,
    clamp_score,
    clamp_stat,
    clamp_trust,
)

__all__ = [
    # Enums
    "ActionCategory",
    "ActionKind",
    "EffectCode",
    "StatKey",
    "MotiveKind",
    "ResolutionStatus",
    "RelationshipStatus",
    "CapabilityStatus",
    "EventSeverity",
    # Catalog
    "ActionDefinition",
    "Catalog",
    "DEFAULT_CATALOG",
    "DEFAULT_CATALOG_VERSION",
    "MAGNITUDE_STATS",
    # Polity records
    "ActorSnapshot",
    "Relationship",
    "MemoryEvent",
    "CapabilityInstance",
    "Rivalry",
    "Creed",
    "Personality",
    "Character",
    "Faction",
    "WorldEvent",
    # Reports
    "Motive",
    "TargetCandidate",
    "PressureReport",
    "ResolutionResult",
    "RetaliationOutcome",
    "OperationOutcome",
    # Clamp helpers
    "clamp",
    "clamp_score",
    "clamp_stat",
    "clamp_trust",
]
