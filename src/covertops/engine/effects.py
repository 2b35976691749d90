"""Special-effect handlers.

Every EffectCode maps to exactly one handler. A handler performs one focused
mutation through the world write port and returns the attacker-side gains it
produced, keyed by stat name (or by a head-count label such as "craftsmen").

Handlers see only the snapshots taken before the operation was resolved, so
the base effect vector just applied to the target never feeds back into a
handler's arithmetic.

Codes without a mechanical effect are report-only: the code is surfaced in
the ResolutionResult and nothing else happens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from covertops.errors import CatalogError
from covertops.models.actions import EffectCode, StatKey
from covertops.models.state import ActorSnapshot, Character, Faction, clamp_stat
from covertops.parameters import (
    ARMY_PLAGUE_SICK,
    BATTLE_PLANS_MILITARY,
    CRAFTSMAN_PROFESSIONS,
    CULT_FACTION_POWER,
    MASS_POISONING_SICK,
    MAX_KIDNAPPED_CRAFTSMEN,
    MAX_PRIESTS_KILLED,
    MINOR_SICKNESS,
    OFFICIALS_CONTROLLED_INFLUENCE,
    OPPOSITION_FACTION_POWER,
    PLAGUE_SICK,
    POPULATION_DRAIN_CAP,
    POPULATION_DRAIN_FRACTION,
    REBEL_FACTION_POWER,
    REBEL_FACTION_REBELLION_RISK,
    RELICS_STOLEN_INFLUENCE,
    SOLDIERS_DEFECT_MILITARY,
    TECH_STOLEN_KNOWLEDGE,
    TECH_STOLEN_TECHNOLOGY,
)
from covertops.storage.repository import World

logger = logging.getLogger(__name__)

ASSASSINATION = "assassination"


@dataclass(frozen=True)
class EffectContext:
    """Everything a handler may touch.

    attacker and target are the pre-resolution snapshots.
    """

    world: World
    attacker: ActorSnapshot
    target: ActorSnapshot
    tick: int


EffectHandler = Callable[[EffectContext], dict[str, float]]

HANDLERS: dict[EffectCode, EffectHandler] = {}


def handles(*codes: EffectCode) -> Callable[[EffectHandler], EffectHandler]:
    """Register a handler for one or more effect codes."""

    def register(func: EffectHandler) -> EffectHandler:
        for code in codes:
            if code in HANDLERS:
                raise CatalogError(f"Effect code {code.value} has two handlers")
            HANDLERS[code] = func
        return func

    return register


def apply_effect(code: EffectCode, ctx: EffectContext) -> dict[str, float]:
    """Run the handler for an effect code and return the attacker gains."""
    gains = HANDLERS[code](ctx)
    logger.debug(f"Effect {code.value} on {ctx.target.id}: gains={gains}")
    return gains


def check_handlers(codes: set[EffectCode]) -> None:
    """Raise CatalogError if any of the given codes has no handler."""
    missing = sorted(code.value for code in codes if code not in HANDLERS)
    if missing:
        raise CatalogError(f"No handler for effect codes: {', '.join(missing)}")


# =============================================================================
# Attacker gains
# =============================================================================


def _credit_attacker(ctx: EffectContext, deltas: dict[StatKey, float]) -> dict[str, float]:
    """Apply saturating gains to the attacker and report what actually landed."""
    effective = {}
    for key, delta in deltas.items():
        before = ctx.attacker.stat(key)
        effective[key] = clamp_stat(key, before + delta) - before
    ctx.world.apply_stat_delta(ctx.attacker.id, effective)
    return {key.value: delta for key, delta in effective.items()}


@handles(EffectCode.TECH_STOLEN)
def tech_stolen(ctx: EffectContext) -> dict[str, float]:
    return _credit_attacker(
        ctx,
        {StatKey.KNOWLEDGE: TECH_STOLEN_KNOWLEDGE, StatKey.TECHNOLOGY: TECH_STOLEN_TECHNOLOGY},
    )


@handles(EffectCode.SOLDIERS_DEFECT)
def soldiers_defect(ctx: EffectContext) -> dict[str, float]:
    return _credit_attacker(ctx, {StatKey.MILITARY: SOLDIERS_DEFECT_MILITARY})


@handles(EffectCode.BATTLE_PLANS_STOLEN)
def battle_plans_stolen(ctx: EffectContext) -> dict[str, float]:
    return _credit_attacker(ctx, {StatKey.MILITARY: BATTLE_PLANS_MILITARY})


@handles(EffectCode.RELICS_STOLEN)
def relics_stolen(ctx: EffectContext) -> dict[str, float]:
    return _credit_attacker(ctx, {StatKey.INFLUENCE: RELICS_STOLEN_INFLUENCE})


@handles(EffectCode.OFFICIALS_CONTROLLED)
def officials_controlled(ctx: EffectContext) -> dict[str, float]:
    return _credit_attacker(ctx, {StatKey.INFLUENCE: OFFICIALS_CONTROLLED_INFLUENCE})


@handles(EffectCode.POPULATION_DRAIN)
def population_drain(ctx: EffectContext) -> dict[str, float]:
    """Emigrants leave the target for the attacker's lands.

    The target's own loss is carried by the action's effect vector.
    """
    gain = min(POPULATION_DRAIN_CAP, int(ctx.target.population * POPULATION_DRAIN_FRACTION))
    return _credit_attacker(ctx, {StatKey.POPULATION: gain})


# =============================================================================
# Roster mutations
# =============================================================================


def _living(ctx: EffectContext) -> list[Character]:
    return [c for c in ctx.world.get_characters(ctx.target.id) if c.is_alive]


def _kill(ctx: EffectContext, victims: list[Character]) -> None:
    for victim in victims:
        ctx.world.kill_character(victim.id, ASSASSINATION, ctx.tick)
        logger.info(f"{victim.name} of {ctx.target.display_name} was assassinated")


@handles(EffectCode.CRAFTSMEN_KIDNAPPED)
def craftsmen_kidnapped(ctx: EffectContext) -> dict[str, float]:
    craftsmen = [c for c in _living(ctx) if c.profession in CRAFTSMAN_PROFESSIONS]
    taken = craftsmen[:MAX_KIDNAPPED_CRAFTSMEN]
    for worker in taken:
        ctx.world.move_character(worker.id, ctx.attacker.id)
    return {"craftsmen": len(taken)}


@handles(EffectCode.GENERAL_KILLED)
def general_killed(ctx: EffectContext) -> dict[str, float]:
    generals = [c for c in _living(ctx) if c.role == "general"]
    _kill(ctx, generals[:1])
    return {}


@handles(EffectCode.HEIR_KILLED)
def heir_killed(ctx: EffectContext) -> dict[str, float]:
    heirs = [c for c in _living(ctx) if c.role == "heir"]
    _kill(ctx, heirs[:1])
    return {}


@handles(EffectCode.SUCCESSION_CRISIS)
def succession_crisis(ctx: EffectContext) -> dict[str, float]:
    _kill(ctx, [c for c in _living(ctx) if c.role == "heir"])
    return {}


@handles(EffectCode.PRIESTS_KILLED)
def priests_killed(ctx: EffectContext) -> dict[str, float]:
    priests = [c for c in _living(ctx) if c.profession == "priest"]
    _kill(ctx, priests[:MAX_PRIESTS_KILLED])
    return {}


@handles(EffectCode.HEALERS_KILLED)
def healers_killed(ctx: EffectContext) -> dict[str, float]:
    _kill(ctx, [c for c in _living(ctx) if c.profession == "physician"])
    return {}


# =============================================================================
# Sickness
# =============================================================================


def _sicken(count: int) -> EffectHandler:
    def handler(ctx: EffectContext) -> dict[str, float]:
        ctx.world.mark_sick(ctx.target.id, count)
        return {}

    return handler


handles(EffectCode.PLAGUE_STARTED, EffectCode.DISEASE_OUTBREAK)(_sicken(PLAGUE_SICK))
handles(EffectCode.ARMY_PLAGUE)(_sicken(ARMY_PLAGUE_SICK))
handles(EffectCode.MASS_POISONING)(_sicken(MASS_POISONING_SICK))
handles(
    EffectCode.ARMY_SICKNESS,
    EffectCode.HOLY_WATER_POISONED,
    EffectCode.WATER_CRISIS,
)(_sicken(MINOR_SICKNESS))


# =============================================================================
# Factions
# =============================================================================


@handles(EffectCode.REBELLION_STARTED)
def rebellion_started(ctx: EffectContext) -> dict[str, float]:
    ctx.world.spawn_faction(
        Faction(
            owner=ctx.target.id,
            name="Rebel Movement",
            kind="rebel",
            power=REBEL_FACTION_POWER,
            loyalty=0,
            grievances=["Foreign-backed uprising"],
            is_rebelling=True,
            rebellion_risk=REBEL_FACTION_REBELLION_RISK,
            created_tick=ctx.tick,
        )
    )
    return {}


@handles(EffectCode.FACTION_STRENGTHENED)
def faction_strengthened(ctx: EffectContext) -> dict[str, float]:
    ctx.world.spawn_faction(
        Faction(
            owner=ctx.target.id,
            name="Foreign-Backed Opposition",
            kind="opposition",
            power=OPPOSITION_FACTION_POWER,
            grievances=["Foreign gold"],
            created_tick=ctx.tick,
        )
    )
    return {}


@handles(EffectCode.CULT_FORMED)
def cult_formed(ctx: EffectContext) -> dict[str, float]:
    ctx.world.spawn_faction(
        Faction(
            owner=ctx.target.id,
            name="Heretic Cult",
            kind="cult",
            power=CULT_FACTION_POWER,
            grievances=["False prophets"],
            created_tick=ctx.tick,
        )
    )
    return {}


# =============================================================================
# Report-only codes
# =============================================================================


REPORT_ONLY = (
    EffectCode.CROP_DISEASE,
    EffectCode.INFLATION,
    EffectCode.MINE_COLLAPSE,
    EffectCode.PEST_INFESTATION,
    EffectCode.WEAPON_QUALITY_DROP,
    EffectCode.MASS_DESERTION,
    EffectCode.WALLS_WEAKENED,
    EffectCode.SIEGE_DISABLED,
    EffectCode.LEGITIMACY_DROP,
    EffectCode.BAD_DECISIONS,
    EffectCode.DIPLOMATIC_CHAOS,
    EffectCode.INTERNAL_PURGE,
    EffectCode.RULER_DISCREDITED,
    EffectCode.TEMPLE_DEFILED,
    EffectCode.RELIGIOUS_SCHISM,
    EffectCode.TEXTS_CORRUPTED,
    EffectCode.FALSE_OMENS,
    EffectCode.BRIDGES_DESTROYED,
    EffectCode.PASSES_BLOCKED,
    EffectCode.HARBOR_DESTROYED,
    EffectCode.MINES_COLLAPSED,
    EffectCode.CITY_BURNING,
    EffectCode.RIVER_DIVERTED,
    EffectCode.ROADS_DESTROYED,
    EffectCode.TERROR_CAMPAIGN,
    EffectCode.INTIMIDATION,
    EffectCode.SUPERSTITION_FEAR,
    EffectCode.SLEEP_DEPRIVATION,
    EffectCode.DEFEATISM,
    EffectCode.CLASS_CONFLICT,
    EffectCode.ETHNIC_TENSION,
    EffectCode.YOUTH_CORRUPTED,
    EffectCode.MARRIAGES_BROKEN,
    EffectCode.ADDICTION_EPIDEMIC,
    EffectCode.CULTURE_DESTROYED,
)
"""Codes whose whole effect is carried by the action's effect vector."""


@handles(*REPORT_ONLY)
def report_only(ctx: EffectContext) -> dict[str, float]:
    return {}


check_handlers(set(EffectCode))
