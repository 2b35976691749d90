"""Motive aggregation.

Reads one actor's situation through the world read port and turns it into
weighted motives plus an aggregate pressure score.

Motive families:
- Desperation: famine and poverty (global), with envy aimed at richer rivals
- Grudge: recent betrayals, defeats and losses
- Hostility: low trust, or open war
- Rivalry: active rivalries
- Strategic necessity: a weak military facing stronger distrusted rivals
- Ideological conflict: an intolerant creed facing a different one
- Opportunism: weak rivals we do not trust

The aggregate is the mean intensity over every motive found, scaled by the
actor's cunning and clamped to 100. Per-target sums feed TargetSelector.
"""

from __future__ import annotations

import logging

from covertops.errors import ActorNotFoundError
from covertops.models.actions import ActionKind
from covertops.models.catalog import DEFAULT_CATALOG, Catalog
from covertops.models.reports import Motive, MotiveKind, PressureReport
from covertops.models.state import ActorSnapshot, Personality, RelationshipStatus, clamp_score
from covertops.parameters import (
    CUNNING_BASELINE,
    FAMINE_CAP,
    FAMINE_COEFFICIENT,
    FAMINE_FOOD_THRESHOLD,
    FOOD_ENVY_FACTOR,
    FOOD_ENVY_THRESHOLD,
    GRUDGE_CAP,
    GRUDGE_FACTOR,
    GRUDGE_MEMORY_KINDS,
    GRUDGE_MEMORY_WINDOW,
    HOSTILITY_CAP,
    HOSTILITY_FACTOR,
    HOSTILITY_TRUST_THRESHOLD,
    IDEOLOGY_CAP,
    IDEOLOGY_TOLERANCE_THRESHOLD,
    MILITARY_NECESSITY_CAP,
    MILITARY_NECESSITY_FACTOR,
    MILITARY_WEAKNESS_THRESHOLD,
    OPPORTUNISM_CAP,
    OPPORTUNISM_FACTOR,
    OPPORTUNISM_HAPPINESS_THRESHOLD,
    OPPORTUNISM_MILITARY_THRESHOLD,
    OPPORTUNISM_POPULATION_THRESHOLD,
    OPPORTUNISM_TRUST_THRESHOLD,
    POVERTY_CAP,
    POVERTY_COEFFICIENT,
    POVERTY_WEALTH_THRESHOLD,
    RIVALRY_CAP,
    RIVALRY_FACTOR,
    WAR_MOTIVE_INTENSITY,
    WEALTH_ENVY_FACTOR,
    WEALTH_ENVY_THRESHOLD,
)
from covertops.storage.repository import WorldReader

from .targeting import TargetPressure, TargetSelector

logger = logging.getLogger(__name__)

A = ActionKind

SUGGESTED_ACTIONS: dict[MotiveKind, tuple[ActionKind, ...]] = {
    MotiveKind.FAMINE_DESPERATION: (A.POISON_CROPS, A.BURN_GRANARIES, A.DISRUPT_CARAVANS),
    MotiveKind.FOOD_ENVY: (A.BURN_GRANARIES, A.POISON_CROPS, A.INTRODUCE_PESTS),
    MotiveKind.POVERTY_DESPERATION: (A.STEAL_TRADE_SECRETS, A.DISRUPT_CARAVANS, A.BRIBE_MERCHANTS),
    MotiveKind.WEALTH_ENVY: (A.STEAL_TRADE_SECRETS, A.COUNTERFEIT_CURRENCY, A.BURN_MARKET),
    MotiveKind.REVENGE_GRUDGE: (A.SPREAD_TERROR, A.ASSASSINATE_HEIR, A.INCITE_REBELLION, A.SPREAD_PLAGUE),
    MotiveKind.ENEMY_HOSTILITY: (A.SABOTAGE_WEAPONS, A.POISON_ARMY_SUPPLIES, A.INCITE_DESERTION),
    MotiveKind.WAR_SABOTAGE: (
        A.POISON_ARMY_SUPPLIES,
        A.SABOTAGE_WEAPONS,
        A.ASSASSINATE_GENERAL,
        A.SPREAD_CAMP_DISEASE,
        A.SABOTAGE_FORTIFICATIONS,
        A.STEAL_BATTLE_PLANS,
    ),
    MotiveKind.RIVALRY: (A.SPREAD_PROPAGANDA, A.STEAL_TRADE_SECRETS, A.BRIBE_ADVISORS),
    MotiveKind.MILITARY_NECESSITY: (
        A.SABOTAGE_WEAPONS,
        A.BURN_ARMORY,
        A.INCITE_DESERTION,
        A.ASSASSINATE_GENERAL,
        A.DISABLE_SIEGE_EQUIPMENT,
    ),
    MotiveKind.RELIGIOUS_CONFLICT: (
        A.DESECRATE_TEMPLE,
        A.SPREAD_HERESY,
        A.ASSASSINATE_PRIESTS,
        A.CORRUPT_RELIGIOUS_TEXTS,
        A.SUPPORT_RIVAL_CULT,
    ),
    MotiveKind.OPPORTUNISM: (A.INCITE_REBELLION, A.KIDNAP_CRAFTSMEN, A.ENCOURAGE_EMIGRATION),
}


class MotiveAggregator:
    """Builds a PressureReport for one actor.

    Example:
        >>> aggregator = MotiveAggregator(world)
        >>> report = aggregator.evaluate("north")
        >>> report.top_target.target
        'south'
    """

    def __init__(self, world: WorldReader, catalog: Catalog = DEFAULT_CATALOG):
        self.world = world
        self.selector = TargetSelector(world, catalog)

    def evaluate(self, actor_id: str) -> PressureReport:
        """Aggregate every motive the actor holds.

        Raises:
            ActorNotFoundError: If actor_id does not resolve
        """
        actor = self.world.get_actor(actor_id)
        if actor is None:
            raise ActorNotFoundError(actor_id)

        others = sorted(
            (a for a in self.world.list_actors() if a.id != actor.id and not a.eliminated),
            key=lambda a: a.id,
        )
        personality = self.world.get_personality(actor.id) or Personality()

        collector = _MotiveCollector(others)
        self._desperation(actor, others, collector)
        self._grudges(actor, collector)
        self._hostility(actor, others, collector)
        self._rivalries(actor, collector)
        self._strategic_necessity(actor, others, collector)
        self._ideology(actor, others, collector)
        self._opportunism(actor, others, personality, collector)

        motives = collector.motives
        mean = sum(m.intensity for m in motives) / len(motives) if motives else 0.0
        total = clamp_score(mean * (personality.cunning / CUNNING_BASELINE))

        ranked = self.selector.rank_targets(collector.pressures)
        logger.debug(
            f"{actor.id}: {len(motives)} motives, total pressure {total:.1f}, "
            f"{len(ranked)} candidate targets"
        )
        return PressureReport(
            actor=actor.id,
            total_pressure=total,
            motives=tuple(motives),
            ranked_targets=tuple(ranked),
        )

    # -------------------------------------------------------------------------
    # Motive families
    # -------------------------------------------------------------------------

    def _desperation(self, actor: ActorSnapshot, others: list[ActorSnapshot], collector: _MotiveCollector) -> None:
        if actor.food < FAMINE_FOOD_THRESHOLD:
            intensity = min(FAMINE_CAP, (FAMINE_FOOD_THRESHOLD - actor.food) * FAMINE_COEFFICIENT)
            collector.add(MotiveKind.FAMINE_DESPERATION, intensity, None, "Our people starve while others feast")
            for other in others:
                if other.food > FOOD_ENVY_THRESHOLD:
                    collector.add(
                        MotiveKind.FOOD_ENVY,
                        intensity * FOOD_ENVY_FACTOR,
                        other.id,
                        f"{other.display_name} has abundant food while we starve",
                    )

        if actor.wealth < POVERTY_WEALTH_THRESHOLD:
            intensity = min(POVERTY_CAP, (POVERTY_WEALTH_THRESHOLD - actor.wealth) * POVERTY_COEFFICIENT)
            collector.add(
                MotiveKind.POVERTY_DESPERATION, intensity, None, "Our coffers are empty, we must take from others"
            )
            for other in others:
                if other.wealth > WEALTH_ENVY_THRESHOLD:
                    collector.add(
                        MotiveKind.WEALTH_ENVY,
                        intensity * WEALTH_ENVY_FACTOR,
                        other.id,
                        f"{other.display_name} grows rich while we suffer",
                    )

    def _grudges(self, actor: ActorSnapshot, collector: _MotiveCollector) -> None:
        recent = self.world.get_memories(actor.id)[-GRUDGE_MEMORY_WINDOW:]
        for memory in recent:
            if memory.kind not in GRUDGE_MEMORY_KINDS or not collector.knows(memory.target):
                continue
            intensity = min(GRUDGE_CAP, abs(memory.emotional_weight) * GRUDGE_FACTOR)
            collector.add(
                MotiveKind.REVENGE_GRUDGE,
                intensity,
                memory.target,
                f"We remember their treachery: {memory.description[:50]}",
            )

    def _hostility(self, actor: ActorSnapshot, others: list[ActorSnapshot], collector: _MotiveCollector) -> None:
        for other in others:
            relationship = self.world.get_relationship(actor.id, other.id)
            if relationship is None:
                continue
            if relationship.trust < HOSTILITY_TRUST_THRESHOLD:
                collector.add(
                    MotiveKind.ENEMY_HOSTILITY,
                    min(HOSTILITY_CAP, abs(relationship.trust) * HOSTILITY_FACTOR),
                    other.id,
                    f"{other.display_name} is our enemy (trust: {relationship.trust:.0f})",
                )
            if relationship.status == RelationshipStatus.AT_WAR:
                collector.add(
                    MotiveKind.WAR_SABOTAGE,
                    WAR_MOTIVE_INTENSITY,
                    other.id,
                    f"We are at war with {other.display_name}; sabotage is warfare",
                )

    def _rivalries(self, actor: ActorSnapshot, collector: _MotiveCollector) -> None:
        for rivalry in self.world.get_rivalries(actor.id):
            if rivalry.status != "active" or not collector.knows(rivalry.other):
                continue
            collector.add(
                MotiveKind.RIVALRY,
                min(RIVALRY_CAP, rivalry.intensity * RIVALRY_FACTOR),
                rivalry.other,
                f"{collector.name_of(rivalry.other)} is our rival; we must undermine them",
            )

    def _strategic_necessity(
        self, actor: ActorSnapshot, others: list[ActorSnapshot], collector: _MotiveCollector
    ) -> None:
        if actor.military >= MILITARY_WEAKNESS_THRESHOLD:
            return
        for other in others:
            relationship = self.world.get_relationship(actor.id, other.id)
            if relationship is None or relationship.trust >= 0:
                continue
            if other.military <= actor.military:
                continue
            collector.add(
                MotiveKind.MILITARY_NECESSITY,
                min(MILITARY_NECESSITY_CAP, (other.military - actor.military) * MILITARY_NECESSITY_FACTOR),
                other.id,
                f"{other.display_name} is stronger; we must weaken them before they attack",
            )

    def _ideology(self, actor: ActorSnapshot, others: list[ActorSnapshot], collector: _MotiveCollector) -> None:
        creed = self.world.get_creed(actor.id)
        if creed is None or creed.tolerance >= IDEOLOGY_TOLERANCE_THRESHOLD:
            return
        intensity = min(IDEOLOGY_CAP, IDEOLOGY_TOLERANCE_THRESHOLD - creed.tolerance)
        for other in others:
            theirs = self.world.get_creed(other.id)
            if theirs is None or theirs.name == creed.name:
                continue
            collector.add(
                MotiveKind.RELIGIOUS_CONFLICT,
                intensity,
                other.id,
                f"{other.display_name} follows false gods",
            )

    def _opportunism(
        self,
        actor: ActorSnapshot,
        others: list[ActorSnapshot],
        personality: Personality,
        collector: _MotiveCollector,
    ) -> None:
        intensity = min(OPPORTUNISM_CAP, personality.aggression * OPPORTUNISM_FACTOR)
        for other in others:
            is_weak = (
                other.military < OPPORTUNISM_MILITARY_THRESHOLD
                or other.happiness < OPPORTUNISM_HAPPINESS_THRESHOLD
                or other.population < OPPORTUNISM_POPULATION_THRESHOLD
            )
            if not is_weak:
                continue
            relationship = self.world.get_relationship(actor.id, other.id)
            if relationship is None or relationship.trust >= OPPORTUNISM_TRUST_THRESHOLD:
                continue
            collector.add(
                MotiveKind.OPPORTUNISM,
                intensity,
                other.id,
                f"{other.display_name} is weak; an opportunity to strike",
            )


class _MotiveCollector:
    """Accumulates motives and per-target pressure for a single evaluation."""

    def __init__(self, others: list[ActorSnapshot]):
        self.names = {other.id: other.display_name for other in others}
        self.motives: list[Motive] = []
        self.pressures: dict[str, TargetPressure] = {}

    def knows(self, target: str | None) -> bool:
        return target is not None and target in self.names

    def name_of(self, target: str) -> str:
        return self.names[target]

    def add(self, kind: MotiveKind, intensity: float, target: str | None, reason: str) -> None:
        # Zero-intensity motives are dropped
        if intensity <= 0:
            return
        motive = Motive(
            kind=kind,
            intensity=clamp_score(intensity),
            target=target,
            suggested_actions=SUGGESTED_ACTIONS[kind],
            reason=reason,
        )
        self.motives.append(motive)
        logger.debug(f"Motive {kind.value} -> {target or '*'}: {motive.intensity:.1f}")
        if target is None:
            return
        accumulated = self.pressures.get(target)
        if accumulated is None:
            accumulated = TargetPressure(target=target, target_name=self.names[target])
            self.pressures[target] = accumulated
        accumulated.add(motive)
