"""Target selection for covert operations.

This module turns per-target motive accumulations into ranked candidates,
narrows suggested actions to what the actor can actually carry out, and
implements the weighted draws used by the organic attempt path:

- rank_targets: threshold, sort, top 5, deduplicated suggestions
- available_actions: drop actions that need an agent the actor lacks
- choose_action: draw an action weighted toward easier ones
- find_opportunities: quick vulnerability scan across every rival
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from covertops.errors import ActorNotFoundError
from covertops.models.actions import ActionDefinition, ActionKind
from covertops.models.catalog import DEFAULT_CATALOG, Catalog
from covertops.models.reports import Motive, TargetCandidate
from covertops.models.state import ActorSnapshot, CapabilityInstance, clamp_score
from covertops.parameters import (
    DEFAULT_AGENT_SKILL,
    MAX_SUGGESTED_ACTIONS,
    MAX_TARGET_CANDIDATES,
    OPPORTUNITY_ACTIONS,
    OPPORTUNITY_AGENT_SKILL,
    OPPORTUNITY_MIN_SUCCESS,
    TARGET_PRESSURE_THRESHOLD,
)
from covertops.storage.repository import WorldReader

from .resolution import success_chance

logger = logging.getLogger(__name__)


@dataclass
class TargetPressure:
    """Running total of every motive aimed at one target.

    pressure is the raw sum; it is only clamped to 100 when a candidate is
    built from it.
    """

    target: str
    target_name: str = ""
    pressure: float = 0.0
    motives: list[Motive] = field(default_factory=list)

    def add(self, motive: Motive) -> None:
        self.pressure += motive.intensity
        self.motives.append(motive)


@dataclass(frozen=True)
class Opportunity:
    """One rival's exposure to covert action, as seen by the scanning actor."""

    target: str
    target_name: str
    has_agent: bool
    counter_intel: float
    vulnerabilities: tuple[tuple[ActionKind, int], ...]


def active_instances(instances: list[CapabilityInstance]) -> list[CapabilityInstance]:
    return [instance for instance in instances if instance.is_active]


class TargetSelector:
    """Ranks targets and narrows the catalog to feasible actions."""

    def __init__(self, world: WorldReader, catalog: Catalog = DEFAULT_CATALOG):
        self.world = world
        self.catalog = catalog

    # -------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------

    def rank_targets(self, pressures: dict[str, TargetPressure]) -> list[TargetCandidate]:
        """Build the ranked candidate list from per-target accumulations.

        Targets below the pressure threshold are discarded, the rest sorted
        by pressure (ties by target id) and cut to the top 5.
        """
        candidates = []
        for target_id in sorted(pressures):
            accumulated = pressures[target_id]
            if accumulated.pressure < TARGET_PRESSURE_THRESHOLD or not accumulated.motives:
                continue

            # max() keeps the first of equal intensities, i.e. the earliest motive
            top_motive = max(accumulated.motives, key=lambda m: m.intensity)
            candidates.append(
                TargetCandidate(
                    target=target_id,
                    target_name=accumulated.target_name,
                    pressure=clamp_score(accumulated.pressure),
                    top_motive=top_motive.kind,
                    top_reason=top_motive.reason,
                    suggested_actions=tuple(self.merge_suggestions(accumulated.motives)),
                )
            )

        candidates.sort(key=lambda c: (-c.pressure, c.target))
        return candidates[:MAX_TARGET_CANDIDATES]

    def merge_suggestions(self, motives: list[Motive]) -> list[ActionKind]:
        """Deduplicate the suggestions of several motives.

        Each action is scored by the strongest motive that suggests it; ties
        fall back to catalog definition order. Actions missing from the
        active catalog are dropped.
        """
        scores: dict[ActionKind, float] = {}
        for motive in motives:
            for kind in motive.suggested_actions:
                if kind not in self.catalog:
                    continue
                scores[kind] = max(scores.get(kind, 0.0), motive.intensity)

        ranked = sorted(scores, key=lambda k: (-scores[k], self.catalog.order_index(k)))
        return ranked[:MAX_SUGGESTED_ACTIONS]

    # -------------------------------------------------------------------------
    # Capability narrowing
    # -------------------------------------------------------------------------

    def has_capability(self, actor_id: str, target_id: str) -> bool:
        instances = self.world.get_capability_instances(actor_id, target_id)
        return bool(active_instances(instances))

    def is_permitted(self, definition: ActionDefinition, has_capability: bool) -> bool:
        return has_capability or not definition.requires_capability

    def available_actions(
        self,
        actor_id: str,
        target_id: str,
        kinds: list[ActionKind] | tuple[ActionKind, ...],
    ) -> list[ActionKind]:
        """Filter action kinds to those the actor can attempt against the target.

        Kinds absent from the catalog are dropped silently; they can only come
        from a suggestion list built against a different catalog version.
        """
        has_capability = self.has_capability(actor_id, target_id)
        permitted = []
        for kind in kinds:
            if kind not in self.catalog:
                continue
            if self.is_permitted(self.catalog.get(kind), has_capability):
                permitted.append(kind)
        return permitted

    # -------------------------------------------------------------------------
    # Weighted choice
    # -------------------------------------------------------------------------

    def choose_action(self, kinds: list[ActionKind], rng: random.Random) -> ActionKind:
        """Draw one action, weighted by 100 - base_difficulty.

        Easier actions are proportionally more likely. Consumes exactly one
        draw from rng.

        Raises:
            ValueError: If kinds is empty
        """
        if not kinds:
            raise ValueError("Cannot choose from an empty action list")

        weights = [100.0 - self.catalog.get(kind).base_difficulty for kind in kinds]
        total = sum(weights)
        roll = rng.random() * total
        for kind, weight in zip(kinds, weights):
            roll -= weight
            if roll <= 0:
                return kind
        return kinds[-1]

    # -------------------------------------------------------------------------
    # Opportunity scan
    # -------------------------------------------------------------------------

    def find_opportunities(self, actor_id: str) -> list[Opportunity]:
        """Scan every live rival for cheap openings.

        For each rival, the key actions whose estimated success chance exceeds
        30 are listed (at most 5, best first). Rivals with no vulnerability
        and no embedded agent are omitted.

        Raises:
            ActorNotFoundError: If actor_id does not resolve
        """
        if self.world.get_actor(actor_id) is None:
            raise ActorNotFoundError(actor_id)

        opportunities = []
        for other in sorted(self.world.list_actors(), key=lambda a: a.id):
            if other.id == actor_id or other.eliminated:
                continue
            opportunity = self._scan_target(actor_id, other)
            if opportunity.vulnerabilities or opportunity.has_agent:
                opportunities.append(opportunity)
        return opportunities

    def _scan_target(self, actor_id: str, other: ActorSnapshot) -> Opportunity:
        has_agent = self.has_capability(actor_id, other.id)
        skill = OPPORTUNITY_AGENT_SKILL if has_agent else DEFAULT_AGENT_SKILL

        vulnerabilities = []
        for name in OPPORTUNITY_ACTIONS:
            kind = ActionKind(name)
            if kind not in self.catalog:
                continue
            definition = self.catalog.get(kind)
            if not self.is_permitted(definition, has_agent):
                continue
            chance = success_chance(definition.base_difficulty, skill, other.counter_intel)
            if chance > OPPORTUNITY_MIN_SUCCESS:
                vulnerabilities.append((kind, round(chance)))

        vulnerabilities.sort(key=lambda v: -v[1])
        return Opportunity(
            target=other.id,
            target_name=other.display_name,
            has_agent=has_agent,
            counter_intel=other.counter_intel,
            vulnerabilities=tuple(vulnerabilities[:MAX_SUGGESTED_ACTIONS]),
        )
