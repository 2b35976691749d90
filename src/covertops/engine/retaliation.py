"""Retaliation after a detected covert action.

A victim who caught an attacker may strike back in kind. The chance is the
mean of the victim's aggression, its wrath and the original action's war
risk. The reply is drawn from the original action plus everything else in
its category, limited to what the victim can actually carry out against
the attacker, and is resolved with roles reversed.
"""

from __future__ import annotations

import logging
import random

from covertops.errors import ActorNotFoundError
from covertops.models.actions import ActionKind
from covertops.models.catalog import DEFAULT_CATALOG, Catalog
from covertops.models.reports import RetaliationOutcome
from covertops.models.state import MemoryEvent, Personality, clamp_score
from covertops.parameters import RETALIATION_MEMORY_WEIGHT
from covertops.storage.repository import World

from .resolution import ActionResolver, roll
from .targeting import TargetSelector

logger = logging.getLogger(__name__)


class RetaliationEngine:
    """Decides whether and how a detected victim strikes back."""

    def __init__(self, world: World, resolver: ActionResolver | None = None, catalog: Catalog = DEFAULT_CATALOG):
        self.world = world
        self.catalog = catalog
        self.resolver = resolver or ActionResolver(world, catalog)
        self.selector = TargetSelector(world, catalog)

    def retaliation_chance(self, victim_id: str, original_kind: ActionKind) -> float:
        """(aggression + wrath + war_risk) / 3, using the victim's personality."""
        personality = self.world.get_personality(victim_id) or Personality()
        war_risk = self.catalog.get(original_kind).war_risk
        return clamp_score((personality.aggression + personality.wrath + war_risk) / 3)

    def candidates(self, victim_id: str, attacker_id: str, original_kind: ActionKind) -> list[ActionKind]:
        """The original kind first, then its category in catalog order, filtered by capability."""
        category = self.catalog.get(original_kind).category
        options = [original_kind]
        for definition in self.catalog.in_category(category):
            if definition.kind not in options:
                options.append(definition.kind)
        return self.selector.available_actions(victim_id, attacker_id, options)

    def maybe_retaliate(
        self,
        victim_id: str,
        attacker_id: str,
        original_kind: ActionKind | str,
        rng: random.Random,
        tick: int = 0,
    ) -> RetaliationOutcome:
        """Roll for retaliation and, if it fires, resolve the reply.

        Only meaningful after a resolution reported detected=True.

        Raises:
            ActorNotFoundError: If either identifier does not resolve
            UnknownActionKindError: If original_kind is not in the catalog
        """
        original_kind = self.catalog.get(original_kind).kind
        for actor_id in (victim_id, attacker_id):
            if self.world.get_actor(actor_id) is None:
                raise ActorNotFoundError(actor_id)

        chance = self.retaliation_chance(victim_id, original_kind)
        if not roll(rng, chance):
            logger.debug(f"{victim_id} let {original_kind.value} by {attacker_id} pass ({chance:.1f}%)")
            return RetaliationOutcome(retaliated=False, retaliation_chance=chance)

        options = self.candidates(victim_id, attacker_id, original_kind)
        if not options:
            logger.debug(f"{victim_id} wants revenge on {attacker_id} but has no usable action")
            return RetaliationOutcome(retaliated=False, retaliation_chance=chance)

        reply = rng.choice(options)
        result = self.resolver.resolve(victim_id, attacker_id, reply, rng, tick=tick)

        attacker = self.world.get_actor(attacker_id)
        self.world.emit_memory_event(
            MemoryEvent(
                actor=victim_id,
                kind="victory",
                description=(
                    f"We retaliated against {attacker.display_name} with {reply.label} "
                    "for their attack on us"
                ),
                emotional_weight=RETALIATION_MEMORY_WEIGHT,
                target=attacker_id,
            )
        )
        logger.info(
            f"{victim_id} retaliated against {attacker_id} with {reply.value}: "
            f"succeeded={result.succeeded} war={result.war_declared}"
        )
        return RetaliationOutcome(
            retaliated=True,
            action_kind=reply,
            escalated_to_war=result.war_declared,
            retaliation_chance=chance,
            resolution=result,
        )
