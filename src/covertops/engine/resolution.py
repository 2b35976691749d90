"""Action resolution.

ActionResolver runs one (actor, target, action) attempt end to end:

1. Validate identifiers and the action kind (raise before any roll)
2. Check the capability prerequisite (CAPABILITY_MISSING, no roll)
3. Roll success, then detection, independently
4. On success: apply the clamped effect vector, then the special effect
5. On failure: roll for capture of the agent that was used
6. On detection: damage trust, roll for war, push diplomatic status,
   record the victim's grievance

All randomness comes from the injected random.Random, so identical world
state plus an identical seed reproduces the same result and mutations.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from covertops.errors import ActorNotFoundError
from covertops.models.actions import ActionDefinition, ActionKind, StatKey
from covertops.models.catalog import DEFAULT_CATALOG, Catalog
from covertops.models.reports import ResolutionResult, ResolutionStatus
from covertops.models.state import (
    ActorSnapshot,
    CapabilityInstance,
    EventSeverity,
    MemoryEvent,
    Relationship,
    RelationshipStatus,
    WorldEvent,
    clamp,
    clamp_stat,
    clamp_trust,
)
from covertops.parameters import (
    ATTACKER_SUCCESS_MEMORY_WEIGHT,
    CAPTURE_CHANCE,
    COUNTER_INTEL_DETECT_DIVISOR,
    COUNTER_INTEL_SUCCESS_DIVISOR,
    DEFAULT_AGENT_SKILL,
    DETECT_CHANCE_MAX,
    DETECT_CHANCE_MIN,
    HOSTILITY_TRUST_THRESHOLD,
    SKILL_BASELINE,
    SKILL_DETECT_DIVISOR,
    SKILL_SUCCESS_DIVISOR,
    SUCCESS_CHANCE_MAX,
    SUCCESS_CHANCE_MIN,
    VICTIM_DETECTION_MEMORY_WEIGHT,
    WAR_CAUSE_PREFIX,
)
from covertops.storage.repository import World

from .effects import EffectContext, apply_effect, check_handlers

logger = logging.getLogger(__name__)


def success_chance(difficulty: float, agent_skill: float, counter_intel: float) -> float:
    """Chance (0-100) that an attempt achieves its effect.

    Formula:
        clamp(10, 90, (100 - difficulty) + (skill - 50) / 2 - counter_intel / 4)

    Examples:
        >>> success_chance(50, 70, 10)
        57.5
        >>> success_chance(95, 0, 100)
        10.0
    """
    raw = (
        (100.0 - difficulty)
        + (agent_skill - SKILL_BASELINE) / SKILL_SUCCESS_DIVISOR
        - counter_intel / COUNTER_INTEL_SUCCESS_DIVISOR
    )
    return clamp(raw, SUCCESS_CHANCE_MIN, SUCCESS_CHANCE_MAX)


def detect_chance(base_detect: float, agent_skill: float, counter_intel: float) -> float:
    """Chance (0-100) that the victim learns who was behind an attempt.

    Formula:
        clamp(5, 95, base_detect + counter_intel / 2 - skill / 4)
    """
    raw = base_detect + counter_intel / COUNTER_INTEL_DETECT_DIVISOR - agent_skill / SKILL_DETECT_DIVISOR
    return clamp(raw, DETECT_CHANCE_MIN, DETECT_CHANCE_MAX)


def roll(rng: random.Random, chance: float) -> bool:
    """True with probability chance / 100."""
    return rng.random() * 100 < chance


def effective_deltas(snapshot: ActorSnapshot, deltas: dict[StatKey, float]) -> dict[StatKey, float]:
    """Deltas as they land after each stat's saturation rule.

    Example:
        happiness 95, delta +10 -> +5
        food 3, delta -10 -> -3
    """
    effective = {}
    for key, delta in deltas.items():
        before = snapshot.stat(key)
        effective[key] = clamp_stat(key, before + delta) - before
    return effective


class ActionResolver:
    """Resolves covert actions against the world ports.

    Args:
        world: Read and write ports
        catalog: Action definitions; every effect code it uses must have a handler

    Raises:
        CatalogError: If the catalog references an effect code with no handler
    """

    def __init__(self, world: World, catalog: Catalog = DEFAULT_CATALOG):
        check_handlers(catalog.effect_codes())
        self.world = world
        self.catalog = catalog

    def find_agent(self, actor_id: str, target_id: str) -> Optional[CapabilityInstance]:
        """First active agent the actor has in the target, if any."""
        for instance in self.world.get_capability_instances(actor_id, target_id):
            if instance.is_active:
                return instance
        return None

    def resolve(
        self,
        actor_id: str,
        target_id: str,
        action_kind: ActionKind | str,
        rng: random.Random,
        tick: int = 0,
    ) -> ResolutionResult:
        """Resolve one covert action.

        Args:
            actor_id: Attacking polity
            target_id: Victim polity
            action_kind: ActionKind, or its string value
            rng: Source of every roll
            tick: Simulation tick stamped on events and deaths

        Returns:
            ResolutionResult describing the rolls and the mutations applied

        Raises:
            ActorNotFoundError: If either identifier does not resolve
            UnknownActionKindError: If the kind is not in the catalog
        """
        definition = self.catalog.get(action_kind)
        attacker = self.world.get_actor(actor_id)
        if attacker is None:
            raise ActorNotFoundError(actor_id)
        target = self.world.get_actor(target_id)
        if target is None:
            raise ActorNotFoundError(target_id)

        agent = None
        if definition.requires_capability:
            agent = self.find_agent(actor_id, target_id)
            if agent is None:
                logger.debug(f"{actor_id} has no agent in {target_id} for {definition.kind.value}")
                return ResolutionResult(
                    actor=actor_id,
                    target=target_id,
                    action_kind=definition.kind,
                    status=ResolutionStatus.CAPABILITY_MISSING,
                    message=f"{definition.kind.label} requires an agent inside {target.display_name}.",
                )

        skill = agent.skill if agent is not None else DEFAULT_AGENT_SKILL
        p_success = success_chance(definition.base_difficulty, skill, target.counter_intel)
        p_detect = detect_chance(definition.base_detect_chance, skill, target.counter_intel)

        succeeded = roll(rng, p_success)
        detected = roll(rng, p_detect)
        logger.debug(
            f"{actor_id} -> {target_id} {definition.kind.value}: "
            f"success {p_success:.1f}% ({succeeded}), detect {p_detect:.1f}% ({detected})"
        )

        effects_applied: dict[StatKey, float] = {}
        attacker_gains: dict[str, float] = {}
        agent_captured = False
        messages = []

        if succeeded:
            effects_applied = self._apply_effects(definition, target)
            if definition.special_effect is not None:
                ctx = EffectContext(world=self.world, attacker=attacker, target=target, tick=tick)
                attacker_gains = apply_effect(definition.special_effect, ctx)
            messages.append(f"SUCCESS: {definition.description}")
            self.world.emit_memory_event(
                MemoryEvent(
                    actor=actor_id,
                    kind="victory",
                    description=(
                        f"Our agents carried out {definition.kind.label} against {target.display_name}"
                    ),
                    emotional_weight=ATTACKER_SUCCESS_MEMORY_WEIGHT,
                    target=target_id,
                )
            )
        else:
            messages.append(f"FAILED: {definition.kind.label} was unsuccessful.")
            if agent is not None and rng.random() < CAPTURE_CHANCE:
                self.world.invalidate_capability_instance(agent.id)
                agent_captured = True
                messages.append("The agent was captured.")
                logger.info(f"Agent {agent.id} of {actor_id} captured in {target_id}")

        war_declared = False
        trust_change = 0.0
        if detected:
            trust_change = -float(definition.trust_damage)
            war_declared = self._handle_detection(definition, attacker, target, rng, tick)
            messages.append(f"{target.display_name} detected the involvement of {attacker.display_name}.")
            if war_declared:
                messages.append(f"{target.display_name} has declared war.")

        logger.info(
            f"{actor_id} attempted {definition.kind.value} on {target_id}: "
            f"succeeded={succeeded} detected={detected} war={war_declared}"
        )
        return ResolutionResult(
            actor=actor_id,
            target=target_id,
            action_kind=definition.kind,
            succeeded=succeeded,
            detected=detected,
            success_chance=p_success,
            detect_chance=p_detect,
            effects_applied=effects_applied,
            special_effect_fired=definition.special_effect if succeeded else None,
            attacker_gains=attacker_gains,
            war_declared=war_declared,
            agent_captured=agent_captured,
            trust_change=trust_change,
            message=" ".join(messages),
        )

    # -------------------------------------------------------------------------
    # Outcome steps
    # -------------------------------------------------------------------------

    def _apply_effects(self, definition: ActionDefinition, target: ActorSnapshot) -> dict[StatKey, float]:
        effective = effective_deltas(target, definition.effect_vector)
        if effective:
            self.world.apply_stat_delta(target.id, effective)
        return effective

    def _handle_detection(
        self,
        definition: ActionDefinition,
        attacker: ActorSnapshot,
        target: ActorSnapshot,
        rng: random.Random,
        tick: int,
    ) -> bool:
        """Apply the diplomatic fallout of a detected attempt.

        Returns:
            True if the victim declared war
        """
        relationship = self.world.get_relationship(attacker.id, target.id) or Relationship()
        trust = clamp_trust(relationship.trust - definition.trust_damage)

        # Drawn even when already at war; an existing war is never restamped
        war_roll = roll(rng, definition.war_risk)
        war_declared = war_roll and relationship.status != RelationshipStatus.AT_WAR

        if war_declared:
            self.world.set_relationship(
                attacker.id,
                target.id,
                trust=trust,
                status=RelationshipStatus.AT_WAR,
                war_cause=f"{WAR_CAUSE_PREFIX}:{definition.kind.value}",
                war_start_tick=tick,
            )
            self.world.emit_world_event(
                WorldEvent(
                    tick=tick,
                    kind="war",
                    actor=target.id,
                    target=attacker.id,
                    title="War Declared - Sabotage Retaliation!",
                    description=(
                        f"{target.display_name} declares war on {attacker.display_name} "
                        f"after discovering {definition.kind.label}!"
                    ),
                    severity=EventSeverity.CRITICAL,
                )
            )
            logger.info(f"{target.id} declared war on {attacker.id} over {definition.kind.value}")
        else:
            pushed = (
                RelationshipStatus.HOSTILE
                if trust < HOSTILITY_TRUST_THRESHOLD
                else RelationshipStatus.TENSE
            )
            self.world.set_relationship(
                attacker.id,
                target.id,
                trust=trust,
                status=relationship.status.escalate_to(pushed),
            )

        self.world.emit_memory_event(
            MemoryEvent(
                actor=target.id,
                kind="betrayal",
                description=(
                    f"{attacker.display_name} attempted {definition.kind.label} against us. "
                    "This treachery will not be forgotten."
                ),
                emotional_weight=VICTIM_DETECTION_MEMORY_WEIGHT,
                target=attacker.id,
            )
        )
        return war_declared
