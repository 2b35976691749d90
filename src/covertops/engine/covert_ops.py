"""Tick orchestration for covert operations.

CovertOpsEngine wires the components together for the simulation scheduler:

1. EVALUATE - MotiveAggregator builds the actor's PressureReport
2. GATE - pressure must clear a jittered threshold (20-40)
3. NARROW - the top target's suggestions, filtered by capability
4. COMMIT - attempt with probability total_pressure / 100
5. CHOOSE - weighted draw favoring easier actions
6. RESOLVE - ActionResolver rolls success and detection
7. RETALIATE - detected attempts give the victim a chance to strike back

Each tick processes actors in ascending id order from a single seeded RNG,
so a tick is reproducible from the world state and the seed.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from covertops.models.catalog import DEFAULT_CATALOG, Catalog
from covertops.models.reports import OperationOutcome, PressureReport, ResolutionResult
from covertops.models.state import EventSeverity, MemoryEvent, WorldEvent
from covertops.parameters import (
    ATTACKER_EXPOSED_MEMORY_WEIGHT,
    ATTEMPT_THRESHOLD_BASE,
    ATTEMPT_THRESHOLD_JITTER,
)
from covertops.storage.config import get_catalog, get_seed
from covertops.storage.repository import World

from .motives import MotiveAggregator
from .resolution import ActionResolver
from .retaliation import RetaliationEngine
from .targeting import TargetSelector

logger = logging.getLogger(__name__)

CONTEXT_LIMIT = 3


class CovertOpsEngine:
    """Runs organic covert operations for every actor in a world.

    Attributes:
        world: Read and write ports
        catalog: Active action catalog
        aggregator: Motive aggregation
        selector: Target ranking and action narrowing
        resolver: Action resolution
        retaliation: Victim responses to detected attempts
    """

    def __init__(
        self,
        world: World,
        catalog: Catalog = DEFAULT_CATALOG,
        random_seed: Optional[int] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            world: Read and write ports
            catalog: Action definitions
            random_seed: Seed for random number generation (for reproducibility)

        Raises:
            CatalogError: If the catalog references an effect code with no handler
        """
        self.world = world
        self.catalog = catalog
        self._random = random.Random(random_seed)

        self.aggregator = MotiveAggregator(world, catalog)
        self.selector = TargetSelector(world, catalog)
        self.resolver = ActionResolver(world, catalog)
        self.retaliation = RetaliationEngine(world, self.resolver, catalog)

    def evaluate(self, actor_id: str) -> PressureReport:
        return self.aggregator.evaluate(actor_id)

    def attempt_threshold(self, rng: random.Random) -> float:
        """Jittered pressure gate, uniformly in (20, 40]."""
        return ATTEMPT_THRESHOLD_BASE - rng.random() * ATTEMPT_THRESHOLD_JITTER

    def process_actor(self, actor_id: str, tick: int, rng: Optional[random.Random] = None) -> OperationOutcome:
        """Decide whether one actor acts this tick and resolve the attempt.

        Args:
            actor_id: Actor to evaluate
            tick: Current simulation tick
            rng: Source of every draw (defaults to the engine's seeded RNG)

        Returns:
            OperationOutcome; reason is set when no attempt was made

        Raises:
            ActorNotFoundError: If actor_id does not resolve
        """
        if rng is None:
            rng = self._random
        report = self.evaluate(actor_id)
        pressure = report.total_pressure

        def declined(reason: str) -> OperationOutcome:
            logger.debug(f"{actor_id} makes no covert attempt: {reason} (pressure {pressure:.1f})")
            return OperationOutcome(actor=actor_id, reason=reason, total_pressure=pressure)

        threshold = self.attempt_threshold(rng)
        if pressure < threshold:
            return declined("below_threshold")
        if report.top_target is None:
            return declined("no_targets")

        candidate = report.top_target
        available = self.selector.available_actions(actor_id, candidate.target, candidate.suggested_actions)
        if not available:
            return declined("no_available_actions")

        if rng.random() > pressure / 100:
            return declined("declined")

        kind = self.selector.choose_action(available, rng)
        result = self.resolver.resolve(actor_id, candidate.target, kind, rng, tick=tick)
        self._record_attempt(result, candidate.target_name or candidate.target, tick)

        return OperationOutcome(
            actor=actor_id,
            attempted=True,
            total_pressure=pressure,
            target=candidate.target,
            action_kind=kind,
            result=result,
        )

    def run_tick(
        self,
        tick: int,
        actor_ids: Optional[list[str]] = None,
        rng: Optional[random.Random] = None,
    ) -> list[OperationOutcome]:
        """Process every actor once, then let detected victims retaliate.

        Args:
            tick: Current simulation tick
            actor_ids: Actors to process (default: every non-eliminated actor)
            rng: Source of every draw (defaults to the engine's seeded RNG)

        Returns:
            One OperationOutcome per processed actor, in ascending id order
        """
        if rng is None:
            rng = self._random
        if actor_ids is None:
            actor_ids = [actor.id for actor in self.world.list_actors() if not actor.eliminated]

        outcomes = []
        for actor_id in sorted(actor_ids):
            outcome = self.process_actor(actor_id, tick, rng)
            result = outcome.result
            if result is not None and result.detected:
                response = self.retaliation.maybe_retaliate(
                    result.target, actor_id, result.action_kind, rng, tick=tick
                )
                outcome = outcome.model_copy(update={"retaliation": response})
            outcomes.append(outcome)

        attempted = sum(1 for o in outcomes if o.attempted)
        logger.info(f"Tick {tick}: {attempted}/{len(outcomes)} actors attempted covert operations")
        return outcomes

    def sabotage_context(self, actor_id: str) -> dict[str, Any]:
        """Summarize an actor's covert drives for the decision layer.

        Returns:
            Dict with rounded pressure, the strongest motives and the best
            targets with their leading suggestions
        """
        report = self.evaluate(actor_id)
        strongest = sorted(report.motives, key=lambda m: -m.intensity)[:CONTEXT_LIMIT]
        return {
            "pressure": round(report.total_pressure),
            "top_motives": [
                {"reason": motive.reason, "intensity": round(motive.intensity)} for motive in strongest
            ],
            "suggested_targets": [
                {
                    "name": candidate.target_name or candidate.target,
                    "pressure": round(candidate.pressure),
                    "reason": candidate.top_reason,
                    "suggestions": [kind.value for kind in candidate.suggested_actions[:CONTEXT_LIMIT]],
                }
                for candidate in report.ranked_targets[:CONTEXT_LIMIT]
            ],
        }

    def _record_attempt(self, result: ResolutionResult, target_name: str, tick: int) -> None:
        label = result.action_kind.label
        if result.succeeded:
            title = "Covert Operation Success"
        elif result.detected:
            title = "Covert Operation Exposed"
        else:
            title = "Covert Operation Failed"

        self.world.emit_world_event(
            WorldEvent(
                tick=tick,
                kind="decision" if result.succeeded else "crisis",
                actor=result.actor,
                target=result.target,
                title=title,
                description=f"{label} against {target_name}: {result.message}",
                severity=EventSeverity.NEGATIVE if result.detected else EventSeverity.INFO,
            )
        )

        if result.detected and not result.succeeded:
            self.world.emit_memory_event(
                MemoryEvent(
                    actor=result.actor,
                    kind="crisis",
                    description=f"Our sabotage attempt against {target_name} was discovered",
                    emotional_weight=ATTACKER_EXPOSED_MEMORY_WEIGHT,
                    target=result.target,
                )
            )


def create_engine(
    world: World,
    catalog: Optional[Catalog] = None,
    random_seed: Optional[int] = None,
) -> CovertOpsEngine:
    """Create an engine, filling unset options from environment configuration.

    Args:
        world: Read and write ports
        catalog: Action catalog (default: COVERTOPS_CATALOG_PATH or the standard one)
        random_seed: Seed (default: COVERTOPS_SEED)
    """
    if catalog is None:
        catalog = get_catalog()
    if random_seed is None:
        random_seed = get_seed()
    return CovertOpsEngine(world, catalog=catalog, random_seed=random_seed)
