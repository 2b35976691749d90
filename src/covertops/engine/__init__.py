"""Covert operations engine.

This module contains the decision and resolution logic:
- motives: Motive aggregation into a PressureReport
- targeting: Target ranking, capability narrowing, opportunity scans
- effects: Special-effect handler registry
- resolution: Two-roll resolution of a single covert action
- retaliation: Victim responses to detected actions
- covert_ops: Per-tick orchestration

Usage:
    import random

    from covertops.engine import ActionResolver, CovertOpsEngine
    from covertops.storage import InMemoryWorld

    world = InMemoryWorld()
    world.add_actor(id="north", name="Northreach", food=10)
    world.add_actor(id="south", name="Southmarch", food=60)

    # Resolve a single action
    resolver = ActionResolver(world)
    result = resolver.resolve("north", "south", "burn_granaries", random.Random(7))

    # Or let every actor decide for itself
    engine = CovertOpsEngine(world, random_seed=7)
    outcomes = engine.run_tick(tick=1)
"""

from covertops.engine.covert_ops import CovertOpsEngine, create_engine
from covertops.engine.effects import HANDLERS, REPORT_ONLY, EffectContext, apply_effect, check_handlers
from covertops.engine.motives import SUGGESTED_ACTIONS, MotiveAggregator
from covertops.engine.resolution import (
    ActionResolver,
    detect_chance,
    effective_deltas,
    success_chance,
)
from covertops.engine.retaliation import RetaliationEngine
from covertops.engine.targeting import Opportunity, TargetPressure, TargetSelector

__all__ = [
    # Orchestration
    "CovertOpsEngine",
    "create_engine",
    # Components
    "MotiveAggregator",
    "TargetSelector",
    "ActionResolver",
    "RetaliationEngine",
    # Effects
    "HANDLERS",
    "REPORT_ONLY",
    "EffectContext",
    "apply_effect",
    "check_handlers",
    # Supporting types
    "Opportunity",
    "TargetPressure",
    "SUGGESTED_ACTIONS",
    # Roll math
    "success_chance",
    "detect_chance",
    "effective_deltas",
]
