#!/usr/bin/env python3
"""
Covert Operations Simulation

Monte-Carlo checks for the covert operations engine.

Resolution Formulas:
    success = clamp(10, 90, (100 - difficulty) + (skill - 50) / 2 - counter_intel / 4)
    detect  = clamp(5, 95, detect_chance + counter_intel / 2 - skill / 4)
    war     = war_risk, rolled only after detection

Sections:
    - Formula verification against hand-computed examples
    - Per-action rates: observed success/detection/war vs. the formulas
    - Organic ticks: how often a small world drifts into war
"""

import argparse
import logging
import random
from collections import Counter

from covertops.engine import CovertOpsEngine, detect_chance, success_chance
from covertops.models import ActionCategory, CapabilityInstance, Personality, RelationshipStatus
from covertops.storage import InMemoryWorld, get_catalog

logger = logging.getLogger(__name__)

# (difficulty, skill, counter_intel) -> expected success
SUCCESS_EXAMPLES = [
    ((50, 70, 10), 57.5),
    ((95, 0, 100), 10.0),
    ((0, 100, 0), 90.0),
]

# (base_detect, skill, counter_intel) -> expected detection
DETECT_EXAMPLES = [
    ((30, 70, 10), 17.5),
    ((100, 0, 100), 95.0),
    ((0, 100, 0), 5.0),
]


def make_duel_world(agent_skill: float, counter_intel: float) -> InMemoryWorld:
    """Two neutral polities; the attacker has one agent inside the target."""
    world = InMemoryWorld()
    world.add_actor(id="attacker", name="Attacker")
    world.add_actor(id="target", name="Target", counter_intel=counter_intel)
    world.add_relationship("attacker", "target", trust=0)
    world.add_capability(CapabilityInstance(id="agent", owner="attacker", target="target", skill=agent_skill))
    return world


def make_tense_world() -> InMemoryWorld:
    """Four polities with uneven food, wealth and trust."""
    world = InMemoryWorld()
    world.add_actor(id="ashford", name="Ashford", food=8, wealth=30)
    world.add_actor(id="brightwater", name="Brightwater", food=80, wealth=70)
    world.add_actor(id="coldharbor", name="Coldharbor", military=20, wealth=10)
    world.add_actor(id="dunmere", name="Dunmere", military=70, happiness=25)
    world.add_relationship("ashford", "brightwater", trust=-20)
    world.add_relationship("coldharbor", "dunmere", trust=-45)
    world.add_relationship("ashford", "dunmere", trust=10)
    world.set_personality("coldharbor", Personality(cunning=80, aggression=70, wrath=60))
    world.set_personality("dunmere", Personality(aggression=75))
    return world


def run_formula_verification():
    """Check the chance formulas against hand-computed values."""
    print("=" * 80)
    print("FORMULA VERIFICATION")
    print("=" * 80)
    print()

    print(f"{'Formula':<10} {'Inputs':<20} {'Computed':>10} {'Expected':>10} {'Status':>8}")
    print("-" * 62)

    all_passed = True
    for label, func, examples in (
        ("success", success_chance, SUCCESS_EXAMPLES),
        ("detect", detect_chance, DETECT_EXAMPLES),
    ):
        for inputs, expected in examples:
            computed = func(*inputs)
            passed = abs(computed - expected) < 1e-9
            all_passed = all_passed and passed
            status = "PASS" if passed else "FAIL"
            print(f"{label:<10} {str(inputs):<20} {computed:>10.2f} {expected:>10.2f} {status:>8}")

    print("-" * 62)
    print(f"Overall: {'ALL PASSED' if all_passed else 'SOME FAILED'}")
    print()
    return all_passed


def run_action_rates(
    catalog,
    num_trials: int,
    rng: random.Random,
    agent_skill: float = 50.0,
    counter_intel: float = 10.0,
    category: ActionCategory | None = None,
):
    """Resolve every action many times and compare observed rates to the formulas."""
    print("=" * 80)
    print("PER-ACTION RATES")
    print(f"Trials per action: {num_trials}, agent skill {agent_skill:.0f}, counter-intel {counter_intel:.0f}")
    print("=" * 80)
    print()

    print(f"{'Action':<28} {'Success':>9} {'Exp':>6} {'Detect':>9} {'Exp':>6} {'War|Det':>9} {'Exp':>6}")
    print("-" * 79)

    worst = 0.0
    for definition in catalog:
        if category is not None and definition.category != category:
            continue

        successes = 0
        detections = 0
        wars = 0
        for _ in range(num_trials):
            world = make_duel_world(agent_skill, counter_intel)
            engine = CovertOpsEngine(world, catalog=catalog)
            result = engine.resolver.resolve("attacker", "target", definition.kind, rng)
            successes += result.succeeded
            detections += result.detected
            wars += result.war_declared

        expected_success = success_chance(definition.base_difficulty, agent_skill, counter_intel)
        expected_detect = detect_chance(definition.base_detect_chance, agent_skill, counter_intel)
        success_rate = successes / num_trials * 100
        detect_rate = detections / num_trials * 100
        war_rate = wars / detections * 100 if detections else 0.0

        worst = max(worst, abs(success_rate - expected_success), abs(detect_rate - expected_detect))
        print(
            f"{definition.kind.value:<28} {success_rate:>8.1f}% {expected_success:>6.1f} "
            f"{detect_rate:>8.1f}% {expected_detect:>6.1f} {war_rate:>8.1f}% {definition.war_risk:>6.1f}"
        )

    print("-" * 79)
    print(f"Largest deviation from formula: {worst:.2f} points")
    print()
    return worst


def run_organic_ticks(catalog, num_worlds: int, num_ticks: int, seed: int | None):
    """Run the full orchestrator over a small tense world."""
    print("=" * 80)
    print("ORGANIC TICKS")
    print(f"Worlds: {num_worlds}, ticks per world: {num_ticks}")
    print("=" * 80)
    print()

    attempts = Counter()
    kinds = Counter()
    retaliations = 0
    worlds_at_war = 0

    for index in range(num_worlds):
        world = make_tense_world()
        engine = CovertOpsEngine(world, catalog=catalog, random_seed=None if seed is None else seed + index)
        for tick in range(num_ticks):
            for outcome in engine.run_tick(tick):
                if outcome.attempted:
                    attempts[outcome.actor] += 1
                    kinds[outcome.action_kind.value] += 1
                if outcome.retaliation is not None and outcome.retaliation.retaliated:
                    retaliations += 1

        at_war = any(
            world.get_relationship(a.id, b.id) is not None
            and world.get_relationship(a.id, b.id).status == RelationshipStatus.AT_WAR
            for a in world.list_actors()
            for b in world.list_actors()
            if a.id < b.id
        )
        worlds_at_war += at_war
        logger.debug(f"World {index}: {len(world.events)} events, at war: {at_war}")

    print(f"{'Actor':<16} {'Attempts/world':>16}")
    print("-" * 33)
    for actor_id in sorted(attempts):
        print(f"{actor_id:<16} {attempts[actor_id] / num_worlds:>16.2f}")
    print("-" * 33)
    print()

    print("Most common actions:")
    for kind, count in kinds.most_common(5):
        print(f"  {kind:<28} {count:>6}")
    print()
    print(f"Retaliations per world: {retaliations / num_worlds:.2f}")
    print(f"Worlds with at least one war: {worlds_at_war / num_worlds * 100:.1f}%")
    print()


def main():
    """Run all covert operations simulations."""
    parser = argparse.ArgumentParser(description="Run covert operations simulations")
    parser.add_argument("--trials", type=int, default=2000,
                        help="Resolutions per action (default: 2000)")
    parser.add_argument("--worlds", type=int, default=200,
                        help="Worlds for the organic tick run (default: 200)")
    parser.add_argument("--ticks", type=int, default=20,
                        help="Ticks per world (default: 20)")
    parser.add_argument("--skill", type=float, default=50.0,
                        help="Agent skill for the per-action run (default: 50)")
    parser.add_argument("--counter-intel", type=float, default=10.0,
                        help="Target counter-intelligence (default: 10)")
    parser.add_argument("--category", choices=[c.value for c in ActionCategory], default=None,
                        help="Only simulate actions in this category")
    parser.add_argument("--catalog", type=str, default=None,
                        help="Catalog override JSON (default: COVERTOPS_CATALOG_PATH or standard)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    catalog = get_catalog(args.catalog)
    rng = random.Random(args.seed)
    category = ActionCategory(args.category) if args.category else None

    print()
    print("COVERT OPERATIONS SIMULATION")
    print(f"Catalog version: {catalog.version} ({len(catalog)} actions)")
    print("=" * 80)
    print()

    run_formula_verification()
    run_action_rates(catalog, args.trials, rng, args.skill, args.counter_intel, category)
    run_organic_ticks(catalog, args.worlds, args.ticks, args.seed)

    print("=" * 80)
    print("SIMULATION COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
