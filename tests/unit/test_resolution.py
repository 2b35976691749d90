"""Unit tests for action resolution.

Tests cover:
1. Chance formulas - worked example, clamp bounds
2. Preconditions - unknown ids and kinds, missing capability
3. Success path - clamped deltas, attacker memory
4. Failure path - agent capture
5. Detection - trust damage, status escalation, war declaration
6. Determinism and the long-run war frequency
"""

import copy
import random

import pytest

from covertops.engine import ActionResolver, detect_chance, effective_deltas, success_chance
from covertops.errors import ActorNotFoundError, UnknownActionKindError
from covertops.models import (
    ActionCategory,
    ActionDefinition,
    ActionKind,
    CapabilityInstance,
    CapabilityStatus,
    Catalog,
    EventSeverity,
    RelationshipStatus,
    ResolutionStatus,
    StatKey,
)
from covertops.storage import InMemoryWorld


# =============================================================================
# Chance Formulas
# =============================================================================


class TestChances:
    """Tests for the success and detection formulas."""

    def test_worked_example(self) -> None:
        assert success_chance(50, 70, 10) == pytest.approx(57.5)
        assert detect_chance(30, 70, 10) == pytest.approx(17.5)

    @pytest.mark.parametrize(
        "difficulty,skill,counter_intel,expected",
        [(95, 0, 100, 10), (0, 100, 0, 90), (50, 50, 0, 50)],
    )
    def test_success_bounds(self, difficulty, skill, counter_intel, expected) -> None:
        assert success_chance(difficulty, skill, counter_intel) == expected

    @pytest.mark.parametrize(
        "base,skill,counter_intel,expected",
        [(100, 0, 100, 95), (0, 100, 0, 5), (40, 50, 10, 32.5)],
    )
    def test_detect_bounds(self, base, skill, counter_intel, expected) -> None:
        assert detect_chance(base, skill, counter_intel) == expected

    def test_effective_deltas(self, world: InMemoryWorld) -> None:
        world.add_actor(id="east", happiness=95, food=3)

        deltas = effective_deltas(world.get_actor("east"), {StatKey.HAPPINESS: 10, StatKey.FOOD: -10})

        assert deltas == {StatKey.HAPPINESS: 5, StatKey.FOOD: -3}

    def test_result_reports_chances(self, world: InMemoryWorld, scripted) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south", skill=70))

        result = ActionResolver(world).resolve("north", "south", ActionKind.INCITE_DESERTION, scripted(0.99, 0.99, 0.99))

        assert result.success_chance == pytest.approx(57.5)
        assert result.detect_chance == pytest.approx(17.5)


# =============================================================================
# Preconditions
# =============================================================================


class TestPreconditions:
    """Tests for validation and the capability gate."""

    def test_capability_missing_rolls_nothing(self, world: InMemoryWorld, scripted) -> None:
        before = world.to_snapshot()

        result = ActionResolver(world).resolve("north", "south", ActionKind.SABOTAGE_WEAPONS, scripted())

        assert result.status == ResolutionStatus.CAPABILITY_MISSING
        assert result.capability_missing
        assert not result.succeeded
        assert not result.detected
        assert "requires an agent" in result.message
        assert world.to_snapshot() == before

    def test_captured_agent_is_not_a_capability(self, world: InMemoryWorld, scripted) -> None:
        world.add_capability(
            CapabilityInstance(id="spy-1", owner="north", target="south", status=CapabilityStatus.CAPTURED)
        )

        result = ActionResolver(world).resolve("north", "south", ActionKind.SABOTAGE_WEAPONS, scripted())

        assert result.capability_missing

    def test_unknown_actor(self, world: InMemoryWorld, scripted) -> None:
        with pytest.raises(ActorNotFoundError) as exc_info:
            ActionResolver(world).resolve("north", "atlantis", ActionKind.BURN_GRANARIES, scripted())
        assert exc_info.value.actor_id == "atlantis"

    def test_unknown_kind(self, world: InMemoryWorld, scripted) -> None:
        with pytest.raises(UnknownActionKindError):
            ActionResolver(world).resolve("north", "south", "summon_dragons", scripted())

    def test_kind_as_string(self, world: InMemoryWorld, scripted) -> None:
        result = ActionResolver(world).resolve("north", "south", "burn_granaries", scripted(0.99, 0.99))
        assert result.action_kind == ActionKind.BURN_GRANARIES


# =============================================================================
# Success and Failure
# =============================================================================


class TestOutcome:
    """Tests for the success and failure branches."""

    def test_effects_clamped(self, scripted) -> None:
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south", food=10, happiness=40)

        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.0, 0.99))

        assert result.succeeded
        assert result.effects_applied == {StatKey.FOOD: -10, StatKey.HAPPINESS: -15}
        south = world.get_actor("south")
        assert south.food == 0
        assert south.happiness == 25
        assert result.message.startswith("SUCCESS: Set fire to food storage")

    def test_success_records_attacker_memory(self, world: InMemoryWorld, scripted) -> None:
        ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.0, 0.99))

        (memory,) = world.get_memories("north")
        assert memory.kind == "victory"
        assert memory.emotional_weight == 25
        assert memory.target == "south"

    def test_failure_leaves_target_untouched(self, world: InMemoryWorld, scripted) -> None:
        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.99))

        assert not result.succeeded
        assert result.effects_applied == {}
        assert world.get_actor("south").food == 50
        assert result.message == "FAILED: burn granaries was unsuccessful."

    def test_agent_captured_after_failure(self, world: InMemoryWorld, scripted) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))

        result = ActionResolver(world).resolve("north", "south", ActionKind.SABOTAGE_WEAPONS, scripted(0.99, 0.99, 0.1))

        assert result.agent_captured
        (instance,) = world.get_capability_instances("north", "south")
        assert instance.status == CapabilityStatus.CAPTURED

    def test_agent_survives_capture_roll(self, world: InMemoryWorld, scripted) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))
        rng = scripted(0.99, 0.99, 0.5)

        result = ActionResolver(world).resolve("north", "south", ActionKind.SABOTAGE_WEAPONS, rng)

        assert not result.agent_captured
        assert rng.values == []
        (instance,) = world.get_capability_instances("north", "south")
        assert instance.is_active

    def test_no_capture_roll_without_agent(self, world: InMemoryWorld, scripted) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))

        # Two draws only: burn_granaries never consults the agent
        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.99))

        assert not result.agent_captured
        (instance,) = world.get_capability_instances("north", "south")
        assert instance.is_active


# =============================================================================
# Detection
# =============================================================================


class TestDetection:
    """Tests for the diplomatic fallout of a detected attempt."""

    def test_trust_damage_and_hostility(self, world: InMemoryWorld, scripted) -> None:
        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.0, 0.99))

        assert result.detected
        assert not result.war_declared
        assert result.trust_change == -37
        relationship = world.get_relationship("north", "south")
        assert relationship.trust == -37
        assert relationship.status == RelationshipStatus.HOSTILE
        assert "detected the involvement of Northreach" in result.message

    def test_mild_detection_is_tense(self, scripted) -> None:
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south")
        world.add_relationship("north", "south", trust=10)

        ActionResolver(world).resolve("north", "south", ActionKind.INTRODUCE_PESTS, scripted(0.99, 0.0, 0.99))

        relationship = world.get_relationship("north", "south")
        assert relationship.trust == -17
        assert relationship.status == RelationshipStatus.TENSE

    def test_never_de_escalates(self, scripted) -> None:
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south")
        world.add_relationship("north", "south", trust=40, status=RelationshipStatus.HOSTILE)

        ActionResolver(world).resolve("north", "south", ActionKind.INTRODUCE_PESTS, scripted(0.99, 0.0, 0.99))

        assert world.get_relationship("north", "south").status == RelationshipStatus.HOSTILE

    def test_missing_relationship_created(self, famine_world: InMemoryWorld, scripted) -> None:
        ActionResolver(famine_world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.0, 0.99))

        relationship = famine_world.get_relationship("north", "south")
        assert relationship.trust == -37
        assert relationship.status == RelationshipStatus.HOSTILE

    def test_trust_saturates(self, scripted) -> None:
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south")
        world.add_relationship("north", "south", trust=-90)

        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.0, 0.99))

        assert result.trust_change == -37
        assert world.get_relationship("north", "south").trust == -100

    def test_victim_remembers_betrayal(self, world: InMemoryWorld, scripted) -> None:
        ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.0, 0.99))

        (memory,) = world.get_memories("south")
        assert memory.kind == "betrayal"
        assert memory.emotional_weight == -50
        assert memory.target == "north"

    def test_undetected_attempt_leaves_relationship(self, world: InMemoryWorld, scripted) -> None:
        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, scripted(0.0, 0.99))

        assert result.trust_change == 0
        relationship = world.get_relationship("north", "south")
        assert relationship.trust == 0
        assert relationship.status == RelationshipStatus.NEUTRAL
        assert world.get_memories("south") == []


class TestWarDeclaration:
    """Tests for war triggered by detection."""

    def test_war_declared(self, world: InMemoryWorld, scripted) -> None:
        result = ActionResolver(world).resolve(
            "north", "south", ActionKind.BURN_GRANARIES, scripted(0.99, 0.0, 0.0), tick=12
        )

        assert result.war_declared
        relationship = world.get_relationship("north", "south")
        assert relationship.status == RelationshipStatus.AT_WAR
        assert relationship.war_cause == "sabotage:burn_granaries"
        assert relationship.war_start_tick == 12
        assert relationship.trust == -37

        (event,) = world.events
        assert event.kind == "war"
        assert event.actor == "south"
        assert event.target == "north"
        assert event.tick == 12
        assert event.severity == EventSeverity.CRITICAL

    def test_existing_war_not_redeclared(self, scripted) -> None:
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south")
        world.add_relationship("north", "south", trust=-60, status=RelationshipStatus.AT_WAR)
        world.set_relationship("north", "south", war_cause="border", war_start_tick=2)
        rng = scripted(0.99, 0.0, 0.0)

        result = ActionResolver(world).resolve("north", "south", ActionKind.BURN_GRANARIES, rng, tick=12)

        assert not result.war_declared
        assert rng.values == []
        relationship = world.get_relationship("north", "south")
        assert relationship.status == RelationshipStatus.AT_WAR
        assert relationship.war_cause == "border"
        assert relationship.war_start_tick == 2
        assert relationship.trust == -97
        assert world.events == []


# =============================================================================
# Determinism
# =============================================================================


class TestDeterminism:
    KINDS = (ActionKind.INCITE_REBELLION, ActionKind.SPREAD_PLAGUE, ActionKind.BURN_MARKET)

    def run_sequence(self, world: InMemoryWorld, seed: int) -> list:
        resolver = ActionResolver(world)
        rng = random.Random(seed)
        return [resolver.resolve("north", "south", kind, rng) for kind in self.KINDS]

    def test_same_seed_same_outcome(self, world: InMemoryWorld) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))
        twin = copy.deepcopy(world)

        first = self.run_sequence(world, 42)
        second = self.run_sequence(twin, 42)

        assert first == second
        assert world.to_snapshot() == twin.to_snapshot()


@pytest.mark.slow
class TestWarFrequency:
    """Long-run frequency of war after detection."""

    def test_war_rate_matches_war_risk(self) -> None:
        catalog = Catalog(
            [
                ActionDefinition(
                    kind=ActionKind.BURN_GRANARIES,
                    category=ActionCategory.ECONOMIC,
                    base_difficulty=100,
                    base_detect_chance=100,
                    war_risk=60,
                )
            ]
        )
        world = InMemoryWorld()
        world.add_actor(id="north")
        world.add_actor(id="south")
        resolver = ActionResolver(world, catalog)
        rng = random.Random(7)

        detections = 0
        wars = 0
        while detections < 10_000:
            world.set_relationship("north", "south", trust=0, status=RelationshipStatus.NEUTRAL)
            result = resolver.resolve("north", "south", ActionKind.BURN_GRANARIES, rng)
            if result.detected:
                detections += 1
                wars += result.war_declared

        assert abs(wars / detections - 0.60) <= 0.03
