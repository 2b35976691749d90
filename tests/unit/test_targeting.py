"""Unit tests for target selection.

Tests cover:
1. rank_targets - threshold, ordering, top motive, pressure clamp
2. merge_suggestions - strongest motive wins, catalog order breaks ties
3. available_actions - capability filter, captured agents
4. choose_action - difficulty-weighted draw
5. find_opportunities - vulnerability scan
"""

import pytest

from covertops.engine import SUGGESTED_ACTIONS, TargetPressure, TargetSelector
from covertops.errors import ActorNotFoundError
from covertops.models import (
    DEFAULT_CATALOG,
    ActionCategory,
    ActionDefinition,
    ActionKind,
    CapabilityInstance,
    CapabilityStatus,
    Catalog,
    Motive,
    MotiveKind,
)
from covertops.storage import InMemoryWorld


def make_motive(kind: MotiveKind, intensity: float, target: str = "south") -> Motive:
    return Motive(
        kind=kind,
        intensity=intensity,
        target=target,
        suggested_actions=SUGGESTED_ACTIONS[kind],
        reason=f"{kind.value} reason",
    )


def pressure_for(target: str, *motives: Motive) -> TargetPressure:
    accumulated = TargetPressure(target=target, target_name=target.title())
    for motive in motives:
        accumulated.add(motive)
    return accumulated


# =============================================================================
# Ranking
# =============================================================================


class TestRankTargets:
    """Tests for turning accumulated pressure into candidates."""

    def test_below_threshold_dropped(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        pressures = {"south": pressure_for("south", make_motive(MotiveKind.FOOD_ENVY, 19.9))}

        assert selector.rank_targets(pressures) == []

    def test_threshold_is_inclusive(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        pressures = {"south": pressure_for("south", make_motive(MotiveKind.OPPORTUNISM, 20))}

        (candidate,) = selector.rank_targets(pressures)
        assert candidate.pressure == 20

    def test_sorted_by_pressure_then_id(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        pressures = {
            "c": pressure_for("c", make_motive(MotiveKind.RIVALRY, 30, "c")),
            "b": pressure_for("b", make_motive(MotiveKind.RIVALRY, 50, "b")),
            "a": pressure_for("a", make_motive(MotiveKind.RIVALRY, 30, "a")),
        }

        ranked = selector.rank_targets(pressures)

        assert [c.target for c in ranked] == ["b", "a", "c"]

    def test_top_motive_and_clamp(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        war = make_motive(MotiveKind.WAR_SABOTAGE, 80)
        hostility = make_motive(MotiveKind.ENEMY_HOSTILITY, 70)
        pressures = {"south": pressure_for("south", hostility, war)}

        (candidate,) = selector.rank_targets(pressures)

        assert candidate.pressure == 100
        assert candidate.top_motive == MotiveKind.WAR_SABOTAGE
        assert candidate.top_reason == "war_sabotage reason"
        assert candidate.target_name == "South"

    def test_equal_intensities_keep_first_motive(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        pressures = {
            "south": pressure_for(
                "south",
                make_motive(MotiveKind.RIVALRY, 30),
                make_motive(MotiveKind.RELIGIOUS_CONFLICT, 30),
            )
        }

        (candidate,) = selector.rank_targets(pressures)

        assert candidate.top_motive == MotiveKind.RIVALRY


class TestMergeSuggestions:
    """Tests for deduplicating suggested actions."""

    def test_strongest_motive_first(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        motives = [make_motive(MotiveKind.FOOD_ENVY, 25), make_motive(MotiveKind.RIVALRY, 48)]

        merged = selector.merge_suggestions(motives)

        assert merged == [
            ActionKind.STEAL_TRADE_SECRETS,
            ActionKind.SPREAD_PROPAGANDA,
            ActionKind.BRIBE_ADVISORS,
            ActionKind.POISON_CROPS,
            ActionKind.BURN_GRANARIES,
        ]

    def test_duplicates_take_highest_score(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        motives = [make_motive(MotiveKind.POVERTY_DESPERATION, 10), make_motive(MotiveKind.WEALTH_ENVY, 40)]

        merged = selector.merge_suggestions(motives)

        assert merged.count(ActionKind.STEAL_TRADE_SECRETS) == 1
        assert merged[0] == ActionKind.COUNTERFEIT_CURRENCY
        assert merged[1] == ActionKind.BURN_MARKET
        assert merged[2] == ActionKind.STEAL_TRADE_SECRETS

    def test_kinds_outside_catalog_dropped(self, world: InMemoryWorld) -> None:
        catalog = Catalog([DEFAULT_CATALOG.get(ActionKind.BURN_GRANARIES)])
        selector = TargetSelector(world, catalog)

        merged = selector.merge_suggestions([make_motive(MotiveKind.FOOD_ENVY, 25)])

        assert merged == [ActionKind.BURN_GRANARIES]


# =============================================================================
# Capability Narrowing
# =============================================================================


class TestAvailableActions:
    """Tests for the embedded-agent filter."""

    KINDS = [ActionKind.SABOTAGE_WEAPONS, ActionKind.BURN_ARMORY]

    def test_without_agent(self, world: InMemoryWorld) -> None:
        selector = TargetSelector(world)
        assert selector.available_actions("north", "south", self.KINDS) == [ActionKind.BURN_ARMORY]

    def test_with_agent(self, world: InMemoryWorld) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))
        selector = TargetSelector(world)

        assert selector.available_actions("north", "south", self.KINDS) == self.KINDS

    def test_agent_in_another_target_does_not_count(self, world: InMemoryWorld) -> None:
        world.add_actor(id="west")
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="west"))
        selector = TargetSelector(world)

        assert selector.available_actions("north", "south", self.KINDS) == [ActionKind.BURN_ARMORY]

    def test_captured_agent_does_not_count(self, world: InMemoryWorld) -> None:
        world.add_capability(
            CapabilityInstance(id="spy-1", owner="north", target="south", status=CapabilityStatus.CAPTURED)
        )
        selector = TargetSelector(world)

        assert not selector.has_capability("north", "south")
        assert selector.available_actions("north", "south", self.KINDS) == [ActionKind.BURN_ARMORY]


# =============================================================================
# Weighted Choice
# =============================================================================


class TestChooseAction:
    """burn_granaries weighs 55, disrupt_caravans weighs 65."""

    KINDS = [ActionKind.BURN_GRANARIES, ActionKind.DISRUPT_CARAVANS]

    def test_low_draw_picks_first(self, world: InMemoryWorld, scripted) -> None:
        selector = TargetSelector(world)
        assert selector.choose_action(self.KINDS, scripted(0.4)) == ActionKind.BURN_GRANARIES

    def test_high_draw_picks_second(self, world: InMemoryWorld, scripted) -> None:
        selector = TargetSelector(world)
        assert selector.choose_action(self.KINDS, scripted(0.5)) == ActionKind.DISRUPT_CARAVANS

    def test_consumes_one_draw(self, world: InMemoryWorld, scripted) -> None:
        rng = scripted(0.0, 0.7)
        TargetSelector(world).choose_action(self.KINDS, rng)
        assert rng.values == [0.7]

    def test_rounding_residue_picks_last(self, world: InMemoryWorld, scripted) -> None:
        """A draw that overshoots the total weight lands on the last action."""
        selector = TargetSelector(world)
        assert selector.choose_action(self.KINDS, scripted(1.0 + 1e-9)) == ActionKind.DISRUPT_CARAVANS

    def test_empty_raises(self, world: InMemoryWorld, scripted) -> None:
        with pytest.raises(ValueError):
            TargetSelector(world).choose_action([], scripted())


# =============================================================================
# Opportunity Scan
# =============================================================================


class TestFindOpportunities:
    """Tests for the quick vulnerability scan."""

    def test_without_agent(self, world: InMemoryWorld) -> None:
        (opportunity,) = TargetSelector(world).find_opportunities("north")

        assert opportunity.target == "south"
        assert opportunity.target_name == "Southmarch"
        assert opportunity.has_agent is False
        assert opportunity.vulnerabilities == (
            (ActionKind.SPREAD_PROPAGANDA, 58),
            (ActionKind.BURN_GRANARIES, 52),
            (ActionKind.POISON_CROPS, 48),
            (ActionKind.SPREAD_PLAGUE, 42),
        )

    def test_with_agent_capped_at_five(self, world: InMemoryWorld) -> None:
        world.add_capability(CapabilityInstance(id="spy-1", owner="north", target="south"))

        (opportunity,) = TargetSelector(world).find_opportunities("north")

        assert opportunity.has_agent is True
        assert [kind for kind, _ in opportunity.vulnerabilities] == [
            ActionKind.SPREAD_PROPAGANDA,
            ActionKind.BURN_GRANARIES,
            ActionKind.POISON_CROPS,
            ActionKind.SABOTAGE_WEAPONS,
            ActionKind.SPREAD_PLAGUE,
        ]

    def test_hard_target_omitted(self, world: InMemoryWorld) -> None:
        catalog = Catalog(
            [
                ActionDefinition(
                    kind=ActionKind.SPREAD_PROPAGANDA,
                    category=ActionCategory.POLITICAL,
                    base_difficulty=90,
                    base_detect_chance=25,
                    war_risk=15,
                )
            ]
        )

        assert TargetSelector(world, catalog).find_opportunities("north") == []

    def test_skips_self_and_eliminated(self, world: InMemoryWorld) -> None:
        world.add_actor(id="west", eliminated=True)

        opportunities = TargetSelector(world).find_opportunities("north")

        assert [o.target for o in opportunities] == ["south"]

    def test_unknown_actor(self, world: InMemoryWorld) -> None:
        with pytest.raises(ActorNotFoundError):
            TargetSelector(world).find_opportunities("atlantis")
