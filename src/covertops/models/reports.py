"""Report models produced by the covert operations engine.

Everything here is computed fresh per evaluation and discarded afterwards.
Reports never mutate once built; the state changes they describe have
already been written through the world ports by the time a caller sees them.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from covertops.models.actions import ActionKind, EffectCode, StatKey


class MotiveKind(str, Enum):
    """Why an actor wants to act covertly."""

    FAMINE_DESPERATION = "famine_desperation"
    POVERTY_DESPERATION = "poverty_desperation"
    FOOD_ENVY = "food_envy"
    WEALTH_ENVY = "wealth_envy"
    REVENGE_GRUDGE = "revenge_grudge"
    ENEMY_HOSTILITY = "enemy_hostility"
    WAR_SABOTAGE = "war_sabotage"
    RIVALRY = "rivalry"
    MILITARY_NECESSITY = "military_necessity"
    RELIGIOUS_CONFLICT = "religious_conflict"
    OPPORTUNISM = "opportunism"


class Motive(BaseModel):
    """One weighted reason behind an actor's pressure.

    Global motives (famine, poverty) carry no target; every other motive
    names the polity it is aimed at.
    """

    model_config = ConfigDict(frozen=True)

    kind: MotiveKind
    intensity: float = Field(..., ge=0.0, le=100.0)
    target: str | None = None
    suggested_actions: tuple[ActionKind, ...] = ()
    reason: str = ""


class TargetCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: str
    target_name: str = ""
    pressure: float = Field(..., ge=0.0, le=100.0)
    top_motive: MotiveKind
    top_reason: str
    suggested_actions: tuple[ActionKind, ...] = Field(default=(), max_length=5)


class PressureReport(BaseModel):
    """Aggregate sabotage pressure for one actor.

    Attributes:
        actor: The evaluated actor
        total_pressure: 0-100 overall drive to act covertly
        motives: Every motive found, global and target-scoped
        ranked_targets: At most 5 candidates, highest pressure first
    """

    model_config = ConfigDict(frozen=True)

    actor: str
    total_pressure: float = Field(..., ge=0.0, le=100.0)
    motives: tuple[Motive, ...] = ()
    ranked_targets: tuple[TargetCandidate, ...] = Field(default=(), max_length=5)

    @property
    def top_target(self) -> TargetCandidate | None:
        return self.ranked_targets[0] if self.ranked_targets else None


class ResolutionStatus(str, Enum):
    """Whether an attempt was rolled at all.

    CAPABILITY_MISSING is a normal negative result, distinct from a failed
    attempt: nothing was rolled and nothing was mutated.
    """

    RESOLVED = "resolved"
    CAPABILITY_MISSING = "capability_missing"


class ResolutionResult(BaseModel):
    """Outcome of one (actor, target, action) resolution.

    success and detection are independent; all four combinations occur.

    Attributes:
        effects_applied: Deltas actually written to the target after clamping
        attacker_gains: Deltas (or head counts) credited to the attacker by
            the special-effect handler
        trust_change: Nominal trust delta on detection (the stored value
            saturates at -100)
        agent_captured: The embedded agent was lost after a failure
        message: Structured one-line summary for logs and narration
    """

    model_config = ConfigDict(frozen=True)

    actor: str
    target: str
    action_kind: ActionKind
    status: ResolutionStatus = ResolutionStatus.RESOLVED
    succeeded: bool = False
    detected: bool = False
    success_chance: float = 0.0
    detect_chance: float = 0.0
    effects_applied: dict[StatKey, float] = Field(default_factory=dict)
    special_effect_fired: EffectCode | None = None
    attacker_gains: dict[str, float] = Field(default_factory=dict)
    war_declared: bool = False
    agent_captured: bool = False
    trust_change: float = 0.0
    message: str = ""

    @property
    def capability_missing(self) -> bool:
        return self.status == ResolutionStatus.CAPABILITY_MISSING


class RetaliationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    retaliated: bool = False
    action_kind: ActionKind | None = None
    escalated_to_war: bool = False
    retaliation_chance: float = 0.0
    resolution: ResolutionResult | None = None


class OperationOutcome(BaseModel):
    """What happened when one actor was evaluated during a tick.

    reason is set when no attempt was made: below_threshold, no_targets,
    no_available_actions or declined.
    """

    model_config = ConfigDict(frozen=True)

    actor: str
    attempted: bool = False
    reason: str | None = None
    total_pressure: float = 0.0
    target: str | None = None
    action_kind: ActionKind | None = None
    result: ResolutionResult | None = None
    retaliation: RetaliationOutcome | None = None
