"""Balance parameters for covert operations.

This module is the SINGLE SOURCE OF TRUTH for all tunable covert operations
constants. Engine modules import from here; nothing else hard-codes a number.

Parameter Categories:
- Motives: thresholds, coefficients and caps for each motive family
- Selection: target threshold, list sizes, organic attempt band
- Resolution: clamps, skill and counter-intelligence scaling, capture chance
- Detection: trust damage, diplomatic thresholds
- Special effects: fixed handler amounts
- Memories: emotional weights of emitted memory events

Usage:
    from covertops.parameters import CAPTURE_CHANCE, TARGET_PRESSURE_THRESHOLD
"""

# =============================================================================
# GENERAL
# =============================================================================

SCORE_MIN = 0.0
SCORE_MAX = 100.0
"""Bounds for every probability, pressure and rate-type stat."""

TRUST_MIN = -100.0
TRUST_MAX = 100.0

DEFAULT_PERSONALITY_TRAIT = 50.0
"""Cunning, aggression and wrath default when an actor has no personality record."""


# =============================================================================
# MOTIVE PARAMETERS
# =============================================================================

FAMINE_FOOD_THRESHOLD = 20.0
FAMINE_COEFFICIENT = 5.0
FAMINE_CAP = 100.0
FOOD_ENVY_THRESHOLD = 50.0
FOOD_ENVY_FACTOR = 0.5
"""Famine desperation.

intensity = min(FAMINE_CAP, (FAMINE_FOOD_THRESHOLD - food) * FAMINE_COEFFICIENT)
Every rival holding more than FOOD_ENVY_THRESHOLD food receives an envy motive
at intensity * FOOD_ENVY_FACTOR.

Example:
    food=10 -> famine 50, envy 25 against every rival with food > 50
"""

POVERTY_WEALTH_THRESHOLD = 15.0
POVERTY_COEFFICIENT = 4.0
POVERTY_CAP = 80.0
WEALTH_ENVY_THRESHOLD = 40.0
WEALTH_ENVY_FACTOR = 0.4
"""Poverty desperation, mirror of famine with its own coefficients.

The cap is 80 rather than 100: an empty treasury is a weaker driver than
starvation.
"""

GRUDGE_MEMORY_KINDS = ("betrayal", "defeat", "loss")
GRUDGE_FACTOR = 0.8
GRUDGE_CAP = 80.0
GRUDGE_MEMORY_WINDOW = 50
"""Grudges come from the most recent GRUDGE_MEMORY_WINDOW memory entries only.

intensity = min(GRUDGE_CAP, |emotional_weight| * GRUDGE_FACTOR)

Tuning:
    - If old grievances dominate targeting: shrink the window
    - A detected sabotage records a -50 betrayal, i.e. a 40-point grudge
"""

HOSTILITY_TRUST_THRESHOLD = -30.0
HOSTILITY_FACTOR = 0.7
HOSTILITY_CAP = 70.0
WAR_MOTIVE_INTENSITY = 80.0
"""Relationship hostility.

Trust below HOSTILITY_TRUST_THRESHOLD yields min(70, |trust| * 0.7).
An at_war relationship always contributes a flat 80, independent of trust.
"""

RIVALRY_FACTOR = 0.6
RIVALRY_CAP = 60.0

MILITARY_WEAKNESS_THRESHOLD = 30.0
MILITARY_NECESSITY_FACTOR = 0.5
MILITARY_NECESSITY_CAP = 50.0
"""Strategic necessity, evaluated only while own military is below 30.

Applies to every actor held at negative trust whose military exceeds ours:
intensity = min(50, (their_military - own_military) * 0.5)
"""

IDEOLOGY_TOLERANCE_THRESHOLD = 40.0
IDEOLOGY_CAP = 50.0

OPPORTUNISM_MILITARY_THRESHOLD = 20.0
OPPORTUNISM_HAPPINESS_THRESHOLD = 30.0
OPPORTUNISM_POPULATION_THRESHOLD = 50.0
OPPORTUNISM_TRUST_THRESHOLD = 20.0
OPPORTUNISM_FACTOR = 0.4
OPPORTUNISM_CAP = 40.0
"""Opportunism against a weak rival we do not trust.

Weak means military < 20 OR happiness < 30 OR population < 50.
intensity = min(40, aggression * 0.4)
"""

CUNNING_BASELINE = 50.0
"""total_pressure = mean(intensities) * (cunning / CUNNING_BASELINE), clamped to 100."""


# =============================================================================
# SELECTION PARAMETERS
# =============================================================================

TARGET_PRESSURE_THRESHOLD = 20.0
"""Targets whose summed pressure is below this are never candidates."""

MAX_TARGET_CANDIDATES = 5
MAX_SUGGESTED_ACTIONS = 5

ATTEMPT_THRESHOLD_BASE = 40.0
ATTEMPT_THRESHOLD_JITTER = 20.0
"""Organic attempt gate: threshold = 40 - U(0,1) * 20, i.e. somewhere in 20-40.

Below the threshold an actor does not even consider acting. Above it, the
attempt itself still fires only with probability total_pressure / 100.
"""

OPPORTUNITY_ACTIONS = (
    "burn_granaries",
    "poison_crops",
    "incite_rebellion",
    "spread_propaganda",
    "sabotage_weapons",
    "spread_plague",
)
OPPORTUNITY_MIN_SUCCESS = 30.0
OPPORTUNITY_AGENT_SKILL = 60.0
"""Opportunity scans assume a skill-60 agent where one is embedded."""


# =============================================================================
# RESOLUTION PARAMETERS
# =============================================================================

SUCCESS_CHANCE_MIN = 10.0
SUCCESS_CHANCE_MAX = 90.0
DETECT_CHANCE_MIN = 5.0
DETECT_CHANCE_MAX = 95.0

DEFAULT_AGENT_SKILL = 50.0
DEFAULT_COUNTER_INTEL = 10.0

SKILL_BASELINE = 50.0
SKILL_SUCCESS_DIVISOR = 2.0
COUNTER_INTEL_SUCCESS_DIVISOR = 4.0
COUNTER_INTEL_DETECT_DIVISOR = 2.0
SKILL_DETECT_DIVISOR = 4.0
"""Roll formulas.

success = clamp(10, 90, (100 - difficulty) + (skill - 50) / 2 - counter_intel / 4)
detect  = clamp(5, 95, detect_chance + counter_intel / 2 - skill / 4)

Example:
    difficulty 50, skill 70, counter_intel 10 -> 50 + 10 - 2.5 = 57.5
"""

CAPTURE_CHANCE = 0.35
"""Chance an embedded agent is lost when its operation fails.

Only rolled when the action required the agent. Capture is permanent.
"""


# =============================================================================
# DETECTION PARAMETERS
# =============================================================================

TRUST_DAMAGE_BASE = 20
"""Trust lost on detection = TRUST_DAMAGE_BASE + floor(war_risk / 2)."""

WAR_CAUSE_PREFIX = "sabotage"
"""War cause stamped on the relationship, e.g. "sabotage:burn_granaries".

A detection that does not start a war still leaves the relationship at least
tense, and hostile once trust falls below HOSTILITY_TRUST_THRESHOLD.
"""


# =============================================================================
# SPECIAL EFFECT AMOUNTS
# =============================================================================

TECH_STOLEN_KNOWLEDGE = 5.0
TECH_STOLEN_TECHNOLOGY = 3.0
SOLDIERS_DEFECT_MILITARY = 8.0
BATTLE_PLANS_MILITARY = 5.0
RELICS_STOLEN_INFLUENCE = 10.0
OFFICIALS_CONTROLLED_INFLUENCE = 5.0

CRAFTSMAN_PROFESSIONS = ("blacksmith", "carpenter", "mason")
MAX_KIDNAPPED_CRAFTSMEN = 3
MAX_PRIESTS_KILLED = 3

PLAGUE_SICK = 20
ARMY_PLAGUE_SICK = 15
MASS_POISONING_SICK = 15
MINOR_SICKNESS = 10

REBEL_FACTION_POWER = 30.0
REBEL_FACTION_REBELLION_RISK = 80.0
OPPOSITION_FACTION_POWER = 25.0
CULT_FACTION_POWER = 20.0

POPULATION_DRAIN_FRACTION = 0.05
POPULATION_DRAIN_CAP = 5


# =============================================================================
# MEMORY WEIGHTS
# =============================================================================

ATTACKER_SUCCESS_MEMORY_WEIGHT = 25.0
VICTIM_DETECTION_MEMORY_WEIGHT = -50.0
ATTACKER_EXPOSED_MEMORY_WEIGHT = -30.0
RETALIATION_MEMORY_WEIGHT = 15.0
