"""Covert action definitions.

This module defines the closed vocabularies of the covert operations engine
(action kinds, categories, stat keys and special-effect codes) and the
immutable ActionDefinition record that every catalog entry is built from.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from covertops.parameters import TRUST_DAMAGE_BASE


class ActionCategory(str, Enum):
    """The eight families of covert action.

    Retaliation mirrors within a category, so the category is part of the
    escalation logic and not just a display label.
    """

    ECONOMIC = "economic"
    MILITARY = "military"
    POLITICAL = "political"
    RELIGIOUS = "religious"
    INFRASTRUCTURE = "infrastructure"
    DEMOGRAPHIC = "demographic"
    PSYCHOLOGICAL = "psychological"
    SOCIAL = "social"


class ActionKind(str, Enum):
    """Every covert action the engine knows how to resolve.

    Member order is catalog definition order, which is also the tie-break
    order used when ranking suggested actions.
    """

    # Economic
    POISON_CROPS = "poison_crops"
    CONTAMINATE_WATER = "contaminate_water"
    COUNTERFEIT_CURRENCY = "counterfeit_currency"
    BURN_GRANARIES = "burn_granaries"
    SABOTAGE_MINES = "sabotage_mines"
    BURN_MARKET = "burn_market"
    INTRODUCE_PESTS = "introduce_pests"
    BRIBE_MERCHANTS = "bribe_merchants"
    STEAL_TRADE_SECRETS = "steal_trade_secrets"
    DISRUPT_CARAVANS = "disrupt_caravans"
    # Military
    POISON_ARMY_SUPPLIES = "poison_army_supplies"
    SABOTAGE_WEAPONS = "sabotage_weapons"
    STEAL_BATTLE_PLANS = "steal_battle_plans"
    ASSASSINATE_GENERAL = "assassinate_general"
    INCITE_DESERTION = "incite_desertion"
    SPREAD_CAMP_DISEASE = "spread_camp_disease"
    SABOTAGE_FORTIFICATIONS = "sabotage_fortifications"
    BURN_ARMORY = "burn_armory"
    DISABLE_SIEGE_EQUIPMENT = "disable_siege_equipment"
    BRIBE_SOLDIERS_DEFECT = "bribe_soldiers_defect"
    # Political
    ASSASSINATE_HEIR = "assassinate_heir"
    SPREAD_PROPAGANDA = "spread_propaganda"
    INCITE_REBELLION = "incite_rebellion"
    BRIBE_ADVISORS = "bribe_advisors"
    FORGE_DOCUMENTS = "forge_documents"
    FRAME_NOBLE_TREASON = "frame_noble_treason"
    SUPPORT_RIVAL_FACTION = "support_rival_faction"
    SPREAD_RULER_RUMORS = "spread_ruler_rumors"
    CREATE_SUCCESSION_CRISIS = "create_succession_crisis"
    BLACKMAIL_OFFICIALS = "blackmail_officials"
    # Religious
    DESECRATE_TEMPLE = "desecrate_temple"
    ASSASSINATE_PRIESTS = "assassinate_priests"
    SPREAD_HERESY = "spread_heresy"
    STEAL_HOLY_RELICS = "steal_holy_relics"
    CORRUPT_RELIGIOUS_TEXTS = "corrupt_religious_texts"
    SUPPORT_RIVAL_CULT = "support_rival_cult"
    POISON_HOLY_WATER = "poison_holy_water"
    FAKE_DIVINE_OMENS = "fake_divine_omens"
    # Infrastructure
    DESTROY_BRIDGES = "destroy_bridges"
    BLOCK_MOUNTAIN_PASSES = "block_mountain_passes"
    BURN_HARBOR = "burn_harbor"
    COLLAPSE_MINES = "collapse_mines"
    DESTROY_AQUEDUCTS = "destroy_aqueducts"
    SET_CITY_FIRES = "set_city_fires"
    DAM_RIVERS = "dam_rivers"
    DESTROY_ROADS = "destroy_roads"
    # Demographic
    SPREAD_PLAGUE = "spread_plague"
    POISON_FOOD_SUPPLY = "poison_food_supply"
    KIDNAP_CRAFTSMEN = "kidnap_craftsmen"
    ENCOURAGE_EMIGRATION = "encourage_emigration"
    ASSASSINATE_HEALERS = "assassinate_healers"
    # Psychological
    SPREAD_TERROR = "spread_terror"
    DISPLAY_ENEMY_HEADS = "display_enemy_heads"
    CREATE_BAD_OMENS = "create_bad_omens"
    NIGHT_RAIDS = "night_raids"
    DEMORALIZE_WITH_LOSSES = "demoralize_with_losses"
    # Social
    INCITE_CLASS_WARFARE = "incite_class_warfare"
    SPREAD_ETHNIC_HATRED = "spread_ethnic_hatred"
    CORRUPT_YOUTH = "corrupt_youth"
    UNDERMINE_MARRIAGES = "undermine_marriages"
    SPREAD_ADDICTION = "spread_addiction"
    DESTROY_CULTURAL_ARTIFACTS = "destroy_cultural_artifacts"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'burn granaries'."""
        return self.value.replace("_", " ")


class StatKey(str, Enum):
    """Polity stats an effect vector may touch.

    Rate-type stats live on a 0-100 scale and are clamped at both ends.
    Magnitude-type stats (population, wealth, food) are only floored at 0:
    plunder can push them past their usual range.
    """

    FOOD = "food"
    WEALTH = "wealth"
    POPULATION = "population"
    HAPPINESS = "happiness"
    MILITARY = "military"
    KNOWLEDGE = "knowledge"
    INFLUENCE = "influence"
    TECHNOLOGY = "technology"
    PIETY = "piety"

    @property
    def is_rate(self) -> bool:
        return self not in MAGNITUDE_STATS


MAGNITUDE_STATS = frozenset({StatKey.FOOD, StatKey.WEALTH, StatKey.POPULATION})


class EffectCode(str, Enum):
    """Special-effect codes carried by catalog entries.

    Every code must have a handler in covertops.engine.effects; catalogs are
    checked for this when they are built.
    """

    CROP_DISEASE = "crop_disease"
    DISEASE_OUTBREAK = "disease_outbreak"
    INFLATION = "inflation"
    MINE_COLLAPSE = "mine_collapse"
    PEST_INFESTATION = "pest_infestation"
    TECH_STOLEN = "tech_stolen"
    ARMY_SICKNESS = "army_sickness"
    WEAPON_QUALITY_DROP = "weapon_quality_drop"
    BATTLE_PLANS_STOLEN = "battle_plans_stolen"
    GENERAL_KILLED = "general_killed"
    MASS_DESERTION = "mass_desertion"
    ARMY_PLAGUE = "army_plague"
    WALLS_WEAKENED = "walls_weakened"
    SIEGE_DISABLED = "siege_disabled"
    SOLDIERS_DEFECT = "soldiers_defect"
    HEIR_KILLED = "heir_killed"
    LEGITIMACY_DROP = "legitimacy_drop"
    REBELLION_STARTED = "rebellion_started"
    BAD_DECISIONS = "bad_decisions"
    DIPLOMATIC_CHAOS = "diplomatic_chaos"
    INTERNAL_PURGE = "internal_purge"
    FACTION_STRENGTHENED = "faction_strengthened"
    RULER_DISCREDITED = "ruler_discredited"
    SUCCESSION_CRISIS = "succession_crisis"
    OFFICIALS_CONTROLLED = "officials_controlled"
    TEMPLE_DEFILED = "temple_defiled"
    PRIESTS_KILLED = "priests_killed"
    RELIGIOUS_SCHISM = "religious_schism"
    RELICS_STOLEN = "relics_stolen"
    TEXTS_CORRUPTED = "texts_corrupted"
    CULT_FORMED = "cult_formed"
    HOLY_WATER_POISONED = "holy_water_poisoned"
    FALSE_OMENS = "false_omens"
    BRIDGES_DESTROYED = "bridges_destroyed"
    PASSES_BLOCKED = "passes_blocked"
    HARBOR_DESTROYED = "harbor_destroyed"
    MINES_COLLAPSED = "mines_collapsed"
    WATER_CRISIS = "water_crisis"
    CITY_BURNING = "city_burning"
    RIVER_DIVERTED = "river_diverted"
    ROADS_DESTROYED = "roads_destroyed"
    PLAGUE_STARTED = "plague_started"
    MASS_POISONING = "mass_poisoning"
    CRAFTSMEN_KIDNAPPED = "craftsmen_kidnapped"
    POPULATION_DRAIN = "population_drain"
    HEALERS_KILLED = "healers_killed"
    TERROR_CAMPAIGN = "terror_campaign"
    INTIMIDATION = "intimidation"
    SUPERSTITION_FEAR = "superstition_fear"
    SLEEP_DEPRIVATION = "sleep_deprivation"
    DEFEATISM = "defeatism"
    CLASS_CONFLICT = "class_conflict"
    ETHNIC_TENSION = "ethnic_tension"
    YOUTH_CORRUPTED = "youth_corrupted"
    MARRIAGES_BROKEN = "marriages_broken"
    ADDICTION_EPIDEMIC = "addiction_epidemic"
    CULTURE_DESTROYED = "culture_destroyed"


class ActionDefinition(BaseModel):
    """A single catalog entry.

    Attributes:
        kind: Which action this defines
        category: Action family, used for retaliation mirroring
        base_difficulty: 0-100, higher is harder to pull off
        base_detect_chance: 0-100 chance of exposure before modifiers
        war_risk: 0-100 chance that exposure escalates to open war
        requires_capability: Whether an embedded agent at the target is required
        effect_vector: Stat deltas applied to the target on success
        special_effect: Optional handler code fired after the effect vector
        description: One-line summary for reports
    """

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    category: ActionCategory
    base_difficulty: float = Field(..., ge=0.0, le=100.0)
    base_detect_chance: float = Field(..., ge=0.0, le=100.0)
    war_risk: float = Field(..., ge=0.0, le=100.0)
    requires_capability: bool = False
    effect_vector: dict[StatKey, float] = Field(default_factory=dict)
    special_effect: EffectCode | None = None
    description: str = ""

    @field_validator("effect_vector")
    @classmethod
    def drop_zero_deltas(cls, v: dict[StatKey, float]) -> dict[StatKey, float]:
        """Zero entries carry no effect and are not reported."""
        return {key: delta for key, delta in v.items() if delta != 0}

    @property
    def trust_damage(self) -> int:
        """Trust lost when this action is exposed: 20 + floor(war_risk / 2)."""
        return TRUST_DAMAGE_BASE + int(self.war_risk // 2)
