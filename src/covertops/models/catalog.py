"""The covert action catalog.

The catalog is a static, versioned table of ActionDefinitions. It has no
behavior beyond lookup; resolution lives in covertops.engine.

DEFAULT_CATALOG holds the 62 standard actions across eight categories.
Custom catalogs (tests, balance experiments, JSON overrides loaded through
covertops.storage.file_repo) are built the same way.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from covertops.errors import CatalogError, UnknownActionKindError
from covertops.models.actions import (
    ActionCategory,
    ActionDefinition,
    ActionKind,
    EffectCode,
    StatKey,
)

DEFAULT_CATALOG_VERSION = "1.0"


class Catalog:
    """Immutable, ordered collection of action definitions.

    Iteration follows definition order, which is the deterministic tie-break
    order for ranking suggested actions.
    """

    def __init__(self, definitions: Iterable[ActionDefinition], version: str = DEFAULT_CATALOG_VERSION):
        self.version = version
        self._definitions: dict[ActionKind, ActionDefinition] = {}
        for definition in definitions:
            if definition.kind in self._definitions:
                raise CatalogError(f"Duplicate catalog entry: {definition.kind.value}")
            self._definitions[definition.kind] = definition
        self._order = {kind: index for index, kind in enumerate(self._definitions)}

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ActionDefinition]:
        return iter(self._definitions.values())

    def __contains__(self, kind: object) -> bool:
        try:
            return self.coerce_kind(kind) in self._definitions
        except UnknownActionKindError:
            return False

    def coerce_kind(self, kind: ActionKind | str) -> ActionKind:
        """Turn a raw string into an ActionKind.

        Raises:
            UnknownActionKindError: If the string names no known action
        """
        if isinstance(kind, ActionKind):
            return kind
        try:
            return ActionKind(kind)
        except ValueError:
            raise UnknownActionKindError(kind, self.version) from None

    def get(self, kind: ActionKind | str) -> ActionDefinition:
        """Look up an action definition.

        Raises:
            UnknownActionKindError: If the kind is not in this catalog
        """
        action_kind = self.coerce_kind(kind)
        definition = self._definitions.get(action_kind)
        if definition is None:
            raise UnknownActionKindError(action_kind.value, self.version)
        return definition

    def kinds(self) -> list[ActionKind]:
        return list(self._definitions)

    def in_category(self, category: ActionCategory) -> list[ActionDefinition]:
        """All definitions in a category, in definition order."""
        return [d for d in self._definitions.values() if d.category == category]

    def order_index(self, kind: ActionKind) -> int:
        """Position of a kind in definition order (unknown kinds sort last)."""
        return self._order.get(kind, len(self._order))

    def effect_codes(self) -> set[EffectCode]:
        return {d.special_effect for d in self._definitions.values() if d.special_effect is not None}


def _define(
    kind: ActionKind,
    category: ActionCategory,
    difficulty: float,
    detect: float,
    war_risk: float,
    requires_capability: bool,
    effects: dict[StatKey, float],
    special: EffectCode | None,
    description: str,
) -> ActionDefinition:
    return ActionDefinition(
        kind=kind,
        category=category,
        base_difficulty=difficulty,
        base_detect_chance=detect,
        war_risk=war_risk,
        requires_capability=requires_capability,
        effect_vector=effects,
        special_effect=special,
        description=description,
    )


K = ActionKind
C = ActionCategory
S = StatKey
E = EffectCode

# =============================================================================
# Standard catalog
# =============================================================================
# Columns: kind, category, difficulty, detect, war risk, needs agent,
# effect vector, special effect, description

_STANDARD_DEFINITIONS = [
    # Economic
    _define(K.POISON_CROPS, C.ECONOMIC, 50, 30, 25, False,
            {S.FOOD: -25, S.HAPPINESS: -10}, E.CROP_DISEASE,
            "Introduce crop disease or salt their fields to ruin harvests"),
    _define(K.CONTAMINATE_WATER, C.ECONOMIC, 55, 40, 40, False,
            {S.HAPPINESS: -20, S.POPULATION: -5}, E.DISEASE_OUTBREAK,
            "Poison wells and water sources causing sickness"),
    _define(K.COUNTERFEIT_CURRENCY, C.ECONOMIC, 65, 35, 20, True,
            {S.WEALTH: -20, S.HAPPINESS: -10}, E.INFLATION,
            "Flood their markets with fake coins causing inflation"),
    _define(K.BURN_GRANARIES, C.ECONOMIC, 45, 50, 35, False,
            {S.FOOD: -30, S.HAPPINESS: -15}, None,
            "Set fire to food storage facilities"),
    _define(K.SABOTAGE_MINES, C.ECONOMIC, 55, 40, 30, False,
            {S.WEALTH: -15, S.POPULATION: -3}, E.MINE_COLLAPSE,
            "Collapse or flood mining operations"),
    _define(K.BURN_MARKET, C.ECONOMIC, 50, 45, 30, False,
            {S.WEALTH: -20, S.HAPPINESS: -10}, None,
            "Burn down marketplaces and trade infrastructure"),
    _define(K.INTRODUCE_PESTS, C.ECONOMIC, 40, 20, 15, False,
            {S.FOOD: -20}, E.PEST_INFESTATION,
            "Release locusts, rats, or other pests to destroy crops"),
    _define(K.BRIBE_MERCHANTS, C.ECONOMIC, 45, 25, 10, True,
            {S.WEALTH: -10, S.HAPPINESS: -15}, None,
            "Pay merchants to overcharge and exploit their people"),
    _define(K.STEAL_TRADE_SECRETS, C.ECONOMIC, 60, 35, 25, True,
            {S.TECHNOLOGY: -5}, E.TECH_STOLEN,
            "Copy their production methods and trade knowledge"),
    _define(K.DISRUPT_CARAVANS, C.ECONOMIC, 35, 40, 20, False,
            {S.WEALTH: -15}, None,
            "Attack or misdirect trade caravans"),
    # Military
    _define(K.POISON_ARMY_SUPPLIES, C.MILITARY, 60, 45, 50, True,
            {S.MILITARY: -20}, E.ARMY_SICKNESS,
            "Contaminate military food and water supplies"),
    _define(K.SABOTAGE_WEAPONS, C.MILITARY, 55, 35, 40, True,
            {S.MILITARY: -15}, E.WEAPON_QUALITY_DROP,
            "Weaken swords, dull blades, damage bows"),
    _define(K.STEAL_BATTLE_PLANS, C.MILITARY, 70, 40, 35, True,
            {}, E.BATTLE_PLANS_STOLEN,
            "Copy their military strategies and troop positions"),
    _define(K.ASSASSINATE_GENERAL, C.MILITARY, 75, 55, 60, True,
            {S.MILITARY: -25}, E.GENERAL_KILLED,
            "Kill their top military commander"),
    _define(K.INCITE_DESERTION, C.MILITARY, 50, 30, 25, True,
            {S.MILITARY: -15}, E.MASS_DESERTION,
            "Spread fear and encourage soldiers to flee"),
    _define(K.SPREAD_CAMP_DISEASE, C.MILITARY, 55, 35, 45, True,
            {S.MILITARY: -30, S.POPULATION: -5}, E.ARMY_PLAGUE,
            "Introduce plague into military camps"),
    _define(K.SABOTAGE_FORTIFICATIONS, C.MILITARY, 60, 40, 35, True,
            {S.MILITARY: -10}, E.WALLS_WEAKENED,
            "Secretly weaken walls and defenses"),
    _define(K.BURN_ARMORY, C.MILITARY, 50, 50, 40, False,
            {S.MILITARY: -20}, None,
            "Destroy weapon and armor storage"),
    _define(K.DISABLE_SIEGE_EQUIPMENT, C.MILITARY, 55, 45, 35, True,
            {S.MILITARY: -10}, E.SIEGE_DISABLED,
            "Break catapults, battering rams, siege towers"),
    _define(K.BRIBE_SOLDIERS_DEFECT, C.MILITARY, 60, 40, 45, True,
            {S.MILITARY: -15}, E.SOLDIERS_DEFECT,
            "Pay soldiers to switch sides"),
    # Political
    _define(K.ASSASSINATE_HEIR, C.POLITICAL, 80, 60, 70, True,
            {S.HAPPINESS: -20, S.INFLUENCE: -10}, E.HEIR_KILLED,
            "Kill the next in line for the throne"),
    _define(K.SPREAD_PROPAGANDA, C.POLITICAL, 40, 25, 15, False,
            {S.HAPPINESS: -15, S.INFLUENCE: -10}, E.LEGITIMACY_DROP,
            "Spread lies and rumors about their ruler"),
    _define(K.INCITE_REBELLION, C.POLITICAL, 65, 45, 50, True,
            {S.HAPPINESS: -25, S.MILITARY: -10}, E.REBELLION_STARTED,
            "Arm and fund rebel groups"),
    _define(K.BRIBE_ADVISORS, C.POLITICAL, 55, 35, 30, True,
            {S.WEALTH: -10}, E.BAD_DECISIONS,
            "Corrupt their council to give bad advice"),
    _define(K.FORGE_DOCUMENTS, C.POLITICAL, 50, 40, 35, True,
            {S.INFLUENCE: -15}, E.DIPLOMATIC_CHAOS,
            "Create fake treaties, orders, or letters"),
    _define(K.FRAME_NOBLE_TREASON, C.POLITICAL, 60, 45, 40, True,
            {S.HAPPINESS: -10}, E.INTERNAL_PURGE,
            "Plant evidence to frame a noble for treason"),
    _define(K.SUPPORT_RIVAL_FACTION, C.POLITICAL, 50, 35, 30, True,
            {S.HAPPINESS: -15}, E.FACTION_STRENGTHENED,
            "Fund and arm opposition political groups"),
    _define(K.SPREAD_RULER_RUMORS, C.POLITICAL, 35, 20, 10, False,
            {S.HAPPINESS: -10, S.INFLUENCE: -15}, E.RULER_DISCREDITED,
            "Spread rumors of ruler's madness or illegitimacy"),
    _define(K.CREATE_SUCCESSION_CRISIS, C.POLITICAL, 75, 50, 55, True,
            {S.HAPPINESS: -30, S.INFLUENCE: -20}, E.SUCCESSION_CRISIS,
            "Kill or discredit all viable heirs"),
    _define(K.BLACKMAIL_OFFICIALS, C.POLITICAL, 55, 30, 25, True,
            {}, E.OFFICIALS_CONTROLLED,
            "Gather compromising information on officials"),
    # Religious
    _define(K.DESECRATE_TEMPLE, C.RELIGIOUS, 50, 60, 50, False,
            {S.HAPPINESS: -25, S.INFLUENCE: -15}, E.TEMPLE_DEFILED,
            "Defile and damage holy sites"),
    _define(K.ASSASSINATE_PRIESTS, C.RELIGIOUS, 60, 50, 45, True,
            {S.HAPPINESS: -20}, E.PRIESTS_KILLED,
            "Kill religious leaders and holy men"),
    _define(K.SPREAD_HERESY, C.RELIGIOUS, 45, 25, 30, True,
            {S.HAPPINESS: -15}, E.RELIGIOUS_SCHISM,
            "Introduce false religious teachings"),
    _define(K.STEAL_HOLY_RELICS, C.RELIGIOUS, 65, 55, 55, True,
            {S.HAPPINESS: -20, S.INFLUENCE: -10}, E.RELICS_STOLEN,
            "Take sacred objects from temples"),
    _define(K.CORRUPT_RELIGIOUS_TEXTS, C.RELIGIOUS, 55, 20, 25, True,
            {S.KNOWLEDGE: -5}, E.TEXTS_CORRUPTED,
            "Subtly alter their holy scriptures"),
    _define(K.SUPPORT_RIVAL_CULT, C.RELIGIOUS, 50, 35, 35, True,
            {S.HAPPINESS: -15}, E.CULT_FORMED,
            "Fund a competing religious movement"),
    _define(K.POISON_HOLY_WATER, C.RELIGIOUS, 45, 40, 45, False,
            {S.HAPPINESS: -15, S.POPULATION: -3}, E.HOLY_WATER_POISONED,
            "Contaminate sacred water supplies"),
    _define(K.FAKE_DIVINE_OMENS, C.RELIGIOUS, 40, 30, 20, False,
            {S.HAPPINESS: -20}, E.FALSE_OMENS,
            "Create fake bad omens and prophecies"),
    # Infrastructure
    _define(K.DESTROY_BRIDGES, C.INFRASTRUCTURE, 45, 50, 30, False,
            {S.WEALTH: -15}, E.BRIDGES_DESTROYED,
            "Destroy bridges to cut off movement and trade"),
    _define(K.BLOCK_MOUNTAIN_PASSES, C.INFRASTRUCTURE, 50, 35, 25, False,
            {S.WEALTH: -20}, E.PASSES_BLOCKED,
            "Cause rockslides to block trade routes"),
    _define(K.BURN_HARBOR, C.INFRASTRUCTURE, 55, 55, 40, False,
            {S.WEALTH: -25, S.MILITARY: -10}, E.HARBOR_DESTROYED,
            "Burn docks, ships, and port facilities"),
    _define(K.COLLAPSE_MINES, C.INFRASTRUCTURE, 50, 40, 35, False,
            {S.WEALTH: -15, S.POPULATION: -5}, E.MINES_COLLAPSED,
            "Cause cave-ins in mining operations"),
    _define(K.DESTROY_AQUEDUCTS, C.INFRASTRUCTURE, 55, 45, 40, False,
            {S.HAPPINESS: -20, S.FOOD: -10}, E.WATER_CRISIS,
            "Destroy water supply infrastructure"),
    _define(K.SET_CITY_FIRES, C.INFRASTRUCTURE, 40, 45, 45, False,
            {S.HAPPINESS: -25, S.WEALTH: -20, S.POPULATION: -5}, E.CITY_BURNING,
            "Start fires in populated areas"),
    _define(K.DAM_RIVERS, C.INFRASTRUCTURE, 60, 50, 35, False,
            {S.FOOD: -25, S.HAPPINESS: -15}, E.RIVER_DIVERTED,
            "Block rivers to cause flood or drought downstream"),
    _define(K.DESTROY_ROADS, C.INFRASTRUCTURE, 40, 40, 25, False,
            {S.WEALTH: -10}, E.ROADS_DESTROYED,
            "Dig trenches, destroy paving, remove bridges"),
    # Demographic
    _define(K.SPREAD_PLAGUE, C.DEMOGRAPHIC, 55, 35, 60, False,
            {S.POPULATION: -15, S.HAPPINESS: -30}, E.PLAGUE_STARTED,
            "Intentionally introduce deadly disease"),
    _define(K.POISON_FOOD_SUPPLY, C.DEMOGRAPHIC, 50, 45, 50, False,
            {S.POPULATION: -10, S.HAPPINESS: -20, S.FOOD: -20}, E.MASS_POISONING,
            "Contaminate stored food with poison"),
    _define(K.KIDNAP_CRAFTSMEN, C.DEMOGRAPHIC, 55, 50, 35, False,
            {S.TECHNOLOGY: -5}, E.CRAFTSMEN_KIDNAPPED,
            "Abduct skilled workers for your own use"),
    _define(K.ENCOURAGE_EMIGRATION, C.DEMOGRAPHIC, 45, 25, 15, True,
            {S.POPULATION: -5, S.HAPPINESS: -10}, E.POPULATION_DRAIN,
            "Lure their population to leave for your lands"),
    _define(K.ASSASSINATE_HEALERS, C.DEMOGRAPHIC, 55, 45, 40, True,
            {S.HAPPINESS: -15}, E.HEALERS_KILLED,
            "Kill doctors and healers during plague"),
    # Psychological
    _define(K.SPREAD_TERROR, C.PSYCHOLOGICAL, 45, 40, 35, False,
            {S.HAPPINESS: -25}, E.TERROR_CAMPAIGN,
            "Random murders and night attacks to terrorize"),
    _define(K.DISPLAY_ENEMY_HEADS, C.PSYCHOLOGICAL, 35, 80, 50, False,
            {S.HAPPINESS: -20, S.MILITARY: -5}, E.INTIMIDATION,
            "Gruesome display of killed enemies for intimidation"),
    _define(K.CREATE_BAD_OMENS, C.PSYCHOLOGICAL, 40, 25, 15, False,
            {S.HAPPINESS: -15}, E.SUPERSTITION_FEAR,
            "Stage fake supernatural events and bad signs"),
    _define(K.NIGHT_RAIDS, C.PSYCHOLOGICAL, 45, 50, 40, False,
            {S.HAPPINESS: -20, S.POPULATION: -2}, E.SLEEP_DEPRIVATION,
            "Attack civilians at night to cause sleep deprivation"),
    _define(K.DEMORALIZE_WITH_LOSSES, C.PSYCHOLOGICAL, 35, 20, 10, False,
            {S.HAPPINESS: -10, S.MILITARY: -5}, E.DEFEATISM,
            "Exaggerate enemy casualties to spread defeatism"),
    # Social
    _define(K.INCITE_CLASS_WARFARE, C.SOCIAL, 50, 35, 30, True,
            {S.HAPPINESS: -20, S.WEALTH: -10}, E.CLASS_CONFLICT,
            "Turn the poor against the rich"),
    _define(K.SPREAD_ETHNIC_HATRED, C.SOCIAL, 45, 30, 25, True,
            {S.HAPPINESS: -25}, E.ETHNIC_TENSION,
            "Inflame tensions between ethnic groups"),
    _define(K.CORRUPT_YOUTH, C.SOCIAL, 40, 20, 10, True,
            {S.HAPPINESS: -10, S.TECHNOLOGY: -5}, E.YOUTH_CORRUPTED,
            "Spread vice and laziness among young people"),
    _define(K.UNDERMINE_MARRIAGES, C.SOCIAL, 50, 35, 25, True,
            {S.INFLUENCE: -15}, E.MARRIAGES_BROKEN,
            "Break political marriages and alliances"),
    _define(K.SPREAD_ADDICTION, C.SOCIAL, 45, 25, 15, True,
            {S.HAPPINESS: -15, S.WEALTH: -10}, E.ADDICTION_EPIDEMIC,
            "Introduce addictive substances to weaken population"),
    _define(K.DESTROY_CULTURAL_ARTIFACTS, C.SOCIAL, 50, 55, 40, False,
            {S.HAPPINESS: -20, S.INFLUENCE: -20}, E.CULTURE_DESTROYED,
            "Burn art, destroy statues, erase cultural identity"),
]

DEFAULT_CATALOG = Catalog(_STANDARD_DEFINITIONS)
