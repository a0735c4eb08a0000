"""Weapons: enhancement curves, evolution, skills, abilities and awakening."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, TypeVar

from .materials import MaterialCatalog, MaterialRow
from .numericalfunc import FunctionResolver, NumericalFunc
from .tables import ParameterMapRow, TableSource, build_exp_thresholds, load_parameter_map

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _from_record(cls: type[_T], record: Mapping[str, Any]) -> _T:
    return cls(**{f.name: int(record.get(_pascal(f.name), 0)) for f in fields(cls)})


@dataclass(frozen=True)
class WeaponMasterRow:
    weapon_id: int
    rarity_type: int
    weapon_type: int
    weapon_specific_enhance_id: int
    weapon_skill_group_id: int
    weapon_ability_group_id: int
    weapon_story_release_condition_group_id: int
    weapon_evolution_material_group_id: int


@dataclass(frozen=True)
class WeaponStoryReleaseConditionRow:
    weapon_story_release_condition_group_id: int
    story_index: int
    weapon_story_release_condition_type: int
    condition_value: int
    weapon_story_release_condition_operation_group_id: int


@dataclass(frozen=True)
class WeaponSkillGroupRow:
    weapon_skill_group_id: int
    slot_number: int
    skill_id: int
    weapon_skill_enhancement_material_id: int


@dataclass(frozen=True)
class WeaponAbilityGroupRow:
    weapon_ability_group_id: int
    slot_number: int
    ability_id: int
    weapon_ability_enhancement_material_id: int


@dataclass(frozen=True)
class WeaponEvolutionGroupRow:
    weapon_evolution_group_id: int
    evolution_order: int
    weapon_id: int


@dataclass(frozen=True)
class WeaponEvolutionMaterialRow:
    weapon_evolution_material_group_id: int
    material_id: int
    count: int
    sort_order: int


@dataclass(frozen=True)
class WeaponSkillEnhanceMaterialRow:
    weapon_skill_enhancement_material_id: int
    skill_level: int
    material_id: int
    count: int
    sort_order: int


@dataclass(frozen=True)
class WeaponAbilityEnhanceMaterialRow:
    weapon_ability_enhancement_material_id: int
    ability_level: int
    material_id: int
    count: int
    sort_order: int


@dataclass(frozen=True)
class WeaponAwakenRow:
    weapon_id: int
    weapon_awaken_effect_group_id: int
    weapon_awaken_material_group_id: int
    consume_gold: int
    level_limit_up: int


@dataclass(frozen=True)
class WeaponAwakenMaterialGroupRow:
    weapon_awaken_material_group_id: int
    material_id: int
    count: int
    sort_order: int


@dataclass
class WeaponCatalog:
    weapons: dict[int, WeaponMasterRow] = field(default_factory=dict)
    materials: dict[int, MaterialRow] = field(default_factory=dict)
    exp_by_enhance_id: dict[int, list[int]] = field(default_factory=dict)
    gold_cost_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    max_level_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    sell_price_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    # Weapon id to consumable item id to count.
    medals_by_weapon_id: dict[int, dict[int, int]] = field(default_factory=dict)
    evolution_next_weapon_id: dict[int, int] = field(default_factory=dict)
    # Weapon id to its 0-based position in its evolution chain.
    evolution_order: dict[int, int] = field(default_factory=dict)
    # Evolution material group id to materials.
    evolution_materials: dict[int, list[WeaponEvolutionMaterialRow]] = field(default_factory=dict)
    evolution_cost_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    # Ability group id to slot numbers.
    ability_slots: dict[int, list[int]] = field(default_factory=dict)
    skill_groups_by_group_id: dict[int, list[WeaponSkillGroupRow]] = field(default_factory=dict)
    # Keyed by (enhancement material id, skill level).
    skill_enhance_mats: dict[tuple[int, int], list[WeaponSkillEnhanceMaterialRow]] = field(default_factory=dict)
    skill_max_level_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    skill_cost_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    ability_groups_by_group_id: dict[int, list[WeaponAbilityGroupRow]] = field(default_factory=dict)
    # Keyed by (enhancement material id, ability level).
    ability_enhance_mats: dict[tuple[int, int], list[WeaponAbilityEnhanceMaterialRow]] = field(
        default_factory=dict
    )
    ability_max_level_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    ability_cost_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    enhance_cost_by_weapon_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    limit_break_cost_by_weapon_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    limit_break_cost_by_material_by_enhance_id: dict[int, NumericalFunc] = field(default_factory=dict)
    base_exp_by_enhance_id: dict[int, int] = field(default_factory=dict)
    release_conditions_by_group_id: dict[int, list[WeaponStoryReleaseConditionRow]] = field(default_factory=dict)

    awaken_by_weapon_id: dict[int, WeaponAwakenRow] = field(default_factory=dict)
    awaken_materials_by_group_id: dict[int, list[WeaponAwakenMaterialGroupRow]] = field(default_factory=dict)


# Catalog attribute and the record key naming the function that fills it.
_CURVES = (
    ("gold_cost_by_enhance_id", "EnhancementCostByMaterialNumericalFunctionId"),
    ("max_level_by_enhance_id", "MaxLevelNumericalFunctionId"),
    ("sell_price_by_enhance_id", "SellPriceNumericalFunctionId"),
    ("evolution_cost_by_enhance_id", "EvolutionCostNumericalFunctionId"),
    ("skill_max_level_by_enhance_id", "MaxSkillLevelNumericalFunctionId"),
    ("skill_cost_by_enhance_id", "SkillEnhancementCostNumericalFunctionId"),
    ("ability_max_level_by_enhance_id", "MaxAbilityLevelNumericalFunctionId"),
    ("ability_cost_by_enhance_id", "AbilityEnhancementCostNumericalFunctionId"),
    ("enhance_cost_by_weapon_by_enhance_id", "EnhancementCostByWeaponNumericalFunctionId"),
    ("limit_break_cost_by_weapon_by_enhance_id", "LimitBreakCostByWeaponNumericalFunctionId"),
    ("limit_break_cost_by_material_by_enhance_id", "LimitBreakCostByMaterialNumericalFunctionId"),
)


def _register_curves(
    catalog: WeaponCatalog,
    enhance_id: int,
    record: Mapping[str, Any],
    param_map: list[ParameterMapRow],
    functions: FunctionResolver,
    overwrite: bool,
) -> None:
    """Fill every per-enhance-id table from one enhancement record.

    Without ``overwrite`` an entry already present for ``enhance_id`` is kept.
    """
    if overwrite or enhance_id not in catalog.exp_by_enhance_id:
        catalog.exp_by_enhance_id[enhance_id] = build_exp_thresholds(
            param_map, int(record.get("RequiredExpForLevelUpNumericalParameterMapId", 0))
        )
    for attribute, key in _CURVES:
        target: dict[int, NumericalFunc] = getattr(catalog, attribute)
        if not overwrite and enhance_id in target:
            continue
        func = functions.resolve(int(record.get(key, 0)))
        if func is not None:
            target[enhance_id] = func
    if overwrite or enhance_id not in catalog.base_exp_by_enhance_id:
        catalog.base_exp_by_enhance_id[enhance_id] = int(record.get("BaseEnhancementObtainedExp", 0))


def load_weapon_catalog(
    source: TableSource,
    materials: MaterialCatalog,
    functions: FunctionResolver,
    enhancement_material_type: int,
) -> WeaponCatalog:
    """Load weapon tables; materials of ``enhancement_material_type`` feed enhancement.

    Weapons without a specific enhancement id fall back to the curves of their
    rarity, registered under the synthetic enhancement id ``-rarity``.
    """
    weapons = source.read("EntityMWeaponTable.json")
    enhance_rows = source.read("EntityMWeaponSpecificEnhanceTable.json")
    rarity_rows = source.read("EntityMWeaponRarityTable.json")
    param_map = load_parameter_map(source)
    exchange_rows = source.read("EntityMWeaponConsumeExchangeConsumableItemGroupTable.json")
    evo_group_rows = source.read("EntityMWeaponEvolutionGroupTable.json")
    evo_mat_rows = source.read("EntityMWeaponEvolutionMaterialGroupTable.json")
    ability_group_rows = source.read("EntityMWeaponAbilityGroupTable.json")
    skill_group_rows = source.read("EntityMWeaponSkillGroupTable.json")
    skill_mat_rows = source.read("EntityMWeaponSkillEnhancementMaterialTable.json")
    ability_mat_rows = source.read("EntityMWeaponAbilityEnhancementMaterialTable.json")
    release_rows = source.read("EntityMWeaponStoryReleaseConditionGroupTable.json")
    awaken_rows = source.read("EntityMWeaponAwakenTable.json")
    awaken_mat_rows = source.read("EntityMWeaponAwakenMaterialGroupTable.json")

    catalog = WeaponCatalog(materials=materials.by_type.get(enhancement_material_type, {}))

    for record in weapons:
        weapon = _from_record(WeaponMasterRow, record)
        catalog.weapons[weapon.weapon_id] = weapon

    for record in enhance_rows:
        _register_curves(
            catalog, int(record.get("WeaponSpecificEnhanceId", 0)), record, param_map, functions, overwrite=False
        )

    for record in exchange_rows:
        catalog.medals_by_weapon_id.setdefault(int(record.get("WeaponId", 0)), {})[
            int(record.get("ConsumableItemId", 0))
        ] = int(record.get("Count", 0))

    chains: dict[int, list[WeaponEvolutionGroupRow]] = {}
    for record in evo_group_rows:
        row = _from_record(WeaponEvolutionGroupRow, record)
        chains.setdefault(row.weapon_evolution_group_id, []).append(row)
    for chain in chains.values():
        chain.sort(key=lambda r: r.evolution_order)
        for position, row in enumerate(chain):
            catalog.evolution_order[row.weapon_id] = position
        for current, following in zip(chain, chain[1:]):
            catalog.evolution_next_weapon_id[current.weapon_id] = following.weapon_id

    for record in evo_mat_rows:
        mat = _from_record(WeaponEvolutionMaterialRow, record)
        catalog.evolution_materials.setdefault(mat.weapon_evolution_material_group_id, []).append(mat)

    for record in ability_group_rows:
        ability = _from_record(WeaponAbilityGroupRow, record)
        catalog.ability_slots.setdefault(ability.weapon_ability_group_id, []).append(ability.slot_number)
        catalog.ability_groups_by_group_id.setdefault(ability.weapon_ability_group_id, []).append(ability)

    for record in skill_group_rows:
        skill = _from_record(WeaponSkillGroupRow, record)
        catalog.skill_groups_by_group_id.setdefault(skill.weapon_skill_group_id, []).append(skill)

    for record in skill_mat_rows:
        skill_mat = _from_record(WeaponSkillEnhanceMaterialRow, record)
        catalog.skill_enhance_mats.setdefault(
            (skill_mat.weapon_skill_enhancement_material_id, skill_mat.skill_level), []
        ).append(skill_mat)

    for record in ability_mat_rows:
        ability_mat = _from_record(WeaponAbilityEnhanceMaterialRow, record)
        catalog.ability_enhance_mats.setdefault(
            (ability_mat.weapon_ability_enhancement_material_id, ability_mat.ability_level), []
        ).append(ability_mat)

    for record in release_rows:
        condition = _from_record(WeaponStoryReleaseConditionRow, record)
        catalog.release_conditions_by_group_id.setdefault(
            condition.weapon_story_release_condition_group_id, []
        ).append(condition)

    for record in awaken_rows:
        awaken = _from_record(WeaponAwakenRow, record)
        catalog.awaken_by_weapon_id[awaken.weapon_id] = awaken
    for record in awaken_mat_rows:
        awaken_mat = _from_record(WeaponAwakenMaterialGroupRow, record)
        catalog.awaken_materials_by_group_id.setdefault(awaken_mat.weapon_awaken_material_group_id, []).append(
            awaken_mat
        )

    rarity_by_type = {int(record.get("RarityType", 0)): record for record in rarity_rows}
    registered: set[int] = set()
    fallback_count = 0
    for weapon_id, weapon in list(catalog.weapons.items()):
        if weapon.weapon_specific_enhance_id != 0:
            continue
        synthetic_id = -weapon.rarity_type
        if weapon.rarity_type not in registered:
            record = rarity_by_type.get(weapon.rarity_type)
            if record is None:
                continue
            _register_curves(catalog, synthetic_id, record, param_map, functions, overwrite=True)
            registered.add(weapon.rarity_type)
        catalog.weapons[weapon_id] = replace(weapon, weapon_specific_enhance_id=synthetic_id)
        fallback_count += 1
    logger.info("weapon catalog rarity fallback: assigned synthetic enhance ids to %d weapons", fallback_count)

    return catalog