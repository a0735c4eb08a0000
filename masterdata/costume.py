"""Costumes: levelling curves, awakening and active skills."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, TypeVar

from .materials import MaterialCatalog, MaterialRow
from .numericalfunc import FunctionResolver, NumericalFunc
from .tables import TableSource, build_exp_thresholds, load_parameter_map

_T = TypeVar("_T")


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _from_record(cls: type[_T], record: Mapping[str, Any]) -> _T:
    return cls(**{f.name: int(record.get(_pascal(f.name), 0)) for f in fields(cls)})


@dataclass(frozen=True)
class CostumeMasterRow:
    costume_id: int
    character_id: int
    skillful_weapon_type: int
    rarity_type: int
    costume_limit_break_material_group_id: int
    costume_active_skill_group_id: int


@dataclass(frozen=True)
class CostumeAwakenRow:
    costume_id: int
    costume_awaken_effect_group_id: int
    costume_awaken_step_material_group_id: int
    costume_awaken_price_group_id: int


@dataclass(frozen=True)
class CostumeAwakenEffectRow:
    costume_awaken_effect_group_id: int
    awaken_step: int
    costume_awaken_effect_type: int
    costume_awaken_effect_id: int


@dataclass(frozen=True)
class CostumeAwakenStatusUpRow:
    costume_awaken_status_up_group_id: int
    sort_order: int
    status_kind_type: int
    status_calculation_type: int
    effect_value: int


@dataclass(frozen=True)
class CostumeAwakenItemAcquireRow:
    costume_awaken_item_acquire_id: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class CostumeActiveSkillGroupRow:
    costume_active_skill_group_id: int
    costume_limit_break_count_lower_limit: int
    costume_active_skill_id: int
    costume_active_skill_enhancement_material_id: int


@dataclass(frozen=True)
class CostumeActiveSkillEnhanceMaterialRow:
    costume_active_skill_enhancement_material_id: int
    skill_level: int
    material_id: int
    count: int
    sort_order: int


@dataclass
class CostumeCatalog:
    costumes: dict[int, CostumeMasterRow] = field(default_factory=dict)
    materials: dict[int, MaterialRow] = field(default_factory=dict)
    exp_by_rarity: dict[int, list[int]] = field(default_factory=dict)
    enhance_cost_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)
    max_level_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)
    limit_break_cost_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)

    awaken_by_costume_id: dict[int, CostumeAwakenRow] = field(default_factory=dict)
    awaken_price_by_group: dict[int, int] = field(default_factory=dict)
    awaken_effects_by_group_and_step: dict[int, dict[int, CostumeAwakenEffectRow]] = field(default_factory=dict)
    awaken_status_up_by_group: dict[int, list[CostumeAwakenStatusUpRow]] = field(default_factory=dict)
    awaken_item_acquire_by_id: dict[int, CostumeAwakenItemAcquireRow] = field(default_factory=dict)

    # Sorted by limit break count lower limit, highest first.
    active_skill_groups_by_group_id: dict[int, list[CostumeActiveSkillGroupRow]] = field(default_factory=dict)
    # Keyed by (enhancement material id, skill level).
    active_skill_enhance_mats: dict[tuple[int, int], list[CostumeActiveSkillEnhanceMaterialRow]] = field(
        default_factory=dict
    )
    active_skill_max_level_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)
    active_skill_cost_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)


def _register_function(
    target: dict[int, NumericalFunc], rarity: int, functions: FunctionResolver, function_id: int
) -> None:
    if rarity in target:
        return
    func = functions.resolve(function_id)
    if func is not None:
        target[rarity] = func


def load_costume_catalog(
    source: TableSource,
    materials: MaterialCatalog,
    functions: FunctionResolver,
    enhancement_material_type: int,
) -> CostumeCatalog:
    """Load costume tables; materials of ``enhancement_material_type`` feed enhancement."""
    costumes = source.read("EntityMCostumeTable.json")
    rarities = source.read("EntityMCostumeRarityTable.json")
    param_map = load_parameter_map(source)
    awaken_rows = source.read("EntityMCostumeAwakenTable.json")
    awaken_price_rows = source.read("EntityMCostumeAwakenPriceGroupTable.json")
    awaken_effect_rows = source.read("EntityMCostumeAwakenEffectGroupTable.json")
    awaken_status_up_rows = source.read("EntityMCostumeAwakenStatusUpGroupTable.json")
    awaken_item_rows = source.read("EntityMCostumeAwakenItemAcquireTable.json")
    active_skill_group_rows = source.read("EntityMCostumeActiveSkillGroupTable.json")
    active_skill_mat_rows = source.read("EntityMCostumeActiveSkillEnhancementMaterialTable.json")

    catalog = CostumeCatalog(materials=materials.by_type.get(enhancement_material_type, {}))

    for record in costumes:
        row = _from_record(CostumeMasterRow, record)
        catalog.costumes[row.costume_id] = row

    for record in rarities:
        rarity = int(record.get("RarityType", 0))
        if rarity not in catalog.exp_by_rarity:
            catalog.exp_by_rarity[rarity] = build_exp_thresholds(
                param_map, int(record.get("RequiredExpForLevelUpNumericalParameterMapId", 0))
            )
        for target, key in (
            (catalog.enhance_cost_by_rarity, "EnhancementCostByMaterialNumericalFunctionId"),
            (catalog.max_level_by_rarity, "MaxLevelNumericalFunctionId"),
            (catalog.limit_break_cost_by_rarity, "LimitBreakCostNumericalFunctionId"),
            (catalog.active_skill_max_level_by_rarity, "ActiveSkillMaxLevelNumericalFunctionId"),
            (catalog.active_skill_cost_by_rarity, "ActiveSkillEnhancementCostNumericalFunctionId"),
        ):
            _register_function(target, rarity, functions, int(record.get(key, 0)))

    for record in awaken_rows:
        awaken = _from_record(CostumeAwakenRow, record)
        catalog.awaken_by_costume_id[awaken.costume_id] = awaken
    for record in awaken_price_rows:
        catalog.awaken_price_by_group[int(record.get("CostumeAwakenPriceGroupId", 0))] = int(record.get("Gold", 0))
    for record in awaken_effect_rows:
        effect = _from_record(CostumeAwakenEffectRow, record)
        catalog.awaken_effects_by_group_and_step.setdefault(effect.costume_awaken_effect_group_id, {})[
            effect.awaken_step
        ] = effect
    for record in awaken_status_up_rows:
        status_up = _from_record(CostumeAwakenStatusUpRow, record)
        catalog.awaken_status_up_by_group.setdefault(status_up.costume_awaken_status_up_group_id, []).append(
            status_up
        )
    for record in awaken_item_rows:
        item = _from_record(CostumeAwakenItemAcquireRow, record)
        catalog.awaken_item_acquire_by_id[item.costume_awaken_item_acquire_id] = item

    for record in active_skill_group_rows:
        group = _from_record(CostumeActiveSkillGroupRow, record)
        catalog.active_skill_groups_by_group_id.setdefault(group.costume_active_skill_group_id, []).append(group)
    for groups in catalog.active_skill_groups_by_group_id.values():
        groups.sort(key=lambda g: g.costume_limit_break_count_lower_limit, reverse=True)

    for record in active_skill_mat_rows:
        mat = _from_record(CostumeActiveSkillEnhanceMaterialRow, record)
        key = (mat.costume_active_skill_enhancement_material_id, mat.skill_level)
        catalog.active_skill_enhance_mats.setdefault(key, []).append(mat)

    return catalog