"""Companions and their enhancement costs."""

from __future__ import annotations

from dataclasses import dataclass, field

from .numericalfunc import FunctionResolver, NumericalFunc
from .tables import TableSource


@dataclass(frozen=True)
class CompanionRow:
    companion_id: int
    companion_category_type: int


@dataclass(frozen=True)
class CompanionMaterialCost:
    material_id: int
    count: int


@dataclass
class CompanionCatalog:
    companion_by_id: dict[int, CompanionRow] = field(default_factory=dict)
    gold_cost_by_category: dict[int, NumericalFunc] = field(default_factory=dict)
    # Keyed by (category type, level).
    materials_by_key: dict[tuple[int, int], CompanionMaterialCost] = field(default_factory=dict)


def load_companion_catalog(source: TableSource, functions: FunctionResolver) -> CompanionCatalog:
    companions = source.read("EntityMCompanionTable.json")
    categories = source.read("EntityMCompanionCategoryTable.json")
    materials = source.read("EntityMCompanionEnhancementMaterialTable.json")

    catalog = CompanionCatalog()
    for record in companions:
        row = CompanionRow(
            companion_id=int(record.get("CompanionId", 0)),
            companion_category_type=int(record.get("CompanionCategoryType", 0)),
        )
        catalog.companion_by_id[row.companion_id] = row

    for record in categories:
        func = functions.resolve(int(record.get("EnhancementCostNumericalFunctionId", 0)))
        if func is not None:
            catalog.gold_cost_by_category[int(record.get("CompanionCategoryType", 0))] = func

    for record in materials:
        key = (int(record.get("CompanionCategoryType", 0)), int(record.get("Level", 0)))
        catalog.materials_by_key[key] = CompanionMaterialCost(
            material_id=int(record.get("MaterialId", 0)),
            count=int(record.get("Count", 0)),
        )
    return catalog