"""The material catalog."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tables import TableSource


@dataclass(frozen=True)
class MaterialRow:
    material_id: int
    material_type: int
    weapon_type: int
    effect_value: int
    sell_price: int


@dataclass
class MaterialCatalog:
    by_id: dict[int, MaterialRow] = field(default_factory=dict)
    by_type: dict[int, dict[int, MaterialRow]] = field(default_factory=dict)


def load_material_catalog(source: TableSource) -> MaterialCatalog:
    """Load all materials, indexed by id and grouped by material type."""
    catalog = MaterialCatalog()
    for record in source.read("EntityMMaterialTable.json"):
        row = MaterialRow(
            material_id=int(record.get("MaterialId", 0)),
            material_type=int(record.get("MaterialType", 0)),
            weapon_type=int(record.get("WeaponType", 0)),
            effect_value=int(record.get("EffectValue", 0)),
            sell_price=int(record.get("SellPrice", 0)),
        )
        catalog.by_id[row.material_id] = row
        catalog.by_type.setdefault(row.material_type, {})[row.material_id] = row
    return catalog