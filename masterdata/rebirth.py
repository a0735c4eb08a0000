"""Character rebirth steps and their material costs."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tables import TableSource


@dataclass(frozen=True)
class CharacterRebirthStepRow:
    character_rebirth_step_group_id: int
    before_rebirth_count: int
    costume_level_limit_up: int
    character_rebirth_material_group_id: int


@dataclass(frozen=True)
class CharacterRebirthMaterialRow:
    character_rebirth_material_group_id: int
    material_id: int
    count: int


@dataclass
class CharacterRebirthCatalog:
    step_group_by_character_id: dict[int, int] = field(default_factory=dict)
    # Keyed by (step group id, rebirth count before the step).
    step_by_group_and_count: dict[tuple[int, int], CharacterRebirthStepRow] = field(default_factory=dict)
    materials_by_group_id: dict[int, list[CharacterRebirthMaterialRow]] = field(default_factory=dict)


def load_character_rebirth_catalog(source: TableSource) -> CharacterRebirthCatalog:
    rebirths = source.read("EntityMCharacterRebirthTable.json")
    steps = source.read("EntityMCharacterRebirthStepGroupTable.json")
    materials = source.read("EntityMCharacterRebirthMaterialGroupTable.json")

    catalog = CharacterRebirthCatalog()
    for record in rebirths:
        catalog.step_group_by_character_id[int(record.get("CharacterId", 0))] = int(
            record.get("CharacterRebirthStepGroupId", 0)
        )
    for record in steps:
        step = CharacterRebirthStepRow(
            character_rebirth_step_group_id=int(record.get("CharacterRebirthStepGroupId", 0)),
            before_rebirth_count=int(record.get("BeforeRebirthCount", 0)),
            costume_level_limit_up=int(record.get("CostumeLevelLimitUp", 0)),
            character_rebirth_material_group_id=int(record.get("CharacterRebirthMaterialGroupId", 0)),
        )
        catalog.step_by_group_and_count[
            (step.character_rebirth_step_group_id, step.before_rebirth_count)
        ] = step
    for record in materials:
        material = CharacterRebirthMaterialRow(
            character_rebirth_material_group_id=int(record.get("CharacterRebirthMaterialGroupId", 0)),
            material_id=int(record.get("MaterialId", 0)),
            count=int(record.get("Count", 0)),
        )
        catalog.materials_by_group_id.setdefault(material.character_rebirth_material_group_id, []).append(material)
    return catalog