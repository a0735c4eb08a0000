"""Character boards: panels, release costs and effects, abilities."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, TypeVar

from .tables import TableSource

_T = TypeVar("_T")


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _from_record(cls: type[_T], record: Mapping[str, Any]) -> _T:
    return cls(**{f.name: int(record.get(_pascal(f.name), 0)) for f in fields(cls)})


@dataclass(frozen=True)
class CharacterBoardPanelRow:
    character_board_panel_id: int
    character_board_id: int
    character_board_panel_unlock_condition_group_id: int
    character_board_panel_release_possession_group_id: int
    character_board_panel_release_reward_group_id: int
    character_board_panel_release_effect_group_id: int
    sort_order: int
    parent_character_board_panel_id: int
    place_index: int


@dataclass(frozen=True)
class CharacterBoardReleasePossessionRow:
    character_board_panel_release_possession_group_id: int
    possession_type: int
    possession_id: int
    count: int
    sort_order: int


@dataclass(frozen=True)
class CharacterBoardReleaseEffectRow:
    character_board_panel_release_effect_group_id: int
    sort_order: int
    character_board_effect_type: int
    character_board_effect_id: int
    effect_value: int


@dataclass(frozen=True)
class CharacterBoardRow:
    character_board_id: int
    character_board_group_id: int
    character_board_unlock_condition_group_id: int
    release_rank: int


@dataclass(frozen=True)
class CharacterBoardStatusUpRow:
    character_board_status_up_id: int
    character_board_status_up_type: int
    character_board_effect_target_group_id: int


@dataclass(frozen=True)
class CharacterBoardAbilityRow:
    character_board_ability_id: int
    character_board_effect_target_group_id: int
    ability_id: int


@dataclass(frozen=True)
class CharacterBoardEffectTargetRow:
    character_board_effect_target_group_id: int
    group_index: int
    character_board_effect_target_type: int
    target_value: int


@dataclass
class CharacterBoardCatalog:
    panel_by_id: dict[int, CharacterBoardPanelRow] = field(default_factory=dict)
    panels_by_board_id: dict[int, list[CharacterBoardPanelRow]] = field(default_factory=dict)
    release_costs_by_group_id: dict[int, list[CharacterBoardReleasePossessionRow]] = field(default_factory=dict)
    release_effects_by_group_id: dict[int, list[CharacterBoardReleaseEffectRow]] = field(default_factory=dict)
    status_up_by_id: dict[int, CharacterBoardStatusUpRow] = field(default_factory=dict)
    ability_by_id: dict[int, CharacterBoardAbilityRow] = field(default_factory=dict)
    # Keyed by (character id, ability id).
    ability_max_level: dict[tuple[int, int], int] = field(default_factory=dict)
    effect_targets_by_group_id: dict[int, list[CharacterBoardEffectTargetRow]] = field(default_factory=dict)
    board_by_id: dict[int, CharacterBoardRow] = field(default_factory=dict)


def load_character_board_catalog(source: TableSource) -> CharacterBoardCatalog:
    """Load every character board table and index it."""
    panels = source.read("EntityMCharacterBoardPanelTable.json")
    costs = source.read("EntityMCharacterBoardPanelReleasePossessionGroupTable.json")
    effects = source.read("EntityMCharacterBoardPanelReleaseEffectGroupTable.json")
    boards = source.read("EntityMCharacterBoardTable.json")
    status_ups = source.read("EntityMCharacterBoardStatusUpTable.json")
    abilities = source.read("EntityMCharacterBoardAbilityTable.json")
    max_levels = source.read("EntityMCharacterBoardAbilityMaxLevelTable.json")
    targets = source.read("EntityMCharacterBoardEffectTargetGroupTable.json")

    catalog = CharacterBoardCatalog()

    for record in panels:
        panel = _from_record(CharacterBoardPanelRow, record)
        catalog.panel_by_id[panel.character_board_panel_id] = panel
        catalog.panels_by_board_id.setdefault(panel.character_board_id, []).append(panel)

    for record in costs:
        cost = _from_record(CharacterBoardReleasePossessionRow, record)
        catalog.release_costs_by_group_id.setdefault(
            cost.character_board_panel_release_possession_group_id, []
        ).append(cost)

    for record in effects:
        effect = _from_record(CharacterBoardReleaseEffectRow, record)
        catalog.release_effects_by_group_id.setdefault(
            effect.character_board_panel_release_effect_group_id, []
        ).append(effect)

    for record in boards:
        board = _from_record(CharacterBoardRow, record)
        catalog.board_by_id[board.character_board_id] = board

    for record in status_ups:
        status_up = _from_record(CharacterBoardStatusUpRow, record)
        catalog.status_up_by_id[status_up.character_board_status_up_id] = status_up

    for record in abilities:
        ability = _from_record(CharacterBoardAbilityRow, record)
        catalog.ability_by_id[ability.character_board_ability_id] = ability

    for record in max_levels:
        key = (int(record.get("CharacterId", 0)), int(record.get("AbilityId", 0)))
        catalog.ability_max_level[key] = int(record.get("MaxLevel", 0))

    for record in targets:
        target = _from_record(CharacterBoardEffectTargetRow, record)
        catalog.effect_targets_by_group_id.setdefault(target.character_board_effect_target_group_id, []).append(
            target
        )

    return catalog