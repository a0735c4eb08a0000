"""Row types of the quest tables and the orderings applied to them."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping, TypeVar

_T = TypeVar("_T")

_CONVERTERS = {"int": int, "bool": bool, "str": str}
_DEFAULTS: dict[str, Any] = {"int": 0, "bool": False, "str": ""}


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _from_record(cls: type[_T], record: Mapping[str, Any]) -> _T:
    """Build a row from a table record whose keys are the field names in PascalCase."""
    values = {}
    for f in fields(cls):
        kind = f.type if isinstance(f.type, str) else f.type.__name__
        values[f.name] = _CONVERTERS[kind](record.get(_pascal(f.name), _DEFAULTS[kind]))
    return cls(**values)


@dataclass(frozen=True)
class QuestSceneRow:
    quest_scene_id: int
    quest_id: int
    sort_order: int
    quest_scene_type: int
    asset_background_id: int
    event_map_number_upper: int
    event_map_number_lower: int
    is_main_flow_quest_target: bool
    is_battle_only_target: bool
    quest_result_type: int
    is_story_skip_target: bool


@dataclass(frozen=True)
class QuestRow:
    quest_id: int
    name_quest_text_id: int
    picture_book_name_quest_text_id: int
    quest_release_condition_list_id: int
    story_quest_text_id: int
    quest_display_attribute_group_id: int
    recommended_deck_power: int
    quest_first_clear_reward_group_id: int
    quest_pickup_reward_group_id: int
    quest_deck_restriction_group_id: int
    quest_mission_group_id: int
    stamina: int
    user_exp: int
    character_exp: int
    costume_exp: int
    gold: int
    daily_clearable_count: int
    is_run_in_the_background: bool
    is_counted_as_quest: bool
    quest_bonus_id: int
    is_not_show_after_clear: bool
    is_big_win_target: bool
    is_usable_skip_ticket: bool
    quest_replay_flow_reward_group_id: int
    invisible_quest_mission_group_id: int
    field_effect_group_id: int


@dataclass(frozen=True)
class QuestMissionRow:
    quest_mission_id: int
    quest_mission_condition_type: int
    quest_mission_reward_id: int
    quest_mission_condition_value_group_id: int


@dataclass(frozen=True)
class QuestMissionGroupRow:
    quest_mission_group_id: int
    sort_order: int
    quest_mission_id: int


@dataclass(frozen=True)
class QuestMissionRewardRow:
    quest_mission_reward_id: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class MainQuestSequenceRow:
    main_quest_sequence_id: int
    sort_order: int
    quest_id: int


@dataclass(frozen=True)
class MainQuestRouteRow:
    main_quest_route_id: int
    main_quest_season_id: int
    sort_order: int
    character_id: int


@dataclass(frozen=True)
class MainQuestChapterRow:
    main_quest_chapter_id: int
    main_quest_route_id: int
    sort_order: int
    main_quest_sequence_group_id: int
    portal_cage_character_group_id: int
    start_datetime: int
    is_invisible_in_library: bool
    join_library_chapter_id: int


@dataclass(frozen=True)
class QuestFirstClearRewardSwitchRow:
    quest_id: int
    quest_first_clear_reward_group_id: int
    switch_condition_clear_quest_id: int


@dataclass(frozen=True)
class QuestFirstClearRewardGroupRow:
    quest_first_clear_reward_group_id: int
    quest_first_clear_reward_type: int
    sort_order: int
    possession_type: int
    possession_id: int
    count: int
    is_pickup: bool


@dataclass(frozen=True)
class QuestReplayFlowRewardGroupRow:
    quest_replay_flow_reward_group_id: int
    sort_order: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class QuestSceneGrantRow:
    quest_scene_id: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class QuestPickupRewardGroupRow:
    quest_pickup_reward_group_id: int
    sort_order: int
    battle_drop_reward_id: int


@dataclass(frozen=True)
class BattleDropRewardRow:
    battle_drop_reward_id: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class BattleNpcDeckRow:
    battle_npc_id: int
    deck_type: int
    battle_npc_deck_number: int
    battle_npc_deck_character_uuid01: str
    battle_npc_deck_character_uuid02: str
    battle_npc_deck_character_uuid03: str


@dataclass(frozen=True)
class TutorialUnlockConditionRow:
    tutorial_type: int
    tutorial_unlock_condition_type: int
    condition_value: int


def sorted_scenes(rows: Iterable[QuestSceneRow]) -> list[QuestSceneRow]:
    """Order scenes by quest, then sort order, then scene id."""
    return sorted(rows, key=lambda r: (r.quest_id, r.sort_order, r.quest_scene_id))


def sorted_mission_groups(rows: Iterable[QuestMissionGroupRow]) -> list[QuestMissionGroupRow]:
    """Order mission group entries by group, then sort order, then mission id."""
    return sorted(rows, key=lambda r: (r.quest_mission_group_id, r.sort_order, r.quest_mission_id))


def sorted_sequences(rows: Iterable[MainQuestSequenceRow]) -> list[MainQuestSequenceRow]:
    """Order main quest sequence entries by sequence, then sort order, then quest id."""
    return sorted(rows, key=lambda r: (r.main_quest_sequence_id, r.sort_order, r.quest_id))


def sorted_first_clear_rewards(
    rows: Iterable[QuestFirstClearRewardGroupRow],
) -> list[QuestFirstClearRewardGroupRow]:
    """Order first clear rewards by group, then sort order, then reward type."""
    return sorted(
        rows,
        key=lambda r: (r.quest_first_clear_reward_group_id, r.sort_order, r.quest_first_clear_reward_type),
    )