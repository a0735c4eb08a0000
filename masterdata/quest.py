"""The quest catalog: scenes, missions, rewards, battles and levelling data."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Iterable, Mapping, TypeVar

from .costume import CostumeMasterRow
from .numericalfunc import FunctionResolver, NumericalFunc
from .parts import PartsCatalog
from .quest_rows import (
    BattleDropRewardRow,
    BattleNpcDeckRow,
    MainQuestChapterRow,
    MainQuestSequenceRow,
    QuestFirstClearRewardGroupRow,
    QuestFirstClearRewardSwitchRow,
    QuestMissionGroupRow,
    QuestMissionRewardRow,
    QuestMissionRow,
    QuestPickupRewardGroupRow,
    QuestReplayFlowRewardGroupRow,
    QuestRow,
    QuestSceneGrantRow,
    QuestSceneRow,
    TutorialUnlockConditionRow,
    sorted_first_clear_rewards,
    sorted_mission_groups,
    sorted_scenes,
    sorted_sequences,
)
from .tables import TableSource, build_exp_thresholds, load_parameter_map
from .weapon import (
    WeaponAbilityGroupRow,
    WeaponMasterRow,
    WeaponSkillGroupRow,
    WeaponStoryReleaseConditionRow,
)

_T = TypeVar("_T")

USER_EXP_PARAMETER_MAP_ID = 1
CHARACTER_EXP_PARAMETER_MAP_ID = 31

_CONVERTERS = {"int": int, "bool": bool, "str": str}
_DEFAULTS: dict[str, Any] = {"int": 0, "bool": False, "str": ""}


def _pascal(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _from_record(cls: type[_T], record: Mapping[str, Any]) -> _T:
    values = {}
    for f in fields(cls):
        kind = f.type if isinstance(f.type, str) else f.type.__name__
        values[f.name] = _CONVERTERS[kind](record.get(_pascal(f.name), _DEFAULTS[kind]))
    return cls(**values)


def _rows(cls: type[_T], records: Iterable[Mapping[str, Any]]) -> list[_T]:
    return [_from_record(cls, record) for record in records]


@dataclass(frozen=True)
class BattleDropInfo:
    quest_scene_id: int
    battle_drop_category_id: int


@dataclass
class QuestCatalog:
    scene_by_id: dict[int, QuestSceneRow] = field(default_factory=dict)
    mission_by_id: dict[int, QuestMissionRow] = field(default_factory=dict)
    quest_by_id: dict[int, QuestRow] = field(default_factory=dict)
    mission_ids_by_quest_id: dict[int, list[int]] = field(default_factory=dict)
    route_id_by_quest_id: dict[int, int] = field(default_factory=dict)
    scene_ids_by_quest_id: dict[int, list[int]] = field(default_factory=dict)
    # Main quest ids in chapter order, then sequence order.
    ordered_quest_ids: list[int] = field(default_factory=list)
    first_clear_rewards_by_group_id: dict[int, list[QuestFirstClearRewardGroupRow]] = field(default_factory=dict)
    first_clear_reward_switches_by_quest_id: dict[int, list[QuestFirstClearRewardSwitchRow]] = field(
        default_factory=dict
    )
    mission_rewards_by_mission_id: dict[int, list[QuestMissionRewardRow]] = field(default_factory=dict)
    weapon_ids_by_release_condition_group_id: dict[int, list[int]] = field(default_factory=dict)
    release_conditions_by_group_id: dict[int, list[WeaponStoryReleaseConditionRow]] = field(default_factory=dict)
    scene_grants_by_scene_id: dict[int, list[QuestSceneGrantRow]] = field(default_factory=dict)
    battle_drop_reward_by_id: dict[int, BattleDropRewardRow] = field(default_factory=dict)
    pickup_reward_ids_by_group_id: dict[int, list[int]] = field(default_factory=dict)
    battle_drops_by_quest_id: dict[int, list[BattleDropInfo]] = field(default_factory=dict)
    replay_flow_rewards_by_group_id: dict[int, list[QuestReplayFlowRewardGroupRow]] = field(default_factory=dict)
    rental_quest_ids: set[int] = field(default_factory=set)
    tutorial_unlock_conditions: list[TutorialUnlockConditionRow] = field(default_factory=list)
    # Quest id to the last scene of the chapter that holds it.
    chapter_last_scene_by_quest_id: dict[int, int] = field(default_factory=dict)
    season_id_by_route_id: dict[int, int] = field(default_factory=dict)

    user_exp_thresholds: list[int] = field(default_factory=list)
    character_exp_thresholds: list[int] = field(default_factory=list)
    costume_exp_by_rarity: dict[int, list[int]] = field(default_factory=dict)
    costume_max_level_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)
    max_stamina_by_level: dict[int, int] = field(default_factory=dict)

    costume_by_id: dict[int, CostumeMasterRow] = field(default_factory=dict)
    weapon_by_id: dict[int, WeaponMasterRow] = field(default_factory=dict)

    weapon_skill_slots: dict[int, list[int]] = field(default_factory=dict)
    weapon_ability_slots: dict[int, list[int]] = field(default_factory=dict)

    parts: PartsCatalog = field(default_factory=PartsCatalog)


def _group(pairs: Iterable[tuple[int, _T]]) -> dict[int, list[_T]]:
    grouped: dict[int, list[_T]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return grouped


def _battle_drops(
    quest_ids: Iterable[int],
    scene_ids_by_quest_id: Mapping[int, list[int]],
    battle_group_by_scene_id: Mapping[int, int],
    battle_ids_by_group_id: Mapping[int, list[int]],
    battle_by_id: Mapping[int, Mapping[str, Any]],
    npc_deck_by_key: Mapping[tuple[int, int, int], BattleNpcDeckRow],
    drop_category_by_key: Mapping[tuple[int, str], int],
) -> dict[int, list[BattleDropInfo]]:
    result: dict[int, list[BattleDropInfo]] = {}
    for quest_id in quest_ids:
        drops: dict[BattleDropInfo, None] = {}
        for scene_id in scene_ids_by_quest_id.get(quest_id, ()):
            group_id = battle_group_by_scene_id.get(scene_id)
            if group_id is None:
                continue
            for battle_id in battle_ids_by_group_id.get(group_id, ()):
                battle = battle_by_id.get(battle_id)
                if battle is None:
                    continue
                npc_id = int(battle.get("BattleNpcId", 0))
                deck = npc_deck_by_key.get(
                    (npc_id, int(battle.get("DeckType", 0)), int(battle.get("BattleNpcDeckNumber", 0)))
                )
                if deck is None:
                    continue
                for uuid in (
                    deck.battle_npc_deck_character_uuid01,
                    deck.battle_npc_deck_character_uuid02,
                    deck.battle_npc_deck_character_uuid03,
                ):
                    if not uuid:
                        continue
                    category_id = drop_category_by_key.get((npc_id, uuid))
                    if category_id is None:
                        continue
                    drops.setdefault(BattleDropInfo(scene_id, category_id), None)
        if drops:
            result[quest_id] = list(drops)
    return result


def load_quest_catalog(source: TableSource, parts: PartsCatalog, functions: FunctionResolver) -> QuestCatalog:
    """Load every quest-related table and build the derived indexes."""
    scenes = sorted_scenes(_rows(QuestSceneRow, source.read("EntityMQuestSceneTable.json")))
    missions = _rows(QuestMissionRow, source.read("EntityMQuestMissionTable.json"))
    quests = _rows(QuestRow, source.read("EntityMQuestTable.json"))
    mission_groups = sorted_mission_groups(
        _rows(QuestMissionGroupRow, source.read("EntityMQuestMissionGroupTable.json"))
    )
    sequences = sorted_sequences(_rows(MainQuestSequenceRow, source.read("EntityMMainQuestSequenceTable.json")))
    chapters = _rows(MainQuestChapterRow, source.read("EntityMMainQuestChapterTable.json"))
    routes = source.read("EntityMMainQuestRouteTable.json")
    first_clear_switches = _rows(
        QuestFirstClearRewardSwitchRow, source.read("EntityMQuestFirstClearRewardSwitchTable.json")
    )
    first_clear_rewards = sorted_first_clear_rewards(
        _rows(QuestFirstClearRewardGroupRow, source.read("EntityMQuestFirstClearRewardGroupTable.json"))
    )
    replay_flow_rewards = sorted(
        _rows(QuestReplayFlowRewardGroupRow, source.read("EntityMQuestReplayFlowRewardGroupTable.json")),
        key=lambda r: (r.quest_replay_flow_reward_group_id, r.sort_order),
    )
    mission_rewards = _rows(QuestMissionRewardRow, source.read("EntityMQuestMissionRewardTable.json"))
    weapons = _rows(WeaponMasterRow, source.read("EntityMWeaponTable.json"))
    weapon_skill_groups = _rows(WeaponSkillGroupRow, source.read("EntityMWeaponSkillGroupTable.json"))
    weapon_ability_groups = _rows(WeaponAbilityGroupRow, source.read("EntityMWeaponAbilityGroupTable.json"))
    release_conditions = _rows(
        WeaponStoryReleaseConditionRow, source.read("EntityMWeaponStoryReleaseConditionGroupTable.json")
    )
    costume_masters = _rows(CostumeMasterRow, source.read("EntityMCostumeTable.json"))
    costume_rarities = source.read("EntityMCostumeRarityTable.json")
    scene_grants = _rows(QuestSceneGrantRow, source.read("EntityMUserQuestSceneGrantPossessionTable.json"))
    battle_drop_rewards = _rows(BattleDropRewardRow, source.read("EntityMBattleDropRewardTable.json"))
    pickup_reward_groups = sorted(
        _rows(QuestPickupRewardGroupRow, source.read("EntityMQuestPickupRewardGroupTable.json")),
        key=lambda r: (r.quest_pickup_reward_group_id, r.sort_order),
    )
    scene_battles = source.read("EntityMQuestSceneBattleTable.json")
    battle_groups = source.read("EntityMBattleGroupTable.json")
    battles = source.read("EntityMBattleTable.json")
    npc_decks = _rows(BattleNpcDeckRow, source.read("EntityMBattleNpcDeckTable.json"))
    npc_drop_categories = source.read("EntityMBattleNpcDeckCharacterDropCategoryTable.json")
    rental_decks = source.read("EntityMBattleRentalDeckTable.json")
    tutorial_conditions = _rows(
        TutorialUnlockConditionRow, source.read("EntityMTutorialUnlockConditionTable.json")
    )
    param_map = load_parameter_map(source)
    user_levels = source.read("EntityMUserLevelTable.json")

    catalog = QuestCatalog(parts=parts, tutorial_unlock_conditions=tutorial_conditions)

    catalog.season_id_by_route_id = {
        int(r.get("MainQuestRouteId", 0)): int(r.get("MainQuestSeasonId", 0)) for r in routes
    }
    catalog.max_stamina_by_level = {int(r.get("UserLevel", 0)): int(r.get("MaxStamina", 0)) for r in user_levels}

    for record in costume_rarities:
        rarity = int(record.get("RarityType", 0))
        if rarity not in catalog.costume_exp_by_rarity:
            catalog.costume_exp_by_rarity[rarity] = build_exp_thresholds(
                param_map, int(record.get("RequiredExpForLevelUpNumericalParameterMapId", 0))
            )
        if rarity not in catalog.costume_max_level_by_rarity:
            func = functions.resolve(int(record.get("MaxLevelNumericalFunctionId", 0)))
            if func is not None:
                catalog.costume_max_level_by_rarity[rarity] = func

    catalog.costume_by_id = {c.costume_id: c for c in costume_masters}
    catalog.weapon_by_id = {w.weapon_id: w for w in weapons}
    catalog.weapon_skill_slots = _group((r.weapon_skill_group_id, r.slot_number) for r in weapon_skill_groups)
    catalog.weapon_ability_slots = _group(
        (r.weapon_ability_group_id, r.slot_number) for r in weapon_ability_groups
    )

    catalog.scene_by_id = {s.quest_scene_id: s for s in scenes}
    catalog.scene_ids_by_quest_id = _group((s.quest_id, s.quest_scene_id) for s in scenes)
    catalog.mission_by_id = {m.quest_mission_id: m for m in missions}
    catalog.quest_by_id = {q.quest_id: q for q in quests}

    mission_ids_by_group_id = _group((mg.quest_mission_group_id, mg.quest_mission_id) for mg in mission_groups)
    for quest_id, quest in catalog.quest_by_id.items():
        mission_ids = mission_ids_by_group_id.get(quest.quest_mission_group_id)
        if mission_ids:
            catalog.mission_ids_by_quest_id[quest_id] = list(mission_ids)

    chapter_by_sequence_id = {c.main_quest_sequence_group_id: c for c in chapters}
    for sequence in sequences:
        chapter = chapter_by_sequence_id.get(sequence.main_quest_sequence_id)
        if chapter is not None:
            catalog.route_id_by_quest_id[sequence.quest_id] = chapter.main_quest_route_id

    sorted_chapters = sorted(chapters, key=lambda c: c.sort_order)
    sequences_by_group_id = _group((s.main_quest_sequence_id, s) for s in sequences)
    for chapter in sorted_chapters:
        chapter_sequences = sequences_by_group_id.get(chapter.main_quest_sequence_group_id, [])
        catalog.ordered_quest_ids.extend(s.quest_id for s in chapter_sequences)
        last_scene = next(
            (
                catalog.scene_ids_by_quest_id[s.quest_id][-1]
                for s in reversed(chapter_sequences)
                if catalog.scene_ids_by_quest_id.get(s.quest_id)
            ),
            0,
        )
        if last_scene != 0:
            for s in chapter_sequences:
                catalog.chapter_last_scene_by_quest_id[s.quest_id] = last_scene

    catalog.first_clear_rewards_by_group_id = _group(
        (r.quest_first_clear_reward_group_id, r) for r in first_clear_rewards
    )
    catalog.replay_flow_rewards_by_group_id = _group(
        (r.quest_replay_flow_reward_group_id, r) for r in replay_flow_rewards
    )
    catalog.first_clear_reward_switches_by_quest_id = _group((s.quest_id, s) for s in first_clear_switches)
    catalog.mission_rewards_by_mission_id = _group((r.quest_mission_reward_id, r) for r in mission_rewards)
    catalog.weapon_ids_by_release_condition_group_id = _group(
        (w.weapon_story_release_condition_group_id, w.weapon_id)
        for w in catalog.weapon_by_id.values()
        if w.weapon_story_release_condition_group_id != 0
    )
    catalog.release_conditions_by_group_id = _group(
        (c.weapon_story_release_condition_group_id, c) for c in release_conditions
    )
    catalog.scene_grants_by_scene_id = _group((g.quest_scene_id, g) for g in scene_grants)
    catalog.battle_drop_reward_by_id = {r.battle_drop_reward_id: r for r in battle_drop_rewards}
    catalog.pickup_reward_ids_by_group_id = _group(
        (p.quest_pickup_reward_group_id, p.battle_drop_reward_id) for p in pickup_reward_groups
    )

    battle_group_by_scene_id = {
        int(r.get("QuestSceneId", 0)): int(r.get("BattleGroupId", 0)) for r in scene_battles
    }
    battle_ids_by_group_id = _group(
        (int(r.get("BattleGroupId", 0)), int(r.get("BattleId", 0))) for r in battle_groups
    )
    battle_by_id = {int(r.get("BattleId", 0)): r for r in battles}
    npc_deck_by_key = {(d.battle_npc_id, d.deck_type, d.battle_npc_deck_number): d for d in npc_decks}
    drop_category_by_key = {
        (int(r.get("BattleNpcId", 0)), str(r.get("BattleNpcDeckCharacterUuid", ""))): int(
            r.get("BattleDropCategoryId", 0)
        )
        for r in npc_drop_categories
    }
    catalog.battle_drops_by_quest_id = _battle_drops(
        catalog.quest_by_id,
        catalog.scene_ids_by_quest_id,
        battle_group_by_scene_id,
        battle_ids_by_group_id,
        battle_by_id,
        npc_deck_by_key,
        drop_category_by_key,
    )

    rental_groups = {int(r.get("BattleGroupId", 0)) for r in rental_decks}
    catalog.rental_quest_ids = {
        quest_id
        for quest_id in catalog.quest_by_id
        if any(
            battle_group_by_scene_id.get(scene_id) in rental_groups
            for scene_id in catalog.scene_ids_by_quest_id.get(quest_id, ())
            if scene_id in battle_group_by_scene_id
        )
    }

    catalog.user_exp_thresholds = build_exp_thresholds(param_map, USER_EXP_PARAMETER_MAP_ID)
    catalog.character_exp_thresholds = build_exp_thresholds(param_map, CHARACTER_EXP_PARAMETER_MAP_ID)
    return catalog