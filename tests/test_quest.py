import json

import pytest

from masterdata.parts import PartsCatalog
from masterdata.quest import BattleDropInfo, load_quest_catalog
from masterdata.tables import MasterDataError, TableSource

TABLES = [
    "EntityMQuestSceneTable.json",
    "EntityMQuestMissionTable.json",
    "EntityMQuestTable.json",
    "EntityMQuestMissionGroupTable.json",
    "EntityMMainQuestSequenceTable.json",
    "EntityMMainQuestChapterTable.json",
    "EntityMMainQuestRouteTable.json",
    "EntityMQuestFirstClearRewardSwitchTable.json",
    "EntityMQuestFirstClearRewardGroupTable.json",
    "EntityMQuestReplayFlowRewardGroupTable.json",
    "EntityMQuestMissionRewardTable.json",
    "EntityMWeaponTable.json",
    "EntityMWeaponSkillGroupTable.json",
    "EntityMWeaponAbilityGroupTable.json",
    "EntityMWeaponStoryReleaseConditionGroupTable.json",
    "EntityMCostumeTable.json",
    "EntityMCostumeRarityTable.json",
    "EntityMUserQuestSceneGrantPossessionTable.json",
    "EntityMBattleDropRewardTable.json",
    "EntityMQuestPickupRewardGroupTable.json",
    "EntityMQuestSceneBattleTable.json",
    "EntityMBattleGroupTable.json",
    "EntityMBattleTable.json",
    "EntityMBattleNpcDeckTable.json",
    "EntityMBattleNpcDeckCharacterDropCategoryTable.json",
    "EntityMBattleRentalDeckTable.json",
    "EntityMTutorialUnlockConditionTable.json",
    "EntityMNumericalParameterMapTable.json",
    "EntityMUserLevelTable.json",
]


class _Functions:
    def __init__(self, funcs):
        self.funcs = funcs

    def resolve(self, function_id):
        return self.funcs.get(function_id)


def _source(tmp_path, tables, skip=()):
    for name in TABLES:
        if name in skip:
            continue
        (tmp_path / name).write_text(json.dumps(tables.get(name, [])), encoding="utf-8")
    return TableSource(tmp_path)


def _load(tmp_path, tables, funcs=None, parts=None):
    return load_quest_catalog(_source(tmp_path, tables), parts or PartsCatalog(), _Functions(funcs or {}))


def _main_quest_tables():
    return {
        "EntityMQuestTable.json": [{"QuestId": q} for q in (101, 102, 201)],
        "EntityMQuestSceneTable.json": [
            {"QuestSceneId": 1002, "QuestId": 101, "SortOrder": 2},
            {"QuestSceneId": 1001, "QuestId": 101, "SortOrder": 1},
            {"QuestSceneId": 2001, "QuestId": 201, "SortOrder": 1},
        ],
        "EntityMMainQuestSequenceTable.json": [
            {"MainQuestSequenceId": 10, "SortOrder": 2, "QuestId": 102},
            {"MainQuestSequenceId": 10, "SortOrder": 1, "QuestId": 101},
            {"MainQuestSequenceId": 20, "SortOrder": 1, "QuestId": 201},
        ],
        "EntityMMainQuestChapterTable.json": [
            {"MainQuestChapterId": 2, "MainQuestRouteId": 7, "SortOrder": 2, "MainQuestSequenceGroupId": 20},
            {"MainQuestChapterId": 1, "MainQuestRouteId": 5, "SortOrder": 1, "MainQuestSequenceGroupId": 10},
        ],
        "EntityMMainQuestRouteTable.json": [{"MainQuestRouteId": 5, "MainQuestSeasonId": 3}],
    }


def test_ordered_quest_ids_follow_chapter_then_sequence_order(tmp_path):
    catalog = _load(tmp_path, _main_quest_tables())
    assert catalog.ordered_quest_ids == [101, 102, 201]


def test_routes_and_seasons(tmp_path):
    catalog = _load(tmp_path, _main_quest_tables())
    assert catalog.route_id_by_quest_id == {101: 5, 102: 5, 201: 7}
    assert catalog.season_id_by_route_id == {5: 3}


def test_scene_ids_in_sort_order(tmp_path):
    catalog = _load(tmp_path, _main_quest_tables())
    assert catalog.scene_ids_by_quest_id[101] == [1001, 1002]
    assert catalog.scene_by_id[1002].quest_id == 101


def test_chapter_last_scene_covers_every_quest_of_chapter(tmp_path):
    catalog = _load(tmp_path, _main_quest_tables())
    # Quest 102 has no scenes, so the chapter's last scene comes from quest 101.
    assert catalog.chapter_last_scene_by_quest_id == {101: 1002, 102: 1002, 201: 2001}


def test_mission_ids_per_quest_in_group_order(tmp_path):
    tables = {
        "EntityMQuestTable.json": [{"QuestId": 1, "QuestMissionGroupId": 9}, {"QuestId": 2}],
        "EntityMQuestMissionGroupTable.json": [
            {"QuestMissionGroupId": 9, "SortOrder": 2, "QuestMissionId": 50},
            {"QuestMissionGroupId": 9, "SortOrder": 1, "QuestMissionId": 60},
        ],
    }
    catalog = _load(tmp_path, tables)
    assert catalog.mission_ids_by_quest_id == {1: [60, 50]}


def test_first_clear_rewards_sorted_within_group(tmp_path):
    tables = {
        "EntityMQuestFirstClearRewardGroupTable.json": [
            {"QuestFirstClearRewardGroupId": 4, "SortOrder": 2, "PossessionId": 22, "IsPickup": True},
            {"QuestFirstClearRewardGroupId": 4, "SortOrder": 1, "PossessionId": 11},
        ]
    }
    catalog = _load(tmp_path, tables)
    rewards = catalog.first_clear_rewards_by_group_id[4]
    assert [r.possession_id for r in rewards] == [11, 22]
    assert rewards[1].is_pickup is True


def test_pickup_reward_ids_sorted(tmp_path):
    tables = {
        "EntityMQuestPickupRewardGroupTable.json": [
            {"QuestPickupRewardGroupId": 3, "SortOrder": 2, "BattleDropRewardId": 700},
            {"QuestPickupRewardGroupId": 3, "SortOrder": 1, "BattleDropRewardId": 800},
        ]
    }
    catalog = _load(tmp_path, tables)
    assert catalog.pickup_reward_ids_by_group_id == {3: [800, 700]}


def _battle_tables():
    return {
        "EntityMQuestTable.json": [{"QuestId": 1}, {"QuestId": 2}],
        "EntityMQuestSceneTable.json": [
            {"QuestSceneId": 11, "QuestId": 1, "SortOrder": 1},
            {"QuestSceneId": 21, "QuestId": 2, "SortOrder": 1},
        ],
        "EntityMQuestSceneBattleTable.json": [{"QuestSceneId": 11, "BattleGroupId": 500}],
        "EntityMBattleGroupTable.json": [
            {"BattleGroupId": 500, "WaveNumber": 1, "BattleId": 900},
            {"BattleGroupId": 500, "WaveNumber": 2, "BattleId": 900},
        ],
        "EntityMBattleTable.json": [{"BattleId": 900, "BattleNpcId": 77, "DeckType": 1, "BattleNpcDeckNumber": 1}],
        "EntityMBattleNpcDeckTable.json": [
            {
                "BattleNpcId": 77,
                "DeckType": 1,
                "BattleNpcDeckNumber": 1,
                "BattleNpcDeckCharacterUuid01": "a",
                "BattleNpcDeckCharacterUuid02": "b",
                "BattleNpcDeckCharacterUuid03": "",
            }
        ],
        "EntityMBattleNpcDeckCharacterDropCategoryTable.json": [
            {"BattleNpcId": 77, "BattleNpcDeckCharacterUuid": "a", "BattleDropCategoryId": 31},
            {"BattleNpcId": 77, "BattleNpcDeckCharacterUuid": "b", "BattleDropCategoryId": 32},
        ],
        "EntityMBattleRentalDeckTable.json": [{"BattleGroupId": 500}],
    }


def test_battle_drops_are_deduplicated_in_order(tmp_path):
    catalog = _load(tmp_path, _battle_tables())
    assert catalog.battle_drops_by_quest_id == {1: [BattleDropInfo(11, 31), BattleDropInfo(11, 32)]}


def test_rental_quests(tmp_path):
    catalog = _load(tmp_path, _battle_tables())
    assert catalog.rental_quest_ids == {1}


def test_exp_thresholds_and_stamina(tmp_path):
    tables = {
        "EntityMNumericalParameterMapTable.json": [
            {"NumericalParameterMapId": 1, "ParameterKey": 2, "ParameterValue": 40},
            {"NumericalParameterMapId": 31, "ParameterKey": 1, "ParameterValue": 10},
            {"NumericalParameterMapId": 31, "ParameterKey": 2, "ParameterValue": 30},
        ],
        "EntityMUserLevelTable.json": [{"UserLevel": 1, "MaxStamina": 50}],
    }
    catalog = _load(tmp_path, tables)
    assert catalog.user_exp_thresholds == [0, 0, 40]
    assert catalog.character_exp_thresholds == [0, 10, 30]
    assert catalog.max_stamina_by_level == {1: 50}


def test_costume_rarity_first_row_wins(tmp_path):
    first, second = object(), object()
    tables = {
        "EntityMCostumeRarityTable.json": [
            {"RarityType": 30, "MaxLevelNumericalFunctionId": 1},
            {"RarityType": 30, "MaxLevelNumericalFunctionId": 2},
            {"RarityType": 40, "MaxLevelNumericalFunctionId": 99},
        ],
        "EntityMCostumeTable.json": [{"CostumeId": 5, "CharacterId": 8, "RarityType": 30}],
    }
    catalog = _load(tmp_path, tables, funcs={1: first, 2: second})
    assert catalog.costume_max_level_by_rarity == {30: first}
    assert catalog.costume_by_id[5].character_id == 8
    assert set(catalog.costume_exp_by_rarity) == {30, 40}


def test_weapon_indexes(tmp_path):
    tables = {
        "EntityMWeaponTable.json": [
            {"WeaponId": 1, "WeaponStoryReleaseConditionGroupId": 6},
            {"WeaponId": 2, "WeaponStoryReleaseConditionGroupId": 6},
            {"WeaponId": 3},
        ],
        "EntityMWeaponSkillGroupTable.json": [
            {"WeaponSkillGroupId": 4, "SlotNumber": 1},
            {"WeaponSkillGroupId": 4, "SlotNumber": 2},
        ],
        "EntityMWeaponStoryReleaseConditionGroupTable.json": [
            {"WeaponStoryReleaseConditionGroupId": 6, "StoryIndex": 1}
        ],
    }
    catalog = _load(tmp_path, tables)
    assert catalog.weapon_ids_by_release_condition_group_id == {6: [1, 2]}
    assert catalog.weapon_skill_slots == {4: [1, 2]}
    assert catalog.release_conditions_by_group_id[6][0].story_index == 1


def test_parts_catalog_is_kept(tmp_path):
    parts = PartsCatalog(default_parts_status_main_by_lottery_group={11: 1})
    catalog = _load(tmp_path, {}, parts=parts)
    assert catalog.parts is parts


def test_missing_table_raises(tmp_path):
    source = _source(tmp_path, {}, skip={"EntityMBattleTable.json"})
    with pytest.raises(MasterDataError):
        load_quest_catalog(source, PartsCatalog(), _Functions({}))