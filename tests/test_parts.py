import json

import pytest

from masterdata.numericalfunc import FunctionKind, FunctionResolver, NumericalFunc
from masterdata.parts import (
    PartsRarityRow,
    PartsRow,
    default_parts_status_main_by_lottery_group,
    load_parts_catalog,
)
from masterdata.tables import MasterDataError, TableSource

TABLES = {
    "EntityMPartsTable.json": [
        {"PartsId": 1, "RarityType": 20, "PartsGroupId": 3, "PartsStatusMainLotteryGroupId": 11},
        {"PartsId": 2, "RarityType": 30, "PartsGroupId": 4, "PartsStatusMainLotteryGroupId": 46},
    ],
    "EntityMPartsRarityTable.json": [
        {"RarityType": 20, "PartsLevelUpRateGroupId": 1, "PartsLevelUpPriceGroupId": 2, "SellPriceNumericalFunctionId": 7},
        {"RarityType": 30, "PartsLevelUpRateGroupId": 1, "PartsLevelUpPriceGroupId": 2, "SellPriceNumericalFunctionId": 99},
    ],
    "EntityMPartsLevelUpRateGroupTable.json": [
        {"PartsLevelUpRateGroupId": 1, "LevelLowerLimit": 1, "SuccessRatePermil": 1000},
        {"PartsLevelUpRateGroupId": 1, "LevelLowerLimit": 5, "SuccessRatePermil": 600},
    ],
    "EntityMPartsLevelUpPriceGroupTable.json": [
        {"PartsLevelUpPriceGroupId": 2, "LevelLowerLimit": 1, "Gold": 100},
        {"PartsLevelUpPriceGroupId": 2, "LevelLowerLimit": 5, "Gold": 800},
    ],
}

FUNCTIONS = FunctionResolver({7: NumericalFunc(FunctionKind.LINEAR, (10, 5))})


def _source(tmp_path, tables=TABLES):
    for name, rows in tables.items():
        (tmp_path / name).write_text(json.dumps(rows), encoding="utf-8")
    return TableSource(tmp_path)


def test_default_mapping_is_a_permutation_of_main_stats():
    mapping = default_parts_status_main_by_lottery_group()
    assert len(mapping) == 24
    assert sorted(mapping.values()) == list(range(1, 25))


def test_default_mapping_worked_examples():
    mapping = default_parts_status_main_by_lottery_group()
    assert mapping[11] == 1
    assert mapping[46] == 24


def test_default_mapping_tier_is_first_digit():
    for group_id, stat_id in default_parts_status_main_by_lottery_group().items():
        tier = group_id // 10
        assert (stat_id - tier) % 4 == 0


def test_parts_and_rarities_indexed(tmp_path):
    catalog = load_parts_catalog(_source(tmp_path), FUNCTIONS)
    assert catalog.parts_by_id[2] == PartsRow(2, 30, 4, 46)
    assert catalog.rarity_by_rarity_type[20] == PartsRarityRow(20, 1, 2, 7)
    assert catalog.default_parts_status_main_by_lottery_group == default_parts_status_main_by_lottery_group()


def test_sell_price_only_when_function_resolves(tmp_path):
    catalog = load_parts_catalog(_source(tmp_path), FUNCTIONS)
    assert catalog.sell_price_by_rarity == {20: FUNCTIONS.resolve(7)}


def test_rates_and_prices_by_group_and_level(tmp_path):
    catalog = load_parts_catalog(_source(tmp_path), FUNCTIONS)
    assert catalog.rate_by_group_and_level == {1: {1: 1000, 5: 600}}
    assert catalog.price_by_group_and_level == {2: {1: 100, 5: 800}}


def test_missing_table_raises(tmp_path):
    tables = dict(TABLES)
    del tables["EntityMPartsLevelUpPriceGroupTable.json"]
    with pytest.raises(MasterDataError):
        load_parts_catalog(_source(tmp_path, tables), FUNCTIONS)