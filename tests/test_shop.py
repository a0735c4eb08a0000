import json

import pytest

from masterdata.shop import ExchangeShopCell, ShopItemRow, load_shop_catalog
from masterdata.tables import MasterDataError, TableSource

ITEM_SHOP = 1
EXCHANGE_SHOP = 2

TABLES = {
    "EntityMShopItemTable.json": [
        {"ShopItemId": 10, "PriceType": 1, "PriceId": 500, "Price": 30, "ShopItemLimitedStockId": 3},
        {"ShopItemId": 11, "PriceType": 1, "PriceId": 500, "Price": 60, "ShopItemLimitedStockId": 0},
    ],
    "EntityMShopItemContentPossessionTable.json": [
        {"ShopItemId": 10, "PossessionType": 1, "PossessionId": 1000, "Count": 1},
        {"ShopItemId": 10, "PossessionType": 2, "PossessionId": 2000, "Count": 1},
    ],
    "EntityMShopItemContentEffectTable.json": [
        {"ShopItemId": 11, "EffectTargetType": 1, "EffectValueType": 2, "EffectValue": 50}
    ],
    "EntityMUserLevelTable.json": [{"UserLevel": 1, "MaxStamina": 50}],
    "EntityMShopItemLimitedStockTable.json": [{"ShopItemLimitedStockId": 3, "MaxCount": 5}],
    "EntityMShopTable.json": [
        {"ShopId": 1, "ShopGroupType": ITEM_SHOP, "ShopItemCellGroupId": 100},
        {"ShopId": 2, "ShopGroupType": EXCHANGE_SHOP, "ShopItemCellGroupId": 200},
        {"ShopId": 3, "ShopGroupType": EXCHANGE_SHOP, "ShopItemCellGroupId": 999},
        {"ShopId": 4, "ShopGroupType": 7, "ShopItemCellGroupId": 200},
    ],
    "EntityMShopItemCellGroupTable.json": [
        {"ShopItemCellGroupId": 100, "ShopItemCellId": 1, "SortOrder": 3},
        {"ShopItemCellGroupId": 100, "ShopItemCellId": 2, "SortOrder": 1},
        {"ShopItemCellGroupId": 100, "ShopItemCellId": 77, "SortOrder": 2},
        {"ShopItemCellGroupId": 200, "ShopItemCellId": 3, "SortOrder": 20},
        {"ShopItemCellGroupId": 200, "ShopItemCellId": 4, "SortOrder": 10},
    ],
    "EntityMShopItemCellTable.json": [
        {"ShopItemCellId": 1, "ShopItemId": 10},
        {"ShopItemCellId": 2, "ShopItemId": 11},
        {"ShopItemCellId": 3, "ShopItemId": 10},
        {"ShopItemCellId": 4, "ShopItemId": 11},
    ],
}


def _source(tmp_path, tables=TABLES):
    for name, rows in tables.items():
        (tmp_path / name).write_text(json.dumps(rows), encoding="utf-8")
    return TableSource(tmp_path)


@pytest.fixture
def catalog(tmp_path):
    return load_shop_catalog(_source(tmp_path), ITEM_SHOP, EXCHANGE_SHOP)


def test_items_indexed(catalog):
    assert catalog.items[10] == ShopItemRow(10, 1, 500, 30, 3)
    assert sorted(catalog.items) == [10, 11]


def test_contents_and_effects_grouped(catalog):
    assert [c.possession_id for c in catalog.contents[10]] == [1000, 2000]
    assert catalog.effects[11][0].effect_value == 50
    assert 11 not in catalog.contents


def test_max_stamina_in_millis(catalog):
    assert catalog.max_stamina_millis == {1: 50000}


def test_limited_stock(catalog):
    assert catalog.limited_stock == {3: 5}


def test_item_shop_pool_sorted_and_skips_unknown_cells(catalog):
    assert catalog.item_shop_pool == [11, 10]


def test_exchange_cells_sorted_by_sort_order(catalog):
    assert catalog.exchange_shop_cells == {2: [ExchangeShopCell(10, 11), ExchangeShopCell(20, 10)]}


def test_shops_without_cells_or_other_types_are_skipped(catalog):
    assert 3 not in catalog.exchange_shop_cells
    assert 4 not in catalog.exchange_shop_cells


def test_group_types_are_configurable(tmp_path):
    catalog = load_shop_catalog(_source(tmp_path), EXCHANGE_SHOP, ITEM_SHOP)
    assert catalog.item_shop_pool == [11, 10]
    assert catalog.exchange_shop_cells == {
        1: [ExchangeShopCell(1, 11), ExchangeShopCell(3, 10)]
    }


def test_missing_table_raises(tmp_path):
    tables = dict(TABLES)
    del tables["EntityMShopItemCellTable.json"]
    with pytest.raises(MasterDataError):
        load_shop_catalog(_source(tmp_path, tables), ITEM_SHOP, EXCHANGE_SHOP)