"""Shops, their items, contents and cell layouts."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tables import TableSource


@dataclass(frozen=True)
class ShopItemRow:
    shop_item_id: int
    price_type: int
    price_id: int
    price: int
    shop_item_limited_stock_id: int


@dataclass(frozen=True)
class ShopContentRow:
    shop_item_id: int
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class ShopContentEffectRow:
    shop_item_id: int
    effect_target_type: int
    effect_value_type: int
    effect_value: int


@dataclass(frozen=True)
class ExchangeShopCell:
    sort_order: int
    shop_item_id: int


@dataclass
class ShopCatalog:
    items: dict[int, ShopItemRow] = field(default_factory=dict)
    contents: dict[int, list[ShopContentRow]] = field(default_factory=dict)
    effects: dict[int, list[ShopContentEffectRow]] = field(default_factory=dict)
    # User level to max stamina in millis.
    max_stamina_millis: dict[int, int] = field(default_factory=dict)
    # Limited stock id to max count.
    limited_stock: dict[int, int] = field(default_factory=dict)
    # Shop item ids of the replaceable item shop, in cell sort order.
    item_shop_pool: list[int] = field(default_factory=list)
    # Exchange shop id to its cells in sort order.
    exchange_shop_cells: dict[int, list[ExchangeShopCell]] = field(default_factory=dict)


def load_shop_catalog(
    source: TableSource, item_shop_group_type: int, exchange_shop_group_type: int
) -> ShopCatalog:
    """Load shop tables; the group types select the item shop and exchange shops."""
    items = source.read("EntityMShopItemTable.json")
    contents = source.read("EntityMShopItemContentPossessionTable.json")
    effects = source.read("EntityMShopItemContentEffectTable.json")
    user_levels = source.read("EntityMUserLevelTable.json")
    stocks = source.read("EntityMShopItemLimitedStockTable.json")

    catalog = ShopCatalog()
    for r in items:
        item = ShopItemRow(
            shop_item_id=int(r.get("ShopItemId", 0)),
            price_type=int(r.get("PriceType", 0)),
            price_id=int(r.get("PriceId", 0)),
            price=int(r.get("Price", 0)),
            shop_item_limited_stock_id=int(r.get("ShopItemLimitedStockId", 0)),
        )
        catalog.items[item.shop_item_id] = item
    for r in contents:
        content = ShopContentRow(
            shop_item_id=int(r.get("ShopItemId", 0)),
            possession_type=int(r.get("PossessionType", 0)),
            possession_id=int(r.get("PossessionId", 0)),
            count=int(r.get("Count", 0)),
        )
        catalog.contents.setdefault(content.shop_item_id, []).append(content)
    for r in effects:
        effect = ShopContentEffectRow(
            shop_item_id=int(r.get("ShopItemId", 0)),
            effect_target_type=int(r.get("EffectTargetType", 0)),
            effect_value_type=int(r.get("EffectValueType", 0)),
            effect_value=int(r.get("EffectValue", 0)),
        )
        catalog.effects.setdefault(effect.shop_item_id, []).append(effect)
    for r in user_levels:
        catalog.max_stamina_millis[int(r.get("UserLevel", 0))] = int(r.get("MaxStamina", 0)) * 1000
    for r in stocks:
        catalog.limited_stock[int(r.get("ShopItemLimitedStockId", 0))] = int(r.get("MaxCount", 0))

    shops = source.read("EntityMShopTable.json")
    cell_groups = source.read("EntityMShopItemCellGroupTable.json")
    cells = source.read("EntityMShopItemCellTable.json")

    item_by_cell = {int(c.get("ShopItemCellId", 0)): int(c.get("ShopItemId", 0)) for c in cells}
    groups: dict[int, list[tuple[int, int]]] = {}
    for cg in cell_groups:
        groups.setdefault(int(cg.get("ShopItemCellGroupId", 0)), []).append(
            (int(cg.get("ShopItemCellId", 0)), int(cg.get("SortOrder", 0)))
        )

    for shop in shops:
        entries = groups.get(int(shop.get("ShopItemCellGroupId", 0)))
        if not entries:
            continue
        group_type = int(shop.get("ShopGroupType", 0))
        if group_type not in (item_shop_group_type, exchange_shop_group_type):
            continue
        shop_cells = sorted(
            (
                ExchangeShopCell(sort_order=sort_order, shop_item_id=item_by_cell[cell_id])
                for cell_id, sort_order in entries
                if cell_id in item_by_cell
            ),
            key=lambda cell: cell.sort_order,
        )
        if group_type == item_shop_group_type:
            catalog.item_shop_pool = [cell.shop_item_id for cell in shop_cells]
        else:
            catalog.exchange_shop_cells[int(shop.get("ShopId", 0))] = shop_cells

    return catalog