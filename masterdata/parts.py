"""Parts (memoirs): rarity data, level-up rates and prices."""

from __future__ import annotations

from dataclasses import dataclass, field

from .numericalfunc import FunctionResolver, NumericalFunc
from .tables import TableSource


@dataclass(frozen=True)
class PartsRow:
    parts_id: int
    rarity_type: int
    parts_group_id: int
    parts_status_main_lottery_group_id: int


@dataclass(frozen=True)
class PartsRarityRow:
    rarity_type: int
    parts_level_up_rate_group_id: int
    parts_level_up_price_group_id: int
    sell_price_numerical_function_id: int


@dataclass
class PartsCatalog:
    parts_by_id: dict[int, PartsRow] = field(default_factory=dict)
    default_parts_status_main_by_lottery_group: dict[int, int] = field(default_factory=dict)
    rarity_by_rarity_type: dict[int, PartsRarityRow] = field(default_factory=dict)
    # Rate group id to level lower limit to success rate in permil.
    rate_by_group_and_level: dict[int, dict[int, int]] = field(default_factory=dict)
    # Price group id to level lower limit to gold.
    price_by_group_and_level: dict[int, dict[int, int]] = field(default_factory=dict)
    sell_price_by_rarity: dict[int, NumericalFunc] = field(default_factory=dict)


def default_parts_status_main_by_lottery_group() -> dict[int, int]:
    """Map each main-stat lottery group to its default main stat.

    A group id's first digit is the tier (1-4) and its second the stat
    category (1-6); the main stat id is ``(category - 1) * 4 + tier``.
    """
    return {
        tier * 10 + category: (category - 1) * 4 + tier
        for tier in range(1, 5)
        for category in range(1, 7)
    }


def load_parts_catalog(source: TableSource, functions: FunctionResolver) -> PartsCatalog:
    parts_rows = source.read("EntityMPartsTable.json")
    rarity_rows = source.read("EntityMPartsRarityTable.json")
    rate_rows = source.read("EntityMPartsLevelUpRateGroupTable.json")
    price_rows = source.read("EntityMPartsLevelUpPriceGroupTable.json")

    catalog = PartsCatalog(default_parts_status_main_by_lottery_group=default_parts_status_main_by_lottery_group())

    for record in parts_rows:
        parts = PartsRow(
            parts_id=int(record.get("PartsId", 0)),
            rarity_type=int(record.get("RarityType", 0)),
            parts_group_id=int(record.get("PartsGroupId", 0)),
            parts_status_main_lottery_group_id=int(record.get("PartsStatusMainLotteryGroupId", 0)),
        )
        catalog.parts_by_id[parts.parts_id] = parts

    for record in rarity_rows:
        rarity = PartsRarityRow(
            rarity_type=int(record.get("RarityType", 0)),
            parts_level_up_rate_group_id=int(record.get("PartsLevelUpRateGroupId", 0)),
            parts_level_up_price_group_id=int(record.get("PartsLevelUpPriceGroupId", 0)),
            sell_price_numerical_function_id=int(record.get("SellPriceNumericalFunctionId", 0)),
        )
        catalog.rarity_by_rarity_type[rarity.rarity_type] = rarity
        func = functions.resolve(rarity.sell_price_numerical_function_id)
        if func is not None:
            catalog.sell_price_by_rarity[rarity.rarity_type] = func

    for record in rate_rows:
        catalog.rate_by_group_and_level.setdefault(int(record.get("PartsLevelUpRateGroupId", 0)), {})[
            int(record.get("LevelLowerLimit", 0))
        ] = int(record.get("SuccessRatePermil", 0))

    for record in price_rows:
        catalog.price_by_group_and_level.setdefault(int(record.get("PartsLevelUpPriceGroupId", 0)), {})[
            int(record.get("LevelLowerLimit", 0))
        ] = int(record.get("Gold", 0))

    return catalog