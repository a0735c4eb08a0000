"""Small lookup catalogs: consumables, omikuji, login bonuses, ornaments, side stories."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .tables import TableSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConsumableItemRow:
    consumable_item_id: int
    sell_price: int


@dataclass
class ConsumableItemCatalog:
    by_id: dict[int, ConsumableItemRow] = field(default_factory=dict)


def load_consumable_item_catalog(source: TableSource) -> ConsumableItemCatalog:
    catalog = ConsumableItemCatalog()
    for record in source.read("EntityMConsumableItemTable.json"):
        row = ConsumableItemRow(
            consumable_item_id=int(record.get("ConsumableItemId", 0)),
            sell_price=int(record.get("SellPrice", 0)),
        )
        catalog.by_id[row.consumable_item_id] = row
    return catalog


@dataclass
class OmikujiCatalog:
    asset_ids: dict[int, int] = field(default_factory=dict)

    def lookup_asset_id(self, omikuji_id: int) -> int:
        """Return the asset id of an omikuji, or 0 when unknown."""
        return self.asset_ids.get(omikuji_id, 0)


def load_omikuji_catalog(source: TableSource) -> OmikujiCatalog:
    return OmikujiCatalog(
        {
            int(record.get("OmikujiId", 0)): int(record.get("OmikujiAssetId", 0))
            for record in source.read("EntityMOmikujiTable.json")
        }
    )


@dataclass(frozen=True)
class LoginBonusReward:
    possession_type: int
    possession_id: int
    count: int


@dataclass
class LoginBonusCatalog:
    stamps: dict[tuple[int, int, int], LoginBonusReward] = field(default_factory=dict)

    def lookup_stamp_reward(
        self, login_bonus_id: int, page_number: int, stamp_number: int
    ) -> LoginBonusReward | None:
        return self.stamps.get((login_bonus_id, page_number, stamp_number))


def load_login_bonus_catalog(source: TableSource) -> LoginBonusCatalog:
    catalog = LoginBonusCatalog()
    for record in source.read("EntityMLoginBonusStampTable.json"):
        key = (
            int(record.get("LoginBonusId", 0)),
            int(record.get("LowerPageNumber", 0)),
            int(record.get("StampNumber", 0)),
        )
        catalog.stamps[key] = LoginBonusReward(
            possession_type=int(record.get("RewardPossessionType", 0)),
            possession_id=int(record.get("RewardPossessionId", 0)),
            count=int(record.get("RewardCount", 0)),
        )
    return catalog


@dataclass(frozen=True)
class CageOrnamentReward:
    possession_type: int
    possession_id: int
    count: int


@dataclass
class CageOrnamentCatalog:
    ornament_to_reward_id: dict[int, int] = field(default_factory=dict)
    rewards: dict[int, CageOrnamentReward] = field(default_factory=dict)

    def lookup_reward(self, cage_ornament_id: int) -> CageOrnamentReward | None:
        """Return the reward of an ornament, or None if it has none."""
        reward_id = self.ornament_to_reward_id.get(cage_ornament_id, 0)
        if reward_id == 0:
            return None
        return self.rewards.get(reward_id)


def load_cage_ornament_catalog(source: TableSource) -> CageOrnamentCatalog:
    ornaments = source.read("EntityMCageOrnamentTable.json")
    rewards = source.read("EntityMCageOrnamentRewardTable.json")
    catalog = CageOrnamentCatalog()
    for record in ornaments:
        catalog.ornament_to_reward_id[int(record.get("CageOrnamentId", 0))] = int(
            record.get("CageOrnamentRewardId", 0)
        )
    for record in rewards:
        catalog.rewards[int(record.get("CageOrnamentRewardId", 0))] = CageOrnamentReward(
            possession_type=int(record.get("PossessionType", 0)),
            possession_id=int(record.get("PossessionId", 0)),
            count=int(record.get("Count", 0)),
        )
    return catalog


@dataclass
class SideStoryCatalog:
    first_scene_by_quest_id: dict[int, int] = field(default_factory=dict)


def load_side_story_catalog(source: TableSource) -> SideStoryCatalog:
    """Map each side story quest to its scene with sort order 1."""
    first_scene = {
        int(record.get("SideStoryQuestId", 0)): int(record.get("SideStoryQuestSceneId", 0))
        for record in source.read("EntityMSideStoryQuestSceneTable.json")
        if int(record.get("SortOrder", 0)) == 1
    }
    logger.info("side story catalog loaded: %d quests", len(first_scene))
    return SideStoryCatalog(first_scene)