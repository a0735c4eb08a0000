"""Game-wide configuration values from the config table."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields

from .tables import TableSource

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass
class GameConfig:
    """Each field is read from the config key named as the field in upper case."""

    consumable_item_id_for_gold: int = 0
    consumable_item_id_for_medal: int = 0
    consumable_item_id_for_rare_medal: int = 0
    consumable_item_id_for_arena_coin: int = 0
    consumable_item_id_for_explore_ticket: int = 0
    consumable_item_id_for_mom_point: int = 0
    consumable_item_id_for_premium_gacha_ticket: int = 0
    consumable_item_id_for_quest_skip_ticket: int = 0

    character_rebirth_available_count: int = 0
    character_rebirth_consume_gold: int = 0

    costume_awaken_available_count: int = 0
    costume_limit_break_available_count: int = 0

    material_same_weapon_exp_coefficient_permil: int = 0

    user_stamina_recovery_second: int = 0
    reward_gacha_daily_max_count: int = 0
    quest_skip_max_count_at_once: int = 0

    weapon_limit_break_available_count: int = 0


def _parse_int32(text: object) -> int:
    if not isinstance(text, str) or not _DECIMAL.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT32_MIN <= value <= _INT32_MAX else 0


def load_game_config(source: TableSource) -> GameConfig:
    """Load the config table; missing or malformed values become 0."""
    values = {row.get("ConfigKey", ""): row.get("Value", "") for row in source.read("EntityMConfigTable.json")}
    return GameConfig(
        **{f.name: _parse_int32(values[f.name.upper()]) for f in fields(GameConfig) if f.name.upper() in values}
    )