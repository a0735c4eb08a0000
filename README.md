# masterdata

Loaders and lookup catalogs for a role-playing game's master data. Each table is
a JSON file that holds an array of objects, for example `EntityMMaterialTable.json`
or `EntityMQuestTable.json`. The package reads these files from a directory and
builds indexed catalogs that a game server can query.

## Installation

```
pip install .
```

The package needs nothing outside the standard library. To run the tests:

```
pip install .[test]
pytest
```

## Reading tables

Every loader takes a `masterdata.tables.TableSource`, which points at the
directory that holds the JSON tables. `TableSource.read(name)` returns the
records of one table. It raises `MasterDataError` when the file is missing,
cannot be read, is not valid JSON, or is not an array of objects.

```python
from masterdata.tables import TableSource, load_parameter_map, build_exp_thresholds

source = TableSource("assets/master_data")
rows = load_parameter_map(source)
user_exp = build_exp_thresholds(rows, 1)  # list indexed by level
```

Fields that are missing from a record are read as 0 (or `False` / `""` for
boolean and text fields).

## Game constants are parameters

The catalogs hard-code none of the game's enum values. The caller passes them in:

- `load_function_resolver(source, kinds)`: `kinds` maps raw numerical function
  type numbers to `FunctionKind` members. A type that is not mapped gives a
  function that evaluates to 0.
- `load_condition_resolver(source, quest_clear_function_type, id_contain_evaluate_type)`
- `load_costume_catalog(source, materials, functions, enhancement_material_type)`
- `load_weapon_catalog(source, materials, functions, enhancement_material_type)`
- `load_shop_catalog(source, item_shop_group_type, exchange_shop_group_type)`
- `load_big_hunt_catalog(source, now_millis)`: the active schedule is the one
  that contains `now_millis`. If none does, it is the one that ends latest.

## Catalogs

| Module | Loader | Purpose |
| --- | --- | --- |
| `masterdata.materials` | `load_material_catalog` | materials by id and by type |
| `masterdata.numericalfunc` | `load_function_resolver` | cost and level curves; `NumericalFunc.evaluate` uses 32-bit integer arithmetic |
| `masterdata.conditions` | `load_condition_resolver` | release conditions that require clearing a quest |
| `masterdata.config` | `load_game_config` | game-wide configuration values (missing or malformed values become 0) |
| `masterdata.lookups` | `load_consumable_item_catalog`, `load_omikuji_catalog`, `load_login_bonus_catalog`, `load_cage_ornament_catalog`, `load_side_story_catalog` | small id lookups |
| `masterdata.explore` | `load_explore_catalog` | `ExploreCatalog.grade_for_score` |
| `masterdata.rebirth` | `load_character_rebirth_catalog` | character rebirth steps and materials |
| `masterdata.bighunt` | `load_big_hunt_catalog` | schedules, grade icons and newly reached score rewards |
| `masterdata.characterviewer` | `load_character_viewer_catalog` | `released_field_ids(cleared_quest_ids)` |
| `masterdata.gimmick` | `load_gimmick_catalog` | `active_schedule_keys(cleared_quest_ids, now_millis)` |
| `masterdata.companion` | `load_companion_catalog` | companion enhancement gold and material costs |
| `masterdata.costume` | `load_costume_catalog` | costume levelling, awakening and active skills |
| `masterdata.parts` | `load_parts_catalog` | parts level-up rates, prices, sell prices, default main stats |
| `masterdata.shop` | `load_shop_catalog` | shop items, contents, item shop pool and exchange shop cells |
| `masterdata.weapon` | `load_weapon_catalog` | weapon enhancement, evolution, skills, abilities and awakening; weapons without a specific enhance id use their rarity's curves under the id `-rarity` |
| `masterdata.characterboard` | `load_character_board_catalog` | character board panels, costs, effects and abilities |
| `masterdata.quest_rows` | `sorted_scenes`, `sorted_mission_groups`, `sorted_sequences`, `sorted_first_clear_rewards` | quest row types and their orderings |
| `masterdata.quest` | `load_quest_catalog` | quests, scenes, rewards, battle drops, rental quests and exp curves |

## Example

```python
from masterdata.tables import TableSource
from masterdata.numericalfunc import FunctionKind, load_function_resolver
from masterdata.parts import load_parts_catalog
from masterdata.quest import load_quest_catalog

source = TableSource("assets/master_data")
functions = load_function_resolver(source, {1: FunctionKind.LINEAR, 2: FunctionKind.MONOMIAL})
parts = load_parts_catalog(source, functions)
quests = load_quest_catalog(source, parts, functions)

for quest_id in quests.ordered_quest_ids[:5]:
    print(quest_id, quests.scene_ids_by_quest_id.get(quest_id, []))
```

The numbers in the `kinds` mapping above are placeholders. Use the function
type numbers that your tables use.

## What this package does not do

This package only reads tables and answers lookups. It has no server, no
command-line tool, and no storage for player state. Functions that depend on a
player's progress take the set of cleared quest ids as an argument. Gacha
banners and pools, and duplicate-costume exchange, are not covered.