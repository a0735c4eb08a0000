import json

import pytest

from masterdata.characterviewer import load_character_viewer_catalog
from masterdata.conditions import ConditionResolver
from masterdata.tables import MasterDataError, TableSource


@pytest.fixture
def source(tmp_path):
    rows = [
        {"CharacterViewerFieldId": 30, "ReleaseEvaluateConditionId": 900},
        {"CharacterViewerFieldId": 10, "ReleaseEvaluateConditionId": 0},
        {"CharacterViewerFieldId": 20, "ReleaseEvaluateConditionId": 777},
        {"CharacterViewerFieldId": 40, "ReleaseEvaluateConditionId": 901},
    ]
    (tmp_path / "EntityMCharacterViewerFieldTable.json").write_text(json.dumps(rows), encoding="utf-8")
    return TableSource(tmp_path)


@pytest.fixture
def resolver():
    return ConditionResolver({900: 5001, 901: 5002})


def test_nothing_cleared_releases_unconditional_fields(source, resolver):
    catalog = load_character_viewer_catalog(source, resolver)
    assert catalog.released_field_ids(set()) == [10, 20]


def test_cleared_quest_releases_field_in_id_order(source, resolver):
    catalog = load_character_viewer_catalog(source, resolver)
    assert catalog.released_field_ids({5002}) == [10, 20, 40]
    assert catalog.released_field_ids({5001, 5002}) == [10, 20, 30, 40]


def test_fields_sorted_by_id(source, resolver):
    catalog = load_character_viewer_catalog(source, resolver)
    ids = [f.field_id for f in catalog.fields]
    assert ids == sorted(ids)


def test_unrelated_quests_do_not_release(source, resolver):
    catalog = load_character_viewer_catalog(source, resolver)
    assert catalog.released_field_ids({1, 2, 3}) == [10, 20]


def test_missing_table_raises(tmp_path, resolver):
    with pytest.raises(MasterDataError):
        load_character_viewer_catalog(TableSource(tmp_path), resolver)