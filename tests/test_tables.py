import json

import pytest

from masterdata.tables import (
    MasterDataError,
    ParameterMapRow,
    TableSource,
    build_exp_thresholds,
    load_parameter_map,
)


def _source(tmp_path, **tables):
    for name, rows in tables.items():
        (tmp_path / name).write_text(json.dumps(rows), encoding="utf-8")
    return TableSource(tmp_path)


def test_read_returns_records(tmp_path):
    rows = [{"A": 1, "B": "x"}, {"A": 2, "B": "y"}]
    source = _source(tmp_path, **{"T.json": rows})
    assert source.read("T.json") == rows


def test_read_missing_table(tmp_path):
    with pytest.raises(MasterDataError):
        TableSource(tmp_path).read("Missing.json")


def test_read_invalid_json(tmp_path):
    (tmp_path / "Bad.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(MasterDataError):
        TableSource(tmp_path).read("Bad.json")


def test_read_rejects_non_array(tmp_path):
    source = _source(tmp_path, **{"Obj.json": {"A": 1}})
    with pytest.raises(MasterDataError):
        source.read("Obj.json")


def test_load_parameter_map(tmp_path):
    source = _source(
        tmp_path,
        EntityMNumericalParameterMapTable_json=[],
        **{
            "EntityMNumericalParameterMapTable.json": [
                {"NumericalParameterMapId": 7, "ParameterKey": 2, "ParameterValue": 40}
            ]
        },
    )
    assert load_parameter_map(source) == [ParameterMapRow(7, 2, 40)]


def test_build_exp_thresholds_indexes_by_key():
    rows = [
        ParameterMapRow(1, 1, 10),
        ParameterMapRow(1, 3, 30),
        ParameterMapRow(2, 9, 99),
    ]
    thresholds = build_exp_thresholds(rows, 1)
    assert len(thresholds) == 4
    assert thresholds[1] == 10
    assert thresholds[3] == 30
    assert thresholds[0] == 0 and thresholds[2] == 0


def test_build_exp_thresholds_unknown_map():
    assert build_exp_thresholds([ParameterMapRow(1, 2, 5)], 42) == [0]