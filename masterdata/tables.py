"""Reading master data tables stored as JSON arrays of records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable


class MasterDataError(Exception):
    """Raised when a master data table cannot be read or is malformed."""


class TableSource:
    """A directory holding master data tables, one JSON file per table."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def read(self, name: str) -> list[dict[str, Any]]:
        """Return the records of the table stored in ``name``."""
        path = self.directory / name
        try:
            with path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as exc:
            raise MasterDataError(f"read {name}: table not found") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise MasterDataError(f"read {name}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise MasterDataError(f"read {name}: invalid JSON: {exc}") from exc
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise MasterDataError(f"read {name}: expected an array of objects")
        return data


@dataclass(frozen=True)
class ParameterMapRow:
    numerical_parameter_map_id: int
    parameter_key: int
    parameter_value: int


def load_parameter_map(source: TableSource) -> list[ParameterMapRow]:
    """Load the numerical parameter map table."""
    return [
        ParameterMapRow(
            numerical_parameter_map_id=int(row.get("NumericalParameterMapId", 0)),
            parameter_key=int(row.get("ParameterKey", 0)),
            parameter_value=int(row.get("ParameterValue", 0)),
        )
        for row in source.read("EntityMNumericalParameterMapTable.json")
    ]


def build_exp_thresholds(rows: Iterable[ParameterMapRow], map_id: int) -> list[int]:
    """Return a list indexed by parameter key holding the values of one map."""
    selected = [row for row in rows if row.numerical_parameter_map_id == map_id]
    max_key = max((row.parameter_key for row in selected), default=0)
    thresholds = [0] * (max(max_key, 0) + 1)
    for row in selected:
        if row.parameter_key < 0:
            raise ValueError(f"negative parameter key {row.parameter_key} in map {map_id}")
        thresholds[row.parameter_key] = row.parameter_value
    return thresholds