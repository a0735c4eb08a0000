"""Resolution of release conditions to the quest that must be cleared."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tables import TableSource

DEFAULT_GROUP_INDEX = 1


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 0x80000000 else value


@dataclass
class ConditionResolver:
    required_quest_by_condition_id: dict[int, int] = field(default_factory=dict)

    def required_quest_id(self, condition_id: int) -> int | None:
        """Return the quest a condition requires cleared, or None."""
        return self.required_quest_by_condition_id.get(condition_id)


def load_condition_resolver(
    source: TableSource, quest_clear_function_type: int, id_contain_evaluate_type: int
) -> ConditionResolver:
    """Load evaluate conditions that require clearing a specific quest."""
    conditions = source.read("EntityMEvaluateConditionTable.json")
    value_groups = source.read("EntityMEvaluateConditionValueGroupTable.json")

    values = {
        (int(vg.get("EvaluateConditionValueGroupId", 0)), int(vg.get("GroupIndex", 0))): int(
            vg.get("Value", 0)
        )
        for vg in value_groups
    }

    resolved: dict[int, int] = {}
    for cond in conditions:
        if (
            int(cond.get("EvaluateConditionFunctionType", 0)) == quest_clear_function_type
            and int(cond.get("EvaluateConditionEvaluateType", 0)) == id_contain_evaluate_type
        ):
            key = (int(cond.get("EvaluateConditionValueGroupId", 0)), DEFAULT_GROUP_INDEX)
            if key in values:
                resolved[int(cond.get("EvaluateConditionId", 0))] = _to_int32(values[key])
    return ConditionResolver(resolved)