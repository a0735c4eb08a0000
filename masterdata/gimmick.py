"""Gimmick sequence schedules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Container

from .conditions import ConditionResolver
from .tables import TableSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GimmickSequenceKey:
    gimmick_sequence_schedule_id: int
    gimmick_sequence_id: int


@dataclass(frozen=True)
class _ScheduleEntry:
    schedule_id: int
    start_datetime: int
    end_datetime: int
    first_sequence_id: int
    required_quest_id: int = 0  # 0 means always active


@dataclass
class GimmickCatalog:
    schedules: list[_ScheduleEntry] = field(default_factory=list)

    def active_schedule_keys(self, cleared_quest_ids: Container[int], now_millis: int) -> list[GimmickSequenceKey]:
        """Return the first sequence of every schedule open now and released to the user."""
        return [
            GimmickSequenceKey(s.schedule_id, s.first_sequence_id)
            for s in self.schedules
            if s.start_datetime <= now_millis <= s.end_datetime
            and (s.required_quest_id == 0 or s.required_quest_id in cleared_quest_ids)
        ]


def load_gimmick_catalog(source: TableSource, resolver: ConditionResolver) -> GimmickCatalog:
    entries = []
    for record in source.read("EntityMGimmickSequenceScheduleTable.json"):
        condition_id = int(record.get("ReleaseEvaluateConditionId", 0))
        quest_id = resolver.required_quest_id(condition_id) if condition_id != 0 else None
        entries.append(
            _ScheduleEntry(
                schedule_id=int(record.get("GimmickSequenceScheduleId", 0)),
                start_datetime=int(record.get("StartDatetime", 0)),
                end_datetime=int(record.get("EndDatetime", 0)),
                first_sequence_id=int(record.get("FirstGimmickSequenceId", 0)),
                required_quest_id=quest_id if quest_id is not None else 0,
            )
        )
    logger.info("gimmick catalog loaded: %d schedules", len(entries))
    return GimmickCatalog(entries)