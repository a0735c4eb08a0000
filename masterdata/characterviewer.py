"""Character viewer fields and when they are released."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Container

from .conditions import ConditionResolver
from .tables import TableSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ViewerField:
    field_id: int
    required_quest_id: int = 0  # 0 means always released


@dataclass
class CharacterViewerCatalog:
    fields: list[_ViewerField] = field(default_factory=list)

    def released_field_ids(self, cleared_quest_ids: Container[int]) -> list[int]:
        """Return the ids of fields released given the quests the user cleared."""
        return [
            f.field_id
            for f in self.fields
            if f.required_quest_id == 0 or f.required_quest_id in cleared_quest_ids
        ]


def load_character_viewer_catalog(source: TableSource, resolver: ConditionResolver) -> CharacterViewerCatalog:
    fields = []
    for record in source.read("EntityMCharacterViewerFieldTable.json"):
        quest_id = resolver.required_quest_id(int(record.get("ReleaseEvaluateConditionId", 0)))
        fields.append(
            _ViewerField(
                field_id=int(record.get("CharacterViewerFieldId", 0)),
                required_quest_id=quest_id if quest_id is not None else 0,
            )
        )
    fields.sort(key=lambda f: f.field_id)
    logger.info("character viewer catalog loaded: %d fields", len(fields))
    return CharacterViewerCatalog(fields)