"""Explore minigame catalog and grading."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tables import TableSource


@dataclass(frozen=True)
class ExploreRow:
    explore_id: int
    consume_item_count: int
    reward_lottery_count: int


@dataclass(frozen=True)
class ExploreGradeScoreRow:
    explore_id: int
    necessary_score: int
    explore_grade_id: int


@dataclass
class ExploreCatalog:
    explores: dict[int, ExploreRow] = field(default_factory=dict)
    # Keyed by explore id, sorted by necessary score, highest first.
    grade_scores: dict[int, list[ExploreGradeScoreRow]] = field(default_factory=dict)
    # Grade id to grade icon asset id.
    grade_assets: dict[int, int] = field(default_factory=dict)

    def grade_for_score(self, explore_id: int, score: int) -> int:
        """Return the grade icon asset id for a score, or 0 if none matches."""
        for row in self.grade_scores.get(explore_id, ()):
            if score >= row.necessary_score:
                return self.grade_assets.get(row.explore_grade_id, 0)
        return 0


def load_explore_catalog(source: TableSource) -> ExploreCatalog:
    explores = source.read("EntityMExploreTable.json")
    grade_scores = source.read("EntityMExploreGradeScoreTable.json")
    grade_assets = source.read("EntityMExploreGradeAssetTable.json")

    catalog = ExploreCatalog()
    for record in explores:
        row = ExploreRow(
            explore_id=int(record.get("ExploreId", 0)),
            consume_item_count=int(record.get("ConsumeItemCount", 0)),
            reward_lottery_count=int(record.get("RewardLotteryCount", 0)),
        )
        catalog.explores[row.explore_id] = row

    for record in grade_scores:
        row = ExploreGradeScoreRow(
            explore_id=int(record.get("ExploreId", 0)),
            necessary_score=int(record.get("NecessaryScore", 0)),
            explore_grade_id=int(record.get("ExploreGradeId", 0)),
        )
        catalog.grade_scores.setdefault(row.explore_id, []).append(row)
    for rows in catalog.grade_scores.values():
        rows.sort(key=lambda r: r.necessary_score, reverse=True)

    for record in grade_assets:
        catalog.grade_assets[int(record.get("ExploreGradeId", 0))] = int(record.get("AssetGradeIconId", 0))
    return catalog