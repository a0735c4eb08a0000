"""Big hunt bosses, schedules, grades and score rewards."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .tables import TableSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BigHuntBossQuestRow:
    big_hunt_boss_quest_id: int
    big_hunt_boss_id: int
    big_hunt_quest_group_id: int
    big_hunt_score_reward_group_schedule_id: int
    daily_challenge_count: int


@dataclass(frozen=True)
class BigHuntQuestRow:
    big_hunt_quest_id: int
    quest_id: int
    big_hunt_quest_score_coefficient_id: int


@dataclass(frozen=True)
class BigHuntBossRow:
    big_hunt_boss_id: int
    big_hunt_boss_grade_group_id: int
    attribute_type: int


@dataclass(frozen=True)
class GradeThreshold:
    necessary_score: int
    asset_grade_icon_id: int


@dataclass(frozen=True)
class ScoreRewardScheduleEntry:
    big_hunt_score_reward_group_id: int
    start_datetime: int


@dataclass(frozen=True)
class ScoreRewardThreshold:
    necessary_score: int
    big_hunt_reward_group_id: int


@dataclass(frozen=True)
class RewardItem:
    possession_type: int
    possession_id: int
    count: int


@dataclass(frozen=True)
class BigHuntWeeklyRewardKey:
    schedule_id: int
    attribute_type: int


def _resolve_schedule(entries: Sequence[ScoreRewardScheduleEntry], now_millis: int) -> int:
    """Pick the latest-started entry; entries are sorted by start, newest first."""
    for entry in entries:
        if now_millis >= entry.start_datetime:
            return entry.big_hunt_score_reward_group_id
    if entries:
        return entries[-1].big_hunt_score_reward_group_id
    return 0


@dataclass
class BigHuntCatalog:
    boss_quest_by_id: dict[int, BigHuntBossQuestRow] = field(default_factory=dict)
    quest_by_id: dict[int, BigHuntQuestRow] = field(default_factory=dict)
    score_coefficients: dict[int, int] = field(default_factory=dict)
    boss_by_boss_id: dict[int, BigHuntBossRow] = field(default_factory=dict)
    # Grade group id to thresholds sorted by necessary score, lowest first.
    grade_thresholds: dict[int, list[GradeThreshold]] = field(default_factory=dict)
    active_schedule_id: int = 0
    # Schedule id to entries sorted by start time, newest first.
    score_reward_schedules: dict[int, list[ScoreRewardScheduleEntry]] = field(default_factory=dict)
    # Score reward group id to thresholds sorted by necessary score, lowest first.
    score_reward_thresholds: dict[int, list[ScoreRewardThreshold]] = field(default_factory=dict)
    reward_items: dict[int, list[RewardItem]] = field(default_factory=dict)
    weekly_reward_schedules: dict[BigHuntWeeklyRewardKey, list[ScoreRewardScheduleEntry]] = field(
        default_factory=dict
    )

    def resolve_active_score_reward_group_id(self, schedule_id: int, now_millis: int) -> int:
        """Return the score reward group active at ``now_millis``, or 0."""
        return _resolve_schedule(self.score_reward_schedules.get(schedule_id, ()), now_millis)

    def resolve_active_weekly_reward_group_id(self, key: BigHuntWeeklyRewardKey, now_millis: int) -> int:
        """Return the weekly reward group active at ``now_millis``, or 0."""
        return _resolve_schedule(self.weekly_reward_schedules.get(key, ()), now_millis)

    def resolve_grade_icon_id(self, boss_id: int, score: int) -> int:
        """Return the icon of the highest grade reached by ``score``, or 0."""
        boss = self.boss_by_boss_id.get(boss_id)
        if boss is None:
            return 0
        icon_id = 0
        for threshold in self.grade_thresholds.get(boss.big_hunt_boss_grade_group_id, ()):
            if score < threshold.necessary_score:
                break
            icon_id = threshold.asset_grade_icon_id
        return icon_id

    def collect_new_rewards(self, score_reward_group_id: int, old_max: int, new_max: int) -> list[RewardItem]:
        """Return rewards for thresholds above ``old_max`` and up to ``new_max``."""
        items: list[RewardItem] = []
        for threshold in self.score_reward_thresholds.get(score_reward_group_id, ()):
            if old_max < threshold.necessary_score <= new_max:
                items.extend(self.reward_items.get(threshold.big_hunt_reward_group_id, ()))
        return items


def _pick_active_schedule(rows: list[dict], now_millis: int) -> int:
    active = 0
    latest_end = 0
    for row in rows:
        schedule_id = int(row.get("BigHuntScheduleId", 0))
        start = int(row.get("ChallengeStartDatetime", 0))
        end = int(row.get("ChallengeEndDatetime", 0))
        if start <= now_millis <= end:
            return schedule_id
        if end > latest_end:
            latest_end = end
            active = schedule_id
    return active


def load_big_hunt_catalog(source: TableSource, now_millis: int) -> BigHuntCatalog:
    """Load all big hunt tables; the active schedule is chosen for ``now_millis``."""
    catalog = BigHuntCatalog()

    for r in source.read("EntityMBigHuntBossQuestTable.json"):
        row = BigHuntBossQuestRow(
            big_hunt_boss_quest_id=int(r.get("BigHuntBossQuestId", 0)),
            big_hunt_boss_id=int(r.get("BigHuntBossId", 0)),
            big_hunt_quest_group_id=int(r.get("BigHuntQuestGroupId", 0)),
            big_hunt_score_reward_group_schedule_id=int(r.get("BigHuntScoreRewardGroupScheduleId", 0)),
            daily_challenge_count=int(r.get("DailyChallengeCount", 0)),
        )
        catalog.boss_quest_by_id[row.big_hunt_boss_quest_id] = row

    for r in source.read("EntityMBigHuntQuestTable.json"):
        quest = BigHuntQuestRow(
            big_hunt_quest_id=int(r.get("BigHuntQuestId", 0)),
            quest_id=int(r.get("QuestId", 0)),
            big_hunt_quest_score_coefficient_id=int(r.get("BigHuntQuestScoreCoefficientId", 0)),
        )
        catalog.quest_by_id[quest.big_hunt_quest_id] = quest

    for r in source.read("EntityMBigHuntQuestScoreCoefficientTable.json"):
        catalog.score_coefficients[int(r.get("BigHuntQuestScoreCoefficientId", 0))] = int(
            r.get("ScoreDifficultBonusPermil", 0)
        )

    for r in source.read("EntityMBigHuntBossTable.json"):
        boss = BigHuntBossRow(
            big_hunt_boss_id=int(r.get("BigHuntBossId", 0)),
            big_hunt_boss_grade_group_id=int(r.get("BigHuntBossGradeGroupId", 0)),
            attribute_type=int(r.get("AttributeType", 0)),
        )
        catalog.boss_by_boss_id[boss.big_hunt_boss_id] = boss

    for r in source.read("EntityMBigHuntBossGradeGroupTable.json"):
        catalog.grade_thresholds.setdefault(int(r.get("BigHuntBossGradeGroupId", 0)), []).append(
            GradeThreshold(
                necessary_score=int(r.get("NecessaryScore", 0)),
                asset_grade_icon_id=int(r.get("AssetGradeIconId", 0)),
            )
        )
    for thresholds in catalog.grade_thresholds.values():
        thresholds.sort(key=lambda t: t.necessary_score)

    catalog.active_schedule_id = _pick_active_schedule(
        source.read("EntityMBigHuntScheduleTable.json"), now_millis
    )

    for r in source.read("EntityMBigHuntScoreRewardGroupScheduleTable.json"):
        catalog.score_reward_schedules.setdefault(int(r.get("BigHuntScoreRewardGroupScheduleId", 0)), []).append(
            ScoreRewardScheduleEntry(
                big_hunt_score_reward_group_id=int(r.get("BigHuntScoreRewardGroupId", 0)),
                start_datetime=int(r.get("StartDatetime", 0)),
            )
        )
    for entries in catalog.score_reward_schedules.values():
        entries.sort(key=lambda e: e.start_datetime, reverse=True)

    for r in source.read("EntityMBigHuntScoreRewardGroupTable.json"):
        catalog.score_reward_thresholds.setdefault(int(r.get("BigHuntScoreRewardGroupId", 0)), []).append(
            ScoreRewardThreshold(
                necessary_score=int(r.get("NecessaryScore", 0)),
                big_hunt_reward_group_id=int(r.get("BigHuntRewardGroupId", 0)),
            )
        )
    for reward_thresholds in catalog.score_reward_thresholds.values():
        reward_thresholds.sort(key=lambda t: t.necessary_score)

    for r in source.read("EntityMBigHuntRewardGroupTable.json"):
        catalog.reward_items.setdefault(int(r.get("BigHuntRewardGroupId", 0)), []).append(
            RewardItem(
                possession_type=int(r.get("PossessionType", 0)),
                possession_id=int(r.get("PossessionId", 0)),
                count=int(r.get("Count", 0)),
            )
        )

    for r in source.read("EntityMBigHuntWeeklyAttributeScoreRewardGroupScheduleTable.json"):
        key = BigHuntWeeklyRewardKey(
            schedule_id=int(r.get("BigHuntWeeklyAttributeScoreRewardGroupScheduleId", 0)),
            attribute_type=int(r.get("AttributeType", 0)),
        )
        catalog.weekly_reward_schedules.setdefault(key, []).append(
            ScoreRewardScheduleEntry(
                big_hunt_score_reward_group_id=int(r.get("BigHuntScoreRewardGroupId", 0)),
                start_datetime=int(r.get("StartDatetime", 0)),
            )
        )
    for entries in catalog.weekly_reward_schedules.values():
        entries.sort(key=lambda e: e.start_datetime, reverse=True)

    logger.info(
        "big hunt catalog loaded: %d boss quests, %d quests, %d bosses, %d score coefficients, "
        "%d reward groups, schedule=%d",
        len(catalog.boss_quest_by_id),
        len(catalog.quest_by_id),
        len(catalog.boss_by_boss_id),
        len(catalog.score_coefficients),
        len(catalog.reward_items),
        catalog.active_schedule_id,
    )
    return catalog