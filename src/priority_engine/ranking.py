# ABOUTME: Orders active students by priority score to decide who is booked next.
# ABOUTME: Also computes the average wait across the ranked cohort.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from src.booking_common.errors import EmptyInput
from src.booking_common.schemas import PriorityScore, StudentSnapshot

from .scoring import ScoreCalculator

logger = logging.getLogger(__name__)


class RankedStudent(NamedTuple):
    snapshot: StudentSnapshot
    priority: PriorityScore


@dataclass(frozen=True)
class RankingResult:
    entries: List[RankedStudent]
    average_wait: int


class Ranker:
    """Ranks students by descending score; equal scores keep their input order."""

    def __init__(self, calculator: Optional[ScoreCalculator] = None):
        self.calculator = calculator or ScoreCalculator()

    def rank(self, snapshots: Sequence[StudentSnapshot]) -> List[RankedStudent]:
        snapshots = list(snapshots)
        if not snapshots:
            raise EmptyInput("Cannot rank an empty set of students.")

        scored = [RankedStudent(snapshot, self.calculator.score(snapshot)) for snapshot in snapshots]
        # sorted() is stable, including with reverse=True.
        ranked = sorted(scored, key=lambda entry: entry.priority.score, reverse=True)
        logger.debug("Ranked %d students; top score %.2f", len(ranked), ranked[0].priority.score)
        return ranked

    def average_wait(self, snapshots: Sequence[StudentSnapshot]) -> int:
        return average_wait(snapshots)

    def rank_with_wait(self, snapshots: Sequence[StudentSnapshot]) -> RankingResult:
        snapshots = list(snapshots)
        entries = self.rank(snapshots)
        return RankingResult(entries=entries, average_wait=average_wait(snapshots))


def average_wait(snapshots: Sequence[StudentSnapshot]) -> int:
    """Mean days since last session across students, rounded up."""

    snapshots = list(snapshots)
    if not snapshots:
        raise EmptyInput("Cannot average the wait of an empty set of students.")
    total_days = sum(snapshot.recency_days for snapshot in snapshots)
    return math.ceil(total_days / len(snapshots))


def rank(snapshots: Sequence[StudentSnapshot], calculator: Optional[ScoreCalculator] = None) -> List[RankedStudent]:
    return Ranker(calculator).rank(snapshots)
