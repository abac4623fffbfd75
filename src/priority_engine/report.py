# ABOUTME: Assembles the instructor booking queue from ranked students and wait warnings.
# ABOUTME: Exposes sequence numbers, score breakdown tooltips, and a DataFrame export.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import pandas as pd

from src.booking_common.config import default_wait_config
from src.booking_common.schemas import PriorityScore, StudentSnapshot, WaitConfig, WaitWarningLevel

from .ranking import Ranker
from .scoring import ScoreCalculator
from .wait_warning import classify

QUEUE_COLUMNS = [
    "sequence",
    "student_id",
    "student_name",
    "score",
    "days_since_last",
    "slot_count",
    "activity_count",
    "completions",
    "overdue_warning",
    "late_warning",
]


@dataclass(frozen=True)
class QueueEntry:
    sequence: int
    snapshot: StudentSnapshot
    priority: PriorityScore
    warning: WaitWarningLevel

    @property
    def overdue_warning(self) -> bool:
        return self.warning == WaitWarningLevel.OVERDUE

    @property
    def late_warning(self) -> bool:
        return self.warning == WaitWarningLevel.LATE

    def tooltip(self) -> str:
        """Explain how the sequence position was reached."""
        return (
            f"Score: {self.priority.score:.2f}\n"
            f"Recency: {self.snapshot.recency_days} days\n"
            f"Slots: {self.snapshot.slot_count}\n"
            f"Activity: {self.snapshot.activity_count}\n"
            f"Completions: {self.snapshot.completions}"
        )


@dataclass(frozen=True)
class BookingQueue:
    entries: List[QueueEntry]
    average_wait: int
    wait_config: WaitConfig

    def __len__(self) -> int:
        return len(self.entries)


def build_booking_queue(
    snapshots: Sequence[StudentSnapshot],
    calculator: Optional[ScoreCalculator] = None,
    wait_config: Optional[WaitConfig] = None,
) -> BookingQueue:
    """
    Rank students and flag overdue or late waits.

    Raises EmptyInput when there are no students to queue.
    """

    wait_config = wait_config or default_wait_config()
    result = Ranker(calculator).rank_with_wait(snapshots)

    entries = [
        QueueEntry(
            sequence=position,
            snapshot=ranked.snapshot,
            priority=ranked.priority,
            warning=classify(ranked.snapshot.recency_days, wait_config),
        )
        for position, ranked in enumerate(result.entries, start=1)
    ]
    return BookingQueue(entries=entries, average_wait=result.average_wait, wait_config=wait_config)


def queue_to_frame(queue: BookingQueue, names: Optional[Mapping[str, str]] = None) -> pd.DataFrame:
    names = names or {}
    rows = []
    for entry in queue.entries:
        snapshot = entry.snapshot
        rows.append(
            {
                "sequence": entry.sequence,
                "student_id": snapshot.student_id,
                "student_name": names.get(snapshot.student_id, ""),
                "score": entry.priority.score,
                "days_since_last": snapshot.recency_days,
                "slot_count": snapshot.slot_count,
                "activity_count": snapshot.activity_count,
                "completions": snapshot.completions,
                "overdue_warning": entry.overdue_warning,
                "late_warning": entry.late_warning,
            }
        )

    if not rows:
        return pd.DataFrame(columns=QUEUE_COLUMNS)
    return pd.DataFrame(rows, columns=QUEUE_COLUMNS)
