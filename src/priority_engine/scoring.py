# ABOUTME: Scores students for booking precedence from their snapshot counters.
# ABOUTME: Applies configurable signed weights so the formula stays a pure function.

from __future__ import annotations

from typing import Dict, Optional

from src.booking_common.errors import InvalidSnapshot
from src.booking_common.schemas import PriorityScore, ScoreWeights, StudentSnapshot

COUNTER_FIELDS = {
    "recency": "recency_days",
    "slots": "slot_count",
    "activity": "activity_count",
    "completions": "completions",
}


def validate_snapshot(snapshot: StudentSnapshot) -> None:
    """Raise InvalidSnapshot unless every counter is a non-negative integer."""

    if snapshot.student_id is None or str(snapshot.student_id) == "":
        raise InvalidSnapshot("Snapshot is missing a student_id.")

    for attr in COUNTER_FIELDS.values():
        value = getattr(snapshot, attr)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidSnapshot(f"Student {snapshot.student_id}: {attr} must be an integer, got {value!r}.")
        if value < 0:
            raise InvalidSnapshot(f"Student {snapshot.student_id}: {attr} must be >= 0, got {value}.")


class ScoreCalculator:
    """
    Weighted sum over the four snapshot counters.

    With the default weights a longer wait raises the score while posted slots,
    recent activity, and completed lessons lower it.
    """

    def __init__(self, weights: Optional[ScoreWeights] = None):
        self.weights = weights or ScoreWeights()

    def score(self, snapshot: StudentSnapshot) -> PriorityScore:
        validate_snapshot(snapshot)

        components: Dict[str, float] = {}
        for name, attr in COUNTER_FIELDS.items():
            components[name] = float(getattr(self.weights, name)) * getattr(snapshot, attr)

        return PriorityScore(score=sum(components.values()), components=components)
