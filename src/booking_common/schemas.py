# ABOUTME: Defines the data structures shared by scoring, ranking, and warnings.
# ABOUTME: Centralizes student snapshot, priority score, and wait configuration types.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping

from .errors import InvalidConfig


@dataclass(frozen=True)
class StudentSnapshot:
    """Per-student booking signals captured for one scoring pass."""

    student_id: str
    recency_days: int
    slot_count: int
    activity_count: int
    completions: int


@dataclass(frozen=True)
class PriorityScore:
    """Weighted booking priority with the contribution of each signal."""

    score: float
    components: Mapping[str, float] = field(default_factory=dict)


class WaitWarningLevel(IntEnum):
    NONE = 0
    OVERDUE = 1
    LATE = 2


@dataclass(frozen=True)
class ScoreWeights:
    """Signed weights applied to each snapshot counter."""

    recency: float = 1.0
    slots: float = -1.0
    activity: float = -0.5
    completions: float = -1.0

    def __post_init__(self) -> None:
        for name in ("recency", "slots", "activity", "completions"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidConfig(f"Weight '{name}' must be a finite number, got {value!r}.")


@dataclass(frozen=True)
class WaitConfig:
    """
    Thresholds for flagging students who have waited too long for a session.

    A student becomes overdue after ``base_wait_days * overdue_multiplier`` days
    and late after ``base_wait_days * late_multiplier`` days.
    """

    base_wait_days: int
    overdue_multiplier: float
    late_multiplier: float

    def __post_init__(self) -> None:
        if isinstance(self.base_wait_days, bool) or not isinstance(self.base_wait_days, int):
            raise InvalidConfig(f"base_wait_days must be an integer, got {self.base_wait_days!r}.")
        if self.base_wait_days <= 0:
            raise InvalidConfig(f"base_wait_days must be positive, got {self.base_wait_days}.")
        for name in ("overdue_multiplier", "late_multiplier"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfig(f"{name} must be a number, got {value!r}.")
        if self.overdue_multiplier >= self.late_multiplier:
            raise InvalidConfig(
                f"overdue_multiplier ({self.overdue_multiplier}) must be less than "
                f"late_multiplier ({self.late_multiplier})."
            )

    @property
    def overdue_after(self) -> float:
        return self.base_wait_days * self.overdue_multiplier

    @property
    def late_after(self) -> float:
        return self.base_wait_days * self.late_multiplier
