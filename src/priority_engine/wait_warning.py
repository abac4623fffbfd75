# ABOUTME: Flags students whose wait since their last session is overdue or late.
# ABOUTME: Thresholds are multiples of the configured base wait in days.

from __future__ import annotations

from typing import Optional

from src.booking_common.config import default_wait_config
from src.booking_common.errors import InvalidSnapshot
from src.booking_common.schemas import WaitConfig, WaitWarningLevel


def classify(recency_days: int, config: WaitConfig) -> WaitWarningLevel:
    """
    Classify a wait against ``config``.

    OVERDUE covers [base * overdue, base * late); LATE starts at base * late.
    """

    if isinstance(recency_days, bool) or not isinstance(recency_days, int):
        raise InvalidSnapshot(f"recency_days must be an integer, got {recency_days!r}.")
    if recency_days < 0:
        raise InvalidSnapshot(f"recency_days must be >= 0, got {recency_days}.")

    if recency_days >= config.late_after:
        return WaitWarningLevel.LATE
    if recency_days >= config.overdue_after:
        return WaitWarningLevel.OVERDUE
    return WaitWarningLevel.NONE


class WaitWarningClassifier:
    def __init__(self, config: Optional[WaitConfig] = None):
        self.config = config or default_wait_config()

    def classify(self, recency_days: int) -> WaitWarningLevel:
        return classify(recency_days, self.config)
