# ABOUTME: Exposes the booking priority engine: scoring, ranking, and wait warnings.
# ABOUTME: Everything here is pure computation over already-fetched student snapshots.

from .ranking import RankedStudent, Ranker, RankingResult, average_wait, rank
from .report import BookingQueue, QueueEntry, build_booking_queue, queue_to_frame
from .scoring import ScoreCalculator
from .wait_warning import WaitWarningClassifier, classify

__all__ = [
    "BookingQueue",
    "QueueEntry",
    "RankedStudent",
    "Ranker",
    "RankingResult",
    "ScoreCalculator",
    "WaitWarningClassifier",
    "average_wait",
    "build_booking_queue",
    "classify",
    "queue_to_frame",
    "rank",
]
