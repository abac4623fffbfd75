# ABOUTME: Converts participant records from the persistence layer into student snapshots.
# ABOUTME: Reproduces the booking site's status filters and listing orders in pandas.

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd

from .errors import InvalidSnapshot
from .schemas import StudentSnapshot

logger = logging.getLogger(__name__)

SNAPSHOT_COLUMNS = [
    "student_id",
    "last_session_date",
    "enrol_date",
    "slot_count",
    "activity_count",
    "completions",
]
STATUS_COLUMNS = ["enrol_status", "on_hold", "graduated_date"]
DASHBOARD_COLUMNS = ["lessons_complete", "has_active_posts", "booked", "last_session_date", "enrol_date"]
PARTICIPANT_FILTERS = ("active", "onhold", "suspended", "graduates", "any")

ENROL_ACTIVE = 0
ENROL_SUSPENDED = 1


def _require_columns(df: pd.DataFrame, columns: List[str]) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise InvalidSnapshot(f"Participant records missing columns: {', '.join(missing)}.")


def _to_utc(values: pd.Series) -> pd.Series:
    """Parse datetimes or Unix seconds; zero and empty values become NaT."""

    if pd.api.types.is_datetime64_any_dtype(values):
        parsed = pd.to_datetime(values, utc=True)
    elif pd.api.types.is_numeric_dtype(values):
        parsed = pd.to_datetime(values.where(values > 0), unit="s", utc=True)
    else:
        parsed = pd.to_datetime(values, utc=True, errors="coerce")
    return parsed


def compute_wait_date(last_session_date: pd.Series, enrol_date: pd.Series) -> pd.Series:
    """
    Date each student started waiting for their next session.

    Students who have not flown yet wait from their enrolment date.
    """

    last = _to_utc(last_session_date)
    enrolled = _to_utc(enrol_date)
    return last.fillna(enrolled)


def snapshots_from_frame(df: pd.DataFrame, now: Optional[datetime] = None) -> List[StudentSnapshot]:
    """
    Build one StudentSnapshot per participant row.

    ``recency_days`` counts whole days between the wait date and ``now``.
    """

    _require_columns(df, SNAPSHOT_COLUMNS)
    if df.empty:
        return []

    now_ts = pd.Timestamp(now or datetime.now(timezone.utc))
    if now_ts.tzinfo is None:
        now_ts = now_ts.tz_localize("UTC")

    wait_dates = compute_wait_date(df["last_session_date"], df["enrol_date"])

    snapshots: List[StudentSnapshot] = []
    for (_, row), wait_date in zip(df.iterrows(), wait_dates):
        student_id = str(row["student_id"])
        if pd.isna(wait_date):
            raise InvalidSnapshot(f"Student {student_id} has neither a last session nor an enrolment date.")

        recency_days = (now_ts - wait_date).days
        if recency_days < 0:
            logger.warning("Student %s has a wait date after %s; treating recency as 0 days", student_id, now_ts)
            recency_days = 0

        counters = {}
        for column in ("slot_count", "activity_count", "completions"):
            value = row[column]
            if pd.isna(value):
                raise InvalidSnapshot(f"Student {student_id} has no value for '{column}'.")
            counters[column] = int(value)

        snapshots.append(StudentSnapshot(student_id=student_id, recency_days=int(recency_days), **counters))

    logger.debug("Built %d snapshots as of %s", len(snapshots), now_ts)
    return snapshots


def filter_participants(df: pd.DataFrame, status: str = "active", include_on_hold: bool = False) -> pd.DataFrame:
    """
    Select participants matching a dashboard filter.

    - active: enrolled, not graduated, and not on hold unless ``include_on_hold``
    - onhold: enrolled, not graduated, on hold
    - suspended: enrolment suspended
    - graduates: enrolled and either graduated or in the graduates group
      (optional ``in_graduates_group`` column)
    - any: every row
    """

    normalized = status.strip().lower()
    if normalized not in PARTICIPANT_FILTERS:
        raise ValueError(f"Unsupported filter '{status}'. Expected one of: {', '.join(PARTICIPANT_FILTERS)}.")
    if normalized == "any":
        return df.copy()

    _require_columns(df, STATUS_COLUMNS)
    enrolled = df["enrol_status"] == ENROL_ACTIVE
    graduated = _to_utc(df["graduated_date"]).notna()
    on_hold = df["on_hold"].fillna(False).astype(bool)

    if normalized == "active":
        mask = enrolled & ~graduated
        if not include_on_hold:
            mask &= ~on_hold
    elif normalized == "onhold":
        mask = enrolled & ~graduated & on_hold
    elif normalized == "suspended":
        mask = df["enrol_status"] == ENROL_SUSPENDED
    else:
        in_group = False
        if "in_graduates_group" in df.columns:
            in_group = df["in_graduates_group"].fillna(False).astype(bool)
        mask = enrolled & (graduated | in_group)

    return df[mask].copy()


def order_for_dashboard(df: pd.DataFrame, requires_completion: bool = True) -> pd.DataFrame:
    """
    Order students the way the instructor dashboard lists them.

    Students who finished their lessons come first (when the course requires
    lesson completion), then those with posted availability, then those already
    booked, then the longest-waiting.
    """

    _require_columns(df, DASHBOARD_COLUMNS)
    ordered = df.copy()
    ordered["_wait_date"] = compute_wait_date(ordered["last_session_date"], ordered["enrol_date"])

    keys = ["has_active_posts", "booked", "_wait_date"]
    ascending = [False, False, True]
    if requires_completion:
        keys.insert(0, "lessons_complete")
        ascending.insert(0, False)

    for col in ("lessons_complete", "has_active_posts", "booked"):
        ordered[col] = ordered[col].fillna(False).astype(bool)

    ordered = ordered.sort_values(keys, ascending=ascending, kind="mergesort", na_position="last")
    return ordered.drop(columns="_wait_date")


def order_suspended(df: pd.DataFrame) -> pd.DataFrame:
    """Order suspended students by suspension date, then newest student id first."""

    _require_columns(df, ["student_id", "suspend_date"])
    ordered = df.copy()
    ordered["_suspend_date"] = _to_utc(ordered["suspend_date"])
    ordered = ordered.sort_values(
        ["_suspend_date", "student_id"], ascending=[True, False], kind="mergesort", na_position="last"
    )
    return ordered.drop(columns="_suspend_date")
