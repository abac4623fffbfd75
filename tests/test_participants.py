# ABOUTME: Tests conversion of participant records into student snapshots.
# ABOUTME: Covers wait-date fallback, status filters, and dashboard ordering.

from datetime import datetime, timezone

import pandas as pd
import pytest

from src.booking_common.errors import InvalidSnapshot
from src.booking_common.participants import (
    compute_wait_date,
    filter_participants,
    order_for_dashboard,
    order_suspended,
    snapshots_from_frame,
)

NOW = datetime(2024, 3, 31, tzinfo=timezone.utc)
NOW_UNIX = 1711843200
DAY = 86400


def _records():
    return pd.DataFrame(
        {
            "student_id": ["s1", "s2", "s3"],
            "last_session_date": ["2024-03-21", None, "2024-04-02"],
            "enrol_date": ["2024-01-01", "2024-03-01", "2024-01-15"],
            "slot_count": [2, 0, 5],
            "activity_count": [3, 1, 0],
            "completions": [4, 0, 2],
        }
    )


def test_snapshots_from_frame_computes_recency():
    snapshots = snapshots_from_frame(_records(), now=NOW)

    by_id = {s.student_id: s for s in snapshots}
    assert by_id["s1"].recency_days == 10
    assert by_id["s1"].slot_count == 2
    assert by_id["s1"].completions == 4
    # never flown: waits from enrolment
    assert by_id["s2"].recency_days == 30
    # future session clamps to zero
    assert by_id["s3"].recency_days == 0


def test_snapshots_accept_unix_seconds():
    df = pd.DataFrame(
        {
            "student_id": [101, 102],
            "last_session_date": [NOW_UNIX - 10 * DAY, 0],
            "enrol_date": [NOW_UNIX - 100 * DAY, NOW_UNIX - 5 * DAY],
            "slot_count": [1, 1],
            "activity_count": [0, 0],
            "completions": [0, 0],
        }
    )
    snapshots = snapshots_from_frame(df, now=NOW)

    assert [s.student_id for s in snapshots] == ["101", "102"]
    assert [s.recency_days for s in snapshots] == [10, 5]


def test_snapshots_require_a_wait_date():
    df = _records()
    df.loc[1, "enrol_date"] = None
    with pytest.raises(InvalidSnapshot):
        snapshots_from_frame(df, now=NOW)


def test_snapshots_require_columns():
    with pytest.raises(InvalidSnapshot):
        snapshots_from_frame(_records().drop(columns=["slot_count"]), now=NOW)


def test_compute_wait_date_prefers_last_session():
    wait = compute_wait_date(pd.Series(["2024-02-01", None]), pd.Series(["2024-01-01", "2024-01-10"]))
    assert wait.iloc[0] == pd.Timestamp("2024-02-01", tz="UTC")
    assert wait.iloc[1] == pd.Timestamp("2024-01-10", tz="UTC")


def _status_records():
    return pd.DataFrame(
        {
            "student_id": ["active", "held", "suspended", "graduate"],
            "enrol_status": [0, 0, 1, 0],
            "on_hold": [False, True, False, False],
            "graduated_date": [None, None, None, "2024-02-01"],
        }
    )


@pytest.mark.parametrize(
    "status, include_on_hold, expected",
    [
        ("active", False, ["active"]),
        ("active", True, ["active", "held"]),
        ("onhold", False, ["held"]),
        ("suspended", False, ["suspended"]),
        ("graduates", False, ["graduate"]),
        ("any", False, ["active", "held", "suspended", "graduate"]),
    ],
)
def test_filter_participants(status, include_on_hold, expected):
    filtered = filter_participants(_status_records(), status=status, include_on_hold=include_on_hold)
    assert filtered["student_id"].tolist() == expected


def test_filter_participants_unknown_status():
    with pytest.raises(ValueError):
        filter_participants(_status_records(), status="retired")


def _dashboard_records():
    return pd.DataFrame(
        {
            "student_id": ["waiting", "posted", "booked", "ready", "longest"],
            "lessons_complete": [False, False, False, True, False],
            "has_active_posts": [False, True, False, False, False],
            "booked": [False, False, True, False, False],
            "last_session_date": ["2024-03-20", "2024-03-25", "2024-03-01", "2024-03-28", "2024-02-01"],
            "enrol_date": ["2024-01-01"] * 5,
        }
    )


def test_order_for_dashboard_with_completion():
    ordered = order_for_dashboard(_dashboard_records())
    assert ordered["student_id"].tolist() == ["ready", "posted", "booked", "longest", "waiting"]


def test_order_for_dashboard_without_completion():
    ordered = order_for_dashboard(_dashboard_records(), requires_completion=False)
    assert ordered["student_id"].tolist() == ["posted", "booked", "longest", "waiting", "ready"]
    assert "_wait_date" not in ordered.columns


def test_graduates_include_group_members():
    df = _status_records()
    df["in_graduates_group"] = [False, False, False, False]
    df.loc[len(df)] = {
        "student_id": "group_only",
        "enrol_status": 0,
        "on_hold": False,
        "graduated_date": None,
        "in_graduates_group": True,
    }

    filtered = filter_participants(df, status="graduates")
    assert filtered["student_id"].tolist() == ["graduate", "group_only"]
    # group membership alone does not remove a student from the active list
    assert "group_only" in filter_participants(df, status="active")["student_id"].tolist()


def test_order_suspended_by_date_then_id_descending():
    df = pd.DataFrame(
        {
            "student_id": [3, 7, 5, 9],
            "suspend_date": ["2024-02-01", "2024-01-15", "2024-01-15", "2024-03-01"],
        }
    )
    ordered = order_suspended(df)
    assert ordered["student_id"].tolist() == [7, 5, 3, 9]
