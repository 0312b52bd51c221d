# tests/test_dashboard.py
from datetime import datetime, timedelta, timezone

import pytz

from lifeos.dashboard import countdown, days_until, get_summary, greeting
from lifeos.models import Outcome

IST = pytz.timezone("Asia/Kolkata")
ZONE = "Asia/Kolkata"


def test_countdown_to_end_of_target_day():
    now = IST.localize(datetime(2025, 5, 30, 12, 0, 0))
    left = countdown("2025-06-01", now, ZONE)
    assert left == {"days": 2, "hours": 11, "minutes": 59, "seconds": 59}


def test_countdown_after_target_is_zero():
    now = IST.localize(datetime(2025, 6, 2, 0, 0, 1))
    assert countdown("2025-06-01", now, ZONE) == {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}


def test_greeting_by_local_hour():
    assert greeting(IST.localize(datetime(2024, 1, 1, 8)), ZONE) == "Good Morning"
    assert greeting(IST.localize(datetime(2024, 1, 1, 13)), ZONE) == "Good Afternoon"
    assert greeting(IST.localize(datetime(2024, 1, 1, 21)), ZONE) == "Good Evening"


def test_days_until():
    now = IST.localize(datetime(2024, 1, 1, 23, 0))
    assert days_until(IST.localize(datetime(2024, 1, 2, 1, 0)), now, ZONE) == 1
    assert days_until(IST.localize(datetime(2023, 12, 30)), now, ZONE) == -2


def test_summary_counts(session):
    now = datetime(2024, 1, 1, 6, 30, tzinfo=timezone.utc)
    summary = get_summary(session, now)
    assert summary["tasks_total"] == 4
    assert summary["tasks_completed"] == 1
    assert summary["problems_due"] == 1
    assert summary["problems_mastered"] == 0
    assert summary["topics_due"] == 0

    for _ in range(5):
        session.review_problem("102", Outcome.SUCCESS, now=now)
    summary = get_summary(session, now + timedelta(days=1))
    assert summary["problems_mastered"] == 1
    assert summary["problems_due"] == 1
