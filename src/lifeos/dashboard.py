"""Dashboard countdown and summary statistics."""
from datetime import date, datetime, timedelta

import pytz

from lifeos.schedule import start_of_day


def countdown(target_date: str, now: datetime, zone: str) -> dict:
    """Time left until the end of `target_date` (local day in `zone`)."""
    tz = pytz.timezone(zone)
    target_day = date.fromisoformat(target_date)
    end = tz.localize(datetime(target_day.year, target_day.month, target_day.day)) + timedelta(
        days=1, microseconds=-1
    )
    remaining = int((end - now).total_seconds())
    if remaining <= 0:
        return {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}
    days, rest = divmod(remaining, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return {"days": days, "hours": hours, "minutes": minutes, "seconds": seconds}


def greeting(now: datetime, zone: str) -> str:
    hour = now.astimezone(pytz.timezone(zone)).hour
    if hour < 12:
        return "Good Morning"
    elif hour < 17:
        return "Good Afternoon"
    return "Good Evening"


def days_until(moment: datetime, now: datetime, zone: str) -> int:
    """Whole local days from today until `moment`; negative when overdue."""
    return (start_of_day(moment, zone).date() - start_of_day(now, zone).date()).days


def get_summary(session, now: datetime) -> dict:
    tasks = list(session.tasks)
    return {
        "tasks_total": len(tasks),
        "tasks_completed": sum(1 for t in tasks if t.status == "Completed"),
        "problems_total": len(session.problems),
        "problems_mastered": len(session.problems.mastered()),
        "problems_due": len(session.due_problems(now)),
        "topics_total": len(session.topics),
        "topics_mastered": len(session.topics.mastered()),
        "topics_due": len(session.due_topics(now)),
    }
