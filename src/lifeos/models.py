"""Data classes for tasks, review items and the application state."""
import logging
from dataclasses import dataclass, field, asdict, fields
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from lifeos.config import MAX_STAGE, PROBLEM_INTERVALS, TOPIC_INTERVALS

logger = logging.getLogger(__name__)

CATEGORIES = ("DSA", "WebDev", "ML", "Personal", "Internship")
TASK_STATUSES = ("Todo", "In Progress", "Blocked", "Completed")
DIFFICULTIES = ("Easy", "Medium", "Hard")
THEMES = ("dark", "light")
ITEM_KINDS = ("problem", "topic")

LEARNING = "Learning"
MASTERED = "Mastered"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class DueState(str, Enum):
    DUE = "Due"
    NOT_DUE = "NotDue"
    MASTERED = "Mastered"


class ValidationError(ValueError):
    """Invalid user input. `errors` maps field name to message."""

    def __init__(self, errors: dict):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _timestamp_or(value) -> Optional[datetime]:
    """Like parse_timestamp, but None for anything unparseable."""
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ReviewItem:
    id: str
    kind: str
    title: str
    learned_on: datetime
    last_reviewed: datetime
    next_review: datetime
    stage: int = 1
    status: str = LEARNING
    tags: tuple = ()
    difficulty: Optional[str] = None
    link: Optional[str] = None
    area: Optional[str] = None
    notes: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tags"] = list(self.tags)
        for key in ("learned_on", "last_reviewed", "next_review"):
            data[key] = format_timestamp(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict, kind: str | None = None, intervals: dict | None = None,
                  now: Optional[datetime] = None) -> "ReviewItem":
        """Rebuild an item from a snapshot record, repairing what can be derived.

        `id` and `title` are required. A missing `next_review` is recomputed
        from `last_reviewed` and the stage interval; an out-of-range stage
        falls back to 1; `Mastered` survives only at stage 5.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["id"] = str(data["id"])
        if not isinstance(data["title"], str) or not data["title"].strip():
            raise ValueError("review item has no title")
        if kind in ITEM_KINDS:
            values["kind"] = kind
        elif values.get("kind") not in ITEM_KINDS:
            values["kind"] = "problem"
        intervals = intervals or (TOPIC_INTERVALS if values["kind"] == "topic" else PROBLEM_INTERVALS)
        try:
            stage = int(values.get("stage", 1))
        except (TypeError, ValueError):
            stage = 1
        values["stage"] = stage if 1 <= stage <= MAX_STAGE else 1
        if values.get("status") != MASTERED or values["stage"] != MAX_STAGE:
            values["status"] = LEARNING
        tags = values.get("tags") or ()
        values["tags"] = tuple(t for t in tags if isinstance(t, str)) if isinstance(tags, (list, tuple)) else ()
        if values.get("difficulty") not in DIFFICULTIES:
            values["difficulty"] = None
        learned_on = (
            _timestamp_or(values.get("learned_on"))
            or _timestamp_or(values.get("last_reviewed"))
            or now
            or datetime.now(timezone.utc)
        )
        values["learned_on"] = learned_on
        values["last_reviewed"] = _timestamp_or(values.get("last_reviewed")) or learned_on
        values["next_review"] = _timestamp_or(values.get("next_review")) or (
            values["last_reviewed"] + timedelta(days=intervals[values["stage"]])
        )
        if values.get("notes") is None:
            values["notes"] = ""
        return cls(**values)


@dataclass
class Task:
    id: str
    title: str
    created_at: datetime
    category: str = "Personal"
    status: str = "Todo"
    description: Optional[str] = None
    due_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = format_timestamp(self.created_at)
        data["due_date"] = format_timestamp(self.due_date)
        return data

    @classmethod
    def from_dict(cls, data: dict, now: Optional[datetime] = None) -> "Task":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["id"] = str(data["id"])
        if not isinstance(data["title"], str) or not data["title"].strip():
            raise ValueError("task has no title")
        values["created_at"] = _timestamp_or(values.get("created_at")) or now or datetime.now(timezone.utc)
        values["due_date"] = _timestamp_or(values.get("due_date"))
        if values.get("status") not in TASK_STATUSES:
            values["status"] = "Todo"
        if values.get("category") not in CATEGORIES:
            values["category"] = "Personal"
        return cls(**values)


@dataclass
class UserSettings:
    name: str = "Aditya"
    target_date: str = "2025-06-01"
    theme: str = "dark"
    accent_color: str = "violet"

    @classmethod
    def from_dict(cls, data) -> "UserSettings":
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        settings = cls(**{k: v for k, v in data.items() if k in known and v is not None})
        if settings.theme not in THEMES:
            settings.theme = cls.theme
        try:
            date.fromisoformat(str(settings.target_date))
        except ValueError:
            settings.target_date = cls.target_date
        return settings


def _records(data: dict, key: str, build) -> list:
    """Build each record of a collection, logging and skipping broken ones."""
    records = data.get(key) or []
    if not isinstance(records, list):
        raise ValueError(f"{key} must be a list")
    built = []
    for index, record in enumerate(records):
        try:
            built.append(build(record))
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Skipping unreadable %s record #%d: %r", key, index, record)
    return built


@dataclass
class AppState:
    tasks: list = field(default_factory=list)
    problems: list = field(default_factory=list)
    topics: list = field(default_factory=list)
    user_settings: UserSettings = field(default_factory=UserSettings)

    def to_dict(self) -> dict:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "problems": [p.to_dict() for p in self.problems],
            "topics": [t.to_dict() for t in self.topics],
            "userSettings": asdict(self.user_settings),
        }

    @classmethod
    def from_dict(cls, data: dict, now: Optional[datetime] = None,
                  problem_intervals: dict | None = None, topic_intervals: dict | None = None) -> "AppState":
        """Rebuild the state record by record.

        Raises ValueError only when a collection is not a list at all.
        """
        return cls(
            tasks=_records(data, "tasks", lambda t: Task.from_dict(t, now)),
            problems=_records(data, "problems", lambda p: ReviewItem.from_dict(p, "problem", problem_intervals, now)),
            topics=_records(data, "topics", lambda t: ReviewItem.from_dict(t, "topic", topic_intervals, now)),
            user_settings=UserSettings.from_dict(data.get("userSettings")),
        )
