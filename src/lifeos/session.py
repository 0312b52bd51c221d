"""The session: sole owner of the application state and its command surface."""
import logging
from dataclasses import fields
from datetime import datetime, timezone
from typing import Callable, Optional

from lifeos.config import Config
from lifeos.db import StateRepository
from lifeos.items import ReviewItemStore, new_problem, new_topic
from lifeos.models import (
    THEMES, AppState, DueState, Outcome, ReviewItem, Task, UserSettings, ValidationError,
)
from lifeos.schedule import classify
from lifeos.seed import default_state, merge_with_defaults
from lifeos.tasks import TaskBoard, new_task

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Session:
    """Holds tasks, problems, topics and settings; saves after every command.

    A failed save is logged by the repository and otherwise ignored, so the
    in-memory state is always the source of truth for the running session.
    """

    def __init__(
        self,
        repository: StateRepository,
        config: Config,
        state: AppState,
        clock: Callable[[], datetime] = utcnow,
        persist: bool = True,
    ):
        self.repository = repository
        self.config = config
        self.clock = clock
        self.persist = persist
        self.tasks = TaskBoard(state.tasks)
        self.problems = ReviewItemStore(state.problems, config.intervals_for("problem"))
        self.topics = ReviewItemStore(state.topics, config.intervals_for("topic"))
        self.settings = state.user_settings

    @classmethod
    def open(cls, config: Config, repository: StateRepository | None = None,
             clock: Callable[[], datetime] = utcnow) -> "Session":
        """Load the saved snapshot, backfilling anything it lacks from defaults.

        Records are repaired one at a time and only unrepairable ones are
        dropped. If the snapshot as a whole cannot be read, the session runs
        on defaults with saving switched off so the stored row is kept.
        """
        repository = repository or StateRepository(config.db_path, config.owner_id)
        now = clock()
        defaults = default_state(now, config.problem_intervals)
        saved = repository.load()
        if saved is None:
            return cls(repository, config, defaults, clock)
        try:
            if not isinstance(saved, dict):
                raise ValueError("snapshot is not a mapping")
            state = AppState.from_dict(
                merge_with_defaults(saved, defaults.to_dict()), now,
                config.problem_intervals, config.topic_intervals,
            )
        except (KeyError, TypeError, ValueError):
            logger.exception("Saved state is unreadable, starting from defaults without saving")
            return cls(repository, config, defaults, clock, persist=False)
        return cls(repository, config, state, clock)

    def snapshot(self) -> AppState:
        return AppState(
            tasks=list(self.tasks),
            problems=list(self.problems),
            topics=list(self.topics),
            user_settings=self.settings,
        )

    def save(self) -> bool:
        if not self.persist:
            logger.warning("Not saving: the stored snapshot was unreadable and is left as is")
            return False
        return self.repository.save(self.snapshot().to_dict())

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self.clock()

    # Review items

    def add_problem(self, title, link, tags, difficulty, learned_on=None, stage=1, notes="") -> ReviewItem:
        item = new_problem(
            title, link, tags, difficulty, learned_on or self.clock(),
            self.config.problem_intervals, stage=stage, notes=notes,
        )
        self.problems.add(item)
        self.save()
        return item

    def add_topic(self, title, learned_on=None, area=None, tags=(), stage=1, notes="") -> ReviewItem:
        item = new_topic(
            title, learned_on or self.clock(), self.config.topic_intervals,
            area=area, tags=tags, stage=stage, notes=notes,
        )
        self.topics.add(item)
        self.save()
        return item

    def review_problem(self, item_id: str, outcome: Outcome, now=None) -> Optional[ReviewItem]:
        updated = self.problems.apply_review(item_id, outcome, self._now(now))
        if updated is not None:
            self.save()
        return updated

    def review_topic(self, item_id: str, outcome: Outcome, now=None) -> Optional[ReviewItem]:
        updated = self.topics.apply_review(item_id, outcome, self._now(now))
        if updated is not None:
            self.save()
        return updated

    def remove_problem(self, item_id: str) -> bool:
        removed = self.problems.remove(item_id)
        if removed:
            self.save()
        return removed

    def remove_topic(self, item_id: str) -> bool:
        removed = self.topics.remove(item_id)
        if removed:
            self.save()
        return removed

    def classify(self, item: ReviewItem, now=None) -> DueState:
        return classify(item, self._now(now), self.config.zone)

    def due_problems(self, now=None):
        return self.problems.due(self._now(now), self.config.zone)

    def due_topics(self, now=None):
        return self.topics.due(self._now(now), self.config.zone)

    # Tasks

    def add_task(self, title, category="Personal", description=None, due_date=None) -> Task:
        task = new_task(title, category, description, due_date, now=self.clock())
        self.tasks.add(task)
        self.save()
        return task

    def remove_task(self, task_id: str) -> bool:
        removed = self.tasks.remove(task_id)
        if removed:
            self.save()
        return removed

    def set_task_status(self, task_id: str, status: str) -> Optional[Task]:
        task = self.tasks.set_status(task_id, status)
        if task is not None:
            self.save()
        return task

    def toggle_task(self, task_id: str) -> Optional[Task]:
        task = self.tasks.toggle(task_id)
        if task is not None:
            self.save()
        return task

    def clear_tasks(self) -> None:
        self.tasks.clear_all()
        self.save()

    # Settings

    def update_settings(self, **changes) -> UserSettings:
        known = {f.name for f in fields(UserSettings)}
        errors = {k: "Unknown setting" for k in changes if k not in known}
        if "theme" in changes and changes["theme"] not in THEMES:
            errors["theme"] = f"Theme must be one of {', '.join(THEMES)}"
        if errors:
            raise ValidationError(errors)
        for key, value in changes.items():
            setattr(self.settings, key, value)
        self.save()
        return self.settings

    def reset(self) -> None:
        """Factory reset: drop the saved snapshot and return to the defaults.

        Saving resumes afterwards even if the snapshot was unreadable on open.
        """
        self.repository.clear()
        state = default_state(self.clock(), self.config.problem_intervals)
        self.tasks = TaskBoard(state.tasks)
        self.problems = ReviewItemStore(state.problems, self.config.intervals_for("problem"))
        self.topics = ReviewItemStore(state.topics, self.config.intervals_for("topic"))
        self.settings = state.user_settings
        self.persist = True
