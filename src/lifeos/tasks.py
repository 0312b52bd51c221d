"""Daily task board."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from lifeos.models import CATEGORIES, TASK_STATUSES, Task, ValidationError


def new_task(
    title: str,
    category: str = "Personal",
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Task:
    errors = {}
    if not title or not title.strip():
        errors["title"] = "Task title is required"
    if category not in CATEGORIES:
        errors["category"] = f"Category must be one of {', '.join(CATEGORIES)}"
    if errors:
        raise ValidationError(errors)
    return Task(
        id=uuid.uuid4().hex,
        title=title.strip(),
        category=category,
        status="Todo",
        description=description,
        due_date=due_date,
        created_at=now or datetime.now(timezone.utc),
    )


class TaskBoard:
    """Ordered tasks. Any status may move to any other status."""

    def __init__(self, tasks=()):
        self._tasks = list(tasks)

    def __iter__(self):
        return iter(self._tasks)

    def __len__(self):
        return len(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def add(self, task: Task) -> Task:
        if self.get(task.id) is not None:
            raise ValueError(f"Duplicate task id: {task.id}")
        self._tasks.append(task)
        return task

    def remove(self, task_id: str) -> bool:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        return len(self._tasks) != before

    def set_status(self, task_id: str, status: str) -> Optional[Task]:
        if status not in TASK_STATUSES:
            raise ValidationError({"status": f"Status must be one of {', '.join(TASK_STATUSES)}"})
        task = self.get(task_id)
        if task is not None:
            task.status = status
        return task

    def toggle(self, task_id: str) -> Optional[Task]:
        """Checklist tick: Completed goes back to Todo, anything else completes."""
        task = self.get(task_id)
        if task is None:
            return None
        return self.set_status(task_id, "Todo" if task.status == "Completed" else "Completed")

    def clear_all(self) -> None:
        self._tasks = []

    def ordered(self) -> list:
        return sorted(self._tasks, key=lambda t: t.status == "Completed")
