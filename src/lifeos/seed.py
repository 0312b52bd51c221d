"""First-run application state and merging of saved snapshots with defaults."""
from datetime import datetime, timedelta

from lifeos.models import AppState, ReviewItem, Task, UserSettings
from lifeos.schedule import interval_for

SAMPLE_TASKS = [
    ("1", "Complete System Design Video", "WebDev", "In Progress", 1),
    ("2", "Solve LeetCode Daily", "DSA", "Todo", None),
    ("3", "Update Resume with new Project", "Internship", "Blocked", None),
    ("4", "Grocery Shopping", "Personal", "Completed", None),
]


def sample_tasks(now: datetime) -> list:
    return [
        Task(
            id=task_id, title=title, category=category, status=status, created_at=now,
            due_date=now + timedelta(days=due_in) if due_in is not None else None,
        )
        for task_id, title, category, status, due_in in SAMPLE_TASKS
    ]


def sample_problems(now: datetime, intervals: dict) -> list:
    """One problem due today and one due tomorrow."""
    two_sum_reviewed = now - timedelta(days=interval_for(1, intervals))
    lru_reviewed = now - timedelta(days=2)
    return [
        ReviewItem(
            id="101",
            kind="problem",
            title="Two Sum",
            link="https://leetcode.com/problems/two-sum/",
            tags=("Array", "Hash Table"),
            difficulty="Easy",
            learned_on=two_sum_reviewed,
            last_reviewed=two_sum_reviewed,
            next_review=now,
            stage=1,
            notes="Use a hash map for O(n) time complexity.",
        ),
        ReviewItem(
            id="102",
            kind="problem",
            title="LRU Cache",
            link="https://leetcode.com/problems/lru-cache/",
            tags=("Design", "Hash Table", "Linked List"),
            difficulty="Medium",
            learned_on=now - timedelta(days=5),
            last_reviewed=lru_reviewed,
            next_review=lru_reviewed + timedelta(days=interval_for(2, intervals)),
            stage=2,
        ),
    ]


def default_state(now: datetime, problem_intervals: dict) -> AppState:
    return AppState(
        tasks=sample_tasks(now),
        problems=sample_problems(now, problem_intervals),
        topics=[],
        user_settings=UserSettings(),
    )


def merge_with_defaults(saved, defaults: dict) -> dict:
    """Recursively backfill keys missing from `saved` with `defaults`.

    Saved values win unless they are None. Lists are not merged element-wise. A saved snapshot
    that is not a mapping is discarded in favour of the defaults.
    """
    if not isinstance(saved, dict):
        return defaults
    merged = dict(defaults)
    for key, value in saved.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(defaults.get(key), dict):
            merged[key] = merge_with_defaults(value, defaults[key])
        else:
            merged[key] = value
    return merged
