"""Review item creation and the ordered item store."""
import uuid
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional
from urllib.parse import urlparse

from lifeos.config import MAX_STAGE
from lifeos.models import (
    DIFFICULTIES, DueState, Outcome, ReviewItem, ValidationError, LEARNING, MASTERED,
)
from lifeos.schedule import classify, interval_for, review


def is_valid_url(link: str) -> bool:
    parsed = urlparse(link.strip())
    return bool(parsed.scheme) and bool(parsed.netloc)


def clean_tags(tags: Iterable[str]) -> tuple:
    """Strip labels, drop blanks and repeats, keep first-seen order."""
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)


def _check_stage(stage, errors: dict) -> None:
    if not isinstance(stage, int) or not 1 <= stage <= MAX_STAGE:
        errors["stage"] = f"Stage must be between 1 and {MAX_STAGE}"


def _build(kind: str, title: str, learned_on: datetime, intervals: dict, stage: int, **extra) -> ReviewItem:
    return ReviewItem(
        id=uuid.uuid4().hex,
        kind=kind,
        title=title.strip(),
        learned_on=learned_on,
        last_reviewed=learned_on,
        next_review=learned_on + timedelta(days=interval_for(stage, intervals)),
        stage=stage,
        status=LEARNING,
        **extra,
    )


def new_problem(
    title: str,
    link: str,
    tags: Iterable[str],
    difficulty: str,
    learned_on: datetime,
    intervals: dict,
    stage: int = 1,
    notes: str = "",
) -> ReviewItem:
    """Create a coding problem, raising ValidationError listing every bad field."""
    tags = clean_tags(tags)
    errors = {}
    if not title or not title.strip():
        errors["title"] = "Problem name is required"
    if not link or not link.strip():
        errors["link"] = "Link is required"
    elif not is_valid_url(link):
        errors["link"] = "Please enter a valid URL"
    if not tags:
        errors["tags"] = "Add at least one topic"
    if difficulty not in DIFFICULTIES:
        errors["difficulty"] = "Select a difficulty"
    if learned_on is None:
        errors["learned_on"] = "Date is required"
    _check_stage(stage, errors)
    if errors:
        raise ValidationError(errors)
    return _build(
        "problem", title, learned_on, intervals, stage,
        tags=tags, difficulty=difficulty, link=link.strip(), notes=notes or "",
    )


def new_topic(
    title: str,
    learned_on: datetime,
    intervals: dict,
    area: Optional[str] = None,
    tags: Iterable[str] = (),
    stage: int = 1,
    notes: str = "",
) -> ReviewItem:
    errors = {}
    if not title or not title.strip():
        errors["title"] = "Topic name is required"
    if learned_on is None:
        errors["learned_on"] = "Date is required"
    _check_stage(stage, errors)
    if errors:
        raise ValidationError(errors)
    area = area.strip() if area and area.strip() else None
    return _build(
        "topic", title, learned_on, intervals, stage,
        tags=clean_tags(tags), area=area, notes=notes or "",
    )


class ItemView:
    """Restartable filtered view over a store; re-reads the store on every pass."""

    def __init__(self, source: "ReviewItemStore", predicate: Callable[[ReviewItem], bool]):
        self._source = source
        self._predicate = predicate

    def __iter__(self):
        return (item for item in list(self._source) if self._predicate(item))

    def __len__(self):
        return sum(1 for _ in self)


class ReviewItemStore:
    """Ordered collection of review items of one kind."""

    def __init__(self, items: Iterable[ReviewItem], intervals: dict):
        self._items = list(items)
        self.intervals = dict(intervals)

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def get(self, item_id: str) -> Optional[ReviewItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add(self, item: ReviewItem) -> ReviewItem:
        if self.get(item.id) is not None:
            raise ValueError(f"Duplicate item id: {item.id}")
        self._items.append(item)
        return item

    def remove(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        return len(self._items) != before

    def apply_review(self, item_id: str, outcome: Outcome, now: datetime) -> Optional[ReviewItem]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                updated = review(item, outcome, now, self.intervals)
                self._items[index] = updated
                return updated
        return None

    def filter(self, predicate: Callable[[ReviewItem], bool]) -> ItemView:
        return ItemView(self, predicate)

    def due(self, now: datetime, zone: str) -> ItemView:
        return self.filter(lambda item: classify(item, now, zone) == DueState.DUE)

    def mastered(self) -> ItemView:
        return self.filter(lambda item: item.status == MASTERED)

    def areas(self) -> list:
        return sorted({item.area for item in self._items if item.area})
