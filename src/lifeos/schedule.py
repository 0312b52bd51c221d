"""Stage-ladder spaced repetition scheduling."""
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytz

from lifeos.config import MAX_STAGE
from lifeos.models import DueState, Outcome, ReviewItem, LEARNING, MASTERED


def interval_for(stage: int, intervals: dict) -> int:
    """Days until the next review for a stage, clamped to the 1-5 ladder."""
    stage = min(max(stage, 1), MAX_STAGE)
    return intervals[stage]


def start_of_day(moment: datetime, zone: str) -> datetime:
    """Local midnight of the civil day `moment` falls on in `zone`."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    tz = pytz.timezone(zone)
    local = moment.astimezone(tz)
    return tz.localize(datetime(local.year, local.month, local.day))


def classify(item: ReviewItem, now: datetime, zone: str) -> DueState:
    """Due-state of an item; changes only at local midnight."""
    if item.status == MASTERED:
        return DueState.MASTERED
    if start_of_day(item.next_review, zone) <= start_of_day(now, zone):
        return DueState.DUE
    return DueState.NOT_DUE


def review(item: ReviewItem, outcome: Outcome, now: datetime, intervals: dict) -> ReviewItem:
    """Return the item as it stands after a review at `now`.

    Success moves one stage up the ladder (capped at 5). Mastery needs a
    successful review while already at stage 5, so the review that first
    reaches stage 5 still leaves the item Learning. Failure drops back to
    stage 1.
    """
    if Outcome(outcome) == Outcome.SUCCESS:
        new_stage = min(item.stage + 1, MAX_STAGE)
        mastered = item.stage == MAX_STAGE and new_stage == MAX_STAGE
        status = MASTERED if mastered else LEARNING
    else:
        new_stage = 1
        status = LEARNING
    return replace(
        item,
        stage=new_stage,
        status=status,
        last_reviewed=now,
        next_review=now + timedelta(days=interval_for(new_stage, intervals)),
    )
