from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Collection, Mapping, Optional

from sqlmodel import Session, select

from ..errors import NoLearnDays, NoReviewDays, StageNotFound
from ..models import PhraseTranslation, Stage
from .dates import add_days, is_before_today, next_date_for_weekday, todays_weekday
from .users import resolve_learn_days, resolve_review_days
from .vocabulary import apply_schedule_update, get_by_id

logger = logging.getLogger(__name__)

FIRST_STAGE = 1
LEARNED_STAGE = 6

DEFAULT_STAGE_DAYS = {1: 2, 2: 3, 3: 7, 4: 14, 5: 30, 6: 60}


@dataclass(frozen=True)
class ScheduleUpdate:
    stage_id: int
    review_date: Optional[date]
    learned: bool


def load_stage_table(session: Session) -> dict[int, int]:
    return {stage.id: stage.days for stage in session.exec(select(Stage)).all()}


def advance_review(
    item: PhraseTranslation,
    stages: Mapping[int, int],
    learn_days: Collection[int],
    review_days: Collection[int],
    today: Optional[date] = None,
) -> ScheduleUpdate:
    """
    Move `item` one stage forward and pick its next review date.

    Intervals are calendar days but users only study on some weekdays, so a
    date that would fall outside them is snapped to the next day they study:
    the highest learn day for a first review, the lowest review day for a
    late review.
    """
    if not review_days:
        raise NoReviewDays()
    if not learn_days:
        raise NoLearnDays()

    new_stage_id = item.sr_stage_id + 1
    learned = True if new_stage_id == LEARNED_STAGE else bool(item.learned)

    if new_stage_id not in stages:
        raise StageNotFound(new_stage_id)
    days = stages[new_stage_id]

    review_date: Optional[date] = add_days(item.review_date, days, today=today)
    weekday = todays_weekday(today)

    if new_stage_id == FIRST_STAGE:
        if weekday not in learn_days:
            next_learn_day = next_date_for_weekday(max(learn_days), today=today)
            review_date = add_days(next_learn_day, days, today=today)
    elif FIRST_STAGE < new_stage_id < LEARNED_STAGE:
        if is_before_today(item.review_date, today=today):
            if weekday in review_days:
                review_date = add_days(None, days, today=today)
            else:
                next_review_day = next_date_for_weekday(min(review_days), today=today)
                review_date = add_days(next_review_day, days, today=today)
    elif new_stage_id == LEARNED_STAGE:
        review_date = None

    return ScheduleUpdate(stage_id=new_stage_id, review_date=review_date, learned=learned)


def review_vocabulary(
    session: Session,
    vocabulary_id: int,
    user_id: int,
    today: Optional[date] = None,
) -> PhraseTranslation:
    item = get_by_id(session, vocabulary_id, user_id)
    stages = load_stage_table(session)
    review_days = resolve_review_days(session, user_id)
    learn_days = resolve_learn_days(session, user_id)

    update = advance_review(item, stages, learn_days, review_days, today=today)
    logger.info(
        "Reviewed vocabulary %s: stage %s -> %s, next review %s",
        vocabulary_id,
        item.sr_stage_id,
        update.stage_id,
        update.review_date,
    )
    return apply_schedule_update(session, vocabulary_id, user_id, update)
