from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Sequence, TypeVar

from sqlalchemy import or_
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from ..errors import AudioCleanupFailed, NoReviewDays, PartialBatchFailure, VocabularyNotFound
from ..models import Phrase, PhraseTranslation, utcnow
from .dates import add_days, next_date_for_weekday

if TYPE_CHECKING:
    from .audio import AudioStorage
    from .review import ScheduleUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_by_id(session: Session, vocabulary_id: int, user_id: int) -> PhraseTranslation:
    item = session.exec(
        select(PhraseTranslation).where(
            PhraseTranslation.id == vocabulary_id,
            PhraseTranslation.user_id == user_id,
        )
    ).first()
    if item is None:
        raise VocabularyNotFound(vocabulary_id)
    return item


def get_many_by_id(
    session: Session, ids: Sequence[int], user_id: int
) -> list[PhraseTranslation]:
    """Items owned by `user_id`, in the order of `ids`. Unknown ids are skipped."""
    if not ids:
        return []
    rows = session.exec(
        select(PhraseTranslation).where(
            PhraseTranslation.user_id == user_id,
            PhraseTranslation.id.in_(list(ids)),
        )
    ).all()
    by_id = {row.id: row for row in rows}
    ordered: list[PhraseTranslation] = []
    seen: set[int] = set()
    for vocabulary_id in ids:
        if vocabulary_id in by_id and vocabulary_id not in seen:
            ordered.append(by_id[vocabulary_id])
            seen.add(vocabulary_id)
    return ordered


def list_vocabulary(
    session: Session,
    user_id: int,
    *,
    due_on: Optional[date] = None,
    with_audio: bool = False,
) -> list[tuple[PhraseTranslation, Phrase, Phrase]]:
    original = aliased(Phrase)
    translated = aliased(Phrase)
    statement = (
        select(PhraseTranslation, original, translated)
        .join(original, original.id == PhraseTranslation.phrase_id)
        .join(translated, translated.id == PhraseTranslation.translated_phrase_id)
        .where(PhraseTranslation.user_id == user_id)
    )
    if due_on is not None:
        # Never-reviewed items are due as well.
        statement = statement.where(
            PhraseTranslation.learned == False,  # noqa: E712
            or_(
                PhraseTranslation.review_date == None,  # noqa: E711
                PhraseTranslation.review_date <= due_on,
            ),
        )
    if with_audio:
        statement = statement.where(
            original.audio_url.is_not(None), translated.audio_url.is_not(None)
        )
    statement = statement.order_by(
        PhraseTranslation.priority,
        PhraseTranslation.review_date,
        PhraseTranslation.id,
    )
    return list(session.exec(statement).all())


def _save(session: Session, item: PhraseTranslation) -> PhraseTranslation:
    item.modified_at = utcnow()
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def apply_schedule_update(
    session: Session, vocabulary_id: int, user_id: int, update: "ScheduleUpdate"
) -> PhraseTranslation:
    item = get_by_id(session, vocabulary_id, user_id)
    item.sr_stage_id = update.stage_id
    item.review_date = update.review_date
    item.learned = update.learned
    return _save(session, item)


def delay(
    session: Session, item: PhraseTranslation, days: int, user_id: int
) -> PhraseTranslation:
    if item.user_id != user_id:
        raise VocabularyNotFound(item.id)
    item.review_date = add_days(item.review_date, days)
    return _save(session, item)


def reset(session: Session, vocabulary_id: int, user_id: int) -> PhraseTranslation:
    item = get_by_id(session, vocabulary_id, user_id)
    item.sr_stage_id = 0
    item.review_date = None
    item.learned = False
    return _save(session, item)


def restart(
    session: Session, vocabulary_id: int, user_id: int, review_date: date
) -> PhraseTranslation:
    item = get_by_id(session, vocabulary_id, user_id)
    item.sr_stage_id = 1
    item.review_date = review_date
    item.learned = False
    return _save(session, item)


def delete(
    session: Session, vocabulary_id: int, user_id: int, storage: "AudioStorage"
) -> int:
    item = get_by_id(session, vocabulary_id, user_id)
    phrases = session.exec(
        select(Phrase).where(
            Phrase.user_id == user_id,
            Phrase.id.in_([item.phrase_id, item.translated_phrase_id]),
        )
    ).all()
    filenames = [phrase.audio_url for phrase in phrases if phrase.audio_url]

    session.delete(item)
    session.flush()
    for phrase in phrases:
        session.delete(phrase)
    session.commit()
    logger.info("Deleted vocabulary %s with %d phrase(s)", vocabulary_id, len(phrases))

    if filenames:
        try:
            storage.remove(filenames)
        except OSError as exc:
            logger.error("Audio cleanup failed for vocabulary %s: %s", vocabulary_id, exc)
            raise AudioCleanupFailed(vocabulary_id, filenames, str(exc)) from exc
    return vocabulary_id


def _run_batch(ids: Iterable[int], action: Callable[[int], T]) -> list[T]:
    """
    Apply `action` to each id in order. Items are committed one by one, so a
    failure after the first item is reported as a partial batch.
    """
    results: list[T] = []
    completed: list[int] = []
    for vocabulary_id in ids:
        try:
            results.append(action(vocabulary_id))
        except Exception as exc:
            logger.warning("Batch failed at vocabulary %s: %s", vocabulary_id, exc)
            if not completed:
                raise
            raise PartialBatchFailure(completed, vocabulary_id, exc) from exc
        completed.append(vocabulary_id)
    return results


def delay_many(
    session: Session, ids: Sequence[int], days: int, user_id: int
) -> list[PhraseTranslation]:
    items = {item.id: item for item in get_many_by_id(session, ids, user_id)}
    return _run_batch(
        list(items),
        lambda vocabulary_id: delay(session, items[vocabulary_id], days, user_id),
    )


def reset_many(session: Session, ids: Sequence[int], user_id: int) -> list[PhraseTranslation]:
    return _run_batch(ids, lambda vocabulary_id: reset(session, vocabulary_id, user_id))


def restart_many(
    session: Session,
    ids: Sequence[int],
    user_id: int,
    review_days: Iterable[int],
    today: Optional[date] = None,
) -> list[PhraseTranslation]:
    days = set(review_days)
    if not days:
        raise NoReviewDays()
    review_date = next_date_for_weekday(min(days), today=today)
    return _run_batch(
        ids, lambda vocabulary_id: restart(session, vocabulary_id, user_id, review_date)
    )


def delete_many(
    session: Session, ids: Sequence[int], user_id: int, storage: "AudioStorage"
) -> list[int]:
    return _run_batch(
        ids, lambda vocabulary_id: delete(session, vocabulary_id, user_id, storage)
    )
