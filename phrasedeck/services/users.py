from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Type, Union

from sqlmodel import Session, select

from ..errors import (
    InvalidCredentials,
    InvalidToken,
    LanguageNotFound,
    PreconditionFailed,
    SettingsNotFound,
    UserAlreadyExists,
)
from ..models import Language, LearnDay, ReviewDay, User, UserSettings
from ..security import ACCESS_TOKEN, decode_token, hash_password, verify_password
from .dates import WEEKDAYS

logger = logging.getLogger(__name__)

DayModel = Union[Type[LearnDay], Type[ReviewDay]]


@dataclass(frozen=True)
class UserPreferences:
    origin_language: Optional[str]
    target_language: Optional[str]
    daily_goal: int


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(session: Session, email: str, password: str) -> User:
    email = normalize_email(email)
    existing = session.exec(select(User).where(User.email == email)).first()
    if existing:
        raise UserAlreadyExists()

    user = User(email=email, password_hash=hash_password(password))
    session.add(user)
    session.commit()
    session.refresh(user)
    session.add(UserSettings(user_id=user.id))
    session.commit()
    logger.info("Registered user %s", user.id)
    return user


def authenticate(session: Session, email: str, password: str) -> User:
    user = session.exec(select(User).where(User.email == normalize_email(email))).first()
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def resolve_user(session: Session, token: str, *, token_type: str = ACCESS_TOKEN) -> User:
    user_id = decode_token(token, token_type=token_type)
    user = session.get(User, user_id)
    if user is None:
        raise InvalidToken()
    return user


def _resolve_days(session: Session, model: DayModel, user_id: int) -> set[int]:
    rows = session.exec(select(model.weekday_id).where(model.user_id == user_id)).all()
    return set(rows)


def resolve_learn_days(session: Session, user_id: int) -> set[int]:
    return _resolve_days(session, LearnDay, user_id)


def resolve_review_days(session: Session, user_id: int) -> set[int]:
    return _resolve_days(session, ReviewDay, user_id)


def _check_weekdays(weekdays: Iterable[int]) -> set[int]:
    days = set(weekdays)
    invalid = sorted(day for day in days if day not in WEEKDAYS)
    if invalid:
        raise PreconditionFailed(f"Invalid weekdays: {invalid}")
    return days


def _stage_days(session: Session, model: DayModel, user_id: int, days: set[int]) -> None:
    for row in session.exec(select(model).where(model.user_id == user_id)).all():
        session.delete(row)
    session.flush()
    session.add_all(model(user_id=user_id, weekday_id=day) for day in sorted(days))


def _replace_days(
    session: Session, model: DayModel, user_id: int, weekdays: Iterable[int]
) -> set[int]:
    days = _check_weekdays(weekdays)
    _stage_days(session, model, user_id, days)
    session.commit()
    return days


def set_learn_days(session: Session, user_id: int, weekdays: Iterable[int]) -> set[int]:
    return _replace_days(session, LearnDay, user_id, weekdays)


def set_review_days(session: Session, user_id: int, weekdays: Iterable[int]) -> set[int]:
    return _replace_days(session, ReviewDay, user_id, weekdays)


def get_language(session: Session, code: str) -> Language:
    language = session.exec(select(Language).where(Language.code == code.lower())).first()
    if language is None:
        raise LanguageNotFound(code)
    return language


def list_languages(session: Session) -> list[Language]:
    return list(session.exec(select(Language).order_by(Language.id)).all())


def _settings_row(session: Session, user_id: int) -> UserSettings:
    settings = session.exec(
        select(UserSettings).where(UserSettings.user_id == user_id)
    ).first()
    if settings is None:
        raise SettingsNotFound()
    return settings


def _language_code(session: Session, language_id: Optional[int]) -> Optional[str]:
    if language_id is None:
        return None
    language = session.get(Language, language_id)
    return language.code if language else None


def resolve_settings(session: Session, user_id: int) -> UserPreferences:
    settings = _settings_row(session, user_id)
    return UserPreferences(
        origin_language=_language_code(session, settings.origin_lang_id),
        target_language=_language_code(session, settings.learning_lang_id),
        daily_goal=settings.daily_goal,
    )


def update_settings(
    session: Session,
    user_id: int,
    *,
    origin_language: Optional[str] = None,
    target_language: Optional[str] = None,
    daily_goal: Optional[int] = None,
    learn_days: Optional[Iterable[int]] = None,
    review_days: Optional[Iterable[int]] = None,
) -> UserPreferences:
    """
    Apply every given field in one commit. Nothing is written unless all of
    them are valid.
    """
    learn = _check_weekdays(learn_days) if learn_days is not None else None
    review = _check_weekdays(review_days) if review_days is not None else None
    origin = get_language(session, origin_language) if origin_language is not None else None
    target = get_language(session, target_language) if target_language is not None else None

    settings = session.exec(
        select(UserSettings).where(UserSettings.user_id == user_id)
    ).first()
    if settings is None:
        settings = UserSettings(user_id=user_id)
    if origin is not None:
        settings.origin_lang_id = origin.id
    if target is not None:
        settings.learning_lang_id = target.id
    if daily_goal is not None:
        settings.daily_goal = daily_goal
    session.add(settings)
    if learn is not None:
        _stage_days(session, LearnDay, user_id, learn)
    if review is not None:
        _stage_days(session, ReviewDay, user_id, review)
    session.commit()
    return resolve_settings(session, user_id)
