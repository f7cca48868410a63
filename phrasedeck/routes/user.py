from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..deps import get_current_user, get_session
from ..models import Language, User
from ..schemas import LanguageOut, SettingsOut, SettingsUpdate
from ..services.users import (
    list_languages,
    resolve_learn_days,
    resolve_review_days,
    resolve_settings,
    update_settings,
)

router = APIRouter(tags=["user"])


def _settings_out(session: Session, user_id: int) -> SettingsOut:
    preferences = resolve_settings(session, user_id)
    return SettingsOut(
        origin_language=preferences.origin_language,
        target_language=preferences.target_language,
        daily_goal=preferences.daily_goal,
        learn_days=sorted(resolve_learn_days(session, user_id)),
        review_days=sorted(resolve_review_days(session, user_id)),
    )


@router.get("/user/settings", response_model=SettingsOut)
def get_settings(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> SettingsOut:
    return _settings_out(session, user.id)


@router.put("/user/settings", response_model=SettingsOut)
def put_settings(
    payload: SettingsUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> SettingsOut:
    update_settings(
        session,
        user.id,
        origin_language=payload.origin_language,
        target_language=payload.target_language,
        daily_goal=payload.daily_goal,
        learn_days=payload.learn_days,
        review_days=payload.review_days,
    )
    return _settings_out(session, user.id)


@router.get("/languages", response_model=list[LanguageOut])
def get_languages(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[Language]:
    return list_languages(session)
