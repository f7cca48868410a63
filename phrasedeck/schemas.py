from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class AuthRegister(SQLModel):
    email: str
    password: str


class AuthLogin(SQLModel):
    email: str
    password: str


class AuthRefresh(SQLModel):
    refresh_token: Optional[str] = None


class AuthToken(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserOut(SQLModel):
    id: int
    email: str
    created_at: datetime


class LanguageOut(SQLModel):
    id: int
    code: str
    name: str


class SettingsOut(SQLModel):
    origin_language: Optional[str] = None
    target_language: Optional[str] = None
    daily_goal: int
    learn_days: list[int]
    review_days: list[int]


class SettingsUpdate(SQLModel):
    origin_language: Optional[str] = None
    target_language: Optional[str] = None
    daily_goal: Optional[int] = Field(default=None, ge=1)
    learn_days: Optional[list[int]] = None
    review_days: Optional[list[int]] = None


class PhraseOut(SQLModel):
    id: int
    text: str
    audio_url: Optional[str] = None


class VocabularyOut(SQLModel):
    id: int
    sr_stage_id: int
    review_date: Optional[date] = None
    priority: int
    learned: bool
    modified_at: Optional[datetime] = None
    original: PhraseOut
    translated: PhraseOut


class ReviewIn(SQLModel):
    id: int


class BatchIn(SQLModel):
    ids: list[int]


class DelayIn(BatchIn):
    days: int = 1


class DeletedOut(SQLModel):
    deleted: list[int]


class ImportedOut(SQLModel):
    id: int
    original: str
    translated: str
    priority: int


class AudioGenerateIn(SQLModel):
    text: Optional[str] = None
    language: Optional[str] = None


class AudioDeleteIn(SQLModel):
    filenames: Optional[list[str]] = None


class TranslateIn(SQLModel):
    phrase: Optional[str] = None
    source_language: Optional[str] = None
    target_language: Optional[str] = None


class TranslateOut(SQLModel):
    translated_phrase: str
