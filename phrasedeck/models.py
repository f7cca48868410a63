from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)


class Language(SQLModel, table=True):
    __tablename__ = "languages"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)
    name: str


class UserSettings(SQLModel, table=True):
    __tablename__ = "user_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, unique=True)
    origin_lang_id: Optional[int] = Field(default=None, foreign_key="languages.id")
    learning_lang_id: Optional[int] = Field(default=None, foreign_key="languages.id")
    daily_goal: int = Field(default=10)


class LearnDay(SQLModel, table=True):
    __tablename__ = "learn_days"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    # 0=Sunday .. 6=Saturday
    weekday_id: int


class ReviewDay(SQLModel, table=True):
    __tablename__ = "review_days"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    weekday_id: int


class Stage(SQLModel, table=True):
    __tablename__ = "stages"

    id: int = Field(primary_key=True)
    days: int


class Phrase(SQLModel, table=True):
    __tablename__ = "phrases"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    text: str
    language_id: Optional[int] = Field(default=None, foreign_key="languages.id")
    audio_url: Optional[str] = None


class PhraseTranslation(SQLModel, table=True):
    __tablename__ = "phrase_translations"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    phrase_id: int = Field(foreign_key="phrases.id")
    translated_phrase_id: int = Field(foreign_key="phrases.id")
    sr_stage_id: int = Field(default=0)
    review_date: Optional[date] = None
    priority: int = Field(default=3)
    learned: bool = Field(default=False)
    modified_at: Optional[datetime] = None
