"""
Shared fixtures: in-memory database, a registered user and an API client
whose external collaborators are replaced with local fakes.
"""

from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from main import app
from phrasedeck.db import seed_reference_data
from phrasedeck.deps import (
    get_audio_storage,
    get_session,
    get_speech_synthesizer,
    get_translator,
)
from phrasedeck.models import Phrase, PhraseTranslation
from phrasedeck.security import create_token
from phrasedeck.services.audio import AudioStorage
from phrasedeck.services.users import register_user, update_settings


class FakeSynthesizer:
    def __init__(self):
        self.calls = []

    def synthesize(self, text, language=None):
        self.calls.append((text, language))
        return b"ID3" + text.encode("utf-8")


class FakeTranslator:
    def __init__(self):
        self.calls = []

    def translate(self, text, source_language, target_language):
        self.calls.append((text, source_language, target_language))
        return f"{text} [{target_language}]"


class RecordingStorage(AudioStorage):
    def __init__(self, directory, fail=False):
        super().__init__(directory)
        self.fail = fail
        self.removed = []

    def remove(self, filenames):
        filenames = list(filenames)
        if self.fail:
            raise PermissionError("bucket is read-only")
        self.removed.extend(filenames)
        return super().remove(filenames)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine, expire_on_commit=False) as session:
        seed_reference_data(session)
        yield session


@pytest.fixture
def user(session):
    user = register_user(session, "learner@example.com", "secret123")
    update_settings(session, user.id, origin_language="en", target_language="de")
    return user


@pytest.fixture
def other_user(session):
    return register_user(session, "other@example.com", "secret123")


@pytest.fixture
def token(user):
    return create_token(user.id)


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def storage(tmp_path):
    return RecordingStorage(tmp_path / "audio")


@pytest.fixture
def broken_storage(tmp_path):
    return RecordingStorage(tmp_path / "audio", fail=True)


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def make_vocabulary(session):
    """Create a phrase pair owned by `owner`."""

    def _make(
        owner,
        *,
        stage: int = 0,
        review_date: Optional[date] = None,
        learned: bool = False,
        priority: int = 3,
        original: str = "Guten Morgen",
        translated: str = "Good morning",
        original_audio: Optional[str] = None,
        translated_audio: Optional[str] = None,
    ) -> PhraseTranslation:
        first = Phrase(user_id=owner.id, text=original, audio_url=original_audio)
        second = Phrase(user_id=owner.id, text=translated, audio_url=translated_audio)
        session.add(first)
        session.add(second)
        session.flush()
        item = PhraseTranslation(
            user_id=owner.id,
            phrase_id=first.id,
            translated_phrase_id=second.id,
            sr_stage_id=stage,
            review_date=review_date,
            learned=learned,
            priority=priority,
        )
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    return _make


@pytest.fixture
def client(session, storage, synthesizer, translator):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_audio_storage] = lambda: storage
    app.dependency_overrides[get_speech_synthesizer] = lambda: synthesizer
    app.dependency_overrides[get_translator] = lambda: translator
    yield TestClient(app)
    app.dependency_overrides.clear()
