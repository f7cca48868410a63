from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header
from sqlmodel import Session

from .db import engine
from .errors import Unauthenticated
from .models import User
from .services.audio import AudioStorage, SpeechSynthesizer
from .services.translate import Translator
from .services.users import resolve_user
from .settings import AUDIO_DIR


def get_session() -> Generator[Session, None, None]:
    with Session(engine, expire_on_commit=False) as session:
        yield session


def get_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated()
    return token


def get_current_user(
    token: str = Depends(get_token), session: Session = Depends(get_session)
) -> User:
    return resolve_user(session, token)


def get_audio_storage() -> AudioStorage:
    return AudioStorage(AUDIO_DIR)


def get_speech_synthesizer() -> SpeechSynthesizer:
    return SpeechSynthesizer()


def get_translator() -> Translator:
    return Translator()
