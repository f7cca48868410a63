"""
audio.py
Speech synthesis for phrases and the local store that keeps the mp3 files.

`Phrase.audio_url` holds a filename relative to the storage directory.
"""

from __future__ import annotations

import io
import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from gtts import gTTS
from gtts.tts import gTTSError
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from ..errors import SpeechSynthesisFailed
from ..models import Language, Phrase, PhraseTranslation

logger = logging.getLogger(__name__)


class AudioStorage:
    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename:
            raise FileNotFoundError(filename)
        return self.directory / name

    def exists(self, filename: str) -> bool:
        try:
            return self.path(filename).is_file()
        except FileNotFoundError:
            return False

    def save(self, filename: str, data: bytes) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path(filename).write_bytes(data)
        return filename

    def remove(self, filenames: Iterable[str]) -> list[str]:
        """Delete files; raises OSError when one cannot be removed."""
        removed: list[str] = []
        for filename in filenames:
            self.path(filename).unlink(missing_ok=True)
            removed.append(filename)
        return removed


class SpeechSynthesizer:
    def __init__(self, default_language: str = "en") -> None:
        self.default_language = default_language

    def synthesize(self, text: str, language: Optional[str] = None) -> bytes:
        lang = language or self.default_language
        buffer = io.BytesIO()
        try:
            gTTS(text=text, lang=lang).write_to_fp(buffer)
        except (gTTSError, ValueError, AssertionError) as exc:
            logger.error("Speech synthesis failed for %r: %s", text, exc)
            raise SpeechSynthesisFailed(f"Speech synthesis failed: {exc}") from exc
        return buffer.getvalue()


def owns_audio(session: Session, user_id: int, filename: str) -> bool:
    """
    Phrase audio belongs to the owner of the phrase; free-standing audio
    carries its owner's id as a filename prefix.
    """
    if filename.startswith(f"{user_id}-"):
        return True
    phrase_id = session.exec(
        select(Phrase.id).where(Phrase.user_id == user_id, Phrase.audio_url == filename)
    ).first()
    return phrase_id is not None


def generate_audio(
    user_id: int,
    text: str,
    storage: AudioStorage,
    synthesizer: SpeechSynthesizer,
    language: Optional[str] = None,
) -> str:
    filename = f"{user_id}-{time.time_ns()}.mp3"
    storage.save(filename, synthesizer.synthesize(text, language))
    logger.info("Audio for %r saved as %s", text, filename)
    return filename


def generate_phrase_audio(
    session: Session,
    phrase: Phrase,
    storage: AudioStorage,
    synthesizer: SpeechSynthesizer,
) -> str:
    language = session.get(Language, phrase.language_id) if phrase.language_id else None
    filename = f"{phrase.id}.mp3"
    storage.save(filename, synthesizer.synthesize(phrase.text, language.code if language else None))
    phrase.audio_url = filename
    session.add(phrase)
    session.commit()
    logger.info("Audio for phrase %s saved as %s", phrase.id, filename)
    return filename


def generate_missing_audio(
    session: Session,
    user_id: int,
    storage: AudioStorage,
    synthesizer: SpeechSynthesizer,
) -> list[int]:
    """Give audio to both phrases of every pair that still lacks it."""
    original = aliased(Phrase)
    translated = aliased(Phrase)
    rows = session.exec(
        select(original, translated)
        .join(PhraseTranslation, original.id == PhraseTranslation.phrase_id)
        .join(translated, translated.id == PhraseTranslation.translated_phrase_id)
        .where(PhraseTranslation.user_id == user_id)
        .where((original.audio_url == None) | (translated.audio_url == None))  # noqa: E711
        .order_by(PhraseTranslation.priority, PhraseTranslation.id)
    ).all()

    saved: list[int] = []
    for pair in rows:
        for phrase in pair:
            if phrase.audio_url:
                continue
            generate_phrase_audio(session, phrase, storage, synthesizer)
            saved.append(phrase.id)
    return saved
