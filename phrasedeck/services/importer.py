"""
importer.py
Bulk import of phrase pairs from plain-text notes.

Translated notes (`load-translated`)::

    - Guten Morgen#1
      Good morning
    - Wie geht's?
      How are you?
    -----
    anything below the separator is ignored

Raw notes (`load-raw`) hold one phrase per line, optionally suffixed with
`#<priority>`; the translation is fetched before saving.

Phrases from the notes are in the language being learned; translations are
in the user's origin language.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from ..errors import ImportFileEmpty, PreconditionFailed
from ..models import Phrase, PhraseTranslation
from ..settings import DEFAULT_PRIORITY
from .translate import Translator
from .users import UserPreferences, get_language

logger = logging.getLogger(__name__)

SEPARATOR = "-----"


@dataclass(frozen=True)
class ImportedPair:
    original: str
    translated: str
    priority: int


@dataclass(frozen=True)
class RawPhrase:
    text: str
    priority: int


def split_priority(line: str) -> tuple[str, int]:
    text, _, priority = line.partition("#")
    priority = priority.strip()
    return text.strip(), int(priority) if priority.isdigit() else DEFAULT_PRIORITY


def _head(content: str) -> str:
    if not content or not content.strip():
        raise ImportFileEmpty()
    lines = content.splitlines()
    for index, line in enumerate(lines):
        if line.strip() == SEPARATOR:
            return "\n".join(lines[:index])
    return content


def parse_translated_vocabulary(content: str) -> list[ImportedPair]:
    entries: list[list[str]] = []
    for raw_line in _head(content).splitlines():
        line = raw_line.strip()
        if line.startswith("- "):
            entries.append([line[2:].strip()])
        elif line and entries:
            entries[-1].append(line)

    pairs = []
    for entry in entries:
        if len(entry) < 2:
            continue
        original, priority = split_priority(entry[0])
        if original:
            pairs.append(ImportedPair(original=original, translated=entry[1], priority=priority))
    return pairs


def parse_raw_vocabulary(content: str) -> list[RawPhrase]:
    phrases = []
    for line in _head(content).splitlines():
        text, priority = split_priority(line)
        if text:
            phrases.append(RawPhrase(text=text, priority=priority))
    return phrases


def _language_ids(session: Session, preferences: UserPreferences) -> tuple[int, int]:
    if not preferences.target_language or not preferences.origin_language:
        raise PreconditionFailed("Origin and target languages must be configured")
    learning = get_language(session, preferences.target_language)
    origin = get_language(session, preferences.origin_language)
    return learning.id, origin.id


def save_pair(
    session: Session,
    user_id: int,
    pair: ImportedPair,
    learning_lang_id: Optional[int],
    origin_lang_id: Optional[int],
) -> PhraseTranslation:
    original = Phrase(user_id=user_id, text=pair.original, language_id=learning_lang_id)
    translated = Phrase(user_id=user_id, text=pair.translated, language_id=origin_lang_id)
    session.add(original)
    session.add(translated)
    session.flush()

    vocabulary = PhraseTranslation(
        user_id=user_id,
        phrase_id=original.id,
        translated_phrase_id=translated.id,
        priority=pair.priority,
        sr_stage_id=0,
        review_date=None,
        modified_at=None,
    )
    session.add(vocabulary)
    session.commit()
    session.refresh(vocabulary)
    return vocabulary


def import_pairs(
    session: Session,
    user_id: int,
    pairs: list[ImportedPair],
    preferences: UserPreferences,
) -> list[PhraseTranslation]:
    if not pairs:
        raise ImportFileEmpty()
    learning_lang_id, origin_lang_id = _language_ids(session, preferences)

    saved: list[PhraseTranslation] = []
    for pair in pairs:
        try:
            saved.append(save_pair(session, user_id, pair, learning_lang_id, origin_lang_id))
        except Exception:
            logger.exception(
                "Import stopped at %r after %d of %d pair(s)",
                pair.original,
                len(saved),
                len(pairs),
            )
            raise
        logger.info("Imported %r -> %r (priority %s)", pair.original, pair.translated, pair.priority)
    return saved


def translate_phrases(
    phrases: list[RawPhrase], translator: Translator, preferences: UserPreferences
) -> list[ImportedPair]:
    if not preferences.target_language or not preferences.origin_language:
        raise PreconditionFailed("Origin and target languages must be configured")
    return [
        ImportedPair(
            original=phrase.text,
            translated=translator.translate(
                phrase.text, preferences.target_language, preferences.origin_language
            ),
            priority=phrase.priority,
        )
        for phrase in phrases
    ]
