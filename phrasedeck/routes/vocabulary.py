from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlmodel import Session

from ..deps import get_audio_storage, get_current_user, get_session, get_translator
from ..models import Phrase, PhraseTranslation, User
from ..schemas import (
    BatchIn,
    DelayIn,
    DeletedOut,
    ImportedOut,
    PhraseOut,
    ReviewIn,
    VocabularyOut,
)
from ..services.audio import AudioStorage
from ..services.importer import (
    ImportedPair,
    import_pairs,
    parse_raw_vocabulary,
    parse_translated_vocabulary,
    translate_phrases,
)
from ..services.review import review_vocabulary
from ..services.translate import Translator
from ..services.users import resolve_review_days, resolve_settings
from ..services import vocabulary as vocabulary_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


def _vocabulary_out(item: PhraseTranslation, original: Phrase, translated: Phrase) -> VocabularyOut:
    return VocabularyOut(
        id=item.id,
        sr_stage_id=item.sr_stage_id,
        review_date=item.review_date,
        priority=item.priority,
        learned=item.learned,
        modified_at=item.modified_at,
        original=PhraseOut(id=original.id, text=original.text, audio_url=original.audio_url),
        translated=PhraseOut(
            id=translated.id, text=translated.text, audio_url=translated.audio_url
        ),
    )


async def _read_upload(file: UploadFile) -> str:
    raw = await file.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded")


@router.get("", response_model=list[VocabularyOut])
def list_vocabulary(
    due: bool = False,
    with_audio: bool = False,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[VocabularyOut]:
    rows = vocabulary_service.list_vocabulary(
        session,
        user.id,
        due_on=date.today() if due else None,
        with_audio=with_audio,
    )
    return [_vocabulary_out(*row) for row in rows]


@router.post("/review", response_model=PhraseTranslation)
def review(
    payload: ReviewIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> PhraseTranslation:
    return review_vocabulary(session, payload.id, user.id)


@router.post("/delay", response_model=list[PhraseTranslation])
def delay_many(
    payload: DelayIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[PhraseTranslation]:
    return vocabulary_service.delay_many(session, payload.ids, payload.days, user.id)


@router.post("/reset", response_model=list[PhraseTranslation])
def reset_many(
    payload: BatchIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[PhraseTranslation]:
    return vocabulary_service.reset_many(session, payload.ids, user.id)


@router.post("/restart", response_model=list[PhraseTranslation])
def restart_many(
    payload: BatchIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[PhraseTranslation]:
    review_days = resolve_review_days(session, user.id)
    return vocabulary_service.restart_many(session, payload.ids, user.id, review_days)


@router.post("/delete", response_model=DeletedOut)
def delete_many(
    payload: BatchIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    storage: AudioStorage = Depends(get_audio_storage),
) -> DeletedOut:
    deleted = vocabulary_service.delete_many(session, payload.ids, user.id, storage)
    return DeletedOut(deleted=deleted)


def _imported_out(saved: list[PhraseTranslation], pairs: list[ImportedPair]) -> list[ImportedOut]:
    return [
        ImportedOut(
            id=item.id,
            original=pair.original,
            translated=pair.translated,
            priority=pair.priority,
        )
        for item, pair in zip(saved, pairs)
    ]


@router.post("/load-translated", response_model=list[ImportedOut])
async def load_translated(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> list[ImportedOut]:
    pairs = parse_translated_vocabulary(await _read_upload(file))
    preferences = resolve_settings(session, user.id)
    saved = import_pairs(session, user.id, pairs, preferences)
    return _imported_out(saved, pairs)


@router.post("/load-raw", response_model=list[ImportedOut])
async def load_raw(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    translator: Translator = Depends(get_translator),
) -> list[ImportedOut]:
    phrases = parse_raw_vocabulary(await _read_upload(file))
    preferences = resolve_settings(session, user.id)
    pairs = translate_phrases(phrases, translator, preferences)
    saved = import_pairs(session, user.id, pairs, preferences)
    return _imported_out(saved, pairs)
