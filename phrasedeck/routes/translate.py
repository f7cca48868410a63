from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_current_user, get_translator
from ..models import User
from ..schemas import TranslateIn, TranslateOut
from ..services.translate import Translator

router = APIRouter(tags=["translate"])


@router.post("/translate", response_model=TranslateOut)
def translate_phrase(
    payload: TranslateIn,
    user: User = Depends(get_current_user),
    translator: Translator = Depends(get_translator),
) -> TranslateOut:
    if not payload.phrase or not payload.source_language or not payload.target_language:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: phrase, source_language, target_language",
        )
    translated = translator.translate(
        payload.phrase, payload.source_language, payload.target_language
    )
    return TranslateOut(translated_phrase=translated)
