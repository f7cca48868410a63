from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlmodel import Session

from ..deps import get_audio_storage, get_current_user, get_session, get_speech_synthesizer
from ..models import User
from ..schemas import AudioDeleteIn, AudioGenerateIn
from ..services.audio import (
    AudioStorage,
    SpeechSynthesizer,
    generate_audio,
    generate_missing_audio,
    owns_audio,
)

router = APIRouter(prefix="/audio", tags=["audio"])


@router.post("/generate")
def generate(
    payload: AudioGenerateIn,
    user: User = Depends(get_current_user),
    storage: AudioStorage = Depends(get_audio_storage),
    synthesizer: SpeechSynthesizer = Depends(get_speech_synthesizer),
) -> dict:
    if not payload.text or not payload.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    filename = generate_audio(
        user.id, payload.text.strip(), storage, synthesizer, payload.language
    )
    return {"filename": filename}


@router.post("/generate-audios")
def generate_audios(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    storage: AudioStorage = Depends(get_audio_storage),
    synthesizer: SpeechSynthesizer = Depends(get_speech_synthesizer),
) -> list[int]:
    return generate_missing_audio(session, user.id, storage, synthesizer)


@router.post("/delete")
def delete_audios(
    payload: AudioDeleteIn,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    storage: AudioStorage = Depends(get_audio_storage),
) -> dict:
    if not payload.filenames:
        raise HTTPException(status_code=400, detail="Filenames array is required")
    for filename in payload.filenames:
        if not owns_audio(session, user.id, filename):
            raise HTTPException(status_code=404, detail=f"Audio not found: {filename}")
    try:
        deleted = storage.remove(payload.filenames)
    except FileNotFoundError:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return {"deleted": deleted}


@router.get("/{filename}")
def get_audio(
    filename: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
    storage: AudioStorage = Depends(get_audio_storage),
) -> FileResponse:
    if not owns_audio(session, user.id, filename) or not storage.exists(filename):
        raise HTTPException(status_code=404, detail="Audio not found")
    return FileResponse(storage.path(filename), media_type="audio/mpeg")
