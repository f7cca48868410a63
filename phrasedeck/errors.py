"""
errors.py
Single exception hierarchy shared by services and routes.

Services raise these; only `main.py` turns them into HTTP responses.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PhraseDeckError(Exception):
    message = "Internal error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class Unauthenticated(PhraseDeckError):
    message = "Unauthorized"


class InvalidToken(Unauthenticated):
    message = "Invalid or missing token"


class TokenExpired(Unauthenticated):
    message = "Unauthorized: token expired"


class InvalidCredentials(PhraseDeckError):
    message = "Invalid email or password"


class UserAlreadyExists(PhraseDeckError):
    message = "Email already registered"


class NotFound(PhraseDeckError):
    message = "Not found"


class VocabularyNotFound(NotFound):
    def __init__(self, vocabulary_id: int) -> None:
        self.vocabulary_id = vocabulary_id
        super().__init__(f"Vocabulary with id {vocabulary_id} not found")


class StageNotFound(NotFound):
    def __init__(self, stage_id: int) -> None:
        self.stage_id = stage_id
        super().__init__(f"Stage with id {stage_id} not found")


class SettingsNotFound(NotFound):
    message = "User settings not found"


class LanguageNotFound(NotFound):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Language {code!r} not found")


class PreconditionFailed(PhraseDeckError):
    message = "Precondition failed"


class NoLearnDays(PreconditionFailed):
    message = "There are no Learn Days"


class NoReviewDays(PreconditionFailed):
    message = "There are no Review Days"


class ImportFileEmpty(PreconditionFailed):
    message = "File is empty or not found"


class UpstreamFailure(PhraseDeckError):
    message = "Upstream service failed"


class AudioCleanupFailed(UpstreamFailure):
    """Rows are gone but their audio objects could not be removed."""

    def __init__(self, vocabulary_id: int, filenames: Sequence[str], reason: str) -> None:
        self.vocabulary_id = vocabulary_id
        self.filenames = list(filenames)
        super().__init__(
            f"Vocabulary {vocabulary_id} deleted but audio cleanup failed "
            f"for {', '.join(self.filenames)}: {reason}"
        )


class SpeechSynthesisFailed(UpstreamFailure):
    message = "Speech synthesis failed"


class TranslationFailed(UpstreamFailure):
    message = "Translation failed"


class PartialBatchFailure(PhraseDeckError):
    def __init__(self, completed: Sequence[int], failed_id: int, cause: Exception) -> None:
        self.completed = list(completed)
        self.failed_id = failed_id
        self.cause = cause
        super().__init__(
            f"Batch stopped at id {failed_id} after {len(self.completed)} "
            f"item(s) were processed: {cause}"
        )
