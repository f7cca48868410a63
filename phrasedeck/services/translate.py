from __future__ import annotations

import logging
from urllib.error import URLError

from mtranslate import translate

from ..errors import TranslationFailed

logger = logging.getLogger(__name__)


class Translator:
    def translate(self, text: str, source_language: str, target_language: str) -> str:
        try:
            result = translate(text, target_language, source_language)
        except (URLError, OSError) as exc:
            logger.error("Translation of %r failed: %s", text, exc)
            raise TranslationFailed(f"Translation failed: {exc}") from exc
        if not result:
            raise TranslationFailed()
        return result
