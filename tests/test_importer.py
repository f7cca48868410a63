"""
Tests for the plain-text vocabulary import
"""

import pytest
from sqlmodel import select

from phrasedeck.errors import ImportFileEmpty, PreconditionFailed
from phrasedeck.models import Language, Phrase, PhraseTranslation
from phrasedeck.services.importer import (
    ImportedPair,
    RawPhrase,
    import_pairs,
    parse_raw_vocabulary,
    parse_translated_vocabulary,
    split_priority,
    translate_phrases,
)
from phrasedeck.services.users import UserPreferences, resolve_settings

TRANSLATED_NOTES = """\
- Guten Morgen#1
  Good morning
- Wie geht's?
  How are you?
- Ohne Übersetzung
-----
- Ignoriert#2
  Ignored
"""


class TestParsing:
    def test_split_priority(self):
        assert split_priority("Hallo#2") == ("Hallo", 2)
        assert split_priority("Hallo") == ("Hallo", 3)
        assert split_priority("Hallo#x") == ("Hallo", 3)

    def test_translated_notes(self):
        assert parse_translated_vocabulary(TRANSLATED_NOTES) == [
            ImportedPair(original="Guten Morgen", translated="Good morning", priority=1),
            ImportedPair(original="Wie geht's?", translated="How are you?", priority=3),
        ]

    def test_hyphenated_words_survive(self):
        pairs = parse_translated_vocabulary("- E-Mail schreiben\n  write an e-mail\n")
        assert pairs == [
            ImportedPair(original="E-Mail schreiben", translated="write an e-mail", priority=3)
        ]

    def test_raw_notes(self):
        content = "Guten Abend#2\n\nDanke\n-----\nlater\n"
        assert parse_raw_vocabulary(content) == [
            RawPhrase(text="Guten Abend", priority=2),
            RawPhrase(text="Danke", priority=3),
        ]

    @pytest.mark.parametrize("content", ["", "   \n"])
    def test_empty_file(self, content):
        with pytest.raises(ImportFileEmpty):
            parse_translated_vocabulary(content)


class TestImport:
    def test_import_pairs(self, session, user):
        pairs = parse_translated_vocabulary(TRANSLATED_NOTES)
        saved = import_pairs(session, user.id, pairs, resolve_settings(session, user.id))

        assert len(saved) == 2
        first = saved[0]
        assert (first.sr_stage_id, first.review_date, first.learned, first.priority) == (
            0,
            None,
            False,
            1,
        )
        original = session.get(Phrase, first.phrase_id)
        translated = session.get(Phrase, first.translated_phrase_id)
        german = session.exec(select(Language).where(Language.code == "de")).one()
        assert original.text == "Guten Morgen"
        assert original.language_id == german.id
        assert translated.text == "Good morning"

    def test_nothing_to_import(self, session, user):
        with pytest.raises(ImportFileEmpty):
            import_pairs(session, user.id, [], resolve_settings(session, user.id))

    def test_languages_required(self, session, user):
        preferences = UserPreferences(origin_language=None, target_language="de", daily_goal=10)
        pair = ImportedPair(original="Hallo", translated="Hello", priority=3)
        with pytest.raises(PreconditionFailed):
            import_pairs(session, user.id, [pair], preferences)
        assert session.exec(select(PhraseTranslation)).all() == []

    def test_translate_phrases(self, translator):
        preferences = UserPreferences(origin_language="en", target_language="de", daily_goal=10)
        pairs = translate_phrases([RawPhrase(text="Danke", priority=1)], translator, preferences)

        assert pairs == [ImportedPair(original="Danke", translated="Danke [en]", priority=1)]
        assert translator.calls == [("Danke", "de", "en")]
