import pytest

from deeplkit.models import (
    DocumentInfo,
    DocumentStatus,
    GlossaryEntry,
    GlossaryInfo,
    Language,
    LanguagePair,
    Translation,
    Usage,
    encode_glossary_entries,
    parse_glossary_entries,
)


def test_translation_from_dict():
    translation = Translation.from_dict({"detected_source_language": "EN", "text": "Hallo"})
    assert translation.detected_source_language == "EN"
    assert translation.text == "Hallo"


def test_missing_keys_keep_defaults():
    info = GlossaryInfo.from_dict({"name": "terms"})
    assert info.name == "terms"
    assert info.glossary_id == ""
    assert info.ready is False
    assert info.entry_count == 0


def test_null_values_keep_defaults():
    usage = Usage.from_dict({"character_count": None, "character_limit": 500000})
    assert usage.character_count == 0
    assert usage.character_limit == 500000


def test_unknown_keys_are_ignored():
    pair = LanguagePair.from_dict({"source_lang": "en", "target_lang": "de", "extra": 1})
    assert pair == LanguagePair(source_lang="en", target_lang="de")


def test_language_reads_language_key():
    language = Language.from_dict({"language": "DE", "name": "German", "supports_formality": True})
    assert language.code == "DE"
    assert language.name == "German"
    assert language.supports_formality is True


def test_language_to_dict_uses_json_names():
    language = Language(code="FR", name="French", supports_formality=False)
    assert language.to_dict() == {"language": "FR", "name": "French", "supports_formality": False}


@pytest.mark.parametrize(
    "record",
    [
        Translation(detected_source_language="JA", text="text"),
        Usage(character_count=1, character_limit=2, document_count=3),
        Language(code="IT", name="Italian", supports_formality=True),
        LanguagePair(source_lang="en", target_lang="ja"),
        GlossaryInfo(glossary_id="g1", name="n", ready=True, entry_count=7),
        DocumentInfo(document_id="doc", document_key="key"),
        DocumentStatus(document_id="doc", status="translating", seconds_remaining=20),
    ],
)
def test_to_dict_round_trips(record):
    assert type(record).from_dict(record.to_dict()) == record


def test_document_status_optional_fields():
    status = DocumentStatus.from_dict(
        {"document_id": "doc", "status": "done", "billed_characters": 1337}
    )
    assert status.status == "done"
    assert status.billed_characters == 1337
    assert status.seconds_remaining is None
    assert status.message == ""


def test_from_dict_rejects_non_objects():
    with pytest.raises(TypeError):
        Usage.from_dict(["character_count"])


def test_encode_glossary_entries_format():
    entries = [GlossaryEntry("artist", "Maler"), GlossaryEntry("prize", "Gewinn")]
    assert encode_glossary_entries(entries) == "artist\tMaler\nprize\tGewinn"


def test_encode_no_entries():
    assert encode_glossary_entries([]) == ""


def test_glossary_entries_round_trip():
    entries = [GlossaryEntry("hello", "hallo"), GlossaryEntry("world", "Welt")]
    assert parse_glossary_entries(encode_glossary_entries(entries)) == entries


def test_parse_handles_crlf_and_trailing_newline():
    parsed = parse_glossary_entries("a\tb\r\nc\td\r\n")
    assert parsed == [GlossaryEntry("a", "b"), GlossaryEntry("c", "d")]


def test_parse_skips_blank_lines():
    assert parse_glossary_entries("a\tb\n\nc\td") == [GlossaryEntry("a", "b"), GlossaryEntry("c", "d")]


def test_parse_empty_text():
    assert parse_glossary_entries("") == []


def test_parse_rejects_single_column():
    with pytest.raises(ValueError):
        parse_glossary_entries("only\nsource")


def test_parse_rejects_uneven_rows():
    with pytest.raises(ValueError):
        parse_glossary_entries("a\tb\nc\td\te")


def test_parse_quoted_field():
    parsed = parse_glossary_entries('"a\tb"\tc')
    assert parsed == [GlossaryEntry("a\tb", "c")]