import json

import pytest
import requests
import responses

from deeplkit.errors import HTTPError, InternalServerError, TooManyRequestsError
from deeplkit.models import GlossaryEntry
from deeplkit.options import TranslateOptions
from deeplkit.translator import (
    MAX_ATTEMPTS,
    SERVER_URL_FREE,
    SERVER_URL_PRO,
    Translator,
    is_free_account_auth_key,
)

BASE = "https://api.example.com"


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def translator(sleeps):
    return Translator("placeholder", server_url=BASE, sleep=sleeps.append)


def _body(call):
    body = call.request.body
    if isinstance(body, bytes):
        body = body.decode()
    return json.loads(body)


def test_free_account_key_detection():
    auth_key = "placeholder"
    assert is_free_account_auth_key(auth_key + ":fx") is True
    assert is_free_account_auth_key(auth_key) is False


def test_default_server_url_depends_on_key():
    auth_key = "placeholder"
    assert Translator(auth_key + ":fx").server_url == SERVER_URL_FREE
    assert Translator(auth_key).server_url == SERVER_URL_PRO


def test_server_url_override():
    assert Translator("placeholder", server_url=BASE).server_url == BASE


def test_translate_text_sends_request(mock, translator):
    mock.add(
        responses.POST,
        f"{BASE}/v2/translate",
        json={"translations": [{"detected_source_language": "EN", "text": "Hallo"}]},
    )
    result = translator.translate_text(["Hello"], "DE")
    assert len(result) == 1
    assert result[0].text == "Hallo"
    assert result[0].detected_source_language == "EN"
    request = mock.calls[0].request
    assert request.headers["Authorization"] == "DeepL-Auth-Key placeholder"
    assert _body(mock.calls[0]) == {"text": ["Hello"], "target_lang": "DE"}


def test_translate_text_includes_options(mock, translator):
    mock.add(responses.POST, f"{BASE}/v2/translate", json={"translations": []})
    options = TranslateOptions(source_lang="EN", formality="less", ignore_tags=["keep"])
    assert translator.translate_text(["a", "b"], "DE", options) == []
    body = _body(mock.calls[0])
    assert body["text"] == ["a", "b"]
    assert body["source_lang"] == "EN"
    assert body["formality"] == "less"
    assert body["ignore_tags"] == ["keep"]
    assert "glossary_id" not in body


def test_quota_exceeded_is_reported(mock, translator):
    mock.add(responses.POST, f"{BASE}/v2/translate", status=456)
    with pytest.raises(HTTPError) as info:
        translator.translate_text(["Hello"], "DE")
    assert str(info.value) == "456 - Quota exceeded. The character limit has been reached."
    assert len(mock.calls) == 1


def test_client_error_is_not_retried(mock, translator, sleeps):
    mock.add(responses.GET, f"{BASE}/v2/usage", status=403)
    with pytest.raises(HTTPError) as info:
        translator.get_usage()
    assert info.value.status_code == 403
    assert len(mock.calls) == 1
    assert sleeps == []


def test_too_many_requests_retried_until_attempts_run_out(mock, translator, sleeps):
    mock.add(responses.GET, f"{BASE}/v2/usage", status=429)
    with pytest.raises(TooManyRequestsError):
        translator.get_usage()
    assert len(mock.calls) == MAX_ATTEMPTS
    assert len(sleeps) == MAX_ATTEMPTS - 1
    assert all(delay > 0 for delay in sleeps)


def test_server_error_then_success(mock, translator, sleeps):
    mock.add(responses.GET, f"{BASE}/v2/usage", status=503)
    mock.add(responses.GET, f"{BASE}/v2/usage", json={"character_count": 7, "character_limit": 100})
    usage = translator.get_usage()
    assert usage.character_count == 7
    assert usage.character_limit == 100
    assert len(mock.calls) == 2
    assert len(sleeps) == 1


def test_server_error_exhausts_retries(mock, translator):
    mock.add(responses.GET, f"{BASE}/v2/glossaries", status=500)
    with pytest.raises(InternalServerError):
        translator.list_glossaries()
    assert len(mock.calls) == MAX_ATTEMPTS


def test_get_languages_default_sends_empty_body(mock, translator):
    mock.add(
        responses.GET,
        f"{BASE}/v2/languages",
        json=[{"language": "DE", "name": "German", "supports_formality": True}],
    )
    languages = translator.get_languages()
    assert [(lang.code, lang.name, lang.supports_formality) for lang in languages] == [
        ("DE", "German", True)
    ]
    assert _body(mock.calls[0]) == {}


def test_get_languages_target(mock, translator):
    mock.add(responses.GET, f"{BASE}/v2/languages", json=[])
    assert translator.get_languages("target") == []
    assert _body(mock.calls[0]) == {"type": "target"}


def test_get_languages_rejects_unknown_type(mock, translator):
    with pytest.raises(ValueError, match="Invalid languages `type` value: both"):
        translator.get_languages("both")
    assert len(mock.calls) == 0


def test_glossary_language_pairs(mock, translator):
    mock.add(
        responses.GET,
        f"{BASE}/v2/glossary-language-pairs",
        json={"supported_languages": [{"source_lang": "en", "target_lang": "de"}]},
    )
    pairs = translator.get_glossary_language_pairs()
    assert [(p.source_lang, p.target_lang) for p in pairs] == [("en", "de")]


def test_create_glossary(mock, translator):
    mock.add(
        responses.POST,
        f"{BASE}/v2/glossaries",
        status=201,
        json={"glossary_id": "g1", "name": "terms", "ready": True, "entry_count": 2},
    )
    entries = [GlossaryEntry("a", "b"), GlossaryEntry("c", "d")]
    info = translator.create_glossary("terms", "EN", "DE", entries)
    assert info.glossary_id == "g1"
    assert info.ready is True
    assert info.entry_count == 2
    assert _body(mock.calls[0]) == {
        "name": "terms",
        "source_lang": "EN",
        "target_lang": "DE",
        "entries": "a\tb\nc\td",
        "entries_format": "tsv",
    }


def test_create_glossary_requires_created_status(mock, translator):
    mock.add(responses.POST, f"{BASE}/v2/glossaries", status=200, json={})
    with pytest.raises(HTTPError) as info:
        translator.create_glossary("terms", "EN", "DE", [])
    assert info.value.status_code == 200


def test_list_and_get_glossary(mock, translator):
    mock.add(
        responses.GET,
        f"{BASE}/v2/glossaries",
        json={"glossaries": [{"glossary_id": "g1"}, {"glossary_id": "g2"}]},
    )
    mock.add(responses.GET, f"{BASE}/v2/glossaries/g2", json={"glossary_id": "g2", "name": "x"})
    assert [g.glossary_id for g in translator.list_glossaries()] == ["g1", "g2"]
    glossary = translator.get_glossary("g2")
    assert (glossary.glossary_id, glossary.name) == ("g2", "x")


def test_delete_glossary(mock, translator):
    mock.add(responses.DELETE, f"{BASE}/v2/glossaries/g1", status=204)
    result = translator.delete_glossary("g1")
    assert result is None
    assert len(mock.calls) == 1
    assert mock.calls[0].request.method == "DELETE"
    assert mock.calls[0].request.url == f"{BASE}/v2/glossaries/g1"


def test_delete_glossary_missing(mock, translator):
    mock.add(responses.DELETE, f"{BASE}/v2/glossaries/g1", status=404)
    with pytest.raises(HTTPError) as info:
        translator.delete_glossary("g1")
    assert info.value.status_code == 404


def test_get_glossary_entries(mock, translator):
    mock.add(responses.GET, f"{BASE}/v2/glossaries/g1/entries", body="a\tb\nc\td\n")
    entries = translator.get_glossary_entries("g1")
    assert entries == [GlossaryEntry("a", "b"), GlossaryEntry("c", "d")]
    assert mock.calls[0].request.headers["Accept"] == "text/tab-separated-values"


def test_document_upload(mock, translator, tmp_path):
    path = tmp_path / "report.txt"
    path.write_bytes(b"file contents")
    mock.add(
        responses.POST,
        f"{BASE}/v2/document",
        json={"document_id": "doc1", "document_key": "key1"},
    )
    info = translator.translate_document_upload(path, "DE", TranslateOptions(formality="more"))
    assert (info.document_id, info.document_key) == ("doc1", "key1")
    body = mock.calls[0].request.body
    assert b"file contents" in body
    assert b"report.txt" in body
    assert b'name="formality"' in body
    assert b'name="source_lang"' not in body
    positions = [
        body.index(b'name="filename"'),
        body.index(b'name="target_lang"'),
        body.index(b'name="file";'),
    ]
    assert positions == sorted(positions)
    assert mock.calls[0].request.headers["Content-Type"].startswith("multipart/form-data")


def test_document_upload_missing_file(mock, translator, tmp_path):
    with pytest.raises(FileNotFoundError):
        translator.translate_document_upload(tmp_path / "absent.txt", "DE")
    assert len(mock.calls) == 0


def test_document_status(mock, translator):
    mock.add(
        responses.POST,
        f"{BASE}/v2/document/doc1",
        json={"document_id": "doc1", "status": "done", "billed_characters": 42},
    )
    status = translator.translate_document_status("doc1", "key1")
    assert status.status == "done"
    assert status.billed_characters == 42
    assert _body(mock.calls[0]) == {"document_key": "key1"}


def test_document_download(mock, translator):
    mock.add(responses.POST, f"{BASE}/v2/document/doc1/result", body=b"translated bytes")
    chunks = translator.translate_document_download("doc1", "key1")
    assert b"".join(chunks) == b"translated bytes"
    assert _body(mock.calls[0]) == {"document_key": "key1"}


def test_document_download_failure(mock, translator):
    mock.add(responses.POST, f"{BASE}/v2/document/doc1/result", status=404)
    with pytest.raises(HTTPError) as info:
        translator.translate_document_download("doc1", "key1")
    assert info.value.status_code == 404


def test_connection_error_propagates(mock, translator, sleeps):
    mock.add(
        responses.GET,
        f"{BASE}/v2/usage",
        body=requests.ConnectionError("unreachable"),
    )
    with pytest.raises(requests.ConnectionError):
        translator.get_usage()
    assert sleeps == []