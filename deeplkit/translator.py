"""Client for the translation API."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Union

import requests

from .errors import http_error, is_retriable, retriable_http_error
from .models import (
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
from .options import TranslateOptions
from .retry import Backoff, retry

SERVER_URL_PRO = "https://api.deepl.com"
SERVER_URL_FREE = "https://api-free.deepl.com"

DEFAULT_TIMEOUT = 10.0
MAX_ATTEMPTS = 5
DEFAULT_BACKOFF = Backoff(initial_delay=1.0, max_delay=120.0, factor=1.6, jitter=0.23)

LANGUAGE_TYPES = ("source", "target")

_DOCUMENT_FIELDS = ("source_lang", "formality", "glossary_id")
_DOWNLOAD_CHUNK = 64 * 1024


def is_free_account_auth_key(auth_key: str) -> bool:
    """Tell whether the auth key belongs to a free account."""
    return auth_key.endswith(":fx")


class Translator:
    """Sends requests to the translation API on behalf of one account."""

    def __init__(
        self,
        auth_key: str,
        *,
        server_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        backoff: Optional[Backoff] = DEFAULT_BACKOFF,
        sleep: Callable[[float], object] = time.sleep,
    ) -> None:
        if server_url is None:
            server_url = SERVER_URL_FREE if is_free_account_auth_key(auth_key) else SERVER_URL_PRO
        self.server_url = server_url
        self._auth_key = auth_key
        self._session = session if session is not None else requests.Session()
        self._backoff = backoff
        self._sleep = sleep

    # -- transport -----------------------------------------------------------

    def _call(
        self,
        method: str,
        endpoint: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        json_body: Any = None,
        data: Any = None,
        files: Any = None,
        stream: bool = False,
    ) -> requests.Response:
        url = f"{self.server_url}/{endpoint}"
        request_headers = {"Authorization": f"DeepL-Auth-Key {self._auth_key}"}
        if headers:
            request_headers.update(headers)

        def attempt() -> requests.Response:
            res = self._session.request(
                method,
                url,
                headers=request_headers,
                json=json_body,
                data=data,
                files=files,
                stream=stream,
                timeout=DEFAULT_TIMEOUT,
            )
            error = retriable_http_error(res.status_code)
            if error is not None:
                res.close()
                raise error
            return res

        return retry(
            attempt,
            max_attempts=MAX_ATTEMPTS,
            retry_if=is_retriable,
            backoff=self._backoff,
            sleep=self._sleep,
        )

    @staticmethod
    def _check(res: requests.Response, expected: int = 200) -> None:
        if res.status_code != expected:
            res.close()
            raise http_error(res.status_code)

    def _fetch_json(self, method: str, endpoint: str, expected: int = 200, **kwargs: Any) -> Any:
        with self._call(method, endpoint, **kwargs) as res:
            self._check(res, expected)
            return res.json()

    # -- text ----------------------------------------------------------------

    def translate_text(
        self,
        texts: Union[str, Sequence[str]],
        target_lang: str,
        options: Optional[TranslateOptions] = None,
    ) -> List[Translation]:
        """Translate the texts into the target language.

        The whole request body must not exceed 128 KiB.
        """
        if isinstance(texts, str):
            texts = [texts]
        body: Dict[str, Any] = {"text": list(texts), "target_lang": target_lang}
        if options is not None:
            body.update(options.as_params())
        response = self._fetch_json("POST", "v2/translate", json_body=body)
        return [Translation.from_dict(item) for item in response.get("translations") or ()]

    # -- account -------------------------------------------------------------

    def get_usage(self) -> Usage:
        """Return the account's usage and limits."""
        return Usage.from_dict(self._fetch_json("GET", "v2/usage"))

    def get_languages(self, lang_type: Optional[str] = "") -> List[Language]:
        """Return the supported languages; ``lang_type`` is ``source`` (default) or ``target``."""
        body: Dict[str, str] = {}
        if lang_type:
            if lang_type not in LANGUAGE_TYPES:
                raise ValueError(f"Invalid languages `type` value: {lang_type}")
            body["type"] = lang_type
        response = self._fetch_json("GET", "v2/languages", json_body=body)
        return [Language.from_dict(item) for item in response or ()]

    # -- glossaries ----------------------------------------------------------

    def get_glossary_language_pairs(self) -> List[LanguagePair]:
        """Return the language pairs that glossaries support."""
        response = self._fetch_json("GET", "v2/glossary-language-pairs")
        return [LanguagePair.from_dict(item) for item in response.get("supported_languages") or ()]

    def create_glossary(
        self,
        name: str,
        source_lang: str,
        target_lang: str,
        entries: Sequence[GlossaryEntry],
    ) -> GlossaryInfo:
        """Create a glossary holding the given entries."""
        body = {
            "name": name,
            "source_lang": source_lang,
            "target_lang": target_lang,
            "entries": encode_glossary_entries(entries),
            "entries_format": "tsv",
        }
        response = self._fetch_json("POST", "v2/glossaries", expected=201, json_body=body)
        return GlossaryInfo.from_dict(response)

    def list_glossaries(self) -> List[GlossaryInfo]:
        """Return every glossary of the account."""
        response = self._fetch_json("GET", "v2/glossaries")
        return [GlossaryInfo.from_dict(item) for item in response.get("glossaries") or ()]

    def get_glossary(self, glossary_id: str) -> GlossaryInfo:
        """Return the details of one glossary."""
        return GlossaryInfo.from_dict(self._fetch_json("GET", f"v2/glossaries/{glossary_id}"))

    def delete_glossary(self, glossary_id: str) -> None:
        """Delete a glossary."""
        with self._call("DELETE", f"v2/glossaries/{glossary_id}") as res:
            self._check(res, 204)

    def get_glossary_entries(self, glossary_id: str) -> List[GlossaryEntry]:
        """Return the entries of a glossary."""
        with self._call(
            "GET",
            f"v2/glossaries/{glossary_id}/entries",
            headers={"Accept": "text/tab-separated-values"},
        ) as res:
            self._check(res)
            return parse_glossary_entries(res.text)

    # -- documents -----------------------------------------------------------

    def translate_document_upload(
        self,
        path: Union[str, os.PathLike],
        target_lang: str,
        options: Optional[TranslateOptions] = None,
    ) -> DocumentInfo:
        """Upload a document for translation.

        Of the options only ``source_lang``, ``formality`` and ``glossary_id``
        are sent.
        """
        file_path = Path(path)
        content = file_path.read_bytes()
        filename = file_path.name

        fields = [("filename", filename), ("target_lang", target_lang)]
        if options is not None:
            for name in _DOCUMENT_FIELDS:
                value = getattr(options, name)
                if value is not None:
                    fields.append((name, value))

        response = self._fetch_json(
            "POST",
            "v2/document",
            data=fields,
            files={"file": (filename, content)},
        )
        return DocumentInfo.from_dict(response)

    def translate_document_status(self, document_id: str, document_key: str) -> DocumentStatus:
        """Return the state of a document translation."""
        response = self._fetch_json(
            "POST",
            f"v2/document/{document_id}",
            json_body={"document_key": document_key},
        )
        return DocumentStatus.from_dict(response)

    def translate_document_download(self, document_id: str, document_key: str) -> Iterator[bytes]:
        """Fetch a translated document and return an iterator over its bytes."""
        res = self._call(
            "POST",
            f"v2/document/{document_id}/result",
            json_body={"document_key": document_key},
            stream=True,
        )
        self._check(res)
        return self._stream(res)

    @staticmethod
    def _stream(res: requests.Response) -> Iterator[bytes]:
        with res:
            for chunk in res.iter_content(chunk_size=_DOWNLOAD_CHUNK):
                if chunk:
                    yield chunk