"""Records returned by the translation API."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

R = TypeVar("R")


def _decode(cls: Type[R], data: Mapping[str, Any]) -> R:
    """Build a record from decoded JSON; missing or null keys keep their defaults."""
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a JSON object for {cls.__name__}, got {type(data).__name__}")
    values = {}
    for f in fields(cls):  # type: ignore[arg-type]
        value = data.get(f.metadata.get("json", f.name))
        if value is not None:
            values[f.name] = value
    return cls(**values)


@dataclass(frozen=True)
class _Record:
    def to_dict(self) -> Dict[str, Any]:
        """Return the record keyed by its JSON names."""
        return {f.metadata.get("json", f.name): getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Translation(_Record):
    """The result of translating one text."""

    detected_source_language: str = ""
    text: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Translation":
        """Build a translation from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class Usage(_Record):
    """Character and document counts with the account's limits."""

    character_count: int = 0
    character_limit: int = 0
    document_count: int = 0
    document_limit: int = 0
    team_document_count: int = 0
    team_document_limit: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Usage":
        """Build usage figures from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class Language(_Record):
    """A supported language."""

    code: str = field(default="", metadata={"json": "language"})
    name: str = ""
    supports_formality: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Language":
        """Build a language from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class LanguagePair(_Record):
    """A source and target language usable together in a glossary."""

    source_lang: str = ""
    target_lang: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LanguagePair":
        """Build a language pair from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class GlossaryEntry:
    """One source term and its translation."""

    source: str
    target: str


@dataclass(frozen=True)
class GlossaryInfo(_Record):
    """Details of a stored glossary."""

    glossary_id: str = ""
    name: str = ""
    ready: bool = False
    source_lang: str = ""
    target_lang: str = ""
    creation_time: str = ""
    entry_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GlossaryInfo":
        """Build glossary details from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class DocumentInfo(_Record):
    """Identifies an uploaded document and the key to access it."""

    document_id: str = ""
    document_key: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentInfo":
        """Build document details from decoded JSON."""
        return _decode(cls, data)


@dataclass(frozen=True)
class DocumentStatus(_Record):
    """The state of a document translation.

    ``seconds_remaining``, ``billed_characters`` and ``message`` are only
    present in some states.
    """

    document_id: str = ""
    status: str = ""
    seconds_remaining: Optional[int] = None
    billed_characters: int = 0
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentStatus":
        """Build a document status from decoded JSON."""
        return _decode(cls, data)


def encode_glossary_entries(entries: Iterable[GlossaryEntry]) -> str:
    """Encode entries as tab-separated lines."""
    return "\n".join(f"{entry.source}\t{entry.target}" for entry in entries)


def parse_glossary_entries(text: str) -> List[GlossaryEntry]:
    """Parse tab-separated glossary entries; every row must have the same width."""
    reader = csv.reader(io.StringIO(text, newline=""), delimiter="\t", strict=True)
    entries: List[GlossaryEntry] = []
    width: Optional[int] = None
    try:
        for row in reader:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                raise ValueError(
                    f"record on line {reader.line_num}: wrong number of fields"
                )
            if len(row) < 2:
                raise ValueError(
                    f"record on line {reader.line_num}: expected source and target"
                )
            entries.append(GlossaryEntry(source=row[0], target=row[1]))
    except csv.Error as exc:
        raise ValueError(f"malformed glossary entries: {exc}") from exc
    return entries