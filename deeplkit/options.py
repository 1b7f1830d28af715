"""Options that customise a translation request."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Sequence, Tuple

SPLIT_SENTENCES_VALUES = ("0", "1", "nonewlines")
FORMALITY_VALUES = ("default", "more", "less", "prefer_more", "prefer_less")
TAG_HANDLING_VALUES = ("html", "xml")
OUTPUT_FORMAT_VALUES = ("docx",)

_ALLOWED = {
    "split_sentences": SPLIT_SENTENCES_VALUES,
    "formality": FORMALITY_VALUES,
    "tag_handling": TAG_HANDLING_VALUES,
    "output_format": OUTPUT_FORMAT_VALUES,
}

_TAG_LISTS = ("non_splitting_tags", "splitting_tags", "ignore_tags")


class InvalidOptionError(ValueError):
    """A translation option was given a value the API does not accept."""

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for option `{name}`: {value}")


@dataclass(frozen=True)
class TranslateOptions:
    """Optional translation settings; ``None`` leaves the API default in place.

    ``split_sentences`` is one of ``0``, ``1`` or ``nonewlines``;
    ``formality`` one of ``default``, ``more``, ``less``, ``prefer_more`` or
    ``prefer_less``; ``tag_handling`` is ``html`` or ``xml``; and
    ``output_format`` is ``docx``. A glossary requires ``source_lang``.
    """

    source_lang: Optional[str] = None
    split_sentences: Optional[str] = None
    preserve_formatting: Optional[bool] = None
    formality: Optional[str] = None
    glossary_id: Optional[str] = None
    tag_handling: Optional[str] = None
    outline_detection: Optional[bool] = None
    non_splitting_tags: Optional[Sequence[str]] = None
    splitting_tags: Optional[Sequence[str]] = None
    ignore_tags: Optional[Sequence[str]] = None
    output_format: Optional[str] = None

    def __post_init__(self) -> None:
        for name, allowed in _ALLOWED.items():
            value = getattr(self, name)
            if value is not None and value not in allowed:
                raise InvalidOptionError(name, value)
        for name in _TAG_LISTS:
            value = getattr(self, name)
            if value is not None:
                if isinstance(value, str):
                    value = (value,)
                object.__setattr__(self, name, tuple(value))

    def as_params(self) -> Dict[str, Any]:
        """Return the options that are set, keyed by their API names."""
        params: Dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            if isinstance(value, tuple):
                if not value:
                    continue
                value = list(value)
            params[field.name] = value
        return params


def _tags(value: Optional[Sequence[str]]) -> Tuple[str, ...]:
    return tuple(value or ())