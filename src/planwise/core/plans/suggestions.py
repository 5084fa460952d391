"""Suggestion normalization - uniform {text, rationale, confidence} entries."""

from collections.abc import Iterable
from typing import Any

from planwise.core.coercion import (
    Shape,
    Split,
    first_text,
    is_number,
    shape_of,
    split_text,
    stringify,
)
from planwise.core.models import SuggestionEntry

TEXT_KEYS = ("text", "title", "label")
RATIONALE_KEYS = ("rationale", "reason", "explanation")


def to_suggestion(item: Any) -> SuggestionEntry:
    """Coerce one suggestion/customization entry."""
    match shape_of(item):
        case Shape.STRING:
            return SuggestionEntry(text=item)
        case Shape.OBJECT:
            confidence = item.get("confidence")
            return SuggestionEntry(
                text=first_text(item, TEXT_KEYS) or stringify(item),
                rationale=first_text(item, RATIONALE_KEYS),
                confidence=confidence if is_number(confidence) else None,
            )
        case _:
            return SuggestionEntry(text=stringify(item))


def normalize_suggestions(value: Any, split: Split = Split.LINES) -> list[SuggestionEntry]:
    """
    Normalize a list of mixed string/object suggestions.

    A bare string is split into one entry per line (or sentence). Entries
    with blank text are dropped; anything that is not a list or string
    yields an empty list.
    """
    match shape_of(value):
        case Shape.SEQUENCE:
            entries = [to_suggestion(item) for item in value]
        case Shape.STRING:
            entries = [SuggestionEntry(text=piece) for piece in split_text(value, split)]
        case _:
            return []
    return [entry for entry in entries if entry.text.strip()]


def dedupe_suggestions(entries: Iterable[SuggestionEntry]) -> list[SuggestionEntry]:
    """Remove entries whose trimmed text repeats, keeping first occurrences."""
    seen: set[str] = set()
    out: list[SuggestionEntry] = []
    for entry in entries:
        text = entry.text.strip()
        if text and text not in seen:
            seen.add(text)
            out.append(entry.model_copy(update={"text": text}))
    return out


def suggestion_texts(entries: Iterable[SuggestionEntry]) -> list[str]:
    """Plain texts of suggestion entries, in order."""
    return [entry.text for entry in entries]
