"""Curriculum lookup - pick excerpts relevant to an observation note."""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

MAX_MATCHES = 3
MAX_EXCERPT_CHARS = 3000
EXCERPT_SEPARATOR = "\n\n---\n\n"


@dataclass
class CurriculumMatch:
    """Curriculum entries matching a query, rendered for the prompt."""

    entries: list[dict[str, Any]] = field(default_factory=list)
    excerpt: str = ""

    @property
    def used(self) -> bool:
        return bool(self.excerpt)


def load_curriculum(path: str | Path) -> list[dict[str, Any]]:
    """
    Read the curriculum file.

    A missing or malformed file is not an error: the analysis just runs
    without curriculum context.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read curriculum at %s: %s", path, e)
        return []

    if not isinstance(data, Sequence) or isinstance(data, str):
        logger.warning("Curriculum at %s is not a list, ignoring", path)
        return []
    return [entry for entry in data if isinstance(entry, Mapping)]


def _entry_text(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    return "" if value is None else str(value)


def find_relevant(
    curriculum: Sequence[Mapping[str, Any]],
    query: str | None,
) -> CurriculumMatch:
    """
    Case-insensitive substring search over title + content.

    The first three hits are joined into one excerpt capped at 3000
    characters.
    """
    needle = (query or "").lower().strip()
    if not needle:
        return CurriculumMatch()

    matched = [
        dict(entry)
        for entry in curriculum
        if needle in f"{_entry_text(entry, 'title')} {_entry_text(entry, 'content')}".lower()
    ]
    top = matched[:MAX_MATCHES]
    excerpt = EXCERPT_SEPARATOR.join(
        f"Title: {_entry_text(entry, 'title')}\n{_entry_text(entry, 'content')}" for entry in top
    )[:MAX_EXCERPT_CHARS]
    return CurriculumMatch(entries=top, excerpt=excerpt)
