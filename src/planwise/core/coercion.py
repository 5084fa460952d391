"""
Shape coercion - turn loosely-typed AI fields into canonical shapes.

Upstream models return the same field as a string, a list, an object or
not at all. Every value is first classified into a `Shape`, then coerced
by matching on that tag. None of the functions here raise.
"""

import json
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, NamedTuple

DEFAULT_ACTIVITY_TYPE = "نشاط"

LINE_BREAK_PATTERN = re.compile(r"\r?\n")
SENTENCE_BREAK_PATTERN = re.compile(r"[.?!;\n]+")
PAIR_SEPARATOR_PATTERN = re.compile(r"[|\-:]")


class Shape(str, Enum):
    """Tag for the JSON shape of a raw value."""

    ABSENT = "ABSENT"
    STRING = "STRING"
    SEQUENCE = "SEQUENCE"
    OBJECT = "OBJECT"
    SCALAR = "SCALAR"


class Split(str, Enum):
    """How a free-text field is broken into list items."""

    LINES = "LINES"
    SENTENCES = "SENTENCES"


class Pair(NamedTuple):
    """A structured two-part value such as (skill, modality)."""

    first: str = ""
    second: str = ""


def shape_of(value: Any) -> Shape:
    """Classify a raw JSON value."""
    if value is None:
        return Shape.ABSENT
    if isinstance(value, str):
        return Shape.STRING
    if isinstance(value, Mapping):
        return Shape.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return Shape.SEQUENCE
    return Shape.SCALAR


def is_empty(value: Any) -> bool:
    """True for None, blank strings and empty containers."""
    match shape_of(value):
        case Shape.ABSENT:
            return True
        case Shape.STRING:
            return not value.strip()
        case Shape.SEQUENCE | Shape.OBJECT:
            return len(value) == 0
        case _:
            return False


def is_number(value: Any) -> bool:
    """True for finite ints and floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def stringify(value: Any) -> str:
    """Render any JSON value as display text."""
    match shape_of(value):
        case Shape.ABSENT:
            return ""
        case Shape.STRING:
            return value
        case Shape.OBJECT | Shape.SEQUENCE:
            return json.dumps(value, ensure_ascii=False, default=str)
        case _:
            if isinstance(value, bool):
                return "true" if value else "false"
            return str(value)


def to_text(value: Any) -> str:
    """Keep strings and numbers as text; anything else is empty."""
    if isinstance(value, str):
        return value
    if is_number(value):
        return str(value)
    return ""


def first_present(mapping: Any, keys: Iterable[str]) -> Any:
    """
    Probe alias keys in priority order.

    Returns:
        The first non-empty value, or None
    """
    if not isinstance(mapping, Mapping):
        return None
    for key in keys:
        value = mapping.get(key)
        if not is_empty(value):
            return value
    return None


def first_text(mapping: Any, keys: Iterable[str]) -> str:
    """First alias whose value renders as non-empty text."""
    if not isinstance(mapping, Mapping):
        return ""
    for key in keys:
        text = to_text(mapping.get(key))
        if text.strip():
            return text
    return ""


def get_path(mapping: Any, path: str) -> Any:
    """Read a dotted path ("measurement.type") from nested mappings."""
    current = mapping
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def text_at(mapping: Any, paths: Iterable[str]) -> str:
    """Like `first_text`, but each candidate may be a dotted path."""
    for path in paths:
        text = to_text(get_path(mapping, path))
        if text.strip():
            return text
    return ""


def split_text(text: str, split: Split = Split.LINES) -> list[str]:
    """Break free text into trimmed, non-blank pieces."""
    pattern = SENTENCE_BREAK_PATTERN if split is Split.SENTENCES else LINE_BREAK_PATTERN
    return [piece.strip() for piece in pattern.split(text) if piece.strip()]


def to_string_list(
    value: Any,
    split: Split = Split.LINES,
    item_keys: Sequence[str] = (),
) -> list[str]:
    """
    Coerce a value into a list of non-blank strings.

    - sequence: stringify each element, trim, drop blanks; object elements
      use their first `item_keys` text when one is present
    - string: split on line breaks (or sentence punctuation)
    - anything else: empty list
    """
    match shape_of(value):
        case Shape.SEQUENCE:
            items = (_item_text(item, item_keys).strip() for item in value)
            return [item for item in items if item]
        case Shape.STRING:
            return split_text(value, split)
        case _:
            return []


def _item_text(item: Any, keys: Sequence[str]) -> str:
    if keys and isinstance(item, Mapping):
        return first_text(item, keys) or stringify(item)
    return stringify(item)


def to_pair(
    value: Any,
    first_keys: Sequence[str],
    second_keys: Sequence[str],
) -> Pair:
    """
    Coerce a value into a two-part pair.

    - object: first non-empty alias for each side
    - string: split on "|", "-" or ":" (first two parts)
    - anything else: empty pair
    """
    match shape_of(value):
        case Shape.OBJECT:
            return Pair(first_text(value, first_keys), first_text(value, second_keys))
        case Shape.STRING:
            parts = [p.strip() for p in PAIR_SEPARATOR_PATTERN.split(value) if p.strip()]
            first = parts[0] if parts else value.strip()
            second = parts[1] if len(parts) > 1 else ""
            return Pair(first, second)
        case _:
            return Pair()


def to_activity(value: Any) -> dict[str, str]:
    """
    Coerce one activity entry into {type, name}.

    "type: name" strings are split on the first colon; objects are probed
    with type/kind/category and name/title/label.
    """
    match shape_of(value):
        case Shape.STRING:
            parts = [p.strip() for p in value.split(":")]
            if len(parts) >= 2:
                return {"type": parts[0], "name": ":".join(parts[1:])}
            return {"type": DEFAULT_ACTIVITY_TYPE, "name": value.strip()}
        case Shape.OBJECT:
            return {
                "type": first_text(value, ("type", "kind", "category")) or DEFAULT_ACTIVITY_TYPE,
                "name": first_text(value, ("name", "title", "label")) or stringify(value),
            }
        case _:
            return {"type": DEFAULT_ACTIVITY_TYPE, "name": stringify(value)}


def to_activities(value: Any) -> list[dict[str, str]]:
    """Coerce a list (or newline-separated text) of activities."""
    match shape_of(value):
        case Shape.SEQUENCE:
            return [to_activity(item) for item in value if not is_empty(item)]
        case Shape.STRING:
            return [to_activity(line) for line in split_text(value, Split.LINES)]
        case _:
            return []


def to_int(value: Any, default: int) -> int:
    """Coerce a count-like value to int, falling back to `default`."""
    if is_number(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return default
    return default


def dedupe(items: Iterable[str]) -> list[str]:
    """Trim, drop blanks and remove repeats, keeping first occurrences."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        text = item.strip()
        if text and text not in seen:
            seen.add(text)
            out.append(text)
    return out
