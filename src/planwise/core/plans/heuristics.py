"""
Keyword heuristics for behavior plans.

When the model leaves out antecedents or consequences, sentences that
mention "before"/"after"-style words anywhere in its output are used
instead. Best effort only: the keyword lists are Arabic BCBA wording and
will both over- and under-match.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from planwise.core.coercion import Split, split_text

ANTECEDENT_KEYWORDS: tuple[str, ...] = (
    "قبل",
    "عند",
    "أثناء",
    "مسبق",
    "سابقاً",
    "قبل السلوك",
)

CONSEQUENCE_KEYWORDS: tuple[str, ...] = (
    "بعد",
    "عقب",
    "ينتج",
    "نتيجة",
    "يحصل",
    "يحصل على",
    "يؤدي إلى",
    "ثم",
)


def collect_strings(value: Any) -> list[str]:
    """
    Every string in a JSON tree, depth-first.

    Objects are walked in key order, arrays in index order.
    """
    out: list[str] = []
    stack: list[Any] = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            out.append(current)
        elif isinstance(current, Mapping):
            stack.extend(reversed(list(current.values())))
        elif isinstance(current, Sequence) and not isinstance(current, (bytes, bytearray)):
            stack.extend(reversed(current))
    return out


def sentences_of(texts: Iterable[str]) -> list[str]:
    """Split texts into sentence-like units on . ? ! ; and newlines."""
    return [sentence for text in texts for sentence in split_text(text, Split.SENTENCES)]


def contains_keyword(sentence: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    if not sentence:
        return False
    low = sentence.lower()
    return any(keyword.lower() in low for keyword in keywords)


def filter_by_keywords(sentences: Iterable[str], keywords: Iterable[str]) -> list[str]:
    keywords = tuple(keywords)
    return [s for s in sentences if contains_keyword(s, keywords)]
