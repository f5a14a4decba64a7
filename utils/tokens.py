import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from utils.lexicon import (
    BOOK_WORDS,
    FILLER_WORDS,
    ORDINAL_PREFIXES,
    STRUCTURAL_WORDS,
    TRANSLATION_ALIASES,
    TRANSLATION_SUFFIXES,
)
from utils.numbers import word_to_number

# "3:16" and "3.16" survive as one token, everything else splits on non-word characters
TOKEN_PATTERN = re.compile(r"\d+[:.]\d+|[a-z0-9]+(?:['-][a-z0-9]+)*")
CHAPTER_VERSE_PATTERN = re.compile(r"^(\d+)[:.](\d+)$")

# Longest alias first so "king james version" is tried before "king james"
_ALIASES_BY_LENGTH = sorted(TRANSLATION_ALIASES, key=len, reverse=True)


@dataclass
class TranslationMatch:
    translation_id: Optional[str]
    remaining: List[str] = field(default_factory=list)


def tokenize(text: str) -> List[str]:
    """Lowercase an utterance and split it into word, number and "c:v" tokens"""
    if not text:
        return []
    normalized = text.lower().replace("’", "'")
    return TOKEN_PATTERN.findall(normalized)


def _is_protected(token: str) -> bool:
    return (
        token.isdigit()
        or CHAPTER_VERSE_PATTERN.match(token) is not None
        or word_to_number(token) is not None
        or token in ORDINAL_PREFIXES
        or token in STRUCTURAL_WORDS
        or token in BOOK_WORDS
    )


def clean_tokens(tokens: Sequence[str]) -> List[str]:
    """
    Drop filler words from a token sequence.

    Numbers, ordinals, structural words ("chapter", "verse") and anything that can
    be part of a book name are kept even when they also appear in the filler list.
    Order is preserved and nothing is deduplicated.
    """
    cleaned = []
    for token in tokens:
        lower = token.lower()
        if lower in FILLER_WORDS and not _is_protected(lower):
            continue
        cleaned.append(token)
    return cleaned


def extract_translation(tokens: Sequence[str]) -> TranslationMatch:
    """
    Find a translation name anywhere in the utterance and cut it out.

    Runs against the joined string so multi-word aliases are seen whole. A trailing
    "version", "translation" or "bible" is consumed with the alias.
    """
    joined = " ".join(t.lower() for t in tokens)
    suffixes = "|".join(TRANSLATION_SUFFIXES)

    for alias in _ALIASES_BY_LENGTH:
        pattern = re.compile(
            r"(?<!\S)" + re.escape(alias) + r"(?:\s+(?:" + suffixes + r"))*(?!\S)"
        )
        match = pattern.search(joined)
        if match:
            remainder = joined[:match.start()] + " " + joined[match.end():]
            return TranslationMatch(
                translation_id=TRANSLATION_ALIASES[alias],
                remaining=remainder.split(),
            )

    return TranslationMatch(translation_id=None, remaining=list(tokens))
