import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from utils.lexicon import BIBLE_BOOKS


class IntentType(str, Enum):
    COMMAND = "COMMAND"
    NARRATIVE = "NARRATIVE"
    MEDIA = "MEDIA"
    UNCERTAIN = "UNCERTAIN"


@dataclass(frozen=True)
class IntentResult:
    type: IntentType
    confidence: float
    reason: Optional[str] = None


# Built-in wake words. Callers pass extra ones per request, they are merged, never stored.
DEFAULT_WAKE_WORDS = (
    "voicebible", "voice bible", "bible app", "scripture app",
    "hey bible", "okay bible", "bible", "wake up", "media",
)

COMMAND_TRIGGERS = ("open", "go to", "search", "find", "show me", "display", "read", "pull up")

MEDIA_TRIGGERS = ("media", "project", "presentation", "screen", "display mode")

SCRIPTURE_PREFIXES = ("bible says", "scripture says", "book of", "letter to", "gospel of")

NARRATIVE_WORD_COUNT = 15
SHORT_COMMAND_WORD_COUNT = 10


def _book_pattern() -> str:
    identifiers = set()
    for book in BIBLE_BOOKS:
        identifiers.add(book.name.lower())
        identifiers.update(book.abbreviations)
    # longest first so "1 john" is tried before "john"
    ordered = sorted(identifiers, key=len, reverse=True)
    return "|".join(re.escape(identifier) for identifier in ordered)


_BOOK_ALTERNATION = _book_pattern()
VERSE_REFERENCE_REGEX = re.compile(r"\b(" + _BOOK_ALTERNATION + r")\b\s+\d+([:.]\s*\d+)?", re.IGNORECASE)
BOOK_REFERENCE_REGEX = re.compile(r"\b(" + _BOOK_ALTERNATION + r")\b", re.IGNORECASE)


def classify_intent(text: str, custom_wake_words: Iterable[str] = ()) -> IntentResult:
    """
    Decide whether a spoken utterance is addressed to the app.

    Sermons and conversations are transcribed continuously, so most input is narrative
    that must be ignored. An utterance counts as a command when it carries a wake word,
    a verse reference or a book name. Media triggers are recognised before anything else.
    """
    normalized = (text or "").lower().strip()
    if not normalized:
        return IntentResult(IntentType.UNCERTAIN, 0.0)

    wake_words = list(DEFAULT_WAKE_WORDS) + [w.lower() for w in custom_wake_words if w]
    has_wake_word = any(wake in normalized for wake in wake_words)

    has_verse_reference = VERSE_REFERENCE_REGEX.search(normalized) is not None
    has_book_reference = BOOK_REFERENCE_REGEX.search(normalized) is not None

    if any(trigger in normalized for trigger in MEDIA_TRIGGERS):
        return IntentResult(IntentType.MEDIA, 0.95, "Media trigger detected")

    if not has_wake_word and not has_verse_reference and not has_book_reference:
        return IntentResult(IntentType.NARRATIVE, 0.95, "No wake word or bible reference")

    if has_verse_reference:
        return IntentResult(IntentType.COMMAND, 1.0, "Detected explicit verse reference")

    if has_book_reference:
        return IntentResult(IntentType.COMMAND, 0.9, "Detected book reference")

    # From here on a wake word is guaranteed
    if any(trigger in normalized for trigger in COMMAND_TRIGGERS):
        return IntentResult(IntentType.COMMAND, 0.9, "Wake word + command trigger")

    if any(prefix in normalized for prefix in SCRIPTURE_PREFIXES):
        return IntentResult(IntentType.COMMAND, 0.85, "Wake word + scripture context")

    word_count = len(normalized.split())
    if word_count > NARRATIVE_WORD_COUNT:
        return IntentResult(IntentType.NARRATIVE, 0.8, "Too long / narrative flow")

    if word_count < SHORT_COMMAND_WORD_COUNT:
        return IntentResult(IntentType.COMMAND, 0.7, "Wake word + short phrase")

    return IntentResult(IntentType.NARRATIVE, 0.6, "Default fallback")
