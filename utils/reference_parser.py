import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from utils.config import DEFAULT_SETTINGS, ResolverSettings
from utils.lexicon import (
    BIBLE_BOOKS,
    BookDescriptor,
    FAMOUS_PHRASES,
    FILLER_WORDS,
    ORDINAL_PREFIXES,
)
from utils.numbers import collect_numbers
from utils.tokens import CHAPTER_VERSE_PATTERN, clean_tokens, extract_translation, tokenize


# Define data classes for parsed references and intermediate results
@dataclass(frozen=True)
class VerseReference:
    book: str
    chapter: int
    verse: int

    def to_dict(self) -> Dict[str, object]:
        return {"book": self.book, "chapter": self.chapter, "verse": self.verse}


@dataclass
class BookMatch:
    book: str
    remaining: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ChapterVerse:
    chapter: int
    verse: int
    explicit: bool = False  # True when at least the chapter came from the input


@dataclass
class SmartParseResult:
    ref: VerseReference
    translation_id: Optional[str]
    confidence: float
    cleaned_input: str


# Multi-word names first so "song of solomon" wins over any single-word partial.
# sorted() is stable, so declaration order breaks ties.
_BOOKS_BY_WORD_COUNT: List[BookDescriptor] = sorted(
    BIBLE_BOOKS, key=lambda b: len(b.name_words), reverse=True
)

# name or abbreviation -> book, first declaration wins
_FORM_INDEX: Dict[str, BookDescriptor] = {}
for _book in BIBLE_BOOKS:
    for _form in (_book.name.lower(),) + _book.abbreviations:
        _FORM_INDEX.setdefault(_form, _book)


def _normalize_phrase_text(text: str) -> str:
    text = re.sub(r"[^\w\s']", " ", text.lower())
    return re.sub(r"\s+", " ", text).strip()


def _scan(tokens: Sequence[str], words: Sequence[str]) -> Optional[int]:
    """Return the first offset where `words` appears consecutively in `tokens`"""
    span = len(words)
    for start in range(len(tokens) - span + 1):
        if all(tokens[start + k].lower() == words[k] for k in range(span)):
            return start
    return None


def find_book(tokens: Sequence[str]) -> Optional[BookMatch]:
    """
    Locate a book name or abbreviation in a token sequence.

    Returns the canonical book name and the tokens left once the matched words are
    removed, or None when no book is present. The first full match wins, there is
    no search for a better match further along.
    """
    if not tokens:
        return None

    for book in _BOOKS_BY_WORD_COUNT:
        for form in (book.name.lower(),) + book.abbreviations:
            words = form.split()
            start = _scan(tokens, words)
            if start is not None:
                remaining = list(tokens[:start]) + list(tokens[start + len(words):])
                return BookMatch(book=book.name, remaining=remaining)

    # "first cor", "2nd thess": ordinal word + abbreviated book that the table
    # does not spell out
    for i in range(len(tokens) - 1):
        prefix = ORDINAL_PREFIXES.get(tokens[i].lower())
        if prefix is None:
            continue
        word = tokens[i + 1].lower()
        for candidate in (f"{prefix} {word}", f"{prefix}{word}"):
            book = _FORM_INDEX.get(candidate)
            if book is not None:
                remaining = list(tokens[:i]) + list(tokens[i + 2:])
                return BookMatch(book=book.name, remaining=remaining)

    return None


def extract_chapter_verse(tokens: Sequence[str], original_tokens: Optional[Sequence[str]] = None) -> ChapterVerse:
    """
    Derive (chapter, verse) from the tokens left after book matching.

    A "3:16" / "3.16" token anywhere in `original_tokens` (the pre-cleaning stream)
    wins outright. Otherwise spoken and digit numbers are collected in order:
    two or more give chapter and verse, one gives the chapter with verse 1, none gives 1:1.
    """
    for token in (original_tokens if original_tokens is not None else tokens):
        match = CHAPTER_VERSE_PATTERN.match(token)
        if match:
            return ChapterVerse(
                chapter=max(1, int(match.group(1))),
                verse=max(1, int(match.group(2))),
                explicit=True,
            )

    numbers = collect_numbers(tokens)
    if len(numbers) >= 2:
        return ChapterVerse(chapter=max(1, numbers[0]), verse=max(1, numbers[1]), explicit=True)
    if len(numbers) == 1:
        return ChapterVerse(chapter=max(1, numbers[0]), verse=1, explicit=True)
    return ChapterVerse(chapter=1, verse=1, explicit=False)


def match_famous_phrase(text: str, overlap: float = DEFAULT_SETTINGS.famous_phrase_overlap) -> Optional[VerseReference]:
    """
    Match an utterance against the curated famous-phrase table.

    Whole-phrase containment is checked first. Failing that, a phrase is accepted when
    the distinct utterance words it contains reach `overlap` of its word count and at
    least one of those words is not filler. Table order decides between several hits.
    """
    normalized = _normalize_phrase_text(text or "")
    if not normalized:
        return None

    padded = f" {normalized} "
    for phrase, (book, chapter, verse) in FAMOUS_PHRASES.items():
        if f" {phrase} " in padded:
            return VerseReference(book, chapter, verse)

    words = set(normalized.split())
    for phrase, (book, chapter, verse) in FAMOUS_PHRASES.items():
        phrase_words = phrase.split()
        shared = words.intersection(phrase_words)
        if not shared or shared <= FILLER_WORDS:
            continue
        if len(shared) >= len(phrase_words) * overlap:
            return VerseReference(book, chapter, verse)

    return None


def smart_parse(text: str, settings: ResolverSettings = DEFAULT_SETTINGS) -> Optional[SmartParseResult]:
    """
    Parse a noisy spoken or typed utterance into a verse reference.

    Translation names are cut out of the raw token stream first, then filler is
    cleaned, then the book is matched and chapter/verse pulled from what is left.
    Returns None when no book can be found.
    """
    if not text or not text.strip():
        return None

    translation = extract_translation(tokenize(text))
    cleaned = clean_tokens(translation.remaining)
    if not cleaned:
        return None

    book_match = find_book(cleaned)
    if book_match is None:
        return None

    chapter_verse = extract_chapter_verse(book_match.remaining, original_tokens=translation.remaining)

    confidence = settings.explicit_confidence if chapter_verse.explicit else settings.base_confidence
    if translation.translation_id:
        confidence = min(1.0, confidence + settings.translation_bonus)

    return SmartParseResult(
        ref=VerseReference(book_match.book, chapter_verse.chapter, chapter_verse.verse),
        translation_id=translation.translation_id,
        confidence=round(confidence, 4),
        cleaned_input=" ".join(cleaned),
    )


def parse_reference(reference: str) -> Optional[VerseReference]:
    """Parse a written reference such as "Psalm 23:1" or "1 John 4:19-21" """
    result = smart_parse(reference)
    return result.ref if result else None


def format_reference(ref: VerseReference) -> str:
    return f"{ref.book} {ref.chapter}:{ref.verse}"
