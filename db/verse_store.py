import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import VERSION_MODELS
from utils.config import KEYWORD_SEARCH_LIMIT
from utils.lexicon import BIBLE_BOOKS, BOOKS_BY_NAME

logger = logging.getLogger(__name__)


class VerseStoreError(LookupError):
    """A lookup the store cannot satisfy: unknown book, translation, chapter or verse"""


@dataclass
class VerseText:
    book: str
    chapter: int
    verse: int
    text: str
    is_target: bool = False

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    def to_dict(self):
        return {
            "reference": self.reference,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
            "is_target": self.is_target,
        }


@dataclass
class VerseMatch:
    book: str
    chapter: int
    verse: int
    text: str

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    def to_dict(self):
        return {
            "reference": self.reference,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "text": self.text,
        }


_ORDINAL_KEY = re.compile(r"^(first|1st|second|2nd|third|3rd)\b")
_ORDINAL_DIGITS = {"first": "1", "1st": "1", "second": "2", "2nd": "2", "third": "3", "3rd": "3"}


def normalize_book_key(name: str) -> str:
    """"First John" / "1 john" / "1John" -> "1john" """
    key = (name or "").lower().strip()
    key = _ORDINAL_KEY.sub(lambda m: _ORDINAL_DIGITS[m.group(1)], key)
    return re.sub(r"\s+", "", key)


_BOOK_KEYS: Dict[str, str] = {}
for _descriptor in BIBLE_BOOKS:
    for _form in (_descriptor.name,) + _descriptor.abbreviations:
        _BOOK_KEYS.setdefault(normalize_book_key(_form), _descriptor.name)


def canonical_book_name(name: str) -> Optional[str]:
    return _BOOK_KEYS.get(normalize_book_key(name))


class SqlVerseStore:
    """
    Read access to one translation's verse table.

    Bounds checking lives here, not in the parser: a reference the parser produced
    can still point past the end of a book, and that surfaces as VerseStoreError.
    """

    def __init__(self, session: AsyncSession, translation: str = "kjv"):
        key = (translation or "").lower()
        if key not in VERSION_MODELS:
            raise VerseStoreError(f"Translation '{translation}' is not available.")
        self.session = session
        self.translation = key
        self.model = VERSION_MODELS[key]

    def _require_book(self, book: str) -> str:
        canonical = canonical_book_name(book)
        if canonical is None:
            raise VerseStoreError(f"Book '{book}' not found.")
        return canonical

    async def _fetch_chapter(self, book: str, chapter: int) -> List[VerseText]:
        stmt = (
            select(self.model)
            .where(self.model.book == book, self.model.chapter == chapter)
            .order_by(self.model.verse)
        )
        result = await self.session.execute(stmt)
        return [
            VerseText(book=row.book, chapter=row.chapter, verse=row.verse, text=row.text)
            for row in result.scalars().all()
        ]

    async def get_chapter(self, book: str, chapter: int) -> List[VerseText]:
        """All verses of a chapter in order, or an empty list when the store has none"""
        canonical = canonical_book_name(book)
        if canonical is None:
            logger.debug("get_chapter: unknown book %r", book)
            return []
        return await self._fetch_chapter(canonical, chapter)

    async def get_passage(self, book: str, chapter: int, verse: int,
                          context_before: int = 0, context_after: int = 0) -> List[VerseText]:
        """
        Fetch a verse with optional surrounding context, the requested verse flagged
        with is_target. Raises VerseStoreError when the reference is out of range.
        """
        canonical = self._require_book(book)
        chapter_count = BOOKS_BY_NAME[canonical.lower()].chapter_count
        if chapter < 1 or chapter > chapter_count:
            raise VerseStoreError(f"{canonical} has only {chapter_count} chapters.")

        verses = await self._fetch_chapter(canonical, chapter)
        if not verses:
            raise VerseStoreError(f"{canonical} {chapter} is not available in {self.translation.upper()}.")

        last_verse = verses[-1].verse
        if verse < 1 or verse > last_verse:
            raise VerseStoreError(f"{canonical} {chapter} has only {last_verse} verses.")

        start = verse - max(0, context_before)
        end = verse + max(0, context_after)
        passage = []
        for item in verses:
            if start <= item.verse <= end:
                item.is_target = item.verse == verse
                passage.append(item)
        return passage

    async def search_text(self, query: str, limit: int = KEYWORD_SEARCH_LIMIT) -> List[VerseMatch]:
        """Case-insensitive substring search over verse text, in canonical order"""
        needle = (query or "").strip().lower()
        if not needle:
            return []

        stmt = (
            select(self.model)
            .where(func.lower(self.model.text).contains(needle, autoescape=True))
            .order_by(self.model.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        matches = [
            VerseMatch(book=row.book, chapter=row.chapter, verse=row.verse, text=row.text)
            for row in result.scalars().all()
        ]
        logger.debug("search_text %r in %s: %d matches", needle, self.translation, len(matches))
        return matches
