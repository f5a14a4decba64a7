import argparse
import asyncio
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.db import AsyncSessionLocal, create_tables
from db.models import VERSION_MODELS, get_verse_model
from db.verse_store import canonical_book_name

logger = logging.getLogger(__name__)

# "Book Chapter:Verse Text", one verse per line
LINE_PATTERN = re.compile(r'^(.+?)\s+(\d+):(\d+)\s+(.+)$')


@dataclass
class VerseRecord:
    book: str
    chapter: int
    verse: int
    text: str

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"


def clean_verse_text(text: str) -> str:
    """Drop pilcrows and translators' brackets, keeping the bracketed words"""
    text = text.replace("¶", "")
    text = text.replace("[", "").replace("]", "")
    return re.sub(r"\s+", " ", text).strip()


def canonicalize_book(name: str) -> Optional[str]:
    """Exact name or abbreviation only, a stray book word inside a longer title does not count"""
    return canonical_book_name(name)


class BibleIngestionService:
    """Loads translation files into the per-translation verse tables"""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or AsyncSessionLocal
        self.supported_versions = list(VERSION_MODELS)

    def _check_version(self, version: str):
        if version not in self.supported_versions:
            raise ValueError(f"Unsupported Bible version: {version}. Supported versions: {self.supported_versions}")

    def parse_json(self, content: str) -> List[VerseRecord]:
        """
        Parse the translation JSON format:
        {"metadata": {...}, "verses": [{"book_name", "book", "chapter", "verse", "text"}]}
        """
        data = json.loads(content)
        records = []
        for index, item in enumerate(data.get("verses", [])):
            book = canonicalize_book(str(item.get("book_name", "")))
            if book is None:
                logger.warning("Skipping verse %d, unknown book %r", index, item.get("book_name"))
                continue
            try:
                records.append(VerseRecord(
                    book=book,
                    chapter=int(item["chapter"]),
                    verse=int(item["verse"]),
                    text=clean_verse_text(str(item["text"])),
                ))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed verse %d: %s", index, e)
        return records

    def parse_text(self, content: str) -> List[VerseRecord]:
        """Parse plain text with one "Book Chapter:Verse Text" line per verse"""
        records = []
        for line_num, line in enumerate(content.strip().split('\n'), 1):
            line = line.strip()
            if not line:
                continue

            match = LINE_PATTERN.match(line)
            if not match:
                logger.warning("Could not parse line %d: %s", line_num, line)
                continue

            book = canonicalize_book(match.group(1))
            if book is None:
                logger.warning("Unknown book on line %d: %s", line_num, match.group(1))
                continue

            records.append(VerseRecord(
                book=book,
                chapter=int(match.group(2)),
                verse=int(match.group(3)),
                text=clean_verse_text(match.group(4)),
            ))
        return records

    def load_bible_data(self, file_path: str) -> List[VerseRecord]:
        """Load and parse a translation file, JSON or plain text"""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Bible data file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        if file_path.lower().endswith(".json") or content.lstrip().startswith("{"):
            records = self.parse_json(content)
        else:
            records = self.parse_text(content)
        logger.info("Loaded %d verses from %s", len(records), file_path)

        records = self._deduplicate(records)
        logger.info("After deduplication: %d unique verses", len(records))
        return records

    def _deduplicate(self, records: List[VerseRecord]) -> List[VerseRecord]:
        """Remove duplicate records based on reference"""
        seen_refs = set()
        unique = []
        for record in records:
            if record.reference in seen_refs:
                logger.warning("Duplicate reference found and skipped: %s", record.reference)
                continue
            seen_refs.add(record.reference)
            unique.append(record)
        return unique

    async def clear_existing_data_for_version(self, session: AsyncSession, version: str) -> int:
        """Clear existing verses from the specified version table"""
        self._check_version(version)
        try:
            VerseModel = get_verse_model(version)
            result = await session.execute(delete(VerseModel))
            await session.commit()
            count = result.rowcount
            logger.info("Cleared %s existing verses from %s table", count, version)
            return count
        except Exception as e:
            logger.error(f"Error clearing existing data for {version}: {str(e)}")
            await session.rollback()
            raise

    async def check_existing_verses_for_version(self, session: AsyncSession, version: str) -> Dict[str, int]:
        """Map of reference -> row id for verses already in the version table"""
        self._check_version(version)
        VerseModel = get_verse_model(version)
        result = await session.execute(select(VerseModel.reference, VerseModel.id))
        return {ref: verse_id for ref, verse_id in result.fetchall()}

    async def insert_verses_for_version(self, session: AsyncSession, records: List[VerseRecord],
                                        version: str = "kjv", skip_existing: bool = True) -> int:
        """Bulk insert records into the version table, returns the number inserted"""
        self._check_version(version)
        try:
            VerseModel = get_verse_model(version)

            existing = {}
            if skip_existing:
                existing = await self.check_existing_verses_for_version(session, version)

            to_insert = [
                VerseModel(
                    book=record.book,
                    chapter=record.chapter,
                    verse=record.verse,
                    text=record.text,
                    reference=record.reference,
                )
                for record in records
                if record.reference not in existing
            ]
            skipped = len(records) - len(to_insert)

            if to_insert:
                session.add_all(to_insert)
                await session.commit()
                logger.info("Inserted %d new verses into %s table", len(to_insert), version.upper())
            if skipped:
                logger.info("Skipped %d existing verses in %s table", skipped, version.upper())
            return len(to_insert)

        except Exception as e:
            logger.error(f"Error inserting verses for {version}: {str(e)}")
            await session.rollback()
            raise

    async def count_verses(self, session: AsyncSession, version: str) -> int:
        VerseModel = get_verse_model(version)
        result = await session.execute(select(func.count()).select_from(VerseModel))
        return result.scalar() or 0

    async def ingest_bible(self, file_path: str, version: str = "kjv", clear_existing: bool = True,
                           skip_existing: bool = True, ensure_tables: bool = True) -> int:
        """
        Complete ingestion for one translation: load, deduplicate, insert, validate.

        Returns the number of verses inserted.
        """
        self._check_version(version)
        logger.info("Starting Bible ingestion for %s", version.upper())

        if ensure_tables:
            await create_tables()

        records = self.load_bible_data(file_path)
        if not records:
            raise ValueError(f"No valid Bible verses found in the file: {file_path}")

        async with self.session_factory() as session:
            if clear_existing:
                await self.clear_existing_data_for_version(session, version)

            inserted = await self.insert_verses_for_version(session, records, version, skip_existing)

            total = await self.count_verses(session, version)
            if total == 0:
                raise ValueError(f"Ingestion validation failed for {version.upper()}")

        logger.info("Bible ingestion completed for %s: %d verses in table", version.upper(), total)
        return inserted


async def main(argv=None):
    """Run ingestion from command line"""
    parser = argparse.ArgumentParser(description="Load a Bible translation into the verse store")
    parser.add_argument("path", help="translation file, JSON or 'Book C:V text' lines")
    parser.add_argument("--translation", default="kjv", choices=sorted(VERSION_MODELS))
    parser.add_argument("--keep-existing", action="store_true", help="do not clear the table first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    service = BibleIngestionService()
    count = await service.ingest_bible(args.path, version=args.translation, clear_existing=not args.keep_existing)
    print(f"Ingested {count} verses into {args.translation.upper()}")


if __name__ == "__main__":
    asyncio.run(main())
