import pytest
from sqlalchemy import inspect

from db.db import create_tables, drop_tables, get_table_stats
from db.verse_store import SqlVerseStore, VerseStoreError, canonical_book_name, normalize_book_key


def test_book_keys():
    assert normalize_book_key("First John") == "1john"
    assert normalize_book_key("1 john") == "1john"
    assert canonical_book_name("Psalm") == "Psalms"
    assert canonical_book_name("song of songs") == "Song of Solomon"
    assert canonical_book_name("Hezekiah") is None


def test_unknown_translation():
    with pytest.raises(VerseStoreError):
        SqlVerseStore(None, "niv")


@pytest.mark.asyncio
async def test_get_chapter(kjv_session):
    store = SqlVerseStore(kjv_session, "kjv")

    verses = await store.get_chapter("Genesis", 1)
    assert [v.verse for v in verses] == [1, 2, 3]
    assert verses[0].reference == "Genesis 1:1"

    assert [v.verse for v in await store.get_chapter("gen", 1)] == [1, 2, 3]
    assert len(await store.get_chapter("first john", 4)) == 1
    assert await store.get_chapter("Genesis", 2) == []
    assert await store.get_chapter("Hezekiah", 1) == []


@pytest.mark.asyncio
async def test_get_passage_with_context(kjv_session):
    store = SqlVerseStore(kjv_session, "kjv")

    passage = await store.get_passage("John", 3, 16, context_after=1)
    assert [(v.verse, v.is_target) for v in passage] == [(16, True), (17, False)]

    passage = await store.get_passage("Genesis", 1, 2, context_before=5, context_after=5)
    assert [v.verse for v in passage] == [1, 2, 3]
    assert [v.verse for v in passage if v.is_target] == [2]


@pytest.mark.asyncio
@pytest.mark.parametrize("book,chapter,verse,message", [
    ("Hezekiah", 1, 1, "Book 'Hezekiah' not found."),
    ("Genesis", 51, 1, "Genesis has only 50 chapters."),
    ("Genesis", 2, 1, "Genesis 2 is not available in KJV."),
    ("Genesis", 1, 9, "Genesis 1 has only 3 verses."),
])
async def test_get_passage_out_of_range(kjv_session, book, chapter, verse, message):
    store = SqlVerseStore(kjv_session, "kjv")
    with pytest.raises(VerseStoreError) as exc:
        await store.get_passage(book, chapter, verse)
    assert str(exc.value) == message


@pytest.mark.asyncio
async def test_search_text(kjv_session):
    store = SqlVerseStore(kjv_session, "kjv")

    matches = await store.search_text("WEPT")
    assert [m.reference for m in matches] == ["John 11:35"]

    matches = await store.search_text("the world")
    assert [m.reference for m in matches] == ["John 3:16", "John 3:17"]

    assert len(await store.search_text("god", limit=2)) == 2
    assert await store.search_text("") == []
    assert await store.search_text("100%") == []


@pytest.mark.asyncio
async def test_table_stats(kjv_session):
    stats = await get_table_stats(kjv_session)

    assert stats["kjv"] == {"total_verses": 7, "unique_books": 3}
    assert stats["asv"]["total_verses"] == 0
    assert stats["overall"]["versions_available"] == ["kjv"]


async def _table_names(engine):
    async with engine.connect() as conn:
        return await conn.run_sync(lambda sync_conn: sorted(inspect(sync_conn).get_table_names()))


@pytest.mark.asyncio
async def test_drop_and_create_tables(sqlite_engine):
    assert await _table_names(sqlite_engine) == ["asv", "kjv", "net", "web"]

    await drop_tables(bind=sqlite_engine)
    assert await _table_names(sqlite_engine) == []

    await create_tables(bind=sqlite_engine)
    assert await _table_names(sqlite_engine) == ["asv", "kjv", "net", "web"]
