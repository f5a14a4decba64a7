import pytest
from types import SimpleNamespace

from app.agents.resolution_agent import ResolutionAgent, ResolutionState
from db.verse_store import VerseMatch
from utils.intent import IntentType
from utils.reference_parser import VerseReference
from utils.topic_index import TOPIC_INDEX


class DummyStore:
    def __init__(self, matches=None, error=None):
        self.matches = matches or []
        self.error = error
        self.calls = []

    async def search_text(self, query, limit=50):
        self.calls.append((query, limit))
        if self.error:
            raise self.error
        return self.matches


class DummySemantic:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.calls = []

    async def search(self, query, limit=3, threshold=0.25):
        self.calls.append((query, limit, threshold))
        if self.error:
            raise self.error
        return self.results


class DummyAnswerer:
    def __init__(self, response=None, complex_query=True, error=None):
        self.response = response
        self.complex_query = complex_query
        self.error = error
        self.asked = []

    def is_complex_query(self, query):
        return self.complex_query

    async def ask(self, query):
        self.asked.append(query)
        if self.error:
            raise self.error
        return self.response


@pytest.mark.asyncio
async def test_famous_phrase_wins():
    store = DummyStore()
    resolution = await ResolutionAgent(verse_store=store).resolve("the lord is my shepherd")

    assert resolution.state == ResolutionState.FAMOUS_PHRASE_HIT
    assert resolution.reference == VerseReference("Psalms", 23, 1)
    assert resolution.confidence == 0.95
    assert store.calls == []


@pytest.mark.asyncio
async def test_structured_reference():
    store = DummyStore()
    resolution = await ResolutionAgent(verse_store=store).resolve("Romans eight twenty eight")

    assert resolution.state == ResolutionState.STRUCTURED_REFERENCE
    assert resolution.reference == VerseReference("Romans", 8, 28)
    assert resolution.confidence == 0.9
    assert resolution.label == "Romans 8:28"
    assert resolution.found
    assert store.calls == []


@pytest.mark.asyncio
async def test_structured_reference_with_translation():
    resolution = await ResolutionAgent().resolve("John 3:16 in the king james version")

    assert resolution.reference == VerseReference("John", 3, 16)
    assert resolution.translation_id == "kjv"
    assert resolution.confidence == 0.95


@pytest.mark.asyncio
async def test_bare_book_confidence():
    resolution = await ResolutionAgent().resolve("Genesis")
    assert resolution.reference == VerseReference("Genesis", 1, 1)
    assert resolution.confidence == 0.7


@pytest.mark.asyncio
async def test_topic_query():
    resolution = await ResolutionAgent().resolve("verses about love")

    love = TOPIC_INDEX[0]
    assert resolution.state == ResolutionState.TOPIC_HIT
    assert resolution.topic is love
    assert resolution.reference == VerseReference("1 Corinthians", 13, 4)
    assert resolution.label == f"Love: {len(love.verses)} verses"
    assert resolution.confidence == 0.8


@pytest.mark.asyncio
async def test_topic_alias_match():
    resolution = await ResolutionAgent().resolve("anxious")

    assert resolution.state == ResolutionState.TOPIC_HIT
    assert resolution.topic.topic == "Peace"
    assert resolution.reference == VerseReference("Philippians", 4, 6)


@pytest.mark.asyncio
async def test_agent_answer_before_keyword_search():
    store = DummyStore(matches=[VerseMatch("Matthew", 14, 25, "And in the fourth watch...")])
    answerer = DummyAnswerer(SimpleNamespace(
        answer="Jesus walked on the sea of Galilee.",
        references=["Matthew 14:25-33"],
        confidence=1.4,
    ))

    resolution = await ResolutionAgent(verse_store=store, scripture_agent=answerer).resolve(
        "where did jesus walk on water"
    )

    assert resolution.state == ResolutionState.AI_HIT
    assert resolution.reference == VerseReference("Matthew", 14, 25)
    assert resolution.confidence == 1.0
    assert resolution.answer == "Jesus walked on the sea of Galilee."
    assert resolution.ai_references == ["Matthew 14:25-33"]
    assert store.calls == []


@pytest.mark.asyncio
async def test_agent_skipped_for_simple_queries():
    store = DummyStore(matches=[VerseMatch("Matthew", 17, 20, "grain of mustard seed")])
    answerer = DummyAnswerer(complex_query=False)

    resolution = await ResolutionAgent(verse_store=store, scripture_agent=answerer).resolve("mustard seed")

    assert answerer.asked == []
    assert resolution.state == ResolutionState.KEYWORD_HIT


@pytest.mark.asyncio
async def test_agent_failure_falls_through():
    store = DummyStore(matches=[VerseMatch("John", 11, 35, "Jesus wept.")])
    answerer = DummyAnswerer(error=RuntimeError("groq down"))

    resolution = await ResolutionAgent(verse_store=store, scripture_agent=answerer).resolve("why did he weep")

    assert resolution.state == ResolutionState.KEYWORD_HIT


@pytest.mark.asyncio
async def test_keyword_hit():
    store = DummyStore(matches=[VerseMatch("Matthew", 17, 20, "grain of mustard seed")])
    resolution = await ResolutionAgent(verse_store=store).resolve("mustard seed")

    assert resolution.state == ResolutionState.KEYWORD_HIT
    assert resolution.label == 'Search: "mustard seed"'
    assert resolution.confidence == 0.6
    assert resolution.reference is None
    assert resolution.to_dict()["keyword_matches"][0]["reference"] == "Matthew 17:20"
    assert store.calls == [("mustard seed", 50)]


@pytest.mark.asyncio
async def test_keyword_failure_falls_to_semantic():
    store = DummyStore(error=RuntimeError("db gone"))
    semantic = DummySemantic(results=[SimpleNamespace(reference="John 11:35", text="Jesus wept.", score=0.61)])

    resolution = await ResolutionAgent(verse_store=store, semantic_search=semantic).resolve("crying savior")

    assert resolution.state == ResolutionState.SEMANTIC_HIT
    assert resolution.reference == VerseReference("John", 11, 35)
    assert resolution.confidence == 0.61
    assert resolution.label == "61% match"
    assert semantic.calls == [("crying savior", 3, 0.25)]
    assert resolution.to_dict()["semantic_matches"][0]["reference"] == "John 11:35"


@pytest.mark.asyncio
async def test_no_match():
    agent = ResolutionAgent(verse_store=DummyStore(), semantic_search=DummySemantic())
    resolution = await agent.resolve("um so like okay")

    assert resolution.state == ResolutionState.NO_MATCH
    assert resolution.message == 'No verses found matching "um so like okay"'
    assert not resolution.found


@pytest.mark.asyncio
async def test_empty_input():
    resolution = await ResolutionAgent().resolve("   ")
    assert resolution.state == ResolutionState.NO_MATCH
    assert resolution.message == "Nothing to resolve"


@pytest.mark.asyncio
async def test_spoken_media_command():
    resolution = await ResolutionAgent().route("switch to presentation mode", spoken=True)
    assert resolution.state == ResolutionState.MEDIA
    assert resolution.intent.type == IntentType.MEDIA


@pytest.mark.asyncio
async def test_spoken_narrative_is_ignored():
    store = DummyStore(matches=[VerseMatch("John", 1, 1, "In the beginning was the Word")])
    resolution = await ResolutionAgent(verse_store=store).route(
        "and then we went to the store yesterday", spoken=True
    )

    assert resolution.state == ResolutionState.IGNORED
    assert store.calls == []


@pytest.mark.asyncio
async def test_spoken_reference_carries_intent():
    resolution = await ResolutionAgent().route("John 3:16", spoken=True)
    assert resolution.state == ResolutionState.STRUCTURED_REFERENCE
    assert resolution.intent.type == IntentType.COMMAND


@pytest.mark.asyncio
async def test_typed_input_skips_intent_gate():
    resolution = await ResolutionAgent().route("switch to presentation mode")
    assert resolution.state == ResolutionState.NO_MATCH
    assert resolution.intent is None


@pytest.mark.asyncio
async def test_semantic_failure_is_no_match():
    semantic = DummySemantic(error=RuntimeError("model down"))
    agent = ResolutionAgent(verse_store=DummyStore(), semantic_search=semantic)

    resolution = await agent.resolve("crying savior")

    assert resolution.state == ResolutionState.NO_MATCH
    assert semantic.calls == [("crying savior", 3, 0.25)]
