from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol
import logging

from utils.config import DEFAULT_SETTINGS, ResolverSettings
from utils.intent import IntentResult, IntentType, classify_intent
from utils.reference_parser import (
    VerseReference,
    format_reference,
    match_famous_phrase,
    parse_reference,
    smart_parse,
)
from utils.tokens import extract_translation, tokenize
from utils.topic_index import (
    TopicEntry,
    extract_topic_keyword,
    is_topic_query,
    match_topic_alias,
    search_topics,
)

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    FAMOUS_PHRASE_HIT = "FAMOUS_PHRASE_HIT"
    STRUCTURED_REFERENCE = "STRUCTURED_REFERENCE"
    TOPIC_HIT = "TOPIC_HIT"
    AI_HIT = "AI_HIT"
    KEYWORD_HIT = "KEYWORD_HIT"
    SEMANTIC_HIT = "SEMANTIC_HIT"
    NO_MATCH = "NO_MATCH"
    # outcomes of the spoken-input gate, the machine above is never entered
    MEDIA = "MEDIA"
    IGNORED = "IGNORED"


# Collaborators. Anything with these methods will do, tests pass small fakes.

class VerseSearcher(Protocol):
    async def search_text(self, query: str, limit: int = ...) -> List[Any]: ...


class SemanticSearcher(Protocol):
    async def search(self, query: str, limit: int = ..., threshold: float = ...) -> List[Any]: ...


class QuestionAnswerer(Protocol):
    def is_complex_query(self, query: str) -> bool: ...

    async def ask(self, query: str) -> Any: ...


@dataclass
class Resolution:
    """Outcome of resolving one utterance"""

    state: ResolutionState
    query: str
    reference: Optional[VerseReference] = None
    translation_id: Optional[str] = None
    confidence: float = 0.0
    label: Optional[str] = None
    topic: Optional[TopicEntry] = None
    keyword_matches: List[Any] = field(default_factory=list)
    semantic_matches: List[Any] = field(default_factory=list)
    answer: Optional[str] = None
    ai_references: List[str] = field(default_factory=list)
    intent: Optional[IntentResult] = None
    message: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.state not in (ResolutionState.NO_MATCH, ResolutionState.IGNORED, ResolutionState.MEDIA)

    def to_dict(self):
        return {
            "status": self.state.value,
            "query": self.query,
            "reference": self.reference.to_dict() if self.reference else None,
            "formatted_reference": format_reference(self.reference) if self.reference else None,
            "translation_id": self.translation_id,
            "confidence": round(self.confidence, 4),
            "label": self.label,
            "topic": self.topic.topic if self.topic else None,
            "topic_verses": [v.to_dict() for v in self.topic.verses] if self.topic else [],
            "keyword_matches": [_as_dict(m) for m in self.keyword_matches],
            "semantic_matches": [_as_dict(m) for m in self.semantic_matches],
            "answer": self.answer,
            "ai_references": list(self.ai_references),
            "intent": self.intent.type.value if self.intent else None,
            "message": self.message,
        }


def _as_dict(item):
    if hasattr(item, "to_dict"):
        return item.to_dict()
    if isinstance(item, dict):
        return dict(item)
    return dict(vars(item))


def _clamp(value, low=0.0, high=1.0) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return low
    return max(low, min(high, value))


class ResolutionAgent:
    """
    Turns one utterance into a verse reference, a topic, or search results.

    Stages run strictly in order and the first success wins:
    famous phrase, structured reference, topic, question answering (when an answerer
    is configured and the query looks like a question), keyword search, semantic search.
    Collaborator failures are logged and count as the stage failing.
    """

    def __init__(self, verse_store: Optional[VerseSearcher] = None,
                 semantic_search: Optional[SemanticSearcher] = None,
                 scripture_agent: Optional[QuestionAnswerer] = None,
                 settings: ResolverSettings = DEFAULT_SETTINGS):
        self.verse_store = verse_store
        self.semantic_search = semantic_search
        self.scripture_agent = scripture_agent
        self.settings = settings

    async def route(self, text: str, wake_words: Iterable[str] = (), spoken: bool = False) -> Resolution:
        """
        Resolve an utterance, gating speech through the intent classifier first.

        Typed input goes straight to resolve(). Spoken input that is a media command
        returns MEDIA, and narrative speech with no parsable reference returns IGNORED.
        """
        if not spoken:
            return await self.resolve(text)

        intent = classify_intent(text, wake_words)
        logger.debug("intent for %r: %s (%.2f) %s", text, intent.type.value, intent.confidence, intent.reason)

        if intent.type == IntentType.MEDIA:
            return Resolution(state=ResolutionState.MEDIA, query=text, intent=intent,
                              message="Presentation mode toggled")

        if intent.type == IntentType.NARRATIVE and smart_parse(text, self.settings) is None:
            logger.info("Ignored narrative: %s", text)
            return Resolution(state=ResolutionState.IGNORED, query=text, intent=intent)

        resolution = await self.resolve(text)
        resolution.intent = intent
        return resolution

    async def resolve(self, text: str) -> Resolution:
        query = (text or "").strip()
        if not query:
            return self._no_match(query, "Nothing to resolve")

        resolution = (
            self._famous_phrase(query)
            or self._structured(query)
            or self._topic(query)
        )
        if resolution is not None:
            return resolution

        resolution = await self._ask_agent(query)
        if resolution is not None:
            return resolution

        resolution = await self._keyword(query)
        if resolution is not None:
            return resolution

        resolution = await self._semantic(query)
        if resolution is not None:
            return resolution

        return self._no_match(query, f'No verses found matching "{query}"')

    def _no_match(self, query: str, message: str) -> Resolution:
        logger.debug("no match for %r", query)
        return Resolution(state=ResolutionState.NO_MATCH, query=query, message=message)

    def _famous_phrase(self, query: str) -> Optional[Resolution]:
        ref = match_famous_phrase(query, self.settings.famous_phrase_overlap)
        if ref is None:
            return None
        logger.debug("famous phrase %r -> %s", query, format_reference(ref))
        return Resolution(
            state=ResolutionState.FAMOUS_PHRASE_HIT,
            query=query,
            reference=ref,
            translation_id=extract_translation(tokenize(query)).translation_id,
            confidence=self.settings.famous_phrase_confidence,
            label=format_reference(ref),
        )

    def _structured(self, query: str) -> Optional[Resolution]:
        result = smart_parse(query, self.settings)
        if result is None:
            return None
        logger.debug("smart parse %r -> %s (%.2f)", query, format_reference(result.ref), result.confidence)
        return Resolution(
            state=ResolutionState.STRUCTURED_REFERENCE,
            query=query,
            reference=result.ref,
            translation_id=result.translation_id,
            confidence=result.confidence,
            label=format_reference(result.ref),
        )

    def _topic(self, query: str) -> Optional[Resolution]:
        topic = None
        if is_topic_query(query):
            ranked = search_topics(extract_topic_keyword(query))
            if ranked:
                topic = ranked[0]
        if topic is None:
            topic = match_topic_alias(query)
        if topic is None or not topic.verses:
            return None

        first = topic.verses[0]
        logger.debug("topic %r -> %s (%d verses)", query, topic.topic, len(topic.verses))
        return Resolution(
            state=ResolutionState.TOPIC_HIT,
            query=query,
            reference=VerseReference(first.book, first.chapter, first.verse),
            confidence=self.settings.topic_confidence,
            label=f"{topic.topic}: {len(topic.verses)} verses",
            topic=topic,
        )

    async def _ask_agent(self, query: str) -> Optional[Resolution]:
        if self.scripture_agent is None:
            return None
        try:
            if not self.scripture_agent.is_complex_query(query):
                return None
            response = await self.scripture_agent.ask(query)
        except Exception as e:
            logger.error("Question answering failed for %r: %s", query, str(e))
            return None

        references = list(getattr(response, "references", None) or [])
        for raw in references:
            ref = parse_reference(raw)
            if ref is None:
                continue
            logger.debug("agent answer %r -> %s", query, format_reference(ref))
            return Resolution(
                state=ResolutionState.AI_HIT,
                query=query,
                reference=ref,
                confidence=_clamp(getattr(response, "confidence", 0.0)),
                label=raw,
                answer=getattr(response, "answer", None) or None,
                ai_references=references,
            )

        logger.info("Agent returned no usable reference for %r", query)
        return None

    async def _keyword(self, query: str) -> Optional[Resolution]:
        if self.verse_store is None:
            return None
        try:
            matches = await self.verse_store.search_text(query, self.settings.keyword_search_limit)
        except Exception as e:
            logger.error("Keyword search failed for %r: %s", query, str(e))
            return None
        if not matches:
            return None

        logger.debug("keyword search %r -> %d matches", query, len(matches))
        return Resolution(
            state=ResolutionState.KEYWORD_HIT,
            query=query,
            confidence=self.settings.keyword_confidence,
            label=f'Search: "{query}"',
            keyword_matches=list(matches),
        )

    async def _semantic(self, query: str) -> Optional[Resolution]:
        if self.semantic_search is None:
            return None
        try:
            results = await self.semantic_search.search(
                query,
                limit=self.settings.semantic_top_k,
                threshold=self.settings.semantic_similarity_threshold,
            )
        except Exception as e:
            logger.error("Semantic search failed for %r: %s", query, str(e))
            return None

        for result in results or []:
            ref = parse_reference(getattr(result, "reference", ""))
            if ref is None:
                continue
            score = _clamp(getattr(result, "score", 0.0))
            logger.debug("semantic %r -> %s (%.3f)", query, format_reference(ref), score)
            return Resolution(
                state=ResolutionState.SEMANTIC_HIT,
                query=query,
                reference=ref,
                confidence=score,
                label=f"{round(score * 100)}% match",
                semantic_matches=list(results),
            )
        return None
