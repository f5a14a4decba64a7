# Import FastAPI router and dependencies
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field
from typing import Any, Callable, Dict, List, Optional
import logging

from db.db import get_db
from db.models import VERSION_MODELS
from db.verse_store import SqlVerseStore, VerseStoreError, canonical_book_name
from app.agents.resolution_agent import ResolutionAgent
from utils.config import DEFAULT_TRANSLATION, ResolverSettings
from utils.lexicon import AVAILABLE_TRANSLATIONS
from utils.reference_parser import format_reference, smart_parse
from utils.topic_index import extract_topic_keyword, is_topic_query, search_topics

logger = logging.getLogger(__name__)

# Initialize the router
router = APIRouter(prefix="/api/scripture", tags=["Scripture resolution"])

SETTINGS = ResolverSettings.from_env()


# Pydantic models for request/response
class ResolveRequest(BaseModel):
    query: str = Field(..., description="Spoken or typed utterance, e.g. 'romans eight twenty eight'", min_length=1)
    translation: Optional[str] = Field(default=None, description="Translation id used for text search (kjv, asv, web, net)")
    wake_words: List[str] = Field(default_factory=list, description="Extra wake words for spoken input")
    spoken: bool = Field(default=False, description="Run the intent gate used for live speech")
    session_id: Optional[str] = Field(default=None, description="Client id that keeps follow-up questions in one conversation")


class ReferenceModel(BaseModel):
    book: str
    chapter: int
    verse: int


class TopicVerseModel(BaseModel):
    reference: str
    book: str
    chapter: int
    verse: int
    snippet: str


class VerseMatchModel(BaseModel):
    reference: str
    book: str
    chapter: int
    verse: int
    text: str


class SemanticMatchModel(BaseModel):
    reference: str
    text: str
    score: float


class ResolveResponse(BaseModel):
    status: str
    query: str
    found: bool
    reference: Optional[ReferenceModel] = None
    formatted_reference: Optional[str] = None
    translation_id: Optional[str] = None
    translation: str
    confidence: float
    label: Optional[str] = None
    topic: Optional[str] = None
    topic_verses: List[TopicVerseModel] = Field(default_factory=list)
    keyword_matches: List[VerseMatchModel] = Field(default_factory=list)
    semantic_matches: List[SemanticMatchModel] = Field(default_factory=list)
    answer: Optional[str] = None
    ai_references: List[str] = Field(default_factory=list)
    intent: Optional[str] = None
    message: Optional[str] = None


class ParseResponse(BaseModel):
    query: str
    reference: ReferenceModel
    formatted_reference: str
    translation_id: Optional[str] = None
    confidence: float
    cleaned_input: str


class TopicModel(BaseModel):
    topic: str
    aliases: List[str]
    verses: List[TopicVerseModel]


class TopicsResponse(BaseModel):
    query: str
    keyword: str
    topics: List[TopicModel]


class TranslationModel(BaseModel):
    id: str
    name: str
    has_text: bool


class VerseTextModel(BaseModel):
    reference: str
    book: str
    chapter: int
    verse: int
    text: str
    is_target: bool = False


class PassageResponse(BaseModel):
    translation: str
    verses: List[VerseTextModel]


# Dependencies, overridden in tests

def get_store_factory(db: AsyncSession = Depends(get_db)) -> Callable[[str], Any]:
    """Build verse stores bound to the request's session"""
    def factory(translation: str):
        return SqlVerseStore(db, translation)
    return factory


def get_semantic_search(request: Request):
    return getattr(request.app.state, "semantic_search", None)


def get_scripture_agent(request: Request):
    return getattr(request.app.state, "scripture_agent", None)


def get_settings() -> ResolverSettings:
    return SETTINGS


def _check_translation(translation: Optional[str]) -> str:
    translation_id = (translation or DEFAULT_TRANSLATION).lower()
    if translation_id not in AVAILABLE_TRANSLATIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown translation: {translation}. Available: {', '.join(AVAILABLE_TRANSLATIONS)}"
        )
    return translation_id


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(
    request: ResolveRequest,
    store_factory=Depends(get_store_factory),
    semantic_search=Depends(get_semantic_search),
    scripture_agent=Depends(get_scripture_agent),
    settings: ResolverSettings = Depends(get_settings),
):
    """
    Resolve an utterance to a verse reference, a topic, or search results
    """
    translation_id = _check_translation(request.translation)

    # translations without stored text fall back to the default table for keyword search
    store_translation = translation_id if translation_id in VERSION_MODELS else DEFAULT_TRANSLATION
    try:
        verse_store = store_factory(store_translation)
    except VerseStoreError as e:
        logger.warning("Keyword search disabled for this request: %s", str(e))
        verse_store = None

    # history and reading context stay with this client
    conversation = scripture_agent.conversation(request.session_id) if scripture_agent is not None else None

    try:
        agent = ResolutionAgent(
            verse_store=verse_store,
            semantic_search=semantic_search,
            scripture_agent=conversation,
            settings=settings,
        )
        resolution = await agent.route(request.query, wake_words=request.wake_words, spoken=request.spoken)

        if resolution.reference is not None and conversation is not None:
            conversation.set_context([format_reference(resolution.reference)])

        payload: Dict[str, Any] = resolution.to_dict()
        payload["found"] = resolution.found
        payload["translation"] = resolution.translation_id or translation_id
        return ResolveResponse(**payload)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Resolution failed for %r", request.query)
        raise HTTPException(status_code=500, detail=f"Resolution failed: {str(e)}")


@router.get("/parse", response_model=ParseResponse)
async def parse(q: str = Query(..., min_length=1, description="Utterance to parse")):
    """Run the structured reference parser only"""
    result = smart_parse(q)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No Bible reference found in: {q}")

    return ParseResponse(
        query=q,
        reference=ReferenceModel(**result.ref.to_dict()),
        formatted_reference=format_reference(result.ref),
        translation_id=result.translation_id,
        confidence=result.confidence,
        cleaned_input=result.cleaned_input,
    )


@router.get("/topics", response_model=TopicsResponse)
async def topics(q: str = Query(..., min_length=1, description="Topic or topical question")):
    """Rank curated topics against a query"""
    keyword = extract_topic_keyword(q) if is_topic_query(q) else q.strip()
    ranked = search_topics(keyword)
    return TopicsResponse(
        query=q,
        keyword=keyword,
        topics=[
            TopicModel(
                topic=entry.topic,
                aliases=list(entry.aliases),
                verses=[TopicVerseModel(**v.to_dict()) for v in entry.verses],
            )
            for entry in ranked
        ],
    )


@router.get("/translations", response_model=List[TranslationModel])
async def translations():
    """List selectable translations and whether their text is stored"""
    return [
        TranslationModel(id=translation_id, name=name, has_text=translation_id in VERSION_MODELS)
        for translation_id, name in AVAILABLE_TRANSLATIONS.items()
    ]


def _open_store(store_factory, translation_id: str):
    try:
        return store_factory(translation_id)
    except VerseStoreError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/chapter", response_model=PassageResponse)
async def read_chapter(
    book: str = Query(..., min_length=1),
    chapter: int = Query(..., ge=1),
    translation: Optional[str] = Query(default=None),
    store_factory=Depends(get_store_factory),
):
    """Every verse of a chapter"""
    translation_id = _check_translation(translation)
    store = _open_store(store_factory, translation_id)

    canonical = canonical_book_name(book)
    if canonical is None:
        raise HTTPException(status_code=404, detail=f"Book '{book}' not found.")

    try:
        verses = await store.get_chapter(canonical, chapter)
    except Exception as e:
        logger.exception("Chapter lookup failed")
        raise HTTPException(status_code=500, detail=f"Failed to get chapter: {str(e)}")

    if not verses:
        raise HTTPException(status_code=404, detail=f"{canonical} {chapter} not found in {translation_id.upper()}")

    return PassageResponse(translation=translation_id, verses=[VerseTextModel(**v.to_dict()) for v in verses])


@router.get("/passage", response_model=PassageResponse)
async def read_passage(
    book: str = Query(..., min_length=1),
    chapter: int = Query(..., ge=1),
    verse: int = Query(..., ge=1),
    before: int = Query(default=0, ge=0, le=50),
    after: int = Query(default=0, ge=0, le=50),
    translation: Optional[str] = Query(default=None),
    store_factory=Depends(get_store_factory),
):
    """A verse with surrounding context, bounds-checked against the stored text"""
    translation_id = _check_translation(translation)
    store = _open_store(store_factory, translation_id)

    try:
        verses = await store.get_passage(book, chapter, verse, context_before=before, context_after=after)
    except VerseStoreError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Passage lookup failed")
        raise HTTPException(status_code=500, detail=f"Failed to get passage: {str(e)}")

    return PassageResponse(translation=translation_id, verses=[VerseTextModel(**v.to_dict()) for v in verses])
