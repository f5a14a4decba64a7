from sentence_transformers import SentenceTransformer
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import asyncio
import re
import logging

from utils.config import EMBEDDING_MODEL, SEMANTIC_SIMILARITY_THRESHOLD, SEMANTIC_TOP_K
from utils.popular_verses import POPULAR_VERSES

# Set up logging
logger = logging.getLogger(__name__)


@dataclass
class SemanticMatch:
    reference: str
    text: str
    score: float

    def to_dict(self):
        return {"reference": self.reference, "text": self.text, "score": round(self.score, 4)}


class SemanticSearchService:
    """
    Embedding search over a curated verse list.

    The model is loaded on first use (or by an explicit init()), verse embeddings
    are computed once and kept in memory for the life of the service.
    """

    def __init__(self, model_name: str = EMBEDDING_MODEL, verses: Optional[Sequence[dict]] = None):
        self.model_name = model_name
        self.model = None
        self.verses = list(verses) if verses is not None else list(POPULAR_VERSES)
        self._verse_embeddings: Dict[str, np.ndarray] = {}

    @property
    def is_ready(self) -> bool:
        return self.model is not None

    def _load_model(self):
        """Lazy load the model"""
        if self.model is None:
            logger.info(f"Loading embedding model: {self.model_name}")
            self.model = SentenceTransformer(self.model_name)
            logger.info("Embedding model loaded")
        return self.model

    async def init(self):
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._load_model)

    def _preprocess_text(self, text: str) -> str:
        # Collapse whitespace and drop symbols that add nothing to the meaning
        text = re.sub(r'\s+', ' ', text.strip())
        text = re.sub(r'[^\w\s\.,;:!?\'"()-]', '', text)
        return text

    async def embed(self, text: str) -> np.ndarray:
        """Encode one text into a unit-length vector without blocking the event loop"""
        loop = asyncio.get_running_loop()
        model = self._load_model()
        cleaned = self._preprocess_text(text)
        embedding = await loop.run_in_executor(
            None,
            lambda: model.encode(cleaned, normalize_embeddings=True)
        )
        return np.asarray(embedding)

    @staticmethod
    def cosine_similarity(embedding1, embedding2) -> float:
        emb1 = np.asarray(embedding1, dtype=float)
        emb2 = np.asarray(embedding2, dtype=float)

        norm1 = np.linalg.norm(emb1)
        norm2 = np.linalg.norm(emb2)
        if norm1 == 0 or norm2 == 0:
            return 0.0

        return float(np.dot(emb1, emb2) / (norm1 * norm2))

    async def _verse_embedding(self, verse: dict) -> np.ndarray:
        reference = verse["reference"]
        cached = self._verse_embeddings.get(reference)
        if cached is None:
            cached = await self.embed(verse["text"])
            self._verse_embeddings[reference] = cached
        return cached

    async def search(self, query: str, limit: int = SEMANTIC_TOP_K,
                     threshold: float = SEMANTIC_SIMILARITY_THRESHOLD) -> List[SemanticMatch]:
        """
        Rank the curated verses by similarity to the query.

        The top `limit` are kept first and only then filtered by `threshold`, so fewer
        than `limit` results can come back even when more verses clear the threshold.
        """
        if not query or not query.strip():
            return []

        query_embedding = await self.embed(query)

        results = []
        for verse in self.verses:
            embedding = await self._verse_embedding(verse)
            score = self.cosine_similarity(query_embedding, embedding)
            results.append(SemanticMatch(reference=verse["reference"], text=verse["text"], score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        top = results[:limit]
        logger.debug("semantic search for %r: %s", query, [(r.reference, round(r.score, 3)) for r in top])
        return [r for r in top if r.score > threshold]

    async def health_check(self) -> dict:
        try:
            embedding = await self.embed("This is a test sentence for the embedding service.")
            return {
                "status": "healthy",
                "model_name": self.model_name,
                "embedding_dimension": len(embedding),
                "cached_verses": len(self._verse_embeddings),
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "model_name": self.model_name
            }
