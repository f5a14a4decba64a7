import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Resolution heuristics. These are tuning knobs, not invariants.
FAMOUS_PHRASE_OVERLAP = 0.6          # share of a phrase's words an utterance must hit
SEMANTIC_SIMILARITY_THRESHOLD = 0.25  # minimum cosine similarity for a semantic hit
SEMANTIC_TOP_K = 3

FAMOUS_PHRASE_CONFIDENCE = 0.95
BASE_CONFIDENCE = 0.7                # a bare book name
EXPLICIT_CONFIDENCE = 0.9            # book plus a chapter and/or verse
TRANSLATION_BONUS = 0.05
TOPIC_CONFIDENCE = 0.8
KEYWORD_CONFIDENCE = 0.6

KEYWORD_SEARCH_LIMIT = 50

# Services
EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
DEFAULT_TRANSLATION = os.getenv("DEFAULT_TRANSLATION", "kjv")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ResolverSettings:
    """Thresholds the resolution pipeline runs with"""

    famous_phrase_overlap: float = FAMOUS_PHRASE_OVERLAP
    semantic_similarity_threshold: float = SEMANTIC_SIMILARITY_THRESHOLD
    semantic_top_k: int = SEMANTIC_TOP_K
    famous_phrase_confidence: float = FAMOUS_PHRASE_CONFIDENCE
    base_confidence: float = BASE_CONFIDENCE
    explicit_confidence: float = EXPLICIT_CONFIDENCE
    translation_bonus: float = TRANSLATION_BONUS
    topic_confidence: float = TOPIC_CONFIDENCE
    keyword_confidence: float = KEYWORD_CONFIDENCE
    keyword_search_limit: int = KEYWORD_SEARCH_LIMIT

    @classmethod
    def from_env(cls) -> "ResolverSettings":
        return cls(
            famous_phrase_overlap=_env_float("FAMOUS_PHRASE_OVERLAP", FAMOUS_PHRASE_OVERLAP),
            semantic_similarity_threshold=_env_float("SEMANTIC_SIMILARITY_THRESHOLD", SEMANTIC_SIMILARITY_THRESHOLD),
            semantic_top_k=int(_env_float("SEMANTIC_TOP_K", SEMANTIC_TOP_K)),
            famous_phrase_confidence=_env_float("FAMOUS_PHRASE_CONFIDENCE", FAMOUS_PHRASE_CONFIDENCE),
            base_confidence=_env_float("BASE_CONFIDENCE", BASE_CONFIDENCE),
            explicit_confidence=_env_float("EXPLICIT_CONFIDENCE", EXPLICIT_CONFIDENCE),
            translation_bonus=_env_float("TRANSLATION_BONUS", TRANSLATION_BONUS),
            topic_confidence=_env_float("TOPIC_CONFIDENCE", TOPIC_CONFIDENCE),
            keyword_confidence=_env_float("KEYWORD_CONFIDENCE", KEYWORD_CONFIDENCE),
            keyword_search_limit=int(_env_float("KEYWORD_SEARCH_LIMIT", KEYWORD_SEARCH_LIMIT)),
        )


DEFAULT_SETTINGS = ResolverSettings()
