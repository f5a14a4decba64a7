from collections import OrderedDict, deque
from typing import List, Optional
import logging
import os
import re

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_ai import Agent
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.providers.groq import GroqProvider

from utils.config import GROQ_MODEL

logger = logging.getLogger(__name__)

load_dotenv()

SYSTEM_PROMPT = """You are a Bible expert assistant integrated into a voice-powered Bible app. Your job is to understand what the user is asking and respond with precise Bible references.

RULES:
1. ALWAYS include exact Bible references in your response when relevant (e.g., "John 3:16", "Psalm 23:1-6")
2. Keep answers concise, max 2-3 sentences
3. When the user asks "where" something is, give the reference first
4. For topic questions, give the 3-5 most relevant verses
5. For "explain" requests, give a brief explanation and the reference
6. For navigation ("next chapter", "go back"), infer from the reading context
7. Always use KJV-style book names (e.g., "Psalm" not "Psalms", "Revelation" not "Revelations")

Set "type" to one of verse_lookup, explanation, topic, navigation and "confidence" between 0.0 and 1.0.
"""

# Questions that need reasoning rather than a lookup
COMPLEX_QUERY_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"^(where|what|who|when|why|how|which|tell me|explain|describe)",
        r"did (jesus|god|paul|david|moses|peter|abraham)",
        r"does the bible say",
        r"what.*mean",
        r"difference between",
        r"compare",
        r"should i read",
        r"help me with",
        r"pray(er|ing)?\s+(for|about)",
        r"struggling with",
        r"going through",
        r"feeling\s+(sad|anxious|scared|alone|lost|angry|depressed)",
        r"next chapter",
        r"go back",
        r"read more",
        r"continue",
        r"previous",
    )
]

REFERENCE_IN_TEXT = re.compile(
    r"\b(\d?\s?[A-Z][a-z]+(?:\s[A-Z][a-z]+)?)\s+(\d{1,3})(?::(\d{1,3})(?:\s*-\s*(\d{1,3}))?)?\b"
)

# Name fragments accepted when pulling references out of free text
BOOK_NAME_PARTS = (
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy",
    "Joshua", "Judges", "Ruth", "Samuel", "Kings", "Chronicles",
    "Ezra", "Nehemiah", "Esther", "Job", "Psalm", "Proverbs",
    "Ecclesiastes", "Song", "Isaiah", "Jeremiah", "Lamentations",
    "Ezekiel", "Daniel", "Hosea", "Joel", "Amos", "Obadiah",
    "Jonah", "Micah", "Nahum", "Habakkuk", "Zephaniah", "Haggai",
    "Zechariah", "Malachi", "Matthew", "Mark", "Luke", "John",
    "Acts", "Romans", "Corinthians", "Galatians", "Ephesians",
    "Philippians", "Colossians", "Thessalonians", "Timothy", "Titus",
    "Philemon", "Hebrews", "James", "Peter", "Jude", "Revelation",
)

HISTORY_EXCHANGES = 3
MAX_CONVERSATIONS = 256


class ScriptureAnswer(BaseModel):
    """Structured answer returned by the question-answering model"""
    answer: str = ""
    references: List[str] = Field(default_factory=list)
    type: str = "unknown"
    confidence: float = 0.0


def empty_answer() -> ScriptureAnswer:
    return ScriptureAnswer(answer="", references=[], type="unknown", confidence=0.0)


def is_complex_query(query: str) -> bool:
    """Whether a query needs the model (questions, feelings, navigation) rather than a lookup"""
    q = (query or "").lower().strip()
    return any(pattern.search(q) for pattern in COMPLEX_QUERY_PATTERNS)


def extract_references_from_text(text: str) -> List[str]:
    """Recover "Book C:V" style references from free text, deduplicated in order"""
    refs = []
    for match in REFERENCE_IN_TEXT.finditer(text or ""):
        book = match.group(1).strip()
        words = book.split()
        # "See John 3:16" captures the capitalised word in front of the book
        if len(words) == 2 and not words[0].isdigit() and not any(part in words[0] for part in BOOK_NAME_PARTS):
            book = words[1]
        if not any(part in book for part in BOOK_NAME_PARTS):
            continue
        ref = f"{book} {match.group(2)}"
        if match.group(3):
            ref += f":{match.group(3)}"
        if match.group(4):
            ref += f"-{match.group(4)}"
        if ref not in refs:
            refs.append(ref)
    return refs


class ScriptureConversation:
    """
    One client's exchanges and reading context over the shared model.

    Follow-ups like "next chapter" resolve against the last few exchanges and the
    passage this client is reading. Never raises from ask(): a missing model, a failed
    request or unusable output all produce an empty answer.
    """

    def __init__(self, owner: "ScriptureAgent"):
        self._owner = owner
        self._history = deque(maxlen=HISTORY_EXCHANGES)
        self._last_references: List[str] = []

    @property
    def agent(self):
        return self._owner.agent

    @property
    def is_ready(self) -> bool:
        return self.agent is not None

    def is_complex_query(self, query: str) -> bool:
        return is_complex_query(query)

    def extract_references_from_text(self, text: str) -> List[str]:
        return extract_references_from_text(text)

    def set_context(self, references: List[str]):
        """Remember what the user is reading for follow-up questions"""
        self._last_references = list(references)

    def clear_history(self):
        self._history.clear()
        self._last_references = []

    @property
    def last_references(self) -> List[str]:
        return list(self._last_references)

    def _message_history(self):
        messages = []
        for exchange in self._history:
            messages.extend(exchange)
        return messages

    def _prompt(self, query: str) -> str:
        if self._last_references:
            return f"[Context: The user was just reading {', '.join(self._last_references)}]\n{query}"
        return query

    async def ask(self, query: str) -> ScriptureAnswer:
        if self.agent is None:
            logger.warning("Scripture agent asked without a configured model")
            return empty_answer()

        try:
            result = await self.agent.run(self._prompt(query), message_history=self._message_history() or None)
        except Exception as e:
            logger.error("Scripture agent request failed: %s", str(e))
            return empty_answer()

        answer = result.output
        if not isinstance(answer, ScriptureAnswer):
            # plain text came back, salvage what references it mentions
            text = str(answer or "")
            refs = extract_references_from_text(text)
            answer = ScriptureAnswer(
                answer=text,
                references=refs,
                type="verse_lookup" if refs else "unknown",
                confidence=0.7 if refs else 0.3,
            )
        elif not answer.references and answer.answer:
            answer.references = extract_references_from_text(answer.answer)

        self._history.append(list(result.new_messages()))
        if answer.references:
            self._last_references = list(answer.references)

        return answer


class ScriptureAgent:
    """
    Question answering over Groq through pydantic-ai.

    The pydantic-ai agent is stateless and shared. History and reading context live in
    per-client conversations handed out by conversation(), so one client's context
    never reaches another client's prompt.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: str = GROQ_MODEL, agent=None,
                 max_conversations: int = MAX_CONVERSATIONS):
        self.api_key = api_key if api_key is not None else os.getenv("GROQ_API_KEY")
        self.model_name = model_name
        self.agent = agent
        self.max_conversations = max_conversations
        self._conversations: "OrderedDict[str, ScriptureConversation]" = OrderedDict()

    @property
    def is_ready(self) -> bool:
        return self.agent is not None

    def init(self):
        """Build the pydantic-ai agent. Without an API key the agent stays disabled."""
        if self.agent is not None:
            return
        if not self.api_key:
            logger.warning("GROQ_API_KEY environment variable is not set - question answering is disabled")
            return

        model = GroqModel(
            self.model_name,
            provider=GroqProvider(api_key=self.api_key)
        )
        self.agent = Agent(model, output_type=ScriptureAnswer, system_prompt=SYSTEM_PROMPT)
        logger.info("Scripture agent ready (%s)", self.model_name)

    def conversation(self, session_id: Optional[str] = None) -> ScriptureConversation:
        """
        Conversation state for one client.

        Without a session id every call gets a fresh conversation that is never stored.
        Known sessions are kept least-recently-used first, the oldest dropped past
        max_conversations.
        """
        if not session_id:
            return ScriptureConversation(self)

        conversation = self._conversations.get(session_id)
        if conversation is not None:
            self._conversations.move_to_end(session_id)
            return conversation

        conversation = ScriptureConversation(self)
        self._conversations[session_id] = conversation
        while len(self._conversations) > self.max_conversations:
            dropped, _ = self._conversations.popitem(last=False)
            logger.debug("Dropped idle conversation %s", dropped)
        return conversation

    def end_conversation(self, session_id: str):
        self._conversations.pop(session_id, None)
