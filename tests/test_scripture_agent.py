import pytest

from app.agents.scripture_agent import (
    ScriptureAgent,
    ScriptureAnswer,
    ScriptureConversation,
    extract_references_from_text,
    is_complex_query,
)


class DummyResult:
    def __init__(self, output, messages):
        self.output = output
        self._messages = messages

    def new_messages(self):
        return self._messages


class DummyAgent:
    """Stands in for a pydantic-ai Agent"""

    def __init__(self, outputs=None, error=None):
        self.outputs = list(outputs or [])
        self.error = error
        self.calls = []

    async def run(self, prompt, message_history=None):
        self.calls.append((prompt, message_history))
        if self.error:
            raise self.error
        output = self.outputs.pop(0) if self.outputs else ScriptureAnswer(answer="ok")
        n = len(self.calls)
        return DummyResult(output, [f"request {n}", f"response {n}"])


def test_complex_queries():
    assert is_complex_query("where did jesus walk on water")
    assert is_complex_query("I'm feeling anxious today")
    assert is_complex_query("next chapter")
    assert not is_complex_query("John 3:16")
    assert not is_complex_query("verses about love")


def test_extract_references_from_text():
    text = "The answer is in John 14:6 and Romans 8:28-30, see also John 14:6."
    assert extract_references_from_text(text) == ["John 14:6", "Romans 8:28-30"]
    assert extract_references_from_text("Try reading 1 Corinthians 13:4 today") == ["1 Corinthians 13:4"]
    assert extract_references_from_text("See John 3:16") == ["John 3:16"]
    assert extract_references_from_text("Nothing here 42") == []


@pytest.mark.asyncio
async def test_without_api_key_agent_is_disabled():
    agent = ScriptureAgent(api_key="")
    agent.init()

    assert not agent.is_ready
    answer = await agent.conversation().ask("where did jesus walk on water")
    assert answer == ScriptureAnswer()


@pytest.mark.asyncio
async def test_ask_returns_structured_answer():
    dummy = DummyAgent(outputs=[ScriptureAnswer(
        answer="Jesus walked on the water.",
        references=["Matthew 14:25"],
        type="verse_lookup",
        confidence=0.95,
    )])
    agent = ScriptureAgent(agent=dummy).conversation()

    answer = await agent.ask("where did jesus walk on water")

    assert answer.references == ["Matthew 14:25"]
    assert agent.last_references == ["Matthew 14:25"]
    assert dummy.calls[0] == ("where did jesus walk on water", None)


@pytest.mark.asyncio
async def test_follow_up_carries_context_and_history():
    dummy = DummyAgent()
    agent = ScriptureAgent(agent=dummy).conversation()
    agent.set_context(["John 3:16"])

    await agent.ask("explain this")
    await agent.ask("next chapter")

    assert dummy.calls[0][0] == "[Context: The user was just reading John 3:16]\nexplain this"
    assert dummy.calls[1][1] == ["request 1", "response 1"]


@pytest.mark.asyncio
async def test_history_keeps_last_three_exchanges():
    dummy = DummyAgent()
    agent = ScriptureAgent(agent=dummy).conversation()

    for _ in range(5):
        await agent.ask("continue")

    assert [len(history or []) for _, history in dummy.calls] == [0, 2, 4, 6, 6]
    assert dummy.calls[4][1][0] == "request 2"

    agent.clear_history()
    await agent.ask("continue")
    assert dummy.calls[5][1] is None


@pytest.mark.asyncio
async def test_plain_text_output_is_salvaged():
    agent = ScriptureAgent(agent=DummyAgent(outputs=["Try John 3:16 for that."])).conversation()

    answer = await agent.ask("what verse talks about god's love")

    assert answer.references == ["John 3:16"]
    assert answer.type == "verse_lookup"
    assert answer.confidence == 0.7


@pytest.mark.asyncio
async def test_references_pulled_from_answer_text():
    agent = ScriptureAgent(agent=DummyAgent(outputs=[ScriptureAnswer(answer="Read Psalm 23:1 tonight.")])).conversation()

    answer = await agent.ask("what should i read tonight")
    assert answer.references == ["Psalm 23:1"]


@pytest.mark.asyncio
async def test_request_failure_returns_empty_answer():
    agent = ScriptureAgent(agent=DummyAgent(error=RuntimeError("rate limited"))).conversation()

    answer = await agent.ask("who was moses")
    assert answer.answer == ""
    assert answer.references == []


@pytest.mark.asyncio
async def test_sessions_do_not_share_context():
    dummy = DummyAgent()
    agent = ScriptureAgent(agent=dummy)

    agent.conversation("a").set_context(["Psalms 51:4"])
    await agent.conversation("a").ask("explain this")
    await agent.conversation("b").ask("where did jesus walk on water")

    assert dummy.calls[0][0].startswith("[Context: The user was just reading Psalms 51:4]")
    assert dummy.calls[1] == ("where did jesus walk on water", None)
    assert agent.conversation("a") is agent.conversation("a")
    assert agent.conversation("b").last_references == []


def test_anonymous_conversations_are_not_stored():
    agent = ScriptureAgent(agent=DummyAgent())

    first = agent.conversation()
    first.set_context(["John 3:16"])

    assert isinstance(first, ScriptureConversation)
    assert agent.conversation() is not first
    assert agent.conversation().last_references == []


def test_oldest_conversation_is_dropped():
    agent = ScriptureAgent(agent=DummyAgent(), max_conversations=2)

    first = agent.conversation("a")
    agent.conversation("b")
    agent.conversation("a")
    agent.conversation("c")

    assert agent.conversation("a") is first
    assert agent.conversation("b") is not None
    assert len(agent._conversations) == 2


def test_end_conversation():
    agent = ScriptureAgent(agent=DummyAgent())
    first = agent.conversation("a")
    agent.end_conversation("a")
    agent.end_conversation("missing")
    assert agent.conversation("a") is not first
