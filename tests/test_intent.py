import pytest

from utils.intent import IntentType, classify_intent


def test_empty_is_uncertain():
    result = classify_intent("   ")
    assert result.type == IntentType.UNCERTAIN
    assert result.confidence == 0.0


def test_media_trigger_first():
    result = classify_intent("switch to presentation mode")
    assert result.type == IntentType.MEDIA
    assert result.confidence == 0.95


def test_narrative_without_wake_word_or_reference():
    result = classify_intent("and then we went to the store yesterday")
    assert result.type == IntentType.NARRATIVE
    assert result.confidence == 0.95


@pytest.mark.parametrize("text,confidence", [
    ("John 3:16", 1.0),
    ("turn to romans 8", 1.0),
    ("genesis", 0.9),
])
def test_references_are_commands(text, confidence):
    result = classify_intent(text)
    assert result.type == IntentType.COMMAND
    assert result.confidence == confidence


def test_wake_word_with_command_trigger():
    result = classify_intent("hey bible show me something about hope")
    assert result.type == IntentType.COMMAND
    assert result.confidence == 0.9


def test_wake_word_with_long_narrative():
    text = "bible " + " ".join(["we"] * 20)
    result = classify_intent(text)
    assert result.type == IntentType.NARRATIVE
    assert result.confidence == 0.8


def test_custom_wake_words_are_merged():
    assert classify_intent("pastor bot what is grace").type == IntentType.NARRATIVE

    result = classify_intent("pastor bot what is grace", ["Pastor Bot"])
    assert result.type == IntentType.COMMAND
    assert result.confidence == 0.7
