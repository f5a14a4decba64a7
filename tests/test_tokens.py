from utils.tokens import clean_tokens, extract_translation, tokenize


def test_tokenize_keeps_chapter_verse_together():
    assert tokenize("John 3:16, please!") == ["john", "3:16", "please"]
    assert tokenize("Psalm 23.1") == ["psalm", "23.1"]
    assert tokenize("") == []


def test_clean_tokens_drops_filler_only():
    assert clean_tokens(["um", "so", "like", "okay"]) == []
    assert clean_tokens(["go", "to", "romans", "eight"]) == ["romans", "eight"]


def test_clean_tokens_protects_reference_words():
    tokens = ["please", "show", "me", "first", "john", "chapter", "three"]
    assert clean_tokens(tokens) == ["first", "john", "chapter", "three"]
    # "of" is part of "song of solomon"
    assert clean_tokens(["song", "of", "solomon"]) == ["song", "of", "solomon"]


def test_clean_tokens_preserves_order_and_duplicates():
    assert clean_tokens(["three", "three", "john"]) == ["three", "three", "john"]


def test_extract_translation_long_alias():
    match = extract_translation(tokenize("John 3:16 in the king james version"))
    assert match.translation_id == "kjv"
    assert match.remaining == ["john", "3:16", "in", "the"]


def test_extract_translation_abbreviation_and_suffix():
    assert extract_translation(["john", "3", "16", "kjv"]).remaining == ["john", "3", "16"]

    match = extract_translation(["king", "james", "bible", "john", "1", "1"])
    assert match.translation_id == "kjv"
    assert match.remaining == ["john", "1", "1"]


def test_extract_translation_none():
    match = extract_translation(["john", "3", "16"])
    assert match.translation_id is None
    assert match.remaining == ["john", "3", "16"]
