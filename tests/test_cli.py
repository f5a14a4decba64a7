from rich.console import Console

import cli


def _render(response):
    out = Console(record=True, width=120)
    cli.render_results(response, out=out)
    return out.export_text()


def test_render_reference():
    text = _render({
        "status": "STRUCTURED_REFERENCE",
        "query": "romans eight twenty eight",
        "formatted_reference": "Romans 8:28",
        "label": "Romans 8:28",
        "translation": "kjv",
        "confidence": 0.9,
    })

    assert "Match Type: Reference" in text
    assert "Romans 8:28" in text
    assert "Translation: KJV" in text
    assert "confidence: 90%" in text


def test_render_keyword_matches():
    text = _render({
        "status": "KEYWORD_HIT",
        "query": "wept",
        "label": 'Search: "wept"',
        "keyword_matches": [{"reference": "John 11:35", "text": "Jesus wept."}],
    })

    assert "Keyword Search" in text
    assert "John 11:35" in text
    assert "Jesus wept." in text


def test_render_no_match_message():
    text = _render({"status": "NO_MATCH", "query": "um", "message": 'No verses found matching "um"'})

    assert "No Match" in text
    assert 'No verses found matching "um"' in text


def test_resolve_query_posts_to_api(monkeypatch):
    captured = {}

    class DummyResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return {"status": "NO_MATCH"}

    def fake_post(url, json=None, timeout=None):
        captured["url"] = url
        captured["json"] = json
        return DummyResponse()

    monkeypatch.setattr(cli.requests, "post", fake_post)

    assert cli.resolve_query("jesus wept", "web", spoken=True) == {"status": "NO_MATCH"}
    assert captured["url"].endswith("/resolve")
    assert captured["json"] == {"query": "jesus wept", "translation": "web", "spoken": True}


def test_resolve_query_sends_session_id(monkeypatch):
    captured = {}

    class DummyResponse:
        def raise_for_status(self):
            pass

        def json(self):
            return {"status": "NO_MATCH"}

    def fake_post(url, json=None, timeout=None):
        captured["json"] = json
        return DummyResponse()

    monkeypatch.setattr(cli.requests, "post", fake_post)

    cli.resolve_query("next chapter", session_id="abc123")
    assert captured["json"] == {"query": "next chapter", "translation": "kjv", "spoken": False, "session_id": "abc123"}
