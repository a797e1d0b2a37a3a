"""Tests for the optional AI narrative, with the OpenAI client stubbed."""

from types import SimpleNamespace

from sqlreviewer.ai import review_ai
from sqlreviewer.core.findings import Finding


class FakeClient:
    def __init__(self, text, calls):
        self._text = text
        self._calls = calls
        self.responses = self

    def create(self, **kwargs):
        self._calls.append(kwargs)
        return SimpleNamespace(output_text=self._text)


def _install(monkeypatch, text):
    calls = []
    monkeypatch.setattr(review_ai, "OpenAI", lambda api_key=None: FakeClient(text, calls))
    return calls


FINDINGS = [
    Finding(item="CLA.001", severity="L4", summary="No WHERE", content="Full scan"),
    Finding(item="OK", severity="L0", summary="OK"),
]


def test_json_reply(monkeypatch):
    calls = _install(monkeypatch, '{"summary": "Add a filter.", "priorities": ["where"]}')
    result = review_ai.generate_review_narrative("select id from tbl", FINDINGS)
    assert result == {"summary": "Add a filter.", "priorities": ["where"], "rewrite_hints": []}

    prompt = calls[0]["input"][0]["content"][0]["text"]
    assert "select id from tbl" in prompt
    assert "CLA.001 [L4] No WHERE" in prompt
    assert "OK [L0]" not in prompt


def test_non_json_reply_kept_raw(monkeypatch):
    _install(monkeypatch, "Just add a WHERE clause.")
    assert review_ai.generate_review_narrative("select 1", FINDINGS) == {"raw": "Just add a WHERE clause."}


def test_model_from_env(monkeypatch):
    calls = _install(monkeypatch, "{}")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    review_ai.generate_review_narrative("select 1", [])
    assert calls[0]["model"] == "gpt-test"
