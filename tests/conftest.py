"""Shared fixtures for ntrcheck tests."""

import json
from pathlib import Path

import httpx
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def hgnc_response():
    return json.loads((FIXTURES_DIR / "hgnc_brca1.json").read_text())


@pytest.fixture
def esearch_response():
    return json.loads((FIXTURES_DIR / "ncbi_esearch_kit_cat.json").read_text())


@pytest.fixture
def esummary_response():
    return json.loads((FIXTURES_DIR / "ncbi_esummary_kit_cat.json").read_text())


@pytest.fixture
def github_issue_response():
    return json.loads((FIXTURES_DIR / "github_issue_ntr.json").read_text())


@pytest.fixture
def chat_completion():
    """Factory for an OpenAI chat completion envelope around a JSON payload."""

    def _make(payload, *, raw: str | None = None) -> dict:
        content = raw if raw is not None else json.dumps(payload)
        return {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
            ],
            "usage": {"prompt_tokens": 120, "completion_tokens": 80},
        }

    return _make


@pytest.fixture
def simple_analysis():
    return {
        "summary": "Request for a new fibrosis subtype with definition and parent.",
        "checks": [
            {"field": "Term Label", "status": "OK", "comment": "Label provided."},
            {"field": "Attribution (ORCID)", "status": "MISSING", "comment": "No ORCID given."},
            {"field": "Parent Term", "status": "OK", "comment": "Parent is fibrosis."},
            {"field": "Definition", "status": "INCOMPLETE", "comment": "See https://example.org/def"},
            {"field": "Synonyms", "status": "OK", "comment": "Two synonyms."},
        ],
        "recommendedAction": "NEEDS_MORE_INFO",
        "actionComment": "Ask for ORCID.",
    }


@pytest.fixture
def gene_analysis(simple_analysis):
    def _make(gene_status: str = "OK", comment: str = "HGNC:1100 found.") -> dict:
        data = json.loads(json.dumps(simple_analysis))
        data["checks"].append({"field": "Gene Identifier", "status": gene_status, "comment": comment})
        return data

    return _make


@pytest.fixture
def mock_http():
    """An httpx.AsyncClient that doesn't make real requests."""
    transport = httpx.MockTransport(lambda req: httpx.Response(200, json={}))
    return httpx.AsyncClient(transport=transport)
