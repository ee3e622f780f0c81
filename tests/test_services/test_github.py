"""Tests for the GitHub issue reader."""

import httpx
import pytest
import respx

from ntrcheck.exceptions import GitHubError
from ntrcheck.services.github import fetch_issue, parse_issue_url

ISSUE_API = "https://api.github.com/repos/monarch-initiative/mondo/issues/9001"


def test_parse_issue_url():
    assert parse_issue_url("https://github.com/monarch-initiative/mondo/issues/9001") == (
        "monarch-initiative/mondo", 9001,
    )
    assert parse_issue_url("https://github.com/monarch-initiative/mondo/issues/12#issuecomment-1")[1] == 12


def test_parse_issue_url_rejects_pulls():
    with pytest.raises(ValueError, match="Not a GitHub issue URL"):
        parse_issue_url("https://github.com/monarch-initiative/mondo/pull/5")


async def test_fetch_issue(github_issue_response):
    async with respx.mock:
        respx.get(ISSUE_API).respond(json=github_issue_response)

        async with httpx.AsyncClient() as http:
            page = await fetch_issue(http, "monarch-initiative/mondo", 9001)

    assert page.title.startswith("[NTR/gene]")
    assert "ORCID" in page.body
    assert page.labels == ["new term request", "gene"]
    assert page.is_new_term_request
    assert page.url == "https://github.com/monarch-initiative/mondo/issues/9001"


async def test_fetch_issue_not_found():
    async with respx.mock:
        respx.get(ISSUE_API).respond(status_code=404)

        async with httpx.AsyncClient() as http:
            with pytest.raises(GitHubError, match="404"):
                await fetch_issue(http, "monarch-initiative/mondo", 9001)
