"""GitHub REST adapter — reads an issue page's title, body and labels.

Docs: https://docs.github.com/en/rest/issues/issues#get-an-issue
"""

from __future__ import annotations

import logging
import re

import httpx

from ntrcheck.config import config
from ntrcheck.exceptions import GitHubError
from ntrcheck.models import IssuePage

logger = logging.getLogger(__name__)

_ISSUE_URL = re.compile(
    r"^https?://github\.com/(?P<repo>[\w.-]+/[\w.-]+)/issues/(?P<number>\d+)/?(?:[?#].*)?$"
)


def parse_issue_url(url: str) -> tuple[str, int]:
    """Split an issue URL into ("owner/repo", number)."""
    match = _ISSUE_URL.match(url.strip())
    if not match:
        raise ValueError(f"Not a GitHub issue URL: {url}")
    return match.group("repo"), int(match.group("number"))


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if config.github.token:
        headers["Authorization"] = f"Bearer {config.github.token}"
    return headers


async def fetch_issue(http: httpx.AsyncClient, repo: str, number: int) -> IssuePage:
    """Fetch one issue and return it as a page snapshot."""
    resp = await http.get(
        f"{config.github.api_url}/repos/{repo}/issues/{number}",
        headers=_headers(),
    )
    if not resp.is_success:
        raise GitHubError(
            f"GitHub issue {repo}#{number} request failed: {resp.status_code} {resp.reason_phrase}"
        )
    data = resp.json()
    labels = [
        label["name"] if isinstance(label, dict) else str(label)
        for label in data.get("labels") or []
    ]
    logger.info("Fetched %s#%d (%d labels)", repo, number, len(labels))
    return IssuePage(
        url=data.get("html_url") or f"https://github.com/{repo}/issues/{number}",
        title=data.get("title") or "",
        body=data.get("body") or "",
        labels=labels,
    )
