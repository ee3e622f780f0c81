"""OpenAI Chat Completions adapter with JSON-mode structured output."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx

from ntrcheck.config import config
from ntrcheck.exceptions import LLMRequestError, LLMResponseError

logger = logging.getLogger(__name__)


async def complete_json(
    http: httpx.AsyncClient,
    prompt: str,
    *,
    api_key: str,
    purpose: str,
    model: str | None = None,
) -> dict[str, Any]:
    """Send one user prompt in JSON mode and return the parsed object.

    Raises LLMRequestError on a non-success status and LLMResponseError when
    the message content is not a JSON object.
    """
    model = model or config.llm.model
    logger.info("LLM call %s via OpenAI (%s)", purpose, model)
    start = time.perf_counter()
    try:
        resp = await http.post(
            f"{config.llm.base_url}/chat/completions",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "response_format": {"type": "json_object"},
            },
            timeout=config.llm.timeout_seconds,
        )
    except httpx.HTTPError as exc:
        raise LLMRequestError(f"LLM call ({purpose}) failed: {exc}") from exc
    if not resp.is_success:
        raise LLMRequestError(
            f"LLM call ({purpose}) failed: {resp.status_code} {resp.reason_phrase}"
        )

    try:
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise LLMResponseError(f"LLM call ({purpose}) returned an unexpected envelope") from exc

    duration_ms = int((time.perf_counter() - start) * 1000)
    usage = data.get("usage") or {}
    logger.info(
        "LLM call %s finished in %dms (prompt=%s, completion=%s tokens)",
        purpose, duration_ms,
        usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0),
    )
    return parse_json_object(content or "", purpose)


def parse_json_object(content: str, purpose: str) -> dict[str, Any]:
    """Parse model output that must be a single JSON object."""
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"LLM call ({purpose}) did not return valid JSON") from exc
    if not isinstance(parsed, dict):
        raise LLMResponseError(f"LLM call ({purpose}) returned {type(parsed).__name__}, not an object")
    return parsed
