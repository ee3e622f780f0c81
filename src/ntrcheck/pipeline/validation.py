"""Shape validation of the final analysis payload.

The model's answer is untrusted. We check presence and type of the fields
we render; we do not check that the statuses are semantically right.
"""

from __future__ import annotations

from typing import Any

from ntrcheck.exceptions import MalformedUpstreamResponseError
from ntrcheck.models import AnalysisReport, CheckItem

_OPTIONAL_TEXT = ("summary", "recommendedAction", "actionComment")


def _optional_text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None or isinstance(value, str):
        return value
    raise MalformedUpstreamResponseError(
        f'Analysis response from AI was malformed: "{key}" must be a string.'
    )


def _check_item(raw: Any, index: int) -> CheckItem:
    if not isinstance(raw, dict):
        raise MalformedUpstreamResponseError(
            f"Analysis response from AI was malformed: check #{index + 1} is not an object."
        )
    field = raw.get("field")
    if not isinstance(field, str) or not field:
        raise MalformedUpstreamResponseError(
            f'Analysis response from AI was malformed: check #{index + 1} has no "field".'
        )
    status = raw.get("status")
    comment = raw.get("comment")
    return CheckItem(
        field=field,
        status=status if isinstance(status, str) else None,
        comment=comment if isinstance(comment, str) else None,
    )


def parse_analysis_payload(payload: dict[str, Any]) -> AnalysisReport:
    """Validate a decoded JSON object and build the success shape."""
    checks = payload.get("checks")
    if not isinstance(checks, list):
        raise MalformedUpstreamResponseError(
            'Analysis response from AI was malformed: missing "checks" array.'
        )

    summary, action, action_comment = (_optional_text(payload, k) for k in _OPTIONAL_TEXT)
    return AnalysisReport(
        summary=summary,
        checks=[_check_item(raw, i) for i, raw in enumerate(checks)],
        recommended_action=action,
        action_comment=action_comment,
    )
