"""HTML fragment renderer for analysis results."""

from __future__ import annotations

import html
import logging
import re

from ntrcheck.models import AnalysisError, AnalysisResult, CheckItem, Status

logger = logging.getLogger(__name__)

HEADER = "<h3>Mondo Issue Analysis</h3>"

_URL_RE = re.compile(
    r"\b(?:https?|ftp|file)://[-A-Z0-9+&@#/%?=~_|!:,.;]*[-A-Z0-9+&@#/%=~_|]",
    re.IGNORECASE,
)

_ICON_SUCCESS = '<span class="status-icon success">✔</span>'
_ICON_NA = '<span class="status-icon na">-</span>'
_ICON_WARNING = '<span class="status-icon warning">⚠️</span>'
_ICON_ERROR = '<span class="status-icon error">✖</span>'

_ICONS = {
    Status.OK: _ICON_SUCCESS,
    Status.NOT_APPLICABLE: _ICON_NA,
    Status.MISSING: _ICON_WARNING,
    Status.INCOMPLETE: _ICON_WARNING,
    Status.INVALID_FORMAT: _ICON_WARNING,
}


def status_icon(status: str | None) -> str:
    """Map a check status to its glyph. Unknown or absent → error glyph."""
    icon = _ICONS.get((status or "").strip().upper())
    if icon is None:
        logger.warning("Unknown status received from AI: %r", status)
        return _ICON_ERROR
    return icon


def linkify(text: str | None) -> str:
    """Escape text and wrap http(s)/ftp/file URLs in anchors."""
    if not text:
        return ""
    parts: list[str] = []
    pos = 0
    for match in _URL_RE.finditer(text):
        parts.append(html.escape(text[pos:match.start()], quote=False))
        url = match.group(0)
        parts.append(
            f'<a href="{html.escape(url)}" target="_blank" rel="noopener noreferrer">'
            f"{html.escape(url, quote=False)}</a>"
        )
        pos = match.end()
    parts.append(html.escape(text[pos:], quote=False))
    return "".join(parts)


def _text(value: str | None) -> str:
    return html.escape(value or "", quote=False)


def _render_check(item: CheckItem) -> str:
    return (
        '<div class="analysis-item">'
        f"{status_icon(item.status)}"
        f"<div><strong>{_text(item.field)}:</strong> "
        f"{linkify(item.comment or 'No comment provided.')}</div>"
        "</div>"
    )


def render_error(message: str) -> str:
    return f'{HEADER}\n<p class="analysis-error" style="color: #d1242f;">{_text(message)}</p>'


def render_progress(message: str) -> str:
    return f"<p>{_text(message)}</p>"


def render_html(result: AnalysisResult) -> str:
    """Render an analysis result as an HTML fragment."""
    if isinstance(result, AnalysisError):
        return render_error(result.error)

    action = (result.recommended_action or "NONE").replace("_", " ")
    lines = [
        HEADER,
        f"<p><strong>Summary:</strong> {_text(result.summary)}</p>",
        f"<p><strong>Recommended Action:</strong> <strong>{_text(action)}</strong>"
        f" - {_text(result.action_comment)}</p>",
        '<hr style="border-color: #d0d7de; margin: 12px 0;">',
        "<h4>Template Checklist</h4>",
    ]
    lines.extend(_render_check(item) for item in result.checks)
    return "\n".join(lines)
