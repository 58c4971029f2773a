"""Render inline ADF nodes (text, mentions, emoji, dates, ...) to Markdown.

Total over any input: unknown kinds and malformed attributes render to an
empty string or a default rather than raising.
"""

import re
from datetime import datetime, timezone
from typing import Any

from atlas.adf.models import NodeType
from atlas.constants import MAX_TIMESTAMP_SECONDS
from atlas.markdown.marks import apply_marks, is_safe_href

# i64 range; longer digit strings are passed through like other non-numeric payloads
_INTEGER = re.compile(r"[+-]?[0-9]{1,18}")

# Status lozenge colour -> text indicator
STATUS_INDICATORS = {
    "green": "[OK]",
    "yellow": "[WARN]",
    "red": "[ERR]",
    "blue": "[INFO]",
    "purple": "[NOTE]",
}


def node_attrs(node: dict[str, Any]) -> dict[str, Any]:
    attrs = node.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def str_attr(attrs: dict[str, Any], *keys: str) -> str | None:
    """First non-empty string value among `keys`."""
    for key in keys:
        value = attrs.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def format_timestamp(timestamp: Any) -> str:
    """Format an epoch-milliseconds timestamp as YYYY-MM-DD.

    Non-numeric payloads are returned verbatim; pre-epoch and far-future
    values render as explicit markers.
    """
    if isinstance(timestamp, bool):
        return str(timestamp)
    if isinstance(timestamp, int):
        millis = timestamp
    elif isinstance(timestamp, float) and timestamp.is_integer():
        millis = int(timestamp)
    elif isinstance(timestamp, str) and _INTEGER.fullmatch(timestamp):
        millis = int(timestamp)
    elif timestamp is None:
        return ""
    else:
        return str(timestamp)

    # Truncate toward zero
    secs = abs(millis) // 1000 * (1 if millis >= 0 else -1)
    if secs < 0:
        return f"1970-01-01 (pre-epoch: {secs})"
    if secs > MAX_TIMESTAMP_SECONDS:
        return f"(invalid timestamp: {secs})"
    return datetime.fromtimestamp(secs, tz=timezone.utc).strftime("%Y-%m-%d")


def _render_text(node: dict[str, Any]) -> str:
    text = node.get("text")
    return apply_marks(text if isinstance(text, str) else "", node.get("marks"))


def _render_mention(node: dict[str, Any]) -> str:
    text = str_attr(node_attrs(node), "text", "id") or "user"
    return "@" + text.lstrip("@")


def _render_emoji(node: dict[str, Any]) -> str:
    return str_attr(node_attrs(node), "text", "shortName") or ""


def card_link(url: str) -> str:
    """`[url](url)`, or the bare url when its scheme is blocked."""
    return f"[{url}]({url})" if is_safe_href(url) else url


def _render_inline_card(node: dict[str, Any]) -> str:
    url = str_attr(node_attrs(node), "url")
    return card_link(url) if url else ""


def _render_date(node: dict[str, Any]) -> str:
    timestamp = node_attrs(node).get("timestamp")
    if timestamp == "":
        return ""
    return format_timestamp(timestamp)


def _render_status(node: dict[str, Any]) -> str:
    attrs = node_attrs(node)
    text = str_attr(attrs, "text") or "status"
    indicator = STATUS_INDICATORS.get(str_attr(attrs, "color") or "", "[STATUS]")
    return f"{indicator} {text.upper()}"


def _render_media_inline(node: dict[str, Any]) -> str:
    alt = str_attr(node_attrs(node), "alt", "id") or "media"
    return f"[Media: {alt}]"


def _render_placeholder(node: dict[str, Any]) -> str:
    text = str_attr(node_attrs(node), "text") or "placeholder"
    return f"{{{text}}}"


_HANDLERS = {
    NodeType.TEXT: _render_text,
    NodeType.HARD_BREAK: lambda _node: "\n",
    NodeType.MENTION: _render_mention,
    NodeType.EMOJI: _render_emoji,
    NodeType.INLINE_CARD: _render_inline_card,
    NodeType.DATE: _render_date,
    NodeType.STATUS: _render_status,
    NodeType.MEDIA_INLINE: _render_media_inline,
    NodeType.PLACEHOLDER: _render_placeholder,
}


def render_inline(node: Any) -> str:
    """Render one inline node; unknown kinds render to an empty string."""
    if not isinstance(node, dict):
        return ""
    handler = _HANDLERS.get(NodeType.parse(node.get("type")))
    return handler(node) if handler else ""


def render_inline_nodes(nodes: Any) -> str:
    """Concatenate the rendering of a sequence of inline nodes."""
    if not isinstance(nodes, list):
        return ""
    return "".join(render_inline(node) for node in nodes)
