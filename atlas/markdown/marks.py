"""Apply ADF text marks as Markdown (or inline HTML) decoration.

Marks wrap the text in the order they are listed: the first mark is innermost,
the last one outermost. Unknown or malformed marks leave the text unchanged.
"""

import re
from typing import Any
from urllib.parse import unquote

from atlas.adf.models import MarkType
from atlas.constants import BLOCKED_LINK_SCHEMES

# Browsers ignore ASCII whitespace and control characters inside a scheme ("java\tscript:")
_SCHEME_NOISE = re.compile(r"[\x00-\x20\x7f]+")
_MAX_UNQUOTE_ROUNDS = 10


def _attrs(mark: dict[str, Any]) -> dict[str, Any]:
    attrs = mark.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def _str_attr(attrs: dict[str, Any], key: str) -> str:
    value = attrs.get(key)
    return value if isinstance(value, str) else ""


def is_safe_href(href: str) -> bool:
    """Check that a link target does not use a script-capable scheme.

    Percent-encoding is decoded repeatedly (bounded) so double-encoded schemes are caught.
    """
    decoded = href
    for _ in range(_MAX_UNQUOTE_ROUNDS):
        previous = decoded
        decoded = unquote(decoded)
        if decoded == previous:
            break

    for candidate in (href, decoded):
        probe = _SCHEME_NOISE.sub("", candidate).lower()
        if probe.startswith(BLOCKED_LINK_SCHEMES):
            return False
    return True


def _format_link(text: str, attrs: dict[str, Any]) -> str:
    href = _str_attr(attrs, "href")
    if not href or not is_safe_href(href):
        return text

    title = _str_attr(attrs, "title")
    if title:
        return f'[{text}]({href} "{title}")'
    return f"[{text}]({href})"


def _format_subsup(text: str, attrs: dict[str, Any]) -> str:
    if attrs.get("type") == "sup":
        return f"<sup>{text}</sup>"
    return f"<sub>{text}</sub>"


def _format_text_color(text: str, attrs: dict[str, Any]) -> str:
    color = _str_attr(attrs, "color")
    return f'<span style="color:{color}">{text}</span>' if color else text


def _format_background_color(text: str, attrs: dict[str, Any]) -> str:
    color = _str_attr(attrs, "color")
    return f'<mark style="background:{color}">{text}</mark>' if color else text


def apply_marks(text: str, marks: Any) -> str:
    """Decorate `text` with each mark in order, each wrapping the previous result."""
    if not isinstance(marks, list):
        return text

    result = text
    for mark in marks:
        if not isinstance(mark, dict):
            continue
        attrs = _attrs(mark)

        match MarkType.parse(mark.get("type")):
            case MarkType.STRONG:
                result = f"**{result}**"
            case MarkType.EM:
                result = f"*{result}*"
            case MarkType.CODE:
                result = f"`{result}`"
            case MarkType.STRIKE:
                result = f"~~{result}~~"
            case MarkType.UNDERLINE:
                result = f"<u>{result}</u>"
            case MarkType.LINK:
                result = _format_link(result, attrs)
            case MarkType.SUBSUP:
                result = _format_subsup(result, attrs)
            case MarkType.TEXT_COLOR:
                result = _format_text_color(result, attrs)
            case MarkType.BACKGROUND_COLOR:
                result = _format_background_color(result, attrs)
            case _:
                pass

    return result
