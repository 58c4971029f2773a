"""ADF to Markdown rendering."""

from typing import Any

from atlas.adf.models import Document
from atlas.constants import MAX_DEPTH
from atlas.markdown.blocks import BlockRenderer
from atlas.markdown.inline import format_timestamp, render_inline, render_inline_nodes
from atlas.markdown.marks import apply_marks, is_safe_href
from atlas.markdown.whitespace import normalize_whitespace


def adf_to_markdown(adf: dict[str, Any] | Document | Any, *, max_depth: int = MAX_DEPTH) -> str:
    """Render an ADF document to Markdown.

    Never raises: a value without a `content` list renders to an empty string.
    """
    return BlockRenderer(max_depth=max_depth).render_document(adf)


__all__ = [
    "adf_to_markdown",
    "BlockRenderer",
    "render_inline",
    "render_inline_nodes",
    "format_timestamp",
    "apply_marks",
    "is_safe_href",
    "normalize_whitespace",
]
