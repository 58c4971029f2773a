"""Render block-level ADF nodes to Markdown.

Content read back from Jira/Confluence is untrusted: unknown kinds, missing or
mistyped attributes and hostile nesting never raise. A node that renders to
nothing returns None so callers can skip it when joining.
"""

import re
from typing import Any

from loguru import logger

from atlas.adf.models import Document, NodeType
from atlas.config import Settings, get_settings
from atlas.constants import MAX_DEPTH, MAX_TABLE_COLSPAN, TRUNCATION_MARKER
from atlas.markdown.inline import card_link, node_attrs, render_inline, render_inline_nodes, str_attr
from atlas.markdown.whitespace import normalize_whitespace

_LIST_TYPES = (NodeType.BULLET_LIST, NodeType.ORDERED_LIST)
_INDENT = "  "
# "--" may not appear inside an HTML comment
_COMMENT_DASHES = re.compile(r"-{2,}")


def _children(node: dict[str, Any]) -> list[Any]:
    content = node.get("content")
    return content if isinstance(content, list) else []


def _kind(node: Any) -> NodeType:
    return NodeType.parse(node.get("type")) if isinstance(node, dict) else NodeType.UNSUPPORTED


def _int_attr(attrs: dict[str, Any], key: str, default: int) -> int:
    value = attrs.get(key)
    # bool is an int subclass
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


class BlockRenderer:
    """Renders ADF block nodes, guarding recursion depth."""

    def __init__(self, max_depth: int = MAX_DEPTH, max_table_colspan: int = MAX_TABLE_COLSPAN):
        self.max_depth = max_depth
        self.max_table_colspan = max_table_colspan
        self._handlers = {
            NodeType.DOC: self._render_container,
            NodeType.PARAGRAPH: self._render_paragraph,
            NodeType.HEADING: self._render_heading,
            NodeType.BULLET_LIST: self._render_list,
            NodeType.ORDERED_LIST: self._render_list,
            NodeType.LIST_ITEM: self._render_list_item,
            NodeType.CODE_BLOCK: self._render_code_block,
            NodeType.BLOCKQUOTE: self._render_blockquote,
            NodeType.RULE: lambda _node, _depth: "---",
            NodeType.PANEL: self._render_panel,
            NodeType.TABLE: self._render_table,
            NodeType.MEDIA_SINGLE: self._render_media,
            NodeType.MEDIA_GROUP: self._render_media,
            NodeType.EXPAND: self._render_expand,
            NodeType.NESTED_EXPAND: self._render_expand,
            NodeType.TASK_LIST: self._render_task_list,
            NodeType.TASK_ITEM: self._render_task_item,
            NodeType.DECISION_LIST: self._render_decision_list,
            NodeType.DECISION_ITEM: self._render_decision_item,
            NodeType.LAYOUT_SECTION: self._render_layout_section,
            NodeType.LAYOUT_COLUMN: self._render_container,
            NodeType.EMBED_CARD: self._render_embed_card,
            NodeType.BODIED_EXTENSION: self._render_extension,
            NodeType.MULTI_BODIED_EXTENSION: self._render_extension,
            NodeType.EXTENSION_FRAME: self._render_container,
        }

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "BlockRenderer":
        settings = settings or get_settings()
        return cls(max_depth=settings.max_depth, max_table_colspan=settings.max_table_colspan)

    # === ENTRY POINTS ===

    def render_document(self, adf: Any) -> str:
        """Render a whole document: top-level blocks joined by blank lines, whitespace normalized."""
        if isinstance(adf, Document):
            adf = adf.to_adf()
        content = adf.get("content") if isinstance(adf, dict) else None
        if not isinstance(content, list):
            return ""

        blocks = []
        for node in content:
            rendered = self.render_block(node, 0)
            if rendered is not None:
                blocks.append(rendered)
        return normalize_whitespace("\n\n".join(blocks))

    def render_block(self, node: Any, depth: int = 0) -> str | None:
        """Render one block node at the given nesting depth; None when it renders to nothing."""
        if depth > self.max_depth:
            logger.warning(f"ADF nesting exceeds {self.max_depth} levels, truncating")
            return TRUNCATION_MARKER
        if not isinstance(node, dict):
            return None

        raw_type = node.get("type")
        if not isinstance(raw_type, str):
            return None

        kind = NodeType.parse(raw_type)
        if kind.is_inline:
            text = render_inline(node)
            return text if text.strip() else None

        handler = self._handlers.get(kind)
        if handler is None:
            return self._render_unsupported(node, raw_type, depth)
        return handler(node, depth)

    # === HELPERS ===

    def _render_parts(self, nodes: list[Any], depth: int) -> list[str]:
        """Render child nodes, concatenating runs of inline nodes and skipping empty results."""
        parts: list[str] = []
        inline_run: list[Any] = []

        def flush() -> None:
            text = render_inline_nodes(inline_run)
            if text.strip():
                parts.append(text)
            inline_run.clear()

        for child in nodes:
            if _kind(child).is_inline:
                inline_run.append(child)
                continue
            flush()
            rendered = self.render_block(child, depth)
            if rendered is not None:
                parts.append(rendered)
        flush()
        return parts

    def _render_container(self, node: dict[str, Any], depth: int) -> str | None:
        parts = self._render_parts(_children(node), depth + 1)
        return "\n\n".join(parts) if parts else None

    def _render_unsupported(self, node: dict[str, Any], kind: str, depth: int) -> str | None:
        content = self._render_container(node, depth)
        if content is None:
            return None
        logger.warning(f"Unsupported ADF node type '{kind}', rendering its children only")
        label = _COMMENT_DASHES.sub("-", kind)
        return f"<!-- Unsupported: {label} -->\n{content}"

    # === TEXT BLOCKS ===

    def _render_paragraph(self, node: dict[str, Any], depth: int) -> str | None:
        text = render_inline_nodes(node.get("content"))
        return text if text.strip() else None

    def _render_heading(self, node: dict[str, Any], depth: int) -> str | None:
        level = min(max(_int_attr(node_attrs(node), "level", 1), 1), 6)
        text = render_inline_nodes(node.get("content"))
        if not text.strip():
            return None
        return f"{'#' * level} {text}"

    def _render_code_block(self, node: dict[str, Any], depth: int) -> str:
        language = str_attr(node_attrs(node), "language") or ""
        # Marks are ignored; fenced content is already monospace
        code = "".join(
            child["text"] for child in _children(node) if isinstance(child, dict) and isinstance(child.get("text"), str)
        )
        return f"```{language}\n{code}\n```"

    def _render_blockquote(self, node: dict[str, Any], depth: int) -> str | None:
        parts = self._render_parts(_children(node), depth + 1)
        if not parts:
            return None
        lines = "\n\n".join(parts).split("\n")
        return "\n".join(f"> {line}" if line else ">" for line in lines)

    def _render_panel(self, node: dict[str, Any], depth: int) -> str | None:
        panel_type = (str_attr(node_attrs(node), "panelType") or "info").upper()
        parts = self._render_parts(_children(node), depth + 1)
        if not parts:
            return None
        return f"> **{panel_type}**: {' '.join(parts)}"

    def _render_expand(self, node: dict[str, Any], depth: int) -> str | None:
        title = str_attr(node_attrs(node), "title") or "Details"
        content = self._render_container(node, depth)
        if content is None:
            return None
        return f"**{title}**\n\n{content}"

    # === LISTS ===

    def _render_list(self, node: dict[str, Any], depth: int, indent: int = 0) -> str | None:
        ordered = _kind(node) is NodeType.ORDERED_LIST
        prefix = _INDENT * indent
        lines = []
        for i, item in enumerate(_children(node)):
            if not isinstance(item, dict):
                continue
            content = self._render_list_item(item, depth, indent)
            if content is None:
                continue
            marker = f"{i + 1}." if ordered else "-"
            lines.append(f"{prefix}{marker} {content}")
        return "\n".join(lines) if lines else None

    def _render_nested_list(self, node: dict[str, Any], depth: int, indent: int) -> str | None:
        if depth > self.max_depth:
            logger.warning(f"ADF nesting exceeds {self.max_depth} levels, truncating")
            return _INDENT * indent + TRUNCATION_MARKER
        return self._render_list(node, depth, indent)

    def _render_list_item(self, node: dict[str, Any], depth: int, indent: int = 0) -> str | None:
        parts: list[str] = []
        for child in _children(node):
            kind = _kind(child)
            if kind is NodeType.PARAGRAPH:
                rendered = self._render_paragraph(child, depth)
            elif kind in _LIST_TYPES:
                nested = self._render_nested_list(child, depth + 1, indent + 1)
                # Nested lists start on their own line
                rendered = f"\n{nested}" if nested is not None else None
            else:
                rendered = self.render_block(child, depth + 1)
            if rendered is not None:
                parts.append(rendered)

        if not parts:
            return None
        result = parts[0]
        for part in parts[1:]:
            result += part if part.startswith("\n") else f" {part}"
        return result

    def _render_checklist(
        self, node: dict[str, Any], depth: int, checked_state: str, default_state: str, indent: int = 0
    ) -> str | None:
        """Task and decision lists: one checkbox line per item, nested lists indented."""
        list_type = _kind(node)
        lines = []
        for child in _children(node):
            if _kind(child) is list_type:
                if depth + 1 > self.max_depth:
                    rendered = _INDENT * (indent + 1) + TRUNCATION_MARKER
                else:
                    rendered = self._render_checklist(child, depth + 1, checked_state, default_state, indent + 1)
            elif isinstance(child, dict):
                rendered = self._render_check_item(child, depth, checked_state, default_state, indent)
            else:
                rendered = None
            if rendered is not None:
                lines.append(rendered)
        return "\n".join(lines) if lines else None

    def _render_check_item(
        self, node: dict[str, Any], depth: int, checked_state: str, default_state: str, indent: int = 0
    ) -> str:
        state = str_attr(node_attrs(node), "state") or default_state
        checkbox = "[x]" if state == checked_state else "[ ]"
        content = " ".join(self._render_parts(_children(node), depth + 1))
        return f"{_INDENT * indent}- {checkbox} {content}".rstrip()

    def _render_task_list(self, node: dict[str, Any], depth: int) -> str | None:
        return self._render_checklist(node, depth, "DONE", "TODO")

    def _render_task_item(self, node: dict[str, Any], depth: int) -> str:
        return self._render_check_item(node, depth, "DONE", "TODO")

    # Decision items without a state are decided
    def _render_decision_list(self, node: dict[str, Any], depth: int) -> str | None:
        return self._render_checklist(node, depth, "DECIDED", "DECIDED")

    def _render_decision_item(self, node: dict[str, Any], depth: int) -> str:
        return self._render_check_item(node, depth, "DECIDED", "DECIDED")

    # === TABLES ===

    def _colspan(self, cell: dict[str, Any]) -> int:
        colspan = _int_attr(node_attrs(cell), "colspan", 1)
        return min(max(colspan, 1), self.max_table_colspan)

    def _render_cell(self, cell: dict[str, Any], depth: int) -> str:
        content = " ".join(self._render_parts(_children(cell), depth))
        # Pipes and line breaks would split the row
        content = content.replace("|", "\\|")
        return "<br>".join(content.split("\n"))

    def _render_table(self, node: dict[str, Any], depth: int) -> str | None:
        lines: list[str] = []
        for row in _children(node):
            if not isinstance(row, dict):
                continue
            cells: list[str] = []
            for cell in _children(row):
                if not isinstance(cell, dict):
                    continue
                cells.append(self._render_cell(cell, depth + 1))
                cells.extend([""] * (self._colspan(cell) - 1))
            if not cells:
                continue

            lines.append(f"| {' | '.join(cells)} |")
            # First row is the header regardless of its cell kinds
            if len(lines) == 1:
                lines.append(f"| {' | '.join(['---'] * len(cells))} |")

        return "\n".join(lines) if lines else None

    # === MEDIA, CARDS, LAYOUT, EXTENSIONS ===

    def _render_media(self, node: dict[str, Any], depth: int) -> str | None:
        content = node.get("content")
        if not isinstance(content, list):
            return None
        placeholders = []
        for media in content:
            if isinstance(media, dict) and isinstance(media.get("attrs"), dict):
                alt = str_attr(media["attrs"], "alt", "id") or "media"
                placeholders.append(f"[Media: {alt}]")
        return "\n".join(placeholders) if placeholders else "[Media]"

    def _render_embed_card(self, node: dict[str, Any], depth: int) -> str:
        url = str_attr(node_attrs(node), "url")
        return card_link(url) if url else "[Embedded content]"

    def _render_layout_section(self, node: dict[str, Any], depth: int) -> str | None:
        columns = []
        for column in _children(node):
            rendered = self.render_block(column, depth + 1)
            if rendered is not None:
                columns.append(rendered)
        # Markdown has no columns; stack them
        return "\n\n---\n\n".join(columns) if columns else None

    def _render_extension(self, node: dict[str, Any], depth: int) -> str:
        content = self._render_container(node, depth)
        if content is not None:
            return content
        extension_type = str_attr(node_attrs(node), "extensionType") or "extension"
        return f"[Extension: {extension_type}]"
