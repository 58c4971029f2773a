"""Data models for Atlassian Document Format (ADF) documents.

Node and mark kinds are closed enums with a designated UNSUPPORTED member, so
unknown kinds coming from the remote service map to one opaque variant instead
of failing. The pydantic models describe documents we construct; the renderer
works on plain decoded JSON and never requires them.
"""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field

# === KINDS ===


class NodeType(StrEnum):
    DOC = "doc"

    # Blocks
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    LIST_ITEM = "listItem"
    CODE_BLOCK = "codeBlock"
    BLOCKQUOTE = "blockquote"
    RULE = "rule"
    PANEL = "panel"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_HEADER = "tableHeader"
    TABLE_CELL = "tableCell"
    MEDIA_SINGLE = "mediaSingle"
    MEDIA_GROUP = "mediaGroup"
    EXPAND = "expand"
    NESTED_EXPAND = "nestedExpand"
    TASK_LIST = "taskList"
    TASK_ITEM = "taskItem"
    DECISION_LIST = "decisionList"
    DECISION_ITEM = "decisionItem"
    LAYOUT_SECTION = "layoutSection"
    LAYOUT_COLUMN = "layoutColumn"
    EMBED_CARD = "embedCard"
    BODIED_EXTENSION = "bodiedExtension"
    MULTI_BODIED_EXTENSION = "multiBodiedExtension"
    EXTENSION_FRAME = "extensionFrame"

    # Inline
    TEXT = "text"
    HARD_BREAK = "hardBreak"
    MENTION = "mention"
    EMOJI = "emoji"
    INLINE_CARD = "inlineCard"
    DATE = "date"
    STATUS = "status"
    MEDIA_INLINE = "mediaInline"
    PLACEHOLDER = "placeholder"

    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """Map a raw `type` value to a kind; anything unknown is UNSUPPORTED."""
        if not isinstance(value, str):
            return cls.UNSUPPORTED
        try:
            return cls(value)
        except ValueError:
            return cls.UNSUPPORTED

    @property
    def is_inline(self) -> bool:
        return self in INLINE_TYPES

    @property
    def is_block(self) -> bool:
        return self not in INLINE_TYPES and self not in (NodeType.DOC, NodeType.UNSUPPORTED)


INLINE_TYPES = frozenset(
    {
        NodeType.TEXT,
        NodeType.HARD_BREAK,
        NodeType.MENTION,
        NodeType.EMOJI,
        NodeType.INLINE_CARD,
        NodeType.DATE,
        NodeType.STATUS,
        NodeType.MEDIA_INLINE,
        NodeType.PLACEHOLDER,
    }
)


class MarkType(StrEnum):
    STRONG = "strong"
    EM = "em"
    CODE = "code"
    STRIKE = "strike"
    UNDERLINE = "underline"
    LINK = "link"
    SUBSUP = "subsup"
    TEXT_COLOR = "textColor"
    BACKGROUND_COLOR = "backgroundColor"

    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Any) -> "MarkType":
        if not isinstance(value, str):
            return cls.UNSUPPORTED
        try:
            return cls(value)
        except ValueError:
            return cls.UNSUPPORTED


# === NODES ===


class Mark(BaseModel):
    type: MarkType
    attrs: dict[str, Any] | None = None


class Node(BaseModel):
    type: NodeType
    attrs: dict[str, Any] | None = None
    content: list["Node"] | None = None
    text: str | None = None  # text nodes only
    marks: list[Mark] | None = None  # text nodes only

    def to_adf(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


Node.model_rebuild()


# === DOCUMENT ===


class Document(BaseModel):
    """The top-level envelope: `{"type": "doc", "version": 1, "content": [...]}`."""

    type: Literal["doc"] = "doc"
    version: Literal[1] = 1
    content: list[Node] = Field(default_factory=list)

    def to_adf(self) -> dict[str, Any]:
        """Dump to the JSON shape the REST API expects, omitting absent fields."""
        return self.model_dump(mode="json", exclude_none=True)
