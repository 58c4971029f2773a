"""Build ADF documents from Markdown.

Walks the linear event stream from `atlas.adf.parser` with an explicit stack of
frames. A start event pushes a frame for the new block; the matching end event
pops it, attaches the accumulated children, and appends the finished node to the
parent frame (or to the document when the stack is empty). Inline formatting is
tracked separately as a list of active marks copied onto every text node.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from atlas.adf.models import Document, Mark, MarkType, Node, NodeType
from atlas.adf.parser import Event, EventKind, Tag, parse_events

_CONTAINER_TYPES = {
    Tag.PARAGRAPH: NodeType.PARAGRAPH,
    Tag.HEADING: NodeType.HEADING,
    Tag.BLOCKQUOTE: NodeType.BLOCKQUOTE,
    Tag.CODE_BLOCK: NodeType.CODE_BLOCK,
    Tag.BULLET_LIST: NodeType.BULLET_LIST,
    Tag.ORDERED_LIST: NodeType.ORDERED_LIST,
    Tag.LIST_ITEM: NodeType.LIST_ITEM,
    Tag.TABLE: NodeType.TABLE,
    Tag.TABLE_HEAD: NodeType.TABLE_ROW,
    Tag.TABLE_ROW: NodeType.TABLE_ROW,
}

_MARK_TYPES = {
    Tag.EMPHASIS: MarkType.EM,
    Tag.STRONG: MarkType.STRONG,
    Tag.STRIKETHROUGH: MarkType.STRIKE,
    Tag.LINK: MarkType.LINK,
    Tag.IMAGE: MarkType.LINK,  # ADF has no inline image in text
}

# listItem and table cells require block children; tight lists give us bare inline runs
_BLOCK_WRAPPED = {NodeType.LIST_ITEM, NodeType.TABLE_CELL, NodeType.TABLE_HEADER}


@dataclass
class BuilderFrame:
    """A block under construction and the children gathered for it so far."""

    node: Node
    children: list[Node] = field(default_factory=list)


def wrap_inline_in_paragraphs(children: list[Node]) -> list[Node]:
    """Group consecutive inline children into paragraphs, leaving block nodes as-is."""
    result: list[Node] = []
    inline_run: list[Node] = []

    for child in children:
        if child.type.is_block:
            if inline_run:
                result.append(Node(type=NodeType.PARAGRAPH, content=inline_run))
                inline_run = []
            result.append(child)
        else:
            inline_run.append(child)

    if inline_run:
        result.append(Node(type=NodeType.PARAGRAPH, content=inline_run))

    return result


class ADFBuilder:
    """Builds one ADF document per `build` call; holds no state between calls."""

    def __init__(self) -> None:
        self._stack: list[BuilderFrame] = []
        self._content: list[Node] = []
        self._marks: list[Mark] = []
        self._in_table_head = False
        self._after_task_marker = False

    def build(self, text: str) -> Document:
        """Convert markdown text to a Document. Never fails; empty input gives empty content."""
        return self.build_from_events(parse_events(text))

    def build_from_events(self, events: Iterable[Event]) -> Document:
        self._stack = []
        self._content = []
        self._marks = []
        self._in_table_head = False
        self._after_task_marker = False

        for event in events:
            self._handle(event)

        # Unbalanced streams only come from hand-built events; close what is left open
        while self._stack:
            self._close_frame()

        return Document(content=self._content)

    # === DISPATCH ===

    def _handle(self, event: Event) -> None:
        match event.kind:
            case EventKind.START:
                self._start(event)
            case EventKind.END:
                self._end(event)
            case EventKind.TEXT:
                self._append_text(event.text, self._marks)
            case EventKind.CODE:
                self._append_text(event.text, [*self._marks, Mark(type=MarkType.CODE)])
            case EventKind.SOFT_BREAK:
                self._append_inline(self._text_node(" ", self._marks))
            case EventKind.HARD_BREAK:
                self._append_inline(Node(type=NodeType.HARD_BREAK))
            case EventKind.RULE:
                self._append_block(Node(type=NodeType.RULE))
            case EventKind.TASK_MARKER:
                if self._stack:
                    self._append_inline(self._text_node("[x] " if event.checked else "[ ] ", []))
                    self._after_task_marker = True
            case _:
                logger.debug(f"Ignoring markdown event {event.kind}")

    def _start(self, event: Event) -> None:
        tag = event.tag
        if tag in _MARK_TYPES:
            self._marks.append(self._mark_for(event))
            return

        if tag is Tag.TABLE_HEAD:
            self._in_table_head = True

        if tag is Tag.TABLE_CELL:
            node_type = NodeType.TABLE_HEADER if self._in_table_head else NodeType.TABLE_CELL
            node = Node(type=node_type)
        elif tag is Tag.HEADING:
            level = min(max(event.level or 1, 1), 6)
            node = Node(type=NodeType.HEADING, attrs={"level": level})
        elif tag is Tag.CODE_BLOCK and event.language:
            node = Node(type=NodeType.CODE_BLOCK, attrs={"language": event.language})
        elif tag in _CONTAINER_TYPES:
            node = Node(type=_CONTAINER_TYPES[tag])
        else:
            logger.debug(f"Ignoring start of {tag}")
            return

        self._stack.append(BuilderFrame(node))

    def _end(self, event: Event) -> None:
        tag = event.tag
        if tag in _MARK_TYPES:
            self._pop_mark(_MARK_TYPES[tag])
            return

        if tag is Tag.TABLE_HEAD:
            self._in_table_head = False

        if self._stack:
            self._close_frame()

    # === STACK ===

    def _close_frame(self) -> None:
        frame = self._stack.pop()
        node = frame.node
        children = frame.children
        if node.type in _BLOCK_WRAPPED and children:
            children = wrap_inline_in_paragraphs(children)
        if children:
            node.content = children
        self._append_block(node)

    def _append_block(self, node: Node) -> None:
        if self._stack:
            self._stack[-1].children.append(node)
        else:
            self._content.append(node)

    def _append_inline(self, node: Node) -> None:
        """Append an inline node to the open frame; dropped when no block is open."""
        if not self._stack:
            return
        children = self._stack[-1].children
        if node.type is NodeType.TEXT and children:
            previous = children[-1]
            if previous.type is NodeType.TEXT and previous.marks == node.marks:
                previous.text = (previous.text or "") + (node.text or "")
                return
        children.append(node)

    def _append_text(self, text: str, marks: list[Mark]) -> None:
        if self._after_task_marker:
            self._after_task_marker = False
            if text.startswith(" "):
                text = text[1:]
        if not text:
            return

        node = self._text_node(text, marks)
        if self._stack:
            self._append_inline(node)
        else:
            # Text cannot sit directly under the document
            self._content.append(Node(type=NodeType.PARAGRAPH, content=[node]))

    # === MARKS ===

    @staticmethod
    def _text_node(text: str, marks: list[Mark]) -> Node:
        return Node(type=NodeType.TEXT, text=text, marks=list(marks) if marks else None)

    @staticmethod
    def _mark_for(event: Event) -> Mark:
        mark_type = _MARK_TYPES[event.tag]
        if mark_type is not MarkType.LINK:
            return Mark(type=mark_type)
        attrs = {"href": event.href or ""}
        if event.title:
            attrs["title"] = event.title
        return Mark(type=MarkType.LINK, attrs=attrs)

    def _pop_mark(self, mark_type: MarkType) -> None:
        """Remove the most recently pushed mark of this kind."""
        for i in range(len(self._marks) - 1, -1, -1):
            if self._marks[i].type is mark_type:
                del self._marks[i]
                return


def markdown_to_adf(text: str) -> Document:
    """Convert markdown text to an ADF Document (GFM tables, strikethrough, task lists)."""
    return ADFBuilder().build(text)


def text_to_adf(text: str) -> Document:
    """Convert user-supplied text to ADF.

    Plain text without Markdown syntax produces a single paragraph.
    """
    return markdown_to_adf(text)
