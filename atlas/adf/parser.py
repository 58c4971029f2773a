"""Markdown parsing using markdown-it-py.

Configures markdown-it with the plugins we need:
- CommonMark base
- GFM tables and strikethrough
- GFM task lists ([ ] and [x] list items)

`iter_events` flattens markdown-it's token list into a linear stream of parse
events (start/end of a tag, text, inline code, breaks, rules, task markers) that
the ADF builder consumes.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum, auto

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.tasklists import tasklists_plugin

_TASK_CHECKBOX_CLASS = 'class="task-list-item-checkbox"'


def create_parser() -> MarkdownIt:
    """Create configured markdown-it parser."""
    md = MarkdownIt("commonmark")
    md.enable("table")
    md.enable("strikethrough")
    md.use(tasklists_plugin)
    return md


# Singleton parser instance
_parser: MarkdownIt | None = None


def get_parser() -> MarkdownIt:
    """Get or create the singleton parser instance."""
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


# === EVENTS ===


class EventKind(StrEnum):
    START = auto()
    END = auto()
    TEXT = auto()
    CODE = auto()
    SOFT_BREAK = auto()
    HARD_BREAK = auto()
    RULE = auto()
    TASK_MARKER = auto()
    HTML = auto()


class Tag(StrEnum):
    PARAGRAPH = auto()
    HEADING = auto()
    BLOCKQUOTE = auto()
    CODE_BLOCK = auto()
    BULLET_LIST = auto()
    ORDERED_LIST = auto()
    LIST_ITEM = auto()
    TABLE = auto()
    TABLE_HEAD = auto()  # the header row itself
    TABLE_ROW = auto()
    TABLE_CELL = auto()
    EMPHASIS = auto()
    STRONG = auto()
    STRIKETHROUGH = auto()
    LINK = auto()
    IMAGE = auto()


@dataclass(frozen=True)
class Event:
    kind: EventKind
    tag: Tag | None = None
    text: str = ""
    level: int | None = None  # heading
    language: str | None = None  # fenced code
    href: str | None = None  # link / image
    title: str | None = None  # link / image
    checked: bool = False  # task marker


# Block tokens that map 1:1 onto a container tag
_BLOCK_TAGS = {
    "paragraph": Tag.PARAGRAPH,
    "heading": Tag.HEADING,
    "blockquote": Tag.BLOCKQUOTE,
    "bullet_list": Tag.BULLET_LIST,
    "ordered_list": Tag.ORDERED_LIST,
    "list_item": Tag.LIST_ITEM,
    "table": Tag.TABLE,
    "thead": Tag.TABLE_HEAD,
    "tr": Tag.TABLE_ROW,
    "th": Tag.TABLE_CELL,
    "td": Tag.TABLE_CELL,
}

_INLINE_TAGS = {
    "em": Tag.EMPHASIS,
    "strong": Tag.STRONG,
    "s": Tag.STRIKETHROUGH,
}


def _split_nesting(token_type: str) -> tuple[str, EventKind | None]:
    """'paragraph_open' -> ('paragraph', START); 'hr' -> ('hr', None)."""
    if token_type.endswith("_open"):
        return token_type[: -len("_open")], EventKind.START
    if token_type.endswith("_close"):
        return token_type[: -len("_close")], EventKind.END
    return token_type, None


def _code_events(token: Token, language: str | None) -> Iterator[Event]:
    yield Event(EventKind.START, Tag.CODE_BLOCK, language=language)
    body = token.content
    if body.endswith("\n"):
        body = body[:-1]
    if body:
        yield Event(EventKind.TEXT, text=body)
    yield Event(EventKind.END, Tag.CODE_BLOCK)


def _inline_events(children: Iterable[Token]) -> Iterator[Event]:
    for child in children:
        name, kind = _split_nesting(child.type)

        if kind is not None and name in _INLINE_TAGS:
            yield Event(kind, _INLINE_TAGS[name])
        elif kind is not None and name == "link":
            if kind is EventKind.START:
                yield Event(kind, Tag.LINK, href=str(child.attrGet("href") or ""), title=_title(child))
            else:
                yield Event(kind, Tag.LINK)
        elif child.type in ("text", "text_special"):
            yield Event(EventKind.TEXT, text=child.content)
        elif child.type == "code_inline":
            yield Event(EventKind.CODE, text=child.content)
        elif child.type == "softbreak":
            yield Event(EventKind.SOFT_BREAK)
        elif child.type == "hardbreak":
            yield Event(EventKind.HARD_BREAK)
        elif child.type == "image":
            yield Event(EventKind.START, Tag.IMAGE, href=str(child.attrGet("src") or ""), title=_title(child))
            if child.children:
                yield from _inline_events(child.children)
            elif child.content:
                yield Event(EventKind.TEXT, text=child.content)
            yield Event(EventKind.END, Tag.IMAGE)
        elif child.type == "html_inline" and _TASK_CHECKBOX_CLASS in child.content:
            yield Event(EventKind.TASK_MARKER, checked='checked="checked"' in child.content)
        else:
            yield Event(EventKind.HTML, text=child.content)


def _title(token: Token) -> str | None:
    title = token.attrGet("title")
    return str(title) if title else None


def iter_events(tokens: Iterable[Token]) -> Iterator[Event]:
    """Flatten markdown-it tokens into a linear event stream.

    Normalizations:
    - hidden paragraphs (tight lists) emit nothing, leaving their inline content
      directly under the list item
    - `thead` stands for the header row; its inner `tr` is folded into it
    - `tbody` emits nothing
    - fenced and indented code emit start, a single text event, end
    """
    in_thead = False
    for token in tokens:
        name, kind = _split_nesting(token.type)

        if token.type == "inline":
            yield from _inline_events(token.children or [])
        elif kind is not None and name == "paragraph" and token.hidden:
            continue
        elif kind is not None and name == "thead":
            in_thead = kind is EventKind.START
            yield Event(kind, Tag.TABLE_HEAD)
        elif kind is not None and name == "tr" and in_thead:
            continue
        elif kind is EventKind.START and name == "heading":
            yield Event(kind, Tag.HEADING, level=int(token.tag[1:]))
        elif kind is not None and name in _BLOCK_TAGS:
            yield Event(kind, _BLOCK_TAGS[name])
        elif token.type == "fence":
            info = token.info.strip()
            yield from _code_events(token, info.split(maxsplit=1)[0] if info else None)
        elif token.type == "code_block":
            yield from _code_events(token, None)
        elif token.type == "hr":
            yield Event(EventKind.RULE)
        elif token.type == "html_block":
            yield Event(EventKind.HTML, text=token.content)
        # tbody and anything else from plugins carries no content of its own


def parse_events(text: str) -> Iterator[Event]:
    """Parse markdown text into a linear event stream."""
    return iter_events(get_parser().parse(text))
