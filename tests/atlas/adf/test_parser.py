"""Tests for the markdown-it event stream."""

from atlas.adf.parser import Event, EventKind, Tag, create_parser, get_parser, parse_events


def events(markdown: str) -> list[Event]:
    return list(parse_events(markdown))


def starts(markdown: str) -> list[Tag]:
    return [event.tag for event in events(markdown) if event.kind is EventKind.START]


class TestParserSetup:
    def test_singleton(self):
        assert get_parser() is get_parser()

    def test_gfm_extensions_enabled(self):
        md = create_parser()
        html = md.render("~~x~~\n\n| a |\n| - |\n| b |")
        assert "<s>x</s>" in html
        assert "<table>" in html


class TestBlockEvents:
    def test_heading(self):
        assert events("### Title") == [
            Event(EventKind.START, Tag.HEADING, level=3),
            Event(EventKind.TEXT, text="Title"),
            Event(EventKind.END, Tag.HEADING),
        ]

    def test_tight_list_has_no_paragraph_events(self):
        assert events("- a") == [
            Event(EventKind.START, Tag.BULLET_LIST),
            Event(EventKind.START, Tag.LIST_ITEM),
            Event(EventKind.TEXT, text="a"),
            Event(EventKind.END, Tag.LIST_ITEM),
            Event(EventKind.END, Tag.BULLET_LIST),
        ]

    def test_loose_list_keeps_paragraphs(self):
        assert starts("- a\n\n- b").count(Tag.PARAGRAPH) == 2

    def test_fence(self):
        assert events("```rust extra\nfn main() {}\n```") == [
            Event(EventKind.START, Tag.CODE_BLOCK, language="rust"),
            Event(EventKind.TEXT, text="fn main() {}"),
            Event(EventKind.END, Tag.CODE_BLOCK),
        ]

    def test_table_head_folds_its_row(self):
        assert starts("| A | B |\n| --- | --- |\n| 1 | 2 |") == [
            Tag.TABLE,
            Tag.TABLE_HEAD,
            Tag.TABLE_CELL,
            Tag.TABLE_CELL,
            Tag.TABLE_ROW,
            Tag.TABLE_CELL,
            Tag.TABLE_CELL,
        ]

    def test_rule(self):
        assert events("---") == [Event(EventKind.RULE)]

    def test_html_block(self):
        [event] = events("<div>x</div>")
        assert event.kind is EventKind.HTML


class TestInlineEvents:
    def test_code_span(self):
        assert Event(EventKind.CODE, text="x = 1") in events("run `x = 1` now")

    def test_link_carries_href_and_title(self):
        [_, start, *_] = events('[a](https://example.com "T")')
        assert start == Event(EventKind.START, Tag.LINK, href="https://example.com", title="T")

    def test_image_has_alt_text_child(self):
        assert events("![alt](pic.png)")[1:4] == [
            Event(EventKind.START, Tag.IMAGE, href="pic.png"),
            Event(EventKind.TEXT, text="alt"),
            Event(EventKind.END, Tag.IMAGE),
        ]

    def test_breaks(self):
        kinds = [event.kind for event in events("a\nb  \nc")]
        assert EventKind.SOFT_BREAK in kinds
        assert EventKind.HARD_BREAK in kinds

    def test_task_markers(self):
        markers = [event for event in events("- [x] done\n- [ ] todo") if event.kind is EventKind.TASK_MARKER]
        assert [marker.checked for marker in markers] == [True, False]

    def test_inline_html(self):
        assert Event(EventKind.HTML, text="<b>") in events("a <b>bold</b>")
