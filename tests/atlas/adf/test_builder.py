"""Tests for Markdown → ADF building."""

import pytest

from atlas.adf import ADFBuilder, Event, EventKind, Tag, markdown_to_adf, text_to_adf
from atlas.adf.builder import wrap_inline_in_paragraphs
from atlas.adf.models import Node, NodeType

# === HELPER FUNCTIONS ===


def build(markdown: str) -> list[dict]:
    """Top-level content of the built document as plain JSON."""
    return markdown_to_adf(markdown).to_adf()["content"]


def text(value: str, *marks: dict) -> dict:
    node = {"type": "text", "text": value}
    if marks:
        node["marks"] = list(marks)
    return node


def paragraph(*children: dict) -> dict:
    return {"type": "paragraph", "content": list(children)}


# === PLAIN TEXT ===


class TestPlainText:
    @pytest.mark.parametrize(
        "value",
        ["Hello, world", "Grüße aus Köln", "日本語のテキスト", "emoji 🎉 inside", "numbers 42 and 3.14"],
    )
    def test_single_paragraph_single_text(self, value):
        """Text without markdown syntax survives byte-for-byte."""
        assert build(value) == [paragraph(text(value))]

    @pytest.mark.parametrize("value", ["", "   \n\t ", "\n\n\n"])
    def test_blank_input_gives_empty_content(self, value):
        assert build(value) == []

    def test_document_envelope(self):
        doc = text_to_adf("Hi").to_adf()
        assert doc["type"] == "doc"
        assert doc["version"] == 1

    def test_soft_break_becomes_space(self):
        assert build("line one\nline two") == [paragraph(text("line one line two"))]

    def test_hard_break(self):
        assert build("a  \nb") == [paragraph(text("a"), {"type": "hardBreak"}, text("b"))]


# === BLOCKS ===


class TestBlocks:
    def test_heading_levels(self):
        for level in range(1, 7):
            [heading] = build(f"{'#' * level} Title")
            assert heading == {"type": "heading", "attrs": {"level": level}, "content": [text("Title")]}

    def test_paragraphs(self):
        assert build("first\n\nsecond") == [paragraph(text("first")), paragraph(text("second"))]

    def test_blockquote(self):
        assert build("> quoted") == [{"type": "blockquote", "content": [paragraph(text("quoted"))]}]

    def test_rule(self):
        assert build("a\n\n---\n\nb") == [paragraph(text("a")), {"type": "rule"}, paragraph(text("b"))]

    def test_raw_html_ignored(self):
        assert build("<div>html</div>") == []


class TestCodeBlocks:
    def test_fence_with_language(self):
        [block] = build("```python\nprint(1)\n```")
        assert block == {"type": "codeBlock", "attrs": {"language": "python"}, "content": [text("print(1)")]}

    def test_language_is_first_word_of_info(self):
        [block] = build("```rust ignore\nfn main() {}\n```")
        assert block["attrs"] == {"language": "rust"}

    def test_fence_without_language_has_no_attrs(self):
        [block] = build("```\nplain\n```")
        assert "attrs" not in block
        assert block["content"] == [text("plain")]

    def test_multiline_body_keeps_inner_newlines(self):
        [block] = build("```\na\n\nb\n```")
        assert block["content"] == [text("a\n\nb")]

    def test_empty_fence(self):
        assert build("```\n```") == [{"type": "codeBlock"}]

    def test_indented_code(self):
        [block] = build("    indented")
        assert block == {"type": "codeBlock", "content": [text("indented")]}


# === INLINE MARKS ===


class TestMarks:
    def test_scenario_bold_and_code(self):
        [para] = build("The **API** returned `500`.")
        assert para == paragraph(
            text("The "),
            text("API", {"type": "strong"}),
            text(" returned "),
            text("500", {"type": "code"}),
            text("."),
        )

    def test_emphasis(self):
        assert build("*soft*") == [paragraph(text("soft", {"type": "em"}))]

    def test_strikethrough(self):
        assert build("~~gone~~") == [paragraph(text("gone", {"type": "strike"}))]

    def test_nested_marks_stack(self):
        [para] = build("**bold *both***")
        assert para["content"] == [
            text("bold ", {"type": "strong"}),
            text("both", {"type": "strong"}, {"type": "em"}),
        ]

    def test_code_inside_strong(self):
        [para] = build("**`x`**")
        assert para["content"] == [text("x", {"type": "strong"}, {"type": "code"})]

    def test_link(self):
        [para] = build("[site](https://example.com)")
        assert para["content"] == [text("site", {"type": "link", "attrs": {"href": "https://example.com"}})]

    def test_link_with_title(self):
        [para] = build('[site](https://example.com "Home")')
        link = {"type": "link", "attrs": {"href": "https://example.com", "title": "Home"}}
        assert para["content"] == [text("site", link)]

    def test_marks_end_with_their_span(self):
        [para] = build("[a](https://a.example) b")
        assert para["content"][1] == text(" b")

    def test_image_becomes_link(self):
        [para] = build("![diagram](img/diagram.png)")
        assert para["content"] == [text("diagram", {"type": "link", "attrs": {"href": "img/diagram.png"}})]


# === LISTS ===


class TestLists:
    def test_tight_bullet_list_wraps_items_in_paragraphs(self):
        [lst] = build("- one\n- two")
        assert lst == {
            "type": "bulletList",
            "content": [
                {"type": "listItem", "content": [paragraph(text("one"))]},
                {"type": "listItem", "content": [paragraph(text("two"))]},
            ],
        }

    def test_loose_list(self):
        [lst] = build("- one\n\n- two")
        assert lst["content"][0] == {"type": "listItem", "content": [paragraph(text("one"))]}

    def test_ordered_list(self):
        [lst] = build("1. first\n2. second")
        assert lst["type"] == "orderedList"
        assert [item["content"][0]["content"][0]["text"] for item in lst["content"]] == ["first", "second"]

    def test_nested_list(self):
        [lst] = build("- parent\n  - child")
        [item] = lst["content"]
        assert item["content"][0] == paragraph(text("parent"))
        assert item["content"][1]["type"] == "bulletList"
        assert item["content"][1]["content"][0] == {"type": "listItem", "content": [paragraph(text("child"))]}

    def test_task_markers(self):
        [lst] = build("- [x] done\n- [ ] todo")
        items = [item["content"] for item in lst["content"]]
        assert items == [[paragraph(text("[x] done"))], [paragraph(text("[ ] todo"))]]


# === TABLES ===


class TestTables:
    def test_header_and_body(self):
        [table] = build("| A | B |\n| --- | --- |\n| 1 | 2 |")
        assert table == {
            "type": "table",
            "content": [
                {
                    "type": "tableRow",
                    "content": [
                        {"type": "tableHeader", "content": [paragraph(text("A"))]},
                        {"type": "tableHeader", "content": [paragraph(text("B"))]},
                    ],
                },
                {
                    "type": "tableRow",
                    "content": [
                        {"type": "tableCell", "content": [paragraph(text("1"))]},
                        {"type": "tableCell", "content": [paragraph(text("2"))]},
                    ],
                },
            ],
        }

    def test_formatted_cell(self):
        [table] = build("| **A** |\n| --- |\n| x |")
        header_cell = table["content"][0]["content"][0]
        assert header_cell["content"] == [paragraph(text("A", {"type": "strong"}))]


# === EVENT STREAM ===


class TestBuildFromEvents:
    """Hand-built event streams, including ones markdown-it never produces."""

    def test_unbalanced_frames_are_closed(self):
        doc = ADFBuilder().build_from_events([Event(EventKind.START, Tag.PARAGRAPH), Event(EventKind.TEXT, text="x")])
        assert doc.to_adf()["content"] == [paragraph(text("x"))]

    def test_bare_text_is_wrapped(self):
        doc = ADFBuilder().build_from_events([Event(EventKind.TEXT, text="loose")])
        assert doc.to_adf()["content"] == [paragraph(text("loose"))]

    def test_rule_without_frame(self):
        doc = ADFBuilder().build_from_events([Event(EventKind.RULE)])
        assert doc.to_adf()["content"] == [{"type": "rule"}]

    def test_task_marker_without_frame_ignored(self):
        doc = ADFBuilder().build_from_events([Event(EventKind.TASK_MARKER, checked=True)])
        assert doc.to_adf()["content"] == []

    def test_html_ignored(self):
        doc = ADFBuilder().build_from_events([Event(EventKind.HTML, text="<b>")])
        assert doc.content == []

    def test_builder_is_reusable(self):
        builder = ADFBuilder()
        builder.build("first")
        assert builder.build("second").to_adf()["content"] == [paragraph(text("second"))]


class TestWrapInlineInParagraphs:
    def test_groups_inline_runs_around_blocks(self):
        children = [
            Node(type=NodeType.TEXT, text="a"),
            Node(type=NodeType.HARD_BREAK),
            Node(type=NodeType.BULLET_LIST),
            Node(type=NodeType.TEXT, text="b"),
        ]
        result = wrap_inline_in_paragraphs(children)
        assert [node.type for node in result] == [NodeType.PARAGRAPH, NodeType.BULLET_LIST, NodeType.PARAGRAPH]
        assert len(result[0].content) == 2

    def test_blocks_only_unchanged(self):
        children = [Node(type=NodeType.PARAGRAPH)]
        assert wrap_inline_in_paragraphs(children) == children
