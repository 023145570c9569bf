"""
Unit tests for the Markdown compiler and inline styling.
"""

from collections import deque

import pytest

from markup_engine.documents import MarkdownDocument
from markup_engine.markdown import MarkdownCompiler, compile_markdown
from markup_engine.markdown.compiler import ListItem, ListType, list_type_for
from markup_engine.markdown.inline import convert_styled_text
from markup_engine.rendering import WriterOptions

COMPACT = WriterOptions(reformat=False)


@pytest.fixture
def md():
    """Compile Markdown into a queryable HTMLDocument."""
    def make(source):
        return MarkdownDocument(source).to_document()
    return make


def body_tags(document):
    return document.select("body").children().tag()


class TestInline:
    @pytest.mark.parametrize("text, expected", [
        ("**bold**", "<b>bold</b>"),
        ("*italic*", "<i>italic</i>"),
        ("_italic_", "<i>italic</i>"),
        ("***both***", "<b><i>both</i></b>"),
        ("a **b** c *d*", "a <b>b</b> c <i>d</i>"),
    ])
    def test_emphasis(self, text, expected):
        assert convert_styled_text(text) == expected

    @pytest.mark.parametrize("text", [
        "2*3*4",
        "snake_case_name",
        "* not italic *",
        "a ** b",
    ])
    def test_emphasis_guards(self, text):
        assert convert_styled_text(text) == text

    def test_bold_italic_is_not_greedy(self):
        assert convert_styled_text("***a*** and ***b***") == "<b><i>a</i></b> and <b><i>b</i></b>"

    def test_code_span(self):
        assert convert_styled_text("use `a < b` here") == "use <code>a &lt; b</code> here"

    def test_code_span_keeps_outer_spaces(self):
        assert convert_styled_text("` x `") == "<code>&nbsp;x&nbsp;</code>"

    def test_image(self):
        assert convert_styled_text("![alt text](img/a.png)") == '<img src="img/a.png" alt="alt text">'

    def test_link(self):
        expected = '<a href="https://x.example/a?b=1">here</a>'
        assert convert_styled_text("[here](https://x.example/a?b=1)") == expected

    def test_link_url_with_space_is_not_a_link(self):
        assert convert_styled_text("[a](b c)") == "[a](b c)"


class TestHeadings:
    @pytest.mark.parametrize("level", range(1, 7))
    def test_levels(self, md, level):
        document = md("#" * level + " Title")
        assert document.select(f"h{level}").text() == "Title"

    def test_heading_is_styled(self, md):
        assert md("## A *b*").select("h2 i").text() == "b"

    def test_hash_without_space_is_a_paragraph(self, md):
        assert md("#NoSpace").select("p").text() == "#NoSpace"

    def test_seven_hashes_is_a_paragraph(self, md):
        document = md("####### Seven")
        assert body_tags(document) == "p"
        assert document.select("p").text() == "####### Seven"


class TestParagraphs:
    def test_each_line_is_a_paragraph(self, md):
        document = md("one\ntwo\n\nthree")
        assert document.select("p").text() == ["one", "two", "three"]

    def test_crlf_line_endings(self, md):
        document = md("# A\r\nB\r\n")
        assert body_tags(document) == ["h1", "p"]
        assert document.select("p").text() == "B"

    def test_trailing_whitespace_is_trimmed(self, md):
        assert md("text   \t").select("p").text() == "text"


class TestRulesAndFrontmatter:
    def test_rule_after_content(self, md):
        document = md("Intro\n---\nMore")
        assert body_tags(document) == ["p", "hr", "p"]

    def test_leading_rule_starts_frontmatter(self, md):
        document = md("---\ntitle: Hello\nauthor: Me & You\n\njust a line\n---\n# Body")
        metas = document.select("head meta")
        assert metas.get_attribute("name") == ["title", "author", None]
        assert metas.get_attribute("content") == ["Hello", "Me & You", "just a line"]
        assert body_tags(document) == "h1"

    def test_frontmatter_only_document(self, md):
        document = md("---\ntitle: x\n---")
        assert len(document.select("body").children()) == 0
        assert document.select("meta").get_attribute("content") == "x"

    def test_unterminated_frontmatter(self, md):
        document = md("---\ntitle: x\n# not a heading")
        assert len(document.select("meta")) == 2
        assert len(document.select("h1")) == 0


class TestCodeBlocks:
    def test_with_language(self, md):
        document = md("```python\nx = 1\nif a < b:\n    *y*\n```")
        code = document.select("pre code")
        assert code.get_attribute("class") == "language-python"
        assert code.text() == "x = 1\nif a < b:\n    *y*"
        assert len(document.select("pre code i")) == 0

    def test_without_language(self, md):
        document = md("```\nplain\n```\nafter")
        assert document.select("pre code").get_attribute("class") is None
        assert body_tags(document) == ["pre", "p"]

    def test_unterminated(self, md):
        document = md("```\na\nb")
        assert document.select("pre code").text() == "a\nb"

    def test_markdown_inside_is_literal(self, md):
        document = md("```\n# not a heading\n* not\n* a list\n```")
        assert body_tags(document) == "pre"


class TestLists:
    def test_unordered(self, md):
        document = md("* a\n+ b")
        assert document.select("ul li").text() == ["a", "b"]

    def test_shallower_items_after_indented_start(self, md):
        document = md("intro\n  * a\n  * b\n* c\n* d")
        assert document.select("li").text() == ["a", "b", "c", "d"]
        assert body_tags(document) == ["p", "ul", "ul"]

    @pytest.mark.parametrize("source, type_attribute", [
        ("1. one\n2. two", None),
        ("i. one\nii. two", "i"),
        ("I. one\nII. two", "I"),
        ("a. one\nb. two", "a"),
        ("A. one\nB. two", "A"),
    ])
    def test_ordered_types(self, md, source, type_attribute):
        document = md(source)
        assert document.select("ol").get_attribute("type") == type_attribute
        assert document.select("ol li").text() == ["one", "two"]

    def test_numeric_values(self, md):
        document = md("1. a\n2. b\n4. c")
        assert document.select("li").get_attribute("value") == [None, None, "4"]

    def test_values_only_for_numeric_lists(self, md):
        document = md("i. a\n5. b")
        assert document.select("li").get_attribute("value") == [None, None]

    def test_checklist(self, md):
        document = md("[x] Checked\n[ ] Open\n[] Empty")
        expected = (
            '<li><input type="checkbox" checked>Checked</li>'
            '<li><input type="checkbox">Open</li>'
            '<li><input type="checkbox">Empty</li>'
        )
        assert document.select("ul li").to_html(COMPACT) == expected
        assert len(document.select("input[checked]")) == 1

    def test_item_text_is_styled(self, md):
        document = md("* **a**\n* [b](/b)")
        assert document.select("li b").text() == "a"
        assert document.select("li a").get_attribute("href") == "/b"

    def test_single_line_is_a_paragraph(self, md):
        document = md("* only")
        assert body_tags(document) == "p"
        assert document.select("p").text() == "* only"

    def test_nested(self, md):
        document = md("* a\n  * b\n  * c\n* d")
        assert body_tags(document) == "ul"
        outer = document.select("ul").element(0)
        assert outer.children().tag() == ["li", "li", "li"]
        assert document.select("ul ul li").text() == ["b", "c"]

    def test_nested_item_counts_toward_numbering(self, md):
        document = md("1. a\n  1. x\n2. b")
        outer = document.select("ol").element(0)
        assert outer.children().get_attribute("value") == [None, None, "2"]

    def test_list_ends_at_non_list_line(self, md):
        document = md("* a\n* b\ntext")
        assert body_tags(document) == ["ul", "p"]


class TestListHelpers:
    @pytest.mark.parametrize("marker, expected", [
        ("3.", ListType.ORDERED_NUMERIC),
        ("iv.", ListType.ORDERED_ROMAN_LOWER),
        ("c.", ListType.ORDERED_ROMAN_LOWER),
        ("MC.", ListType.ORDERED_ROMAN_UPPER),
        ("l.", ListType.ORDERED_ALPHA_LOWER),
        ("D.", ListType.ORDERED_ALPHA_UPPER),
        ("b.", ListType.ORDERED_ALPHA_LOWER),
        ("Q.", ListType.ORDERED_ALPHA_UPPER),
        ("[x]", ListType.CHECKLIST),
        ("[]", ListType.CHECKLIST),
        ("*", ListType.UNORDERED),
        ("?", ListType.UNORDERED),
    ])
    def test_list_type_for(self, marker, expected):
        assert list_type_for(marker) is expected

    def test_generate_list_consumes_items(self):
        items = deque([ListItem(0, "*", "a"), ListItem(0, "*", "b")])
        assert MarkdownCompiler().generate_list(items) == "<ul><li>a</li><li>b</li></ul>"
        assert not items

    def test_generate_list_leaves_shallower_items(self):
        items = deque([ListItem(2, "*", "a"), ListItem(0, "*", "b")])
        assert MarkdownCompiler().generate_list(items) == "<ul><li>a</li></ul>"
        assert items[0].text == "b"


class TestBlockquote:
    def test_lines_are_joined_and_unstyled(self, md):
        document = md("> quoted *text*\n> more")
        assert document.select("blockquote").text() == "quoted *text*\nmore"
        assert len(document.select("blockquote i")) == 0


class TestMarkdownDocument:
    def test_to_html(self):
        expected = (
            "<html>\n"
            "    <head></head>\n"
            "    <body>\n"
            "        <h1>Title</h1>\n"
            "        <p>Some <i>text</i></p>\n"
            "    </body>\n"
            "</html>\n"
        )
        assert MarkdownDocument("# Title\n\nSome *text*").to_html() == expected

    def test_safe_link(self):
        document = MarkdownDocument("Click [here](javascript:alert)").to_document()
        assert document.select("p").to_html(WriterOptions.safe()) == "<p>Click <a>here</a></p>\n"

    def test_compile_markdown_returns_document(self):
        document = compile_markdown("text")
        assert document.body.children[0].local_name == "p"

    def test_empty_source(self):
        document = compile_markdown("  \n\n ")
        assert document.body.child_nodes == []
