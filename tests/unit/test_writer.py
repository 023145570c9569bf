"""
Unit tests for the Writer: formatting, stripping, unwrapping and sanitizing.
"""

import pytest

from markup_engine.dom import Document
from markup_engine.rendering import Writer, WriterOptions, render
from markup_engine.rendering.formatting import (
    encode_entities,
    escape_attribute,
    escape_html,
    formatting_for,
    is_safe_url,
    url_scheme,
    BLOCK_ELEMENT,
    VOID_ELEMENT,
)

COMPACT = WriterOptions(reformat=False)


class TestReformat:
    def test_full_document(self, html):
        expected = (
            "<html>\n"
            "    <head></head>\n"
            "    <body>\n"
            "        <p>A</p>\n"
            "    </body>\n"
            "</html>\n"
        )
        assert html("<p>A</p>").to_html() == expected

    def test_nested_blocks(self, html):
        document = html("<div><ul><li>One</li><li>Two</li></ul></div>")
        expected = (
            "<div>\n"
            "    <ul>\n"
            "        <li>One</li>\n"
            "        <li>Two</li>\n"
            "    </ul>\n"
            "</div>\n"
        )
        assert document.select("div").to_html() == expected

    def test_inline_elements_stay_on_the_line(self, html):
        document = html("<p>Some <b>bold</b> and <a href='/x'>link</a></p>")
        assert document.select("p").to_html() == '<p>Some <b>bold</b> and <a href="/x">link</a></p>\n'

    def test_custom_indent(self, html):
        document = html("<div><p>A</p></div>")
        assert document.select("div").to_html(WriterOptions(indent="\t")) == "<div>\n\t<p>A</p>\n</div>\n"

    def test_pre_code_kept_adjacent(self, html):
        document = html('<pre><code class="language-py">x = 1\ny = 2</code></pre>')
        expected = '<pre><code class="language-py">\nx = 1\ny = 2\n</code></pre>\n'
        assert document.select("pre").to_html() == expected

    def test_pre_content_is_not_indented(self, html):
        document = html("<div><pre><code>a\n  b</code></pre></div>")
        expected = (
            "<div>\n"
            "    <pre><code>\n"
            "a\n"
            "  b\n"
            "    </code></pre>\n"
            "</div>\n"
        )
        assert document.select("div").to_html() == expected

    def test_nested_list_in_li(self, html):
        document = html("<ul><li>a</li><li><ul><li>b</li></ul></li></ul>")
        expected = (
            "<ul>\n"
            "    <li>a</li>\n"
            "    <li><ul>\n"
            "        <li>b</li>\n"
            "    </ul></li>\n"
            "</ul>\n"
        )
        assert document.select("ul").element(0).to_html() == expected

    def test_no_blank_lines_and_one_trailing_break(self, html):
        document = html("<div>\n\n<p>A</p>\n\n\n<p>B</p>\n\n</div>")
        output = document.select("div").to_html()
        assert "\n\n" not in output
        assert output.endswith("</div>\n")
        assert not output.endswith("\n\n")

    def test_tag_names_are_lowercased(self):
        document = Document()
        element = document.body.append_child(document.create_element("DIV"))
        assert render(element) == "<div></div>\n"


class TestCompact:
    def test_full_document(self, html):
        assert html("<p>A</p>").to_html(COMPACT) == "<html><head></head><body><p>A</p></body></html>"

    def test_tag_names_kept_verbatim(self):
        document = Document()
        element = document.body.append_child(document.create_element("DIV"))
        assert render(element, COMPACT) == "<DIV></DIV>"

    def test_void_elements(self, html):
        document = html("<p>a<br>b<img src='x.png'></p>")
        assert document.select("p").to_html(COMPACT) == '<p>a<br>b<img src="x.png"></p>'

    def test_xhtml_void_elements(self, html):
        document = html("<p>a<br>b</p>")
        options = WriterOptions(reformat=False, xhtml=True)
        assert document.select("p").to_html(options) == "<p>a<br />b</p>"

    def test_render_none(self):
        assert render(None) == ""


class TestStripAndUnwrap:
    def test_strip_removes_subtree(self, html):
        document = html("<div>x<script>alert(1)</script></div>")
        options = WriterOptions(reformat=False, strip_tags={"script"})
        assert document.select("div").to_html(options) == "<div>x</div>"

    def test_strip_wins_over_allow(self, html):
        document = html("<div>x<script>alert(1)</script></div>")
        options = WriterOptions(reformat=False, strip_tags={"script"}, allowed_tags={"div", "script"})
        assert document.select("div").to_html(options) == "<div>x</div>"

    def test_unwrap_disallowed_tags(self, html):
        document = html("<div><p>A</p>B</div>")
        options = WriterOptions(reformat=False, allowed_tags={"p"})
        assert document.select("div").to_html(options) == "<p>A</p>B"

    def test_unwrapped_whole_document(self, html):
        options = WriterOptions(reformat=False, allowed_tags={"p"})
        assert html("<p>A</p><span>B</span>").to_html(options) == "<p>A</p>B"

    def test_tag_sets_are_case_insensitive(self, html):
        document = html("<div>x<script>alert(1)</script></div>")
        options = WriterOptions(reformat=False, strip_tags=["SCRIPT"])
        assert document.select("div").to_html(options) == "<div>x</div>"


class TestAttributes:
    def test_quotes_are_escaped(self, html):
        document = html("<a href='x' title='say \"hi\"'>t</a>")
        assert document.select("a").to_html(COMPACT) == '<a href="x" title="say &quot;hi&quot;">t</a>'

    def test_ampersands_are_escaped(self, html):
        document = html('<a href="http://x.y/z?a=1&amp;b=2">t</a>')
        assert document.select("a").to_html(COMPACT) == '<a href="http://x.y/z?a=1&amp;b=2">t</a>'

    @pytest.mark.parametrize("markup", [
        '<input type="checkbox" checked>',
        '<input type="checkbox" checked="checked">',
    ])
    def test_checked_is_bare(self, html, markup):
        document = html(markup)
        assert document.select("input").to_html(COMPACT) == '<input type="checkbox" checked>'

    def test_attribute_order_is_kept(self, html):
        document = html('<p z="1" a="2" m="3">x</p>')
        assert document.select("p").to_html(COMPACT) == '<p z="1" a="2" m="3">x</p>'


class TestSafetyMode:
    def test_sanitized_output(self, html):
        document = html(
            '<div onclick="x">'
            '<a href="javascript:alert(1)" name="n" class="c">x</a>'
            '<a href="https://ok.example/" target="_blank">y</a>'
            '<img src="a.png" onerror="z">'
            '<script>bad()</script>'
            '<iframe src="e"></iframe>'
            '<p style="s">t</p>'
            '</div>'
        )
        expected = '<a name="n">x</a><a href="https://ok.example/">y</a><img src="a.png"><p>t</p>'
        assert document.select("div").to_html(WriterOptions.safe(reformat=False)) == expected

    @pytest.mark.parametrize("href, kept", [
        ("/relative/path", True),
        ("page.html#top", True),
        ("http://example.com/", True),
        ("HTTPS://example.com/", True),
        ("ftp://example.com/file", True),
        ("javascript:alert(1)", False),
        ("JavaScript:alert(1)", False),
        (" javascript:alert(1)", False),
        ("data:text/html;base64,xx", False),
        ("mailto:someone@example.com", False),
    ])
    def test_href_schemes(self, html, href, kept):
        document = html("<a></a>")
        document.select("a").set_attribute("href", href)
        output = document.select("a").to_html(WriterOptions.safe(reformat=False))
        assert ("href=" in output) is kept

    def test_null_bytes_stripped_from_text(self):
        document = Document()
        p = document.body.append_child(document.create_element("p"))
        p.append_child(document.create_text_node("a\0b"))
        assert render(p, WriterOptions.safe(reformat=False)) == "<p>ab</p>"
        assert render(p, COMPACT) == "<p>a\0b</p>"

    def test_entities_always_encoded(self, html):
        document = html("<p>x</p>")
        document.select("p").value("<script>")
        options = WriterOptions.safe(reformat=False, encode_entities=False)
        assert document.select("p").to_html(options) == "<p>&lt;script&gt;</p>"

    def test_not_safe_without_all_three(self):
        assert not WriterOptions(strip_tags={"script"}).is_safe
        assert not WriterOptions(strip_tags={"script"}, allowed_tags={"p"}, encode_entities=False).is_safe
        assert WriterOptions.safe().is_safe


class TestText:
    def test_entities_encoded(self, html):
        document = html('<p>Café &amp; "quotes" &lt;tag&gt;</p>')
        expected = "<p>Caf&eacute; &amp; &quot;quotes&quot; &lt;tag&gt;</p>"
        assert document.select("p").to_html(COMPACT) == expected

    def test_entities_not_encoded(self, html):
        document = html("<p>a &amp; b</p>")
        options = WriterOptions(reformat=False, encode_entities=False)
        assert document.select("p").to_html(options) == "<p>a & b</p>"


class TestFormattingHelpers:
    def test_encode_entities_no_double_encoding(self):
        assert encode_entities("a &amp; b & c &#39; &#x27;") == "a &amp; b &amp; c &#39; &#x27;"

    @pytest.mark.parametrize("text, expected", [
        ("'", "&#039;"),
        ("\xa0", "&nbsp;"),
        ("€", "&euro;"),
        ("é", "&eacute;"),
        ("\U0001F600", "\U0001F600"),
        ("plain", "plain"),
    ])
    def test_encode_entities(self, text, expected):
        assert encode_entities(text) == expected

    def test_escape_html(self):
        assert escape_html("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&#039;&amp;&#039;&lt;/a&gt;"

    def test_escape_attribute(self):
        assert escape_attribute('a "b"') == "a &quot;b&quot;"
        assert escape_attribute("a=1&b=2") == "a=1&amp;b=2"
        assert escape_attribute("&amp; &#38;") == "&amp; &#38;"

    def test_url_scheme(self):
        assert url_scheme("HTTP://x") == "http"
        assert url_scheme("/path:with:colons") == ""
        assert url_scheme("\x01\x02javascript:x") == "javascript"

    def test_is_safe_url(self):
        assert is_safe_url("")
        assert is_safe_url("https://x")
        assert not is_safe_url("vbscript:x")

    def test_formatting_table(self):
        assert formatting_for("custom-element") == BLOCK_ELEMENT
        assert formatting_for("br") & VOID_ELEMENT
        assert not formatting_for("div") & VOID_ELEMENT


class TestWriter:
    def test_default_options(self):
        writer = Writer()
        assert writer.options.reformat
        assert writer.line_break == "\n"

    def test_nodes_to_html(self, blog):
        nodes = blog.select("h2").elements()
        assert Writer(COMPACT).nodes_to_html(nodes) == "<h2>First</h2><h2>Second</h2>"
