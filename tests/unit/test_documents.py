"""
Unit tests for the HTML and Markdown document facades.
"""

import pytest
from bs4 import BeautifulSoup

from markup_engine.documents import HTMLDocument, MarkdownDocument, SourceDocument
from markup_engine.dom import Document, Elements
from markup_engine.exceptions import InvalidInput
from markup_engine.rendering import WriterOptions

COMPACT = WriterOptions(reformat=False)


class TestHTMLDocument:
    def test_from_markup(self):
        document = HTMLDocument("<p>A</p>")
        assert isinstance(document.elements, Elements)
        assert document.elements.tag() == "html"
        assert document.select("p").text() == "A"

    def test_from_document(self):
        tree = Document()
        tree.body.append_child(tree.create_element("p"))
        document = HTMLDocument(tree)
        assert document.document is tree
        assert len(document.select("p")) == 1

    def test_from_soup(self):
        soup = BeautifulSoup("<section><p class='x y'>A</p></section>", "html.parser")
        document = HTMLDocument(soup)
        assert document.elements.tag() == "section"
        assert document.select("p.x").text() == "A"

    def test_from_tag(self):
        soup = BeautifulSoup("<section><p>A</p></section>", "html.parser")
        document = HTMLDocument(soup.section)
        assert document.to_html(COMPACT) == "<section><p>A</p></section>"

    @pytest.mark.parametrize("value", [42, None, b"<p>A</p>", ["<p>"]])
    def test_unsupported_value(self, value):
        with pytest.raises(InvalidInput):
            HTMLDocument(value)

    def test_document_without_root(self):
        with pytest.raises(InvalidInput):
            HTMLDocument(Document(create_structure=False))

    def test_mime_type(self):
        assert HTMLDocument("<p>A</p>").mime_type() == "text/html"

    def test_default_options(self):
        document = HTMLDocument("<p>A</p>", COMPACT)
        assert document.to_html() == "<html><head></head><body><p>A</p></body></html>"

    def test_explicit_options_win(self):
        document = HTMLDocument("<p>A</p><script>x()</script>", COMPACT)
        assert document.to_html(WriterOptions.safe(reformat=False)) == "<p>A</p>"

    def test_mutations_show_in_output(self):
        document = HTMLDocument("<p>A</p>")
        document.select("p").set_attribute("id", "first").add_class("lead")
        assert '<p id="first" class="lead">A</p>' in document.to_html()


class TestMarkdownDocument:
    def test_source_is_normalized(self):
        document = MarkdownDocument("\r\n# A\r\nB\r\n\r\n")
        assert document.data == "# A\nB"

    @pytest.mark.parametrize("value", [42, None, Document()])
    def test_unsupported_value(self, value):
        with pytest.raises(InvalidInput):
            MarkdownDocument(value)

    def test_mime_type(self):
        assert MarkdownDocument("x").mime_type() == "text/markdown"

    def test_to_document(self):
        document = MarkdownDocument("# A").to_document()
        assert isinstance(document, HTMLDocument)
        assert document.select("h1").text() == "A"

    def test_to_html_with_options(self):
        document = MarkdownDocument("# A\n\n<script>x()</script>")
        assert document.to_html(WriterOptions.safe(reformat=False)) == "<h1>A</h1><p></p>"

    def test_each_compile_is_fresh(self):
        source = MarkdownDocument("text")
        first = source.to_document()
        first.select("p").value("changed")
        assert source.to_document().select("p").text() == "text"


class TestSourceDocument:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            SourceDocument("x")
