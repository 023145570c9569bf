"""
Document facades.
This module wraps source formats (HTML and Markdown) behind a common
interface that produces rendered markup.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from .dom.document import Document
from .dom.elements import Elements
from .exceptions import InvalidInput
from .markdown.compiler import compile_markdown
from .parser.html_parser import get_parser
from .rendering.options import WriterOptions
from .rendering.writer import Writer

logger = logging.getLogger(__name__)


class SourceDocument(ABC):
    """
    Base class for source documents.

    Text sources are stored as given; already-parsed trees are accepted by
    the formats that understand them.
    """

    def __init__(self, data: Any):
        """
        Initialize a source document.

        Args:
            data: The document source
        """
        if not isinstance(data, (str, Document, BeautifulSoup, Tag)):
            raise InvalidInput(f"Can't create a {type(self).__name__} from this type of value: {type(data).__name__}")
        self.data = data

    @abstractmethod
    def mime_type(self) -> str:
        """Get the MIME type of the source format."""

    @abstractmethod
    def to_html(self, options: Optional[WriterOptions] = None) -> str:
        """Render the document as markup."""


class HTMLDocument(SourceDocument):
    """An HTML document backed by the tree model."""

    def __init__(self, data: Union[str, Document, BeautifulSoup, Tag], options: Optional[WriterOptions] = None):
        """
        Initialize an HTML document.

        Args:
            data: Markup text, a Document, or a Beautiful Soup tree
            options: Default writer options for to_html()
        """
        super().__init__(data)
        self.options = options

        if isinstance(data, Document):
            self.document = data
        elif isinstance(data, str):
            self.document = get_parser().parse(data)
        else:
            self.document = get_parser().from_soup(data)

        root = self.document.document_element
        if root is None:
            raise InvalidInput("Document has no root element")
        self.elements = Elements(root, self.document, options)
        logger.debug(f"HTML document created with root <{root.local_name}>")

    def mime_type(self) -> str:
        return "text/html"

    def select(self, selector: str) -> Elements:
        """
        Select elements of this document.

        Args:
            selector: The selector string

        Returns:
            The matching elements
        """
        return self.elements.select(selector)

    def to_html(self, options: Optional[WriterOptions] = None) -> str:
        """
        Render the whole document.

        Args:
            options: Writer options; defaults to the document's options, then
                to reformatted, entity-encoded output

        Returns:
            The rendered markup
        """
        return Writer(options or self.options).node_to_html(self.document)


class MarkdownDocument(SourceDocument):
    """A Markdown document, compiled to HTML on demand."""

    def __init__(self, data: str):
        """
        Initialize a Markdown document.

        Args:
            data: The Markdown text
        """
        if not isinstance(data, str):
            raise InvalidInput(f"Can't load Markdown from this type of value: {type(data).__name__}")
        super().__init__(data.strip().replace('\r\n', '\n'))

    def mime_type(self) -> str:
        return "text/markdown"

    def to_document(self, options: Optional[WriterOptions] = None) -> HTMLDocument:
        """Compile the source into an HTMLDocument."""
        return HTMLDocument(compile_markdown(self.data), options)

    def to_html(self, options: Optional[WriterOptions] = None) -> str:
        return self.to_document(options).to_html()


__all__ = ['SourceDocument', 'HTMLDocument', 'MarkdownDocument']
