"""
HTML parser implementation.
This module bridges the external html5lib / Beautiful Soup parsers and the tree model.
"""

import logging
from typing import List, Optional, Union

import html5lib
from html5lib.html5parser import ParseError
from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from ..dom.node import Node
from ..dom.document import Document
from ..exceptions import MalformedMarkup

logger = logging.getLogger(__name__)

# Control characters removed before parsing; tab, newline and carriage return survive
_CONTROL_CHARS = dict.fromkeys(c for c in range(0x20) if c not in (0x09, 0x0a, 0x0d))

# Fragments are parsed as the content of this element
FRAGMENT_CONTAINER = 'div'

# minidom node types
_MINIDOM_ELEMENT = 1
_MINIDOM_TEXT = 3
_MINIDOM_CDATA = 4

# Markup-only string types that have no place in the tree model
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


class HTMLParser:
    """HTML parser using html5lib (directly or through Beautiful Soup) for full HTML5 support."""

    def __init__(self, strict: bool = False):
        """
        Initialize the HTML parser.

        Args:
            strict: Raise MalformedMarkup on the first HTML5 parse error
        """
        self.strict = strict
        self._fragment_parser = html5lib.HTMLParser(
            tree=html5lib.getTreeBuilder("dom"),
            strict=strict,
            namespaceHTMLElements=False,
        )
        logger.debug(f"HTML parser initialized (strict={strict})")

    def _clean_html_content(self, html_content: str) -> str:
        """
        Clean HTML content to prevent parsing issues.

        Args:
            html_content: HTML content to clean

        Returns:
            str: Cleaned HTML content
        """
        if html_content.startswith('\ufeff'):
            logger.debug("Removing BOM marker from the beginning of HTML content")
            html_content = html_content[1:]
        return html_content.translate(_CONTROL_CHARS)

    def _check_strict(self, html_content: str) -> None:
        if not self.strict:
            return
        checker = html5lib.HTMLParser(strict=True, namespaceHTMLElements=False)
        try:
            checker.parse(html_content)
        except ParseError as e:
            logger.error(f"Strict HTML parse failed: {e}")
            raise MalformedMarkup(f"Failed to parse HTML: {e}") from e

    def parse(self, html_content: Union[str, bytes]) -> Document:
        """
        Parse an HTML document into the tree model.

        Args:
            html_content: HTML content to parse

        Returns:
            Document: The parsed document, always with html/head/body
        """
        if isinstance(html_content, bytes):
            html_content = html_content.decode('utf-8', errors='replace')
        html_content = self._clean_html_content(html_content)
        self._check_strict(html_content)

        # Keep class and rel as plain strings
        soup = BeautifulSoup(html_content, 'html5lib', multi_valued_attributes=None)
        return self.from_soup(soup)

    def parse_fragment(self, html_content: str, document: Document) -> List[Node]:
        """
        Parse a markup fragment into detached nodes owned by ``document``.

        Args:
            html_content: The fragment markup
            document: Document that will own the new nodes

        Returns:
            List of top-level nodes of the fragment, in order
        """
        if not html_content or not html_content.strip():
            raise MalformedMarkup("Failed to load HTML content: fragment is empty")

        html_content = self._clean_html_content(html_content)
        try:
            fragment = self._fragment_parser.parseFragment(html_content, container=FRAGMENT_CONTAINER)
        except ParseError as e:
            logger.error(f"Strict fragment parse failed: {e}")
            raise MalformedMarkup(f"Failed to parse HTML fragment: {e}") from e

        if self._fragment_parser.errors:
            logger.debug(f"Recovered from {len(self._fragment_parser.errors)} parse errors in fragment")

        nodes = []
        for child in fragment.childNodes:
            node = self._convert_minidom(child, document)
            if node is not None:
                nodes.append(node)
        return nodes

    def _convert_minidom(self, source, document: Document) -> Optional[Node]:
        if source.nodeType in (_MINIDOM_TEXT, _MINIDOM_CDATA):
            return document.create_text_node(source.data)
        if source.nodeType != _MINIDOM_ELEMENT:
            return None

        element = document.create_element(source.tagName)
        for name, value in source.attributes.items():
            element.set_attribute(name, value)
        for child in source.childNodes:
            node = self._convert_minidom(child, document)
            if node is not None:
                element.append_child(node)
        return element

    def from_soup(self, soup: Union[BeautifulSoup, Tag]) -> Document:
        """
        Convert an already-parsed Beautiful Soup tree into the tree model.

        Args:
            soup: A BeautifulSoup object or a single Tag

        Returns:
            Document rooted at the soup's root element
        """
        document = Document(create_structure=False)

        if isinstance(soup, BeautifulSoup):
            roots = [child for child in soup.children if isinstance(child, Tag)]
            if not roots:
                raise MalformedMarkup("Parser produced no root element")
            root = roots[0]
        else:
            root = soup

        document.append_child(self._convert_soup(root, document))
        return document

    def _convert_soup(self, source: Tag, document: Document) -> Node:
        element = document.create_element(source.name)
        for name, value in source.attrs.items():
            if isinstance(value, (list, tuple)):
                value = ' '.join(value)
            element.set_attribute(name, value)

        for child in source.children:
            if isinstance(child, Tag):
                element.append_child(self._convert_soup(child, document))
            elif isinstance(child, NavigableString) and not isinstance(child, _SKIPPED_STRINGS):
                element.append_child(document.create_text_node(str(child)))
        return element


_parser: Optional[HTMLParser] = None


def configure_parser(strict: bool = False) -> HTMLParser:
    """
    Build the shared parser.

    Hosts call this once before first use; later calls replace the parser.

    Args:
        strict: Raise MalformedMarkup on HTML5 parse errors instead of recovering

    Returns:
        The configured parser
    """
    global _parser
    _parser = HTMLParser(strict=strict)
    return _parser


def get_parser() -> HTMLParser:
    """Return the shared parser, building the non-strict default on first use."""
    if _parser is None:
        return configure_parser()
    return _parser


__all__ = ['HTMLParser', 'configure_parser', 'get_parser', 'FRAGMENT_CONTAINER']
