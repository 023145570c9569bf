"""
HTML Writer implementation.
This module walks the tree model and renders it back to markup, optionally
reformatting it and sanitizing it for untrusted redisplay.
"""

import logging
import re
from typing import Iterable, List, Optional

from ..dom.node import Node, NodeType
from ..dom.element import Element
from .options import WriterOptions
from .formatting import (
    VOID_ELEMENT,
    NEWLINE_BEFORE_TAG,
    NEWLINE_BEFORE_CONTENT,
    NEWLINE_AFTER_CONTENT,
    NEWLINE_AFTER_TAG,
    formatting_for,
    encode_entities,
    strip_null_bytes,
    escape_attribute,
    is_safe_url,
)

logger = logging.getLogger(__name__)

# <pre><code>...</code></pre> is the html5 way of writing a code block
_PRE_CODE = re.compile(r'^(<code[^>]*>)(.*?)(</code>)$', re.DOTALL)

# <li> whose only content is a nested list
_LI_NESTED_LIST = re.compile(r'^\s*(<[ou]l[^>]*>)(.*?)(</[ou]l>)\s*$', re.DOTALL)

_PRE_OPEN = re.compile(r'^\s*<pre(\s+[^>]*)?>')
_PRE_CLOSE = re.compile(r'</pre>$')


class Writer:
    """
    Renders nodes to markup according to a set of WriterOptions.
    """

    def __init__(self, options: Optional[WriterOptions] = None):
        """
        Initialize the writer.

        Args:
            options: Rendering options, defaults to WriterOptions()
        """
        self.options = options or WriterOptions()
        self.line_break = self.options.line_break
        self.indent = self.options.indent if self.options.reformat else ''

    def _write_attributes(self, element: Element) -> str:
        """
        Render the attributes of an element.

        In safety mode only href/name on <a> and src on <img> survive.
        """
        if not element.attributes:
            return ''

        if not self.options.is_safe:
            parts = []
            for attr in element.attributes.values():
                # A checked checkbox is written as a bare attribute
                if attr.is_boolean or (element.local_name == 'input' and attr.value == 'checked'):
                    parts.append(f' {attr.name}')
                else:
                    parts.append(f' {attr.name}="{escape_attribute(attr.value)}"')
            return ''.join(parts)

        parts = []
        if element.local_name == 'a':
            href = element.get_attribute('href')
            if href is not None:
                href = strip_null_bytes(href)
                if is_safe_url(href):
                    parts.append(f' href="{escape_attribute(href)}"')
                else:
                    logger.debug(f"Dropping unsafe href '{href}'")
            name = element.get_attribute('name')
            if name is not None:
                parts.append(f' name="{escape_attribute(strip_null_bytes(name))}"')
        elif element.local_name == 'img':
            src = element.get_attribute('src')
            if src is not None:
                parts.append(f' src="{escape_attribute(strip_null_bytes(src))}"')
        return ''.join(parts)

    def _write_text(self, text: str) -> str:
        """Render a text node, optionally encoding its entities."""
        if not self.options.encode_entities:
            return text
        if self.options.is_safe:
            text = strip_null_bytes(text)
        return encode_entities(text)

    def _indent_block(self, content: str) -> str:
        """Indent every line of a block's content, leaving <pre> bodies alone."""
        lines = content.split(self.line_break)
        n = len(lines)
        i = 0
        while i < n:
            lines[i] = self.indent + lines[i]
            if _PRE_OPEN.match(lines[i]):
                start = i
                while i < n and not _PRE_CLOSE.search(lines[i]):
                    i += 1
                # Multi-line <pre> still gets its closing tag indented
                if i != start and i < n:
                    lines[i] = self.indent + lines[i]
            i += 1
        return self.line_break + self.line_break.join(lines)

    def _write_element(self, orig_tag: str, attributes: str, content: str) -> str:
        """
        Wrap rendered content in its tag, using the formatting table.

        Args:
            orig_tag: Tag name as stored in the tree
            attributes: Rendered attribute string
            content: Rendered children

        Returns:
            The rendered element
        """
        tag = orig_tag.lower()
        formatting = formatting_for(tag)
        void = bool(formatting & VOID_ELEMENT)
        self_close = ' /' if void and self.options.xhtml else ''

        if not self.options.reformat:
            if void:
                return f'<{orig_tag}{attributes}{self_close}>'
            return f'<{orig_tag}{attributes}>{content}</{orig_tag}>'

        out = self.line_break if formatting & NEWLINE_BEFORE_TAG else ''
        out += f'<{tag}{attributes}{self_close}>'

        if not void and content.strip() != '':
            if formatting & NEWLINE_BEFORE_CONTENT:
                pre_code = _PRE_CODE.match(content) if tag == 'pre' else None
                if pre_code is not None:
                    # Keep <pre><code> together; the code starts on the next line
                    content = pre_code.group(1) + self.line_break + pre_code.group(2) + self.line_break + pre_code.group(3)
                    formatting ^= NEWLINE_AFTER_CONTENT
                elif tag != 'pre':
                    content = self._indent_block(content)
            elif tag == 'li':
                nested = _LI_NESTED_LIST.match(content)
                if nested is not None:
                    content = nested.group(1) + self.line_break + nested.group(2) + self.line_break + nested.group(3)
                    formatting &= ~NEWLINE_AFTER_CONTENT
            out += content
            if formatting & NEWLINE_AFTER_CONTENT:
                out += self.line_break

        if not void:
            out += f'</{tag}>'
        if formatting & NEWLINE_AFTER_TAG:
            out += self.line_break
        return out

    def _write_node(self, node: Node) -> str:
        """Render a node and its descendants."""
        if node.node_type == NodeType.TEXT_NODE:
            return self._write_text(node.data)

        if node.node_type == NodeType.DOCUMENT_NODE:
            return ''.join(self._write_node(child) for child in node.child_nodes)

        if node.node_type == NodeType.ELEMENT_NODE:
            tag = node.local_name
            strip_tags = self.options.strip_tags
            if strip_tags is not None and tag in strip_tags:
                logger.debug(f"Stripping <{tag}> and its content")
                return ''
            content = ''.join(self._write_node(child) for child in node.child_nodes)
            allowed_tags = self.options.allowed_tags
            if allowed_tags is not None and tag not in allowed_tags:
                return content
            return self._write_element(node.tag_name, self._write_attributes(node), content)

        logger.warning(f"Skipping node of unknown type {node.node_type!r}")
        return ''

    def _finish(self, out: str) -> str:
        if self.line_break:
            lines = [line for line in out.split(self.line_break) if line.strip()]
            out = self.line_break.join(lines)
        return out + self.line_break

    def node_to_html(self, node: Optional[Node]) -> str:
        """
        Render a node and all of its descendants.

        Args:
            node: The node to render (None renders as '')

        Returns:
            The rendered markup; when reformatting, blank lines are removed
            and the result ends with exactly one line break
        """
        if node is None:
            return ''
        return self._finish(self._write_node(node))

    def nodes_to_html(self, nodes: Iterable[Node]) -> str:
        """Render several nodes as one fragment."""
        return self._finish(''.join(self._write_node(node) for node in nodes))


def render(node: Optional[Node], options: Optional[WriterOptions] = None) -> str:
    """Render a node with the given options."""
    return Writer(options).node_to_html(node)


__all__ = ['Writer', 'render']
