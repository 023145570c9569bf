"""
Markdown compiler implementation.
This module compiles a line-oriented Markdown grammar into a Document. Every
block is emitted as markup through the Elements collection API.
"""

import logging
import re
from collections import deque
from enum import Enum
from typing import Deque, List, NamedTuple, Optional

from ..dom.document import Document
from ..dom.elements import Elements
from ..rendering.formatting import escape_html
from .inline import convert_styled_text

logger = logging.getLogger(__name__)


class Block(Enum):
    """Block types recognized at the start of a line."""
    HEADING = 'heading'
    HORIZONTAL_RULE = 'horizontal_rule'
    CODE_BLOCK = 'code_block'
    LIST = 'list'
    BLOCKQUOTE = 'blockquote'


class ListType(Enum):
    """List flavours, decided by the marker of a list's first item."""
    ORDERED_NUMERIC = 'ordered_numeric'
    ORDERED_ROMAN_LOWER = 'ordered_roman_lower'
    ORDERED_ROMAN_UPPER = 'ordered_roman_upper'
    ORDERED_ALPHA_LOWER = 'ordered_alpha_lower'
    ORDERED_ALPHA_UPPER = 'ordered_alpha_upper'
    CHECKLIST = 'checklist'
    UNORDERED = 'unordered'


# Tried in order, the first match wins
BLOCK_ELEMENTS = [
    (Block.HEADING, re.compile(r'^#{1,6}\s')),
    (Block.HORIZONTAL_RULE, re.compile(r'^---\s*$')),
    (Block.CODE_BLOCK, re.compile(r'^```(?P<language>[a-zA-Z0-9-]*)$')),
    (Block.LIST, re.compile(r'^(?P<indent>\s*)(?P<list_symbol>[*+]|[a-zA-Z]+\.|[0-9]+\.|\[[xX ]?\])\s+(?P<list_item>.+)$')),
    (Block.BLOCKQUOTE, re.compile(r'^\s*>\s*(?P<quoted>.*)')),
]

BLOCK_PATTERNS = dict(BLOCK_ELEMENTS)

# Roman numerals are tried before the generic alphabetic markers; l and d
# are left to the alphabetic lists
LIST_TYPE_PATTERNS = [
    (ListType.ORDERED_NUMERIC, re.compile(r'^([0-9]+)\.$')),
    (ListType.ORDERED_ROMAN_LOWER, re.compile(r'^([ivxcm]+)\.$')),
    (ListType.ORDERED_ROMAN_UPPER, re.compile(r'^([IVXCM]+)\.$')),
    (ListType.ORDERED_ALPHA_LOWER, re.compile(r'^([a-z]+)\.$')),
    (ListType.ORDERED_ALPHA_UPPER, re.compile(r'^([A-Z]+)\.$')),
    (ListType.CHECKLIST, re.compile(r'^(\[[Xx ]?\])$')),
    (ListType.UNORDERED, re.compile(r'^([*+])$')),
]

# Tag and type attribute for each list flavour
LIST_TAGS = {
    ListType.ORDERED_NUMERIC: ('ol', ''),
    ListType.ORDERED_ROMAN_LOWER: ('ol', ' type="i"'),
    ListType.ORDERED_ROMAN_UPPER: ('ol', ' type="I"'),
    ListType.ORDERED_ALPHA_LOWER: ('ol', ' type="a"'),
    ListType.ORDERED_ALPHA_UPPER: ('ol', ' type="A"'),
    ListType.CHECKLIST: ('ul', ''),
    ListType.UNORDERED: ('ul', ''),
}

FRONTMATTER_PATTERN = re.compile(r'^\s*(?P<name>[a-zA-Z0-9_-]+):\s*(?P<content>.*)$')

UNCHECKED_PATTERN = re.compile(r'^\[\s*\]$')

NUMERIC_MARKER = re.compile(r'^[0-9]+\.$')


class ListItem(NamedTuple):
    """One captured list line."""
    indent: int
    marker: str
    text: str

    @classmethod
    def from_match(cls, match: re.Match) -> 'ListItem':
        return cls(len(match.group('indent') or ''), match.group('list_symbol'), match.group('list_item'))


def list_type_for(marker: str) -> ListType:
    """
    Decide the list flavour for a marker.

    Args:
        marker: The list marker, e.g. "*", "3.", "iv." or "[x]"

    Returns:
        The first matching ListType, UNORDERED when nothing matches
    """
    for list_type, pattern in LIST_TYPE_PATTERNS:
        if pattern.match(marker):
            return list_type
    return ListType.UNORDERED


def _read_while(lines: Deque[str], pattern: re.Pattern, match_pattern: bool = True) -> List[str]:
    """Consume lines from the front while they (do not) match ``pattern``."""
    result = []
    while lines:
        if bool(pattern.match(lines[0])) != match_pattern:
            break
        result.append(lines.popleft())
    return result


class MarkdownCompiler:
    """
    Compiles Markdown text into a Document.

    Lines are consumed from the front of a queue; each one is classified
    against BLOCK_ELEMENTS and may read ahead to finish its block.
    """

    def compile(self, source: str) -> Document:
        """
        Compile Markdown source into a new document.

        Args:
            source: The Markdown text

        Returns:
            A Document with html/head/body; frontmatter goes to head, blocks to body
        """
        document = Document()
        head = Elements(document.head, document)
        body = Elements(document.body, document)

        source = source.strip().replace('\r\n', '\n')
        lines: Deque[str] = deque(line.rstrip() for line in source.split('\n'))

        while lines:
            line = lines.popleft()
            if not line:
                continue

            block, match = self._classify(line)

            if block is None:
                body.append(f'<p>{convert_styled_text(line)}</p>', as_markup=True)
            elif block is Block.HEADING:
                level = len(line) - len(line.lstrip('#'))
                text = convert_styled_text(line[level:].lstrip())
                body.append(f'<h{level}>{text}</h{level}>', as_markup=True)
            elif block is Block.HORIZONTAL_RULE:
                if document.body.has_child_nodes():
                    body.append('<hr>', as_markup=True)
                else:
                    self._frontmatter(lines, head)
            elif block is Block.CODE_BLOCK:
                self._code_block(lines, match.group('language'), body)
            elif block is Block.LIST:
                items = [ListItem.from_match(match)]
                items.extend(
                    ListItem.from_match(BLOCK_PATTERNS[Block.LIST].match(list_line))
                    for list_line in _read_while(lines, BLOCK_PATTERNS[Block.LIST])
                )
                if len(items) < 2:
                    # A single list-like line is just a paragraph
                    body.append(f'<p>{convert_styled_text(line)}</p>', as_markup=True)
                else:
                    queue = deque(items)
                    # A list that starts deeper than later items leaves them queued
                    while queue:
                        body.append(self.generate_list(queue), as_markup=True)
            elif block is Block.BLOCKQUOTE:
                quoted = [match.group('quoted')]
                quoted.extend(
                    BLOCK_PATTERNS[Block.BLOCKQUOTE].match(quoted_line).group('quoted')
                    for quoted_line in _read_while(lines, BLOCK_PATTERNS[Block.BLOCKQUOTE])
                )
                body.append('<blockquote>{}</blockquote>'.format('\n'.join(quoted)), as_markup=True)

        logger.debug(f"Compiled Markdown into {len(document.body.child_nodes)} body nodes")
        return document

    def _classify(self, line: str):
        for block, pattern in BLOCK_ELEMENTS:
            match = pattern.match(line)
            if match is not None:
                return block, match
        return None, None

    def _frontmatter(self, lines: Deque[str], head: Elements) -> None:
        frontmatter = _read_while(lines, BLOCK_PATTERNS[Block.HORIZONTAL_RULE], match_pattern=False)
        # Closing delimiter
        if lines:
            lines.popleft()

        for line in frontmatter:
            if not line.strip():
                continue
            match = FRONTMATTER_PATTERN.match(line)
            if match is not None:
                head.append(
                    '<meta name="{}" content="{}">'.format(match.group('name'), escape_html(match.group('content'))),
                    as_markup=True,
                )
            else:
                head.append(f'<meta content="{escape_html(line.strip())}">', as_markup=True)
        logger.debug(f"Read {len(frontmatter)} frontmatter lines")

    def _code_block(self, lines: Deque[str], language: Optional[str], body: Elements) -> None:
        code_lines = _read_while(lines, BLOCK_PATTERNS[Block.CODE_BLOCK], match_pattern=False)
        # Closing fence
        if lines:
            lines.popleft()

        class_attribute = f' class="language-{language}"' if language else ''
        code = escape_html('\n'.join(code_lines))
        body.append(f'<pre><code{class_attribute}>{code}</code></pre>', as_markup=True)

    def generate_list(self, items: Deque[ListItem]) -> str:
        """
        Build the markup for a run of list items.

        Items are consumed from the front of ``items``. A deeper item starts a
        nested list in its own ``<li>``; a shallower item ends this list and
        is left in the queue for the caller.

        Args:
            items: Captured list items

        Returns:
            The list markup
        """
        if not items:
            return ''

        indent = items[0].indent
        list_type = list_type_for(items[0].marker)
        tag, type_attribute = LIST_TAGS[list_type]

        line_items: List[str] = []
        while items:
            item = items.popleft()
            if item.indent > indent:
                items.appendleft(item)
                line_items.append(f'<li>{self.generate_list(items)}</li>')
                continue
            if item.indent < indent:
                items.appendleft(item)
                break

            text = convert_styled_text(item.text)
            if (list_type is ListType.ORDERED_NUMERIC
                    and NUMERIC_MARKER.match(item.marker)
                    and item.marker != f'{len(line_items) + 1}.'):
                # Only numeric lists may be renumbered
                line_items.append('<li value="{}">{}</li>'.format(item.marker.rstrip('.'), text))
            elif list_type is ListType.CHECKLIST and item.marker.startswith('['):
                if UNCHECKED_PATTERN.match(item.marker):
                    line_items.append(f'<li><input type="checkbox">{text}</li>')
                else:
                    line_items.append(f'<li><input type="checkbox" checked>{text}</li>')
            else:
                line_items.append(f'<li>{text}</li>')

        return '<{}{}>{}</{}>'.format(tag, type_attribute, ''.join(line_items), tag)


def compile_markdown(source: str) -> Document:
    """Compile Markdown source into a new Document."""
    return MarkdownCompiler().compile(source)


__all__ = ['MarkdownCompiler', 'compile_markdown', 'ListItem', 'ListType', 'list_type_for']
