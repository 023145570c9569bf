"""
Inline Markdown styling.
This module rewrites inline runs of Markdown text (emphasis, code spans,
images and links) into markup with an ordered table of substitutions.
"""

import re
from typing import Callable, List, Tuple, Union

from ..rendering.formatting import encode_entities

# Characters allowed in link and image URLs
URL_CHARS = r'[a-zA-Z0-9&%$?#@.=:/_-]'

# Applied in order; later patterns see the output of earlier ones
STYLE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\*{3}(.+?)\*{3}'), r'<b><i>\1</i></b>'),
    (re.compile(r'(?<![*\w])\*{2}([^*\s]([^*]*[^*\s])?)\*{2}(?![*\w])'), r'<b>\1</b>'),
    (re.compile(r'(?<![*\w])([*_])([^*\s]([^*]*[^*\s])?)\1(?![*\w])'), r'<i>\2</i>'),
]

CODE_SPAN_PATTERN = re.compile(r'(?<![`\w])`(\s*)([^`]+?)(\s*)`(?![`\w])')

IMAGE_PATTERN = re.compile(r'!\[([^\[\]"]*)\]\((' + URL_CHARS + r'+)\)')

LINK_PATTERN = re.compile(r'\[([^\[\]"]+)\]\((' + URL_CHARS + r'+)\)')


def _code_span(match: re.Match) -> str:
    leading = match.group(1).replace(' ', '&nbsp;')
    trailing = match.group(3).replace(' ', '&nbsp;')
    return f'<code>{leading}{encode_entities(match.group(2))}{trailing}</code>'


def _image(match: re.Match) -> str:
    return f'<img src="{match.group(2)}" alt="{match.group(1)}">'


def _link(match: re.Match) -> str:
    return f'<a href="{match.group(2)}">{match.group(1)}</a>'


SUBSTITUTIONS: List[Tuple[re.Pattern, Union[str, Callable[[re.Match], str]]]] = STYLE_PATTERNS + [
    (CODE_SPAN_PATTERN, _code_span),
    (IMAGE_PATTERN, _image),
    (LINK_PATTERN, _link),
]


def convert_styled_text(content: str) -> str:
    """
    Translate inline Markdown into markup.

    Args:
        content: A run of Markdown text

    Returns:
        The text with bold, italic, code, image and link markup applied
    """
    for pattern, replacement in SUBSTITUTIONS:
        content = pattern.sub(replacement, content)
    return content


__all__ = ['convert_styled_text', 'STYLE_PATTERNS', 'SUBSTITUTIONS']
