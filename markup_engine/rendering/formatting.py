"""
Formatting metadata for the Writer.
Per-tag formatting flags plus the entity and URL helpers used during rendering.
"""

import re
from html.entities import codepoint2name
from typing import Optional

# Tags that never carry content or a closing tag.
# For XHTML output, these tags are written in self-closed form.
VOID_ELEMENT = 1

# When reformatting, this tag starts on a new line.
NEWLINE_BEFORE_TAG = 2

# When reformatting, this tag's content starts on a new line (and is indented).
NEWLINE_BEFORE_CONTENT = 4

# When reformatting, this tag's content ends on its own line.
NEWLINE_AFTER_CONTENT = 8

# When reformatting, the closing tag forces the next tag onto a new line.
NEWLINE_AFTER_TAG = 16

INLINE_ELEMENT = 0

BLOCK_ELEMENT = NEWLINE_BEFORE_TAG | NEWLINE_BEFORE_CONTENT | NEWLINE_AFTER_CONTENT | NEWLINE_AFTER_TAG

LINE_ELEMENT = NEWLINE_BEFORE_TAG | NEWLINE_AFTER_TAG

# Unknown tags use the '*' entry.
ELEMENTS = {
    '*':      BLOCK_ELEMENT,
    'a':      INLINE_ELEMENT,
    'area':   VOID_ELEMENT,
    'b':      INLINE_ELEMENT,
    'base':   VOID_ELEMENT,
    'br':     VOID_ELEMENT,
    'code':   INLINE_ELEMENT,
    'col':    VOID_ELEMENT,
    'em':     INLINE_ELEMENT,
    'embed':  VOID_ELEMENT,
    'h1':     LINE_ELEMENT,
    'h2':     LINE_ELEMENT,
    'h3':     LINE_ELEMENT,
    'h4':     LINE_ELEMENT,
    'h5':     LINE_ELEMENT,
    'h6':     LINE_ELEMENT,
    'hr':     VOID_ELEMENT | LINE_ELEMENT,
    'i':      INLINE_ELEMENT,
    'img':    VOID_ELEMENT,
    'input':  VOID_ELEMENT,
    'li':     LINE_ELEMENT,
    'link':   VOID_ELEMENT | LINE_ELEMENT,
    'meta':   VOID_ELEMENT | LINE_ELEMENT,
    'p':      LINE_ELEMENT,
    'param':  VOID_ELEMENT,
    'source': VOID_ELEMENT,
    'span':   INLINE_ELEMENT,
    'strong': INLINE_ELEMENT,
    'track':  VOID_ELEMENT,
    'u':      INLINE_ELEMENT,
    'wbr':    VOID_ELEMENT,
}

# Schemes allowed in sanitized hrefs; an empty scheme is a relative URL.
SAFE_URL_SCHEMES = frozenset({'http', 'https', 'ftp'})

_SCHEME_PATTERN = re.compile(r'^(?P<scheme>[a-z][a-z0-9+.-]*):', re.IGNORECASE)

# An '&' that does not already start an entity reference
_BARE_AMPERSAND = re.compile(r'&(?!(?:[a-zA-Z][a-zA-Z0-9]*|#[0-9]+|#[xX][0-9a-fA-F]+);)')

_ENTITY_CHARS = re.compile(r'[<>"\'\xa0-\U0010ffff]')


def formatting_for(tag: str) -> int:
    """Look up the formatting flags for a (lowercase) tag name."""
    return ELEMENTS.get(tag, ELEMENTS['*'])


def _entity_for(match) -> str:
    char = match.group(0)
    if char == "'":
        return '&#039;'
    name = codepoint2name.get(ord(char))
    if name is None:
        return char
    return f'&{name};'


def encode_entities(text: str) -> str:
    """
    Encode every character that has an HTML 4.01 named entity.

    Quotes are encoded, and existing entity references are not encoded twice.

    Args:
        text: Raw text

    Returns:
        Entity-encoded text
    """
    text = _BARE_AMPERSAND.sub('&amp;', text)
    return _ENTITY_CHARS.sub(_entity_for, text)


def escape_html(text: str) -> str:
    """Escape the characters that are special in markup (&, <, >, and both quotes)."""
    return (text.replace('&', '&amp;')
                .replace('<', '&lt;')
                .replace('>', '&gt;')
                .replace('"', '&quot;')
                .replace("'", '&#039;'))


def strip_null_bytes(value: str) -> str:
    return value.replace('\0', '')


def escape_attribute(value: str) -> str:
    """Escape an attribute value for use inside double quotes; existing entities are kept."""
    return _BARE_AMPERSAND.sub('&amp;', value).replace('"', '&quot;')


def url_scheme(url: str) -> Optional[str]:
    """
    Extract the lowercase scheme of a URL.

    Args:
        url: The URL as written in the attribute

    Returns:
        The scheme without the colon, or '' for scheme-less URLs
    """
    # Browsers ignore leading whitespace and control characters
    url = url.lstrip(''.join(chr(c) for c in range(0x21)))
    match = _SCHEME_PATTERN.match(url)
    if match is None:
        return ''
    return match.group('scheme').lower()


def is_safe_url(url: str) -> bool:
    scheme = url_scheme(url)
    return scheme == '' or scheme in SAFE_URL_SCHEMES
