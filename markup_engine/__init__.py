"""
Markup Engine - query, mutate, compile and render markup documents.
"""

from .documents import SourceDocument, HTMLDocument, MarkdownDocument
from .dom import Document, Elements, SelectorComponent, parse_css_selector
from .exceptions import (
    MarkupEngineError,
    InvalidInput,
    MalformedMarkup,
    DetachedNodeAccess,
    OutOfRange,
    NotSupported,
)
from .markdown import compile_markdown
from .parser import configure_parser
from .rendering import Writer, WriterOptions, render

# Package information
__version__ = "0.1.0"
__author__ = "Markup Engine Team"
__description__ = "A markup-document engine with a CSS-selector dialect, a Markdown compiler and an HTML writer"

__all__ = [
    'SourceDocument', 'HTMLDocument', 'MarkdownDocument',
    'Document', 'Elements', 'SelectorComponent', 'parse_css_selector',
    'MarkupEngineError', 'InvalidInput', 'MalformedMarkup', 'DetachedNodeAccess', 'OutOfRange', 'NotSupported',
    'compile_markdown', 'configure_parser',
    'Writer', 'WriterOptions', 'render',
]
