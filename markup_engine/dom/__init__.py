"""
Tree model for the markup engine.
This package provides the node classes, the selector engine and the Elements collection.
"""

from .node import Node, NodeType
from .element import Element
from .attr import Attr
from .text import Text
from .document import Document
from .selector_engine import (
    SelectorComponent,
    SelectorEngine,
    deduplicate,
    iter_css_selector_components,
    parse_css_selector,
)
from .elements import Elements

__all__ = [
    'Node', 'NodeType', 'Element', 'Attr', 'Text', 'Document',
    'SelectorComponent', 'SelectorEngine', 'deduplicate',
    'iter_css_selector_components', 'parse_css_selector',
    'Elements',
]
