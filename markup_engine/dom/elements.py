"""
Element collection implementation.
This module implements Elements, the chainable query and mutation surface over
the nodes of one Document.
"""

import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Union

from .node import Node, NodeType
from .document import Document
from .selector_engine import SelectorComponent, SelectorEngine, deduplicate, parse_css_selector
from ..exceptions import DetachedNodeAccess, InvalidInput, NotSupported, OutOfRange
from ..rendering.formatting import escape_html
from ..rendering.options import WriterOptions
from ..rendering.writer import Writer
from ..parser.html_parser import get_parser

logger = logging.getLogger(__name__)

_selector_engine = SelectorEngine()


def _collapse(values: List[Any]) -> Any:
    """None for no values, the value itself for one, the list for several."""
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


class Elements:
    """
    An ordered collection of references to nodes of a single Document.

    A collection never owns its nodes. Membership is fixed when the
    collection is built; members removed from the document afterwards stay
    listed but raise DetachedNodeAccess when they are used.
    """

    def __init__(self,
                 elements: Union[Node, Sequence[Node]],
                 document: Document,
                 options: Optional[WriterOptions] = None):
        """
        Initialize a new collection.

        Args:
            elements: A single node or an ordered sequence of nodes
            document: The document the nodes belong to
            options: Writer options used by to_html()
        """
        if isinstance(elements, Node):
            nodes = [elements]
        elif isinstance(elements, (list, tuple)):
            nodes = list(elements)
            for node in nodes:
                if not isinstance(node, Node):
                    raise InvalidInput(f"Not a node: {node!r}")
        else:
            raise InvalidInput(f"Not a node or a sequence of nodes: {type(elements).__name__}")

        self._nodes: List[Node] = nodes
        self.document = document
        self.options = options

    def _derive(self, nodes: Union[Node, Sequence[Node]]) -> 'Elements':
        return Elements(nodes, self.document, self.options)

    def _members(self) -> Iterator[Node]:
        for node in self._nodes:
            if not self.document.is_attached(node):
                logger.error(f"Collection member {node!r} has been removed from its document")
                raise DetachedNodeAccess(f"{node!r} is no longer attached to its document")
            yield node

    def _element_members(self) -> Iterator[Node]:
        for node in self._members():
            if node.node_type != NodeType.ELEMENT_NODE:
                logger.warning(f"Skipping non-element member {node!r}")
                continue
            yield node

    # Collection protocol

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator['Elements']:
        for node in self._nodes:
            yield self._derive(node)

    def __getitem__(self, index: int) -> 'Elements':
        if not isinstance(index, int):
            raise InvalidInput(f"Collection indices must be integers, not {type(index).__name__}")
        try:
            return self._derive(self._nodes[index])
        except IndexError:
            raise OutOfRange(f"Index {index} is out of range for a collection of {len(self._nodes)}") from None

    def __setitem__(self, index: int, value: Node) -> None:
        if not isinstance(value, Node):
            raise InvalidInput(f"Not a node: {value!r}")
        raise NotSupported("Replacing a collection member by position is not supported")

    def __delitem__(self, index: int) -> None:
        try:
            node = self._nodes[index]
        except IndexError:
            raise OutOfRange(f"Index {index} is out of range for a collection of {len(self._nodes)}") from None
        parent = node.parent_node
        if parent is not None:
            parent.remove_child(node)
        del self._nodes[index]

    def __str__(self) -> str:
        return self.to_html()

    def __repr__(self) -> str:
        return f"<Elements {self._nodes!r}>"

    def element(self, index: int) -> Optional['Elements']:
        """
        Get the member at a position as a single-member collection.

        Args:
            index: Position in the collection

        Returns:
            A single-member collection, or None when the index is out of range
        """
        if 0 <= index < len(self._nodes):
            return self._derive(self._nodes[index])
        return None

    def elements(self) -> List[Node]:
        """Get the members as a plain list of nodes."""
        return list(self._nodes)

    # Queries

    def select(self, selector: str) -> 'Elements':
        """
        Find the descendants of every member that match a selector.

        Args:
            selector: The selector string

        Returns:
            A deduplicated collection of matching elements
        """
        return self._derive(_selector_engine.select(list(self._members()), selector))

    def filter(self, component: Union[SelectorComponent, str]) -> 'Elements':
        """
        Keep only the members matching a single selector component.

        Args:
            component: A SelectorComponent, or a selector string whose first
                component is used

        Returns:
            A new collection in member order
        """
        if isinstance(component, str):
            component = parse_css_selector(component)[0]
        return self._derive(_selector_engine.filter(list(self._members()), component))

    def get_elements_by_tag_name(self, tag: str) -> 'Elements':
        """Collect the descendant elements of every member with a given tag ('*' for all)."""
        return self._derive(_selector_engine.expand(list(self._members()), tag))

    def children(self, include_text: bool = False) -> 'Elements':
        """
        Collect the direct children of every member.

        Args:
            include_text: Also include text children

        Returns:
            The children of every member, in member then document order
        """
        result = []
        for node in self._members():
            for child in node.child_nodes:
                if child.node_type == NodeType.ELEMENT_NODE or (include_text and child.node_type == NodeType.TEXT_NODE):
                    result.append(child)
        return self._derive(result)

    def parent(self) -> 'Elements':
        """Collect the nearest element ancestor of every member, deduplicated."""
        parents = []
        for node in self._members():
            current = node.parent_node
            while current is not None and current.node_type != NodeType.ELEMENT_NODE:
                current = current.parent_node
            if current is not None:
                parents.append(current)
        return self._derive(deduplicate(parents))

    def deduplicate(self) -> 'Elements':
        """Remove repeated members, keeping the first occurrence."""
        return self._derive(deduplicate(self._nodes))

    # Content

    def append(self, content: Union['Elements', str], as_markup: bool = False) -> 'Elements':
        """
        Append content as the last child of every member.

        Args:
            content: Another collection (its nodes are copied into this
                document) or a string (a text node, or parsed markup when
                ``as_markup`` is set)
            as_markup: Treat a string as markup instead of text

        Returns:
            This collection
        """
        if isinstance(content, Elements):
            new_nodes = [self.document.import_node(node, deep=True) for node in content.elements()]
        elif isinstance(content, str):
            if as_markup:
                new_nodes = get_parser().parse_fragment(content, self.document)
            else:
                new_nodes = [self.document.create_text_node(content)]
        else:
            raise InvalidInput(f"Cannot append a value of type {type(content).__name__}")

        for node in self._element_members():
            for new_node in new_nodes:
                node.append_child(new_node.clone_node(deep=True))
        return self

    def value(self, new_value: Optional[str] = None) -> Any:
        """
        Get or set the value of every member.

        Args:
            new_value: When given, replaces the content of every member

        Returns:
            The value(s) when reading, this collection when writing
        """
        if new_value is None:
            return _collapse([node.text_content for node in self._members()])
        for node in self._members():
            node.text_content = new_value
        return self

    def text(self) -> Any:
        """Get the text content of every member."""
        return _collapse([node.text_content for node in self._members()])

    def content(self, new_value: Optional[str] = None) -> Any:
        """
        Get or set the escaped content of every member.

        Reading trims and escapes the text; writing escapes the new value, so
        writing a value and reading it back escapes it twice.

        Args:
            new_value: When given, escaped and stored as every member's content

        Returns:
            The escaped content(s) when reading, this collection when writing
        """
        if new_value is None:
            return _collapse([escape_html(node.text_content.strip()) for node in self._members()])
        escaped = escape_html(new_value)
        for node in self._members():
            node.text_content = escaped
        return self

    def delete(self) -> 'Elements':
        """Detach every member from its parent and empty the collection."""
        for node in self._nodes:
            parent = node.parent_node
            if parent is None:
                continue
            parent.remove_child(node)
        logger.debug(f"Deleted {len(self._nodes)} nodes")
        self._nodes = []
        return self

    # Element accessors

    def id(self) -> Any:
        """Get the id of every member ('' when absent)."""
        return _collapse([
            node.id if node.node_type == NodeType.ELEMENT_NODE else ''
            for node in self._members()
        ])

    def tag(self) -> Any:
        """Get the lowercase tag of every member ('' for text nodes)."""
        return _collapse([
            node.local_name if node.node_type == NodeType.ELEMENT_NODE else ''
            for node in self._members()
        ])

    def get_attribute(self, name: str) -> Any:
        """
        Get an attribute of every member.

        Args:
            name: The attribute name

        Returns:
            The value(s); None for members without the attribute
        """
        return _collapse([
            node.get_attribute(name) if node.node_type == NodeType.ELEMENT_NODE else None
            for node in self._members()
        ])

    def set_attribute(self, name: str, value: str) -> 'Elements':
        for node in self._element_members():
            node.set_attribute(name, value)
        return self

    def delete_attribute(self, name: str) -> 'Elements':
        for node in self._element_members():
            node.remove_attribute(name)
        return self

    def classname(self, classname: Optional[str] = None) -> Any:
        """
        Get or set the class attribute of every member as a string.

        Args:
            classname: When given, the new class attribute

        Returns:
            The class string(s) when reading, this collection when writing
        """
        if classname is None:
            return _collapse([
                node.class_name if node.node_type == NodeType.ELEMENT_NODE else ''
                for node in self._members()
            ])
        for node in self._element_members():
            node.class_name = classname
        return self

    def classnames(self, classes: Optional[Iterable[str]] = None) -> Any:
        """
        Get or set the class attribute of every member as a list of tokens.

        Args:
            classes: When given, the new class tokens

        Returns:
            The token list(s) when reading, this collection when writing
        """
        if classes is None:
            return _collapse([
                node.class_list if node.node_type == NodeType.ELEMENT_NODE else []
                for node in self._members()
            ])
        classname = ' '.join(classes)
        for node in self._element_members():
            node.class_name = classname
        return self

    def add_class(self, names: Union[str, Iterable[str]]) -> 'Elements':
        """
        Add class tokens to every member, skipping tokens already present.

        Args:
            names: A space-separated string or a sequence of tokens

        Returns:
            This collection
        """
        if isinstance(names, str):
            names = names.split(' ')
        names = [name for name in names if name]
        for node in self._element_members():
            classes = node.class_list
            for name in names:
                if name not in classes:
                    classes.append(name)
            node.class_name = ' '.join(classes)
        return self

    # Output

    def to_html(self, options: Optional[WriterOptions] = None) -> str:
        """
        Render every member as one markup fragment.

        Args:
            options: Writer options, defaulting to the collection's options

        Returns:
            The rendered markup
        """
        return Writer(options or self.options).nodes_to_html(list(self._members()))


__all__ = ['Elements']
