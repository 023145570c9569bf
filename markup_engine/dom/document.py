"""
Document implementation for the tree model.
A Document owns exactly one root element and the lifetime of every node below it.
"""

import logging
from typing import Optional

from .node import Node, NodeType
from .element import Element
from .text import Text

logger = logging.getLogger(__name__)

class Document(Node):
    """
    Document node implementation.

    This class owns the root element (conventionally ``<html>``) and acts as
    the factory for every node that belongs to it.
    """

    def __init__(self, create_structure: bool = True):
        """
        Initialize a new Document object.

        Args:
            create_structure: Whether to create the html/head/body skeleton
        """
        super().__init__(NodeType.DOCUMENT_NODE)
        self.owner_document = self
        self.node_name = "#document"

        if create_structure:
            self._create_base_structure()

    def _create_base_structure(self) -> None:
        """Create the basic HTML document structure."""
        html = self.create_element("html")
        self.append_child(html)
        html.append_child(self.create_element("head"))
        html.append_child(self.create_element("body"))

    @property
    def document_element(self) -> Optional[Element]:
        """Get the root element of the document."""
        for child in self.child_nodes:
            if child.node_type == NodeType.ELEMENT_NODE:
                return child
        return None

    @property
    def head(self) -> Optional[Element]:
        return self._root_child("head")

    @property
    def body(self) -> Optional[Element]:
        return self._root_child("body")

    def _root_child(self, tag_name: str) -> Optional[Element]:
        root = self.document_element
        if root is None:
            return None
        for child in root.children:
            if child.local_name == tag_name:
                return child
        return None

    def append_child(self, child: Node) -> Node:
        """
        Set the root element of this document.

        Args:
            child: The element to use as the root

        Returns:
            The appended element
        """
        if child.node_type != NodeType.ELEMENT_NODE:
            raise ValueError("A document can only hold a single root element")
        if self.document_element is not None:
            raise ValueError("Document already has a root element")
        return super().append_child(child)

    def create_element(self, tag_name: str) -> Element:
        """
        Create a new element with the specified tag name.

        Args:
            tag_name: The tag name of the element

        Returns:
            The new, detached element
        """
        return Element(tag_name, self)

    def create_text_node(self, data: str) -> Text:
        """
        Create a new text node.

        Args:
            data: The text content

        Returns:
            The new, detached text node
        """
        return Text(data, self)

    def import_node(self, node: Node, deep: bool = True) -> Node:
        """
        Copy a node (usually from another document) into this document.

        The source node is left untouched; ownership is never moved across
        documents.

        Args:
            node: The node to copy
            deep: Whether to copy the whole subtree

        Returns:
            A detached copy owned by this document
        """
        if node.node_type == NodeType.DOCUMENT_NODE:
            raise ValueError("Cannot import a document node")
        return node.clone_node(deep=deep, owner_document=self)

    def is_attached(self, node: Node) -> bool:
        """
        Check whether a node is still reachable from this document.

        Args:
            node: The node to check

        Returns:
            True if walking the node's ancestors ends at this document
        """
        return node.root_node() is self

    def clone_node(self, deep: bool = False, owner_document: Optional['Document'] = None) -> 'Document':
        clone = Document(create_structure=False)
        root = self.document_element
        if deep and root is not None:
            clone.append_child(root.clone_node(deep=True, owner_document=clone))
        return clone

    def __repr__(self) -> str:
        root = self.document_element
        return f"<Document root={root.tag_name if root is not None else None}>"
