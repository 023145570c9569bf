"""
Base node of the tree model.

Elements, text runs and documents all derive from :class:`Node`. A node owns
its ``child_nodes`` list outright; the way back up is a weak reference, so a
detached subtree never keeps its former ancestors alive.
"""

from enum import IntEnum
from typing import List, Optional, Iterator
import weakref

class NodeType(IntEnum):
    """Kinds of node in the tree."""
    ELEMENT_NODE = 1
    TEXT_NODE = 3
    DOCUMENT_NODE = 9


class Node:
    """Shared child bookkeeping and traversal for every node kind."""

    def __init__(self, node_type: NodeType, owner_document: Optional['Document'] = None):
        """
        Args:
            node_type: Which kind of node this is
            owner_document: Document the node was created for, if any
        """
        self.node_type = node_type
        self.owner_document = owner_document
        self.node_name: str = "#node"
        self.child_nodes: List['Node'] = []
        self._parent_ref: Optional[weakref.ref] = None

    @property
    def parent_node(self) -> Optional['Node']:
        """The parent, or None for a detached node."""
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self) -> List['Element']:
        """Element children only, skipping text."""
        return [node for node in self.child_nodes if node.node_type == NodeType.ELEMENT_NODE]

    def append_child(self, child: 'Node') -> 'Node':
        """
        Move ``child`` to the end of this node's children.

        The child is first detached from wherever it currently lives.

        Returns:
            The child itself
        """
        # A node has exactly one owner at a time
        previous = child.parent_node
        if previous is not None:
            previous.remove_child(child)
        child._parent_ref = weakref.ref(self)
        self.child_nodes.append(child)
        return child

    def remove_child(self, child: 'Node') -> 'Node':
        """
        Detach ``child`` from this node.

        Raises:
            ValueError: ``child`` is not a child of this node
        """
        index = self._index_of(child)
        if index < 0:
            raise ValueError("Child not found in child nodes")

        del self.child_nodes[index]
        child._parent_ref = None
        return child

    def remove_all_children(self) -> None:
        for child in self.child_nodes:
            child._parent_ref = None
        self.child_nodes = []

    def _index_of(self, child: 'Node') -> int:
        # Identity, not equality
        return next((i for i, node in enumerate(self.child_nodes) if node is child), -1)

    def has_child_nodes(self) -> bool:
        return bool(self.child_nodes)

    def clone_node(self, deep: bool = False, owner_document: Optional['Document'] = None) -> 'Node':
        """
        Copy this node into a new detached node.

        Args:
            deep: Copy the whole subtree rather than just this node
            owner_document: Document for the copy; defaults to this node's
        """
        raise NotImplementedError(f"{type(self).__name__} cannot be cloned")

    def ancestors(self) -> Iterator['Node']:
        """Parent, grandparent and so on up to the root."""
        node = self.parent_node
        while node is not None:
            yield node
            node = node.parent_node

    def root_node(self) -> 'Node':
        """The topmost ancestor, or this node when detached."""
        root = self
        for root in self.ancestors():
            pass
        return root

    def descendants(self) -> Iterator['Node']:
        """Every node below this one, depth-first in document order."""
        stack = list(reversed(self.child_nodes))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes))

    @property
    def text_content(self) -> str:
        """All descendant text runs joined together."""
        return "".join(
            node.data for node in self.descendants()
            if node.node_type == NodeType.TEXT_NODE
        )
