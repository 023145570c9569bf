"""
Text runs in the tree model.
"""

from typing import Optional
from .node import Node, NodeType

class Text(Node):
    """A run of character data. Text nodes are always leaves."""

    def __init__(self, data: str, owner_document: Optional['Document'] = None):
        super().__init__(NodeType.TEXT_NODE, owner_document)
        self.node_name = "#text"
        self.data = "" if data is None else data

    @property
    def text_content(self) -> str:
        return self.data

    @text_content.setter
    def text_content(self, value: str) -> None:
        self.data = "" if value is None else value

    def append_child(self, child: Node) -> Node:
        raise ValueError("Text nodes cannot have children")

    def clone_node(self, deep: bool = False, owner_document: Optional['Document'] = None) -> 'Text':
        """Detached copy of this run; ``deep`` makes no difference for a leaf."""
        return Text(self.data, owner_document or self.owner_document)

    def __repr__(self) -> str:
        preview = self.data if len(self.data) <= 20 else self.data[:20] + "..."
        return f"<Text {preview!r}>"
