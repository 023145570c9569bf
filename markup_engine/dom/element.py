"""
Element nodes: a tag, an ordered attribute map and child nodes.
"""

from typing import Dict, List, Optional
import logging

from .node import Node, NodeType
from .attr import Attr
from .text import Text

logger = logging.getLogger(__name__)

class Element(Node):
    """
    A tagged node.

    ``tag_name`` keeps the spelling it was created with so it can be written
    back verbatim; ``local_name`` is the lowercased form used for matching.
    Attribute names are always stored lowercased.
    """

    def __init__(self, tag_name: str, owner_document: Optional['Document'] = None):
        super().__init__(NodeType.ELEMENT_NODE, owner_document)

        self.tag_name = tag_name
        self.local_name = tag_name.lower()
        self.node_name = tag_name

        # Insertion order is preserved for stable output
        self.attributes: Dict[str, Attr] = {}

    @property
    def id(self) -> str:
        """The ``id`` attribute, "" when unset."""
        return self.get_attribute('id') or ""

    @id.setter
    def id(self, value: str) -> None:
        self.set_attribute('id', value)

    @property
    def class_name(self) -> str:
        """The raw ``class`` attribute, "" when unset."""
        return self.get_attribute('class') or ""

    @class_name.setter
    def class_name(self, value: str) -> None:
        self.set_attribute('class', value)

    @property
    def class_list(self) -> List[str]:
        """Class tokens in attribute order, empty tokens dropped."""
        return [token for token in self.class_name.split(' ') if token]

    @property
    def text_content(self) -> str:
        return Node.text_content.fget(self)

    @text_content.setter
    def text_content(self, text: str) -> None:
        """Replace every child with one text run (none for empty text)."""
        self.remove_all_children()
        if text:
            self.append_child(Text(text, self.owner_document))

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attributes

    def get_attribute(self, name: str) -> Optional[str]:
        """
        Look up an attribute case-insensitively.

        Returns:
            The value, or None when the element has no such attribute
        """
        attr = self.attributes.get(name.lower())
        return None if attr is None else attr.value

    def set_attribute(self, name: str, value: str) -> None:
        """
        Create or overwrite an attribute.

        Overwriting keeps the attribute's original position; None is stored
        as the empty string.
        """
        key = name.lower()
        attr = self.attributes.get(key)
        if attr is None:
            self.attributes[key] = Attr(key, value, self)
        else:
            attr.value = "" if value is None else str(value)

    def remove_attribute(self, name: str) -> None:
        """Drop an attribute; missing names are ignored."""
        attr = self.attributes.pop(name.lower(), None)
        if attr is not None:
            attr.owner_element = None

    def get_elements_by_tag_name(self, tag_name: str) -> List['Element']:
        """
        Collect descendant elements by tag, in document order.

        The element itself is never part of the result.

        Args:
            tag_name: Tag to match case-insensitively; "*" or "" match any tag
        """
        wanted = tag_name.lower()
        if wanted == "":
            wanted = "*"

        found = [
            node for node in self.descendants()
            if node.node_type == NodeType.ELEMENT_NODE
            and wanted in ("*", node.local_name)
        ]
        logger.debug(f"<{self.local_name}> has {len(found)} descendant(s) matching '{wanted}'")
        return found

    def clone_node(self, deep: bool = False, owner_document: Optional['Document'] = None) -> 'Element':
        """
        Copy this element with its attributes, detached.

        Args:
            deep: Also copy every descendant
            owner_document: Document for the copy; defaults to this element's
        """
        document = owner_document or self.owner_document
        copy = type(self)(self.tag_name, document)
        for key, attr in self.attributes.items():
            copy.set_attribute(key, attr.value)

        if deep:
            for node in self.child_nodes:
                copy.append_child(node.clone_node(deep=True, owner_document=document))
        return copy

    def __repr__(self) -> str:
        return f"<Element {self.tag_name}>"
