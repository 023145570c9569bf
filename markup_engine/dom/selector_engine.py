"""
Selector Engine implementation.
This module implements the small CSS selector dialect used to query the tree:
tag names, ``#id``, ``.class`` (dot-joined classes mean "all of these"),
``[attr]`` / ``[attr=value]`` and the descendant combinator.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence

from .node import Node, NodeType

logger = logging.getLogger(__name__)

# Reserved attribute modifiers, e.g. [lang|=en] or [class~=foo]
ATTRIBUTE_MODIFIERS = '~|'

# Quote characters stripped from attribute names and values
QUOTES = '"\''


@dataclass
class SelectorComponent:
    """One whitespace-delimited unit of a selector string."""
    tag: str = ''
    id: str = ''
    class_name: str = ''
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def classes(self) -> List[str]:
        """Class tokens this component requires (dot-split, empty tokens dropped)."""
        return [cls for cls in self.class_name.split('.') if cls]

    def is_empty(self) -> bool:
        return not (self.tag or self.id or self.class_name or self.attributes)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def _parse_attribute(token: str, attributes: Dict[str, str]) -> None:
    """Parse the inside of an ``[...]`` token into ``attributes``."""
    name, _, value = token.partition('=')
    modifier = ''
    if name and name[-1] in ATTRIBUTE_MODIFIERS:
        modifier = name[-1]
        name = name[:-1]
    name = _unquote(name.strip()).lower()
    if not name:
        return
    # Matching code looks for the modifier at the start of the constraint
    attributes[name] = modifier + _unquote(value.strip())


def iter_css_selector_components(selector: str) -> Iterator[SelectorComponent]:
    """
    Lazily parse a selector string into its components.

    Parsing is total: malformed fragments are skipped and the best-effort
    component is still produced. At least one component is always yielded.

    Args:
        selector: The selector string

    Yields:
        SelectorComponent for each descendant step, in order
    """
    selector = selector.strip()
    n = len(selector)
    tag = ''
    element_id = ''
    class_name = ''
    attributes: Dict[str, str] = {}
    pending = False
    yielded = False
    i = 0

    while i < n:
        char = selector[i]
        if char == ' ':
            if pending:
                yield SelectorComponent(tag.lower(), element_id, class_name, attributes)
                yielded = True
                tag, element_id, class_name, attributes = '', '', '', {}
                pending = False
            i += 1
            continue

        pending = True
        if char in '#.':
            end = selector.find(' ', i + 1)
            if end == -1:
                end = n
            if char == '#':
                element_id = selector[i + 1:end]
            else:
                class_name = selector[i + 1:end]
            i = end
        elif char == '[':
            close = selector.find(']', i + 1)
            space = selector.find(' ', i + 1)
            if close == -1 or (space != -1 and space < close):
                # Unterminated bracket: skip it up to the next space
                logger.debug(f"Skipping malformed attribute selector in '{selector}'")
                i = n if space == -1 else space
                continue
            _parse_attribute(selector[i + 1:close], attributes)
            i = close + 1
        else:
            tag += char
            i += 1

    if pending or not yielded:
        yield SelectorComponent(tag.lower(), element_id, class_name, attributes)


def parse_css_selector(selector: str) -> List[SelectorComponent]:
    """Parse a selector string into a list of components."""
    return list(iter_css_selector_components(selector))


def deduplicate(nodes: Sequence[Node]) -> List[Node]:
    """
    Remove repeated node identities, keeping the first occurrence.

    Args:
        nodes: Nodes in their current order

    Returns:
        A new list without duplicates
    """
    seen = set()
    result = []
    for node in nodes:
        if id(node) in seen:
            continue
        seen.add(id(node))
        result.append(node)
    return result


class SelectorEngine:
    """
    Selector matching for the tree model.

    Evaluation is a repeated descendant expansion: each component expands the
    current candidates to their matching descendants, then filters them.
    """

    def matches(self, element: Node, component: SelectorComponent) -> bool:
        """
        Check whether an element satisfies a single selector component.

        Args:
            element: The node to check
            component: The selector component

        Returns:
            True if the element matches, False otherwise
        """
        if element.node_type != NodeType.ELEMENT_NODE:
            return False

        if component.tag not in ('', '*') and element.local_name != component.tag:
            return False

        if component.id and element.get_attribute('id') != component.id:
            return False

        required = component.classes
        if required:
            present = set(element.class_list)
            if not all(cls in present for cls in required):
                return False

        for name, constraint in component.attributes.items():
            if not element.has_attribute(name):
                return False
            if constraint == '':
                continue
            if constraint[0] in ATTRIBUTE_MODIFIERS:
                # Modifier matching is not evaluated; presence is enough
                logger.warning(f"Attribute modifier '{constraint[0]}' on [{name}] is not supported, matching presence only")
                continue
            if element.get_attribute(name) != constraint:
                return False

        return True

    def filter(self, nodes: Sequence[Node], component: SelectorComponent) -> List[Node]:
        """Keep only the nodes matching ``component``, in order."""
        return [node for node in nodes if self.matches(node, component)]

    def expand(self, nodes: Sequence[Node], tag: str) -> List[Node]:
        """
        Collect the descendant elements of every node whose tag matches.

        Duplicates between nested starting nodes are kept.
        """
        result: List[Node] = []
        for node in nodes:
            if node.node_type == NodeType.ELEMENT_NODE:
                result.extend(node.get_elements_by_tag_name(tag or '*'))
        return result

    def select(self, nodes: Sequence[Node], selector: str) -> List[Node]:
        """
        Find all elements below ``nodes`` matching a selector.

        Args:
            nodes: Starting nodes
            selector: The selector string

        Returns:
            Deduplicated list of matching elements
        """
        candidates: List[Node] = list(nodes)
        for component in iter_css_selector_components(selector):
            candidates = self.filter(self.expand(candidates, component.tag), component)
            if not candidates:
                break
        logger.debug(f"Selector '{selector}' matched {len(candidates)} candidates")
        return deduplicate(candidates)
