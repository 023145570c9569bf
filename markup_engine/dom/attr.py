"""
Named attribute values owned by an Element.
"""

from typing import Optional

class Attr:
    """
    One attribute of an element.

    The name is stored lowercased. An empty value marks a boolean-style
    attribute such as ``checked``.
    """

    def __init__(self, name: str, value: str, owner_element: Optional['Element'] = None):
        self.name = name.lower()
        self.value = "" if value is None else str(value)
        self.owner_element = owner_element

    @property
    def is_boolean(self) -> bool:
        return self.value == ""

    def __repr__(self) -> str:
        return f"Attr({self.name!r}, {self.value!r})"
