"""
Writer options.
This module defines the options object that controls how the Writer renders a tree.
"""

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, Optional

# Tags removed together with their whole subtree in safety mode
DEFAULT_DANGEROUS_TAGS = frozenset({
    'script', 'style', 'iframe', 'frame', 'frameset', 'object', 'embed', 'applet',
})

# Tags kept in safety mode; everything else is unwrapped
DEFAULT_ALLOWED_TAGS = frozenset({
    'a', 'b', 'i', 'u', 'em', 'strong', 'p', 'br', 'span', 'code', 'pre',
    'blockquote', 'ul', 'ol', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'hr', 'img', 'input',
})


def _tag_set(tags: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    if tags is None:
        return None
    if isinstance(tags, str):
        tags = [tags]
    return frozenset(tag.lower() for tag in tags)


@dataclass(frozen=True)
class WriterOptions:
    """
    Options for the Writer.

    ``strip_tags`` of None disables stripping; ``allowed_tags`` of None
    allows every tag.
    """
    reformat: bool = True
    xhtml: bool = False
    encode_entities: bool = True
    strip_tags: Optional[FrozenSet[str]] = None
    allowed_tags: Optional[FrozenSet[str]] = None
    indent: str = '    '

    def __post_init__(self):
        # Normalize any iterable of tag names to a lowercase frozenset
        object.__setattr__(self, 'strip_tags', _tag_set(self.strip_tags))
        object.__setattr__(self, 'allowed_tags', _tag_set(self.allowed_tags))

    @property
    def line_break(self) -> str:
        return '\n' if self.reformat else ''

    @property
    def is_safe(self) -> bool:
        """True when stripping, allow-listing and entity encoding are all active."""
        return self.strip_tags is not None and self.allowed_tags is not None and self.encode_entities

    @classmethod
    def safe(cls,
             dangerous_tags: Iterable[str] = DEFAULT_DANGEROUS_TAGS,
             allowed_tags: Iterable[str] = DEFAULT_ALLOWED_TAGS,
             **kwargs) -> 'WriterOptions':
        """
        Build the safety-mode preset.

        Args:
            dangerous_tags: Tags removed with their content
            allowed_tags: Tags kept; all others are unwrapped
            **kwargs: Any other option (reformat, xhtml, indent)

        Returns:
            WriterOptions with stripping, allow-listing and entity encoding enabled
        """
        kwargs['encode_entities'] = True
        return cls(strip_tags=dangerous_tags, allowed_tags=allowed_tags, **kwargs)

    @classmethod
    def from_config(cls, config: 'Config') -> 'WriterOptions':
        """
        Build writer options from the ``writer.*`` section of a Config.

        Args:
            config: The configuration store

        Returns:
            WriterOptions; safety mode when ``writer.safe`` is true
        """
        base = dict(
            reformat=bool(config.get('writer.reformat', True)),
            xhtml=bool(config.get('writer.xhtml', False)),
            encode_entities=bool(config.get('writer.encode_entities', True)),
            indent=str(config.get('writer.indent', '    ')),
        )
        if config.get('writer.safe', False):
            return cls.safe(
                dangerous_tags=config.get('writer.dangerous_tags', DEFAULT_DANGEROUS_TAGS),
                allowed_tags=config.get('writer.allowed_tags', DEFAULT_ALLOWED_TAGS),
                **base,
            )
        return cls(**base)

    def with_changes(self, **changes) -> 'WriterOptions':
        """Return a copy with some options replaced."""
        return replace(self, **changes)
