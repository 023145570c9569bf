"""
HTML Writer and its options.
"""

from .options import WriterOptions
from .writer import Writer, render

__all__ = ['Writer', 'WriterOptions', 'render']
