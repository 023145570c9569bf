"""
Markdown compiler.
"""

from .compiler import MarkdownCompiler, compile_markdown
from .inline import convert_styled_text

__all__ = ['MarkdownCompiler', 'compile_markdown', 'convert_styled_text']
