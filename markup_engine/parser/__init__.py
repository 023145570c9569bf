"""
Bridge to the external HTML parsers (html5lib and Beautiful Soup).
"""

from .html_parser import HTMLParser, configure_parser, get_parser

__all__ = ['HTMLParser', 'configure_parser', 'get_parser']
