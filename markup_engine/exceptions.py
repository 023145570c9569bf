"""
Exceptions for the markup engine.

This module defines the error taxonomy shared by the tree model, the element
collection API, the external parser bridge and the writer.
"""


class MarkupEngineError(Exception):
    """Base exception for all markup engine errors."""
    pass


class InvalidInput(MarkupEngineError, TypeError):
    """Exception raised when a value of an unsupported kind is supplied."""
    pass


class MalformedMarkup(MarkupEngineError, ValueError):
    """Exception raised when the markup parser could not produce a usable tree."""
    pass


class DetachedNodeAccess(MarkupEngineError):
    """Exception raised when a collection member has been removed from its document."""
    pass


class OutOfRange(MarkupEngineError, IndexError):
    """Exception raised when a collection index is beyond its bounds."""
    pass


class NotSupported(MarkupEngineError, NotImplementedError):
    """Exception raised for operations that are intentionally left unimplemented."""
    pass


__all__ = [
    'MarkupEngineError',
    'InvalidInput',
    'MalformedMarkup',
    'DetachedNodeAccess',
    'OutOfRange',
    'NotSupported',
]
