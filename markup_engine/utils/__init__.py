"""
Utility modules for the markup engine.
"""

# Import key utilities for easy access
from .config import Config
from .logging import setup_logging, log_exception
