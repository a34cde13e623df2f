"""
Utility functions and helper classes
"""

from .logger import setup_logger, configure_logging
from .schema_cache import SchemaCache

__all__ = [
    'setup_logger',
    'configure_logging',
    'SchemaCache'
]
