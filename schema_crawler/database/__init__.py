"""
Database adapters and schema models
"""

from .models import Table, Column, ForeignKey, Index, ReferentialAction
from .errors import ErrorKind, SchemaCrawlerError, TableNotFoundError, CrawlError
from .adapters import DatabaseAdapter, MySQLAdapter
from .factory import DatabaseFactory

__all__ = [
    'Table',
    'Column',
    'ForeignKey',
    'Index',
    'ReferentialAction',
    'ErrorKind',
    'SchemaCrawlerError',
    'TableNotFoundError',
    'CrawlError',
    'DatabaseAdapter',
    'MySQLAdapter',
    'DatabaseFactory'
]
