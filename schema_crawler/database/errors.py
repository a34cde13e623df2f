"""
Error taxonomy for schema crawling
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of crawl failure the HTTP layer tells apart"""
    NOT_FOUND = "not_found"
    CRAWL_FAILED = "crawl_failed"


class SchemaCrawlerError(Exception):
    """Base class for all crawl failures"""

    kind = ErrorKind.CRAWL_FAILED

    def __init__(self, message: str, table_name: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.table_name = table_name
        self.cause = cause


class TableNotFoundError(SchemaCrawlerError):
    """The requested table does not exist in the catalog"""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, table_name: str):
        super().__init__(f"Table not found: {table_name}", table_name=table_name)


class CrawlError(SchemaCrawlerError):
    """Metadata retrieval or assembly failed"""

    kind = ErrorKind.CRAWL_FAILED
