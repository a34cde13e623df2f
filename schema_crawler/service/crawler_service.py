"""
Schema crawler service assembling tables from catalog metadata
"""

from dataclasses import replace
from typing import Dict, List, Optional, Any, Tuple

from ..database.adapters import DatabaseAdapter
from ..database.errors import CrawlError, SchemaCrawlerError, TableNotFoundError
from ..database.models import Column, Table
from ..utils.logger import setup_logger
from ..utils.schema_cache import SchemaCache

logger = setup_logger(__name__)


class SchemaCrawlerService:
    """Crawl tables through an adapter and memoize the results"""

    def __init__(self, adapter: DatabaseAdapter, cache: Optional[SchemaCache] = None):
        self.adapter = adapter
        self.cache = cache if cache is not None else SchemaCache()

    def crawl_schema(self) -> List[Table]:
        """Crawl every base table in name order"""
        cached = self.cache.get_schema()
        if cached is not None:
            return cached

        generation = self.cache.generation()
        logger.info("Starting schema crawl")
        try:
            with self.adapter.read_only_scope():
                tables = [self._crawl_uncached(name) for name in self.adapter.list_table_names()]
        except Exception as e:
            logger.error(f"Error during schema crawl: {e}", exc_info=True)
            raise CrawlError("Failed to crawl database schema", cause=e) from e

        if not self.cache.put_schema(tables, generation):
            logger.info("Schema cache was invalidated during the crawl; result not cached")
        logger.info(f"Schema crawl completed successfully. Found {len(tables)} tables.")
        return tables

    def crawl_table(self, table_name: str) -> Table:
        """Crawl a single table, raising TableNotFoundError if it does not exist"""
        cached = self.cache.get_table(table_name)
        if cached is not None:
            return cached

        generation = self.cache.generation()
        try:
            with self.adapter.read_only_scope():
                table = self._crawl_uncached(table_name)
        except TableNotFoundError:
            logger.warning(f"Table not found: {table_name}")
            raise
        except SchemaCrawlerError:
            raise
        except Exception as e:
            logger.error(f"Error crawling table {table_name}: {e}", exc_info=True)
            raise CrawlError(f"Failed to crawl table: {table_name}", table_name=table_name, cause=e) from e

        if not self.cache.put_table(table, generation):
            logger.info(f"Schema cache was invalidated while crawling {table_name}; result not cached")
        return table

    def get_columns(self, table_name: str) -> List[Column]:
        return list(self.crawl_table(table_name).columns)

    def invalidate(self, table_name: Optional[str] = None):
        """Forget cached results so the next request crawls again"""
        self.cache.invalidate(table_name)
        if table_name is None:
            logger.info("Schema cache cleared")
        else:
            logger.info(f"Schema cache cleared for table {table_name}")

    def cache_info(self) -> Dict[str, Any]:
        return self.cache.stats()

    def _crawl_uncached(self, table_name: str) -> Table:
        logger.debug(f"Crawling table: {table_name}")

        # The comment lookup doubles as the existence check
        comment = self.adapter.get_table_comment(table_name)
        columns = self.adapter.get_columns(table_name)
        primary_keys = self.adapter.get_primary_keys(table_name)
        foreign_keys = self.adapter.get_foreign_keys(table_name)
        indexes = self.adapter.get_indexes(table_name)
        row_count = self.adapter.get_row_count(table_name)

        columns, primary_keys = reconcile_primary_keys(table_name, columns, primary_keys)

        return Table(
            name=table_name,
            comment=comment,
            row_count=row_count,
            columns=tuple(columns),
            foreign_keys=tuple(foreign_keys),
            primary_keys=tuple(primary_keys),
            indexes=tuple(indexes)
        )


def reconcile_primary_keys(table_name: str, columns: List[Column],
                           primary_keys: List[str]) -> Tuple[List[Column], List[str]]:
    """
    Align column-level primary key flags with the constraint column list.

    The constraint list is authoritative since it carries composite key
    order. Names the table has no column for are dropped.
    """
    column_names = {column.name for column in columns}
    keys = [name for name in primary_keys if name in column_names]
    if len(keys) != len(primary_keys):
        logger.warning(f"Primary key of {table_name} names unknown columns: "
                       f"{[name for name in primary_keys if name not in column_names]}")

    key_set = set(keys)
    flagged = {column.name for column in columns if column.primary_key}
    if flagged != key_set:
        logger.warning(f"Primary key flags of {table_name} disagree with constraint: "
                       f"flagged={sorted(flagged)} constraint={keys}")
        columns = [replace(column, primary_key=column.name in key_set) for column in columns]

    return list(columns), keys
