"""
In-process cache of crawled schema metadata
"""

import threading
from typing import Dict, List, Optional, Any

from ..database.models import Table


class SchemaCache:
    """
    Thread-safe memo of crawl results.

    The full table list and individual tables live in separate namespaces,
    so a table can never shadow the all-tables entry. Entries stay valid
    until invalidated or the process restarts.

    Every invalidation bumps a generation counter. Writers pass the
    generation they read before crawling, and writes from an older
    generation are dropped so a crawl that straddles an invalidation
    cannot restore stale metadata.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._generation = 0
        self._schema: Optional[List[Table]] = None
        self._tables: Dict[str, Table] = {}

    def generation(self) -> int:
        with self._lock:
            return self._generation

    def _is_stale(self, generation: Optional[int]) -> bool:
        return generation is not None and generation != self._generation

    def get_schema(self) -> Optional[List[Table]]:
        with self._lock:
            return list(self._schema) if self._schema is not None else None

    def put_schema(self, tables: List[Table], generation: Optional[int] = None) -> bool:
        with self._lock:
            if self._is_stale(generation):
                return False
            self._schema = list(tables)
            for table in tables:
                self._tables[table.name] = table
            return True

    def get_table(self, table_name: str) -> Optional[Table]:
        with self._lock:
            return self._tables.get(table_name)

    def put_table(self, table: Table, generation: Optional[int] = None) -> bool:
        with self._lock:
            if self._is_stale(generation):
                return False
            self._tables[table.name] = table
            return True

    def invalidate(self, table_name: Optional[str] = None):
        """Drop one table (and the full list containing it) or everything"""
        with self._lock:
            self._generation += 1
            if table_name is None:
                self._schema = None
                self._tables.clear()
                return
            self._tables.pop(table_name, None)
            self._schema = None

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'schema_cached': self._schema is not None,
                'cached_tables': len(self._tables),
                'generation': self._generation
            }
