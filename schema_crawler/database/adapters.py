"""
Database adapters reading schema metadata from the catalog
"""

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine

from .errors import TableNotFoundError
from .models import Column, ForeignKey, Index, column_from_row, foreign_key_from_row, merge_index_rows
from ..utils.logger import setup_logger

logger = setup_logger(__name__)


class DatabaseAdapter(ABC):
    """Abstract base class for catalog metadata readers"""

    @contextmanager
    def read_only_scope(self) -> Iterator[Any]:
        """Group several reads into one consistent view"""
        yield None

    @abstractmethod
    def list_table_names(self) -> List[str]:
        """Base table names, alphabetical"""
        pass

    @abstractmethod
    def get_table_comment(self, table_name: str) -> Optional[str]:
        """Table comment; raises TableNotFoundError for unknown tables"""
        pass

    @abstractmethod
    def get_columns(self, table_name: str) -> List[Column]:
        """Columns in ordinal order"""
        pass

    @abstractmethod
    def get_primary_keys(self, table_name: str) -> List[str]:
        """Primary key columns in constraint order"""
        pass

    @abstractmethod
    def get_foreign_keys(self, table_name: str) -> List[ForeignKey]:
        """One entry per foreign key (constraint, column) pair"""
        pass

    @abstractmethod
    def get_indexes(self, table_name: str) -> List[Index]:
        """Indexes with their columns merged"""
        pass

    @abstractmethod
    def get_row_count(self, table_name: str) -> int:
        """Exact row count"""
        pass

    def close(self):
        pass


class MySQLAdapter(DatabaseAdapter):
    """MySQL adapter querying INFORMATION_SCHEMA of the connected database"""

    TABLE_NAMES_SQL = """
        SELECT TABLE_NAME AS table_name
        FROM INFORMATION_SCHEMA.TABLES
        WHERE TABLE_SCHEMA = DATABASE()
        AND TABLE_TYPE = 'BASE TABLE'
        ORDER BY TABLE_NAME
    """

    TABLE_COMMENT_SQL = """
        SELECT TABLE_COMMENT AS table_comment
        FROM INFORMATION_SCHEMA.TABLES
        WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = :table_name
    """

    COLUMNS_SQL = """
        SELECT
            COLUMN_NAME AS column_name,
            DATA_TYPE AS data_type,
            CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
            NUMERIC_PRECISION AS numeric_precision,
            NUMERIC_SCALE AS numeric_scale,
            IS_NULLABLE AS is_nullable,
            COLUMN_DEFAULT AS column_default,
            COLUMN_COMMENT AS column_comment,
            EXTRA AS extra,
            COLUMN_KEY AS column_key
        FROM INFORMATION_SCHEMA.COLUMNS
        WHERE TABLE_SCHEMA = DATABASE()
        AND TABLE_NAME = :table_name
        ORDER BY ORDINAL_POSITION
    """

    PRIMARY_KEYS_SQL = """
        SELECT COLUMN_NAME AS column_name
        FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE
        WHERE TABLE_SCHEMA = DATABASE()
        AND TABLE_NAME = :table_name
        AND CONSTRAINT_NAME = 'PRIMARY'
        ORDER BY ORDINAL_POSITION
    """

    FOREIGN_KEYS_SQL = """
        SELECT
            k.CONSTRAINT_NAME AS constraint_name,
            k.COLUMN_NAME AS column_name,
            k.REFERENCED_TABLE_NAME AS referenced_table_name,
            k.REFERENCED_COLUMN_NAME AS referenced_column_name,
            r.UPDATE_RULE AS update_rule,
            r.DELETE_RULE AS delete_rule
        FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE k
        JOIN INFORMATION_SCHEMA.REFERENTIAL_CONSTRAINTS r
            ON k.CONSTRAINT_NAME = r.CONSTRAINT_NAME
            AND k.TABLE_SCHEMA = r.CONSTRAINT_SCHEMA
            AND k.TABLE_NAME = r.TABLE_NAME
        WHERE k.TABLE_SCHEMA = DATABASE()
        AND k.TABLE_NAME = :table_name
        AND k.REFERENCED_TABLE_NAME IS NOT NULL
        ORDER BY k.CONSTRAINT_NAME, k.ORDINAL_POSITION
    """

    INDEXES_SQL = """
        SELECT
            INDEX_NAME AS index_name,
            COLUMN_NAME AS column_name,
            NON_UNIQUE AS non_unique,
            INDEX_TYPE AS index_type,
            SEQ_IN_INDEX AS seq_in_index
        FROM INFORMATION_SCHEMA.STATISTICS
        WHERE TABLE_SCHEMA = DATABASE()
        AND TABLE_NAME = :table_name
        ORDER BY INDEX_NAME, SEQ_IN_INDEX
    """

    def __init__(self, config: Dict[str, Any], engine: Optional[Engine] = None):
        self.config = config
        self.engine = engine
        self._local = threading.local()

    def connect(self) -> Engine:
        """Create the connection pool"""
        if self.engine is None:
            url = URL.create(
                "mysql+pymysql",
                username=self.config['user'],
                password=self.config.get('password') or None,
                host=self.config['host'],
                port=int(self.config.get('port', 3306)),
                database=self.config['database']
            )
            self.engine = create_engine(url, pool_pre_ping=True)
            logger.info(f"Connected to MySQL database {self.config['database']} at {self.config['host']}")
        return self.engine

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    @contextmanager
    def read_only_scope(self) -> Iterator[Connection]:
        """
        Run the enclosed reads in one read-only transaction.

        Scopes nest per thread: an inner scope reuses the connection of the
        outer one. The transaction is always rolled back on exit.
        """
        active = getattr(self._local, 'connection', None)
        if active is not None:
            yield active
            return

        with self.connect().connect() as connection:
            connection.exec_driver_sql("SET TRANSACTION READ ONLY")
            self._local.connection = connection
            try:
                yield connection
            finally:
                self._local.connection = None
                # A failed rollback must not mask the error that ended the scope
                try:
                    connection.rollback()
                except Exception as e:
                    logger.warning(f"Rollback of read-only transaction failed: {e}")

    def _fetch_all(self, sql: str, **params) -> List[Mapping[str, Any]]:
        with self.read_only_scope() as connection:
            return list(connection.execute(text(sql), params).mappings())

    def list_table_names(self) -> List[str]:
        return [row['table_name'] for row in self._fetch_all(self.TABLE_NAMES_SQL)]

    def get_table_comment(self, table_name: str) -> Optional[str]:
        rows = self._fetch_all(self.TABLE_COMMENT_SQL, table_name=table_name)
        if not rows:
            raise TableNotFoundError(table_name)
        return rows[0]['table_comment']

    def get_columns(self, table_name: str) -> List[Column]:
        rows = self._fetch_all(self.COLUMNS_SQL, table_name=table_name)
        return [column_from_row(row) for row in rows]

    def get_primary_keys(self, table_name: str) -> List[str]:
        rows = self._fetch_all(self.PRIMARY_KEYS_SQL, table_name=table_name)
        return [row['column_name'] for row in rows]

    def get_foreign_keys(self, table_name: str) -> List[ForeignKey]:
        rows = self._fetch_all(self.FOREIGN_KEYS_SQL, table_name=table_name)
        return [foreign_key_from_row(table_name, row) for row in rows]

    def get_indexes(self, table_name: str) -> List[Index]:
        rows = self._fetch_all(self.INDEXES_SQL, table_name=table_name)
        return merge_index_rows(table_name, rows)

    def get_row_count(self, table_name: str) -> int:
        # Identifiers cannot be bound; callers pass names confirmed by the catalog
        # Colons would otherwise be parsed as bind parameters
        identifier = quote_identifier(table_name).replace(":", "\\:")
        rows = self._fetch_all(f"SELECT COUNT(*) AS row_count FROM {identifier}")
        return int(rows[0]['row_count'])


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier"""
    return "`" + name.replace("`", "``") + "`"
