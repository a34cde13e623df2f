from collections import Counter
from contextlib import contextmanager

import pytest

from schema_crawler.database import DatabaseAdapter, TableNotFoundError
from schema_crawler.database.models import (
    Column, ForeignKey, Index, ReferentialAction
)


class FakeAdapter(DatabaseAdapter):
    """In-memory catalog that counts every metadata query"""

    def __init__(self, tables):
        self.tables = tables
        self.calls = Counter()
        self.scopes = 0
        self.fail_on = None

    @contextmanager
    def read_only_scope(self):
        self.scopes += 1
        yield None

    def _record(self, operation, table_name=None):
        self.calls[operation] += 1
        if self.fail_on == operation:
            raise RuntimeError(f"connection lost during {operation}")
        if table_name is not None and table_name not in self.tables:
            raise TableNotFoundError(table_name)
        return self.tables.get(table_name)

    def list_table_names(self):
        self._record('list_table_names')
        return sorted(self.tables)

    def get_table_comment(self, table_name):
        return self._record('get_table_comment', table_name)['comment']

    def get_columns(self, table_name):
        return list(self._record('get_columns', table_name)['columns'])

    def get_primary_keys(self, table_name):
        return list(self._record('get_primary_keys', table_name)['primary_keys'])

    def get_foreign_keys(self, table_name):
        return list(self._record('get_foreign_keys', table_name)['foreign_keys'])

    def get_indexes(self, table_name):
        return list(self._record('get_indexes', table_name)['indexes'])

    def get_row_count(self, table_name):
        return self._record('get_row_count', table_name)['row_count']

    def total_calls(self):
        return sum(self.calls.values())


def users_orders_catalog():
    return {
        'users': {
            'comment': 'Registered users',
            'columns': [
                Column(name='id', data_type='int', precision=10, nullable=False,
                       primary_key=True, auto_increment=True),
                Column(name='email', data_type='varchar', size=255, nullable=False),
            ],
            'primary_keys': ['id'],
            'foreign_keys': [],
            'indexes': [
                Index(name='PRIMARY', table_name='users', column_names=('id',),
                      unique=True, index_type='BTREE'),
                Index(name='idx_email', table_name='users', column_names=('email',),
                      unique=True, index_type='BTREE'),
            ],
            'row_count': 2,
        },
        'orders': {
            'comment': '',
            'columns': [
                Column(name='id', data_type='int', precision=10, nullable=False,
                       primary_key=True, auto_increment=True),
                Column(name='user_id', data_type='int', precision=10, nullable=False),
            ],
            'primary_keys': ['id'],
            'foreign_keys': [
                ForeignKey(name='fk_orders_user', source_table='orders', source_column='user_id',
                           target_table='users', target_column='id',
                           update_rule=ReferentialAction.NO_ACTION,
                           delete_rule=ReferentialAction.CASCADE),
            ],
            'indexes': [
                Index(name='PRIMARY', table_name='orders', column_names=('id',),
                      unique=True, index_type='BTREE'),
                Index(name='fk_orders_user', table_name='orders', column_names=('user_id',),
                      unique=False, index_type='BTREE'),
            ],
            'row_count': 5,
        },
    }


@pytest.fixture
def fake_adapter():
    return FakeAdapter(users_orders_catalog())
