#!/usr/bin/env python3
"""
Tests for catalog row decoding
"""

import pytest

from schema_crawler.database.models import (
    EXPRESSION_KEY_PART, ReferentialAction, column_from_row, foreign_key_from_row, merge_index_rows
)


def column_row(**overrides):
    row = {
        'column_name': 'email',
        'data_type': 'varchar',
        'character_maximum_length': 255,
        'numeric_precision': None,
        'numeric_scale': None,
        'is_nullable': 'NO',
        'column_default': None,
        'column_comment': 'login address',
        'extra': '',
        'column_key': 'UNI'
    }
    row.update(overrides)
    return row


def test_column_from_row_defaults_missing_numbers():
    column = column_from_row(column_row())

    assert column.name == 'email'
    assert column.data_type == 'varchar'
    assert column.size == 255
    assert column.precision == 0
    assert column.scale == 0
    assert column.nullable is False
    assert column.primary_key is False
    assert column.auto_increment is False
    assert column.default_value is None
    assert column.comment == 'login address'


def test_column_from_row_flags():
    column = column_from_row(column_row(
        column_name='id', data_type='bigint', character_maximum_length=None,
        numeric_precision=19, numeric_scale=0, is_nullable='YES',
        extra='auto_increment', column_key='PRI'
    ))

    assert column.nullable is True
    assert column.primary_key is True
    assert column.auto_increment is True
    assert column.precision == 19


def test_auto_increment_marker_inside_extra_attributes():
    column = column_from_row(column_row(extra='AUTO_INCREMENT INVISIBLE'))
    assert column.auto_increment is True

    column = column_from_row(column_row(extra='DEFAULT_GENERATED'))
    assert column.auto_increment is False


def test_column_from_row_rejects_missing_name():
    with pytest.raises(ValueError):
        column_from_row(column_row(column_name=None))


def test_foreign_key_from_row():
    fk = foreign_key_from_row('orders', {
        'constraint_name': 'fk_orders_user',
        'column_name': 'user_id',
        'referenced_table_name': 'users',
        'referenced_column_name': 'id',
        'update_rule': 'NO ACTION',
        'delete_rule': 'set null'
    })

    assert fk.source_table == 'orders'
    assert fk.source_column == 'user_id'
    assert fk.target_table == 'users'
    assert fk.target_column == 'id'
    assert fk.update_rule is ReferentialAction.NO_ACTION
    assert fk.delete_rule is ReferentialAction.SET_NULL


def test_foreign_key_unknown_rule_is_malformed():
    with pytest.raises(ValueError):
        foreign_key_from_row('orders', {
            'constraint_name': 'fk', 'column_name': 'a', 'referenced_table_name': 'b',
            'referenced_column_name': 'c', 'update_rule': 'EXPLODE', 'delete_rule': 'CASCADE'
        })


def test_composite_index_keeps_declared_column_order():
    rows = [
        {'index_name': 'idx_name', 'column_name': 'last_name', 'non_unique': 1,
         'index_type': 'BTREE', 'seq_in_index': 1},
        {'index_name': 'idx_name', 'column_name': 'first_name', 'non_unique': 1,
         'index_type': 'BTREE', 'seq_in_index': 2},
    ]

    indexes = merge_index_rows('people', rows)

    assert len(indexes) == 1
    assert indexes[0].column_names == ('last_name', 'first_name')
    assert indexes[0].unique is False
    assert indexes[0].table_name == 'people'


def test_index_uniqueness_and_type_come_from_first_row():
    rows = [
        {'index_name': 'PRIMARY', 'column_name': 'a', 'non_unique': 0, 'index_type': 'BTREE'},
        {'index_name': 'PRIMARY', 'column_name': 'b', 'non_unique': 1, 'index_type': 'HASH'},
        {'index_name': 'idx_c', 'column_name': 'c', 'non_unique': '1', 'index_type': 'HASH'},
    ]

    primary, idx_c = merge_index_rows('t', rows)

    assert primary.name == 'PRIMARY'
    assert primary.unique is True
    assert primary.index_type == 'BTREE'
    assert primary.column_names == ('a', 'b')
    assert idx_c.unique is False
    assert idx_c.index_type == 'HASH'


def test_unique_email_index():
    indexes = merge_index_rows('users', [
        {'index_name': 'idx_email', 'column_name': 'email', 'non_unique': 0, 'index_type': 'BTREE'}
    ])

    assert [(i.name, i.column_names, i.unique) for i in indexes] == [('idx_email', ('email',), True)]


def test_expression_key_part_keeps_index():
    rows = [
        {'index_name': 'PRIMARY', 'column_name': 'id', 'non_unique': 0, 'index_type': 'BTREE'},
        {'index_name': 'idx_lower_email', 'column_name': None, 'non_unique': 1,
         'index_type': 'BTREE', 'seq_in_index': 1},
        {'index_name': 'idx_lower_email', 'column_name': 'tenant_id', 'non_unique': 1,
         'index_type': 'BTREE', 'seq_in_index': 2},
    ]

    primary, functional = merge_index_rows('users', rows)

    assert primary.column_names == ('id',)
    assert functional.name == 'idx_lower_email'
    assert functional.column_names == (EXPRESSION_KEY_PART, 'tenant_id')
    assert functional.unique is False
    assert functional.index_type == 'BTREE'
