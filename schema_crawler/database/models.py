"""
Data models for database schema representation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


class ReferentialAction(str, Enum):
    """Foreign key update/delete rules"""
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"
    SET_DEFAULT = "SET DEFAULT"


@dataclass(frozen=True)
class Column:
    """A table column in catalog ordinal order"""
    name: str
    data_type: str
    size: int = 0
    precision: int = 0
    scale: int = 0
    nullable: bool = True
    primary_key: bool = False
    auto_increment: bool = False
    default_value: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class ForeignKey:
    """One (constraint, column) pair of a foreign key"""
    name: str
    source_table: str
    source_column: str
    target_table: str
    target_column: str
    update_rule: ReferentialAction
    delete_rule: ReferentialAction


@dataclass(frozen=True)
class Index:
    """An index with its columns in position order"""
    name: str
    table_name: str
    column_names: Tuple[str, ...]
    unique: bool
    index_type: str


@dataclass(frozen=True)
class Table:
    """Complete metadata for one base table"""
    name: str
    comment: Optional[str] = None
    row_count: int = 0
    columns: Tuple[Column, ...] = field(default_factory=tuple)
    foreign_keys: Tuple[ForeignKey, ...] = field(default_factory=tuple)
    primary_keys: Tuple[str, ...] = field(default_factory=tuple)
    indexes: Tuple[Index, ...] = field(default_factory=tuple)


EXPRESSION_KEY_PART = "<expression>"


# Row decoders. Catalog rows arrive as mappings keyed by lower-case aliases.

def _required_str(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None or value == '':
        raise ValueError(f"Catalog row is missing '{key}'")
    return str(value)


def _optional_str(row: Mapping[str, Any], key: str) -> Optional[str]:
    value = row.get(key)
    return None if value is None else str(value)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    return int(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() not in ('', '0')
    return bool(value)


def _as_action(row: Mapping[str, Any], key: str) -> ReferentialAction:
    value = _required_str(row, key).upper()
    try:
        return ReferentialAction(value)
    except ValueError:
        raise ValueError(f"Unknown referential action '{value}' in '{key}'")


def column_from_row(row: Mapping[str, Any]) -> Column:
    """Decode an INFORMATION_SCHEMA.COLUMNS row"""
    extra = (row.get('extra') or '').lower()
    return Column(
        name=_required_str(row, 'column_name'),
        data_type=_required_str(row, 'data_type'),
        size=_as_int(row.get('character_maximum_length')),
        precision=_as_int(row.get('numeric_precision')),
        scale=_as_int(row.get('numeric_scale')),
        nullable=row.get('is_nullable') == 'YES',
        primary_key=row.get('column_key') == 'PRI',
        auto_increment='auto_increment' in extra,
        default_value=_optional_str(row, 'column_default'),
        comment=_optional_str(row, 'column_comment')
    )


def foreign_key_from_row(table_name: str, row: Mapping[str, Any]) -> ForeignKey:
    """Decode a KEY_COLUMN_USAGE row joined with REFERENTIAL_CONSTRAINTS"""
    return ForeignKey(
        name=_required_str(row, 'constraint_name'),
        source_table=table_name,
        source_column=_required_str(row, 'column_name'),
        target_table=_required_str(row, 'referenced_table_name'),
        target_column=_required_str(row, 'referenced_column_name'),
        update_rule=_as_action(row, 'update_rule'),
        delete_rule=_as_action(row, 'delete_rule')
    )


def merge_index_rows(table_name: str, rows: Iterable[Mapping[str, Any]]) -> List[Index]:
    """
    Merge INFORMATION_SCHEMA.STATISTICS rows into one Index per name.

    Rows are expected ordered by index name then position within the index.
    Uniqueness and type come from the first row seen for each index, and the
    result keeps first-seen order. Expression key parts keep their position
    as EXPRESSION_KEY_PART.
    """
    pending: Dict[str, Dict[str, Any]] = {}

    for row in rows:
        index_name = _required_str(row, 'index_name')
        entry = pending.get(index_name)
        if entry is None:
            entry = {
                'unique': not _as_bool(row.get('non_unique')),
                'index_type': _optional_str(row, 'index_type') or '',
                'column_names': []
            }
            pending[index_name] = entry
        # Functional key parts have no column name
        entry['column_names'].append(_optional_str(row, 'column_name') or EXPRESSION_KEY_PART)

    return [
        Index(
            name=index_name,
            table_name=table_name,
            column_names=tuple(entry['column_names']),
            unique=entry['unique'],
            index_type=entry['index_type']
        )
        for index_name, entry in pending.items()
    ]
