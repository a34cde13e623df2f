"""
Interactive console for browsing database schema metadata
"""

from typing import Optional

from ..config import get_database_config, get_db_type, get_server_config
from ..database import DatabaseFactory, SchemaCrawlerError, Table
from ..service import SchemaCrawlerService
from ..utils.logger import configure_logging


def _print_table(table: Table):
    print(f"\n📋 Schema for {table.name}:")
    if table.comment:
        print(f"Comment: {table.comment}")
    print(f"Rows: {table.row_count}")
    print(f"Primary key: {', '.join(table.primary_keys) or '-'}")
    print("\nColumns:")
    for col in table.columns:
        _print_column(col)
    if table.foreign_keys:
        print("\nForeign Keys:")
        for fk in table.foreign_keys:
            print(f"  - {fk.name}: {fk.source_column} -> {fk.target_table}.{fk.target_column} "
                  f"(ON UPDATE {fk.update_rule.value}, ON DELETE {fk.delete_rule.value})")


def _print_column(col):
    flags = []
    if col.primary_key:
        flags.append('PK')
    if col.auto_increment:
        flags.append('AUTO_INCREMENT')
    suffix = f" [{', '.join(flags)}]" if flags else ""
    print(f"  - {col.name}: {col.data_type} {'NULL' if col.nullable else 'NOT NULL'}{suffix}")


def _print_indexes(table: Table):
    print(f"\n🔑 Indexes of {table.name}:")
    if not table.indexes:
        print("  (none)")
    for idx in table.indexes:
        kind = 'UNIQUE ' if idx.unique else ''
        print(f"  - {idx.name}: {kind}{idx.index_type} ({', '.join(idx.column_names)})")


def main(service: Optional[SchemaCrawlerService] = None):
    """Interactive schema browser"""
    print("""
    ╔══════════════════════════════════════════════════════════╗
    ║              🗄️  Database Schema Crawler 🗄️               ║
    ╚══════════════════════════════════════════════════════════╝
    """)

    if service is None:
        configure_logging(get_server_config()['log_level'])
        try:
            adapter = DatabaseFactory.create_connector(get_db_type(), get_database_config())
        except ValueError as e:
            print(f"❌ {e}")
            print("Failed to connect to database. Please check your configuration.")
            return
        service = SchemaCrawlerService(adapter)

    print("\n" + "="*60)
    print("💡 Commands:")
    print("  - 'TABLES' - List tables")
    print("  - 'SCHEMA <table>' - Show table schema")
    print("  - 'COLUMNS <table>' - Show table columns")
    print("  - 'INDEXES <table>' - Show table indexes")
    print("  - 'REFRESH [table]' - Clear cached metadata")
    print("  - 'EXIT' - Exit the browser")
    print("="*60)

    while True:
        try:
            user_input = input("\n💬 Command: ").strip()

            if not user_input:
                continue

            parts = user_input.split()
            command = parts[0].upper()
            argument = parts[1] if len(parts) > 1 else None

            if command == 'EXIT':
                print("\n👋 Goodbye!")
                break

            elif command == 'TABLES':
                tables = service.crawl_schema()
                print(f"\n📊 Found {len(tables)} tables")
                for i, table in enumerate(tables, 1):
                    print(f"  {i}. {table.name} ({table.row_count} rows, {len(table.columns)} columns)")

            elif command in ('SCHEMA', 'COLUMNS', 'INDEXES'):
                if argument is None:
                    print(f"Usage: {command} <table_name>")
                    continue
                table = service.crawl_table(argument)
                if command == 'SCHEMA':
                    _print_table(table)
                elif command == 'COLUMNS':
                    print(f"\n📋 Columns of {table.name}:")
                    for col in table.columns:
                        _print_column(col)
                else:
                    _print_indexes(table)

            elif command == 'REFRESH':
                service.invalidate(argument)
                print("🗑️ Cache cleared")

            else:
                print(f"Unknown command: {parts[0]}")

        except KeyboardInterrupt:
            print("\n\n👋 Session interrupted. Goodbye!")
            break
        except SchemaCrawlerError as e:
            print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    main()
