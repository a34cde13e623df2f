"""
Database factory for creating the catalog adapter
"""

from typing import Dict, Any, List
from .adapters import DatabaseAdapter, MySQLAdapter


class DatabaseFactory:
    """Factory class to create the database adapter"""

    @staticmethod
    def create_connector(db_type: str, config: Dict[str, Any]) -> DatabaseAdapter:
        """Create database adapter based on type"""
        if db_type.lower() not in DatabaseFactory.get_supported_types():
            raise ValueError(f"Unsupported database type: {db_type}")

        missing = [key for key in DatabaseFactory.get_required_config(db_type) if not config.get(key)]
        if missing:
            raise ValueError(f"Missing configuration for {db_type}: {', '.join(missing)}")

        return MySQLAdapter(config)

    @staticmethod
    def get_supported_types() -> List[str]:
        return ['mysql']

    @staticmethod
    def get_required_config(db_type: str) -> List[str]:
        """Get required configuration keys for database type"""
        configs = {
            'mysql': ['host', 'user', 'database']
        }
        return configs.get(db_type.lower(), [])
