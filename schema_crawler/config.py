"""
Environment driven configuration
"""

import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_database_config() -> Dict[str, Any]:
    """Database connection settings for the configured dialect"""
    return {
        'host': os.getenv('MYSQL_HOST'),
        'port': int(os.getenv('MYSQL_PORT', 3306)),
        'user': os.getenv('MYSQL_USER'),
        'password': os.getenv('MYSQL_PASSWORD', ''),
        'database': os.getenv('MYSQL_DB')
    }


def get_db_type() -> str:
    return os.getenv('DB_TYPE', 'mysql')


def get_server_config() -> Dict[str, Any]:
    """HTTP server settings"""
    return {
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', 8080)),
        'log_level': os.getenv('LOG_LEVEL', 'INFO').upper()
    }
