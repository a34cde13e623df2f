"""
Database schema crawler exposing catalog metadata over HTTP
"""

__version__ = "0.1.0"
