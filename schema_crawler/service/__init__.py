"""
Schema crawling services
"""

from .crawler_service import SchemaCrawlerService, reconcile_primary_keys

__all__ = [
    'SchemaCrawlerService',
    'reconcile_primary_keys'
]
