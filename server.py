#!/usr/bin/env python3
"""
Entry point for the schema API server
"""

from schema_crawler.server import run

if __name__ == "__main__":
    run()
