#!/usr/bin/env python3
"""
Main entry point for the interactive schema browser
"""

from schema_crawler.cli.main_cli import main

if __name__ == "__main__":
    main()
