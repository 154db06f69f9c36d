#!/usr/bin/env python3
"""
ListingRadar CLI entry point
"""
from .cli import cli

if __name__ == '__main__':
    cli()
