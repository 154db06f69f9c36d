#!/usr/bin/env python3
"""
ListingRadar Entry Point
"""
from listing_radar.cli import cli

if __name__ == '__main__':
    cli()
