#!/usr/bin/env python3
"""
cocomerge - COCO dataset merging toolkit

Main entry point for the command line interface.
"""

from cocomerge.cli import app

if __name__ == "__main__":
    app()
