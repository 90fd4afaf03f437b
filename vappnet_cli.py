#!/usr/bin/env python3
"""
vappnet CLI entry point.

This script serves as the entry point for the vappnet command-line interface.
"""

from vappnet.cli import app

if __name__ == "__main__":
    app()
