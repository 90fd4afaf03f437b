"""
CLI package for vappnet.

This module organizes the command-line interface for vappnet into a modular structure.
"""

from .app import app

# Import commands to register them with the CLI
# This must be after importing app to avoid circular imports
from .commands import network_commands
