"""
Main CLI application for vappnet.

This module provides the main Typer application and command group registration.
"""

import sys
import logging

import typer

from vappnet.core.logging_utils import configure_logging
from .common import CommonOptions

# Create main Typer app with auto-completion support
app = typer.Typer(
    help="vCloud Director vApp network configuration CLI",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Create command groups with auto-completion
network_app = typer.Typer(
    help="vApp network configuration commands",
    add_completion=True,
    no_args_is_help=True,
)

app.add_typer(network_app, name="network")

# Get logger
logger = logging.getLogger("vappnet")

# Apply common options to the app
CommonOptions.apply_to_app(app)

# One console handler for the vappnet logger; the option callbacks adjust it
configure_logging(level="info")

# ===== Exception Handler =====
def _global_exception_handler(exc_type, exc_value, exc_traceback):
    """
    Global exception handler for unhandled exceptions.
    Provides more user-friendly error messages for common issues.
    """
    from vappnet import (
        VAppNetError, ConfigError, ValidationError, NetworkNotFoundError,
        StatePreconditionError, TransportError
    )

    if isinstance(exc_value, VAppNetError):
        if isinstance(exc_value, NetworkNotFoundError):
            logger.error(f"Network not found: {exc_value}")
        elif isinstance(exc_value, StatePreconditionError):
            logger.error(f"Network state error: {exc_value}")
        elif isinstance(exc_value, ValidationError):
            logger.error(f"Validation error: {exc_value}")
        elif isinstance(exc_value, TransportError):
            logger.error(f"API request failed: {exc_value}")
        elif isinstance(exc_value, ConfigError):
            logger.error(f"Configuration error: {exc_value}")
        else:
            logger.error(f"{exc_type.__name__}: {exc_value}")
        sys.exit(1)
    else:
        logger.error(f"Unexpected error: {exc_type.__name__}: {exc_value}")
        if logger.getEffectiveLevel() <= logging.DEBUG:
            import traceback
            logger.debug("Traceback:")
            for line in traceback.format_tb(exc_traceback):
                logger.debug(line.rstrip())
        sys.exit(1)

# Set up the global exception handler
sys.excepthook = _global_exception_handler
