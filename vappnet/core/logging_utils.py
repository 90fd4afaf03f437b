"""
Logging utilities for vappnet.

This module provides functions for configuring and using the logging system.
"""

import logging
import sys
import os
from typing import Optional

import typer

# Define log levels
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL
}

# Create a global logger
logger = logging.getLogger("vappnet")

def configure_logging(
    level: str = "info",
    log_file: Optional[str] = None,
    quiet: bool = False,
    verbose: bool = False,
    json_format: bool = False
) -> None:
    """
    Configure the global logger

    Args:
        level: Log level (debug, info, warning, error, critical)
        log_file: Path to log file (optional)
        quiet: Suppress console output if True
        verbose: Enable verbose output if True
        json_format: Use JSON formatting for structured logging
    """
    if verbose:
        level = "debug"
    elif quiet and level == "info":  # Only override info level with quiet
        level = "warning"

    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if json_format:
        import json

        class JsonFormatter(logging.Formatter):
            def format(self, record):
                log_data = {
                    'timestamp': self.formatTime(record),
                    'level': record.levelname,
                    'message': record.getMessage(),
                    'module': record.module,
                    'function': record.funcName,
                    'line': record.lineno
                }

                if record.exc_info:
                    import traceback
                    log_data['exception'] = {
                        'type': record.exc_info[0].__name__,
                        'value': str(record.exc_info[1]),
                        'traceback': traceback.format_tb(record.exc_info[2])
                    }

                if hasattr(record, 'extra_data'):
                    log_data.update(record.extra_data)

                return json.dumps(log_data)

        console_formatter = JsonFormatter()
        file_formatter = JsonFormatter()
    else:
        console_format = '%(levelname)s: %(message)s'
        file_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        if verbose:
            console_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        console_formatter = logging.Formatter(console_format)
        file_formatter = logging.Formatter(file_format)

    if not quiet:
        # Diagnostics go to stderr so command output on stdout stays parseable
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    if log_file:
        dir_path = os.path.dirname(os.path.abspath(log_file))
        if dir_path and not os.path.exists(dir_path):
            os.makedirs(dir_path, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)

    logger.debug(f"Logging configured: level={level}, log_file={log_file}, quiet={quiet}, verbose={verbose}, json_format={json_format}")

def log_structured(
    message: str,
    level: str = "info",
    **kwargs
) -> None:
    """
    Log a message with structured additional data.

    The data is attached to the record as ``extra_data`` (picked up by the JSON
    formatter) and appended to the message as ``key=value`` pairs for the plain
    formatters.

    Args:
        message: Log message
        level: Log level (debug, info, warning, error, critical)
        **kwargs: Additional structured data to include in the log
    """
    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)

    if kwargs:
        data_str = " ".join(f"{k}={v}" for k, v in kwargs.items())
        message = f"{message} - {data_str}"

    logger.log(log_level, message, extra={'extra_data': kwargs})

# Option callbacks for use with Typer CLI. They only validate; the app
# callback applies the resolved options with configure_logging.
def log_level_callback(value: Optional[str]) -> Optional[str]:
    """Typer callback to validate the log level"""
    if value is None:
        return value

    value = value.lower()
    if value not in LOG_LEVELS:
        valid_levels = ", ".join(LOG_LEVELS.keys())
        raise typer.BadParameter(f"Log level must be one of: {valid_levels}")
    return value

def log_file_callback(value: Optional[str]) -> Optional[str]:
    """Typer callback to check the log file can be written"""
    if value:
        try:
            dir_path = os.path.dirname(os.path.abspath(value))
            if dir_path:
                os.makedirs(dir_path, exist_ok=True)
            with open(value, "a"):
                pass
        except OSError as e:
            raise typer.BadParameter(f"Cannot write to log file: {e}")

    return value
