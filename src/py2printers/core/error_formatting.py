"""
Error formatting and logging utilities for py2printers.

Provides consistent error formatting for the command line front end and
for the best-effort paths in the drivers that log failures instead of
raising them.
"""

import json
import logging
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

from py2printers.core.errors import PrinterError


class ErrorFormatter:
    """
    Formats errors for consistent presentation.

    Handles both PrinterError instances and standard Python exceptions.
    """

    COLORS = {
        'RED': '\033[91m',
        'YELLOW': '\033[93m',
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = False):
        """
        Initialize formatter.

        Args:
            use_colors: Whether to use ANSI colors in terminal output
        """
        self.use_colors = use_colors

    def format_for_user(self, error: Exception) -> str:
        """
        Format error for end-user display.

        Args:
            error: The error to format

        Returns:
            User-friendly error message
        """
        if isinstance(error, PrinterError):
            text = error.format_user_message()
        else:
            text = f"An error occurred: {error}"
        return self.colorize(text, 'RED')

    def format_for_log(self, error: Exception, include_trace: bool = True) -> str:
        """
        Format error for technical logging.

        Args:
            error: The error to format
            include_trace: Whether to include stack trace

        Returns:
            Detailed error information for logging
        """
        if isinstance(error, PrinterError):
            return error.format_log_message()
        msg = f"{error.__class__.__name__}: {error}"
        if include_trace:
            msg += f"\nStack trace:\n{traceback.format_exc()}"
        return msg

    def format_for_json(self, error: Exception) -> str:
        """Format error as JSON for structured logging."""
        if isinstance(error, PrinterError):
            data = error.to_dict()
        else:
            data = {
                'error_type': error.__class__.__name__,
                'message': str(error),
                'timestamp': datetime.now().isoformat()
            }
        return json.dumps(data, indent=2, default=str)

    def get_severity(self, error: Exception) -> str:
        """
        Determine error severity from its code.

        Returns:
            'critical' for connection errors, 'warning' for configuration
            errors and 'error' for everything else
        """
        code = getattr(error, 'error_code', 9000)
        if code < 2000:
            return 'critical'
        elif 6000 <= code < 7000:
            return 'warning'
        return 'error'

    def colorize(self, text: str, color: str) -> str:
        if self.use_colors and color in self.COLORS:
            return f"{self.COLORS[color]}{text}{self.COLORS['RESET']}"
        return text


def log_error(
    logger: logging.Logger,
    error: Exception,
    message: Optional[str] = None,
    level: int = logging.ERROR,
    extra_context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an error on the given logger without raising it.

    The short form goes out at ``level``; the technical form (context,
    cause, stack trace) goes out at DEBUG.

    Args:
        logger: Logger to write to
        error: The error to log
        message: Optional prefix describing what was being attempted
        level: Logging level for the short form
        extra_context: Additional context for the debug record
    """
    formatter = ErrorFormatter()
    prefix = f"{message}: " if message else ""
    if isinstance(error, PrinterError):
        logger.log(level, f"{prefix}{error.message}")
        logger.debug(formatter.format_for_log(error))
    else:
        logger.log(level, f"{prefix}{error.__class__.__name__}: {error}")
    if extra_context:
        logger.debug(f"Error context: {json.dumps(extra_context, default=str)}")


def format_error(error: Exception, format_type: str = 'user') -> str:
    """
    Convenience function to format an error.

    Args:
        error: The error to format
        format_type: One of 'user', 'log' or 'json'

    Returns:
        Formatted error based on type
    """
    formatter = ErrorFormatter()

    if format_type == 'user':
        return formatter.format_for_user(error)
    elif format_type == 'log':
        return formatter.format_for_log(error)
    elif format_type == 'json':
        return formatter.format_for_json(error)
    else:
        raise ValueError(f"Unknown format type: {format_type}")
