"""
Unified error handling framework for py2printers.

This module defines the standard error hierarchy used by the connection,
correlation and driver layers.

Error Code Ranges:
- 1000-1999: Connection errors
- 2000-2999: Command and protocol errors
- 5000-5999: State/Workflow errors (interruption)
- 6000-6999: Configuration errors (settings, vendor selection)
- 9000-9999: Unknown/System errors

Timeouts and aborted SKUs are not errors here. They surface as
``PrintOutcome.TIMED_OUT`` and ``PrintOutcome.SKIPPED`` on the job state.
"""

from typing import Optional, Dict, Any, List
from datetime import datetime
import traceback


class ErrorCodes:
    """Standard error codes for common error scenarios."""

    # Connection errors (1000-1999)
    CONNECTION_REFUSED = 1001
    CONNECTION_TIMEOUT = 1002
    CONNECTION_LOST = 1003
    SOCKET_ERROR = 1004
    NOT_CONNECTED = 1006

    # Command errors (2000-2999)
    PROTOCOL_ERROR = 2003
    COMMAND_NOT_ACKNOWLEDGED = 2006

    # Workflow errors (5000-5999)
    OPERATION_INTERRUPTED = 5006

    # Configuration errors (6000-6999)
    CONFIG_NOT_FOUND = 6001
    CONFIG_INVALID = 6002
    UNSUPPORTED_VENDOR = 6005

    # System errors (9000-9999)
    UNKNOWN_ERROR = 9000
    NOT_IMPLEMENTED = 9002


class PrinterError(Exception):
    """
    Base exception for all printer-driver errors.

    Provides structured error information with context tracking.
    """

    DEFAULT_CODE = ErrorCodes.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None
    ):
        """
        Initialize a printer error.

        Args:
            message: Human-readable error description
            error_code: Numeric error code for categorization
            context: Additional context information (WHERE)
            cause: Original exception if this wraps another error
            suggestions: List of possible solutions or next steps
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.DEFAULT_CODE
        self.context = context or {}
        self.cause = cause
        self.suggestions = suggestions or []
        self.timestamp = datetime.now()

        self.stack_trace = traceback.format_exc() if cause else None

        if cause:
            self.context['original_error'] = str(cause)
            self.context['original_type'] = type(cause).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'code': self.error_code,
            'context': self.context,
            'suggestions': self.suggestions,
            'timestamp': self.timestamp.isoformat(),
            'cause': str(self.cause) if self.cause else None,
            'stack_trace': self.stack_trace
        }

    def format_user_message(self) -> str:
        """Format error for user display (without technical details)."""
        msg = f"{self.message}"
        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"
        return msg

    def format_log_message(self) -> str:
        """Format error for logging (with all details)."""
        parts = [
            f"[{self.error_code}] {self.__class__.__name__}: {self.message}"
        ]

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        if self.stack_trace:
            parts.append(f"Stack trace:\n{self.stack_trace}")

        return " | ".join(parts)


class ConnectionError(PrinterError):
    """Socket open, close and I/O failures, tagged with the attempted operation."""
    DEFAULT_CODE = ErrorCodes.CONNECTION_REFUSED

    def __init__(self, message: str, operation: Optional[str] = None,
                 host: Optional[str] = None, port: Optional[int] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'CONNECTION'
        if operation:
            kwargs['context']['operation'] = operation
        if host is not None:
            kwargs['context']['host'] = host
        if port is not None:
            kwargs['context']['port'] = port
        super().__init__(message, **kwargs)


class CommandError(PrinterError):
    """A command was rejected or not acknowledged by the printer."""
    DEFAULT_CODE = ErrorCodes.COMMAND_NOT_ACKNOWLEDGED

    def __init__(self, message: str, command: Optional[str] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'COMMAND'
        if command is not None:
            kwargs['context']['command'] = command
        super().__init__(message, **kwargs)


class ProtocolError(PrinterError):
    """A frame could not be decoded. Parsers log these and keep reading."""
    DEFAULT_CODE = ErrorCodes.PROTOCOL_ERROR

    def __init__(self, message: str, raw: Optional[str] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'PROTOCOL'
        if raw is not None:
            kwargs['context']['raw'] = raw
        super().__init__(message, **kwargs)


class InterruptedOperationError(PrinterError):
    """A blocking wait was interrupted. Always propagated."""
    DEFAULT_CODE = ErrorCodes.OPERATION_INTERRUPTED

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'WORKFLOW'
        if operation:
            kwargs['context']['operation'] = operation
        super().__init__(message, **kwargs)


class ConfigurationError(PrinterError):
    """Errors related to driver settings and settings files."""
    DEFAULT_CODE = ErrorCodes.CONFIG_NOT_FOUND

    def __init__(self, message: str, setting_name: Optional[str] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'CONFIGURATION'
        if setting_name:
            kwargs['context']['setting'] = setting_name
        super().__init__(message, **kwargs)


class UnsupportedVendorError(ConfigurationError):
    """The printer factory was asked for a vendor it does not know."""
    DEFAULT_CODE = ErrorCodes.UNSUPPORTED_VENDOR

    def __init__(self, vendor: Any, **kwargs):
        kwargs.setdefault('suggestions', [
            "Use one of: SATO, ZEBRA, AVERY_DENNISON"
        ])
        super().__init__(f"Unsupported printer type: {vendor}",
                         setting_name='vendor', **kwargs)
        self.context['vendor'] = str(vendor)


class UnsupportedOperationError(PrinterError):
    """The printer protocol has no equivalent for the requested operation."""
    DEFAULT_CODE = ErrorCodes.NOT_IMPLEMENTED

    def __init__(self, message: str, vendor: Optional[str] = None, **kwargs):
        if kwargs.get('context') is None:
            kwargs['context'] = {}
        kwargs['context']['category'] = 'SYSTEM'
        if vendor:
            kwargs['context']['vendor'] = vendor
        super().__init__(message, **kwargs)


def wrap_external_error(e: Exception, message: str, error_class=PrinterError,
                        error_code: Optional[int] = None, **context) -> PrinterError:
    """
    Wrap an external exception in a PrinterError.

    Args:
        e: The original exception
        message: Context-specific error message
        error_class: The PrinterError subclass to use
        error_code: Error code (default: the class default)
        **context: Additional context information

    Returns:
        A PrinterError instance wrapping the original exception
    """
    return error_class(
        message=message,
        error_code=error_code,
        cause=e,
        context=context
    )
