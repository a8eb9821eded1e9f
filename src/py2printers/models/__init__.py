"""
Data models for py2printers.

This package contains the driver settings and the state of a print call.
"""

from .settings import DriverSettings
from .job import SessionState, PrintOutcome, PrintJobState

__all__ = [
    'DriverSettings',
    'SessionState',
    'PrintOutcome',
    'PrintJobState',
]
