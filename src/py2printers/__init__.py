# py2printers package
"""
Drivers for networked RFID label printers (SATO, Zebra, Avery-Dennison).

Example:
    >>> from py2printers import create_printer
    >>> printer = create_printer("SATO", "192.168.0.60", 1024)
    >>> epcs = printer.print(label, sku="SKU-1", expected_tag_count=10)
"""

__version__ = "0.1.0"

from .core.errors import (
    PrinterError,
    ConnectionError,
    CommandError,
    ProtocolError,
    InterruptedOperationError,
    ConfigurationError,
    UnsupportedVendorError,
    UnsupportedOperationError,
    ErrorCodes
)
from .models import DriverSettings, SessionState, PrintOutcome, PrintJobState
from .drivers import PrinterDriver, PrinterPool, VendorType, create_printer
from .drivers.sato import SatoPrinter
from .drivers.zebra import ZebraPrinter
from .drivers.avery_dennison import AveryDennisonPrinter
from .config import load_settings

__all__ = [
    "PrinterError",
    "ConnectionError",
    "CommandError",
    "ProtocolError",
    "InterruptedOperationError",
    "ConfigurationError",
    "UnsupportedVendorError",
    "UnsupportedOperationError",
    "ErrorCodes",
    "DriverSettings",
    "SessionState",
    "PrintOutcome",
    "PrintJobState",
    "PrinterDriver",
    "PrinterPool",
    "VendorType",
    "create_printer",
    "SatoPrinter",
    "ZebraPrinter",
    "AveryDennisonPrinter",
    "load_settings",
]
