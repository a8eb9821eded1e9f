"""Printer drivers."""

from py2printers.drivers.base import PrinterDriver, VendorProtocol, normalize_line_endings
from py2printers.drivers.pool import PrinterPool, VendorType, create_printer

__all__ = [
    'PrinterDriver',
    'VendorProtocol',
    'normalize_line_endings',
    'PrinterPool',
    'VendorType',
    'create_printer',
]
