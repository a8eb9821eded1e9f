"""SATO printer support."""

from py2printers.drivers.sato.enums import (
    BatteryStatus,
    ErrorNumber,
    MediaStatus,
    PrinterState,
    ReceiveBufferStatus,
    RibbonStatus,
)
from py2printers.drivers.sato.messages import PrinterStatus, TagRecord
from py2printers.drivers.sato.parser import parse
from py2printers.drivers.sato.printer import SatoPrinter
from py2printers.drivers.sato.protocol import SatoProtocol

__all__ = [
    'BatteryStatus',
    'ErrorNumber',
    'MediaStatus',
    'PrinterState',
    'ReceiveBufferStatus',
    'RibbonStatus',
    'PrinterStatus',
    'TagRecord',
    'parse',
    'SatoPrinter',
    'SatoProtocol',
]
