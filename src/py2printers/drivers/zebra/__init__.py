"""Zebra printer support."""

from py2printers.drivers.zebra.enums import RFIDOperation
from py2printers.drivers.zebra.messages import RFIDLogBlock, RFIDLogEntry, RFIDStatus
from py2printers.drivers.zebra.parser import ZebraLogParser, parse_line
from py2printers.drivers.zebra.printer import ZebraPrinter
from py2printers.drivers.zebra.protocol import ZebraProtocol

__all__ = [
    'RFIDOperation',
    'RFIDLogBlock',
    'RFIDLogEntry',
    'RFIDStatus',
    'ZebraLogParser',
    'parse_line',
    'ZebraPrinter',
    'ZebraProtocol',
]
