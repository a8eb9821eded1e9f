"""Avery-Dennison printer support."""

from py2printers.drivers.avery_dennison.printer import AveryDennisonPrinter
from py2printers.drivers.avery_dennison.protocol import AveryDennisonProtocol, EpcReport, parse

__all__ = ['AveryDennisonPrinter', 'AveryDennisonProtocol', 'EpcReport', 'parse']
