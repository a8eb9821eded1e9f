"""
Avery-Dennison printer driver.
"""

from py2printers.drivers.avery_dennison.protocol import AveryDennisonProtocol
from py2printers.drivers.base import PrinterDriver


class AveryDennisonPrinter(PrinterDriver):
    """
    Driver for Avery-Dennison RFID printers.

    ``cancel()``, ``pause()`` and ``resume()`` raise
    UnsupportedOperationError.
    """

    def __init__(self, host: str, port: int, **kwargs):
        super().__init__(AveryDennisonProtocol(), host, port, **kwargs)
