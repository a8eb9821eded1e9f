"""
Zebra printer driver.
"""

from typing import Optional

from py2printers.core.messages import first_of
from py2printers.drivers.base import PrinterDriver
from py2printers.drivers.zebra.messages import RFIDLogBlock
from py2printers.drivers.zebra.protocol import REQUEST_LOG, ZebraProtocol, block_received
from py2printers.models.settings import DriverSettings


class ZebraPrinter(PrinterDriver):
    """Driver for Zebra RFID printers."""

    def __init__(self, host: str, port: int, settings: Optional[DriverSettings] = None, **kwargs):
        charset = settings.charset if settings else 'utf-8'
        super().__init__(ZebraProtocol(charset), host, port, settings=settings, **kwargs)

    def request_log(self) -> Optional[RFIDLogBlock]:
        """Fetch the RFID log once. None if no complete block arrived."""
        return first_of(self.send_command(REQUEST_LOG, done=block_received), RFIDLogBlock)
